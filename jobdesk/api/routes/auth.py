"""
Authentication API Endpoints
Login, admin-side registration and the caller's own profile
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jobdesk.api.deps import get_current_user, get_settings
from jobdesk.core.config import Settings
from jobdesk.core.database import get_db
from jobdesk.core.permissions import Capability, permission_flags
from jobdesk.core.security import TokenClaims
from jobdesk.schemas.user import (
    CurrentUserResponse, LoginRequest, LoginResponse, UserCreate, UserCreatedResponse
)
from jobdesk.services import users as user_service

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Exchange email and password for a bearer token"""
    return user_service.authenticate(db, credentials.email, credentials.password, settings)


@router.post("/register", response_model=UserCreatedResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    current_user: TokenClaims = Depends(get_current_user),
):
    """
    Register a new account.
    Only user managers may register accounts; they may also pick the role.
    """
    user_service.require_capability(current_user, Capability.MANAGE_USERS)
    user = user_service.register_user(
        db,
        user_data.username,
        user_data.email,
        user_data.password,
        user_data.role,
        current_user,
        settings,
    )
    return {"success": True, "data": user}


@router.get("/me", response_model=CurrentUserResponse)
def me(
    db: Session = Depends(get_db),
    current_user: TokenClaims = Depends(get_current_user),
):
    user = user_service.get_user(db, current_user.id)
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "role": user.role,
        "permissions": permission_flags(user.role),
    }

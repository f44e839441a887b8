"""
User Administration API Endpoints
IT Admin dashboard uses these to manage accounts
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from jobdesk.api.deps import get_current_user, get_settings
from jobdesk.core.config import Settings
from jobdesk.core.database import get_db
from jobdesk.core.security import TokenClaims
from jobdesk.schemas.user import (
    UserCreate, UserCreatedResponse, UserDeletedResponse, UserListResponse
)
from jobdesk.services import users as user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=UserListResponse)
def list_users(
    db: Session = Depends(get_db),
    current_user: TokenClaims = Depends(get_current_user),
):
    return {"success": True, "data": user_service.list_users(db, current_user)}


@router.post("", response_model=UserCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    current_user: TokenClaims = Depends(get_current_user),
):
    """Create an account with an explicit role"""
    user = user_service.create_user(
        db,
        user_data.username,
        user_data.email,
        user_data.password,
        user_data.role,
        current_user,
        settings,
    )
    return {"success": True, "data": user}


@router.delete("/{user_id}", response_model=UserDeletedResponse)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: TokenClaims = Depends(get_current_user),
):
    """Delete an account; IT Admin accounts are protected"""
    deleted = user_service.delete_user(db, user_id, current_user)
    return {"success": True, "message": "User deleted successfully", "deletedUser": deleted}

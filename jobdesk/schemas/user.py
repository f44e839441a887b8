"""
Pydantic schemas for authentication and user administration
"""
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Dict, List, Optional
from datetime import datetime


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    id: str
    username: str
    email: str
    role: str
    token: str


class UserCreate(BaseModel):
    """Admin-side user creation; role is validated by the service"""
    username: str = Field(..., max_length=100)
    email: EmailStr
    password: str
    role: Optional[str] = None

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required")
        return v

    @field_validator("email")
    @classmethod
    def email_lowercase(cls, v: str) -> str:
        # users.email is String(200)
        if len(v) > 200:
            raise ValueError("Email must be at most 200 characters")
        return v.lower()

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    role: str
    createdAt: Optional[datetime] = None


class UserListResponse(BaseModel):
    success: bool = True
    data: List[UserResponse]


class UserCreatedResponse(BaseModel):
    success: bool = True
    data: UserResponse


class CurrentUserResponse(BaseModel):
    id: str
    username: str
    email: str
    role: str
    permissions: Dict[str, bool]


class DeletedUser(BaseModel):
    id: str
    username: str
    email: str


class UserDeletedResponse(BaseModel):
    success: bool = True
    message: str = "User deleted successfully"
    deletedUser: DeletedUser

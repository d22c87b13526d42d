from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime


class BaseUserSchema(BaseModel):
    """Base schema for user data"""
    username: str = Field(..., min_length=3, max_length=150)
    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)


class UserCreate(BaseUserSchema):
    """Schema for registering a new user"""
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        if any(c.isspace() for c in v):
            raise ValueError('Username must not contain whitespace')
        return v


class UserResponse(BaseUserSchema):
    """Schema for user response data"""
    id: int
    is_admin: bool
    is_active: bool
    created_at: datetime
    last_login_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    """Schema for login request"""
    username: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)


class TokenResponse(BaseModel):
    """Schema for token response"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class SuccessResponse(BaseModel):
    message: str

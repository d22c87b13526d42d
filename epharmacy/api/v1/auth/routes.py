from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from epharmacy.api import deps
from epharmacy.domain.auth.models import User
from epharmacy.domain.auth.service import AuthenticationService, UserService
from epharmacy.api.v1.auth.schemas import (
    LoginRequest,
    TokenResponse,
    UserCreate,
    UserResponse,
    SuccessResponse
)
from epharmacy.infrastructure.database import get_db

router = APIRouter(prefix="/auth", tags=["Authentication"])
users_router = APIRouter(prefix="/users", tags=["Users"])


def _client_info(request: Request) -> dict:
    return {
        "ip_address": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent")
    }


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """Register a new account and log it in"""
    auth_service = AuthenticationService(db)
    return await auth_service.register_user(user_data, **_client_info(request))


@router.post("/login", response_model=TokenResponse, status_code=status.HTTP_200_OK)
async def login(
    login_data: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """Authenticate user and return a token"""
    auth_service = AuthenticationService(db)
    return await auth_service.authenticate_user(login_data, **_client_info(request))


@router.post("/logout", response_model=SuccessResponse, status_code=status.HTTP_200_OK)
async def logout(
    token: str = Depends(deps.get_current_token),
    db: AsyncSession = Depends(get_db)
):
    """Logout and revoke current session"""
    await AuthenticationService(db).logout_user(token)
    return SuccessResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse, status_code=status.HTTP_200_OK)
async def read_current_user(current_user: User = Depends(deps.get_current_user)):
    """Get current user profile"""
    return UserResponse.model_validate(current_user)


@users_router.get("/{user_id}", response_model=UserResponse)
async def read_user(
    user_id: int,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(get_db)
):
    user = await UserService(db).get_user_for(user_id, current_user)
    return UserResponse.model_validate(user)

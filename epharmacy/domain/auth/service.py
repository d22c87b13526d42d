from typing import Optional
from datetime import datetime

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from epharmacy.domain.auth.models import User, UserSession
from epharmacy.domain.auth.repository import UserRepository, UserSessionRepository
from epharmacy.core.security import (
    access_token_expiry,
    create_access_token,
    new_token_id,
    verify_token
)
from epharmacy.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError
)
from epharmacy.api.v1.auth.schemas import (
    UserCreate,
    LoginRequest,
    TokenResponse,
    UserResponse
)
from epharmacy.core.config import settings


class AuthenticationService:
    """Service layer for authentication operations"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)
        self.session_repo = UserSessionRepository(db)

    async def register_user(
        self,
        user_data: UserCreate,
        ip_address: str = None,
        user_agent: str = None
    ) -> TokenResponse:
        """Register a new user and open a session for them"""
        existing_user = await self.user_repo.get_by_username(user_data.username)
        if existing_user:
            raise ConflictError("Username already taken")

        existing_email = await self.user_repo.get_by_email(user_data.email)
        if existing_email:
            raise ConflictError("Email already in use")

        user = await self.user_repo.create(user_data.model_dump())
        logger.info(f"Registered user {user.id} ({user.username})")

        return await self._issue_token(user, ip_address, user_agent)

    async def authenticate_user(
        self,
        login_data: LoginRequest,
        ip_address: str = None,
        user_agent: str = None
    ) -> TokenResponse:
        """Authenticate user and return an access token"""
        user = await self.user_repo.get_by_username(login_data.username)

        if not user or not user.verify_password(login_data.password):
            logger.warning(f"Failed login attempt for username {login_data.username!r}")
            raise AuthenticationError("Invalid credentials")

        if not user.is_active:
            raise AuthorizationError("Account is not active")

        await self.user_repo.update_last_login(user.id)

        return await self._issue_token(user, ip_address, user_agent)

    async def resolve_session(self, token: str) -> User:
        """Return the user behind a bearer token, or raise AuthenticationError"""
        payload = verify_token(token, "access")
        if not payload or not payload.get("jti"):
            raise AuthenticationError("Invalid or expired token")

        session = await self.session_repo.get_by_token_id(payload["jti"])
        if not session or not session.is_active or session.is_expired():
            raise AuthenticationError("Session has ended, please login to continue")

        user = await self.user_repo.get_by_id(session.user_id)
        if not user or not user.is_active:
            raise AuthenticationError("User not found or inactive")

        return user

    async def logout_user(self, access_token: str) -> None:
        """Logout user by revoking session"""
        payload = verify_token(access_token, "access")
        if not payload or not payload.get("jti"):
            raise AuthenticationError("Invalid or expired token")

        session = await self.session_repo.get_by_token_id(payload["jti"])
        if not session or not session.is_active:
            raise AuthenticationError("Session has ended, please login to continue")

        await self.session_repo.revoke(session.id)
        logger.info(f"Session {session.id} revoked for user {session.user_id}")

    async def _issue_token(
        self,
        user: User,
        ip_address: Optional[str],
        user_agent: Optional[str]
    ) -> TokenResponse:
        token_id = new_token_id()
        expires_at = access_token_expiry()

        access_token = create_access_token(str(user.id), {
            "jti": token_id,
            "username": user.username,
            "is_admin": user.is_admin
        }, expires_at=expires_at)

        await self._create_user_session(user.id, token_id, expires_at, ip_address, user_agent)

        return TokenResponse(
            access_token=access_token,
            token_type="bearer",
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=UserResponse.model_validate(user)
        )

    async def _create_user_session(
        self,
        user_id: int,
        token_id: str,
        expires_at: datetime,
        ip_address: str = None,
        user_agent: str = None
    ) -> UserSession:
        """Create a new user session"""
        session_data = {
            "user_id": user_id,
            "token_id": token_id,
            "ip_address": ip_address,
            "user_agent": user_agent,
            "expires_at": expires_at
        }

        return await self.session_repo.create(session_data)


class UserService:
    """Service layer for user lookups"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)

    async def get_user_for(self, user_id: int, requester: User) -> User:
        """Users may read their own profile; admins may read any"""
        if requester.id != user_id and not requester.is_admin:
            raise AuthorizationError("Forbidden: You cannot access this user")

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

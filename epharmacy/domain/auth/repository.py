from typing import Optional
from datetime import datetime

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from epharmacy.core.exceptions import ConflictError
from epharmacy.domain.auth.models import User, UserSession


class UserRepository:
    """Repository for user data access operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, user_data: dict) -> User:
        """Create a new user; `password` is hashed, never stored"""
        password = user_data.pop("password")
        user = User(**user_data)
        user.set_password(password)

        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # a concurrent registration took the username or email
            await self.db.rollback()
            raise ConflictError("Username or email already in use")
        await self.db.refresh(user)

        return user

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID"""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username, case-insensitively"""
        result = await self.db.execute(
            select(User).where(func.lower(User.username) == username.lower())
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email, case-insensitively"""
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def update_last_login(self, user_id: int) -> None:
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(last_login_at=datetime.utcnow())
        )
        await self.db.commit()


class UserSessionRepository:
    """Repository for user session operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, session_data: dict) -> UserSession:
        """Create a new user session"""
        session = UserSession(**session_data)
        self.db.add(session)
        await self.db.commit()
        await self.db.refresh(session)
        return session

    async def get_by_token_id(self, token_id: str) -> Optional[UserSession]:
        """Get session by the token's jti claim"""
        result = await self.db.execute(
            select(UserSession).where(UserSession.token_id == token_id)
        )
        return result.scalar_one_or_none()

    async def revoke(self, session_id: int) -> None:
        """Revoke a session"""
        await self.db.execute(
            update(UserSession)
            .where(UserSession.id == session_id)
            .values(is_active=False, revoked_at=datetime.utcnow())
        )
        await self.db.commit()

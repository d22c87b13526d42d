from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from epharmacy.core.exceptions import AuthenticationError, AuthorizationError
from epharmacy.domain.auth.models import User
from epharmacy.domain.auth.service import AuthenticationService
from epharmacy.infrastructure.database import get_db

reusable_bearer = HTTPBearer(auto_error=False)


async def get_current_token(
    credentials: HTTPAuthorizationCredentials = Depends(reusable_bearer),
) -> str:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Unauthorized: Please login to continue")
    return credentials.credentials


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token: str = Depends(get_current_token),
) -> User:
    return await AuthenticationService(db).resolve_session(token)


async def get_current_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    if not current_user.is_admin:
        raise AuthorizationError("Administrator privileges required")
    return current_user

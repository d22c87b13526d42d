from datetime import datetime, timedelta
from typing import Optional, Dict, Any
import uuid

import jwt
from passlib.context import CryptContext

from epharmacy.core.config import settings

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate password hash"""
    return pwd_context.hash(password)


def new_token_id() -> str:
    return uuid.uuid4().hex


def access_token_expiry() -> datetime:
    return datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def create_access_token(subject: str, data: Dict[str, Any], expires_at: Optional[datetime] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()
    to_encode.update({
        "exp": expires_at or access_token_expiry(),
        "iat": datetime.utcnow(),
        "sub": subject,
        "token_type": "access"
    })
    to_encode.setdefault("jti", new_token_id())
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and validate JWT token"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError:
        return None


def verify_token(token: str, token_type: str = "access") -> Optional[Dict[str, Any]]:
    """Verify token and check token type"""
    payload = decode_token(token)
    if not payload:
        return None

    if payload.get("token_type") != token_type:
        return None

    return payload

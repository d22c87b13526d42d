from datetime import datetime

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from epharmacy.infrastructure.database import Base


class User(Base):
    """Customer account"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)

    is_admin = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    last_login_at = Column(DateTime)

    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")

    def set_password(self, password: str):
        """Set password hash"""
        from epharmacy.core.security import get_password_hash
        self.password_hash = get_password_hash(password)

    def verify_password(self, password: str) -> bool:
        """Verify password"""
        from epharmacy.core.security import verify_password
        return verify_password(password, self.password_hash)


class UserSession(Base):
    """Login session; a bearer token is honoured only while its session is active"""
    __tablename__ = "user_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user = relationship("User", back_populates="sessions")

    token_id = Column(String(64), unique=True, nullable=False, index=True)

    ip_address = Column(String(45))
    user_agent = Column(String(500))

    is_active = Column(Boolean, default=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=func.now())
    revoked_at = Column(DateTime)

    def is_expired(self) -> bool:
        """Check if session is expired"""
        return datetime.utcnow() > self.expires_at

    def revoke(self):
        """Revoke the session"""
        self.is_active = False
        self.revoked_at = datetime.utcnow()

"""User model."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import validates

from staff_audit.database import Base


class User(Base):
    """Community member; staff are administrators or moderators."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(60), unique=True, nullable=False)
    username_lower = Column(String(60), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=True)
    hashed_password = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    is_moderator = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @validates("username")
    def _sync_username_lower(self, key, value):
        self.username_lower = value.lower() if value is not None else None
        return value

    @property
    def is_staff(self) -> bool:
        return bool(self.is_admin or self.is_moderator)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"

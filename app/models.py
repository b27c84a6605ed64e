"""
Database models for the application.
All SQLAlchemy models are defined here.
"""

from sqlalchemy import (
    Column,
    String,
    DateTime,
    Boolean,
    ForeignKey,
    Index,
)
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Profile(Base):
    """Local account resolved from a social login (or created on first login)."""

    __tablename__ = "profiles"

    id = Column(String, primary_key=True)
    email = Column(String, unique=True, nullable=False)
    fullname = Column(String, nullable=False)

    # Backend that registered the profile (e.g. "github")
    auth_backend = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_blocked = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    sessions = relationship(
        "HttpSession", back_populates="profile", cascade="all, delete-orphan"
    )


class HttpSession(Base):
    __tablename__ = "http_sessions"

    id = Column(String, primary_key=True)  # Opaque value stored in the session cookie
    profile_id = Column(String, ForeignKey("profiles.id"), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    profile = relationship("Profile", back_populates="sessions")

    __table_args__ = (Index("idx_http_sessions_profile_id", "profile_id"),)

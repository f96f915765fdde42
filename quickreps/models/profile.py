"""Profile model - account, credentials and preferred timezone."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quickreps.db.base import Base


class Profile(Base):
    """One user. Timezone decides where "today" starts for the summary."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="Europe/Moscow")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    exercises: Mapped[list["Exercise"]] = relationship(
        "Exercise", back_populates="profile", cascade="all, delete-orphan"
    )
    tokens: Mapped[list["AccessToken"]] = relationship(
        "AccessToken", back_populates="profile", cascade="all, delete-orphan"
    )


class AccessToken(Base):
    """Opaque bearer token issued on login."""

    __tablename__ = "access_tokens"
    __table_args__ = (Index("ix_access_tokens_profile_id", "profile_id"),)

    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    profile_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    profile: Mapped["Profile"] = relationship("Profile", back_populates="tokens")

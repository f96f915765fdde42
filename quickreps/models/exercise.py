"""Exercise model - a user's trackable exercise with a daily goal."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quickreps.db.base import Base


class Exercise(Base):
    """Exercise owned by one profile; `type` is its display name (e.g. pullups)."""

    __tablename__ = "exercises"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    profile_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    goal: Mapped[int] = mapped_column(Integer, nullable=False, default=100)  # Daily reps goal
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    profile: Mapped["Profile"] = relationship("Profile", back_populates="exercises")
    sets: Mapped[list["SetRecord"]] = relationship(
        "SetRecord", back_populates="exercise", cascade="all, delete-orphan"
    )

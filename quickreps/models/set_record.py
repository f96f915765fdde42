"""SetRecord model - one logged set of repetitions."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quickreps.core.enums import SetSource
from quickreps.db.base import Base


class SetRecord(Base):
    """Reps logged against an exercise. Negative reps correct an earlier over-count.
    Deleted sets keep their row with deleted_at set and drop out of every query."""

    __tablename__ = "sets"
    __table_args__ = (
        Index("ix_sets_exercise_id_created_at", "exercise_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    exercise_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False
    )
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    note: Mapped[str | None] = mapped_column(String(500), nullable=True)
    source: Mapped[SetSource] = mapped_column(
        Enum(SetSource), default=SetSource.QUICKBUTTON, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    exercise: Mapped["Exercise"] = relationship("Exercise", back_populates="sets")

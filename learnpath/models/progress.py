"""Denormalized roadmap progress model."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from learnpath.core.database import Base


class Progress(Base):
    """Completed vs total step counts for one roadmap.

    Always recomputed from the roadmap's steps, never incremented.
    """

    __tablename__ = "progress"
    __table_args__ = (UniqueConstraint("user_id", "roadmap_id", name="unique_user_roadmap_progress"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"))
    roadmap_id: Mapped[int] = mapped_column(ForeignKey("roadmaps.id"), index=True)

    total_steps: Mapped[int] = mapped_column(Integer, default=0)
    completed_steps: Mapped[int] = mapped_column(Integer, default=0)

    # Latest generated mentor feedback and study plan for this roadmap
    feedback: Mapped[str | None] = mapped_column(Text, default=None)
    study_plan: Mapped[dict | None] = mapped_column(JSON, default=None)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

"""Roadmap and step models for learning path persistence."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from learnpath.core.database import Base


def _step_id() -> str:
    return uuid.uuid4().hex


class Roadmap(Base):
    __tablename__ = "roadmaps"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), index=True)

    career_path: Mapped[str] = mapped_column(String)
    overview: Mapped[str] = mapped_column(Text, default="")
    estimated_timeframe: Mapped[str] = mapped_column(String, default="")
    weekly_schedule: Mapped[dict[str, str]] = mapped_column(JSON, default=dict)

    # Position in the user's roadmap history, starting at 1
    order: Mapped[int] = mapped_column("order", Integer, default=1)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, default=None)

    steps: Mapped[list["Step"]] = relationship(
        back_populates="roadmap",
        cascade="all, delete-orphan",
        order_by="Step.position",
        lazy="selectin",
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class Step(Base):
    """One phase of a roadmap.

    ``progress`` is 100 exactly when ``completed`` is set; the service layer
    keeps the two in step on every mutation.
    """

    __tablename__ = "steps"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_step_id)
    roadmap_id: Mapped[int] = mapped_column(ForeignKey("roadmaps.id"), index=True)
    position: Mapped[int] = mapped_column(Integer, default=0)

    title: Mapped[str] = mapped_column(String)
    description: Mapped[str] = mapped_column(Text, default="")
    duration: Mapped[str] = mapped_column(String, default="")
    skills: Mapped[list[str]] = mapped_column(JSON, default=list)
    resources: Mapped[list[dict[str, object]]] = mapped_column(JSON, default=list)
    milestones: Mapped[list[str]] = mapped_column(JSON, default=list)

    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    progress: Mapped[int] = mapped_column(Integer, default=0)

    roadmap: Mapped[Roadmap] = relationship(back_populates="steps")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

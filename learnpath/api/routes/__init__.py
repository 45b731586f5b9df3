"""API routes."""

from learnpath.api.routes import (
    chat,
    notifications,
    profile,
    progress,
    roadmaps,
    study_plan,
    users,
)

__all__ = ["chat", "notifications", "profile", "progress", "roadmaps", "study_plan", "users"]

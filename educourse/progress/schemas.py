"""Pydantic schemas for student progress tracking.

Request and response models for:
- Lesson completion
- Progress queries (per user, course, module and overall)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import LessonProgress, ensure_utc_aware


# ==============================================================================
# Lesson Progress Schemas
# ==============================================================================


class LessonProgressResponse(BaseModel):
    """Stored progress row for one lesson."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    user_id: str = Field(alias="userId")
    lesson_id: int = Field(alias="lessonId")
    completed_at: datetime | None = Field(None, alias="completedAt")

    @field_validator("completed_at")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc_aware(value)

    @classmethod
    def from_entity(cls, entity: LessonProgress) -> "LessonProgressResponse":
        """Create response from entity."""
        return cls(
            id=entity.id,
            user_id=entity.user_id,
            lesson_id=entity.lesson_id,
            completed_at=entity.completed_at,
        )


class UserProgressResponse(BaseModel):
    """All progress rows of a user plus the ids of completed lessons."""

    model_config = ConfigDict(populate_by_name=True)

    progress: list[LessonProgressResponse] = []
    completed_lessons: list[int] = Field([], alias="completedLessons")


# ==============================================================================
# Lesson Completion Schemas
# ==============================================================================


class MarkLessonRequest(BaseModel):
    """Request to mark a lesson complete or incomplete."""

    completed: bool = Field(True, description="False clears the completion")


class MessageResponse(BaseModel):
    """Acknowledgement response."""

    success: bool = True
    message: str


# ==============================================================================
# Aggregate Schemas
# ==============================================================================


class ProgressSummary(BaseModel):
    """Completion of a course, module or the whole catalog."""

    model_config = ConfigDict(populate_by_name=True)

    percentage: int = Field(0, ge=0, le=100, description="0-100, rounded half-up")
    completed_lessons: int = Field(0, ge=0, alias="completedLessons")
    total_lessons: int = Field(0, ge=0, alias="totalLessons")

"""Database models for student progress tracking.

Relational table for:
- Lesson progress: one row per (user, lesson) pair

A row with a non-null ``completed_at`` marks the lesson as completed. Rows
with a null timestamp are lessons that were explicitly marked incomplete.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from educourse.core.database.base import Base


# ==============================================================================
# Helper Functions
# ==============================================================================


def utc_now() -> datetime:
    """Current time, UTC-aware."""
    return datetime.now(UTC)


def ensure_utc_aware(dt: datetime | None) -> datetime | None:
    """Ensure datetime is UTC-aware (SQLite returns naive datetimes)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


# ==============================================================================
# Entity Classes
# ==============================================================================


class LessonProgress(Base):
    """Lesson progress entity.

    Attributes:
        id: Surrogate key
        user_id: Opaque user identifier supplied by the client
        lesson_id: Lesson reference
        completed_at: Completion time, or None when not completed
    """

    __tablename__ = "user_lesson_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_user_lesson_progress"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    lesson_id: Mapped[int] = mapped_column(
        ForeignKey("lessons.id", ondelete="CASCADE"), index=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def __repr__(self) -> str:
        return f"<LessonProgress user={self.user_id} lesson={self.lesson_id}>"

"""Student progress tracking service layer.

Business logic for:
- Manual lesson completion (mark complete / incomplete)
- Progress queries per user
- Progress aggregation and percentage calculation
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import distinct, func, select
from sqlalchemy.exc import IntegrityError

from educourse.courses.models import Lesson, courses_modules, modules_lessons

from .models import LessonProgress, utc_now
from .schemas import LessonProgressResponse, ProgressSummary, UserProgressResponse


if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = structlog.get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class ProgressError(Exception):
    """Base progress error."""

    def __init__(self, message: str, code: str = "progress_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class LessonNotFoundError(ProgressError):
    """Progress refers to a lesson that does not exist."""

    def __init__(self, message: str = "Lesson not found"):
        super().__init__(message, "lesson_not_found")


# ==============================================================================
# Helper Functions
# ==============================================================================


def calculate_percentage(completed: int, total: int) -> int:
    """Completion percentage rounded half-up; 0 when there is nothing to complete.

    >>> calculate_percentage(1, 8)
    13
    """
    if total <= 0:
        return 0
    ratio = Decimal(100 * completed) / Decimal(total)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _summary(completed: int, total: int) -> ProgressSummary:
    return ProgressSummary(
        percentage=calculate_percentage(completed, total),
        completed_lessons=completed,
        total_lessons=total,
    )


# ==============================================================================
# Progress Service
# ==============================================================================


class ProgressService:
    """Service for student progress tracking.

    Aggregates are recomputed on every call from ``user_lesson_progress``
    joined through the junction tables. Lessons are counted DISTINCT so a
    lesson shared by two modules of one course counts once for that course.
    """

    def __init__(self, session_factory: "async_sessionmaker[AsyncSession]"):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    # ==========================================================================
    # Lesson Completion
    # ==========================================================================

    async def mark_lesson_complete(
        self,
        user_id: str,
        lesson_id: int,
        completed: bool = True,
    ) -> LessonProgressResponse:
        """Mark a lesson complete (or incomplete) for a user.

        Re-marking a completed lesson keeps the first completion time.

        Raises:
            LessonNotFoundError: If the lesson does not exist
        """
        async with self.session_factory() as session:
            if await session.get(Lesson, lesson_id) is None:
                raise LessonNotFoundError

            try:
                record = await self._upsert(session, user_id, lesson_id, completed)
                await session.commit()
            except IntegrityError:
                # Lost the insert race against a concurrent request
                await session.rollback()
                logger.debug(
                    "lesson_progress_upsert_retry",
                    user_id=user_id,
                    lesson_id=lesson_id,
                )
                record = await self._upsert(session, user_id, lesson_id, completed)
                await session.commit()

        logger.info(
            "lesson_marked_complete" if completed else "lesson_marked_incomplete",
            user_id=user_id,
            lesson_id=lesson_id,
        )
        return LessonProgressResponse.from_entity(record)

    async def _upsert(
        self,
        session: "AsyncSession",
        user_id: str,
        lesson_id: int,
        completed: bool,
    ) -> LessonProgress:
        record = await session.scalar(
            select(LessonProgress).where(
                LessonProgress.user_id == user_id,
                LessonProgress.lesson_id == lesson_id,
            )
        )

        if record is None:
            record = LessonProgress(
                user_id=user_id,
                lesson_id=lesson_id,
                completed_at=utc_now() if completed else None,
            )
            session.add(record)
        elif not completed:
            record.completed_at = None
        elif not record.is_completed:
            record.completed_at = utc_now()

        await session.flush()
        return record

    # ==========================================================================
    # Progress Queries
    # ==========================================================================

    async def get_user_progress(self, user_id: str) -> list[LessonProgressResponse]:
        """All progress rows of a user, ordered by lesson id."""
        async with self.session_factory() as session:
            result = await session.scalars(
                select(LessonProgress)
                .where(LessonProgress.user_id == user_id)
                .order_by(LessonProgress.lesson_id)
            )
            records = list(result)

        return [LessonProgressResponse.from_entity(r) for r in records]

    async def get_completed_lessons(self, user_id: str) -> list[int]:
        """Ids of the lessons a user has completed, ascending."""
        async with self.session_factory() as session:
            result = await session.scalars(
                select(LessonProgress.lesson_id)
                .where(
                    LessonProgress.user_id == user_id,
                    LessonProgress.completed_at.is_not(None),
                )
                .order_by(LessonProgress.lesson_id)
            )
            return list(result)

    async def get_progress_overview(self, user_id: str) -> UserProgressResponse:
        """Progress rows together with the completed lesson ids."""
        return UserProgressResponse(
            progress=await self.get_user_progress(user_id),
            completed_lessons=await self.get_completed_lessons(user_id),
        )

    # ==========================================================================
    # Aggregation
    # ==========================================================================

    def _completed_lessons_stmt(self, user_id: str) -> "Select":
        return select(func.count(distinct(LessonProgress.lesson_id))).where(
            LessonProgress.user_id == user_id,
            LessonProgress.completed_at.is_not(None),
        )

    async def _count(self, total_stmt: "Select", completed_stmt: "Select") -> tuple[int, int]:
        async with self.session_factory() as session:
            total = await session.scalar(total_stmt) or 0
            completed = await session.scalar(completed_stmt) or 0
        return completed, total

    async def get_course_progress(self, user_id: str, course_id: int) -> ProgressSummary:
        """Completion over every lesson of every module of a course.

        A course that does not exist has no lessons and yields 0/0/0.
        """
        course_lessons = courses_modules.join(
            modules_lessons,
            courses_modules.c.module_id == modules_lessons.c.module_id,
        )

        total_stmt = (
            select(func.count(distinct(modules_lessons.c.lesson_id)))
            .select_from(course_lessons)
            .where(courses_modules.c.course_id == course_id)
        )
        completed_stmt = (
            self._completed_lessons_stmt(user_id)
            .select_from(LessonProgress)
            .join(modules_lessons, modules_lessons.c.lesson_id == LessonProgress.lesson_id)
            .join(courses_modules, courses_modules.c.module_id == modules_lessons.c.module_id)
            .where(courses_modules.c.course_id == course_id)
        )

        completed, total = await self._count(total_stmt, completed_stmt)
        summary = _summary(completed, total)
        logger.debug(
            "course_progress_computed",
            user_id=user_id,
            course_id=course_id,
            completed=completed,
            total=total,
            percentage=summary.percentage,
        )
        return summary

    async def get_module_progress(self, user_id: str, module_id: int) -> ProgressSummary:
        """Completion over the lessons of one module."""
        total_stmt = select(func.count(distinct(modules_lessons.c.lesson_id))).where(
            modules_lessons.c.module_id == module_id
        )
        completed_stmt = (
            self._completed_lessons_stmt(user_id)
            .select_from(LessonProgress)
            .join(modules_lessons, modules_lessons.c.lesson_id == LessonProgress.lesson_id)
            .where(modules_lessons.c.module_id == module_id)
        )

        completed, total = await self._count(total_stmt, completed_stmt)
        summary = _summary(completed, total)
        logger.debug(
            "module_progress_computed",
            user_id=user_id,
            module_id=module_id,
            completed=completed,
            total=total,
            percentage=summary.percentage,
        )
        return summary

    async def get_overall_progress(self, user_id: str) -> ProgressSummary:
        """Completion over every lesson in the catalog."""
        total_stmt = select(func.count(Lesson.id))
        completed_stmt = (
            self._completed_lessons_stmt(user_id)
            .select_from(LessonProgress)
            .join(Lesson, Lesson.id == LessonProgress.lesson_id)
        )

        completed, total = await self._count(total_stmt, completed_stmt)
        summary = _summary(completed, total)
        logger.debug(
            "overall_progress_computed",
            user_id=user_id,
            completed=completed,
            total=total,
            percentage=summary.percentage,
        )
        return summary

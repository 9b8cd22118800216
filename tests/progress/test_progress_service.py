"""Tests for lesson completion and progress aggregation.

TDD implementation of:
- mark_lesson_complete (insert, idempotent re-mark, un-mark, race retry)
- get_user_progress / get_completed_lessons
- get_course_progress / get_module_progress / get_overall_progress
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from educourse.progress.models import LessonProgress
from educourse.progress.service import LessonNotFoundError, ProgressService


USER = "user-1"
OTHER_USER = "user-2"


@pytest.fixture
def progress_service(catalog) -> ProgressService:
    """ProgressService over the test catalog."""
    return ProgressService(catalog)


async def _complete(service: ProgressService, user_id: str, *lesson_ids: int) -> None:
    for lesson_id in lesson_ids:
        await service.mark_lesson_complete(user_id, lesson_id)


async def _row_count(service: ProgressService) -> int:
    async with service.session_factory() as session:
        return await session.scalar(select(func.count()).select_from(LessonProgress))


class TestMarkLessonComplete:
    """Tests for ProgressService.mark_lesson_complete."""

    @pytest.mark.asyncio
    async def test_creates_completed_row(self, progress_service: ProgressService):
        record = await progress_service.mark_lesson_complete(USER, 1)

        assert record.user_id == USER
        assert record.lesson_id == 1
        assert record.completed_at is not None
        assert record.completed_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_is_idempotent(self, progress_service: ProgressService):
        first = await progress_service.mark_lesson_complete(USER, 1)
        second = await progress_service.mark_lesson_complete(USER, 1)

        assert second.id == first.id
        assert second.completed_at == first.completed_at
        assert await _row_count(progress_service) == 1

    @pytest.mark.asyncio
    async def test_mark_incomplete_clears_timestamp(
        self, progress_service: ProgressService
    ):
        await progress_service.mark_lesson_complete(USER, 1)
        record = await progress_service.mark_lesson_complete(USER, 1, completed=False)

        assert record.completed_at is None
        assert await progress_service.get_completed_lessons(USER) == []
        assert await _row_count(progress_service) == 1

    @pytest.mark.asyncio
    async def test_mark_incomplete_without_prior_row(
        self, progress_service: ProgressService
    ):
        record = await progress_service.mark_lesson_complete(USER, 2, completed=False)

        assert record.completed_at is None
        rows = await progress_service.get_user_progress(USER)
        assert [r.lesson_id for r in rows] == [2]

    @pytest.mark.asyncio
    async def test_complete_again_after_incomplete(
        self, progress_service: ProgressService
    ):
        await progress_service.mark_lesson_complete(USER, 1, completed=False)
        record = await progress_service.mark_lesson_complete(USER, 1)

        assert record.completed_at is not None

    @pytest.mark.asyncio
    async def test_unknown_lesson(self, progress_service: ProgressService):
        with pytest.raises(LessonNotFoundError) as exc_info:
            await progress_service.mark_lesson_complete(USER, 999)

        assert exc_info.value.code == "lesson_not_found"
        assert await _row_count(progress_service) == 0

    @pytest.mark.asyncio
    async def test_retries_once_after_insert_race(
        self, progress_service: ProgressService, monkeypatch: pytest.MonkeyPatch
    ):
        upsert = ProgressService._upsert
        calls = []

        async def racing_upsert(self, session, user_id, lesson_id, completed):
            calls.append(lesson_id)
            if len(calls) == 1:
                raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
            return await upsert(self, session, user_id, lesson_id, completed)

        monkeypatch.setattr(ProgressService, "_upsert", racing_upsert)

        record = await progress_service.mark_lesson_complete(USER, 3)

        assert calls == [3, 3]
        assert record.completed_at is not None
        assert await _row_count(progress_service) == 1


class TestUserProgress:
    """Tests for per-user progress queries."""

    @pytest.mark.asyncio
    async def test_empty_for_new_user(self, progress_service: ProgressService):
        assert await progress_service.get_user_progress(USER) == []
        assert await progress_service.get_completed_lessons(USER) == []

    @pytest.mark.asyncio
    async def test_completed_lessons_sorted(self, progress_service: ProgressService):
        await _complete(progress_service, USER, 5, 1, 3)
        assert await progress_service.get_completed_lessons(USER) == [1, 3, 5]

    @pytest.mark.asyncio
    async def test_users_are_isolated(self, progress_service: ProgressService):
        await _complete(progress_service, USER, 1, 2)
        await _complete(progress_service, OTHER_USER, 7)

        assert await progress_service.get_completed_lessons(USER) == [1, 2]
        assert await progress_service.get_completed_lessons(OTHER_USER) == [7]

    @pytest.mark.asyncio
    async def test_overview(self, progress_service: ProgressService):
        await _complete(progress_service, USER, 1, 2)
        await progress_service.mark_lesson_complete(USER, 3, completed=False)

        overview = await progress_service.get_progress_overview(USER)

        assert [r.lesson_id for r in overview.progress] == [1, 2, 3]
        assert overview.completed_lessons == [1, 2]
        assert overview.model_dump(by_alias=True)["completedLessons"] == [1, 2]


class TestAggregation:
    """Tests for course, module and overall percentages."""

    @pytest.mark.asyncio
    async def test_course_half_complete(self, progress_service: ProgressService):
        # Course 1 has modules of 4 and 2 lessons
        await _complete(progress_service, USER, 1, 2, 5)

        summary = await progress_service.get_course_progress(USER, 1)

        assert summary.completed_lessons == 3
        assert summary.total_lessons == 6
        assert summary.percentage == 50

    @pytest.mark.asyncio
    async def test_course_rounds_half_up(self, progress_service: ProgressService):
        await _complete(progress_service, USER, 1, 2, 4, 5)

        summary = await progress_service.get_course_progress(USER, 1)

        assert summary.percentage == 67

    @pytest.mark.asyncio
    async def test_shared_lesson_counts_once(self, progress_service: ProgressService):
        # Course 4 = module 1 (1-4) + module 5 (4, 8): 5 distinct lessons
        await _complete(progress_service, USER, 1, 2, 4)

        summary = await progress_service.get_course_progress(USER, 4)

        assert summary.total_lessons == 5
        assert summary.completed_lessons == 3
        assert summary.percentage == 60

    @pytest.mark.asyncio
    async def test_lessons_outside_course_ignored(
        self, progress_service: ProgressService
    ):
        await _complete(progress_service, USER, 7, 8)

        summary = await progress_service.get_course_progress(USER, 1)

        assert summary.completed_lessons == 0
        assert summary.percentage == 0

    @pytest.mark.asyncio
    async def test_incomplete_rows_not_counted(self, progress_service: ProgressService):
        await _complete(progress_service, USER, 7)
        await progress_service.mark_lesson_complete(USER, 8, completed=False)

        summary = await progress_service.get_course_progress(USER, 2)

        assert summary.completed_lessons == 1
        assert summary.percentage == 50

    @pytest.mark.asyncio
    async def test_course_without_lessons(self, progress_service: ProgressService):
        summary = await progress_service.get_course_progress(USER, 3)

        assert summary.total_lessons == 0
        assert summary.percentage == 0

    @pytest.mark.asyncio
    async def test_unknown_course(self, progress_service: ProgressService):
        summary = await progress_service.get_course_progress(USER, 999)

        assert (summary.percentage, summary.completed_lessons, summary.total_lessons) == (
            0,
            0,
            0,
        )

    @pytest.mark.asyncio
    async def test_module(self, progress_service: ProgressService):
        await _complete(progress_service, USER, 1, 2, 5)

        summary = await progress_service.get_module_progress(USER, 1)

        assert summary.completed_lessons == 2
        assert summary.total_lessons == 4
        assert summary.percentage == 50

    @pytest.mark.asyncio
    async def test_empty_module(self, progress_service: ProgressService):
        summary = await progress_service.get_module_progress(USER, 4)

        assert summary.total_lessons == 0
        assert summary.percentage == 0

    @pytest.mark.asyncio
    async def test_overall(self, progress_service: ProgressService):
        await _complete(progress_service, USER, 1, 2, 5)

        summary = await progress_service.get_overall_progress(USER)

        assert summary.completed_lessons == 3
        assert summary.total_lessons == 8
        assert summary.percentage == 38

    @pytest.mark.asyncio
    async def test_overall_new_user(self, progress_service: ProgressService):
        summary = await progress_service.get_overall_progress(OTHER_USER)

        assert summary.completed_lessons == 0
        assert summary.percentage == 0

    @pytest.mark.asyncio
    async def test_summary_serializes_camel_case(
        self, progress_service: ProgressService
    ):
        summary = await progress_service.get_module_progress(USER, 3)

        assert summary.model_dump(by_alias=True) == {
            "percentage": 0,
            "completedLessons": 0,
            "totalLessons": 2,
        }

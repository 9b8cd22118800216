"""Read-only catalog queries.

Every SQL statement touching courses, modules and lessons lives here. The
services never build queries themselves, so module/lesson hydration (one
lesson query per module) can be swapped for a single joined query without
touching callers.
"""

from collections import defaultdict
from collections.abc import Sequence
from enum import Enum

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from educourse.courses.models import (
    Course,
    Lesson,
    Module,
    courses_modules,
    modules_lessons,
)


class Direction(str, Enum):
    """Direction of travel through an ordered lesson sequence."""

    NEXT = "next"
    PREVIOUS = "previous"


HydratedModule = tuple[Module, list[Lesson]]


class CatalogRepository:
    """Catalog queries bound to one session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ==========================================================================
    # Courses
    # ==========================================================================

    async def list_courses(
        self,
        *,
        featured: bool | None = None,
        in_progress: bool | None = None,
        category: str | None = None,
    ) -> list[Course]:
        """List courses ordered by id, optionally filtered."""
        stmt = select(Course)
        if featured is not None:
            stmt = stmt.where(Course.featured.is_(featured))
        if in_progress is not None:
            stmt = stmt.where(Course.in_progress.is_(in_progress))
        if category is not None:
            stmt = stmt.where(Course.category == category)

        result = await self.session.scalars(stmt.order_by(Course.id))
        return list(result)

    async def search_courses(self, query: str) -> list[Course]:
        """Case-insensitive substring search over title and description.

        LIKE wildcards in ``query`` are escaped and match literally.
        """
        stmt = (
            select(Course)
            .where(
                or_(
                    Course.title.icontains(query, autoescape=True),
                    Course.description.icontains(query, autoescape=True),
                )
            )
            .order_by(Course.id)
        )
        result = await self.session.scalars(stmt)
        return list(result)

    async def get_course(self, course_id: int) -> Course | None:
        return await self.session.get(Course, course_id)

    # ==========================================================================
    # Modules
    # ==========================================================================

    async def get_module(self, module_id: int) -> Module | None:
        return await self.session.get(Module, module_id)

    async def get_course_modules(self, course_id: int) -> list[Module]:
        """Modules linked to a course, by position then id."""
        stmt = (
            select(Module)
            .join(courses_modules, courses_modules.c.module_id == Module.id)
            .where(courses_modules.c.course_id == course_id)
            .order_by(Module.order, Module.id)
        )
        result = await self.session.scalars(stmt)
        return list(result)

    async def get_modules_for_courses(
        self, course_ids: Sequence[int]
    ) -> dict[int, list[Module]]:
        """Module summaries for several courses in a single query."""
        modules_by_course: dict[int, list[Module]] = defaultdict(list)
        if not course_ids:
            return modules_by_course

        stmt = (
            select(courses_modules.c.course_id, Module)
            .join(Module, courses_modules.c.module_id == Module.id)
            .where(courses_modules.c.course_id.in_(course_ids))
            .order_by(Module.order, Module.id)
        )
        for course_id, module in (await self.session.execute(stmt)).all():
            modules_by_course[course_id].append(module)
        return modules_by_course

    # ==========================================================================
    # Lessons
    # ==========================================================================

    async def get_lesson(self, lesson_id: int) -> Lesson | None:
        return await self.session.get(Lesson, lesson_id)

    async def get_module_lessons(self, module_id: int) -> list[Lesson]:
        """Lessons linked to a module, by ascending id."""
        stmt = (
            select(Lesson)
            .join(modules_lessons, modules_lessons.c.lesson_id == Lesson.id)
            .where(modules_lessons.c.module_id == module_id)
            .order_by(Lesson.id)
        )
        result = await self.session.scalars(stmt)
        return list(result)

    async def hydrate_modules(self, modules: Sequence[Module]) -> list[HydratedModule]:
        """Attach lessons to each module (one query per module)."""
        return [(module, await self.get_module_lessons(module.id)) for module in modules]

    async def get_adjacent_lesson(
        self,
        lesson_id: int,
        direction: Direction,
        module_id: int | None = None,
    ) -> Lesson | None:
        """Find the lesson next to ``lesson_id`` in ascending id order.

        Scoped to the lessons of ``module_id`` when given, otherwise to the
        whole catalog. ``lesson_id`` only serves as the pivot and need not
        exist.
        """
        stmt = select(Lesson)
        if module_id is not None:
            stmt = stmt.join(
                modules_lessons, modules_lessons.c.lesson_id == Lesson.id
            ).where(modules_lessons.c.module_id == module_id)

        if direction is Direction.NEXT:
            stmt = stmt.where(Lesson.id > lesson_id).order_by(Lesson.id.asc())
        else:
            stmt = stmt.where(Lesson.id < lesson_id).order_by(Lesson.id.desc())

        result = await self.session.scalars(stmt.limit(1))
        return result.first()

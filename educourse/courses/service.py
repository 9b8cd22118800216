"""Course catalog service layer.

Business logic for:
- Course listing, filtering, search and full hydration
- Module lookup with lessons
- Lesson lookup and next/previous sequencing
"""

from typing import TYPE_CHECKING

import structlog

from educourse.courses.models import Course, Module
from educourse.courses.repository import CatalogRepository, Direction, HydratedModule
from educourse.courses.schemas import (
    CourseDetailResponse,
    CourseResponse,
    LessonResponse,
    ModuleDetailResponse,
    ModuleResponse,
)


if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = structlog.get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class CatalogError(Exception):
    """Base catalog error."""

    def __init__(self, message: str, code: str = "catalog_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class CourseNotFoundError(CatalogError):
    """Course not found."""

    def __init__(self, message: str = "Course not found"):
        super().__init__(message, "course_not_found")


class ModuleNotFoundError(CatalogError):
    """Module not found."""

    def __init__(self, message: str = "Module not found"):
        super().__init__(message, "module_not_found")


class LessonNotFoundError(CatalogError):
    """Lesson not found."""

    def __init__(self, message: str = "Lesson not found"):
        super().__init__(message, "lesson_not_found")


class NoAdjacentLessonError(CatalogError):
    """No lesson before/after the current one in the requested scope."""

    def __init__(self, direction: Direction):
        super().__init__(f"No {direction.value} lesson found", "no_adjacent_lesson")
        self.direction = direction


# ==============================================================================
# Response Builders
# ==============================================================================


def module_detail(module: Module, lessons: list) -> ModuleDetailResponse:
    response = ModuleDetailResponse.model_validate(module)
    response.lessons = [LessonResponse.model_validate(lesson) for lesson in lessons]
    return response


def course_summary(course: Course, modules: list[Module]) -> CourseResponse:
    response = CourseResponse.model_validate(course)
    response.modules = [ModuleResponse.model_validate(module) for module in modules]
    return response


def course_detail(course: Course, modules: list[HydratedModule]) -> CourseDetailResponse:
    response = CourseDetailResponse.model_validate(course)
    response.modules = [module_detail(module, lessons) for module, lessons in modules]
    return response


# ==============================================================================
# Lesson Service
# ==============================================================================


class LessonService:
    """Service for lesson lookup and sequencing.

    Sequencing policy: lessons are ordered by ascending id. With a module id
    the sequence is that module's lessons; without one it is every lesson in
    the catalog.
    """

    def __init__(self, session_factory: "async_sessionmaker[AsyncSession]"):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    async def get_lesson(self, lesson_id: int) -> LessonResponse:
        """Get a lesson by id.

        Raises:
            LessonNotFoundError: If no lesson has this id
        """
        async with self.session_factory() as session:
            lesson = await CatalogRepository(session).get_lesson(lesson_id)
        if lesson is None:
            raise LessonNotFoundError
        return LessonResponse.model_validate(lesson)

    async def get_adjacent_lesson(
        self,
        lesson_id: int,
        direction: Direction,
        module_id: int | None = None,
    ) -> LessonResponse:
        """Resolve the lesson before or after ``lesson_id``.

        Raises:
            NoAdjacentLessonError: If ``lesson_id`` is at the sequence boundary
        """
        async with self.session_factory() as session:
            lesson = await CatalogRepository(session).get_adjacent_lesson(
                lesson_id, direction, module_id
            )

        if lesson is None:
            logger.debug(
                "lesson_sequence_boundary",
                lesson_id=lesson_id,
                module_id=module_id,
                direction=direction.value,
            )
            raise NoAdjacentLessonError(direction)

        return LessonResponse.model_validate(lesson)

    async def get_next_lesson(
        self, lesson_id: int, module_id: int | None = None
    ) -> LessonResponse:
        """Lesson following ``lesson_id`` in the scope."""
        return await self.get_adjacent_lesson(lesson_id, Direction.NEXT, module_id)

    async def get_previous_lesson(
        self, lesson_id: int, module_id: int | None = None
    ) -> LessonResponse:
        """Lesson preceding ``lesson_id`` in the scope."""
        return await self.get_adjacent_lesson(lesson_id, Direction.PREVIOUS, module_id)


# ==============================================================================
# Module Service
# ==============================================================================


class ModuleService:
    """Service for module lookup."""

    def __init__(self, session_factory: "async_sessionmaker[AsyncSession]"):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    async def get_module(self, module_id: int) -> ModuleDetailResponse:
        """Get a module with its lessons.

        Raises:
            ModuleNotFoundError: If no module has this id
        """
        async with self.session_factory() as session:
            repository = CatalogRepository(session)
            module = await repository.get_module(module_id)
            if module is None:
                raise ModuleNotFoundError
            lessons = await repository.get_module_lessons(module_id)

        return module_detail(module, lessons)

    async def get_course_modules(self, course_id: int) -> list[ModuleDetailResponse]:
        """Get all modules of a course with their lessons.

        An unknown course has no modules, so the result is empty.
        """
        async with self.session_factory() as session:
            repository = CatalogRepository(session)
            modules = await repository.get_course_modules(course_id)
            hydrated = await repository.hydrate_modules(modules)

        return [module_detail(module, lessons) for module, lessons in hydrated]


# ==============================================================================
# Course Service
# ==============================================================================


class CourseService:
    """Service for course listing and lookup."""

    def __init__(self, session_factory: "async_sessionmaker[AsyncSession]"):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    async def list_courses(
        self,
        *,
        featured: bool = False,
        in_progress: bool = False,
        search: str | None = None,
        category: str | None = None,
    ) -> list[CourseResponse]:
        """List courses with module summaries.

        Only one filter applies, in precedence order: featured, in progress,
        search, category. With none of them every course is returned.
        """
        async with self.session_factory() as session:
            repository = CatalogRepository(session)

            if featured:
                courses = await repository.list_courses(featured=True)
            elif in_progress:
                courses = await repository.list_courses(in_progress=True)
            elif search:
                courses = await repository.search_courses(search)
            elif category:
                courses = await repository.list_courses(category=category)
            else:
                courses = await repository.list_courses()

            modules_by_course = await repository.get_modules_for_courses(
                [course.id for course in courses]
            )

        return [course_summary(c, modules_by_course.get(c.id, [])) for c in courses]

    async def search_courses(self, query: str) -> list[CourseResponse]:
        """Case-insensitive search over course title and description."""
        return await self.list_courses(search=query)

    async def get_course(self, course_id: int) -> CourseDetailResponse:
        """Get a course with its modules and their lessons.

        Raises:
            CourseNotFoundError: If no course has this id
        """
        async with self.session_factory() as session:
            repository = CatalogRepository(session)
            course = await repository.get_course(course_id)
            if course is None:
                raise CourseNotFoundError
            modules = await repository.get_course_modules(course_id)
            hydrated = await repository.hydrate_modules(modules)

        return course_detail(course, hydrated)

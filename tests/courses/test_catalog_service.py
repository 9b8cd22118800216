"""Tests for course and module lookup.

Covers:
- Course listing with filter precedence
- Case-insensitive search with literal wildcards
- Course and module hydration
"""

import pytest

from educourse.courses.service import (
    CourseNotFoundError,
    CourseService,
    ModuleNotFoundError,
    ModuleService,
)


@pytest.fixture
def course_service(catalog) -> CourseService:
    return CourseService(catalog)


@pytest.fixture
def module_service(catalog) -> ModuleService:
    return ModuleService(catalog)


def _ids(items) -> list[int]:
    return [item.id for item in items]


class TestListCourses:
    """Tests for CourseService.list_courses."""

    @pytest.mark.asyncio
    async def test_all_courses_ordered_by_id(self, course_service: CourseService):
        courses = await course_service.list_courses()
        assert _ids(courses) == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_featured(self, course_service: CourseService):
        courses = await course_service.list_courses(featured=True)
        assert _ids(courses) == [1, 2]

    @pytest.mark.asyncio
    async def test_in_progress(self, course_service: CourseService):
        courses = await course_service.list_courses(in_progress=True)
        assert _ids(courses) == [1, 4]

    @pytest.mark.asyncio
    async def test_category_is_exact(self, course_service: CourseService):
        assert _ids(await course_service.list_courses(category="Saúde")) == [1, 3]
        assert await course_service.list_courses(category="saúde") == []

    @pytest.mark.asyncio
    async def test_featured_wins_over_other_filters(self, course_service: CourseService):
        courses = await course_service.list_courses(
            featured=True, in_progress=True, search="sono", category="Bem-estar"
        )
        assert _ids(courses) == [1, 2]

    @pytest.mark.asyncio
    async def test_search_wins_over_category(self, course_service: CourseService):
        courses = await course_service.list_courses(search="sono", category="Saúde")
        assert _ids(courses) == [4]

    @pytest.mark.asyncio
    async def test_courses_carry_module_summaries(self, course_service: CourseService):
        courses = {c.id: c for c in await course_service.list_courses()}

        assert _ids(courses[1].modules) == [1, 2]
        assert _ids(courses[2].modules) == [3, 4]
        assert courses[3].modules == []
        # Both modules have order 1, so id breaks the tie
        assert _ids(courses[4].modules) == [1, 5]

    @pytest.mark.asyncio
    async def test_serializes_camel_case(self, course_service: CourseService):
        course = (await course_service.list_courses(featured=True))[0]
        data = course.model_dump(by_alias=True)

        assert data["inProgress"] is True
        assert "imageUrl" in data
        assert "lessons" not in data["modules"][0]


class TestSearchCourses:
    """Tests for course search over title and description."""

    @pytest.mark.asyncio
    async def test_matches_title_and_description(self, course_service: CourseService):
        # "Bem Estar ..." by title, "Para comer bem ..." by description
        courses = await course_service.search_courses("bem")
        assert _ids(courses) == [1, 3]

    @pytest.mark.asyncio
    async def test_case_insensitive(self, course_service: CourseService):
        assert _ids(await course_service.search_courses("BEM")) == [1, 3]

    @pytest.mark.asyncio
    async def test_wildcards_match_literally(self, course_service: CourseService):
        assert _ids(await course_service.search_courses("100%")) == [4]
        assert _ids(await course_service.search_courses("%")) == [4]
        assert await course_service.search_courses("_") == []

    @pytest.mark.asyncio
    async def test_no_match(self, course_service: CourseService):
        assert await course_service.search_courses("astronomia") == []


class TestGetCourse:
    """Tests for CourseService.get_course."""

    @pytest.mark.asyncio
    async def test_hydrates_modules_and_lessons(self, course_service: CourseService):
        course = await course_service.get_course(1)

        assert course.title == "Bem Estar com o Dr. Jô"
        assert _ids(course.modules) == [1, 2]
        assert _ids(course.modules[0].lessons) == [1, 2, 3, 4]
        assert _ids(course.modules[1].lessons) == [5, 6]

    @pytest.mark.asyncio
    async def test_shared_lesson_appears_in_both_modules(
        self, course_service: CourseService
    ):
        course = await course_service.get_course(4)

        assert _ids(course.modules[0].lessons) == [1, 2, 3, 4]
        assert _ids(course.modules[1].lessons) == [4, 8]

    @pytest.mark.asyncio
    async def test_course_without_modules(self, course_service: CourseService):
        course = await course_service.get_course(3)
        assert course.modules == []

    @pytest.mark.asyncio
    async def test_not_found(self, course_service: CourseService):
        with pytest.raises(CourseNotFoundError) as exc_info:
            await course_service.get_course(999)

        assert exc_info.value.code == "course_not_found"
        assert exc_info.value.message == "Course not found"


class TestModules:
    """Tests for ModuleService."""

    @pytest.mark.asyncio
    async def test_get_module_with_lessons(self, module_service: ModuleService):
        module = await module_service.get_module(5)

        assert module.title == "Rotina Noturna"
        assert _ids(module.lessons) == [4, 8]

    @pytest.mark.asyncio
    async def test_empty_module(self, module_service: ModuleService):
        module = await module_service.get_module(4)
        assert module.lessons == []

    @pytest.mark.asyncio
    async def test_get_module_not_found(self, module_service: ModuleService):
        with pytest.raises(ModuleNotFoundError):
            await module_service.get_module(999)

    @pytest.mark.asyncio
    async def test_course_modules_ordered(self, module_service: ModuleService):
        modules = await module_service.get_course_modules(2)

        assert _ids(modules) == [3, 4]
        assert _ids(modules[0].lessons) == [7, 8]
        assert modules[1].lessons == []

    @pytest.mark.asyncio
    async def test_course_modules_unknown_course(self, module_service: ModuleService):
        assert await module_service.get_course_modules(999) == []

"""Course catalog API endpoints.

Provides routes for:
- Courses: listing (with filters/search) and full detail
- Modules: detail and per-course listing
- Lessons: detail and next/previous navigation
"""

from fastapi import APIRouter, Query

from educourse.courses.dependencies import (
    CourseServiceDep,
    LessonServiceDep,
    ModuleIdQuery,
    ModuleServiceDep,
    ResourceId,
    handle_catalog_error,
)
from educourse.courses.schemas import (
    CourseDetailResponse,
    CourseResponse,
    LessonResponse,
    ModuleDetailResponse,
)
from educourse.courses.service import CatalogError


# ==============================================================================
# Courses Router
# ==============================================================================

router_courses = APIRouter(prefix="/courses", tags=["courses"])


@router_courses.get(
    "",
    response_model=list[CourseResponse],
    summary="List courses",
)
async def list_courses(
    course_service: CourseServiceDep,
    featured: bool = Query(False, description="Only featured courses"),
    in_progress: bool = Query(
        False, alias="inProgress", description="Only courses in progress"
    ),
    search: str | None = Query(None, description="Title/description substring"),
    category: str | None = Query(None, description="Exact category"),
) -> list[CourseResponse]:
    """List courses with their module summaries.

    Filters are exclusive, applied in order: featured, inProgress, search,
    category.
    """
    return await course_service.list_courses(
        featured=featured,
        in_progress=in_progress,
        search=search,
        category=category,
    )


@router_courses.get(
    "/{course_id}",
    response_model=CourseDetailResponse,
    summary="Get course with modules and lessons",
)
async def get_course(
    course_id: ResourceId,
    course_service: CourseServiceDep,
) -> CourseDetailResponse:
    try:
        return await course_service.get_course(course_id)
    except CatalogError as e:
        raise handle_catalog_error(e) from e


# ==============================================================================
# Modules Router
# ==============================================================================

router_modules = APIRouter(prefix="/modules", tags=["modules"])


@router_modules.get(
    "/course/{course_id}",
    response_model=list[ModuleDetailResponse],
    summary="List modules of a course",
)
async def list_course_modules(
    course_id: ResourceId,
    module_service: ModuleServiceDep,
) -> list[ModuleDetailResponse]:
    """List a course's modules, each with its lessons."""
    return await module_service.get_course_modules(course_id)


@router_modules.get(
    "/{module_id}",
    response_model=ModuleDetailResponse,
    summary="Get module with lessons",
)
async def get_module(
    module_id: ResourceId,
    module_service: ModuleServiceDep,
) -> ModuleDetailResponse:
    try:
        return await module_service.get_module(module_id)
    except CatalogError as e:
        raise handle_catalog_error(e) from e


# ==============================================================================
# Lessons Router
# ==============================================================================

router_lessons = APIRouter(prefix="/lessons", tags=["lessons"])


@router_lessons.get(
    "/{lesson_id}",
    response_model=LessonResponse,
    summary="Get lesson",
)
async def get_lesson(
    lesson_id: ResourceId,
    lesson_service: LessonServiceDep,
) -> LessonResponse:
    try:
        return await lesson_service.get_lesson(lesson_id)
    except CatalogError as e:
        raise handle_catalog_error(e) from e


@router_lessons.get(
    "/{lesson_id}/next",
    response_model=LessonResponse,
    summary="Get next lesson",
)
async def get_next_lesson(
    lesson_id: ResourceId,
    lesson_service: LessonServiceDep,
    module_id: ModuleIdQuery = None,
) -> LessonResponse:
    """Next lesson by ascending id, within the module when one is given."""
    try:
        return await lesson_service.get_next_lesson(lesson_id, module_id)
    except CatalogError as e:
        raise handle_catalog_error(e) from e


@router_lessons.get(
    "/{lesson_id}/previous",
    response_model=LessonResponse,
    summary="Get previous lesson",
)
async def get_previous_lesson(
    lesson_id: ResourceId,
    lesson_service: LessonServiceDep,
    module_id: ModuleIdQuery = None,
) -> LessonResponse:
    """Previous lesson by ascending id, within the module when one is given."""
    try:
        return await lesson_service.get_previous_lesson(lesson_id, module_id)
    except CatalogError as e:
        raise handle_catalog_error(e) from e

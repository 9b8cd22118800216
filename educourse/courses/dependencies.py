"""FastAPI dependencies for the course catalog.

Provides dependency injection for:
- Service instances (from app state)
- Catalog error to HTTP error conversion
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Path, Query, Request, status

from educourse.courses.service import (
    CatalogError,
    CourseService,
    LessonService,
    ModuleService,
)


# ==============================================================================
# Id Parameters
# ==============================================================================

# Largest value of a 32-bit INTEGER primary key
MAX_RESOURCE_ID = 2_147_483_647

ResourceId = Annotated[int, Path(ge=0, le=MAX_RESOURCE_ID)]
ModuleIdQuery = Annotated[
    int | None,
    Query(
        alias="moduleId",
        ge=0,
        le=MAX_RESOURCE_ID,
        description="Restrict the sequence to this module",
    ),
]


# ==============================================================================
# Service Getters
# ==============================================================================


def _get_service(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Catalog service unavailable",
        )
    return service


async def get_course_service(request: Request) -> CourseService:
    """Get CourseService instance from app state."""
    return _get_service(request, "course_service")


async def get_module_service(request: Request) -> ModuleService:
    """Get ModuleService instance from app state."""
    return _get_service(request, "module_service")


async def get_lesson_service(request: Request) -> LessonService:
    """Get LessonService instance from app state."""
    return _get_service(request, "lesson_service")


# ==============================================================================
# Type Aliases for Dependencies
# ==============================================================================

CourseServiceDep = Annotated[CourseService, Depends(get_course_service)]
ModuleServiceDep = Annotated[ModuleService, Depends(get_module_service)]
LessonServiceDep = Annotated[LessonService, Depends(get_lesson_service)]


# ==============================================================================
# Error Handling
# ==============================================================================


def handle_catalog_error(error: CatalogError) -> HTTPException:
    """Convert catalog errors to HTTPException."""
    status_map = {
        "course_not_found": status.HTTP_404_NOT_FOUND,
        "module_not_found": status.HTTP_404_NOT_FOUND,
        "lesson_not_found": status.HTTP_404_NOT_FOUND,
        "no_adjacent_lesson": status.HTTP_404_NOT_FOUND,
    }

    return HTTPException(
        status_code=status_map.get(error.code, status.HTTP_400_BAD_REQUEST),
        detail=error.message,
    )

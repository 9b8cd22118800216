"""Student progress tracking API endpoints.

Provides routes for:
- Lesson completion (mark complete / incomplete)
- Progress queries: per user, course, module and overall

The user is identified by the ``user_id`` path segment. It is bound into the
log context so every log line of the request carries it.
"""

from typing import Annotated

from fastapi import APIRouter, Body

from educourse.core.context import set_user_id
from educourse.courses.dependencies import ResourceId

from .dependencies import ProgressServiceDep, handle_progress_error
from .schemas import (
    MarkLessonRequest,
    MessageResponse,
    ProgressSummary,
    UserProgressResponse,
)
from .service import ProgressError


router = APIRouter(prefix="/progress", tags=["progress"])


# ==============================================================================
# Progress Query Endpoints
# ==============================================================================


@router.get(
    "/{user_id}",
    response_model=UserProgressResponse,
    summary="Get user progress",
)
async def get_user_progress(
    user_id: str,
    progress_service: ProgressServiceDep,
) -> UserProgressResponse:
    """All progress rows of the user and the ids of completed lessons."""
    set_user_id(user_id)
    return await progress_service.get_progress_overview(user_id)


@router.get(
    "/{user_id}/course/{course_id}",
    response_model=ProgressSummary,
    summary="Get course progress",
)
async def get_course_progress(
    user_id: str,
    course_id: ResourceId,
    progress_service: ProgressServiceDep,
) -> ProgressSummary:
    set_user_id(user_id)
    return await progress_service.get_course_progress(user_id, course_id)


@router.get(
    "/{user_id}/module/{module_id}",
    response_model=ProgressSummary,
    summary="Get module progress",
)
async def get_module_progress(
    user_id: str,
    module_id: ResourceId,
    progress_service: ProgressServiceDep,
) -> ProgressSummary:
    set_user_id(user_id)
    return await progress_service.get_module_progress(user_id, module_id)


@router.get(
    "/{user_id}/overall",
    response_model=ProgressSummary,
    summary="Get overall progress",
)
async def get_overall_progress(
    user_id: str,
    progress_service: ProgressServiceDep,
) -> ProgressSummary:
    set_user_id(user_id)
    return await progress_service.get_overall_progress(user_id)


# ==============================================================================
# Lesson Completion Endpoints
# ==============================================================================


@router.post(
    "/{user_id}/lesson/{lesson_id}",
    response_model=MessageResponse,
    summary="Mark lesson complete",
)
async def mark_lesson_complete(
    user_id: str,
    lesson_id: ResourceId,
    progress_service: ProgressServiceDep,
    data: Annotated[MarkLessonRequest | None, Body()] = None,
) -> MessageResponse:
    """Mark a lesson complete, or incomplete with ``{"completed": false}``.

    An empty body marks the lesson complete.
    """
    set_user_id(user_id)
    completed = data.completed if data is not None else True

    try:
        await progress_service.mark_lesson_complete(user_id, lesson_id, completed)
    except ProgressError as e:
        raise handle_progress_error(e) from e

    return MessageResponse(
        success=True,
        message="Lesson progress updated successfully",
    )

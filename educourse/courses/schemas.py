"""Pydantic schemas for the course catalog.

Response models for:
- Courses: list entries (module summaries) and detail (modules with lessons)
- Modules: summary and detail (with lessons)
- Lessons

JSON keys follow the mobile client's camelCase (``inProgress``,
``imageUrl``, ``contentUrl``); snake_case names are accepted on input.
"""

from pydantic import BaseModel, ConfigDict, Field

from educourse.courses.models import LessonType


# ==============================================================================
# Lesson Schemas
# ==============================================================================


class LessonResponse(BaseModel):
    """Lesson response."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: str
    type: LessonType
    duration: str = ""
    description: str | None = None
    content: str | None = None
    content_url: str | None = Field(None, alias="contentUrl")
    locked: bool = False


# ==============================================================================
# Module Schemas
# ==============================================================================


class ModuleResponse(BaseModel):
    """Module summary (no lessons)."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: str
    description: str = ""
    order: int = 0
    duration: str = ""


class ModuleDetailResponse(ModuleResponse):
    """Module with its lessons, ordered by lesson id."""

    lessons: list[LessonResponse] = []


# ==============================================================================
# Course Schemas
# ==============================================================================


class CourseResponse(BaseModel):
    """Course list entry with module summaries."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: str
    description: str = ""
    instructor: str = ""
    category: str = ""
    image_url: str | None = Field(None, alias="imageUrl")
    duration: str = ""
    featured: bool = False
    in_progress: bool = Field(False, alias="inProgress")
    modules: list[ModuleResponse] = []


class CourseDetailResponse(CourseResponse):
    """Course with modules and their lessons."""

    modules: list[ModuleDetailResponse] = []

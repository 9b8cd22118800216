"""Course catalog module.

Provides:
- Course, module and lesson models with many-to-many junction tables
- Read-only catalog queries and N+1 hydration (repository)
- Lesson next/previous sequencing
"""

from .models import Course, Lesson, LessonType, Module


__all__ = [
    "Course",
    "Lesson",
    "LessonType",
    "Module",
]

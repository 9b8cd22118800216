"""Student progress tracking module.

Provides:
- Lesson completion per user
- Course, module and overall completion percentages
"""

from .models import LessonProgress
from .service import ProgressService, calculate_percentage


__all__ = [
    "LessonProgress",
    "ProgressService",
    "calculate_percentage",
]

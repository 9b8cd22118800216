"""Database models for the course catalog.

Relational tables for:
- Courses: Top-level catalog entries
- Modules: Ordered groups of lessons
- Lessons: Video or text content
- Junction tables: courses_modules, modules_lessons

Architecture: Many-to-Many relationships via junction tables, so a module
can belong to several courses and a lesson to several modules. Lessons are
always listed by ascending id inside a module.
"""

from enum import Enum

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column

from educourse.core.database.base import Base


class LessonType(str, Enum):
    """Lesson content type."""

    VIDEO = "video"
    TEXT = "text"


# ==============================================================================
# Junction Tables
# ==============================================================================

courses_modules = Table(
    "courses_modules",
    Base.metadata,
    Column("course_id", ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("module_id", ForeignKey("modules.id", ondelete="CASCADE"), primary_key=True),
)

modules_lessons = Table(
    "modules_lessons",
    Base.metadata,
    Column("module_id", ForeignKey("modules.id", ondelete="CASCADE"), primary_key=True),
    Column("lesson_id", ForeignKey("lessons.id", ondelete="CASCADE"), primary_key=True),
)


# ==============================================================================
# Entity Classes
# ==============================================================================


class Course(Base):
    """Course entity representing an ordered collection of modules.

    Attributes:
        id: Unique identifier
        title: Course title
        description: Course description
        instructor: Instructor display name
        category: Free-form category used for filtering
        image_url: Cover image URL
        duration: Display duration (e.g. "1h 25min")
        featured: Highlighted on the home screen
        in_progress: Listed under "continue learning"
    """

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, default="")
    instructor: Mapped[str] = mapped_column(String(200), default="")
    category: Mapped[str] = mapped_column(String(100), default="", index=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    duration: Mapped[str] = mapped_column(String(50), default="")
    featured: Mapped[bool] = mapped_column(Boolean, default=False)
    in_progress: Mapped[bool] = mapped_column("inprogress", Boolean, default=False)

    def __repr__(self) -> str:
        return f"<Course {self.id} {self.title}>"


class Module(Base):
    """Module entity; ``order`` is its position inside a course."""

    __tablename__ = "modules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, default="")
    order: Mapped[int] = mapped_column("order", Integer, default=0)
    duration: Mapped[str] = mapped_column(String(50), default="")

    def __repr__(self) -> str:
        return f"<Module {self.id} {self.title}>"


class Lesson(Base):
    """Lesson entity.

    Video lessons point at ``content_url``; text lessons carry ``content``.
    """

    __tablename__ = "lessons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    type: Mapped[str] = mapped_column(String(20), default=LessonType.VIDEO.value)
    duration: Mapped[str] = mapped_column(String(50), default="")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    content_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    locked: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self) -> str:
        return f"<Lesson {self.id} {self.title} ({self.type})>"

"""Database connection module for EduCourse."""

from educourse.core.database.base import Base
from educourse.core.database.session import (
    AsyncDatabase,
    create_tables,
    init_database,
    ping_database,
    shutdown_database,
)


__all__ = [
    "AsyncDatabase",
    "Base",
    "create_tables",
    "init_database",
    "ping_database",
    "shutdown_database",
]

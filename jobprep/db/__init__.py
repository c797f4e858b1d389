"""Persistence: engine, sessions and the three tables."""

from jobprep.db.base import Base, get_db, init_db, session_scope
from jobprep.db.tables import ApplicationTest, JobApplication, Resume

__all__ = [
    "Base",
    "get_db",
    "init_db",
    "session_scope",
    "Resume",
    "JobApplication",
    "ApplicationTest",
]

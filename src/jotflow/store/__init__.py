"""
Record persistence.

SQLAlchemy models and CRUD store for tasks and notes.
"""

from jotflow.store.models import Base, Note, Priority, Task, TaskStatus
from jotflow.store.store import RecordStore

__all__ = [
    "Base",
    "Note",
    "Priority",
    "RecordStore",
    "Task",
    "TaskStatus",
]

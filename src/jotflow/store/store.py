"""
Record Store

CRUD operations for tasks and notes.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Sequence

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker

from jotflow.store.models import Base, Note, Priority, Task, TaskStatus

_UNSET: Any = object()


class RecordStore:
    """
    Database store for captured tasks and notes.

    Every write opens its own session and commits before returning, so each
    call is atomic.
    """

    def __init__(self, db_path: Optional[str] = None, echo: bool = False):
        """
        Initialize the store.

        Args:
            db_path: Path to SQLite database, or ":memory:".
                Defaults to ~/.jotflow/data/jotflow.db
        """
        if db_path is None:
            db_dir = Path.home() / ".jotflow" / "data"
            db_dir.mkdir(parents=True, exist_ok=True)
            db_path = str(db_dir / "jotflow.db")

        self.db_path = db_path
        self.engine = create_engine(f"sqlite:///{db_path}", echo=echo)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

        Base.metadata.create_all(self.engine)

    def _get_session(self) -> Session:
        """Get a new database session."""
        return self.SessionLocal()

    # =========================================================================
    # Task Operations
    # =========================================================================

    def create_task(
        self,
        title: str,
        description: str = "",
        priority: Priority = Priority.MEDIUM,
        difficulty: int = 1,
        due_time: Optional[datetime] = None,
        categories: Optional[list[str]] = None,
        steps: Optional[list[str]] = None,
    ) -> Task:
        """Create a new task in the "To Do" state."""
        if not title:
            raise ValueError("title must not be empty")
        _check_difficulty(difficulty)
        with self._get_session() as session:
            task = Task(
                title=title,
                description=description or "",
                priority=priority,
                status=TaskStatus.TODO,
                difficulty=difficulty,
                due_time=_to_utc(due_time),
                categories=list(categories or []),
                steps=list(steps or []),
            )
            session.add(task)
            session.commit()
            session.refresh(task)
            return task

    def get_task(self, task_id: str) -> Optional[Task]:
        """Get a task by ID."""
        with self._get_session() as session:
            return session.get(Task, task_id)

    def list_tasks(self, status: Optional[TaskStatus] = None) -> Sequence[Task]:
        """Get all tasks, newest first."""
        with self._get_session() as session:
            query = select(Task)
            if status:
                query = query.where(Task.status == status)
            query = query.order_by(Task.created_at.desc())
            return session.scalars(query).all()

    def update_task(
        self,
        task_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[TaskStatus] = None,
        priority: Optional[Priority] = None,
        difficulty: Optional[int] = None,
        due_time: Optional[datetime] = _UNSET,
        categories: Optional[list[str]] = None,
        steps: Optional[list[str]] = None,
    ) -> Optional[Task]:
        """
        Update selected fields of a task.

        Fields left as None are unchanged. ``due_time`` may be set to None
        explicitly to clear it.
        """
        if title is not None and not title:
            raise ValueError("title must not be empty")
        if difficulty is not None:
            _check_difficulty(difficulty)

        with self._get_session() as session:
            task = session.get(Task, task_id)
            if task is None:
                return None
            if title is not None:
                task.title = title
            if description is not None:
                task.description = description
            if status is not None:
                task.status = status
            if priority is not None:
                task.priority = priority
            if difficulty is not None:
                task.difficulty = difficulty
            if due_time is not _UNSET:
                task.due_time = _to_utc(due_time)
            if categories is not None:
                task.categories = list(categories)
            if steps is not None:
                task.steps = list(steps)
            session.commit()
            session.refresh(task)
            return task

    def delete_task(self, task_id: str) -> bool:
        """Delete a task."""
        with self._get_session() as session:
            task = session.get(Task, task_id)
            if task:
                session.delete(task)
                session.commit()
                return True
            return False

    # =========================================================================
    # Note Operations
    # =========================================================================

    def create_note(
        self,
        title: str,
        content: str = "",
        categories: Optional[list[str]] = None,
    ) -> Note:
        """Create a new note."""
        if not title:
            raise ValueError("title must not be empty")
        with self._get_session() as session:
            note = Note(
                title=title,
                content=content or "",
                categories=list(categories or []),
            )
            session.add(note)
            session.commit()
            session.refresh(note)
            return note

    def get_note(self, note_id: str) -> Optional[Note]:
        """Get a note by ID."""
        with self._get_session() as session:
            return session.get(Note, note_id)

    def list_notes(self) -> Sequence[Note]:
        """Get all notes, newest first."""
        with self._get_session() as session:
            query = select(Note).order_by(Note.created_at.desc())
            return session.scalars(query).all()

    def update_note(
        self,
        note_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
        categories: Optional[list[str]] = None,
    ) -> Optional[Note]:
        """Update selected fields of a note."""
        if title is not None and not title:
            raise ValueError("title must not be empty")
        with self._get_session() as session:
            note = session.get(Note, note_id)
            if note is None:
                return None
            if title is not None:
                note.title = title
            if content is not None:
                note.content = content
            if categories is not None:
                note.categories = list(categories)
            session.commit()
            session.refresh(note)
            return note

    def delete_note(self, note_id: str) -> bool:
        """Delete a note."""
        with self._get_session() as session:
            note = session.get(Note, note_id)
            if note:
                session.delete(note)
                session.commit()
                return True
            return False


def _check_difficulty(difficulty: int) -> None:
    if isinstance(difficulty, bool) or not isinstance(difficulty, int) or not 1 <= difficulty <= 5:
        raise ValueError(f"difficulty must be an integer from 1 to 5, got {difficulty!r}")


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite keeps no offset, so timestamps are stored as UTC
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)

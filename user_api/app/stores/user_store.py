"""
User record storage.

``UserStore`` documents the operations the service layer relies on and
``SQLiteUserStore`` implements them on top of the ``users`` table
created by ``core.db.init_db``.  Every call opens its own connection and
runs in a worker thread so that the event loop is never blocked.  If the
awaiting task is cancelled, a transaction still open in the abandoned
call is rolled back rather than committed and the cancellation
propagates to the caller.

All queries use parameterized statements.
"""

from __future__ import annotations

import functools
import logging
import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Protocol

import anyio

from ..core.db import get_cursor, get_database_path


logger = logging.getLogger(__name__)

_COLUMNS = "id, name, email, created_at, updated_at"

# Range of a SQLite INTEGER; ids outside it can never match a row.
SQLITE_MIN_INTEGER = -(2 ** 63)
SQLITE_MAX_INTEGER = 2 ** 63 - 1


class StoreError(Exception):
    """Base class for errors the store reports distinctly."""


class RecordNotFoundError(StoreError):
    """No record matched the lookup."""


class EmailConflictError(StoreError):
    """The store's uniqueness constraint on ``email`` rejected a write."""


@dataclass
class UserRecord:
    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


class UserStore(Protocol):
    """Operations the service expects from a user store."""

    async def find_by_id(self, user_id: int) -> UserRecord: ...

    async def find_by_email(self, email: str) -> UserRecord: ...

    async def list(self, limit: int, offset: int) -> List[UserRecord]: ...

    async def count(self) -> int: ...

    async def insert(self, name: str, email: str) -> UserRecord: ...

    async def update(self, user_id: int, name: str, email: str) -> UserRecord: ...

    async def delete(self, user_id: int) -> None: ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


def _row_to_record(row: sqlite3.Row) -> UserRecord:
    return UserRecord(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        created_at=_parse_datetime(row["created_at"]),
        updated_at=_parse_datetime(row["updated_at"]),
    )


def _is_email_conflict(exc: sqlite3.IntegrityError) -> bool:
    return "UNIQUE" in str(exc) and "users.email" in str(exc)


def _is_storable_id(user_id: int) -> bool:
    return SQLITE_MIN_INTEGER <= user_id <= SQLITE_MAX_INTEGER


class SQLiteUserStore:
    """User store backed by a SQLite database file."""

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path or get_database_path()

    async def _run(self, func, *args):
        """Run ``func(*args, cancelled=event)`` in a worker thread.

        When the awaiting task is cancelled, ``event`` is set so that a
        transaction still in flight is rolled back instead of committed.
        """
        cancelled = threading.Event()
        try:
            return await anyio.to_thread.run_sync(
                functools.partial(func, *args, cancelled=cancelled),
                abandon_on_cancel=True,
            )
        except anyio.get_cancelled_exc_class():
            cancelled.set()
            raise

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def find_by_id(self, user_id: int) -> UserRecord:
        if not _is_storable_id(user_id):
            raise RecordNotFoundError(f"No user with id {user_id!r}")
        return await self._run(self._find_one, "id", user_id)

    async def find_by_email(self, email: str) -> UserRecord:
        return await self._run(self._find_one, "email", email)

    async def list(self, limit: int, offset: int) -> List[UserRecord]:
        """Return up to ``limit`` records after skipping ``offset``, by ascending id."""
        return await self._run(self._list, limit, offset)

    async def count(self) -> int:
        return await self._run(self._count)

    def _find_one(self, column: str, value, *, cancelled: Optional[threading.Event] = None) -> UserRecord:
        with get_cursor(self.db_path, cancelled) as cursor:
            row = cursor.execute(
                f"SELECT {_COLUMNS} FROM users WHERE {column} = ?",
                (value,),
            ).fetchone()
        if row is None:
            raise RecordNotFoundError(f"No user with {column} {value!r}")
        return _row_to_record(row)

    def _list(self, limit: int, offset: int, *, cancelled: Optional[threading.Event] = None) -> List[UserRecord]:
        with get_cursor(self.db_path, cancelled) as cursor:
            rows = cursor.execute(
                f"SELECT {_COLUMNS} FROM users ORDER BY id ASC LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
        return [_row_to_record(row) for row in rows]

    def _count(self, *, cancelled: Optional[threading.Event] = None) -> int:
        with get_cursor(self.db_path, cancelled) as cursor:
            row = cursor.execute("SELECT COUNT(*) AS count FROM users").fetchone()
        return int(row["count"])

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    async def insert(self, name: str, email: str) -> UserRecord:
        """Insert a record; the store assigns ``id`` and both timestamps."""
        return await self._run(self._insert, name, email)

    async def update(self, user_id: int, name: str, email: str) -> UserRecord:
        """Overwrite ``name``/``email`` and refresh ``updated_at``."""
        if not _is_storable_id(user_id):
            raise RecordNotFoundError(f"No user with id {user_id!r}")
        return await self._run(self._update, user_id, name, email)

    async def delete(self, user_id: int) -> None:
        if not _is_storable_id(user_id):
            raise RecordNotFoundError(f"No user with id {user_id!r}")
        await self._run(self._delete, user_id)

    def _insert(self, name: str, email: str, *, cancelled: Optional[threading.Event] = None) -> UserRecord:
        timestamp = _now().isoformat()
        try:
            with get_cursor(self.db_path, cancelled) as cursor:
                cursor.execute(
                    "INSERT INTO users (name, email, created_at, updated_at) VALUES (?, ?, ?, ?)",
                    (name, email, timestamp, timestamp),
                )
                row = cursor.execute(
                    f"SELECT {_COLUMNS} FROM users WHERE id = ?",
                    (cursor.lastrowid,),
                ).fetchone()
        except sqlite3.IntegrityError as exc:
            if _is_email_conflict(exc):
                raise EmailConflictError(f"Email {email!r} is already stored") from exc
            raise
        logger.debug("Inserted user %s", row["id"])
        return _row_to_record(row)

    def _update(
        self,
        user_id: int,
        name: str,
        email: str,
        *,
        cancelled: Optional[threading.Event] = None,
    ) -> UserRecord:
        timestamp = _now().isoformat()
        try:
            with get_cursor(self.db_path, cancelled) as cursor:
                cursor.execute(
                    "UPDATE users SET name = ?, email = ?, updated_at = ? WHERE id = ?",
                    (name, email, timestamp, user_id),
                )
                if cursor.rowcount == 0:
                    raise RecordNotFoundError(f"No user with id {user_id!r}")
                row = cursor.execute(
                    f"SELECT {_COLUMNS} FROM users WHERE id = ?",
                    (user_id,),
                ).fetchone()
        except sqlite3.IntegrityError as exc:
            if _is_email_conflict(exc):
                raise EmailConflictError(f"Email {email!r} is already stored") from exc
            raise
        return _row_to_record(row)

    def _delete(self, user_id: int, *, cancelled: Optional[threading.Event] = None) -> None:
        with get_cursor(self.db_path, cancelled) as cursor:
            cursor.execute("DELETE FROM users WHERE id = ?", (user_id,))
            if cursor.rowcount == 0:
                raise RecordNotFoundError(f"No user with id {user_id!r}")

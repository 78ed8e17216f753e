from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from user_api.app.core.db import init_db
from user_api.app.main import create_app
from user_api.app.services.user_service import UserService
from user_api.app.stores.user_store import (
    EmailConflictError,
    RecordNotFoundError,
    SQLiteUserStore,
    UserRecord,
)


_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeUserStore:
    """In-memory user store recording every call it receives.

    ``failures`` maps a method name to an exception raised by the next
    call of that method.  ``enforce_unique`` mimics a UNIQUE constraint
    on ``email``.
    """

    def __init__(self, *, enforce_unique: bool = True) -> None:
        self.records: Dict[int, UserRecord] = {}
        self.calls: List[str] = []
        self.failures: Dict[str, Exception] = {}
        self.enforce_unique = enforce_unique
        self._ids = itertools.count(1)
        self._ticks = itertools.count(1)

    def _tick(self) -> datetime:
        return _EPOCH + timedelta(seconds=next(self._ticks))

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        failure = self.failures.pop(name, None)
        if failure is not None:
            raise failure

    def _conflicts(self, email: str, user_id: Optional[int] = None) -> bool:
        return self.enforce_unique and any(
            record.email == email and record.id != user_id for record in self.records.values()
        )

    def add(self, name: str, email: str) -> UserRecord:
        """Seed a record without recording a call."""
        now = self._tick()
        record = UserRecord(next(self._ids), name, email, now, now)
        self.records[record.id] = record
        return record

    async def find_by_id(self, user_id: int) -> UserRecord:
        self._enter("find_by_id")
        if user_id not in self.records:
            raise RecordNotFoundError(user_id)
        return self.records[user_id]

    async def find_by_email(self, email: str) -> UserRecord:
        self._enter("find_by_email")
        for record in self.records.values():
            if record.email == email:
                return record
        raise RecordNotFoundError(email)

    async def list(self, limit: int, offset: int) -> List[UserRecord]:
        self._enter("list")
        ordered = [self.records[key] for key in sorted(self.records)]
        return ordered[offset:offset + limit]

    async def count(self) -> int:
        self._enter("count")
        return len(self.records)

    async def insert(self, name: str, email: str) -> UserRecord:
        self._enter("insert")
        if self._conflicts(email):
            raise EmailConflictError(email)
        return self.add(name, email)

    async def update(self, user_id: int, name: str, email: str) -> UserRecord:
        self._enter("update")
        if user_id not in self.records:
            raise RecordNotFoundError(user_id)
        if self._conflicts(email, user_id):
            raise EmailConflictError(email)
        current = self.records[user_id]
        updated = UserRecord(user_id, name, email, current.created_at, self._tick())
        self.records[user_id] = updated
        return updated

    async def delete(self, user_id: int) -> None:
        self._enter("delete")
        if self.records.pop(user_id, None) is None:
            raise RecordNotFoundError(user_id)


@pytest.fixture()
def fake_store() -> FakeUserStore:
    return FakeUserStore()


@pytest.fixture()
def service(fake_store: FakeUserStore) -> UserService:
    return UserService(fake_store)


@pytest.fixture()
def db_path(tmp_path: Path) -> str:
    path = str(tmp_path / "users.sqlite3")
    init_db(path)
    return path


@pytest.fixture()
def sqlite_store(db_path: str) -> SQLiteUserStore:
    return SQLiteUserStore(db_path)


@pytest.fixture()
def client(sqlite_store: SQLiteUserStore):
    app = create_app(store=sqlite_store)
    with TestClient(app) as test_client:
        yield test_client

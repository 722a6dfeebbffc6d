"""
pytest configuration and fixtures.

Loads environment variables from .env file for all tests and provides an
in-memory RemoteStore whose calls can be held open or made to fail.
"""

import asyncio
from pathlib import Path
from typing import Optional
from uuid import uuid4

import pytest
from dotenv import load_dotenv

from gated.db.remote_store import RemoteStore
from gated.sync.collection import SessionStore
from gated.sync.coordinator import SyncCoordinator

OWNER_ID = "d5314b80-4aac-4bf2-940c-0a0ceda5bff4"


def pytest_configure(config):
    """Load .env file before running tests"""
    project_root = Path(__file__).parent.parent
    env_file = project_root / ".env"

    if env_file.exists():
        print(f"Loading environment from {env_file}")
        load_dotenv(env_file)


class FakeRemoteStore(RemoteStore):
    """
    In-memory RemoteStore.

    Set `hold` to an asyncio.Event to keep calls outstanding until it is set;
    set `insert_error` / `delete_error` / `select_error` to make calls fail.
    Set `select_gate` to take the select snapshot first and return it only
    once the gate is set, like a read that started before later writes.
    """

    def __init__(self):
        self.tables: dict[str, list[dict]] = {"garments": [], "orders": [], "drops": []}
        self.hold: Optional[asyncio.Event] = None
        self.insert_error: Optional[Exception] = None
        self.delete_error: Optional[Exception] = None
        self.select_error: Optional[Exception] = None
        self.select_gate: Optional[asyncio.Event] = None
        self.calls: list[tuple[str, str]] = []

    async def _wait(self):
        if self.hold is not None:
            await self.hold.wait()

    def seed(self, table: str, row: dict) -> dict:
        row = {"id": str(uuid4()), "owner_id": OWNER_ID, **row}
        self.tables[table].append(row)
        return row

    async def insert(self, table: str, row: dict) -> dict:
        self.calls.append(("insert", table))
        await self._wait()
        if self.insert_error is not None:
            raise self.insert_error
        created = {"id": str(uuid4()), **row}
        self.tables[table].append(created)
        return dict(created)

    async def delete(self, table: str, entity_id: str) -> None:
        self.calls.append(("delete", table))
        await self._wait()
        if self.delete_error is not None:
            raise self.delete_error
        self.tables[table] = [r for r in self.tables[table] if r["id"] != entity_id]

    async def select(self, table: str, owner_id: str) -> list[dict]:
        self.calls.append(("select", table))
        await self._wait()
        if self.select_error is not None:
            raise self.select_error
        rows = [dict(r) for r in self.tables[table] if r.get("owner_id") == owner_id]
        if self.select_gate is not None:
            await self.select_gate.wait()
        return list(reversed(rows))


@pytest.fixture
def remote_store() -> FakeRemoteStore:
    return FakeRemoteStore()


@pytest.fixture
def session_store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def coordinator(
    session_store: SessionStore, remote_store: FakeRemoteStore
) -> SyncCoordinator:
    return SyncCoordinator(session_store, remote_store, OWNER_ID)

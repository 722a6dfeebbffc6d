"""
Tests for Session and SessionRegistry.
"""

import asyncio
from datetime import date

import pytest

from gated.models.garment import Category, GarmentEntity
from gated.sync import mappers
from gated.sync.session import SessionRegistry

OWNER_ID = "d5314b80-4aac-4bf2-940c-0a0ceda5bff4"


def make_garment(name: str = "Box Logo Hoodie") -> GarmentEntity:
    return GarmentEntity(
        name=name,
        brand="Supreme",
        category=Category.TOPS,
        image_url="https://picsum.photos/400/400?random=1",
        date_added=date(2023, 10, 15),
    )


@pytest.fixture
def registry(remote_store) -> SessionRegistry:
    return SessionRegistry(remote_store)


@pytest.mark.asyncio
async def test_start_loads_collections(registry, remote_store):
    remote_store.seed("garments", mappers.garment_to_row(make_garment()))

    session = await registry.start(OWNER_ID)

    assert session.active
    assert [g.name for g in session.garments] == ["Box Logo Hoodie"]
    assert registry.get(OWNER_ID) is session


@pytest.mark.asyncio
async def test_start_reuses_active_session(registry, remote_store):
    first = await registry.start(OWNER_ID)
    second = await registry.start(OWNER_ID)

    assert first is second
    assert remote_store.calls.count(("select", "garments")) == 1


@pytest.mark.asyncio
async def test_end_clears_and_discards_in_flight(registry, remote_store):
    session = await registry.start(OWNER_ID)
    remote_store.hold = asyncio.Event()
    task = session.coordinator.garments.create(make_garment())
    epoch = session.epoch

    assert registry.end(OWNER_ID)
    assert not session.active
    assert session.epoch == epoch + 1
    assert session.garments == ()
    assert registry.get(OWNER_ID) is None

    remote_store.hold.set()
    await task

    # The row landed in the store, but the ended session never sees it
    assert len(remote_store.tables["garments"]) == 1
    assert session.garments == ()
    assert session.drain_notices() == []


def test_end_unknown_session(registry):
    assert registry.end(OWNER_ID) is False


@pytest.mark.asyncio
async def test_close_waits_for_outstanding_calls(registry, remote_store):
    session = await registry.start(OWNER_ID)
    remote_store.hold = asyncio.Event()
    session.coordinator.garments.create(make_garment())

    closing = asyncio.ensure_future(registry.close())
    await asyncio.sleep(0)
    assert not closing.done()

    remote_store.hold.set()
    await closing

    assert len(remote_store.tables["garments"]) == 1
    assert registry.get(OWNER_ID) is None
    assert session.coordinator.pending == 0

"""
Tests for SqlRemoteStore against a SQLite database file.
"""

from datetime import date, datetime, timezone
from uuid import UUID, uuid4

import pytest

from gated.db import DatabaseConnection, SqlRemoteStore, UnitOfWork
from gated.errors import NetworkError
from gated.models.drop import DropEntity
from gated.models.garment import Category, GarmentEntity
from gated.models.order import Carrier
from gated.sync import mappers

OWNER_ID = "d5314b80-4aac-4bf2-940c-0a0ceda5bff4"


@pytest.fixture
def database(tmp_path):
    DatabaseConnection.initialize(
        f"sqlite+pysqlite:///{tmp_path / 'gated.db'}", create_tables=True
    )
    yield
    DatabaseConnection.close()


@pytest.fixture
def store(database) -> SqlRemoteStore:
    return SqlRemoteStore()


@pytest.fixture
def sample_garment() -> GarmentEntity:
    return GarmentEntity(
        name="Box Logo Hoodie",
        brand="Supreme",
        category=Category.TOPS,
        color="Heather Grey",
        image_url="https://picsum.photos/400/400?random=1",
        date_added=date(2023, 10, 15),
    )


@pytest.mark.asyncio
async def test_insert_assigns_server_id(store, sample_garment):
    row = await store.insert("garments", mappers.garment_to_row(sample_garment, OWNER_ID))

    UUID(row["id"])
    assert row["owner_id"] == OWNER_ID
    assert row["created_at"] is not None

    loaded = mappers.garment_from_row(row)
    assert loaded == sample_garment.model_copy(update={"id": row["id"]})


@pytest.mark.asyncio
async def test_insert_ignores_unknown_columns(store, sample_garment):
    data = mappers.garment_to_row(sample_garment, OWNER_ID)
    data["favorite"] = True

    row = await store.insert("garments", data)

    assert "favorite" not in row


@pytest.mark.asyncio
async def test_select_is_owner_scoped_newest_first(store, sample_garment):
    other_owner = str(uuid4())
    first = await store.insert(
        "garments", mappers.garment_to_row(sample_garment, OWNER_ID)
    )
    second = await store.insert(
        "garments",
        mappers.garment_to_row(
            sample_garment.model_copy(update={"name": "Tee"}), OWNER_ID
        ),
    )
    await store.insert("garments", mappers.garment_to_row(sample_garment, other_owner))

    rows = await store.select("garments", OWNER_ID)

    assert [row["id"] for row in rows] == [second["id"], first["id"]]


@pytest.mark.asyncio
async def test_order_history_round_trip(store):
    order = mappers.simulated_order(Carrier.FEDEX, "7777", "Jacket")
    row = await store.insert("orders", mappers.order_to_row(order, OWNER_ID))

    [loaded_row] = await store.select("orders", OWNER_ID)
    loaded = mappers.order_from_row(loaded_row)

    assert loaded.id == row["id"]
    assert loaded.history == order.history
    assert loaded.is_simulated
    # Display sentinel is stored as null and read back as pending
    assert loaded_row["estimated_delivery"] is None
    assert loaded.estimated_delivery == "Pending"


@pytest.mark.asyncio
async def test_drop_round_trip(store):
    drop = DropEntity(
        brand="Nike", name="Dunk Low", date=date(2025, 7, 4), time="02:30 PM UTC"
    )
    await store.insert("drops", mappers.drop_to_row(drop, OWNER_ID))

    [loaded_row] = await store.select("drops", OWNER_ID)
    loaded = mappers.drop_from_row(loaded_row)

    assert loaded.date == date(2025, 7, 4)
    assert loaded.time == "02:30 PM UTC"
    assert loaded.notified is True


@pytest.mark.asyncio
async def test_delete(store, sample_garment):
    row = await store.insert("garments", mappers.garment_to_row(sample_garment, OWNER_ID))

    await store.delete("garments", row["id"])

    assert await store.select("garments", OWNER_ID) == []


@pytest.mark.asyncio
async def test_delete_missing_row_is_not_an_error(store):
    await store.delete("garments", str(uuid4()))


@pytest.mark.asyncio
async def test_uninitialized_database_is_network_error(sample_garment):
    store = SqlRemoteStore()

    with pytest.raises(NetworkError):
        await store.insert("garments", mappers.garment_to_row(sample_garment, OWNER_ID))


def test_unit_of_work_rejects_unknown_table(database):
    with UnitOfWork() as uow:
        with pytest.raises(KeyError):
            uow.repository("socks")


def test_repository_defaults(database):
    with UnitOfWork() as uow:
        row = uow.drops.insert(
            {
                "owner_id": OWNER_ID,
                "brand": "Nike",
                "name": "Dunk Low",
                "drop_datetime": datetime(2025, 7, 4, tzinfo=timezone.utc),
            }
        )
        uow.commit()

    assert row["notified"] is False
    assert row["image_url"] is None

import asyncio
import uuid

import pytest

from conftest import movement_rows, stock_of
from core.errors import DatabaseError, InvalidQuantity, ItemNotFound, NotFound, NotModified
from db.models import Drum, Toner
from services import stock_ledger


async def test_create_adds_quantity_to_toner_stock(db, session_maker, catalog):
    created = await stock_ledger.create_movement(db, catalog["printer"], catalog["toner"], 10)

    assert created["item_type"] == "toner"
    assert created["stock"] == 10
    assert await stock_of(session_maker, Toner, catalog["toner"]) == 10

    rows = await movement_rows(session_maker)
    assert len(rows) == 1
    assert rows[0].id == created["id"]
    assert rows[0].printer_id == catalog["printer"]
    assert rows[0].item_id == catalog["toner"]
    assert rows[0].quantity == 10
    assert rows[0].created_at is not None


async def test_create_adds_quantity_to_drum_stock(db, session_maker, catalog):
    await stock_ledger.create_movement(db, catalog["printer"], catalog["drum"], 3)

    assert await stock_of(session_maker, Drum, catalog["drum"]) == 8
    # the toner with the same printer is untouched
    assert await stock_of(session_maker, Toner, catalog["toner"]) == 0


async def test_create_treats_null_stock_as_zero(db, session_maker, catalog):
    toner_id = uuid.uuid4()
    async with session_maker() as s:
        s.add(Toner(id=toner_id, name="TN-2420", stock=None))
        await s.commit()

    created = await stock_ledger.create_movement(db, catalog["printer"], toner_id, 4)
    assert created["stock"] == 4
    assert await stock_of(session_maker, Toner, toner_id) == 4


async def test_create_zero_quantity_writes_nothing(db, session_maker, catalog):
    with pytest.raises(InvalidQuantity):
        await stock_ledger.create_movement(db, catalog["printer"], catalog["toner"], 0)

    assert await stock_of(session_maker, Toner, catalog["toner"]) == 0
    assert await movement_rows(session_maker) == []


async def test_create_negative_quantity_writes_nothing(db, session_maker, catalog):
    with pytest.raises(InvalidQuantity):
        await stock_ledger.create_movement(db, catalog["printer"], catalog["drum"], -2)

    assert await stock_of(session_maker, Drum, catalog["drum"]) == 5
    assert await movement_rows(session_maker) == []


async def test_create_unknown_item_writes_nothing(db, session_maker, catalog):
    with pytest.raises(ItemNotFound):
        await stock_ledger.create_movement(db, catalog["printer"], uuid.uuid4(), 5)

    assert await movement_rows(session_maker) == []


async def test_create_unknown_printer_writes_nothing(db, session_maker, catalog):
    with pytest.raises(NotFound):
        await stock_ledger.create_movement(db, uuid.uuid4(), catalog["toner"], 5)

    assert await stock_of(session_maker, Toner, catalog["toner"]) == 0
    assert await movement_rows(session_maker) == []


async def test_failed_insert_rolls_back_stock_increment(session_maker, catalog, monkeypatch):
    async with session_maker() as s:
        first = await stock_ledger.create_movement(s, catalog["printer"], catalog["toner"], 1)

    # Reusing the id makes the movement INSERT fail after the stock UPDATE ran.
    monkeypatch.setattr(stock_ledger.uuid, "uuid4", lambda: first["id"])
    async with session_maker() as s:
        with pytest.raises(DatabaseError) as exc:
            await stock_ledger.create_movement(s, catalog["printer"], catalog["toner"], 5)

    assert exc.value.cause is not None
    assert await stock_of(session_maker, Toner, catalog["toner"]) == 1
    rows = await movement_rows(session_maker)
    assert [r.id for r in rows] == [first["id"]]


async def test_concurrent_creates_on_same_item_lose_no_update(session_maker, catalog):
    quantities = [1, 2, 3, 4, 5, 6, 7, 8]

    async def record(q):
        async with session_maker() as s:
            return await stock_ledger.create_movement(s, catalog["printer"], catalog["toner"], q)

    results = await asyncio.gather(*(record(q) for q in quantities))

    assert len({r["id"] for r in results}) == len(quantities)
    assert await stock_of(session_maker, Toner, catalog["toner"]) == sum(quantities)
    rows = await movement_rows(session_maker)
    assert len(rows) == len(quantities)
    assert sorted(r.quantity for r in rows) == quantities


async def test_update_missing_movement(db, catalog):
    with pytest.raises(NotFound):
        await stock_ledger.update_movement(db, uuid.uuid4(), quantity=3)


async def test_update_without_fields_is_not_modified(db, catalog):
    created = await stock_ledger.create_movement(db, catalog["printer"], catalog["toner"], 2)
    with pytest.raises(NotModified):
        await stock_ledger.update_movement(db, created["id"])


async def test_update_with_current_values_is_not_modified(db, catalog):
    created = await stock_ledger.create_movement(db, catalog["printer"], catalog["toner"], 2)
    with pytest.raises(NotModified):
        await stock_ledger.update_movement(
            db,
            created["id"],
            printer_id=catalog["printer"],
            item_id=catalog["toner"],
            quantity=2,
        )


async def test_update_quantity_leaves_stock_alone(db, session_maker, catalog):
    created = await stock_ledger.create_movement(db, catalog["printer"], catalog["toner"], 10)

    updated = await stock_ledger.update_movement(db, created["id"], quantity=25)

    assert updated == created["id"]
    rows = await movement_rows(session_maker)
    assert rows[0].quantity == 25
    assert await stock_of(session_maker, Toner, catalog["toner"]) == 10


async def test_update_item_to_drum(db, session_maker, catalog):
    created = await stock_ledger.create_movement(db, catalog["printer"], catalog["toner"], 1)

    await stock_ledger.update_movement(db, created["id"], item_id=catalog["drum"])

    rows = await movement_rows(session_maker)
    assert rows[0].item_id == catalog["drum"]
    assert await stock_of(session_maker, Drum, catalog["drum"]) == 5


async def test_update_to_unknown_item_is_rejected(db, session_maker, catalog):
    created = await stock_ledger.create_movement(db, catalog["printer"], catalog["toner"], 1)

    with pytest.raises(ItemNotFound):
        await stock_ledger.update_movement(db, created["id"], item_id=uuid.uuid4())

    rows = await movement_rows(session_maker)
    assert rows[0].item_id == catalog["toner"]


async def test_update_to_zero_quantity_is_rejected(db, catalog):
    created = await stock_ledger.create_movement(db, catalog["printer"], catalog["toner"], 1)
    with pytest.raises(InvalidQuantity):
        await stock_ledger.update_movement(db, created["id"], quantity=0)


async def test_delete_missing_movement(db, catalog):
    with pytest.raises(NotFound):
        await stock_ledger.delete_movement(db, uuid.uuid4())


async def test_delete_keeps_stock(db, session_maker, catalog):
    created = await stock_ledger.create_movement(db, catalog["printer"], catalog["drum"], 4)

    deleted = await stock_ledger.delete_movement(db, created["id"])

    assert deleted == created["id"]
    assert await movement_rows(session_maker) == []
    assert await stock_of(session_maker, Drum, catalog["drum"]) == 9

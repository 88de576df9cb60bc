import uuid
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine

from db.database import build_session_maker, create_db_and_tables
from db.models import Brand, Drum, Movement, Printer, Toner


@pytest.fixture
async def engine(tmp_path):
    # File-backed so concurrent sessions get their own connections.
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    await create_db_and_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return build_session_maker(engine)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def catalog(session_maker):
    """One brand, one printer, a toner with stock 0 and a drum with stock 5."""
    ids = {
        "brand": uuid.uuid4(),
        "printer": uuid.uuid4(),
        "toner": uuid.uuid4(),
        "drum": uuid.uuid4(),
    }
    async with session_maker() as s:
        s.add(Brand(id=ids["brand"], name="Brother"))
        s.add(Toner(id=ids["toner"], name="TN-1060", stock=0, price=Decimal("19.90")))
        s.add(Drum(id=ids["drum"], name="DR-1060", stock=5, price=None))
        await s.flush()
        s.add(
            Printer(
                id=ids["printer"],
                name="Front desk",
                model="HL-1212W",
                brand_id=ids["brand"],
                toner_id=ids["toner"],
                drum_id=ids["drum"],
            )
        )
        await s.commit()
    return ids


@pytest.fixture
async def client(engine):
    from main import create_app

    app = create_app(engine=engine)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


async def stock_of(session_maker, model, item_id):
    async with session_maker() as s:
        res = await s.execute(select(model.stock).where(model.id == item_id))
        return res.scalar_one()


async def movement_rows(session_maker):
    async with session_maker() as s:
        res = await s.execute(select(Movement).order_by(Movement.created_at))
        return res.scalars().all()

"""
Catalog lookups consumed by the movement ledger.

Each probe answers "does this id exist in that table" and nothing else;
catalog CRUD itself lives elsewhere.
"""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Drum, Printer, Toner


async def _exists(db: AsyncSession, column, value: UUID) -> bool:
    res = await db.execute(select(column).where(column == value))
    return res.first() is not None


async def toner_exists(db: AsyncSession, toner_id: UUID) -> bool:
    return await _exists(db, Toner.id, toner_id)


async def drum_exists(db: AsyncSession, drum_id: UUID) -> bool:
    return await _exists(db, Drum.id, drum_id)


async def printer_exists(db: AsyncSession, printer_id: UUID) -> bool:
    return await _exists(db, Printer.id, printer_id)

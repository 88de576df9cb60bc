"""
Movement read path.

Rows are denormalized with the printer and whichever of toners/drums the
item_id matches. Toner columns win when both tables match, the same
tie-break the resolver applies on writes.
"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import NotFound
from db.models import Drum, Movement, Printer, Toner


def _item_type_expr():
    return case(
        (Toner.id.is_not(None), "toner"),
        (Drum.id.is_not(None), "drum"),
        else_=None,
    )


def _details_stmt():
    is_toner = Toner.id.is_not(None)
    stmt = (
        select(
            Movement,
            Printer.name.label("printer_name"),
            Printer.model.label("printer_model"),
            _item_type_expr().label("item_type"),
            case((is_toner, Toner.name), else_=Drum.name).label("item_name"),
            case((is_toner, Toner.stock), else_=Drum.stock).label("item_stock"),
            case((is_toner, Toner.price), else_=Drum.price).label("item_price"),
        )
        .outerjoin(Printer, Movement.printer_id == Printer.id)
        .outerjoin(Toner, Movement.item_id == Toner.id)
        .outerjoin(Drum, Movement.item_id == Drum.id)
    )
    return stmt


def _filter_item_type(stmt, item_type: Optional[str]):
    if item_type == "toner":
        stmt = stmt.where(Toner.id.is_not(None))
    elif item_type == "drum":
        stmt = stmt.where(Toner.id.is_(None)).where(Drum.id.is_not(None))
    return stmt


def _row_out(row) -> dict:
    mv = row.Movement
    printer = None
    if row.printer_name is not None:
        printer = {"id": mv.printer_id, "name": row.printer_name, "model": row.printer_model}
    return {
        "id": mv.id,
        "printer": printer,
        "item": {
            "id": mv.item_id,
            "type": row.item_type,
            "name": row.item_name,
            "stock": int(row.item_stock) if row.item_stock is not None else None,
            "price": float(row.item_price) if row.item_price is not None else None,
        },
        "quantity": int(mv.quantity),
        "created_at": mv.created_at,
    }


async def count_movements(db: AsyncSession, item_type: Optional[str] = None) -> int:
    if item_type is None:
        res = await db.execute(select(func.count()).select_from(Movement))
        return int(res.scalar_one())

    stmt = (
        select(func.count())
        .select_from(Movement)
        .outerjoin(Toner, Movement.item_id == Toner.id)
        .outerjoin(Drum, Movement.item_id == Drum.id)
    )
    res = await db.execute(_filter_item_type(stmt, item_type))
    return int(res.scalar_one())


async def get_movement(db: AsyncSession, movement_id: UUID) -> dict:
    res = await db.execute(_details_stmt().where(Movement.id == movement_id))
    row = res.first()
    if row is None:
        raise NotFound(details=f"No movement with id {movement_id}")
    return _row_out(row)


async def list_movements(db: AsyncSession, item_type: Optional[str] = None) -> List[dict]:
    stmt = _filter_item_type(_details_stmt(), item_type)
    stmt = stmt.order_by(Movement.created_at.asc(), Movement.id.asc())
    res = await db.execute(stmt)
    return [_row_out(row) for row in res.all()]

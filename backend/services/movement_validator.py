"""
Preconditions for movement writes.

Every check here runs before any mutating statement; a failure leaves the
database untouched.
"""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import InvalidQuantity, ItemNotFound, NotFound, ValidationError
from db.models import Movement
from services.catalog import printer_exists
from services.item_resolver import ItemRef, resolve

logger = logging.getLogger(__name__)


def parse_id(raw: str) -> UUID:
    try:
        return UUID(str(raw))
    except (TypeError, ValueError):
        raise ValidationError(details=f"Invalid UUID: {raw!r}")


def check_create_quantity(quantity: int) -> None:
    # Consumption and replenishment are both recorded as positive deltas
    if quantity is None or quantity <= 0:
        raise InvalidQuantity(details=f"quantity must be greater than zero, got {quantity}")


def check_update_quantity(quantity: int) -> None:
    if quantity == 0:
        raise InvalidQuantity(details="quantity cannot be zero")


async def require_item(db: AsyncSession, item_id: UUID) -> ItemRef:
    ref = await resolve(db, item_id)
    if ref is None:
        logger.warning("Item %s is neither a toner nor a drum", item_id)
        raise ItemNotFound(details=f"No toner or drum with id {item_id}")
    return ref


async def require_printer(db: AsyncSession, printer_id: UUID) -> None:
    if not await printer_exists(db, printer_id):
        logger.warning("Printer %s not found", printer_id)
        raise NotFound(details=f"No printer with id {printer_id}")


async def require_movement(db: AsyncSession, movement_id: UUID, *, lock: bool = False) -> Movement:
    stmt = select(Movement).where(Movement.id == movement_id)
    if lock:
        stmt = stmt.with_for_update()
    res = await db.execute(stmt)
    mv = res.scalar_one_or_none()
    if mv is None:
        logger.warning("Movement %s not found", movement_id)
        raise NotFound(details=f"No movement with id {movement_id}")
    return mv


async def validate_create(db: AsyncSession, printer_id: UUID, item_id: UUID, quantity: int) -> ItemRef:
    """Resolve the item and check the request; returns the resolved item."""
    ref = await require_item(db, item_id)
    check_create_quantity(quantity)
    await require_printer(db, printer_id)
    return ref


async def validate_update(
    db: AsyncSession,
    printer_id: Optional[UUID],
    item_id: Optional[UUID],
    quantity: Optional[int],
) -> None:
    if quantity is not None:
        check_update_quantity(quantity)
    if item_id is not None:
        await require_item(db, item_id)
    if printer_id is not None:
        await require_printer(db, printer_id)

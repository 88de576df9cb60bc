"""
Stock ledger write path.

create_movement applies the stock delta and appends the movement row in one
transaction. update_movement and delete_movement only touch the movement
row; the stock counter is left as it is.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ApiError, DatabaseError, ItemNotFound, NotModified
from db.models import Movement
from services.item_resolver import ItemRef
from services.movement_validator import require_movement, validate_create, validate_update

logger = logging.getLogger(__name__)


async def _apply_stock_delta(db: AsyncSession, ref: ItemRef, delta: int) -> int:
    model = ref.model
    # Single in-place increment; the row lock is held until commit.
    stmt = (
        update(model)
        .where(model.id == ref.id)
        .values(stock=func.coalesce(model.stock, 0) + delta)
        .returning(model.stock)
        .execution_options(synchronize_session=False)
    )
    new_stock = (await db.execute(stmt)).scalar_one_or_none()
    if new_stock is None:
        raise ItemNotFound(details=f"{ref.kind.capitalize()} {ref.id} disappeared before the movement was recorded")
    return int(new_stock)


async def create_movement(db: AsyncSession, printer_id: UUID, item_id: UUID, quantity: int) -> dict:
    movement_id = uuid.uuid4()
    try:
        ref = await validate_create(db, printer_id, item_id, quantity)
        new_stock = await _apply_stock_delta(db, ref, quantity)
        db.add(
            Movement(
                id=movement_id,
                printer_id=printer_id,
                item_id=ref.id,
                quantity=quantity,
                created_at=datetime.now(timezone.utc),
            )
        )
        await db.commit()
    except ApiError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("create_movement failed for item %s", item_id)
        raise DatabaseError(e) from e

    logger.info("Movement %s created: %s %s %+d (stock now %d)", movement_id, ref.kind, ref.id, quantity, new_stock)
    return {"id": movement_id, "item_type": ref.kind, "stock": new_stock}


async def update_movement(
    db: AsyncSession,
    movement_id: UUID,
    printer_id: Optional[UUID] = None,
    item_id: Optional[UUID] = None,
    quantity: Optional[int] = None,
) -> UUID:
    try:
        mv = await require_movement(db, movement_id, lock=True)

        changes = {}
        if printer_id is not None and printer_id != mv.printer_id:
            changes["printer_id"] = printer_id
        if item_id is not None and item_id != mv.item_id:
            changes["item_id"] = item_id
        if quantity is not None and quantity != mv.quantity:
            changes["quantity"] = quantity

        if not changes:
            logger.warning("No updates were made for movement %s", movement_id)
            raise NotModified(details=f"Movement {movement_id} already matches the request")

        await validate_update(
            db,
            printer_id=changes.get("printer_id"),
            item_id=changes.get("item_id"),
            quantity=changes.get("quantity"),
        )

        # Stock is not re-applied when quantity or item changes.
        for field, value in changes.items():
            setattr(mv, field, value)
        await db.commit()
    except ApiError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("update_movement failed for %s", movement_id)
        raise DatabaseError(e) from e

    logger.info("Movement %s updated: %s", movement_id, ", ".join(sorted(changes)))
    return movement_id


async def delete_movement(db: AsyncSession, movement_id: UUID) -> UUID:
    try:
        mv = await require_movement(db, movement_id, lock=True)
        # The stock delta this movement applied stays in place.
        await db.delete(mv)
        await db.commit()
    except ApiError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("delete_movement failed for %s", movement_id)
        raise DatabaseError(e) from e

    logger.info("Movement %s deleted", movement_id)
    return movement_id

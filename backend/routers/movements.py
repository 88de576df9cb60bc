from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from db.database import get_async_session
from schemas.movements import (
    ItemType,
    MovementCreate,
    MovementDelete,
    MovementDetails,
    MovementId,
    MovementUpdate,
)
from services import movement_queries, stock_ledger
from services.movement_validator import parse_id

router = APIRouter()


@router.get("/count", response_model=int)
async def count_movements(
    item_type: Optional[ItemType] = None,
    db: AsyncSession = Depends(get_async_session),
):
    """Count movements, optionally only those against toners or drums."""
    return await movement_queries.count_movements(db, item_type=item_type)


@router.get("/{movement_id}", response_model=MovementDetails)
async def get_movement(movement_id: str, db: AsyncSession = Depends(get_async_session)):
    return await movement_queries.get_movement(db, parse_id(movement_id))


@router.get("", response_model=List[MovementDetails])
async def list_movements(
    item_type: Optional[ItemType] = None,
    db: AsyncSession = Depends(get_async_session),
):
    """List movements, oldest first."""
    return await movement_queries.list_movements(db, item_type=item_type)


@router.post("", response_model=MovementId, status_code=status.HTTP_201_CREATED)
async def create_movement(payload: MovementCreate, db: AsyncSession = Depends(get_async_session)):
    """
    Record a movement and add its quantity to the item's stock.

    - item_id may name a toner or a drum.
    - quantity must be > 0.
    """
    created = await stock_ledger.create_movement(
        db,
        printer_id=payload.printer_id,
        item_id=payload.item_id,
        quantity=payload.quantity,
    )
    return {"id": created["id"]}


@router.put("", response_model=MovementId)
async def update_movement(payload: MovementUpdate, db: AsyncSession = Depends(get_async_session)):
    """Partially update a movement. Stock is not adjusted."""
    movement_id = await stock_ledger.update_movement(
        db,
        payload.id,
        printer_id=payload.printer_id,
        item_id=payload.item_id,
        quantity=payload.quantity,
    )
    return {"id": movement_id}


@router.delete("", response_model=MovementId)
async def delete_movement(payload: MovementDelete, db: AsyncSession = Depends(get_async_session)):
    """Delete a movement. Stock is not reversed."""
    movement_id = await stock_ledger.delete_movement(db, payload.id)
    return {"id": movement_id}

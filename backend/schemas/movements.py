from datetime import datetime
from typing import Annotated, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, StrictInt


ItemType = Literal["toner", "drum"]

# INTEGER column range; strings, floats and booleans are rejected
Quantity = Annotated[StrictInt, Field(ge=-2**31, le=2**31 - 1)]


class MovementCreate(BaseModel):
    printer_id: UUID
    item_id: UUID
    quantity: Quantity


class MovementUpdate(BaseModel):
    id: UUID
    printer_id: Optional[UUID] = None
    item_id: Optional[UUID] = None
    quantity: Optional[Quantity] = None


class MovementDelete(BaseModel):
    id: UUID


class MovementId(BaseModel):
    id: UUID


class PrinterDetails(BaseModel):
    id: UUID
    name: str
    model: str


class ItemDetails(BaseModel):
    id: UUID
    type: Optional[ItemType] = None
    name: Optional[str] = None
    stock: Optional[int] = None
    price: Optional[float] = None


class MovementDetails(BaseModel):
    id: UUID
    printer: Optional[PrinterDetails] = None
    item: ItemDetails
    quantity: int
    created_at: datetime

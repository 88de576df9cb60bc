"""
Item type resolution.

A movement's item_id points at either toners.id or drums.id. The two tables
are expected to be disjoint; when an id shows up in both, the toner wins.
"""
import logging
from dataclasses import dataclass
from typing import Literal, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Drum, Toner
from services.catalog import drum_exists, toner_exists

logger = logging.getLogger(__name__)

ItemKind = Literal["toner", "drum"]


@dataclass(frozen=True)
class ItemRef:
    kind: ItemKind
    id: UUID

    @property
    def model(self):
        """Mapped class backing this reference."""
        return Toner if self.kind == "toner" else Drum


async def resolve(db: AsyncSession, item_id: UUID) -> Optional[ItemRef]:
    is_toner = await toner_exists(db, item_id)
    is_drum = await drum_exists(db, item_id)

    if is_toner and is_drum:
        logger.warning("Item %s exists as both toner and drum; resolving as toner", item_id)
    if is_toner:
        return ItemRef(kind="toner", id=item_id)
    if is_drum:
        return ItemRef(kind="drum", id=item_id)
    return None

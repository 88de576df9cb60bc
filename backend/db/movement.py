import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Uuid

from .database import Base


class Movement(Base):
    __tablename__ = "movements"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    printer_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("printers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # toners.id OR drums.id; no FK, resolved by services.item_resolver
    item_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    quantity = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
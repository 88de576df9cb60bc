import uuid
from sqlalchemy import Column, ForeignKey, String, Uuid

from .database import Base


class Printer(Base):
    __tablename__ = "printers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False, unique=True, index=True)
    model = Column(String(50), nullable=False)

    brand_id = Column(Uuid(as_uuid=True), ForeignKey("brands.id", ondelete="SET NULL"), nullable=True, index=True)
    # Currently assigned consumables; movement history is keyed independently
    toner_id = Column(Uuid(as_uuid=True), ForeignKey("toners.id", ondelete="SET NULL"), nullable=True)
    drum_id = Column(Uuid(as_uuid=True), ForeignKey("drums.id", ondelete="SET NULL"), nullable=True)

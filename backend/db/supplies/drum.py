import uuid

from sqlalchemy import Column, Integer, Numeric, String, Uuid

from ..database import Base


class Drum(Base):
    __tablename__ = "drums"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False)
    stock = Column(Integer, nullable=True)
    price = Column(Numeric(6, 2), nullable=True)

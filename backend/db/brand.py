import uuid
from sqlalchemy import Column, String, Uuid

from .database import Base


class Brand(Base):
    __tablename__ = "brands"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False, unique=True, index=True)

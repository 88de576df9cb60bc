"""Registers every mapped table on Base.metadata."""
from .brand import Brand
from .movement import Movement
from .printer import Printer
from .supplies.drum import Drum
from .supplies.toner import Toner

__all__ = ["Brand", "Drum", "Movement", "Printer", "Toner"]

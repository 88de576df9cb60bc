from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class DatabaseStatus(BaseModel):
    version: str
    max_connections: Optional[int] = None
    opened_connections: Optional[int] = None


class Dependencies(BaseModel):
    database: DatabaseStatus


class StatusOut(BaseModel):
    updated_at: datetime
    dependencies: Dependencies

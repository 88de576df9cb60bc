import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import DatabaseError
from db.database import get_async_session
from schemas.status import StatusOut

router = APIRouter()
logger = logging.getLogger(__name__)


async def _postgres_connections(db: AsyncSession) -> dict:
    max_connections = (await db.execute(text("SHOW max_connections"))).scalar_one()
    opened = (
        await db.execute(
            text("SELECT count(*) FROM pg_stat_activity WHERE datname = current_database()")
        )
    ).scalar_one()
    return {"max_connections": int(max_connections), "opened_connections": int(opened)}


@router.get("", response_model=StatusOut)
async def show_status(db: AsyncSession = Depends(get_async_session)):
    """API and database status, for health checks."""
    try:
        conn = await db.connection()
        # Forces a round trip so a dead database surfaces as a 500.
        await db.execute(text("SELECT 1"))
        version_info = conn.dialect.server_version_info or ()
        database = {
            "version": ".".join(str(p) for p in version_info) or "unknown",
            "max_connections": None,
            "opened_connections": None,
        }
        if conn.dialect.name == "postgresql":
            database.update(await _postgres_connections(db))
    except SQLAlchemyError as e:
        logger.exception("Error retrieving database status")
        raise DatabaseError(e) from e

    logger.info("Status queried")
    return {
        "updated_at": datetime.now(timezone.utc),
        "dependencies": {"database": database},
    }

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine
import uvicorn

from core.config import settings
from core.errors import ApiError
from db.database import build_engine, build_session_maker, create_db_and_tables
from routers.movements import router as movements_router
from routers.status import router as status_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code == status.HTTP_304_NOT_MODIFIED:
        # 304 responses carry no body
        return Response(status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "code": "VALIDATION_ERROR",
            "message": "One or more validation errors occurred.",
            "details": details or None,
        },
    )


def create_app(engine: Optional[AsyncEngine] = None) -> FastAPI:
    """Build the API. Pass an engine to share an existing connection pool."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_engine = getattr(app.state, "engine", None) is None
        if owns_engine:
            app.state.engine = build_engine()
            app.state.session_maker = build_session_maker(app.state.engine)
        await create_db_and_tables(app.state.engine)
        yield
        if owns_engine:
            await app.state.engine.dispose()

    app = FastAPI(
        title="Printer Supplies API",
        description="Stock movement ledger for printer toners and drums",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    if engine is not None:
        app.state.engine = engine
        app.state.session_maker = build_session_maker(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(status_router, prefix=f"{settings.api_prefix}/status", tags=["status"])
    app.include_router(movements_router, prefix=f"{settings.api_prefix}/movements", tags=["movements"])

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=True)

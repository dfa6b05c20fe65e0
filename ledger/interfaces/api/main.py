# ledger/interfaces/api/main.py
from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response

from ledger.infrastructure.config import get_settings
from ledger.infrastructure.log import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    from ledger.infrastructure.duckdb_connection import get_connection
    configure_logging(get_settings().log_level)
    get_connection()  # applies the schema on startup
    yield


app = FastAPI(
    title="Ownership Ledger API",
    debug=get_settings().debug,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url=None,
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next: object) -> Response:
    response = await call_next(request)  # type: ignore[misc]
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Cache-Control"] = "no-store"
    return response  # type: ignore[return-value]


from ledger.interfaces.api.routes.dispute_routes import router as dispute_router  # noqa: E402
from ledger.interfaces.api.routes.ownership_routes import router as ownership_router  # noqa: E402
from ledger.interfaces.api.routes.role_routes import router as role_router  # noqa: E402
from ledger.interfaces.api.routes.verification_routes import router as verification_router  # noqa: E402

app.include_router(ownership_router, prefix="/api")
app.include_router(role_router, prefix="/api")
app.include_router(verification_router, prefix="/api")
app.include_router(dispute_router, prefix="/api")

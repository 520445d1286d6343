# main.py
# Role: Application entry point for the portfolio tracker API.
#       Builds the FastAPI app, wires the ledger store, runs schema
#       migrations on startup, and registers the route modules.

"""
Main FastAPI app for the personal portfolio tracker.

Here we only:
- create the FastAPI app (create_app)
- set up logging, CORS and error handlers
- run schema migrations at startup
- include route modules

Run locally:
    python main.py            (or: uvicorn main:app --reload --port 5001)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from db import SessionLocal, engine
from app.errors import LedgerError
from app.logging_config import log_requests, setup_logging
from app.routes_portfolio import router as portfolio_router
from app.routes_root import router as root_router
from app.services.ledger_store import LedgerStore
from app.services.migrations import run_migrations

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Error handlers
# -------------------------------------------------------------------

async def ledger_error_handler(request: Request, exc: LedgerError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # 400 with a readable message instead of FastAPI's default 422 payload
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        message = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
    else:
        message = "Invalid request."
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"error": message})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths, wrong methods: same {"error": ...} shape as everything else
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error in %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error."})


# -------------------------------------------------------------------
# App factory
# -------------------------------------------------------------------

def create_app(store: LedgerStore | None = None) -> FastAPI:
    """
    Build the API around `store`.

    Without a store, the default database (config.DATABASE_URL) is used
    and its migrations run when the app starts.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if store is None:
            run_migrations(engine)
            app.state.store = LedgerStore(SessionLocal)
        logger.info("Portfolio API ready")
        yield

    app = FastAPI(title="Portfolio Tracker", lifespan=lifespan)
    if store is not None:
        app.state.store = store

    app.add_middleware(CORSMiddleware, allow_origins=config.CORS_ORIGINS, allow_methods=["*"], allow_headers=["*"])
    app.middleware("http")(log_requests)

    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # -------------------------------------------------------------------
    # Include routers
    # -------------------------------------------------------------------

    # Root / health
    app.include_router(root_router)

    # Asset ledger CRUD + aggregates
    app.include_router(portfolio_router)

    return app


setup_logging(config.LOG_LEVEL)

# FastAPI application instance (uvicorn main:app)
app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info("Server is running on http://%s:%s", config.HOST, config.PORT)
    uvicorn.run(app, host=config.HOST, port=config.PORT)

"""FastAPI application entry point."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api import auth, categories, comments, issues, notifications, votes
from backend.app.core.config import settings
from backend.app.core.exception_handlers import register_exception_handlers
from backend.app.core.logging import configure_logging
from backend.app.repositories.factory import build_store
from backend.app.services.categories import seed_default_categories

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    configure_logging(settings.log_level, settings.log_format)

    # Startup: open the store and seed reference data
    store = await build_store(settings)
    app.state.store = store
    logger.info(f"[STARTUP] Store ready: {store.name}")

    if settings.seed_categories:
        await seed_default_categories(store)

    yield

    # Shutdown: release database connections
    await store.close()
    logger.info("[SHUTDOWN] Cleaned up resources")


app = FastAPI(
    title="CivicFix API",
    description="Civic issue reporting: report, vote, comment and track local problems",
    version="1.0.0",
    lifespan=lifespan,
)

# Register custom exception handlers
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"[HTTP] {request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)")
    return response


# Register routers
app.include_router(auth.router, prefix="/api")
app.include_router(issues.router, prefix="/api")
app.include_router(votes.router, prefix="/api")
app.include_router(comments.router, prefix="/api")
app.include_router(categories.router, prefix="/api")
app.include_router(notifications.router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "CivicFix API",
        "version": "1.0.0",
        "description": "Civic issue reporting backend",
    }


@app.get("/health")
@app.get("/api/health")
async def health_check(request: Request):
    """Health check endpoint."""
    store = getattr(request.app.state, "store", None)
    return {"status": "healthy", "store": store.name if store is not None else None}

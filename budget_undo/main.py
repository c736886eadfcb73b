"""Main application entry point"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from budget_undo.api.v1 import api_router
from budget_undo.config import resolve_history_path, settings
from budget_undo.core.logging import configure_logging
from budget_undo.services.history_store import HistoryStore
from budget_undo.services.tracked_client import TrackedYNABClient
from budget_undo.services.ynab_client import YNABClient


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    configure_logging(settings.LOG_LEVEL)
    history_path = resolve_history_path(settings)
    history_store = HistoryStore(history_path, max_entries=settings.HISTORY_MAX_ENTRIES)
    await history_store.load()
    logger.info("History loaded from %s (%d entries)", history_path, len(history_store.get_all()))

    ynab_client = YNABClient()
    app.state.history_store = history_store
    app.state.ynab_client = ynab_client
    app.state.tracked_client = TrackedYNABClient(ynab_client, history_store)
    yield
    # Shutdown
    logger.info("Shutting down")
    await ynab_client.aclose()


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Undo history for budgeting API writes",
    version="1.0.0",
    lifespan=lifespan,
)

# Include API routes
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

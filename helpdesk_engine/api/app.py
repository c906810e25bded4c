"""
Helpdesk Engine API

FastAPI application with:
- Ticket metrics (time series, resolution times, assignee stats)
- Metrics export as a downloadable document
- Per-user notification feed with read/clear operations

Tickets, tasks and users come from the repositories on app.state. The
defaults are in-memory; a deployment swaps in its own implementations.
"""

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..config import Settings, configure_logging, get_settings
from ..models import MetricsQuery, MetricsResult, TimeRange
from ..repositories import (
    MemoryLedgerRepository,
    MemoryTaskRepository,
    MemoryTicketRepository,
    MemoryUserDirectory,
)
from ..services import InvalidRangeError, MetricsEngine, NotificationStore


logger = logging.getLogger(__name__)


# =============================================================================
# APP SETUP
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings())
    logger.info("Helpdesk engine started")
    yield


app = FastAPI(
    title="Helpdesk Engine",
    description="Ticket metrics and per-user notification feed",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.tickets = MemoryTicketRepository()
app.state.tasks = MemoryTaskRepository()
app.state.users = MemoryUserDirectory()
app.state.ledgers = MemoryLedgerRepository()
app.state.notification_stores = {}


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_metrics_engine(settings: Settings = Depends(get_settings)) -> MetricsEngine:
    return MetricsEngine(settings)


def get_notification_store(
    user_id: str,
    request: Request,
    settings: Settings = Depends(get_settings)
) -> NotificationStore:
    """
    One store per user, least recently used evicted first.

    An evicted store is rebuilt from the ledger repository on next use;
    in-memory changes whose write failed are lost with it.
    """
    stores: Dict[str, NotificationStore] = request.app.state.notification_stores
    store = stores.pop(user_id, None)
    if store is None:
        store = NotificationStore(user_id, request.app.state.ledgers, settings=settings)
        while len(stores) >= settings.NOTIFICATION_STORE_CACHE_SIZE:
            evicted = next(iter(stores))
            del stores[evicted]
            logger.debug("Evicted notification store for %s", evicted)
    stores[user_id] = store
    return store


def build_query(
    time_range: TimeRange = TimeRange.MONTH,
    start: Optional[date] = None,
    end: Optional[date] = None,
    type_filter: str = Query("all", alias="type")
) -> MetricsQuery:
    try:
        return MetricsQuery(
            time_range=time_range, start=start, end=end, type_filter=type_filter
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown ticket type: {type_filter}"
        ) from e


async def run_metrics(
    request: Request,
    query: MetricsQuery,
    engine: MetricsEngine
) -> MetricsResult:
    tickets = await request.app.state.tickets.list()
    users = await request.app.state.users.list()
    try:
        return engine.compute(tickets, query, users)
    except InvalidRangeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


async def feed_response(store: NotificationStore, persisted: bool) -> dict:
    return {
        "user_id": store.user_id,
        "events": [e.model_dump(mode="json") for e in await store.events()],
        "unread_count": await store.unread_count(),
        "persisted": persisted
    }


# =============================================================================
# HEALTH CHECK
# =============================================================================

@app.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    return {
        "status": "healthy",
        "service": "helpdesk-engine",
        "version": settings.APP_VERSION
    }


# =============================================================================
# METRICS ENDPOINTS
# =============================================================================

@app.get("/metrics", response_model=MetricsResult)
async def get_metrics(
    request: Request,
    query: MetricsQuery = Depends(build_query),
    engine: MetricsEngine = Depends(get_metrics_engine)
):
    """
    Opened/closed series, resolution times and assignee stats.

    400 when a custom range ends before it starts.
    """
    return await run_metrics(request, query, engine)


@app.get("/metrics/export")
async def export_metrics(
    request: Request,
    query: MetricsQuery = Depends(build_query),
    engine: MetricsEngine = Depends(get_metrics_engine)
):
    """
    Same document as /metrics, served as a file download.
    """
    result = await run_metrics(request, query, engine)
    filename = engine.export_filename()
    return JSONResponse(
        content=engine.export_document(result),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


# =============================================================================
# NOTIFICATION ENDPOINTS
# =============================================================================

@app.get("/users/{user_id}/notifications")
async def get_notifications(
    user_id: str,
    request: Request,
    store: NotificationStore = Depends(get_notification_store)
):
    """
    Refresh the user's feed from current tickets and tasks, then list it.
    """
    tickets = await request.app.state.tickets.list()
    tasks = await request.app.state.tasks.list(user_id)
    delta = await store.refresh(tickets, tasks)
    return await feed_response(store, delta.persisted)


@app.post("/users/{user_id}/notifications/read-all")
async def mark_all_notifications_read(
    user_id: str,
    store: NotificationStore = Depends(get_notification_store)
):
    persisted = await store.mark_all_read()
    return await feed_response(store, persisted)


@app.post("/users/{user_id}/notifications/{event_id}/read")
async def mark_notification_read(
    user_id: str,
    event_id: str,
    store: NotificationStore = Depends(get_notification_store)
):
    persisted = await store.mark_read(event_id)
    return await feed_response(store, persisted)


@app.delete("/users/{user_id}/notifications/{event_id}")
async def clear_notification(
    user_id: str,
    event_id: str,
    store: NotificationStore = Depends(get_notification_store)
):
    persisted = await store.clear(event_id)
    return await feed_response(store, persisted)


@app.delete("/users/{user_id}/notifications")
async def clear_all_notifications(
    user_id: str,
    store: NotificationStore = Depends(get_notification_store)
):
    """
    Empty the feed. Tasks still due today come back on the next refresh;
    ticket assignments do not.
    """
    persisted = await store.clear_all()
    return await feed_response(store, persisted)


# =============================================================================
# RUN
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

"""
FastAPI app entrypoint.

Schedules Trello card actions (comment, due-complete) and runs them when due. A background
interval job sweeps the minute buckets every DISPATCH_INTERVAL_SECONDS.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load .env from the project root before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from trello_scheduler.api.routes import schedules
from trello_scheduler.config import settings
from trello_scheduler.core.constants import (
    DISPATCH_INTERVAL_SECONDS,
    DISPATCH_JOB_ID,
    STORE_PRUNE_INTERVAL_MINUTES,
    STORE_PRUNE_JOB_ID,
)
from trello_scheduler.scheduler.dispatch_job import get_dispatch_heartbeat, run_dispatch_job
from trello_scheduler.scheduler.store_prune_job import run_store_prune_job
from trello_scheduler.services.store import get_store

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_scheduler() -> BackgroundScheduler:
    """Periodic trigger: one sweep per interval; a late tick is coalesced, never stacked."""
    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.add_job(
        run_dispatch_job,
        "interval",
        seconds=DISPATCH_INTERVAL_SECONDS,
        id=DISPATCH_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    scheduler.add_job(
        run_store_prune_job,
        "interval",
        minutes=STORE_PRUNE_INTERVAL_MINUTES,
        id=STORE_PRUNE_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    return scheduler


@asynccontextmanager
async def lifespan(app: FastAPI):
    scheduler = create_scheduler()
    scheduler.start()
    app.state.scheduler = scheduler
    logger.info(
        "Scheduler ready: store=%s sweep every %ss, prune every %smin",
        settings.store_backend,
        DISPATCH_INTERVAL_SECONDS,
        STORE_PRUNE_INTERVAL_MINUTES,
    )
    yield
    scheduler.shutdown(wait=False)


app = FastAPI(title="Trello Action Scheduler", version="0.1.0", lifespan=lifespan)

# The browser extension calls from trello.com; CORS_ORIGINS (comma-separated) narrows it in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list(),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


app.include_router(schedules.router, tags=["schedules"])


@app.get("/", include_in_schema=False)
def root():
    """Root: point to API docs and health."""
    return {"message": "Trello Action Scheduler", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict:
    return {
        "status": "ok",
        "store": get_store().backend_id,
        "dispatch": get_dispatch_heartbeat(),
    }

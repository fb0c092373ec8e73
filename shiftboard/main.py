import logging

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from .config import get_settings
from .migration_runner import run_migrations_once
from .routers import (
    calendar,
    events,
    scheduled_shifts,
    schedules,
    shift_templates,
)

settings = get_settings()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)


@app.get("/")
async def root():
    return RedirectResponse(url="/docs", status_code=302)


@app.get("/health")
async def health():
    return {"status": "ok", "environment": settings.environment}


@app.on_event("startup")
async def ensure_schema() -> None:
    if not settings.run_migrations_on_startup:
        return
    try:
        run_migrations_once()
    except Exception:  # pragma: no cover - startup failures should surface
        logger.exception("Database migration failed")
        raise


app.include_router(shift_templates.router)
app.include_router(schedules.router)
app.include_router(scheduled_shifts.router)
app.include_router(events.router)
app.include_router(calendar.router)

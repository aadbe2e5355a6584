from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from descomplicar.api.admin import require_admin_key
from descomplicar.api.router import api_router
from descomplicar.config import get_settings
from descomplicar.db.database import init_db
from descomplicar.scheduler import (
    ExpirationTriggersJob,
    start_expiration_triggers_job,
    stop_expiration_triggers_job,
)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up...")
    await init_db()

    # Start the daily expiration triggers
    app.state.expiration_job = start_expiration_triggers_job(ExpirationTriggersJob())

    yield

    stop_expiration_triggers_job(app.state.expiration_job)
    logger.info("Shutting down...")


# Disable interactive docs in production
docs_url = None if settings.is_production else "/docs"
redoc_url = None if settings.is_production else "/redoc"

app = FastAPI(
    title="Descomplicar API",
    description="Dealership management: notification triggers and FIPE pricing",
    version="0.1.0",
    lifespan=lifespan,
    docs_url=docs_url,
    redoc_url=redoc_url,
)

# Configure CORS origins
default_origins = ["http://localhost:5173", "http://127.0.0.1:5173"]
if settings.cors_origins:
    cors_origins = [origin.strip() for origin in settings.cors_origins.split(",")]
else:
    cors_origins = default_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.get("/api/admin/status", dependencies=[Depends(require_admin_key)])
async def admin_status(request: Request):
    job = getattr(request.app.state, "expiration_job", None)

    jobs = []
    if job is not None:
        for scheduled in job.scheduler.get_jobs():
            jobs.append(
                {
                    "id": scheduled.id,
                    "name": scheduled.name,
                    "next_run": str(scheduled.next_run_time) if scheduled.next_run_time else None,
                }
            )

    return {
        "scheduler_running": job is not None and job.running,
        "jobs": jobs,
    }

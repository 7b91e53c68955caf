from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.requests import Request

from record_jobs.api.router import api_router
from record_jobs.core.config import Settings, get_settings
from record_jobs.core.errors import (
    DispatchTimeoutError,
    RecordJobError,
    RecordNotFoundError,
    ValidationError,
)
from record_jobs.core.telemetry import configure_logging, setup_telemetry, shutdown_telemetry

logger = logging.getLogger(__name__)


def error_status(exc: RecordJobError) -> int:
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, RecordNotFoundError):
        return 404
    if isinstance(exc, DispatchTimeoutError):
        return 504
    return 502


async def record_job_error_handler(request: Request, exc: RecordJobError) -> JSONResponse:
    status_code = error_status(exc)
    logger.warning("job failed path=%s status=%s error=%s", request.url.path, status_code, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc), "error": type(exc).__name__})


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        yield
    finally:
        shutdown_telemetry(app.state.telemetry, app=app)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Webhook app: automations POST a job request per record change."""
    settings = settings or get_settings()
    configure_logging()
    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.telemetry = setup_telemetry(settings, app=app)
    app.add_exception_handler(RecordJobError, record_job_error_handler)
    app.include_router(api_router)
    return app


app = create_app()

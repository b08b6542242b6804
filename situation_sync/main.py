from contextlib import asynccontextmanager
from pathlib import Path

from alembic import command
from alembic.config import Config
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from situation_sync.api.deps import TriggerUnauthorized
from situation_sync.api.routes import health, status, sync
from situation_sync.core.config import settings
from situation_sync.core.logging import get_logger
from situation_sync.schemas.api import ErrorResponse

log = get_logger("app")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def run_migrations() -> None:
    """Execute Alembic migrations programmatically on startup."""
    project_root = Path(__file__).resolve().parent.parent
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
    # keep loguru interception in place of alembic.ini logging
    alembic_cfg.attributes["skip_logging_config"] = True
    log.info("Running Alembic migrations to head")
    command.upgrade(alembic_cfg, "head")
    log.info("Alembic migrations applied")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info(f"Starting application in {settings.ENV.upper()} mode")
    if settings.auth_bypassed:
        log.warning("ENV=dev: sync triggers accept unauthenticated requests")
    elif not settings.accepted_tokens:
        log.warning("No CRON_SECRET or SERVICE_ROLE_KEY configured; every sync trigger will be rejected")

    if settings.RUN_MIGRATIONS_ON_STARTUP:
        try:
            run_migrations()
        except Exception:
            log.exception("Failed to apply migrations on startup")
            raise

    yield

    log.info("Application shutdown complete")


app = FastAPI(
    title="Situation Sync",
    description="Scheduled ingestion of public situational-awareness feeds",
    version="1.0.0",
    lifespan=lifespan,
    # Disable docs in production
    docs_url="/docs" if settings.docs_enabled else None,
    redoc_url="/redoc" if settings.docs_enabled else None,
    openapi_url="/openapi.json" if settings.docs_enabled else None,
    debug=settings.debug_enabled,
)


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(TriggerUnauthorized)
async def unauthorized_handler(request: Request, exc: TriggerUnauthorized):
    return JSONResponse(status_code=401, content=ErrorResponse(error="Unauthorized").model_dump())


app.include_router(sync.router)
app.include_router(status.router)
app.include_router(health.router)

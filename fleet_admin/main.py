from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fleet_admin.core.config import settings
from fleet_admin.core.logging import configure_logging
from fleet_admin.db.session import Database
from fleet_admin.emails.logo import LogoResolver
from fleet_admin.services.mailer import Mailer
from fleet_admin.services.storage_service import StorageClient, StorageConfig
from fleet_admin.api.v1.api import api_router
from fleet_admin.api.uploads import router as uploads_router

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)
    app.state.db = Database(settings.DATABASE_URL)
    app.state.mailer = Mailer.from_settings(settings)
    app.state.logo = LogoResolver(settings.logo_url, settings.LOGO_DIR)
    app.state.storage = StorageClient(StorageConfig.from_settings(settings))
    log.info("app.started", env=settings.ENV, mailer_configured=app.state.mailer.is_configured)
    try:
        yield
    finally:
        app.state.storage.close()
        app.state.mailer.close()
        app.state.db.dispose()
        log.info("app.stopped")


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# CORS: use CORS_ORIGINS from env in production; default to localhost for dev
_default_origins = [
    "http://127.0.0.1:3000", "http://localhost:3000",
]
_origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()] if settings.CORS_ORIGINS else _default_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Invalidate"],
)

app.include_router(api_router)
app.include_router(uploads_router)


@app.get("/health")
def health():
    return {"status": "ok"}

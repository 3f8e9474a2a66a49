#!/usr/bin/env python3
"""
Run migrations (same settings as the app), then seed, then uvicorn.
Ensures tables exist before seed and app start.
"""
import os
import sys

# 1) Wait for DB
import wait_for_db  # noqa: F401

# 2) Run migrations using the same settings as the app
from fleet_admin.core.config import settings
from fleet_admin.core.logging import configure_logging
from alembic.config import Config
from alembic import command

configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)
alembic_cfg = Config(os.path.join(os.path.dirname(__file__), "alembic.ini"))
command.upgrade(alembic_cfg, "head")

# 3) Seed with a short-lived Database; the app builds its own in the lifespan
from fleet_admin.db.session import Database
from fleet_admin.seed import run as run_seed

seed_database = Database(settings.DATABASE_URL)
seed_db = seed_database.session()
try:
    run_seed(seed_db)
finally:
    seed_db.close()
    seed_database.dispose()

# 4) Start uvicorn (replace current process)
os.execv(
    sys.executable,
    [sys.executable, "-m", "uvicorn", "fleet_admin.main:app", "--host", "0.0.0.0", "--port", os.getenv("PORT", "8000")],
)

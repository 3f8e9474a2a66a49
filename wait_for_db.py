"""Block until Postgres accepts connections. Imported by start_api.py before migrations."""
import os
import time
from urllib.parse import urlparse

import psycopg2


def connect_kwargs(database_url: str) -> dict:
    # SQLAlchemy URLs carry a driver suffix psycopg2 does not understand
    url = database_url.replace("postgresql+psycopg2://", "postgresql://").replace("postgres://", "postgresql://")
    p = urlparse(url)
    return {
        "host": p.hostname or "db",
        "port": p.port or 5432,
        "user": p.username or "fleet",
        "password": p.password or "fleet",
        "dbname": (p.path or "").lstrip("/") or "fleet",
    }


def wait_for_db(database_url: str, timeout_s: int = 60) -> None:
    params = connect_kwargs(database_url)
    print(f"[wait_for_db] Waiting for Postgres at {params['host']}:{params['port']} db={params['dbname']} (timeout={timeout_s}s)")
    deadline = time.time() + timeout_s
    while True:
        try:
            psycopg2.connect(connect_timeout=5, **params).close()
            print("[wait_for_db] Postgres is ready.")
            return
        except psycopg2.OperationalError as e:
            if time.time() > deadline:
                print(f"[wait_for_db] Timed out waiting for DB. Last error: {e}")
                raise
            time.sleep(1)


DATABASE_URL = os.getenv("DIRECT_URL") or os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise SystemExit("DATABASE_URL is not set")
wait_for_db(DATABASE_URL, int(os.getenv("DB_WAIT_TIMEOUT", "60")))

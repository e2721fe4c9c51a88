"""Storage configuration and store dependency.

Reads the data directory and auth settings from environment variables with
defaults suitable for local development, so a fresh checkout runs without
any setup. The process-wide store is created at application startup
(``edule.main``) and handed to routers through ``get_store``; tests override
that dependency with a store rooted in a temporary directory.
"""
from __future__ import annotations
import os
import pathlib
from typing import List

from fastapi import Request

from edule.db.store import JsonFileRecordStore, RecordStore

backend_dir = pathlib.Path(__file__).parent.parent.parent
DEFAULT_DATA_DIR = backend_dir / "data"


def get_data_dir() -> pathlib.Path:
    return pathlib.Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR)))


def get_session_ttl_hours() -> int:
    return int(os.getenv("SESSION_TTL_HOURS", "168"))


def get_password_hash_iterations() -> int:
    return int(os.getenv("PASSWORD_HASH_ITERATIONS", "260000"))


def get_admin_emails() -> List[str]:
    raw = os.getenv("ADMIN_EMAILS", "")
    return [e.strip() for e in raw.split(",") if e.strip()]


def create_store() -> RecordStore:
    """Build the JSON-file store for the configured data directory."""
    return JsonFileRecordStore(get_data_dir())


def get_store(request: Request) -> RecordStore:
    """FastAPI dependency that returns the application's record store."""
    return request.app.state.store

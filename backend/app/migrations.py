"""Apply Alembic migrations when the API starts."""

from __future__ import annotations

import errno
import logging
import os
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine.reflection import Inspector

from .database import SQLALCHEMY_DATABASE_URL

LOGGER = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parent.parent
LOCK_PATH = BACKEND_DIR / ".alembic-migration.lock"
LOCK_RETRY_DELAY = 0.25
LOCK_TIMEOUT_ENV = "ALEMBIC_MIGRATION_LOCK_TIMEOUT"
DEFAULT_LOCK_TIMEOUT = 30.0

# errno values and Windows lock/sharing violations raised while another process holds the lock.
_BUSY_ERRNOS = {errno.EACCES, errno.EAGAIN, errno.EBUSY}
_BUSY_WINERRORS = {32, 33}

if os.name == "posix":  # pragma: no cover - platform specific
    import fcntl
else:  # pragma: no cover - platform specific
    import msvcrt


def _lock(handle) -> None:
    if os.name == "posix":  # pragma: no cover - platform specific
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
    else:  # pragma: no cover - platform specific
        msvcrt.locking(handle.fileno(), msvcrt.LK_NBLCK, 1)


def _unlock(handle) -> None:
    if os.name == "posix":  # pragma: no cover - platform specific
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
    else:  # pragma: no cover - platform specific
        msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)


def lock_timeout() -> float:
    raw = os.getenv(LOCK_TIMEOUT_ENV)
    if not raw:
        return DEFAULT_LOCK_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        value = 0
    if value <= 0:
        LOGGER.warning(
            "Invalid %s=%s; using %.1f seconds", LOCK_TIMEOUT_ENV, raw, DEFAULT_LOCK_TIMEOUT
        )
        return DEFAULT_LOCK_TIMEOUT
    return value


@contextmanager
def migration_lock(path: Path, timeout: float) -> Iterator[None]:
    """Hold an exclusive file lock so only one worker migrates at a time."""

    deadline = time.monotonic() + timeout
    with path.open("a+") as handle:
        while True:
            try:
                _lock(handle)
                break
            except OSError as error:
                busy = isinstance(error, BlockingIOError) or error.errno in _BUSY_ERRNOS
                if not busy and getattr(error, "winerror", None) not in _BUSY_WINERRORS:
                    raise
                if time.monotonic() >= deadline:
                    raise TimeoutError("Timed out waiting for the migration lock") from error
                time.sleep(LOCK_RETRY_DELAY)
        try:
            yield
        finally:
            _unlock(handle)


def detect_revision(inspector: Inspector) -> Optional[str]:
    """Return the revision matching a schema that was created without Alembic."""

    if inspector.has_table("scheduled_services"):
        columns = {column["name"] for column in inspector.get_columns("scheduled_services")}
        if "visit_latitude" in columns:
            return "20260915_0002"
    if inspector.has_table("prospects"):
        return "20260901_0001"
    return None


def _alembic_config(database_url: str) -> Config:
    config = Config(str(BACKEND_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    config.set_main_option("sqlalchemy.url", database_url)
    return config


def run_database_migrations() -> None:
    """Bring the schema to the latest revision before serving requests."""

    project_root = str(BACKEND_DIR.parent)
    if project_root not in sys.path:
        sys.path.insert(0, project_root)

    database_url = os.getenv("DATABASE_URL") or SQLALCHEMY_DATABASE_URL
    config = _alembic_config(database_url)
    LOGGER.info("Running database migrations at %s", database_url)

    with migration_lock(LOCK_PATH, lock_timeout()):
        connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        engine = create_engine(database_url, connect_args=connect_args)
        try:
            inspector = inspect(engine)
            if not inspector.has_table("alembic_version"):
                revision = detect_revision(inspector)
                if revision:
                    LOGGER.info("Stamping existing schema as revision %s", revision)
                    command.stamp(config, revision)
        finally:
            engine.dispose()
        command.upgrade(config, "head")

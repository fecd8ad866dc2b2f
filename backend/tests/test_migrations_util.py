from __future__ import annotations

import pytest
from sqlalchemy import create_engine, inspect, text

from backend.app import migrations
from backend.app.database import Base

HEAD_REVISION = "20260915_0002"


def _sqlite_url(tmp_path, name: str) -> str:
    return f"sqlite:///{tmp_path / name}"


def _migrate(url: str, monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setattr(migrations, "LOCK_PATH", tmp_path / "migrate.lock")
    migrations.run_database_migrations()


def _current_revision(engine) -> str:
    with engine.connect() as connection:
        return connection.scalar(text("SELECT version_num FROM alembic_version"))


def test_migrations_create_schema_beside_unknown_tables(tmp_path, monkeypatch):
    url = _sqlite_url(tmp_path, "legacy.db")
    engine = create_engine(url)
    with engine.begin() as connection:
        connection.execute(text("CREATE TABLE legacy_table (id INTEGER PRIMARY KEY)"))

    _migrate(url, monkeypatch, tmp_path)

    tables = set(inspect(engine).get_table_names())
    assert {"legacy_table", "clients", "prospects", "prospect_change_history"} <= tables
    assert _current_revision(engine) == HEAD_REVISION
    engine.dispose()


def test_migrations_stamp_schema_created_from_models(tmp_path, monkeypatch):
    url = _sqlite_url(tmp_path, "current.db")
    engine = create_engine(url)
    Base.metadata.create_all(bind=engine)

    _migrate(url, monkeypatch, tmp_path)

    inspector = inspect(engine)
    assert inspector.has_table("alembic_version")
    columns = {column["name"] for column in inspector.get_columns("scheduled_services")}
    assert "visit_latitude" in columns
    assert _current_revision(engine) == HEAD_REVISION
    engine.dispose()


def test_migrations_are_idempotent(tmp_path, monkeypatch):
    url = _sqlite_url(tmp_path, "twice.db")

    _migrate(url, monkeypatch, tmp_path)
    _migrate(url, monkeypatch, tmp_path)

    engine = create_engine(url)
    assert _current_revision(engine) == HEAD_REVISION
    engine.dispose()


def test_detect_revision_from_existing_tables(tmp_path):
    engine = create_engine(_sqlite_url(tmp_path, "detect.db"))
    assert migrations.detect_revision(inspect(engine)) is None

    with engine.begin() as connection:
        connection.execute(text("CREATE TABLE prospects (prospect_id CHAR(36) PRIMARY KEY)"))
        connection.execute(text("CREATE TABLE scheduled_services (service_id CHAR(36))"))
    assert migrations.detect_revision(inspect(engine)) == "20260901_0001"

    with engine.begin() as connection:
        connection.execute(
            text("ALTER TABLE scheduled_services ADD COLUMN visit_latitude NUMERIC")
        )
    assert migrations.detect_revision(inspect(engine)) == HEAD_REVISION
    engine.dispose()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, 30.0), ("5", 5.0), ("abc", 30.0), ("-1", 30.0)],
)
def test_lock_timeout_reads_environment(monkeypatch, raw, expected):
    if raw is None:
        monkeypatch.delenv(migrations.LOCK_TIMEOUT_ENV, raising=False)
    else:
        monkeypatch.setenv(migrations.LOCK_TIMEOUT_ENV, raw)

    assert migrations.lock_timeout() == expected


def test_migration_lock_can_be_reacquired(tmp_path):
    lock_path = tmp_path / "migrate.lock"

    with migrations.migration_lock(lock_path, timeout=1):
        assert lock_path.exists()
    with migrations.migration_lock(lock_path, timeout=1):
        pass

from __future__ import annotations

# ruff: noqa: E402
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
BACKEND_DIR = PROJECT_ROOT / "backend"
for path in (PROJECT_ROOT, BACKEND_DIR):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient

from trippino.core.app import create_app
from trippino.core.db import dispose_engine
from trippino.core.settings import settings

from backend.tests.utils.db import (
    auth_headers,
    create_session,
    create_user,
    sqlite_url_for,
)


def alembic_config() -> Config:
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(BACKEND_DIR / "migrations"))
    # Keep pytest's log capture instead of alembic.ini's handlers.
    cfg.attributes["configure_logger"] = False
    return cfg


@pytest.fixture(autouse=True)
def configure_trip_settings() -> None:
    """Reset toggles a test may flip back to their defaults."""

    settings.prune_stale_legs = False
    settings.city_default_nights = 1
    yield
    settings.prune_stale_legs = False
    settings.city_default_nights = 1


@pytest.fixture(scope="session", autouse=True)
def configure_test_database(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Point settings.database_url to a throwaway SQLite file for the run."""

    original_url = settings.database_url
    original_log_dir = settings.log_directory
    db_path = tmp_path_factory.mktemp("db") / "trippino_test.sqlite3"
    settings.database_url = sqlite_url_for(db_path)
    settings.log_directory = str(tmp_path_factory.mktemp("logs"))
    dispose_engine()
    yield settings.database_url
    dispose_engine()
    settings.database_url = original_url
    settings.log_directory = original_log_dir


@pytest.fixture(scope="session", autouse=True)
def apply_migrations(configure_test_database: str) -> None:
    """Run Alembic migrations once for the test database."""

    dispose_engine()
    command.upgrade(alembic_config(), "head")
    yield
    dispose_engine()


@pytest.fixture()
def client(apply_migrations: None) -> TestClient:
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def user_headers() -> dict[str, str]:
    """Authorization header of a freshly created user."""

    return auth_headers(create_session(create_user()))

"""Shared fixtures: a file-backed store per test and an API client on top of it"""
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from timecheck.core.config import Settings
from timecheck.db.store import WorkTimeStore
from timecheck.main import create_app
from timecheck.repositories.work_session_repository import WorkSessionRepository
from timecheck.services import AggregationService, CsvService, WorkSessionService


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'WorkTime.sqlite'}"


@pytest.fixture
def store(database_url):
    with WorkTimeStore(database_url) as opened:
        yield opened


@pytest.fixture
def db(store):
    with store.session() as session:
        yield session


@pytest.fixture
def service():
    return WorkSessionService(allow_concurrent_open_sessions=False)


@pytest.fixture
def aggregator():
    return AggregationService()


@pytest.fixture
def csv_service():
    return CsvService()


@pytest.fixture
def add_session(db):
    """Insert a session directly; times are naive UTC"""
    repo = WorkSessionRepository()

    def _add(check_in: datetime, check_out=None):
        return repo.create(db, {"ws_check_in": check_in, "ws_check_out": check_out})

    return _add


@pytest.fixture
def app_settings(tmp_path, database_url):
    return Settings(
        DATABASE_URL=database_url,
        BACKUP_DIR=str(tmp_path / "backups"),
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def client(app_settings):
    with TestClient(create_app(app_settings)) as test_client:
        yield test_client

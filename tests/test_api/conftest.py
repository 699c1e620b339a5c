"""Shared fixtures for API tests."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from science_sources.api.app import create_app
from science_sources.api.auth import verify_api_key
from science_sources.api.dependencies import get_database, get_mailer, get_sources_service
from science_sources.sources.links import LinkBuilder
from science_sources.sources.record import Source
from science_sources.sources.schemas import SourceRecord
from science_sources.sources.service import SourcesService

SITE = "https://sources.example.org"


def _make_record(
    source_id: int = 7,
    status: str = "published",
    **kwargs,
) -> SourceRecord:
    """Helper to create a SourceRecord with sensible defaults."""
    return SourceRecord(
        id=source_id,
        name=kwargs.pop("name", "Jane Doe"),
        email=kwargs.pop("email", "jane@example.org"),
        content=kwargs.pop("content", "Marine biologist studying coral reefs."),
        status=status,
        created_at=kwargs.pop(
            "created_at", datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)
        ),
        **kwargs,
    )


def _make_source(source_id: int = 7, status: str = "published", **kwargs) -> Source:
    """Helper to wrap a record in a Source over a throwaway repository."""
    return Source(_make_record(source_id, status, **kwargs), AsyncMock())


@pytest.fixture
def make_source():
    return _make_source


@pytest.fixture
def make_record():
    return _make_record


@pytest.fixture
def mock_service():
    """Mock SourcesService with real link building."""
    service = AsyncMock(spec=SourcesService)
    service.links = LinkBuilder(SITE)
    service.load = AsyncMock(return_value=None)
    service.create = AsyncMock(return_value=None)
    service.confirm_email = AsyncMock(return_value=False)
    service.moderate = AsyncMock(return_value=False)
    service.grants_edit = AsyncMock(return_value=False)
    service.list_sources = AsyncMock(return_value=([], 0))
    service.moderation_links = AsyncMock(return_value={})
    service.status_counts = AsyncMock(return_value={
        "draft": 0, "pending": 0, "published": 0, "trashed": 0,
    })
    service.from_existing = MagicMock(side_effect=lambda record: Source(record, AsyncMock()))
    return service


@pytest.fixture
def mock_db():
    """Mock Database for /health."""
    db = AsyncMock()
    db.health_check = AsyncMock(return_value=True)
    return db


@pytest.fixture
def mock_mailer():
    mailer = MagicMock()
    mailer.channel.name = "log"
    return mailer


@pytest.fixture
def app(mock_service, mock_db, mock_mailer):
    app = create_app()

    app.dependency_overrides[verify_api_key] = lambda: "test-key"
    app.dependency_overrides[get_sources_service] = lambda: mock_service
    app.dependency_overrides[get_database] = lambda: mock_db
    app.dependency_overrides[get_mailer] = lambda: mock_mailer

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """FastAPI TestClient with dependency overrides."""
    with TestClient(app) as c:
        yield c

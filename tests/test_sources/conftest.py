"""Shared fixtures for sources tests."""

import dataclasses
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from science_sources.mail.channels import MailChannel
from science_sources.mail.mailer import Mailer
from science_sources.mail.schemas import OutgoingEmail
from science_sources.sources.config import SourcesConfig
from science_sources.sources.emails import SourceEmails
from science_sources.sources.errors import PersistenceError
from science_sources.sources.links import LinkBuilder
from science_sources.sources.schemas import VALID_STATUSES, SourceRecord
from science_sources.sources.service import SourcesService

SITE_URL = "https://sources.example.org"
ADMIN_EMAIL = "editor@example.org"


class InMemorySourcesRepository:
    """Dict-backed stand-in for SourcesRepository with the same async API."""

    def __init__(self) -> None:
        self.records: dict[int, SourceRecord] = {}
        self.meta: dict[tuple[int, str], str] = {}
        self.fail_writes = False
        self.fail_meta_writes = False
        self._next_id = 1

    def seed(
        self, name: str, email: str, content: str = "", status: str = "draft",
    ) -> SourceRecord:
        """Store a record directly, bypassing the async API."""
        record = SourceRecord(
            id=self._next_id,
            name=name,
            email=email,
            content=content,
            status=status,
            created_at=datetime(2026, 3, 1, 9, 0, self._next_id, tzinfo=timezone.utc),
        )
        self.records[record.id] = record
        self.meta[(record.id, "_source_email")] = email
        self._next_id += 1
        return dataclasses.replace(record)

    async def create(
        self, name: str, email: str, content: str, confirm_token: str,
    ) -> SourceRecord:
        if self.fail_writes:
            raise PersistenceError("storage unavailable")
        record = self.seed(name, email, content)
        self.meta[(record.id, "_source_email_confirm")] = confirm_token
        return record

    async def get_by_id(self, source_id: int) -> SourceRecord | None:
        record = self.records.get(source_id)
        return dataclasses.replace(record) if record else None

    async def update_status(self, source_id: int, status: str) -> bool:
        if status not in VALID_STATUSES:
            raise ValueError(f"Invalid status {status!r}")
        if source_id not in self.records:
            return False
        self.records[source_id] = dataclasses.replace(
            self.records[source_id], status=status,
        )
        return True

    async def list_sources(
        self, status: str | None = None, limit: int = 50, offset: int = 0,
    ) -> tuple[list[SourceRecord], int]:
        matching = [
            r for r in self.records.values() if status is None or r.status == status
        ]
        matching.sort(key=lambda r: (r.created_at, r.id), reverse=True)
        return matching[offset:offset + limit], len(matching)

    async def count_by_status(self) -> dict[str, int]:
        counts = {s: 0 for s in sorted(VALID_STATUSES)}
        for record in self.records.values():
            counts[record.status] += 1
        return counts

    async def get_meta(self, source_id: int, key: str) -> str | None:
        return self.meta.get((source_id, key))

    async def set_meta(self, source_id: int, key: str, value: str) -> None:
        if self.fail_writes or self.fail_meta_writes:
            raise PersistenceError("storage unavailable")
        self.meta[(source_id, key)] = value

    async def add_meta(self, source_id: int, key: str, value: str) -> bool:
        if self.fail_writes or self.fail_meta_writes:
            raise PersistenceError("storage unavailable")
        if (source_id, key) in self.meta:
            return False
        self.meta[(source_id, key)] = value
        return True

    async def delete_meta(self, source_id: int, key: str) -> bool:
        return self.meta.pop((source_id, key), None) is not None


class RecordingChannel(MailChannel):
    """Mail channel that keeps every message it is given."""

    def __init__(self, accept: bool = True) -> None:
        self.sent: list[OutgoingEmail] = []
        self.accept = accept

    @property
    def name(self) -> str:
        return "recording"

    async def send(self, message: OutgoingEmail) -> bool:
        self.sent.append(message)
        return self.accept


@pytest.fixture
def mock_database() -> AsyncMock:
    """Mock Database instance matching the Database API."""
    db = AsyncMock()
    db.fetch = AsyncMock(return_value=[])
    db.fetchval = AsyncMock(return_value=None)
    db.fetchrow = AsyncMock(return_value=None)
    db.execute = AsyncMock(return_value="INSERT 0 1")
    return db


@pytest.fixture
def sample_db_row() -> dict:
    """A dict mimicking an asyncpg Record for a source joined with its email."""
    return {
        "id": 7,
        "name": "Jane Doe",
        "email": "jane@example.org",
        "content": "Marine biologist studying coral reef resilience.",
        "status": "draft",
        "created_at": datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc),
        "updated_at": datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc),
    }


@pytest.fixture
def memory_repo() -> InMemorySourcesRepository:
    return InMemorySourcesRepository()


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def mailer(channel: RecordingChannel) -> Mailer:
    return Mailer(channel, site_name="Science Sources")


@pytest.fixture
def links() -> LinkBuilder:
    return LinkBuilder(SITE_URL)


@pytest.fixture
def emails(mailer: Mailer, links: LinkBuilder) -> SourceEmails:
    return SourceEmails(
        mailer=mailer,
        links=links,
        site_name="Science Sources",
        admin_email=ADMIN_EMAIL,
    )


@pytest.fixture
def service(
    memory_repo: InMemorySourcesRepository,
    emails: SourceEmails,
    links: LinkBuilder,
) -> SourcesService:
    return SourcesService(
        repository=memory_repo,
        emails=emails,
        links=links,
        config=SourcesConfig(token_length=30),
    )

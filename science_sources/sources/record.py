"""A source record bound to its storage.

Build one with ``Source.load(repo, id)`` when only the id is known, or
``Source.from_existing(repo, record)`` when the row is already in hand
(e.g. while rendering a listing).
"""

import dataclasses
import logging

from science_sources.sources.errors import InvalidTransition, PersistenceError
from science_sources.sources.repository import SourcesRepository
from science_sources.sources.schemas import SourceRecord, SourceStatus, can_transition
from science_sources.sources.tokens import DEFAULT_TOKEN_LENGTH, TokenStore

logger = logging.getLogger(__name__)


class Source:
    """A stored source plus its secret tokens."""

    def __init__(
        self,
        record: SourceRecord,
        repository: SourcesRepository,
        token_length: int = DEFAULT_TOKEN_LENGTH,
    ) -> None:
        self._record = record
        self._repo = repository
        self.tokens = TokenStore(repository, record.id, token_length)

    @classmethod
    async def load(
        cls,
        repository: SourcesRepository,
        source_id: int,
        token_length: int = DEFAULT_TOKEN_LENGTH,
    ) -> "Source | None":
        """Fetch a source by id. Returns None if it does not exist."""
        record = await repository.get_by_id(source_id)
        if record is None:
            return None
        return cls(record, repository, token_length)

    @classmethod
    def from_existing(
        cls,
        repository: SourcesRepository,
        record: SourceRecord,
        token_length: int = DEFAULT_TOKEN_LENGTH,
    ) -> "Source":
        """Wrap an already-fetched record."""
        return cls(record, repository, token_length)

    @property
    def record(self) -> SourceRecord:
        return self._record

    @property
    def id(self) -> int:
        return self._record.id

    @property
    def name(self) -> str:
        return self._record.name

    @property
    def email(self) -> str:
        return self._record.email

    @property
    def content(self) -> str:
        return self._record.content

    @property
    def status(self) -> str:
        return self._record.status

    async def transition(self, to_status: SourceStatus) -> None:
        """Move to ``to_status`` and persist it.

        Raises:
            InvalidTransition: If the lifecycle forbids the change.
            PersistenceError: If the row no longer exists or the update fails.
        """
        from_status = self._record.status
        if not can_transition(from_status, to_status):
            raise InvalidTransition(self.id, from_status, to_status)

        updated = await self._repo.update_status(self.id, to_status)
        if not updated:
            raise PersistenceError(f"Source {self.id} disappeared during update")

        self._record = dataclasses.replace(self._record, status=to_status)
        logger.info(
            "Source %s moved %s -> %s", self.id, from_status, to_status,
        )

    def __repr__(self) -> str:
        return f"Source(id={self.id!r}, status={self.status!r})"

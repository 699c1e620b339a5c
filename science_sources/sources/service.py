"""Sources workflow: submission, email confirmation and moderation.

Every token-gated operation answers with a plain boolean so that callers
can show one neutral "invalid link" message for any failure. Emails are
sent by direct calls from the operations that cause them.
"""

import logging

from science_sources.sources.config import SourcesConfig
from science_sources.sources.emails import SourceEmails
from science_sources.sources.errors import InvalidTransition, PersistenceError
from science_sources.sources.links import LinkBuilder
from science_sources.sources.record import Source
from science_sources.sources.repository import SourcesRepository
from science_sources.sources.schemas import (
    MODERATION_ACTIONS,
    SourceRecord,
    can_transition,
)
from science_sources.sources.tokens import generate_secret

logger = logging.getLogger(__name__)


class SourcesService:
    """Lifecycle operations for submitted sources.

    Wraps SourcesRepository with the token checks and email side effects
    of each transition:

    - ``create``: new draft, confirm token, confirmation email
    - ``confirm_email``: draft -> pending, moderation email to the operator
    - ``moderate``: admin-token-gated publish or trash
    - ``request_edit``: edit-token check for a published listing
    """

    def __init__(
        self,
        repository: SourcesRepository,
        emails: SourceEmails,
        links: LinkBuilder,
        config: SourcesConfig | None = None,
    ) -> None:
        self._repo = repository
        self._emails = emails
        self._links = links
        self._config = config or SourcesConfig()

    @property
    def repository(self) -> SourcesRepository:
        """Access the underlying repository for direct DB operations."""
        return self._repo

    @property
    def links(self) -> LinkBuilder:
        return self._links

    async def load(self, source_id: int) -> Source | None:
        return await Source.load(self._repo, source_id, self._config.token_length)

    def from_existing(self, record: SourceRecord) -> Source:
        return Source.from_existing(self._repo, record, self._config.token_length)

    # ── Submission ──────────────────────────────────────────────

    async def create(self, name: str, email: str, content: str) -> SourceRecord | None:
        """Store a new draft and email the submitter a confirmation link.

        Returns None if storage rejected the submission.
        """
        confirm_token = generate_secret(self._config.token_length)
        try:
            record = await self._repo.create(name, email, content, confirm_token)
        except PersistenceError as e:
            logger.error("Source submission failed: %s", e)
            return None

        source = self.from_existing(record)
        logger.info("Source %s submitted, awaiting email confirmation", source.id)
        await self._emails.send_confirmation(source)
        return source.record

    async def confirm_email(self, source_id: int, token: object) -> bool:
        """Consume a confirm token and queue the source for moderation."""
        source = await self.load(source_id)
        if source is None:
            logger.info("Email confirmation for unknown source %s", source_id)
            return False

        if source.status != "draft" or not await source.tokens.validate("confirm", token):
            logger.info("Invalid email confirmation attempt for source %s", source_id)
            return False

        await source.tokens.delete("confirm")
        await source.transition("pending")
        await self._emails.send_moderation_request(source)
        return True

    # ── Moderation ──────────────────────────────────────────────

    async def moderate(self, source_id: int, action: str, token: object) -> bool:
        """Publish or trash a source from an emailed admin link.

        Returns False, changing nothing, when the source is missing, the
        admin token does not match, the action is unknown, or the source's
        status does not allow the action.
        """
        source = await self.load(source_id)
        if source is None:
            logger.info("Moderation of unknown source %s", source_id)
            return False

        if not await source.tokens.validate("admin", token):
            logger.info("Invalid moderation link for source %s", source_id)
            return False

        if action not in MODERATION_ACTIONS:
            logger.warning("Ignoring unknown moderation action %r", action)
            return False

        try:
            if action == "publish":
                await self.publish(source)
            else:
                await self.trash(source)
        except InvalidTransition as e:
            logger.warning("Moderation refused: %s", e)
            return False
        return True

    async def publish(self, source: Source) -> None:
        """Publish a pending source.

        The first publish issues the edit token and sends the "you are
        now listed" email; later publishes send nothing.

        Raises:
            InvalidTransition: If the source is not pending.
        """
        if not can_transition(source.status, "published"):
            raise InvalidTransition(source.id, source.status, "published")

        await source.tokens.delete("admin")

        # Only the caller that stores the first edit token sends the email.
        first_publish = await source.tokens.generate_if_absent("edit") is not None

        await source.transition("published")

        if first_publish:
            await self._emails.send_published(source)

    async def trash(self, source: Source) -> None:
        """Trash a source. No email is sent.

        Raises:
            InvalidTransition: If the source is already trashed.
        """
        if not can_transition(source.status, "trashed"):
            raise InvalidTransition(source.id, source.status, "trashed")

        await source.tokens.delete("admin")
        await source.tokens.delete("confirm")
        await source.transition("trashed")

    # ── Editing ─────────────────────────────────────────────────

    async def grants_edit(self, source: Source, token: object) -> bool:
        """Whether ``token`` unlocks the edit view of a loaded source."""
        if source.status != "published":
            return False

        # Listings published before edit tokens existed get one now.
        await source.tokens.force_get("edit")
        return await source.tokens.validate("edit", token)

    async def request_edit(self, source_id: int, token: object) -> bool:
        """True if the edit view should be shown instead of the public view."""
        source = await self.load(source_id)
        if source is None:
            return False
        return await self.grants_edit(source, token)

    # ── Listing ─────────────────────────────────────────────────

    async def list_sources(
        self,
        status: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[SourceRecord], int]:
        return await self._repo.list_sources(
            status=status,
            limit=limit or self._config.list_page_size,
            offset=offset,
        )

    async def moderation_links(self, source: Source) -> dict[str, str]:
        """Publish/trash links for a pending source; empty for other statuses."""
        if source.status != "pending":
            return {}
        return {
            "publish": await self._links.admin_publish_link(source),
            "trash": await self._links.admin_trash_link(source),
        }

    async def status_counts(self) -> dict[str, int]:
        return await self._repo.count_by_status()

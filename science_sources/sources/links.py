"""Absolute URLs for confirmation, moderation and edit links.

Links that carry a token read it from the source's token store; admin
links issue the admin token on first use.
"""

import httpx

from science_sources.sources.errors import UnknownAction
from science_sources.sources.record import Source
from science_sources.sources.schemas import MODERATION_ACTIONS


def add_query_args(url: str, params: dict[str, str | int]) -> str:
    """Merge query parameters into ``url``."""
    return str(httpx.URL(url).copy_merge_params(params))


class LinkBuilder:
    """Builds public and admin URLs rooted at the configured site URL."""

    def __init__(self, site_url: str) -> None:
        self._base = site_url.rstrip("/")

    def home_url(self, path: str = "") -> str:
        return f"{self._base}/{path.lstrip('/')}"

    def contact_url(self) -> str:
        return self.home_url("contact")

    def admin_url(self) -> str:
        return self.home_url("admin/sources")

    def permalink(self, source_id: int) -> str:
        """Canonical public URL of a source."""
        return self.home_url(f"sources/{source_id}")

    async def confirmation_link(self, source: Source) -> str:
        token = await source.tokens.get("confirm")
        return add_query_args(
            self.home_url(), {"email-confirm": source.id, "key": token or ""},
        )

    async def edit_link(self, source: Source) -> str:
        token = await source.tokens.get("edit")
        return add_query_args(self.permalink(source.id), {"edit": token or ""})

    async def admin_action_link(self, source: Source, action: str) -> str:
        """Moderation link for ``action``, carrying the (lazily issued) admin token.

        Raises:
            UnknownAction: If ``action`` is not publish or trash.
        """
        if action not in MODERATION_ACTIONS:
            raise UnknownAction(action)

        token = await source.tokens.force_get("admin")
        return add_query_args(
            self.admin_url(),
            {"source-action": action, "id": source.id, "nonce": token},
        )

    async def admin_publish_link(self, source: Source) -> str:
        return await self.admin_action_link(source, "publish")

    async def admin_trash_link(self, source: Source) -> str:
        return await self.admin_action_link(source, "trash")

"""Secret tokens attached to a source.

Each source carries up to three bearer secrets, one per purpose:

- ``confirm``: proves the submitter controls the email address.
- ``admin``: lets the operator publish or trash from an emailed link.
- ``edit``: lets the submitter edit their published listing.

Tokens live in the ``source_meta`` table. Values are never logged.
"""

import hmac
import logging
import secrets
import string

from science_sources.sources.errors import InvalidToken, InvalidTokenKind
from science_sources.sources.repository import SourcesRepository
from science_sources.sources.schemas import TOKEN_META_KEYS, TokenKind

logger = logging.getLogger(__name__)

_ALPHABET = string.ascii_lowercase + string.digits

DEFAULT_TOKEN_LENGTH = 30


def generate_secret(length: int = DEFAULT_TOKEN_LENGTH) -> str:
    """Random lowercase alphanumeric string from the ``secrets`` CSPRNG."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def meta_key_for(kind: str) -> str:
    """Map a token kind to its metadata key.

    Raises:
        InvalidTokenKind: If ``kind`` is not confirm, edit or admin.
    """
    try:
        return TOKEN_META_KEYS[kind]
    except (KeyError, TypeError):
        raise InvalidTokenKind(kind) from None


class TokenStore:
    """Token primitives for a single source."""

    def __init__(
        self,
        repository: SourcesRepository,
        source_id: int,
        token_length: int = DEFAULT_TOKEN_LENGTH,
    ) -> None:
        self._repo = repository
        self._source_id = source_id
        self._token_length = token_length

    @property
    def source_id(self) -> int:
        return self._source_id

    async def get(self, kind: TokenKind) -> str | None:
        """Current token of this kind, or None."""
        value = await self._repo.get_meta(self._source_id, meta_key_for(kind))
        return value or None

    async def force_get(self, kind: TokenKind) -> str:
        """Current token of this kind, generating one if absent."""
        existing = await self.get(kind)
        if existing:
            return existing
        return await self.generate(kind)

    async def generate(self, kind: TokenKind) -> str:
        """Generate, persist and return a new token, replacing any old one."""
        meta_key = meta_key_for(kind)
        token = generate_secret(self._token_length)
        await self._repo.set_meta(self._source_id, meta_key, token)
        logger.debug("Generated %s token for source %s", kind, self._source_id)
        return token

    async def generate_if_absent(self, kind: TokenKind) -> str | None:
        """Store a new token only if none exists.

        Returns the new token, or None when one was already stored. Of two
        concurrent callers exactly one gets a token back.
        """
        meta_key = meta_key_for(kind)
        token = generate_secret(self._token_length)
        if not await self._repo.add_meta(self._source_id, meta_key, token):
            return None
        logger.debug("Generated %s token for source %s", kind, self._source_id)
        return token

    async def delete(self, kind: TokenKind) -> bool:
        """Remove the token of this kind. Returns True if one existed."""
        deleted = await self._repo.delete_meta(self._source_id, meta_key_for(kind))
        if deleted:
            logger.debug("Deleted %s token for source %s", kind, self._source_id)
        return deleted

    async def validate(self, kind: TokenKind, supplied: object) -> bool:
        """Check a supplied value against the stored token.

        Only a non-empty ``str`` can match, and an absent stored token
        matches nothing. Comparison is constant-time over UTF-8 bytes.
        """
        meta_key = meta_key_for(kind)
        if not isinstance(supplied, str) or supplied == "":
            return False

        expected = await self._repo.get_meta(self._source_id, meta_key)
        if not expected:
            return False

        return hmac.compare_digest(
            supplied.encode("utf-8"), expected.encode("utf-8"),
        )

    async def require(self, kind: TokenKind, supplied: object) -> None:
        """Like ``validate`` but raises on mismatch.

        Raises:
            InvalidToken: If the supplied value does not match.
        """
        if not await self.validate(kind, supplied):
            raise InvalidToken(f"Invalid {kind} token for source {self._source_id}")

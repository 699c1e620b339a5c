"""Mail delivery channels.

Provides an ABC for channels plus an HTTP relay implementation and a
logging implementation for development.
"""

import logging
from abc import ABC, abstractmethod

import httpx

from science_sources.mail.schemas import OutgoingEmail

logger = logging.getLogger(__name__)


class MailChannel(ABC):
    """Abstract base for mail delivery channels."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this channel (e.g. 'http', 'log')."""

    @abstractmethod
    async def send(self, message: OutgoingEmail) -> bool:
        """Deliver a message.

        Returns:
            True if the channel accepted the message, False otherwise.
        """


class HttpMailChannel(MailChannel):
    """Posts messages as JSON to a transactional mail relay.

    Creates a new ``httpx.AsyncClient`` per call (short-lived, no pooling).
    """

    def __init__(
        self,
        url: str,
        from_address: str,
        api_key: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._url = url
        self._from = from_address
        self._api_key = api_key
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "http"

    def _build_payload(self, message: OutgoingEmail) -> dict:
        return {
            "from": self._from,
            "to": message.to,
            "subject": message.subject,
            "text": message.body,
        }

    def _headers(self) -> dict[str, str]:
        if self._api_key:
            return {"Authorization": f"Bearer {self._api_key}"}
        return {}

    async def send(self, message: OutgoingEmail) -> bool:
        payload = self._build_payload(message)
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(
                    self._url,
                    json=payload,
                    headers=self._headers(),
                )
                if resp.is_success:
                    return True
                logger.warning(
                    "Mail relay %s returned %d for %r",
                    self._url, resp.status_code, message.subject,
                )
                return False
        except httpx.TimeoutException:
            logger.warning(
                "Mail relay %s timed out for %r", self._url, message.subject,
            )
            return False
        except httpx.HTTPError as e:
            logger.warning(
                "Mail relay %s failed for %r: %s", self._url, message.subject, e,
            )
            return False


class LogMailChannel(MailChannel):
    """Writes messages to the log instead of sending them."""

    @property
    def name(self) -> str:
        return "log"

    async def send(self, message: OutgoingEmail) -> bool:
        # Bodies carry secret links, so only the envelope is logged.
        logger.info(
            "Mail not sent (no relay configured): to=%s subject=%r",
            message.to, message.subject,
        )
        return True

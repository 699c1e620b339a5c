"""Fire-and-forget mail sending.

Delivery failures are logged and reported as ``False`` but never raised:
a failed email must not undo a confirmation or a moderation decision.
"""

import logging

from science_sources.mail.channels import HttpMailChannel, LogMailChannel, MailChannel
from science_sources.mail.config import MailConfig
from science_sources.mail.schemas import OutgoingEmail

logger = logging.getLogger(__name__)


class Mailer:
    """Sends site emails through a single channel.

    Every subject is prefixed with ``[site name]``.
    """

    def __init__(self, channel: MailChannel, site_name: str) -> None:
        self._channel = channel
        self._site_name = site_name

    @property
    def channel(self) -> MailChannel:
        return self._channel

    def format_subject(self, subject: str) -> str:
        return f"[{self._site_name}] {subject}"

    async def send(self, to: str, subject: str, body: str) -> bool:
        """Send one email. Returns True if the channel accepted it."""
        message = OutgoingEmail(
            to=to, subject=self.format_subject(subject), body=body,
        )
        try:
            delivered = await self._channel.send(message)
        except Exception as e:
            logger.error(
                "Mail channel %s raised for %r: %s",
                self._channel.name, message.subject, e,
            )
            return False

        if not delivered:
            logger.warning(
                "Mail to %s not delivered via %s: %r",
                to, self._channel.name, message.subject,
            )
        return delivered


def build_mailer(site_name: str, config: MailConfig | None = None) -> Mailer:
    """Mailer over the HTTP relay when configured, else over the log."""
    config = config or MailConfig()
    channel: MailChannel
    if config.relay_configured:
        channel = HttpMailChannel(
            url=config.api_url,
            from_address=config.from_address,
            api_key=config.api_key,
            timeout=config.timeout_seconds,
        )
    else:
        channel = LogMailChannel()
    return Mailer(channel, site_name)

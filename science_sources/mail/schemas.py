"""Outgoing email message."""

from dataclasses import dataclass


@dataclass
class OutgoingEmail:
    """A plain-text email ready for a channel.

    Attributes:
        to: Recipient address.
        subject: Final subject line (site prefix already applied).
        body: Plain-text body.
    """

    to: str
    subject: str
    body: str

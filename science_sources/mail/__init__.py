"""Outgoing mail.

Components:
- OutgoingEmail: Dataclass for a composed message
- MailConfig: Pydantic settings for the mail relay
- MailChannel / HttpMailChannel / LogMailChannel: Delivery channels
- Mailer: Subject prefixing and fire-and-forget delivery
"""

from science_sources.mail.channels import HttpMailChannel, LogMailChannel, MailChannel
from science_sources.mail.config import MailConfig
from science_sources.mail.mailer import Mailer, build_mailer
from science_sources.mail.schemas import OutgoingEmail

__all__ = [
    "HttpMailChannel",
    "LogMailChannel",
    "MailChannel",
    "MailConfig",
    "Mailer",
    "OutgoingEmail",
    "build_mailer",
]

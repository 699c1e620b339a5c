"""Sources: submitted listings, their secret tokens and moderation workflow.

Components:
- SourceRecord: Dataclass mapping to the sources table
- Source: A record bound to storage, with its TokenStore
- SourcesRepository: Persistence for sources and source_meta
- SourcesService: create / confirm_email / moderate / request_edit
- LinkBuilder / SourceEmails: Links and lifecycle emails
- SourcesConfig: Pydantic settings for tokens and listings
"""

from science_sources.sources.config import SourcesConfig
from science_sources.sources.emails import SourceEmails
from science_sources.sources.errors import (
    InvalidArgument,
    InvalidToken,
    InvalidTokenKind,
    InvalidTransition,
    PersistenceError,
    SourcesError,
    UnknownAction,
)
from science_sources.sources.links import LinkBuilder
from science_sources.sources.record import Source
from science_sources.sources.repository import SourcesRepository
from science_sources.sources.schemas import (
    MODERATION_ACTIONS,
    STATUS_LABELS,
    VALID_STATUSES,
    SourceRecord,
)
from science_sources.sources.service import SourcesService
from science_sources.sources.tokens import TokenStore, generate_secret

__all__ = [
    "InvalidArgument",
    "InvalidToken",
    "InvalidTokenKind",
    "InvalidTransition",
    "LinkBuilder",
    "MODERATION_ACTIONS",
    "PersistenceError",
    "STATUS_LABELS",
    "Source",
    "SourceEmails",
    "SourceRecord",
    "SourcesConfig",
    "SourcesError",
    "SourcesRepository",
    "SourcesService",
    "TokenStore",
    "UnknownAction",
    "VALID_STATUSES",
    "generate_secret",
]

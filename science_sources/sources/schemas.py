"""Data models for submitted sources.

A source moves through ``draft -> pending -> published`` and may be
trashed from any non-terminal status. Three kinds of secret tokens gate
the transitions: ``confirm`` (submitter confirms their email), ``admin``
(operator moderates from an emailed link) and ``edit`` (submitter edits
their published listing).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

SourceStatus = Literal["draft", "pending", "published", "trashed"]

VALID_STATUSES: frozenset[str] = frozenset({
    "draft",
    "pending",
    "published",
    "trashed",
})

TokenKind = Literal["confirm", "edit", "admin"]

# Token kind -> metadata key under which the secret is stored.
TOKEN_META_KEYS: dict[str, str] = {
    "confirm": "_source_email_confirm",
    "edit": "_source_edit_key",
    "admin": "_source_admin_nonce",
}

EMAIL_META_KEY = "_source_email"

ModerationAction = Literal["publish", "trash"]

MODERATION_ACTIONS: frozenset[str] = frozenset({"publish", "trash"})

# Allowed status changes. Nothing leaves "trashed".
ALLOWED_TRANSITIONS: frozenset[tuple[str, str]] = frozenset({
    ("draft", "pending"),
    ("pending", "published"),
    ("draft", "trashed"),
    ("pending", "trashed"),
    ("published", "trashed"),
})

STATUS_LABELS: dict[str, str] = {
    "draft": "Awaiting Email Confirmation",
    "pending": "Needs Moderation",
    "published": "Published",
    "trashed": "Trash",
}


def can_transition(from_status: str, to_status: str) -> bool:
    """Whether a record may move from ``from_status`` to ``to_status``."""
    return (from_status, to_status) in ALLOWED_TRANSITIONS


def status_label(status: str) -> str:
    """Display label for a status; unknown statuses are shown as-is."""
    return STATUS_LABELS.get(status, status)


@dataclass
class SourceRecord:
    """A submitted source as stored in the ``sources`` table.

    Attributes:
        id: Storage-assigned identifier.
        name: Display name of the submitter.
        email: Contact address, kept in record metadata.
        content: Free-text submission body.
        status: Lifecycle status.
        created_at: When the record was created.
        updated_at: When the record last changed.
    """

    id: int
    name: str
    email: str
    content: str
    status: SourceStatus = "draft"
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.status not in VALID_STATUSES:
            raise ValueError(
                f"Invalid status {self.status!r}. "
                f"Must be one of: {sorted(VALID_STATUSES)}"
            )

    @property
    def status_label(self) -> str:
        return status_label(self.status)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "content": self.content,
            "status": self.status,
            "status_label": self.status_label,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

"""Tests for source data models and the status table."""

from datetime import datetime, timezone

import pytest

from science_sources.sources.schemas import (
    STATUS_LABELS,
    TOKEN_META_KEYS,
    VALID_STATUSES,
    SourceRecord,
    can_transition,
    status_label,
)


class TestTransitions:
    """Tests for the lifecycle transition table."""

    @pytest.mark.parametrize("from_status,to_status", [
        ("draft", "pending"),
        ("pending", "published"),
        ("draft", "trashed"),
        ("pending", "trashed"),
        ("published", "trashed"),
    ])
    def test_allowed(self, from_status: str, to_status: str) -> None:
        assert can_transition(from_status, to_status) is True

    @pytest.mark.parametrize("from_status,to_status", [
        ("draft", "published"),
        ("pending", "draft"),
        ("published", "pending"),
        ("published", "published"),
        ("trashed", "draft"),
        ("trashed", "published"),
        ("trashed", "trashed"),
    ])
    def test_forbidden(self, from_status: str, to_status: str) -> None:
        assert can_transition(from_status, to_status) is False

    def test_trashed_is_terminal(self) -> None:
        assert not any(can_transition("trashed", s) for s in VALID_STATUSES)


class TestStatusLabels:
    """Tests for admin display labels."""

    def test_every_status_has_a_label(self) -> None:
        assert set(STATUS_LABELS) == VALID_STATUSES

    def test_labels(self) -> None:
        assert status_label("draft") == "Awaiting Email Confirmation"
        assert status_label("pending") == "Needs Moderation"

    def test_unknown_status_shown_as_is(self) -> None:
        assert status_label("future") == "future"


class TestTokenMetaKeys:
    def test_one_key_per_kind(self) -> None:
        assert TOKEN_META_KEYS == {
            "confirm": "_source_email_confirm",
            "edit": "_source_edit_key",
            "admin": "_source_admin_nonce",
        }


class TestSourceRecord:
    """Tests for the SourceRecord dataclass."""

    def test_defaults_to_draft(self) -> None:
        record = SourceRecord(id=1, name="Jane Doe", email="jane@example.org", content="Hi")
        assert record.status == "draft"
        assert record.status_label == "Awaiting Email Confirmation"

    def test_rejects_unknown_status(self) -> None:
        with pytest.raises(ValueError, match="Invalid status"):
            SourceRecord(id=1, name="x", email="x@example.org", content="", status="publish")

    def test_to_dict(self) -> None:
        created = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)
        record = SourceRecord(
            id=3,
            name="Jane Doe",
            email="jane@example.org",
            content="Astronomer",
            status="pending",
            created_at=created,
        )

        data = record.to_dict()

        assert data["id"] == 3
        assert data["status"] == "pending"
        assert data["status_label"] == "Needs Moderation"
        assert data["created_at"] == created.isoformat()
        assert data["updated_at"] is None

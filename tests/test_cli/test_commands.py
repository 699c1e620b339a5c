"""Tests for the science-sources CLI."""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from science_sources.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def _no_mail_relay(monkeypatch):
    monkeypatch.delenv("MAIL_API_URL", raising=False)


@pytest.fixture
def mock_db() -> AsyncMock:
    db = AsyncMock()
    db.fetch = AsyncMock(return_value=[])
    db.fetchval = AsyncMock(return_value=None)
    db.fetchrow = AsyncMock(return_value=None)
    db.execute = AsyncMock(return_value="INSERT 0 1")
    db.health_check = AsyncMock(return_value=True)
    return db


def _row(status: str = "draft") -> dict:
    return {
        "id": 7,
        "name": "Jane Doe",
        "email": "jane@x.test",
        "content": "bio",
        "status": status,
        "created_at": datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc),
        "updated_at": datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc),
    }


class TestInitDb:
    def test_creates_tables(self, runner, mock_db) -> None:
        with patch("science_sources.storage.database.Database", return_value=mock_db):
            result = runner.invoke(main, ["init-db"])

        assert result.exit_code == 0, result.output
        assert "Database initialized successfully" in result.output
        assert "CREATE TABLE IF NOT EXISTS sources" in mock_db.execute.call_args[0][0]
        mock_db.close.assert_awaited_once()


class TestHealth:
    def test_healthy(self, runner, mock_db) -> None:
        with patch("science_sources.storage.database.Database", return_value=mock_db):
            result = runner.invoke(main, ["health"])

        assert result.exit_code == 0, result.output
        assert "postgres: True" in result.output
        assert "All core services healthy!" in result.output

    def test_database_down(self, runner, mock_db) -> None:
        mock_db.connect.side_effect = OSError("connection refused")

        with patch("science_sources.storage.database.Database", return_value=mock_db):
            result = runner.invoke(main, ["health"])

        assert result.exit_code == 1
        assert "Some services unhealthy!" in result.output


class TestList:
    def test_lists_with_labels(self, runner, mock_db) -> None:
        mock_db.fetchval.return_value = 1
        mock_db.fetch.return_value = [_row("pending")]

        with patch("science_sources.storage.database.Database", return_value=mock_db):
            result = runner.invoke(main, ["list", "--status", "pending"])

        assert result.exit_code == 0, result.output
        assert "Needs Moderation" in result.output
        assert "Jane Doe" in result.output
        assert "Showing 1 of 1" in result.output

    def test_empty(self, runner, mock_db) -> None:
        mock_db.fetchval.return_value = 0

        with patch("science_sources.storage.database.Database", return_value=mock_db):
            result = runner.invoke(main, ["list"])

        assert result.exit_code == 0
        assert "No sources found." in result.output

    def test_json_output(self, runner, mock_db) -> None:
        mock_db.fetchval.return_value = 1
        mock_db.fetch.return_value = [_row("published")]

        with patch("science_sources.storage.database.Database", return_value=mock_db):
            result = runner.invoke(main, ["list", "--json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output.strip())
        assert payload["id"] == 7
        assert payload["status_label"] == "Published"
        assert payload["created_at"] == "2026-03-01T09:00:00+00:00"

    def test_rejects_unknown_status(self, runner) -> None:
        result = runner.invoke(main, ["list", "--status", "approved"])

        assert result.exit_code != 0


class TestSubmit:
    def test_creates_draft(self, runner, mock_db) -> None:
        mock_db.fetchrow.return_value = _row("draft")

        with patch("science_sources.storage.database.Database", return_value=mock_db):
            result = runner.invoke(main, ["submit", "Jane Doe", "jane@x.test", "bio"])

        assert result.exit_code == 0, result.output
        assert "Source 7 created (Awaiting Email Confirmation)" in result.output
        # Confirm token written by the same statement as the draft
        assert "_source_email_confirm" in mock_db.fetchrow.call_args[0]
        mock_db.close.assert_awaited_once()

    def test_storage_failure(self, runner, mock_db) -> None:
        mock_db.fetchrow.side_effect = OSError("disk full")

        with patch("science_sources.storage.database.Database", return_value=mock_db):
            result = runner.invoke(main, ["submit", "Jane Doe", "jane@x.test", "bio"])

        assert result.exit_code == 1
        assert "Submission failed" in result.output


class TestModerationCommands:
    def test_trash(self, runner, mock_db) -> None:
        mock_db.fetchrow.return_value = _row("pending")
        mock_db.fetchval.return_value = 7

        with patch("science_sources.storage.database.Database", return_value=mock_db):
            result = runner.invoke(main, ["trash", "7"])

        assert result.exit_code == 0, result.output
        assert "Source 7: Trash" in result.output

    def test_publish_draft_refused(self, runner, mock_db) -> None:
        mock_db.fetchrow.return_value = _row("draft")

        with patch("science_sources.storage.database.Database", return_value=mock_db):
            result = runner.invoke(main, ["publish", "7"])

        assert result.exit_code == 1
        assert "cannot move from 'draft' to 'published'" in result.output
        mock_db.close.assert_awaited_once()

    def test_publish_pending(self, runner, mock_db) -> None:
        mock_db.fetchrow.return_value = _row("pending")
        # edit token insert, status update, edit token for the email
        mock_db.fetchval.side_effect = [7, 7, "edittoken"]

        with patch("science_sources.storage.database.Database", return_value=mock_db):
            result = runner.invoke(main, ["publish", "7"])

        assert result.exit_code == 0, result.output
        assert "Source 7: Published" in result.output

    def test_missing_source(self, runner, mock_db) -> None:
        with patch("science_sources.storage.database.Database", return_value=mock_db):
            result = runner.invoke(main, ["publish", "404"])

        assert result.exit_code == 1
        assert "Source 404 not found" in result.output

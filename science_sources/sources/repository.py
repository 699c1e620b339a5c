"""Database repository for the sources and source_meta tables."""

import logging
from typing import Any

import asyncpg

from science_sources.sources.errors import PersistenceError
from science_sources.sources.schemas import (
    EMAIL_META_KEY,
    TOKEN_META_KEYS,
    VALID_STATUSES,
    SourceRecord,
)
from science_sources.storage.database import Database

logger = logging.getLogger(__name__)

_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS sources (
    id          BIGSERIAL PRIMARY KEY,
    name        TEXT NOT NULL DEFAULT '',
    content     TEXT NOT NULL DEFAULT '',
    status      TEXT NOT NULL DEFAULT 'draft'
                CHECK (status IN ('draft', 'pending', 'published', 'trashed')),
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_sources_status
    ON sources(status, created_at DESC);

CREATE TABLE IF NOT EXISTS source_meta (
    source_id   BIGINT NOT NULL REFERENCES sources(id) ON DELETE CASCADE,
    meta_key    TEXT NOT NULL,
    meta_value  TEXT NOT NULL,
    PRIMARY KEY (source_id, meta_key)
);
"""

# Record, email and confirm token in one statement: a draft is never
# stored without the token that confirms it.
_CREATE_SQL = """
WITH inserted AS (
    INSERT INTO sources (name, content, status)
    VALUES ($1, $2, $3)
    RETURNING *
), meta AS (
    INSERT INTO source_meta (source_id, meta_key, meta_value)
    SELECT inserted.id, m.meta_key, m.meta_value
    FROM inserted,
        (VALUES ($4::text, $5::text), ($6::text, $7::text))
            AS m(meta_key, meta_value)
)
SELECT inserted.*, $5::text AS email FROM inserted
"""

_SELECT_WITH_EMAIL = """
SELECT s.*, m.meta_value AS email
FROM sources s
LEFT JOIN source_meta m
    ON m.source_id = s.id AND m.meta_key = '{email_key}'
""".format(email_key=EMAIL_META_KEY)

_SET_META_SQL = """
INSERT INTO source_meta (source_id, meta_key, meta_value)
VALUES ($1, $2, $3)
ON CONFLICT (source_id, meta_key) DO UPDATE SET
    meta_value = EXCLUDED.meta_value
"""

_ADD_META_SQL = """
INSERT INTO source_meta (source_id, meta_key, meta_value)
VALUES ($1, $2, $3)
ON CONFLICT (source_id, meta_key) DO NOTHING
RETURNING source_id
"""

# Driver failures, including client-side argument encoding errors.
_DB_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


def _record_to_source(record: Any) -> SourceRecord:
    """Convert an asyncpg Record to a SourceRecord."""
    return SourceRecord(
        id=record["id"],
        name=record["name"],
        email=record["email"] or "",
        content=record["content"],
        status=record["status"],
        created_at=record["created_at"],
        updated_at=record["updated_at"],
    )


class SourcesRepository:
    """Storage for source records and their key/value metadata."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_tables(self) -> None:
        """Create the sources and source_meta tables (idempotent)."""
        await self._db.execute(_CREATE_TABLES_SQL)
        logger.info("Sources tables ensured")

    async def create(
        self, name: str, email: str, content: str, confirm_token: str,
    ) -> SourceRecord:
        """Insert a new draft source with its email and confirm token.

        All three rows are written by one statement, so either the draft
        exists together with its confirm token or nothing was stored.

        Raises:
            PersistenceError: If the database rejects the insert.
        """
        try:
            row = await self._db.fetchrow(
                _CREATE_SQL,
                name, content, "draft",
                EMAIL_META_KEY, email,
                TOKEN_META_KEYS["confirm"], confirm_token,
            )
        except _DB_ERRORS as e:
            raise PersistenceError(f"Failed to create source: {e}") from e

        if row is None:
            raise PersistenceError("Insert returned no row")
        return _record_to_source(row)

    async def get_by_id(self, source_id: int) -> SourceRecord | None:
        """Fetch a single source by id.

        Raises:
            PersistenceError: If the read fails, including ids the
                database cannot represent.
        """
        try:
            row = await self._db.fetchrow(
                _SELECT_WITH_EMAIL + " WHERE s.id = $1", source_id,
            )
        except _DB_ERRORS as e:
            raise PersistenceError(f"Failed to read source {source_id}: {e}") from e
        return _record_to_source(row) if row else None

    async def update_status(self, source_id: int, status: str) -> bool:
        """Set a source's status. Returns True if a row was updated.

        Raises:
            ValueError: If ``status`` is not a known status.
            PersistenceError: If the database rejects the update.
        """
        if status not in VALID_STATUSES:
            raise ValueError(f"Invalid status {status!r}")

        try:
            result = await self._db.fetchval(
                """
                UPDATE sources SET status = $2, updated_at = NOW()
                WHERE id = $1
                RETURNING id
                """,
                source_id, status,
            )
        except _DB_ERRORS as e:
            raise PersistenceError(
                f"Failed to update status of source {source_id}: {e}"
            ) from e
        return result is not None

    async def list_sources(
        self,
        status: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[SourceRecord], int]:
        """Paginated list, newest first. Returns (sources, total)."""
        conditions: list[str] = []
        params: list[Any] = []
        idx = 1

        if status:
            conditions.append(f"s.status = ${idx}")
            params.append(status)
            idx += 1

        where_clause = " WHERE " + " AND ".join(conditions) if conditions else ""

        total = await self._db.fetchval(
            f"SELECT COUNT(*) FROM sources s{where_clause}", *params,
        )

        data_sql = f"""
            {_SELECT_WITH_EMAIL}{where_clause}
            ORDER BY s.created_at DESC, s.id DESC
            LIMIT ${idx} OFFSET ${idx + 1}
        """
        params.extend([limit, offset])
        rows = await self._db.fetch(data_sql, *params)

        return [_record_to_source(r) for r in rows], total or 0

    async def count_by_status(self) -> dict[str, int]:
        """Number of sources per status; missing statuses count as 0."""
        rows = await self._db.fetch(
            "SELECT status, COUNT(*) AS n FROM sources GROUP BY status"
        )
        counts = {status: 0 for status in sorted(VALID_STATUSES)}
        for row in rows:
            counts[row["status"]] = row["n"]
        return counts

    # ── Metadata ────────────────────────────────────────────────

    async def get_meta(self, source_id: int, key: str) -> str | None:
        """Read one metadata value, or None if absent.

        Raises:
            PersistenceError: If the read fails.
        """
        try:
            return await self._db.fetchval(
                "SELECT meta_value FROM source_meta WHERE source_id = $1 AND meta_key = $2",
                source_id, key,
            )
        except _DB_ERRORS as e:
            raise PersistenceError(
                f"Failed to read {key} for source {source_id}: {e}"
            ) from e

    async def set_meta(self, source_id: int, key: str, value: str) -> None:
        """Insert or overwrite one metadata value.

        Raises:
            PersistenceError: If the database rejects the write.
        """
        try:
            await self._db.execute(_SET_META_SQL, source_id, key, value)
        except _DB_ERRORS as e:
            raise PersistenceError(
                f"Failed to write {key} for source {source_id}: {e}"
            ) from e

    async def add_meta(self, source_id: int, key: str, value: str) -> bool:
        """Insert a metadata value only if none exists yet.

        Returns True if this call stored the value, False if another
        writer got there first.

        Raises:
            PersistenceError: If the database rejects the write.
        """
        try:
            inserted = await self._db.fetchval(_ADD_META_SQL, source_id, key, value)
        except _DB_ERRORS as e:
            raise PersistenceError(
                f"Failed to write {key} for source {source_id}: {e}"
            ) from e
        return inserted is not None

    async def delete_meta(self, source_id: int, key: str) -> bool:
        """Remove one metadata value. Returns True if it existed.

        Raises:
            PersistenceError: If the database rejects the delete.
        """
        try:
            result = await self._db.execute(
                "DELETE FROM source_meta WHERE source_id = $1 AND meta_key = $2",
                source_id, key,
            )
        except _DB_ERRORS as e:
            raise PersistenceError(
                f"Failed to delete {key} for source {source_id}: {e}"
            ) from e
        return result != "DELETE 0"

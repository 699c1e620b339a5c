"""
Dependency injection for FastAPI endpoints.
"""

from science_sources.config.settings import get_settings
from science_sources.mail.mailer import Mailer, build_mailer
from science_sources.sources.config import SourcesConfig
from science_sources.sources.emails import SourceEmails
from science_sources.sources.links import LinkBuilder
from science_sources.sources.repository import SourcesRepository
from science_sources.sources.service import SourcesService
from science_sources.storage.database import Database

# Global instances (initialized on first request)
_database: Database | None = None
_mailer: Mailer | None = None
_sources_service: SourcesService | None = None


# Largest id a BIGSERIAL column can hold.
MAX_SOURCE_ID = 2**63 - 1


def parse_source_id(raw: str | None) -> int | None:
    """Source id from a query value, or None if it cannot name a stored source."""
    if raw is None:
        return None
    try:
        source_id = int(raw.strip())
    except ValueError:
        return None
    if not 1 <= source_id <= MAX_SOURCE_ID:
        return None
    return source_id


async def get_database() -> Database:
    """
    Get database instance.

    Creates a singleton Database connection pool.
    """
    global _database

    if _database is None:
        _database = Database()
        await _database.connect()

    return _database


def get_mailer() -> Mailer:
    """Get the mailer, over the HTTP relay when MAIL_API_URL is set."""
    global _mailer

    if _mailer is None:
        _mailer = build_mailer(get_settings().site_name)

    return _mailer


async def get_sources_repository() -> SourcesRepository:
    """Get sources repository backed by the shared database."""
    database = await get_database()
    return SourcesRepository(database)


async def get_sources_service() -> SourcesService:
    """
    Get sources service instance.

    Wires the repository, link builder and lifecycle emails from settings.
    """
    global _sources_service

    if _sources_service is None:
        settings = get_settings()
        repository = await get_sources_repository()
        links = LinkBuilder(settings.site_url)
        emails = SourceEmails(
            mailer=get_mailer(),
            links=links,
            site_name=settings.site_name,
            admin_email=settings.admin_email,
        )
        _sources_service = SourcesService(
            repository=repository,
            emails=emails,
            links=links,
            config=SourcesConfig(),
        )

    return _sources_service


async def cleanup_dependencies() -> None:
    """Clean up global dependencies on shutdown."""
    global _database, _mailer, _sources_service

    _sources_service = None
    _mailer = None

    if _database is not None:
        await _database.close()
        _database = None

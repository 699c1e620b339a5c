"""
Rate limiting for the public submission endpoint, using slowapi.

Keyed by client IP. The submission route takes no API key, so a
caller-supplied X-API-KEY header must not open a fresh bucket. Enable via
RATE_LIMIT_ENABLED=true; RATE_LIMIT_SUBMIT sets the submission limit.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from science_sources.config.settings import get_settings


def submit_limit() -> str:
    """Limit string for POST /sources, read at request time."""
    return get_settings().rate_limit_submit


def create_limiter() -> Limiter:
    """Create a configured Limiter instance."""
    settings = get_settings()
    return Limiter(
        key_func=get_remote_address,
        enabled=settings.rate_limit_enabled,
        storage_uri=settings.rate_limit_storage_uri,
    )


limiter = create_limiter()

"""
FastAPI adapter for the sources workflow.

Provides:
- POST /sources - Public submission
- GET /?email-confirm=&key= - Email confirmation link
- GET /sources/{id} - Published listing, edit view with ?edit=
- GET /admin/sources - Emailed moderation links and the admin listing
- GET /health - Service health check
"""

from science_sources.api.app import create_app

__all__ = ["create_app"]

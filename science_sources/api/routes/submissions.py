"""Public endpoints: submission, email confirmation and listing view."""

import html

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, status
from fastapi.responses import HTMLResponse

from science_sources import __version__
from science_sources.api.dependencies import (
    MAX_SOURCE_ID,
    get_sources_service,
    parse_source_id,
)
from science_sources.api.models import (
    ErrorResponse,
    SourceView,
    SubmissionRequest,
    SubmissionResponse,
)
from science_sources.api.rate_limit import limiter, submit_limit
from science_sources.sources.errors import PersistenceError
from science_sources.sources.service import SourcesService

logger = structlog.get_logger(__name__)
router = APIRouter()

CONFIRMED_MESSAGE = (
    "Thank you for confirming your email address. Your listing is now "
    'pending a quick moderation step. <a href="{home_url}">Back to home</a>'
)
INVALID_LINK_MESSAGE = (
    'This is an invalid link. Having trouble? <a href="{contact_url}">Contact</a>'
)
EDIT_MODE_MESSAGE = "Edit mode activated"


@router.post(
    "/sources",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: {"model": ErrorResponse, "description": "Invalid submission"},
        429: {"model": ErrorResponse, "description": "Too many submissions"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
    summary="Submit a source",
    description=(
        "Create a draft listing and email the submitter a confirmation link. "
        "The listing is not visible until confirmed and moderated."
    ),
)
@limiter.limit(submit_limit)
async def submit_source(
    request: Request,
    submission: SubmissionRequest,
    service: SourcesService = Depends(get_sources_service),
) -> SubmissionResponse:
    record = await service.create(
        name=submission.name,
        email=submission.email,
        content=submission.content,
    )
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Submission failed",
        )

    logger.info("Source submitted", source_id=record.id)
    return SubmissionResponse(id=record.id, status=record.status)


@router.get("/", include_in_schema=False)
async def root(
    email_confirm: str | None = Query(default=None, alias="email-confirm"),
    key: str | None = Query(default=None),
    service: SourcesService = Depends(get_sources_service),
):
    """Service info, or the outcome of an email confirmation link."""
    if email_confirm is None:
        return {
            "service": "Science Sources",
            "version": __version__,
            "docs": "/docs",
        }

    links = service.links
    source_id = parse_source_id(email_confirm)
    try:
        confirmed = source_id is not None and await service.confirm_email(source_id, key)
    except PersistenceError as e:
        logger.error("Email confirmation failed", source_id=source_id, error=str(e))
        confirmed = False

    if confirmed:
        logger.info("Email confirmed", source_id=source_id)
        return HTMLResponse(
            CONFIRMED_MESSAGE.format(home_url=html.escape(links.home_url()))
        )

    return HTMLResponse(
        INVALID_LINK_MESSAGE.format(contact_url=html.escape(links.contact_url())),
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@router.get(
    "/sources/{source_id}",
    response_model=SourceView,
    responses={
        404: {"model": ErrorResponse, "description": "Source not found"},
    },
    summary="View a published source",
    description=(
        "Public view of a published listing. A valid `edit` token switches "
        "on edit mode."
    ),
)
async def view_source(
    source_id: int = Path(ge=1, le=MAX_SOURCE_ID),
    edit: str | None = Query(default=None, description="Edit token from the listing email"),
    service: SourcesService = Depends(get_sources_service),
) -> SourceView:
    source = await service.load(source_id)
    if source is None or source.status != "published":
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Source {source_id} not found",
        )

    edit_mode = edit is not None and await service.grants_edit(source, edit)
    content = source.content
    if edit_mode:
        content = f"{content}\n\n{EDIT_MODE_MESSAGE}"

    return SourceView(
        id=source.id,
        name=source.name,
        content=content,
        permalink=service.links.permalink(source.id),
        edit_mode=edit_mode,
    )

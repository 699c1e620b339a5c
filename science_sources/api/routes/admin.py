"""Admin endpoints: emailed moderation links, listing and direct moderation."""

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Security, status
from fastapi.responses import RedirectResponse
import structlog

from science_sources.api.auth import api_key_header, verify_api_key
from science_sources.api.dependencies import (
    MAX_SOURCE_ID,
    get_sources_service,
    parse_source_id,
)
from science_sources.api.models import (
    AdminSourceItem,
    AdminSourcesResponse,
    ErrorResponse,
    ModerationResponse,
)
from science_sources.sources.errors import InvalidTransition, PersistenceError
from science_sources.sources.links import add_query_args
from science_sources.sources.record import Source
from science_sources.sources.schemas import MODERATION_ACTIONS, VALID_STATUSES, ModerationAction
from science_sources.sources.service import SourcesService

logger = structlog.get_logger(__name__)
router = APIRouter()

ADMIN_PATH = "/admin/sources"

NOTICES: dict[str, str] = {
    "invalid": "Sorry, that link was invalid. Try moderating submissions below.",
    "published": "Submission published.",
    "trashed": "Submission trashed.",
}

# Moderation action -> notice key shown after a successful link.
_ACTION_NOTICES = {"publish": "published", "trash": "trashed"}


def _redirect(notice: str | None = None) -> RedirectResponse:
    url = ADMIN_PATH
    if notice is not None:
        url = add_query_args(url, {"source-notice": notice})
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


async def _handle_moderation_link(
    service: SourcesService,
    action: str,
    raw_id: str | None,
    nonce: str | None,
) -> RedirectResponse:
    """Apply an emailed publish/trash link and redirect with a notice."""
    if action not in MODERATION_ACTIONS:
        logger.info("Ignoring unknown source action", action=action)
        return _redirect()

    source_id = parse_source_id(raw_id)
    try:
        applied = source_id is not None and await service.moderate(source_id, action, nonce)
    except PersistenceError as e:
        logger.error("Moderation link failed", action=action, source_id=source_id, error=str(e))
        applied = False

    if not applied:
        logger.info("Moderation link rejected", action=action, source_id=raw_id)
        return _redirect("invalid")

    logger.info("Moderation link applied", action=action, source_id=source_id)
    return _redirect(_ACTION_NOTICES[action])


async def _admin_item(service: SourcesService, source: Source) -> AdminSourceItem:
    record = source.record
    return AdminSourceItem(
        id=record.id,
        name=record.name,
        email=record.email,
        status=record.status,
        status_label=record.status_label,
        created_at=record.created_at.isoformat() if record.created_at else None,
        actions=await service.moderation_links(source),
    )


@router.get(
    ADMIN_PATH,
    response_model=AdminSourcesResponse,
    responses={
        303: {"description": "Redirect after an emailed moderation link"},
        401: {"model": ErrorResponse, "description": "Invalid API key"},
        422: {"model": ErrorResponse, "description": "Invalid filter parameter"},
    },
    summary="Moderate or list sources",
    description=(
        "With `source-action`, `id` and `nonce` this applies an emailed "
        "moderation link and redirects back with a `source-notice`. "
        "Otherwise it lists sources (requires X-API-KEY)."
    ),
)
async def admin_sources(
    source_action: str | None = Query(default=None, alias="source-action"),
    source_id: str | None = Query(default=None, alias="id"),
    nonce: str | None = Query(default=None),
    source_notice: str | None = Query(default=None, alias="source-notice"),
    status_filter: str | None = Query(
        default=None,
        alias="status",
        description="Filter by status: draft, pending, published, trashed",
    ),
    limit: int | None = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    api_key: str | None = Security(api_key_header),
    service: SourcesService = Depends(get_sources_service),
):
    if source_action is not None:
        return await _handle_moderation_link(service, source_action, source_id, nonce)

    await verify_api_key(api_key)

    if status_filter is not None and status_filter not in VALID_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=(
                f"Invalid status {status_filter!r}. "
                f"Must be one of: {sorted(VALID_STATUSES)}"
            ),
        )

    records, total = await service.list_sources(
        status=status_filter, limit=limit, offset=offset,
    )
    items = [
        await _admin_item(service, service.from_existing(record))
        for record in records
    ]

    return AdminSourcesResponse(
        sources=items,
        total=total,
        counts=await service.status_counts(),
        notice=NOTICES.get(source_notice) if source_notice else None,
    )


async def _moderate_directly(
    service: SourcesService, source_id: int, action: ModerationAction,
) -> ModerationResponse:
    source = await service.load(source_id)
    if source is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Source {source_id} not found",
        )

    try:
        if action == "publish":
            await service.publish(source)
        else:
            await service.trash(source)
    except InvalidTransition as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )

    logger.info("Source moderated", source_id=source_id, action=action)
    return ModerationResponse(
        id=source.id,
        status=source.status,
        status_label=source.record.status_label,
    )


@router.post(
    ADMIN_PATH + "/{source_id}/publish",
    response_model=ModerationResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid API key"},
        404: {"model": ErrorResponse, "description": "Source not found"},
        409: {"model": ErrorResponse, "description": "Source is not pending"},
    },
    summary="Publish a source",
)
async def publish_source(
    source_id: int = Path(ge=1, le=MAX_SOURCE_ID),
    api_key: str = Depends(verify_api_key),
    service: SourcesService = Depends(get_sources_service),
) -> ModerationResponse:
    return await _moderate_directly(service, source_id, "publish")


@router.post(
    ADMIN_PATH + "/{source_id}/trash",
    response_model=ModerationResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid API key"},
        404: {"model": ErrorResponse, "description": "Source not found"},
        409: {"model": ErrorResponse, "description": "Source is already trashed"},
    },
    summary="Trash a source",
)
async def trash_source(
    source_id: int = Path(ge=1, le=MAX_SOURCE_ID),
    api_key: str = Depends(verify_api_key),
    service: SourcesService = Depends(get_sources_service),
) -> ModerationResponse:
    return await _moderate_directly(service, source_id, "trash")

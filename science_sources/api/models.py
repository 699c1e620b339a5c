"""
Request and response models for the sources API.
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Response model for errors."""

    detail: str = Field(
        ...,
        description="Error message",
    )
    error_type: str = Field(
        default="error",
        description="Error type",
    )


class ComponentHealth(BaseModel):
    """Health status of a single infrastructure component."""

    status: str = Field(..., description="healthy or unhealthy")
    latency_ms: float | None = Field(default=None, description="Check latency in milliseconds")
    details: dict = Field(default_factory=dict, description="Extra diagnostic detail")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(
        ...,
        description="Overall service status: healthy or unhealthy",
    )
    components: dict[str, ComponentHealth] = Field(
        default_factory=dict,
        description="Per-component health",
    )
    mail_channel: str = Field(..., description="Active mail channel name")
    version: str = Field(..., description="Service version")


# Submission models


class SubmissionRequest(BaseModel):
    """Request model for a public source submission."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Submitter's display name",
    )
    email: str = Field(
        ...,
        min_length=3,
        max_length=320,
        pattern=r"^[^@\s]+@[^@\s]+$",
        description="Submitter's email address; a confirmation link is sent here",
    )
    content: str = Field(
        ...,
        min_length=1,
        max_length=20000,
        description="Listing body",
    )


class SubmissionResponse(BaseModel):
    """Response model for a created submission."""

    id: int = Field(..., description="Source identifier")
    status: str = Field(..., description="Initial status (draft)")


class SourceView(BaseModel):
    """Public view of a published source."""

    id: int = Field(..., description="Source identifier")
    name: str = Field(..., description="Submitter's display name")
    content: str = Field(..., description="Listing body")
    permalink: str = Field(..., description="Canonical public URL")
    edit_mode: bool = Field(
        default=False,
        description="True when a valid edit token was supplied",
    )


# Admin models


class AdminSourceItem(BaseModel):
    """One row of the admin listing."""

    id: int = Field(..., description="Source identifier")
    name: str = Field(..., description="Submitter's display name")
    email: str = Field(..., description="Submitter's email address")
    status: str = Field(..., description="Lifecycle status")
    status_label: str = Field(..., description="Human-readable status")
    created_at: str | None = Field(default=None, description="Submission timestamp (ISO format)")
    actions: dict[str, str] = Field(
        default_factory=dict,
        description="Moderation links (publish, trash) for pending sources",
    )


class AdminSourcesResponse(BaseModel):
    """Response model for the admin listing."""

    sources: list[AdminSourceItem] = Field(..., description="Sources, newest first")
    total: int = Field(..., description="Total sources matching the filter")
    counts: dict[str, int] = Field(default_factory=dict, description="Sources per status")
    notice: str | None = Field(default=None, description="Result of the last moderation link")


class ModerationResponse(BaseModel):
    """Response model for an authenticated publish/trash."""

    id: int = Field(..., description="Source identifier")
    status: str = Field(..., description="Status after the action")
    status_label: str = Field(..., description="Human-readable status")

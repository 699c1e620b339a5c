"""Configuration for the sources workflow."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SourcesConfig(BaseSettings):
    """Settings for secret tokens and listings."""

    model_config = SettingsConfigDict(
        env_prefix="SOURCES_",
        case_sensitive=False,
        extra="ignore",
    )

    token_length: int = Field(
        default=30,
        ge=20,
        le=128,
        description="Length of generated confirm/edit/admin tokens",
    )
    list_page_size: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Default page size for admin listings",
    )

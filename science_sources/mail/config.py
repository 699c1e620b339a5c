"""Mail delivery configuration.

All settings can be overridden via ``MAIL_*`` environment variables.
When ``MAIL_API_URL`` is unset, messages are only logged.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MailConfig(BaseSettings):
    """Configuration for the transactional mail relay."""

    model_config = SettingsConfigDict(
        env_prefix="MAIL_",
        case_sensitive=False,
        extra="ignore",
    )

    api_url: str | None = Field(
        default=None,
        description="HTTP endpoint of the mail relay (POST JSON)",
    )
    api_key: str | None = Field(
        default=None,
        description="Bearer token for the mail relay",
    )
    from_address: str = Field(
        default="no-reply@localhost",
        description="Sender address for all outgoing mail",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        le=60.0,
        description="HTTP timeout per send",
    )

    @property
    def relay_configured(self) -> bool:
        return bool(self.api_url)

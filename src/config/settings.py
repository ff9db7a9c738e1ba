"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

Per-club credentials live in the clubs config file (see CLUBS_CONFIG_PATH).
The GHL_API_KEY here is only the fallback for unknown or disabled clubs.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DeliveryMode = Literal["sync", "background"]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    """

    # API Configuration
    api_title: str = "PT Program Generator"
    api_version: str = "v1"
    service_name: str = "PT Program Generator"

    # Anthropic Configuration
    anthropic_api_key: str = Field(
        default="",
        description="Claude API key. Required for program generation."
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Claude model used to draft training programs."
    )
    anthropic_max_tokens: int = Field(
        default=8000,
        description="Max tokens for the program response. A full week template is long."
    )
    anthropic_timeout_seconds: float = Field(
        default=300.0,
        description="Timeout for a single generation call."
    )

    # GoHighLevel (LeadConnector) CRM
    ghl_api_key: str = Field(
        default="",
        description="Fallback CRM API key used when a location has no enabled club entry."
    )
    ghl_base_url: str = Field(
        default="https://services.leadconnectorhq.com",
        description="LeadConnector API base URL"
    )
    ghl_api_version: str = Field(
        default="2021-07-28",
        description="Value sent in the LeadConnector Version header"
    )

    # PDF conversion
    pdfshift_api_key: str = Field(
        default="",
        description="PDFShift API key (basic auth password, username is 'api')"
    )
    pdfshift_url: str = Field(
        default="https://api.pdfshift.io/v3/convert/pdf",
        description="PDFShift conversion endpoint"
    )

    # Email
    sendgrid_api_key: str = Field(
        default="",
        description="SendGrid API key for client and operator emails"
    )
    sendgrid_url: str = Field(
        default="https://api.sendgrid.com/v3/mail/send",
        description="SendGrid mail send endpoint"
    )
    from_email: str = Field(
        default="programs@westcoaststrength.com",
        description="Sender address for program emails and error notifications"
    )
    admin_email: str = Field(
        default="justin@westcoaststrength.com",
        description="Operator address that receives pipeline failure notifications"
    )

    # Branding and clubs
    brand_name: str = Field(
        default="West Coast Strength",
        description="Parent brand. Prefixed to club names in the sender identity."
    )
    clubs_config_path: str = Field(
        default="clubs-config.json",
        description="JSON file listing clubs (name, number, location id, API key, enabled)"
    )
    logo_path: Optional[str] = Field(
        default=None,
        description="PNG logo embedded in the program PDF. Omitted when unset or missing."
    )

    # Delivery behaviour
    delivery_mode: DeliveryMode = Field(
        default="sync",
        description=(
            "sync: the webhook waits for the PDF and returns its URL. "
            "background: the webhook returns at once and the pipeline runs detached."
        )
    )
    base_url: str = Field(
        default="https://dayone-xe91.onrender.com",
        description="Public base URL used to build the program-success redirect link"
    )
    pdf_url_ttl_seconds: int = Field(
        default=300,
        description="How long a generated PDF URL stays available on the redirect page"
    )
    http_timeout_seconds: float = Field(
        default=60.0,
        description="Timeout for CRM, PDF conversion and email calls"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    port: int = Field(
        default=3000,
        description="Port used when running the module directly"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def program_success_base(self) -> str:
        """Base of the redirect link returned to the trainer."""
        return f"{self.base_url.rstrip('/')}/program-success"

    def validate_required_fields(self) -> list[str]:
        """
        Validate that the credentials the pipeline needs are set.

        Returns list of missing required fields. A missing GHL_API_KEY is
        tolerated when every location has its own key in the clubs file,
        so it is not reported here.
        """
        missing = []

        if not self.anthropic_api_key:
            missing.append("ANTHROPIC_API_KEY")
        if not self.pdfshift_api_key:
            missing.append("PDFSHIFT_API_KEY")
        if not self.sendgrid_api_key:
            missing.append("SENDGRID_API_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    For tests, you can call get_settings.cache_clear() to reset.
    """
    return Settings()

"""
FastAPI dependency injection.

Dependencies provide instances of services, clients, and configuration
to route handlers. Using dependency injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Dependencies can be overridden in tests
- Configuration is centralized

Process-scoped state (the club directory, the PDF URL cache and the logo)
is created once in the application lifespan and kept on app.state; the
dependencies here only hand it out.
"""

import logging
from typing import Annotated

from fastapi import Depends, Request

from ..config.settings import Settings, get_settings
from ..core.program.cache import PdfUrlCache
from ..core.program.clubs import ClubDirectory
from ..core.program.delivery import ProgramDeliveryService
from ..core.program.generator import ProgramGenerator
from ..infrastructure.anthropic.client import AnthropicConfig, AnthropicTextClient
from ..infrastructure.crm.client import LeadConnectorClient
from ..infrastructure.mail.client import SendGridEmailClient
from ..infrastructure.pdf.client import PdfShiftClient

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Process-scoped state
# ---------------------------------------------------------------------------

def get_club_directory(request: Request) -> ClubDirectory:
    """Club directory loaded at startup."""
    return request.app.state.clubs


def get_pdf_url_cache(request: Request) -> PdfUrlCache:
    """Short-lived PDF URL cache shared by the webhook and the redirect page."""
    return request.app.state.pdf_url_cache


def get_logo_base64(request: Request) -> str:
    return getattr(request.app.state, "logo_base64", "")


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_program_generator(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ProgramGenerator:
    """
    Provide ProgramGenerator with an Anthropic client.

    The generator is stateless, so we create a new instance per request.
    AnthropicConfig raises if the API key is missing, which surfaces as a
    500 on the webhook rather than a half-run pipeline.
    """
    config = AnthropicConfig(
        api_key=settings.anthropic_api_key,
        model=settings.anthropic_model,
        max_tokens=settings.anthropic_max_tokens,
        timeout_seconds=settings.anthropic_timeout_seconds,
    )
    return ProgramGenerator(model_client=AnthropicTextClient(config))


def get_delivery_service(
    settings: Annotated[Settings, Depends(get_settings)],
    generator: Annotated[ProgramGenerator, Depends(get_program_generator)],
    cache: Annotated[PdfUrlCache, Depends(get_pdf_url_cache)],
    logo_base64: Annotated[str, Depends(get_logo_base64)],
) -> ProgramDeliveryService:
    """Wire the delivery pipeline to the real CRM, PDF and email clients."""
    crm = LeadConnectorClient(
        base_url=settings.ghl_base_url,
        api_version=settings.ghl_api_version,
        timeout_seconds=settings.http_timeout_seconds,
    )

    service = ProgramDeliveryService(
        contacts=crm,
        generator=generator,
        pdf_converter=PdfShiftClient(
            api_key=settings.pdfshift_api_key,
            url=settings.pdfshift_url,
            timeout_seconds=settings.http_timeout_seconds,
        ),
        uploader=crm,
        email_sender=SendGridEmailClient(
            api_key=settings.sendgrid_api_key,
            url=settings.sendgrid_url,
            timeout_seconds=settings.http_timeout_seconds,
        ),
        pdf_url_cache=cache,
        admin_email=settings.admin_email,
        from_email=settings.from_email,
        brand_name=settings.brand_name,
        logo_base64=logo_base64,
    )

    logger.debug("Created ProgramDeliveryService instance")

    return service


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
SettingsDep = Annotated[Settings, Depends(get_settings)]
ClubDirectoryDep = Annotated[ClubDirectory, Depends(get_club_directory)]
PdfUrlCacheDep = Annotated[PdfUrlCache, Depends(get_pdf_url_cache)]
DeliveryServiceDep = Annotated[ProgramDeliveryService, Depends(get_delivery_service)]

"""
CRM webhook endpoint.

The CRM posts the intake form here when a trainer submits it. The body is
the contact id, the location, and every form answer keyed by its label.

Two delivery modes, picked by DELIVERY_MODE:
- sync: wait for the whole pipeline and return the PDF URL plus a
  redirect link the trainer can open.
- background: answer immediately and run the pipeline after the response
  is sent. Failures only reach the operator notification and the logs.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ...core.program.delivery import ProgramDeliveryError
from ...core.program.intake import map_form_fields
from ...core.program.models import FormData
from ..dependencies import ClubDirectoryDep, DeliveryServiceDep, SettingsDep

logger = logging.getLogger(__name__)

router = APIRouter()


class InvalidWebhookPayload(Exception):
    """Raised for webhook bodies missing the fields we route on."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WebhookPayload:
    """The parts of a webhook body the route needs, already validated."""
    contact_id: str
    location_id: str
    form: FormData


class ProgramQueuedResponse(BaseModel):
    """Response in background mode: the pipeline has only been scheduled."""
    model_config = ConfigDict(populate_by_name=True)

    message: str
    club: str
    contact_id: str = Field(alias="contactId")


class ProgramGeneratedResponse(ProgramQueuedResponse):
    """Response in sync mode, after the PDF is uploaded and emailed."""
    pdf_url: str = Field(alias="pdfUrl")
    redirect_url: str = Field(alias="redirectUrl")
    success: bool = True


async def parse_webhook_payload(request: Request) -> WebhookPayload:
    """
    Validate the webhook body before anything else runs.

    Declared as the first dependency of the route so that a bad request
    is rejected before any service is constructed.
    """
    try:
        body: Any = await request.json()
    except ValueError:
        raise InvalidWebhookPayload("Invalid JSON body")

    if not isinstance(body, dict):
        raise InvalidWebhookPayload("Webhook body must be a JSON object")

    logger.info("Received webhook", extra={"keys": sorted(body.keys())})

    contact_id = body.get("contact_id")
    if not contact_id:
        raise InvalidWebhookPayload("Missing contact_id")

    location = body.get("location")
    location_id = location.get("id") if isinstance(location, dict) else None
    if not location_id:
        raise InvalidWebhookPayload("Missing location.id")

    return WebhookPayload(
        contact_id=str(contact_id),
        location_id=str(location_id),
        form=map_form_fields(body),
    )


WebhookPayloadDep = Annotated[WebhookPayload, Depends(parse_webhook_payload)]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/generate-program",
    status_code=status.HTTP_200_OK,
    summary="Generate and deliver a training program",
    description="Receives the CRM intake form webhook and runs the program pipeline",
    responses={
        400: {"description": "Missing contact_id or location.id"},
        500: {"description": "Pipeline failed (sync mode only)"},
    },
)
async def generate_program(
    payload: WebhookPayloadDep,
    clubs: ClubDirectoryDep,
    settings: SettingsDep,
    service: DeliveryServiceDep,
    background_tasks: BackgroundTasks,
):
    club = clubs.resolve(payload.location_id)

    logger.info(
        "Processing webhook",
        extra={
            "contact_id": payload.contact_id,
            "club": club.club_name,
            "club_number": club.club_number or "default",
            "delivery_mode": settings.delivery_mode,
        },
    )

    if settings.delivery_mode == "background":
        background_tasks.add_task(
            service.deliver_detached, payload.contact_id, club, payload.form
        )
        return ProgramQueuedResponse(
            message="Program generation started",
            club=club.club_name,
            contact_id=payload.contact_id,
        ).model_dump(by_alias=True)

    try:
        result = await service.deliver(payload.contact_id, club, payload.form)
    except ProgramDeliveryError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e)},
        )

    return ProgramGeneratedResponse(
        message="Program generated successfully",
        club=club.club_name,
        contact_id=payload.contact_id,
        pdf_url=result.pdf_url,
        redirect_url=f"{settings.program_success_base}/{payload.contact_id}",
    ).model_dump(by_alias=True)

"""
Health check endpoint.

Used by the hosting platform to know the service is alive, and by
operators to see which clubs are enabled without reading the config file.
It does not call any external service.
"""

import logging

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field

from ..dependencies import ClubDirectoryDep, SettingsDep

logger = logging.getLogger(__name__)

router = APIRouter()


class ClubSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    club_number: str = Field(alias="clubNumber")
    location_id: str = Field(alias="locationId")


class HealthResponse(BaseModel):
    """
    Health check response.

    Lists enabled clubs only; disabled entries in the config file are
    invisible to the webhook and so are left out here too.
    """
    model_config = ConfigDict(populate_by_name=True)

    status: str
    service: str
    enabled_clubs: int = Field(alias="enabledClubs")
    clubs: list[ClubSummary]


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns 200 if the service is running, with the enabled clubs.",
)
async def health_check(settings: SettingsDep, clubs: ClubDirectoryDep) -> HealthResponse:
    enabled = clubs.enabled_clubs
    return HealthResponse(
        status="healthy",
        service=settings.service_name,
        enabled_clubs=len(enabled),
        clubs=[
            ClubSummary(
                name=entry.club_name,
                club_number=entry.club_number,
                location_id=entry.location_id,
            )
            for entry in enabled
        ],
    )

"""
GoHighLevel (LeadConnector) CRM client.

Covers the two calls the pipeline needs: fetching a contact profile and
uploading the program PDF to that contact's files. Credentials are per
club, so every call takes the resolved ClubConfig.

Implements the ContactSource and FileUploader protocols from
core.program.delivery.
"""

import logging
from typing import Any, Optional

import httpx

from src.core.program.models import ClubConfig, ContactRecord

logger = logging.getLogger(__name__)


class CrmClientError(Exception):
    """Raised when a CRM call fails or returns something unusable."""
    pass


class LeadConnectorClient:
    """
    Async LeadConnector API client.

    A fresh httpx.AsyncClient is opened per call; the pipeline makes two
    CRM calls per request, so pooling buys nothing. transport exists for
    tests (httpx.MockTransport).
    """

    def __init__(
        self,
        base_url: str = "https://services.leadconnectorhq.com",
        api_version: str = "2021-07-28",
        timeout_seconds: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_version = api_version
        self._timeout = timeout_seconds
        self._transport = transport

    def _headers(self, club: ClubConfig) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {club.api_key}",
            "Version": self._api_version,
        }

    async def fetch_contact(self, contact_id: str, club: ClubConfig) -> ContactRecord:
        """Fetch a contact profile by id."""
        logger.info(
            "Fetching contact",
            extra={"contact_id": contact_id, "club": club.club_name, "location_id": club.location_id},
        )

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(
                    f"{self._base_url}/contacts/{contact_id}",
                    headers=self._headers(club),
                )
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise CrmClientError(f"Contact fetch timed out for {contact_id}") from e
        except httpx.HTTPStatusError as e:
            logger.error(
                "Contact fetch failed",
                extra={"contact_id": contact_id, "status": e.response.status_code},
            )
            raise CrmClientError(
                f"Contact fetch failed: {e.response.status_code} - {e.response.text}"
            ) from e
        except httpx.RequestError as e:
            raise CrmClientError(f"Contact fetch failed: {e}") from e
        except ValueError as e:
            raise CrmClientError("Contact response is not valid JSON") from e

        contact = data.get("contact") if isinstance(data, dict) else None
        if not isinstance(contact, dict):
            raise CrmClientError(f"Contact {contact_id} missing from CRM response")

        return self._to_contact_record(contact, contact_id, club)

    def _to_contact_record(
        self,
        contact: dict[str, Any],
        contact_id: str,
        club: ClubConfig,
    ) -> ContactRecord:
        custom_fields = contact.get("customField") or contact.get("customFields") or {}
        if isinstance(custom_fields, list):
            # Newer API versions return [{"id": ..., "value": ...}]
            custom_fields = {
                str(item.get("id")): item.get("value")
                for item in custom_fields
                if isinstance(item, dict)
            }

        return ContactRecord(
            id=str(contact.get("id") or contact_id),
            name=contact.get("name") or "Client",
            first_name=contact.get("firstName") or "",
            last_name=contact.get("lastName") or "",
            email=contact.get("email") or "",
            phone=contact.get("phone") or "",
            custom_fields=dict(custom_fields),
            tags=tuple(contact.get("tags") or ()),
            location_id=club.location_id,
            location_name=club.club_name,
            club_number=club.club_number,
        )

    async def upload_pdf(
        self,
        contact_id: str,
        club: ClubConfig,
        pdf: bytes,
        filename: str,
    ) -> str:
        """
        Upload a PDF to the contact's files and return its URL.

        The upload response has carried the link as fileUrl, url, or only
        an id depending on API version; all three are accepted.
        """
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self._base_url}/files/",
                    headers=self._headers(club),
                    params={"contactId": contact_id, "locationId": club.location_id},
                    files={"file": (filename, pdf, "application/pdf")},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise CrmClientError("PDF upload timed out") from e
        except httpx.HTTPStatusError as e:
            logger.error(
                "PDF upload failed",
                extra={"contact_id": contact_id, "status": e.response.status_code},
            )
            raise CrmClientError(
                f"PDF upload failed: {e.response.status_code} - {e.response.text}"
            ) from e
        except httpx.RequestError as e:
            raise CrmClientError(f"PDF upload failed: {e}") from e
        except ValueError as e:
            raise CrmClientError("Upload response is not valid JSON") from e

        logger.debug("CRM upload response", extra={"response": data})
        return self._file_url(data)

    def _file_url(self, data: Any) -> str:
        if isinstance(data, dict):
            if data.get("fileUrl"):
                return data["fileUrl"]
            if data.get("url"):
                return data["url"]
            if data.get("id"):
                return f"{self._base_url}/files/{data['id']}"

        logger.error("Unexpected CRM upload response", extra={"response": data})
        raise CrmClientError("Could not get file URL from CRM upload response")

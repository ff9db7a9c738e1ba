"""
Transactional email via SendGrid.

Sends through the v3 mail/send REST endpoint with httpx rather than the
SendGrid SDK, so it's async and shares timeout handling with the other
outbound clients.
https://docs.sendgrid.com/api-reference/mail-send/mail-send
"""

import base64
import logging
from typing import Any, Optional

import httpx

from src.core.program.delivery import EmailMessage

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when SendGrid rejects or doesn't answer a send."""
    pass


class SendGridEmailClient:
    """Implements the EmailSender protocol from core.program.delivery."""

    def __init__(
        self,
        api_key: str,
        url: str = "https://api.sendgrid.com/v3/mail/send",
        timeout_seconds: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._url = url
        self._timeout = timeout_seconds
        self._transport = transport

    async def send(self, message: EmailMessage) -> None:
        payload = build_payload(message)

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    self._url,
                    headers={
                        "Authorization": f"Bearer {self._api_key}",
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )
        except httpx.TimeoutException as e:
            raise EmailDeliveryError("Email request timed out") from e
        except httpx.RequestError as e:
            raise EmailDeliveryError(f"Email request failed: {e}") from e

        # SendGrid answers 202 Accepted on success
        if response.status_code not in (200, 202):
            raise EmailDeliveryError(
                f"SendGrid API error: {response.status_code} - {response.text}"
            )

        logger.info(
            "Email sent",
            extra={
                "to": message.to,
                "subject": message.subject,
                "attachments": len(message.attachments),
            },
        )


def build_payload(message: EmailMessage) -> dict[str, Any]:
    sender: dict[str, str] = {"email": message.from_email}
    if message.from_name:
        sender["name"] = message.from_name

    content = [{"type": "text/plain", "value": message.text}]
    if message.html:
        content.append({"type": "text/html", "value": message.html})

    payload: dict[str, Any] = {
        "personalizations": [{"to": [{"email": message.to}]}],
        "from": sender,
        "subject": message.subject,
        "content": content,
    }

    if message.attachments:
        payload["attachments"] = [
            {
                "content": base64.b64encode(attachment.content).decode("ascii"),
                "filename": attachment.filename,
                "type": attachment.content_type,
                "disposition": "attachment",
            }
            for attachment in message.attachments
        ]

    return payload

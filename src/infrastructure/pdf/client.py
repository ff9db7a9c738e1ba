"""
HTML-to-PDF conversion via PDFShift.

PDFShift takes a full HTML document and returns the PDF bytes. Print CSS
is honoured (use_print) so the renderer's page breaks carry over.
"""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class PdfConversionError(Exception):
    """Raised when the conversion API fails."""
    pass


class PdfShiftClient:
    """Implements the PdfConverter protocol from core.program.delivery."""

    def __init__(
        self,
        api_key: str,
        url: str = "https://api.pdfshift.io/v3/convert/pdf",
        timeout_seconds: float = 60.0,
        margin: str = "0.5in",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._url = url
        self._timeout = timeout_seconds
        self._margin = margin
        self._transport = transport

    async def convert(self, html: str) -> bytes:
        payload = {
            "source": html,
            "landscape": False,
            "use_print": True,
            "margin": {
                "top": self._margin,
                "bottom": self._margin,
                "left": self._margin,
                "right": self._margin,
            },
        }

        logger.debug("Converting HTML to PDF", extra={"html_chars": len(html)})

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    self._url,
                    json=payload,
                    auth=("api", self._api_key),
                )
                response.raise_for_status()
        except httpx.TimeoutException as e:
            raise PdfConversionError("PDF conversion timed out") from e
        except httpx.HTTPStatusError as e:
            logger.error(
                "PDF conversion failed",
                extra={"status": e.response.status_code, "body": e.response.text[:500]},
            )
            raise PdfConversionError(
                f"PDF conversion failed: {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise PdfConversionError(f"PDF conversion failed: {e}") from e

        return response.content

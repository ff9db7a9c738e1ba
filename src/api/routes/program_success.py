"""
Landing page the trainer opens after a sync-mode webhook.

Looks the contact's PDF URL up in the short-lived cache and redirects to
it. Once the entry has expired the page just confirms the program was
emailed.
"""

import json
import logging
from html import escape

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from ..dependencies import PdfUrlCacheDep

logger = logging.getLogger(__name__)

router = APIRouter()

EXPIRED_PAGE = """<html>
  <head><title>Program Generated</title></head>
  <body style="font-family: Arial, sans-serif; text-align: center; padding: 50px;">
    <h1>✅ Program Generated!</h1>
    <p>Your personalized training program has been emailed to the client.</p>
    <p style="color: #666; font-size: 14px; margin-top: 30px;">The direct link has expired. Please check the client's email or contact files in GHL.</p>
  </body>
</html>
"""

REDIRECT_PAGE = """<html>
  <head>
    <title>Program Generated</title>
    <meta http-equiv="refresh" content="1;url={url_attr}">
  </head>
  <body style="font-family: Arial, sans-serif; text-align: center; padding: 50px;">
    <h1>✅ Your Program is Ready!</h1>
    <p>Opening your personalized training program...</p>
    <p style="color: #666; font-size: 14px;">If it doesn't open automatically, <a href="{url_attr}" style="color: #E31E24; font-weight: bold;">click here</a></p>
    <script>
      setTimeout(() => {{
        window.location.href = {url_js};
      }}, 500);
    </script>
  </body>
</html>
"""


def render_redirect_page(pdf_url: str) -> str:
    return REDIRECT_PAGE.format(
        url_attr=escape(pdf_url, quote=True),
        url_js=json.dumps(pdf_url).replace("<", "\\u003c").replace(">", "\\u003e"),
    )


@router.get(
    "/{contact_id}",
    response_class=HTMLResponse,
    summary="Redirect to a freshly generated program PDF",
)
async def program_success(contact_id: str, cache: PdfUrlCacheDep) -> HTMLResponse:
    pdf_url = cache.get(contact_id)
    if not pdf_url:
        logger.info("PDF URL expired or unknown", extra={"contact_id": contact_id})
        return HTMLResponse(EXPIRED_PAGE)
    return HTMLResponse(render_redirect_page(pdf_url))

"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations
- Explicit about initialization order

For local development:
    uvicorn src.main:app --reload --port 3000

For production:
    gunicorn src.main:app -w 1 -k uvicorn.workers.UvicornWorker

Run a single worker: the PDF URL cache lives in process memory, so the
redirect page only finds URLs generated by the same process.
"""

import base64
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.routes import health, program_success, webhooks
from .api.routes.webhooks import InvalidWebhookPayload
from .config.settings import get_settings
from .core.program.cache import PdfUrlCache
from .core.program.clubs import ClubDirectory

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


def load_logo(path: Optional[str]) -> str:
    """Base64 of the PDF logo, or "" when not configured or unreadable."""
    if not path:
        return ""
    try:
        return base64.b64encode(Path(path).read_bytes()).decode("ascii")
    except OSError as e:
        logger.warning("Could not read logo", extra={"path": path, "error": str(e)})
        return ""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Loads the process-wide state once: the club directory, the PDF URL
    cache and the logo. Nothing here changes while the app runs, except
    the cache contents.
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    app.state.clubs = ClubDirectory.from_file(
        settings.clubs_config_path,
        brand_name=settings.brand_name,
        from_email=settings.from_email,
        fallback_api_key=settings.ghl_api_key,
    )
    app.state.pdf_url_cache = PdfUrlCache(ttl_seconds=settings.pdf_url_ttl_seconds)
    app.state.logo_base64 = load_logo(settings.logo_path)

    logger.info(
        "PT Program Generator starting",
        extra={
            "version": settings.api_version,
            "delivery_mode": settings.delivery_mode,
            "enabled_clubs": len(app.state.clubs.enabled_clubs),
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    yield

    logger.info("PT Program Generator shutting down")


def create_app() -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Generates personalized training programs from CRM intake forms.

        ## Workflow

        1. The CRM posts the intake form to `POST /webhook/generate-program`
        2. The contact is fetched, Claude drafts the program, and the PDF is
           rendered, uploaded to the contact's files and emailed to the client
        3. In sync mode the trainer is sent to `GET /program-success/{contact_id}`,
           which redirects to the PDF while the link is fresh
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Include routers
    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        webhooks.router,
        prefix="/webhook",
        tags=["Webhooks"],
    )

    app.include_router(
        program_success.router,
        prefix="/program-success",
        tags=["Programs"],
    )

    # Root endpoint
    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint - service banner."""
        return {
            "message": settings.service_name,
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    @app.exception_handler(InvalidWebhookPayload)
    async def invalid_webhook_handler(request: Request, exc: InvalidWebhookPayload):
        """Webhook validation failures are a 400 with an {"error"} body."""
        logger.warning(
            "Rejected webhook",
            extra={"path": request.url.path, "error": exc.message},
        )
        return JSONResponse(status_code=400, content={"error": exc.message})

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        Logs the full error server-side and returns a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"}
        )

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


# Create the application instance
# This is what uvicorn/gunicorn will import
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )

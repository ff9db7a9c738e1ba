"""
Tests for the HTTP surface.

The app is built with create_app() and its dependencies overridden, so the
lifespan never runs and no real client is constructed. The delivery
service is the conftest pipeline backed by fakes.
"""

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import (
    get_club_directory,
    get_delivery_service,
    get_pdf_url_cache,
)
from src.api.routes.program_success import render_redirect_page
from src.config.settings import Settings, get_settings
from src.core.program.clubs import ClubDirectory, ClubEntry
from src.main import create_app


EUGENE = ClubEntry(
    club_name="Eugene",
    club_number="101",
    location_id="loc-1",
    api_key="club-key",
    enabled=True,
)
SALEM = ClubEntry("Salem", "102", "loc-2", "salem-key", enabled=False)

WEBHOOK_BODY = {
    "contact_id": "contact-1",
    "location": {"id": "loc-1"},
    "Days Per Week": "4",
    "Knee Limitation": ["Yes"],
}


@pytest.fixture
def make_client(make_pipeline):
    """Build a TestClient for a delivery mode; returns (client, pipeline)."""

    def factory(delivery_mode: str = "sync", **pipeline_kwargs):
        pipeline = make_pipeline(**pipeline_kwargs)
        settings = Settings(
            delivery_mode=delivery_mode,
            base_url="https://programs.example.com/",
            _env_file=None,
        )
        clubs = ClubDirectory([EUGENE, SALEM], "West Coast Strength", settings.from_email)

        app = create_app()
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_club_directory] = lambda: clubs
        app.dependency_overrides[get_pdf_url_cache] = lambda: pipeline.cache
        app.dependency_overrides[get_delivery_service] = lambda: pipeline.service
        return TestClient(app), pipeline

    return factory


# =============================================================================
# Webhook validation
# =============================================================================

class TestWebhookValidation:

    @pytest.mark.parametrize(
        "body, error",
        [
            ({"location": {"id": "loc-1"}}, "Missing contact_id"),
            ({"contact_id": "", "location": {"id": "loc-1"}}, "Missing contact_id"),
            ({"contact_id": "contact-1"}, "Missing location.id"),
            ({"contact_id": "contact-1", "location": {}}, "Missing location.id"),
            ({"contact_id": "contact-1", "location": "loc-1"}, "Missing location.id"),
        ],
    )
    def test_rejects_missing_routing_fields(self, make_client, body, error):
        client, pipeline = make_client()

        response = client.post("/webhook/generate-program", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": error}
        assert pipeline.crm.fetched == []
        assert pipeline.model.prompts == []
        assert pipeline.email.sent == []

    def test_rejects_non_object_body(self, make_client):
        client, _ = make_client()

        response = client.post("/webhook/generate-program", json=["contact-1"])

        assert response.status_code == 400

    def test_rejects_invalid_json(self, make_client):
        client, _ = make_client()

        response = client.post(
            "/webhook/generate-program",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body"}


# =============================================================================
# Sync mode
# =============================================================================

class TestSyncWebhook:

    def test_success_response(self, make_client):
        client, pipeline = make_client()

        response = client.post("/webhook/generate-program", json=WEBHOOK_BODY)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Program generated successfully",
            "club": "Eugene",
            "contactId": "contact-1",
            "pdfUrl": "https://files.example.com/p.pdf",
            "redirectUrl": "https://programs.example.com/program-success/contact-1",
        }
        assert pipeline.crm.fetched[0][1].club_name == "Eugene"

    def test_form_reaches_the_prompt(self, make_client):
        client, pipeline = make_client()

        client.post("/webhook/generate-program", json=WEBHOOK_BODY)

        [prompt] = pipeline.model.prompts
        assert "MOVEMENT LIMITATIONS: Knee." in prompt

    def test_unknown_location_uses_default_club(self, make_client):
        client, pipeline = make_client()

        response = client.post(
            "/webhook/generate-program",
            json={"contact_id": "contact-1", "location": {"id": "loc-2"}},
        )

        assert response.json()["club"] == "West Coast Strength"
        assert pipeline.crm.fetched[0][1].is_default

    def test_pipeline_failure_is_500(self, make_client):
        client, pipeline = make_client(model_error=RuntimeError("model down"))

        response = client.post("/webhook/generate-program", json=WEBHOOK_BODY)

        assert response.status_code == 500
        assert response.json() == {"error": "model down"}
        assert [message.to for message in pipeline.email.sent] == ["admin@example.com"]

    def test_redirect_page_after_success(self, make_client):
        client, _ = make_client()
        client.post("/webhook/generate-program", json=WEBHOOK_BODY)

        response = client.get("/program-success/contact-1")

        assert response.status_code == 200
        assert 'url=https://files.example.com/p.pdf"' in response.text
        assert "Your Program is Ready!" in response.text


# =============================================================================
# Background mode
# =============================================================================

class TestBackgroundWebhook:

    def test_answers_before_delivery(self, make_client):
        client, pipeline = make_client(delivery_mode="background")

        response = client.post("/webhook/generate-program", json=WEBHOOK_BODY)

        assert response.status_code == 200
        assert response.json() == {
            "message": "Program generation started",
            "club": "Eugene",
            "contactId": "contact-1",
        }
        # TestClient runs background tasks before returning
        assert len(pipeline.crm.uploads) == 1

    def test_failure_still_answers_200(self, make_client):
        client, pipeline = make_client(delivery_mode="background", model_error=RuntimeError("x"))

        response = client.post("/webhook/generate-program", json=WEBHOOK_BODY)

        assert response.status_code == 200
        assert [message.to for message in pipeline.email.sent] == ["admin@example.com"]


# =============================================================================
# Health and program-success
# =============================================================================

class TestHealth:

    def test_lists_enabled_clubs(self, make_client):
        client, _ = make_client()

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "service": "PT Program Generator",
            "enabledClubs": 1,
            "clubs": [{"name": "Eugene", "clubNumber": "101", "locationId": "loc-1"}],
        }


class TestProgramSuccess:

    def test_unknown_contact_shows_expired_page(self, make_client):
        client, _ = make_client()

        response = client.get("/program-success/nobody")

        assert response.status_code == 200
        assert "The direct link has expired" in response.text

    def test_cached_url_redirects(self, make_client):
        client, pipeline = make_client()
        pipeline.cache.set("contact-9", "https://files.example.com/9.pdf")

        response = client.get("/program-success/contact-9")

        assert 'href="https://files.example.com/9.pdf"' in response.text
        assert 'window.location.href = "https://files.example.com/9.pdf"' in response.text

    def test_redirect_page_escapes_url(self):
        page = render_redirect_page('https://x/"><script>')

        assert '"><script>' not in page
        assert "&quot;&gt;&lt;script&gt;" in page

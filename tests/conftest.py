"""
Shared fixtures and fakes.

The fakes stand in for the outside systems (Claude, CRM, PDF conversion,
email) and record every call, so tests can assert on what the pipeline
did and, just as important, what it did not do.
"""

import json
from dataclasses import dataclass, field
from typing import Optional

import pytest

from src.core.program.cache import PdfUrlCache
from src.core.program.delivery import EmailMessage, ProgramDeliveryService
from src.core.program.generator import ProgramGenerator
from src.core.program.models import ClubConfig, ContactRecord


def make_program(days: int = 4, exercises_per_day: int = 5) -> dict:
    """A well-formed model response body with `days` workouts."""
    return {
        "basicExplanation": "An upper/lower split to build strength.",
        "progressionNotes": "Add 5 lbs when all sets hit the top of the rep range.",
        "terminology": "RPE: rate of perceived exertion. Superset - two exercises back to back.",
        "principles": "Progressive overload, compound movements first.",
        "importantNotes": "Warm up for 10 minutes before every session.",
        "weekTemplate": {
            "workouts": [
                {
                    "day": day,
                    "title": f"Workout {day}",
                    "focus": f"Focus {day}",
                    "exercises": [
                        {
                            "name": f"Exercise {day}.{n}",
                            "sets": "3",
                            "reps": "8-10",
                            "notes": f"Cue {day}.{n}",
                            "variations": f"Alt {day}.{n}",
                        }
                        for n in range(1, exercises_per_day + 1)
                    ],
                }
                for day in range(1, days + 1)
            ]
        },
    }


class FakeModelClient:
    def __init__(self, response: str = "", error: Optional[Exception] = None) -> None:
        self.response = response
        self.error = error
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.response


class FakeCrm:
    def __init__(self, contact: ContactRecord, upload_url: str = "https://files.example.com/p.pdf") -> None:
        self.contact = contact
        self.upload_url = upload_url
        self.fetched: list[tuple[str, ClubConfig]] = []
        self.uploads: list[tuple[str, str, bytes]] = []

    async def fetch_contact(self, contact_id: str, club: ClubConfig) -> ContactRecord:
        self.fetched.append((contact_id, club))
        return self.contact

    async def upload_pdf(self, contact_id: str, club: ClubConfig, pdf: bytes, filename: str) -> str:
        self.uploads.append((contact_id, filename, pdf))
        return self.upload_url


class FakePdfConverter:
    def __init__(self) -> None:
        self.documents: list[str] = []

    async def convert(self, html: str) -> bytes:
        self.documents.append(html)
        return b"%PDF-1.4 fake"


class FakeEmailSender:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.sent: list[EmailMessage] = []

    async def send(self, message: EmailMessage) -> None:
        self.sent.append(message)
        if self.error:
            raise self.error


@dataclass
class Pipeline:
    service: ProgramDeliveryService
    model: FakeModelClient
    crm: FakeCrm
    pdf: FakePdfConverter
    email: FakeEmailSender
    cache: PdfUrlCache
    extras: dict = field(default_factory=dict)


@pytest.fixture
def sample_contact() -> ContactRecord:
    return ContactRecord(
        id="contact-1",
        name="Jane Doe",
        first_name="Jane",
        last_name="Doe",
        email="jane@example.com",
        location_id="loc-1",
        location_name="West Coast Strength - Eugene",
        club_number="101",
    )


@pytest.fixture
def sample_club() -> ClubConfig:
    return ClubConfig(
        club_name="Eugene",
        club_number="101",
        location_id="loc-1",
        api_key="club-key",
        from_email="programs@westcoaststrength.com",
        from_name="West Coast Strength - Eugene",
    )


@pytest.fixture
def make_pipeline(sample_contact):
    """Factory for a delivery service wired to fakes."""

    def factory(
        response: Optional[str] = None,
        model_error: Optional[Exception] = None,
        email_error: Optional[Exception] = None,
    ) -> Pipeline:
        model = FakeModelClient(
            response=json.dumps(make_program()) if response is None else response,
            error=model_error,
        )
        crm = FakeCrm(sample_contact)
        pdf = FakePdfConverter()
        email = FakeEmailSender(error=email_error)
        cache = PdfUrlCache(ttl_seconds=300)
        service = ProgramDeliveryService(
            contacts=crm,
            generator=ProgramGenerator(model),
            pdf_converter=pdf,
            uploader=crm,
            email_sender=email,
            pdf_url_cache=cache,
            admin_email="admin@example.com",
            from_email="programs@westcoaststrength.com",
        )
        return Pipeline(service=service, model=model, crm=crm, pdf=pdf, email=email, cache=cache)

    return factory


@pytest.fixture
def program_data():
    """Factory for model response bodies; see make_program."""
    return make_program

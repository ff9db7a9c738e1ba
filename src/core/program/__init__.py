"""
Training program generation and delivery logic.

Contains the domain models, the club directory, form mapping, prompt
construction, response parsing, HTML rendering and the delivery pipeline.
"""

from .cache import PdfUrlCache
from .clubs import ClubDirectory, ClubEntry
from .delivery import (
    DeliveryResult,
    EmailAttachment,
    EmailMessage,
    ProgramDeliveryError,
    ProgramDeliveryService,
)
from .generator import ProgramGenerator, TextModelClient
from .intake import map_form_fields
from .models import (
    ClubConfig,
    ContactRecord,
    Exercise,
    FormData,
    MedicalScreening,
    ProgramContent,
    Workout,
)
from .parsing import normalize_program, parse_program_response
from .prompts import build_program_prompt
from .renderer import render_document, render_program_html

__all__ = [
    "ClubConfig",
    "ClubDirectory",
    "ClubEntry",
    "ContactRecord",
    "DeliveryResult",
    "EmailAttachment",
    "EmailMessage",
    "Exercise",
    "FormData",
    "MedicalScreening",
    "PdfUrlCache",
    "ProgramContent",
    "ProgramDeliveryError",
    "ProgramDeliveryService",
    "ProgramGenerator",
    "TextModelClient",
    "Workout",
    "build_program_prompt",
    "map_form_fields",
    "normalize_program",
    "parse_program_response",
    "render_document",
    "render_program_html",
]

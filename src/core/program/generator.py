"""
Program generation: the part of the service that designs the program.

Turns a client's intake form into a ProgramContent by prompting a text
model and normalizing what comes back. It's framework-agnostic and
doesn't know about HTTP, the CRM or PDFs.
"""

import logging
from typing import Protocol

from .models import ContactRecord, FormData, ProgramContent
from .parsing import normalize_program, parse_program_response
from .prompts import build_program_prompt

logger = logging.getLogger(__name__)


class TextModelClient(Protocol):
    """
    Interface for text-generation LLM clients.

    Using a Protocol here means the generator doesn't know or care whether
    we're using Claude or a fake for testing. It just needs something that
    turns a prompt into text.
    """

    async def complete(self, prompt: str) -> str:
        """Send a single user prompt and return the text response."""
        ...


class ProgramGenerator:
    """
    Builds the prompt, calls the model, normalizes the response.

    Stateless beyond its model client. An unparseable response is returned
    as unstructured content rather than raised; only a failed model call
    raises.
    """

    def __init__(self, model_client: TextModelClient) -> None:
        self._model_client = model_client

    async def generate(self, contact: ContactRecord, form: FormData) -> ProgramContent:
        prompt = build_program_prompt(contact, form)

        logger.info(
            "Requesting program generation",
            extra={
                "contact_id": contact.id,
                "days_per_week": form.days_per_week,
                "prompt_chars": len(prompt),
            },
        )

        raw_response = await self._model_client.complete(prompt)
        content = normalize_program(parse_program_response(raw_response))

        logger.info(
            "Program generated",
            extra={
                "contact_id": contact.id,
                "structured": content.is_structured,
                "workouts": len(content.workouts or []),
            },
        )
        return content

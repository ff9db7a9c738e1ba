"""
Delivery pipeline: contact -> program -> PDF -> CRM upload -> client email.

ProgramDeliveryService runs the stages in a fixed order for one request.
It owns no external clients directly; each outside system sits behind a
small Protocol so tests can pass fakes and the stages stay readable.

Any stage failure aborts the rest of the pipeline, sends one best-effort
notification to the operator, and is re-raised as ProgramDeliveryError.
Nothing is retried.
"""

import logging
import traceback
from dataclasses import dataclass, field
from html import escape
from typing import Optional, Protocol

from .cache import PdfUrlCache
from .generator import ProgramGenerator
from .models import ClubConfig, ContactRecord, FormData, MedicalScreening
from .renderer import render_document, render_program_html

logger = logging.getLogger(__name__)


class ProgramDeliveryError(Exception):
    """Raised when any stage of the delivery pipeline fails."""
    pass


# ---------------------------------------------------------------------------
# Collaborator protocols
# ---------------------------------------------------------------------------

@dataclass
class EmailAttachment:
    filename: str
    content: bytes
    content_type: str = "application/pdf"


@dataclass
class EmailMessage:
    to: str
    from_email: str
    subject: str
    text: str
    html: str = ""
    from_name: Optional[str] = None
    attachments: list[EmailAttachment] = field(default_factory=list)


class ContactSource(Protocol):
    async def fetch_contact(self, contact_id: str, club: ClubConfig) -> ContactRecord:
        ...


class PdfConverter(Protocol):
    async def convert(self, html: str) -> bytes:
        ...


class FileUploader(Protocol):
    async def upload_pdf(
        self,
        contact_id: str,
        club: ClubConfig,
        pdf: bytes,
        filename: str,
    ) -> str:
        """Upload to the contact's files and return a shareable URL."""
        ...


class EmailSender(Protocol):
    async def send(self, message: EmailMessage) -> None:
        ...


# ---------------------------------------------------------------------------
# Email content
# ---------------------------------------------------------------------------

def program_filename(contact: ContactRecord) -> str:
    return f"Training_Program_{contact.first_name}_{contact.last_name}.pdf"


def build_program_email(
    contact: ContactRecord,
    club: ClubConfig,
    pdf: bytes,
) -> EmailMessage:
    sender = club.from_name
    return EmailMessage(
        to=contact.email,
        from_email=club.from_email,
        from_name=sender,
        subject=f"Your Personalized Training Program - {contact.first_name}",
        text=(
            f"Hi {contact.first_name},\n\n"
            f"Your customized training program from {sender} is attached. Please review "
            "it carefully and reach out if you have any questions.\n\n"
            "Let's crush these goals!\n\n"
            f"{sender}"
        ),
        html=(
            f"<p>Hi {escape(contact.first_name)},</p>\n"
            f"<p>Your customized training program from <strong>{escape(sender)}</strong> is "
            "attached. Please review it carefully and reach out if you have any "
            "questions.</p>\n"
            "<p><strong>Let's crush these goals!</strong></p>\n"
            f"<p>{escape(sender)}</p>"
        ),
        attachments=[EmailAttachment(filename=program_filename(contact), content=pdf)],
    )


def build_error_email(
    error: BaseException,
    contact_id: str,
    club: ClubConfig,
    admin_email: str,
    from_email: str,
) -> EmailMessage:
    stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return EmailMessage(
        to=admin_email,
        from_email=from_email,
        subject=f"PT Program Generator Error - {club.club_name}",
        text=(
            f"Error generating program for contact {contact_id} at {club.club_name} "
            f"({club.club_number or 'default'}):\n\n{error}\n\n{stack}"
        ),
    )


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

@dataclass
class DeliveryResult:
    contact_id: str
    pdf_url: str
    client_email: str


class ProgramDeliveryService:
    """Runs the delivery pipeline for one contact at a time."""

    def __init__(
        self,
        contacts: ContactSource,
        generator: ProgramGenerator,
        pdf_converter: PdfConverter,
        uploader: FileUploader,
        email_sender: EmailSender,
        pdf_url_cache: PdfUrlCache,
        admin_email: str,
        from_email: str,
        brand_name: str = "West Coast Strength",
        logo_base64: str = "",
    ) -> None:
        self._contacts = contacts
        self._generator = generator
        self._pdf_converter = pdf_converter
        self._uploader = uploader
        self._email_sender = email_sender
        self._cache = pdf_url_cache
        self._admin_email = admin_email
        self._from_email = from_email
        self._brand_name = brand_name
        self._logo_base64 = logo_base64

    async def deliver(
        self,
        contact_id: str,
        club: ClubConfig,
        form: FormData,
    ) -> DeliveryResult:
        """
        Generate, upload and email a program. Returns the uploaded PDF URL.

        Raises ProgramDeliveryError (chained to the original error) after
        the operator has been notified.
        """
        log_context = {"contact_id": contact_id, "club": club.club_name}
        logger.info("Starting program generation", extra=log_context)

        try:
            contact = await self._contacts.fetch_contact(contact_id, club)
            logger.info("Fetched contact", extra={**log_context, "email": contact.email})

            content = await self._generator.generate(contact, form)
            content.trainer_name = form.trainer_name
            content.medical_screening = MedicalScreening.from_form(form)

            document = render_document(
                render_program_html(contact, content, self._brand_name),
                self._logo_base64,
            )
            pdf = await self._pdf_converter.convert(document)
            logger.info("PDF created", extra={**log_context, "size_bytes": len(pdf)})

            pdf_url = await self._uploader.upload_pdf(
                contact_id, club, pdf, program_filename(contact)
            )
            logger.info("PDF uploaded to CRM", extra={**log_context, "pdf_url": pdf_url})

            await self._email_sender.send(build_program_email(contact, club, pdf))
            logger.info("Program emailed", extra={**log_context, "email": contact.email})

            self._cache.set(contact_id, pdf_url)

        except Exception as e:
            logger.error(
                "Program generation failed",
                extra={**log_context, "error": str(e)},
                exc_info=e,
            )
            await self._notify_operator(e, contact_id, club)
            raise ProgramDeliveryError(str(e)) from e

        return DeliveryResult(contact_id=contact_id, pdf_url=pdf_url, client_email=contact.email)

    async def deliver_detached(
        self,
        contact_id: str,
        club: ClubConfig,
        form: FormData,
    ) -> None:
        """
        Background-mode entry point.

        The webhook has already answered, so a failure has nowhere to go
        but the log and the operator notification deliver() already sent.
        """
        try:
            await self.deliver(contact_id, club, form)
        except ProgramDeliveryError as e:
            logger.error(
                "Background program delivery failed",
                extra={"contact_id": contact_id, "club": club.club_name, "error": str(e)},
            )

    async def _notify_operator(
        self,
        error: BaseException,
        contact_id: str,
        club: ClubConfig,
    ) -> None:
        message = build_error_email(
            error, contact_id, club, self._admin_email, self._from_email
        )
        try:
            await self._email_sender.send(message)
        except Exception as e:
            logger.error(
                "Failed to send error notification",
                extra={"contact_id": contact_id, "error": str(e)},
            )

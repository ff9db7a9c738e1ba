#!/usr/bin/env python3
"""
Generate a training program for a fixture client, without the CRM.

Runs the prompt -> Claude -> parse -> render part of the pipeline and writes
the result to test-output/. Useful when changing the prompt or the PDF
layout: nothing is uploaded and nobody is emailed.

Usage:
    python scripts/generate_sample_program.py
    python scripts/generate_sample_program.py --html-only --days 3 --knee

Requires:
    - .env file with ANTHROPIC_API_KEY (and PDFSHIFT_API_KEY unless --html-only)
"""

import asyncio
import sys
import time
from pathlib import Path

# Add project root to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from src.config.settings import get_settings  # noqa: E402
from src.core.program.generator import ProgramGenerator  # noqa: E402
from src.core.program.intake import map_form_fields  # noqa: E402
from src.core.program.models import ContactRecord, MedicalScreening  # noqa: E402
from src.core.program.renderer import render_document, render_program_html  # noqa: E402
from src.infrastructure.anthropic.client import create_anthropic_client  # noqa: E402
from src.infrastructure.pdf.client import PdfShiftClient  # noqa: E402
from src.main import load_logo  # noqa: E402


SAMPLE_CONTACT = ContactRecord(
    id="test123",
    name="John Smith",
    first_name="John",
    last_name="Smith",
    email="john.smith@example.com",
    phone="555-0123",
)


def sample_form_payload(days: int, knee: bool) -> dict:
    payload = {
        "Service Employee": "Sample Trainer",
        "Program Goal": "muscle building",
        "Duration (Weeks)": "8 weeks",
        "Days Per Week": f"{days} days a week",
        "Experience Level": "Intermediate",
        "Equipment": "full gym",
    }
    if knee:
        payload["Knee Limitation"] = ["Yes"]
    return payload


async def generate(args) -> Path:
    settings = get_settings()

    client = create_anthropic_client(
        api_key=settings.anthropic_api_key or None,
        model=settings.anthropic_model,
        max_tokens=settings.anthropic_max_tokens,
        timeout_seconds=settings.anthropic_timeout_seconds,
    )
    form = map_form_fields(sample_form_payload(args.days, args.knee))

    print("Generating program with Claude...")
    content = await ProgramGenerator(client).generate(SAMPLE_CONTACT, form)
    content.trainer_name = form.trainer_name
    content.medical_screening = MedicalScreening.from_form(form)
    print(f"Structured: {content.is_structured}, workouts: {len(content.workouts or [])}")

    document = render_document(
        render_program_html(SAMPLE_CONTACT, content, settings.brand_name),
        load_logo(settings.logo_path),
    )

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    stamp = int(time.time())

    if args.html_only:
        path = output_dir / f"test-program-{stamp}.html"
        path.write_text(document, encoding="utf-8")
        return path

    print("Converting to PDF...")
    converter = PdfShiftClient(
        api_key=settings.pdfshift_api_key,
        url=settings.pdfshift_url,
        timeout_seconds=settings.http_timeout_seconds,
    )
    pdf = await converter.convert(document)
    path = output_dir / f"test-program-{stamp}.pdf"
    path.write_bytes(pdf)
    print(f"PDF size: {len(pdf) / 1024:.2f} KB")
    return path


def main():
    import argparse

    parser = argparse.ArgumentParser(description="Generate a sample training program")
    parser.add_argument("--days", type=int, default=4, help="Training days per week")
    parser.add_argument("--knee", action="store_true", help="Tick the knee limitation")
    parser.add_argument("--html-only", action="store_true", help="Skip PDF conversion")
    parser.add_argument("--output-dir", default="test-output", help="Where to write the file")
    args = parser.parse_args()

    try:
        path = asyncio.run(generate(args))
    except Exception as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print(f"Done. Output saved to: {path}")


if __name__ == "__main__":
    main()

"""
HTML rendering of a generated program.

The output is print-ready markup for the HTML-to-PDF service: an overview
page followed by one page per workout. Rendering is a direct transform of
ProgramContent. Workouts and exercises come out in the order the model
returned them (the prompt already dictates that order), nothing is
filtered or validated, and missing values render as empty strings.

Pages are built as lists of fragments, with each optional section adding
its fragment only when it has content.
"""

import re
from html import escape
from urllib.parse import quote

from .models import ContactRecord, Exercise, ProgramContent, Workout

LOGO_PLACEHOLDER = "{{logoBase64}}"
CONTENT_PLACEHOLDER = "{{programContent}}"
QR_CODE_URL = "https://api.qrserver.com/v1/create-qr-code/?size=60x60&data={data}"
PLACEHOLDER_TEXT = "Program content"

_TERM_BEFORE_COLON = re.compile(r"([A-Za-z\s]+):")
_TERM_BEFORE_DASH = re.compile(r"([A-Za-z]+)\s*-\s+")

DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>Training Program</title>
  <style>
    body { font-family: Arial, Helvetica, sans-serif; font-size: 12px; color: #000; margin: 0; }
    .page { page-break-after: always; position: relative; }
    .page:last-child { page-break-after: auto; }
    .logo-image { position: absolute; top: 0; right: 0; height: 48px; }
    .page-header { display: flex; justify-content: space-between; border-bottom: 3px solid #E31E24; margin-bottom: 12px; padding-bottom: 6px; }
    .page-header h1 { font-size: 20px; margin: 0; letter-spacing: 1px; }
    .page-header h2 { font-size: 14px; margin: 4px 0 0; color: #E31E24; }
    .header-right p { margin: 2px 0; font-size: 11px; font-weight: bold; text-align: right; }
    .core-concepts h3 { font-size: 13px; margin: 8px 0 3px; }
    .core-concepts-content p { margin: 0 0 10px; line-height: 1.4; }
    .workout-table { width: 100%; border-collapse: collapse; border: 1px solid #000; }
    .workout-table th, .workout-table td { padding: 8px; border: 1px solid #000; vertical-align: top; }
    .workout-table th { background: #f2f2f2; text-align: left; }
    .workout-table .sets-reps { text-align: center; width: 100px; }
    .workout-table .variations { width: 180px; font-size: 11px; }
    .exercise-notes { font-size: 11px; color: #666; }
    .workout-focus { font-size: 11px; color: #444; margin: 0 0 8px; }
    .medical-screening { font-size: 11px; border-top: 1px solid #ccc; margin-top: 12px; padding-top: 6px; }
    .program-text { white-space: pre-wrap; line-height: 1.4; }
  </style>
</head>
<body>
{{programContent}}
</body>
</html>
"""


def format_terminology(text: str) -> str:
    """Bold each term written as "Term: definition" or "Term - definition"."""
    if not text:
        return ""
    bolded = _TERM_BEFORE_COLON.sub(r"<strong>\1</strong>:", text)
    return _TERM_BEFORE_DASH.sub(r"<strong>\1</strong> - ", bolded)


def qr_code_url(video_url: str) -> str:
    return QR_CODE_URL.format(data=quote(video_url, safe=""))


def _page_header(brand_name: str, subtitle: str, trainer: str, client: str) -> str:
    return f"""
      <div class="page-header">
        <div class="header-left">
          <h1>{escape(brand_name.upper())}</h1>
          <h2>{subtitle}</h2>
        </div>
        <div class="header-right">
          <p>TRAINER: {escape(trainer)}</p>
          <p>CLIENT: {escape(client)}</p>
        </div>
      </div>"""


def _logo(brand_name: str) -> str:
    return f'<img src="data:image/png;base64,{LOGO_PLACEHOLDER}" class="logo-image" alt="{escape(brand_name)} Logo">'


def _section(title: str, body_html: str) -> str:
    if not body_html:
        return ""
    return f"""
        <h3>{title}:</h3>
        <div class="core-concepts-content"><p>{body_html}</p></div>"""


def _medical_screening_section(content: ProgramContent) -> str:
    screening = content.medical_screening
    if screening is None:
        return ""
    rows = "".join(
        f"<li>{escape(question)}: {escape(answer)}</li>"
        for question, answer in screening.answers().items()
    )
    return f"""
        <div class="medical-screening">
          <h3>MEDICAL SCREENING:</h3>
          <ul>{rows}</ul>
        </div>"""


def render_overview_page(
    contact: ContactRecord,
    content: ProgramContent,
    brand_name: str,
) -> str:
    fragments = [
        '<div class="page">',
        _logo(brand_name),
        _page_header(brand_name, "PROGRAM OVERVIEW", content.trainer_name, contact.full_name),
        '<div class="core-concepts">',
        _section("BASIC EXPLANATION", escape(content.basic_explanation)),
        _section("PROGRESSION", escape(content.progression_notes)),
        _section("TERMINOLOGY", format_terminology(escape(content.terminology))),
        _section("PRINCIPLES", escape(content.principles)),
        _section("IMPORTANT NOTES", escape(content.important_notes)),
        "</div>",
        _medical_screening_section(content),
        "</div>",
    ]
    return "\n".join(fragment for fragment in fragments if fragment)


def render_exercise_row(exercise: Exercise) -> str:
    cell = [f"<strong>{escape(exercise.name)}</strong>"]
    if exercise.notes:
        cell.append(f'<br><span class="exercise-notes">{escape(exercise.notes)}</span>')
    if exercise.video_url:
        cell.append(
            f'<br><img src="{escape(qr_code_url(exercise.video_url))}" alt="Video QR" '
            'style="margin-top: 5px;">'
        )
    return f"""
          <tr>
            <td>{"".join(cell)}</td>
            <td class="sets-reps">{escape(exercise.sets_reps)}</td>
            <td class="variations">{escape(exercise.variations)}</td>
          </tr>"""


def render_workout_page(
    contact: ContactRecord,
    content: ProgramContent,
    workout: Workout,
    brand_name: str,
) -> str:
    subtitle = f"DAY {escape(workout.day)} - {escape(workout.title.upper())}"
    fragments = [
        '<div class="page workout-page">',
        _logo(brand_name),
        _page_header(brand_name, subtitle, content.trainer_name, contact.full_name),
    ]
    if workout.focus:
        fragments.append(f'<p class="workout-focus">FOCUS: {escape(workout.focus)}</p>')
    fragments.append("""
      <table class="workout-table">
        <thead>
          <tr>
            <th>EXERCISE</th>
            <th class="sets-reps"></th>
            <th class="variations">VARIATIONS</th>
          </tr>
        </thead>
        <tbody>""")
    fragments.extend(render_exercise_row(exercise) for exercise in workout.exercises)
    fragments.append("""
        </tbody>
      </table>
    </div>""")
    return "\n".join(fragments)


def render_program_html(
    contact: ContactRecord,
    content: ProgramContent,
    brand_name: str = "West Coast Strength",
) -> str:
    """Render the program body: overview page plus one page per workout."""
    if not content.is_structured:
        text = content.program_text or PLACEHOLDER_TEXT
        return f'<div class="program-text">{escape(text)}</div>'

    pages = [render_overview_page(contact, content, brand_name)]
    pages.extend(
        render_workout_page(contact, content, workout, brand_name)
        for workout in content.workouts
    )
    return "\n".join(pages)


def render_document(program_html: str, logo_base64: str = "") -> str:
    """
    Wrap a rendered program in the printable HTML document.

    Without a logo the logo images are dropped rather than left broken.
    """
    if logo_base64:
        body = program_html.replace(LOGO_PLACEHOLDER, logo_base64)
    else:
        body = re.sub(r'<img src="data:image/png;base64,\{\{logoBase64\}\}"[^>]*>', "", program_html)
    return DOCUMENT_TEMPLATE.replace(CONTENT_PLACEHOLDER, body)

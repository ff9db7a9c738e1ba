"""
Tests for HTML rendering of generated programs.
"""

import pytest

from src.core.program.models import (
    ContactRecord,
    Exercise,
    MedicalScreening,
    ProgramContent,
)
from src.core.program.parsing import normalize_program
from src.core.program.renderer import (
    LOGO_PLACEHOLDER,
    PLACEHOLDER_TEXT,
    format_terminology,
    qr_code_url,
    render_document,
    render_exercise_row,
    render_program_html,
)


CONTACT = ContactRecord(id="c1", first_name="Jane", last_name="Doe")


@pytest.fixture
def structured(program_data):
    """Factory for normalized 4-day programs with a trainer attached."""

    def build(days: int = 4) -> ProgramContent:
        content = normalize_program(program_data(days=days))
        content.trainer_name = "Alex"
        return content

    return build


class TestStructuredProgram:

    def test_one_overview_plus_one_page_per_workout(self, structured):
        html = render_program_html(CONTACT, structured(days=4))

        assert html.count('<div class="page">') == 1
        assert html.count('<div class="page workout-page">') == 4

    def test_overview_comes_first(self, structured):
        html = render_program_html(CONTACT, structured())

        assert html.index("PROGRAM OVERVIEW") < html.index("workout-page")

    def test_workout_pages_in_model_order(self, structured):
        html = render_program_html(CONTACT, structured(days=3))

        positions = [html.index(f"DAY {day} - WORKOUT {day}") for day in (1, 2, 3)]
        assert positions == sorted(positions)

    def test_exercise_rows_in_model_order(self, structured):
        html = render_program_html(CONTACT, structured(days=1))

        positions = [html.index(f"Exercise 1.{n}") for n in range(1, 6)]
        assert positions == sorted(positions)
        assert html.count("<tr>") == 1 + 5  # header + rows

    def test_header_names_trainer_and_client(self, structured):
        html = render_program_html(CONTACT, structured())

        assert "TRAINER: Alex" in html
        assert "CLIENT: Jane Doe" in html
        assert "WEST COAST STRENGTH" in html

    def test_overview_sections(self, structured):
        html = render_program_html(CONTACT, structured())

        assert "BASIC EXPLANATION:" in html
        assert "PROGRESSION:" in html
        assert "IMPORTANT NOTES:" in html

    def test_empty_sections_are_omitted(self):
        content = ProgramContent(basic_explanation="Hello", workouts=[])
        html = render_program_html(CONTACT, content)

        assert "BASIC EXPLANATION:" in html
        assert "PROGRESSION:" not in html
        assert "TERMINOLOGY:" not in html

    def test_structured_with_no_workouts_is_overview_only(self):
        html = render_program_html(CONTACT, ProgramContent(workouts=[]))

        assert html.count('<div class="page">') == 1
        assert "workout-page" not in html

    def test_focus_line(self, structured):
        html = render_program_html(CONTACT, structured(days=1))
        assert "FOCUS: Focus 1" in html

    def test_medical_screening_section(self, structured):
        content = structured()
        content.medical_screening = MedicalScreening(chest_pain="Yes")
        html = render_program_html(CONTACT, content)

        assert "MEDICAL SCREENING:" in html
        assert "Chest pain during activity: Yes" in html

    def test_model_text_is_escaped(self):
        content = ProgramContent(basic_explanation="<script>alert(1)</script>", workouts=[])
        html = render_program_html(CONTACT, content)

        assert "<script>" not in html
        assert "&lt;script&gt;" in html


class TestExerciseRow:

    def test_sets_reps_and_variations(self):
        row = render_exercise_row(Exercise(name="Squat", sets="4", reps="6", variations="Goblet Squat"))

        assert "<strong>Squat</strong>" in row
        assert "4 x 6" in row
        assert "Goblet Squat" in row

    def test_missing_fields_render_empty(self):
        row = render_exercise_row(Exercise(name="Plank"))

        assert '<td class="sets-reps"> x </td>' in row
        assert '<td class="variations"></td>' in row
        assert "exercise-notes" not in row

    def test_video_url_adds_qr_code(self):
        row = render_exercise_row(Exercise(name="Row", video_url="https://youtu.be/x?a=1"))

        assert "api.qrserver.com" in row
        assert "https%3A%2F%2Fyoutu.be%2Fx%3Fa%3D1" in row

    def test_no_video_no_qr(self):
        assert "qrserver" not in render_exercise_row(Exercise(name="Row"))


class TestUnstructuredProgram:

    def test_fallback_block(self):
        html = render_program_html(CONTACT, ProgramContent(program_text="Do pushups."))

        assert html == '<div class="program-text">Do pushups.</div>'

    def test_placeholder_when_text_missing(self):
        html = render_program_html(CONTACT, ProgramContent())
        assert PLACEHOLDER_TEXT in html


class TestHelpers:

    def test_terminology_colon_terms_bolded(self):
        assert format_terminology("RPE: effort scale") == "<strong>RPE</strong>: effort scale"

    def test_terminology_dash_terms_bolded(self):
        assert format_terminology("Superset - two lifts") == "<strong>Superset</strong> - two lifts"

    def test_terminology_empty(self):
        assert format_terminology("") == ""

    def test_qr_code_url_encodes_data(self):
        assert qr_code_url("a b").endswith("data=a%20b")


class TestRenderDocument:

    def test_wraps_program_in_document(self):
        document = render_document("<p>body</p>")

        assert document.startswith("<!DOCTYPE html>")
        assert "<p>body</p>" in document
        assert "{{programContent}}" not in document

    def test_logo_substituted(self, structured):
        html = render_program_html(CONTACT, structured(days=1))
        document = render_document(html, logo_base64="QUJD")

        assert "data:image/png;base64,QUJD" in document
        assert LOGO_PLACEHOLDER not in document

    def test_logo_dropped_when_missing(self, structured):
        html = render_program_html(CONTACT, structured(days=1))
        document = render_document(html)

        assert "logo-image\"" not in document
        assert LOGO_PLACEHOLDER not in document

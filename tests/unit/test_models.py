"""
Unit tests for the program domain models.

These tests verify the core business objects without touching external
services (no API calls, no network, no file system).
"""

import dataclasses

import pytest

from src.core.program.models import (
    ContactRecord,
    Exercise,
    FormData,
    MedicalScreening,
    ProgramContent,
    Workout,
)


class TestFormData:
    """Tests for the normalized intake form."""

    def test_defaults_have_no_missing_values(self):
        """Every field has a concrete default; nothing is None."""
        form = FormData()

        for f in dataclasses.fields(form):
            assert getattr(form, f.name) is not None, f.name

    def test_documented_defaults(self):
        form = FormData()

        assert form.program_goal == "general fitness"
        assert form.duration == "8"
        assert form.days_per_week == "4"
        assert form.experience_level == "intermediate"
        assert form.equipment == "full gym"
        assert form.knee_limitation is False

    def test_is_immutable(self):
        """Form data is built once per request and never changed."""
        form = FormData()
        with pytest.raises(dataclasses.FrozenInstanceError):
            form.program_goal = "other"

    def test_day_focuses_are_in_day_order(self):
        form = FormData(day1_focus="Legs", day3_focus="Back")

        assert form.day_focuses == ("Legs", "", "Back", "", "", "", "")


class TestMedicalScreening:
    """Tests for the screening summary printed in the PDF."""

    def test_unanswered_questions_read_no(self):
        screening = MedicalScreening.from_form(FormData())

        assert set(screening.answers().values()) == {"No"}
        assert not screening.has_alerts

    def test_answered_questions_are_kept(self):
        screening = MedicalScreening.from_form(FormData(chest_pain="Yes"))

        assert screening.chest_pain == "Yes"
        assert screening.has_alerts


class TestProgramModels:

    def test_sets_reps_format(self):
        assert Exercise(sets="3", reps="8-10").sets_reps == "3 x 8-10"

    def test_missing_sets_reps_still_format(self):
        assert Exercise().sets_reps == " x "

    def test_content_without_workouts_is_unstructured(self):
        assert not ProgramContent(program_text="text").is_structured

    def test_empty_workout_list_is_structured(self):
        assert ProgramContent(workouts=[]).is_structured

    def test_workout_defaults(self):
        workout = Workout()
        assert workout.exercises == []


class TestContactRecord:

    def test_full_name(self):
        contact = ContactRecord(id="c1", first_name="Jane", last_name="Doe")
        assert contact.full_name == "Jane Doe"

    def test_full_name_without_last_name(self):
        assert ContactRecord(id="c1", first_name="Jane").full_name == "Jane"

    def test_name_defaults_to_client(self):
        assert ContactRecord(id="c1").name == "Client"

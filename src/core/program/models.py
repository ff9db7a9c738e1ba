"""
Domain models for training program generation.

These models represent the core business concepts. They have no dependencies
on external frameworks, databases, or APIs. Request-scoped records (form
data, contact, club) are frozen: they are built once per webhook and only
read afterwards.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ClubConfig:
    """
    A club (tenant) with its own CRM credentials and sender identity.

    is_default marks a record synthesized for an unknown or disabled
    location. Callers keep working with it, but with fallback credentials.
    """
    club_name: str
    location_id: str
    api_key: str
    from_email: str
    from_name: str
    club_number: str = ""
    enabled: bool = True
    is_default: bool = False


@dataclass(frozen=True)
class FormData:
    """
    Intake form answers normalized into a fixed schema.

    Every field has a default so downstream code never checks for None.
    Numeric answers stay strings; they are only ever formatted into text.
    """
    # Trainer & program design
    trainer_name: str = ""
    program_goal: str = "general fitness"
    duration: str = "8"
    days_per_week: str = "4"
    experience_level: str = "intermediate"
    equipment: str = "full gym"

    # InBody metrics
    weight: str = ""
    height: str = ""
    body_fat: str = ""
    bmr: str = ""

    # Movement limitations
    neck_limitation: bool = False
    shoulder_limitation: bool = False
    elbow_wrist_limitation: bool = False
    lower_back_limitation: bool = False
    hip_limitation: bool = False
    knee_limitation: bool = False
    ankle_limitation: bool = False
    other_limitations: str = ""

    # Client goals & interests
    interested_in: str = ""
    interested_in_pt: str = ""
    preferred_coach: str = ""
    fitness_goals: str = ""

    # Medical screening
    heart_condition: str = ""
    chest_pain: str = ""
    bone_joint_problem: str = ""
    blood_pressure_medication: str = ""
    medical_supervision_needed: str = ""

    # Current fitness & nutrition
    current_workout_routine: str = ""
    follows_diet_plan: str = ""
    biggest_obstacles: str = ""
    would_help_most: str = ""

    # Additional client info
    gender: str = ""
    trainer_notes: str = ""

    # Day focus, only filled when the trainer specified one
    day1_focus: str = ""
    day2_focus: str = ""
    day3_focus: str = ""
    day4_focus: str = ""
    day5_focus: str = ""
    day6_focus: str = ""
    day7_focus: str = ""

    @property
    def day_focuses(self) -> tuple[str, ...]:
        """Per-day focus strings in day order (index 0 is day 1)."""
        return (
            self.day1_focus,
            self.day2_focus,
            self.day3_focus,
            self.day4_focus,
            self.day5_focus,
            self.day6_focus,
            self.day7_focus,
        )


@dataclass(frozen=True)
class ContactRecord:
    """A CRM contact, fetched fresh for every request."""
    id: str
    name: str = "Client"
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    custom_fields: dict = field(default_factory=dict)
    tags: tuple[str, ...] = ()
    location_id: str = ""
    location_name: str = ""
    club_number: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class MedicalScreening:
    """
    Screening answers printed in the PDF.

    Always attached for legal purposes, so unanswered questions read "No".
    """
    heart_condition: str = "No"
    chest_pain: str = "No"
    bone_joint_problem: str = "No"
    blood_pressure_medication: str = "No"
    medical_supervision_needed: str = "No"

    @classmethod
    def from_form(cls, form: FormData) -> "MedicalScreening":
        return cls(
            heart_condition=form.heart_condition or "No",
            chest_pain=form.chest_pain or "No",
            bone_joint_problem=form.bone_joint_problem or "No",
            blood_pressure_medication=form.blood_pressure_medication or "No",
            medical_supervision_needed=form.medical_supervision_needed or "No",
        )

    @property
    def has_alerts(self) -> bool:
        return any(answer != "No" for answer in self.answers().values())

    def answers(self) -> dict[str, str]:
        """Question label -> answer, in the order they appear on the form."""
        return {
            "Heart condition requiring medical supervision": self.heart_condition,
            "Chest pain during activity": self.chest_pain,
            "Bone or joint problem": self.bone_joint_problem,
            "Blood pressure medication": self.blood_pressure_medication,
            "Other reason for medical supervision": self.medical_supervision_needed,
        }


@dataclass
class Exercise:
    """One row of a workout table. Missing values are empty strings."""
    name: str = ""
    sets: str = ""
    reps: str = ""
    notes: str = ""
    variations: str = ""
    video_url: str = ""

    @property
    def sets_reps(self) -> str:
        return f"{self.sets} x {self.reps}"


@dataclass
class Workout:
    """One day's session. Exercise order is the order the model returned."""
    day: str = ""
    title: str = ""
    focus: str = ""
    exercises: list[Exercise] = field(default_factory=list)


@dataclass
class ProgramContent:
    """
    The generated program, after schema normalization.

    workouts is None when the model response carried no structured week
    template; the renderer then prints program_text as a single block.
    trainer_name and medical_screening are attached by the delivery
    pipeline, not by the model.
    """
    basic_explanation: str = ""
    progression_notes: str = ""
    terminology: str = ""
    principles: str = ""
    important_notes: str = ""
    program_text: str = ""
    workouts: Optional[list[Workout]] = None
    trainer_name: str = ""
    medical_screening: Optional[MedicalScreening] = None

    @property
    def is_structured(self) -> bool:
        return self.workouts is not None

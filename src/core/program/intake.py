"""
Mapping of CRM form payloads onto FormData.

The CRM posts form answers keyed by their on-screen labels, so the keys
are free text that changes whenever someone edits the form. The mapping
is kept as one ordered table of FieldSpec entries: each field lists the
labels it accepts (first match wins), its default, and a coercion.

The mapper is total. Unknown keys are ignored, missing keys become the
default, and no input makes it raise.
"""

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from .models import FormData

Coercion = Callable[[Any], Any]


def as_text(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value if item not in (None, ""))
    return str(value).strip()


def as_lower(value: Any) -> str:
    return as_text(value).lower()


def strip_suffixes(*suffixes: str) -> Coercion:
    """Drop unit suffixes like " weeks" or "%" from a numeric answer."""
    def coerce(value: Any) -> str:
        # suffixes carry their leading space, so match before trimming
        text = as_text(value) if isinstance(value, (list, tuple)) else str(value)
        for suffix in suffixes:
            text = text.replace(suffix, "")
        return text.strip()
    return coerce


def yes_flag(value: Any) -> bool:
    """Checkbox answers arrive either as "Yes" or as a list of ticked options."""
    if isinstance(value, (list, tuple)):
        return "Yes" in value
    return value == "Yes" or value is True


@dataclass(frozen=True)
class FieldSpec:
    name: str
    keys: tuple[str, ...]
    default: Any = ""
    coerce: Coercion = as_text


def _is_present(value: Any) -> bool:
    if value is None or value == "":
        return False
    if isinstance(value, (list, tuple)) and not value:
        return False
    if isinstance(value, (bool, int, float)) and not value:
        # false and 0 fall through to the next key, like any blank answer
        return False
    return True


_DAYS_SUFFIXES = strip_suffixes(" days a week", " day a week")

FIELD_SPECS: tuple[FieldSpec, ...] = (
    # Trainer & program design
    FieldSpec("trainer_name", ("Service Employee",)),
    FieldSpec("program_goal", ("Program Goal",), "general fitness"),
    FieldSpec("duration", ("Duration (Weeks)", "Duration"), "8", strip_suffixes(" weeks")),
    FieldSpec("days_per_week", ("Days Per Week", "Days per Week"), "4", _DAYS_SUFFIXES),
    FieldSpec("experience_level", ("Experience Level",), "intermediate", as_lower),
    FieldSpec("equipment", ("Equipment",), "full gym"),

    # InBody metrics
    FieldSpec("weight", ("Weight (Lbs)", "Weight")),
    FieldSpec("height", ("Height",)),
    FieldSpec("body_fat", ("Body Fat (%)", "Body Fat"), "", strip_suffixes("%")),
    FieldSpec("bmr", ("BMR",)),

    # Movement limitations
    FieldSpec("neck_limitation", ("Neck Limitation",), False, yes_flag),
    FieldSpec("shoulder_limitation", ("Shoulder Limitation",), False, yes_flag),
    FieldSpec("elbow_wrist_limitation", ("Elbow Wrist Limitation",), False, yes_flag),
    FieldSpec("lower_back_limitation", ("Lower Back Limitation",), False, yes_flag),
    FieldSpec("hip_limitation", ("Hip Limitation",), False, yes_flag),
    FieldSpec("knee_limitation", ("Knee Limitation",), False, yes_flag),
    FieldSpec("ankle_limitation", ("Ankle Limitation",), False, yes_flag),
    FieldSpec("other_limitations", ("Other Limitations",)),

    # Client goals & interests
    FieldSpec("interested_in", ("What are you interested in?",)),
    FieldSpec("interested_in_pt", ("Are you interested in Personal Training?",)),
    FieldSpec("preferred_coach", ("Do you have a Preferred Coach?",)),
    FieldSpec("fitness_goals", ("What are your Fitness Goals?",)),

    # Medical screening
    FieldSpec(
        "heart_condition",
        ("Has a Doctor Ever Said You Have a Heart Condition & Recommended Only "
         "Medically Supervised Activity?",),
    ),
    FieldSpec("chest_pain", ("Do You Experience Chest Pain During Physical Activity?",)),
    FieldSpec(
        "bone_joint_problem",
        ("Do You Have a Bone or Joint Problem that Physical Activity Could Aggravate?",),
    ),
    FieldSpec(
        "blood_pressure_medication",
        ("Has Your Doctor Recommended Medication for your Blood Pressure?",),
    ),
    FieldSpec(
        "medical_supervision_needed",
        ("Are you Aware of Any Reason you Should Not Exercise Without Medical Supervision",),
    ),

    # Current fitness & nutrition
    FieldSpec("current_workout_routine", ("What is Your Current Workout Routine?",)),
    FieldSpec("follows_diet_plan", ("Do You Follow a Diet / Meal Plan?",)),
    FieldSpec("biggest_obstacles", ("What are your Biggest Obstacles?",)),
    FieldSpec("would_help_most", ("What Would Help You the Most?",)),

    # Additional client info
    FieldSpec("gender", ("Gender", "contact.gender")),
    FieldSpec("trainer_notes", ("contact.pt_notes", "PT Notes")),

    # Day focus
    FieldSpec("day1_focus", ("Day 1 Focus", "Day One Focus")),
    FieldSpec("day2_focus", ("Day Two Focus", "Day 2 Focus")),
    FieldSpec("day3_focus", ("Day Three Focus", "Day 3 Focus")),
    FieldSpec("day4_focus", ("Day Four Focus", "Day 4 Focus")),
    FieldSpec("day5_focus", ("Day Five Focus", "Day 5 Focus")),
    FieldSpec("day6_focus", ("Day Six Focus", "Day 6 Focus")),
    FieldSpec("day7_focus", ("Day Seven Focus", "Day 7 Focus")),
)


def map_field(payload: Mapping[str, Any], spec: FieldSpec) -> Any:
    """Resolve one field: first present candidate key, coerced, else the default."""
    for key in spec.keys:
        value = payload.get(key)
        if _is_present(value):
            coerced = spec.coerce(value)
            if coerced == "" and spec.default != "":
                # e.g. "Duration": " weeks" strips down to nothing
                continue
            return coerced
    return spec.default


def map_form_fields(payload: Mapping[str, Any]) -> FormData:
    """Build FormData from a raw webhook body."""
    return FormData(**{spec.name: map_field(payload, spec) for spec in FIELD_SPECS})

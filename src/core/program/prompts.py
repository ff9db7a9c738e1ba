"""
Prompt construction for program generation.

The prompts are here, not in config, because they're core business logic.
Changing them changes what the product does. They should be version
controlled and reviewed like code.

The prompt is assembled from an ordered list of clause builders. Each
builder looks at the form and returns its text, or "" when the data it
depends on is absent. Empty clauses are dropped before joining, so the
presence/absence of every optional section can be tested on its own.
"""

from typing import Callable

from .models import ContactRecord, FormData


# ---------------------------------------------------------------------------
# Fixed prompt text
# ---------------------------------------------------------------------------

NO_LIMITATIONS_TEXT = "No movement limitations reported."

LIMITATION_LABELS: tuple[tuple[str, str], ...] = (
    ("neck_limitation", "Neck"),
    ("shoulder_limitation", "Shoulder"),
    ("elbow_wrist_limitation", "Elbow/Wrist"),
    ("lower_back_limitation", "Lower Back"),
    ("hip_limitation", "Hip"),
    ("knee_limitation", "Knee"),
    ("ankle_limitation", "Ankle"),
)

MEDICAL_ALERT_LABELS: tuple[tuple[str, str], ...] = (
    ("heart_condition", "Heart condition requiring medical supervision"),
    ("chest_pain", "Chest pain during activity"),
    ("bone_joint_problem", "Bone/joint concerns"),
    ("blood_pressure_medication", "Blood pressure medication"),
    ("medical_supervision_needed", "Other medical supervision needed"),
)

MODIFICATION_EXAMPLES = """IMPORTANT: If there are movement limitations, you MUST intelligently modify exercises. For example:
- Shoulder limitations → Use landmine presses instead of overhead presses, focus on neutral grip movements
- Knee limitations → Use leg press variations, step-ups, or belt squats instead of back squats
- Lower back limitations → Use hex bar deadlifts, hip thrusts, or leg curls instead of conventional deadlifts"""

MEDICAL_CONSIDERATIONS = (
    "MEDICAL CONSIDERATIONS: This client has medical screening alerts. Keep intensity "
    "moderate, avoid high-impact movements, emphasize proper breathing and form, and "
    "include longer rest periods."
)

RESPONSE_FORMAT = """Return your response as a JSON object with this EXACT structure:

{
  "basicExplanation": "2-3 sentences explaining what this program is, the training split used, and how it will help them reach their goal",
  "progressionNotes": "How to progress week to week - when to increase weight, add reps, etc. Be specific about progression protocol",
  "terminology": "Define ONLY terms that are actually used in this program's exercises and notes. Every term defined here MUST appear somewhere in the workout exercises or notes. Do not define terms that aren't used.",
  "principles": "The core training principles this program is built on (e.g., progressive overload, compound movements first, etc.)",
  "importantNotes": "Safety reminders, warm-up guidance, rest day recommendations, and any other critical information",
  "weekTemplate": {
    "workouts": [
      {
        "day": 1,
        "title": "Workout name (e.g., Upper Body, Push Day, etc.)",
        "focus": "Primary muscle groups/movement patterns",
        "exercises": [
          {
            "name": "Exercise name (modified for any limitations)",
            "sets": "3",
            "reps": "8-10",
            "notes": "Form cues, modifications for limitations if applicable",
            "variations": "1-2 alternative exercises that target the same muscles (e.g., 'DB Press, Machine Press')"
          }
        ]
      }
    ]
  }
}"""

EXERCISE_ORDER_RULES = """7. EXERCISE ORDER IS CRITICAL - Follow this structure for each workout:
   - Start with the most demanding compound lifts that use large muscle groups (squats, deadlifts, bench press, rows, overhead press)
   - Then move to secondary compound movements
   - Finish with isolation/accessory exercises for smaller muscles
   - NEVER jump between muscle groups - complete ALL exercises for a muscle group before moving to the next
   - Example: Do ALL back exercises first, THEN all bicep exercises. Never go back→bicep→back
   - Example: Do ALL chest exercises first, THEN all tricep exercises. Never go chest→tricep→chest
8. TERMINOLOGY MUST MATCH PROGRAM - Only define terms in the terminology section that are actually used in the exercises or notes. If you use "superset" in the program, define it. If you don't use "AMRAP", don't define it.
9. Return ONLY valid JSON. No markdown code blocks. No text before or after the JSON."""


# ---------------------------------------------------------------------------
# Derived lists
# ---------------------------------------------------------------------------

def active_limitations(form: FormData) -> list[str]:
    """Names of the limitations the client ticked, in form order."""
    limitations = [label for attr, label in LIMITATION_LABELS if getattr(form, attr)]
    if form.other_limitations:
        limitations.append(f"Other: {form.other_limitations}")
    return limitations


def medical_alerts(form: FormData) -> list[str]:
    """Screening answers that are present and not a plain "No"."""
    alerts = []
    for attr, label in MEDICAL_ALERT_LABELS:
        answer = getattr(form, attr)
        if answer and answer != "No":
            alerts.append(f"{label}: {answer}")
    return alerts


# ---------------------------------------------------------------------------
# Clause builders
# ---------------------------------------------------------------------------

def intro_clause(contact: ContactRecord, form: FormData) -> str:
    return (
        f"You are an expert personal trainer creating a {form.duration}-week "
        f"training program for {contact.first_name}."
    )


def client_info_clause(contact: ContactRecord, form: FormData) -> str:
    lines = [
        "CLIENT INFO:",
        f"- Name: {contact.first_name} {contact.last_name}",
    ]
    if form.gender:
        lines.append(f"- Gender: {form.gender}")
    lines.extend([
        f"- Experience Level: {form.experience_level}",
        f"- Available Equipment: {form.equipment}",
        f"- Training Days Per Week: {form.days_per_week}",
        f"- Primary Goal: {form.program_goal}",
    ])
    return "\n".join(lines)


def metrics_clause(contact: ContactRecord, form: FormData) -> str:
    if not (form.weight or form.height or form.body_fat or form.bmr):
        return ""
    return (
        f"INBODY METRICS: Weight: {form.weight} lbs, Height: {form.height} inches, "
        f"Body Fat: {form.body_fat}%, BMR: {form.bmr} calories/day"
    )


def client_background_clause(contact: ContactRecord, form: FormData) -> str:
    entries = [
        ("Fitness Goals", form.fitness_goals),
        ("Current Routine", form.current_workout_routine),
        ("Diet/Meal Plan", form.follows_diet_plan),
        ("Biggest Obstacles", form.biggest_obstacles),
        ("What Would Help Most", form.would_help_most),
        ("Interests", form.interested_in),
    ]
    lines = [f"{label}: {value}" for label, value in entries if value]
    if not lines:
        return ""
    return "CLIENT BACKGROUND:\n" + "\n".join(lines)


def trainer_notes_clause(contact: ContactRecord, form: FormData) -> str:
    if not form.trainer_notes:
        return ""
    return (
        "⭐ TRAINER NOTES (IMPORTANT - USE THESE TO CUSTOMIZE THE PROGRAM):\n"
        f"{form.trainer_notes}\n"
        "You MUST incorporate these notes into the program design. If the client loves "
        "certain exercises, include them. If they hate certain exercises, avoid them or "
        "use alternatives."
    )


def day_focus_clause(contact: ContactRecord, form: FormData) -> str:
    focuses = [
        f"Day {day}: {focus}"
        for day, focus in enumerate(form.day_focuses, start=1)
        if focus
    ]
    if not focuses:
        return ""
    return (
        "🎯 DAILY FOCUS (CRITICAL - EACH WORKOUT MUST FOLLOW THIS FOCUS):\n"
        + "\n".join(focuses)
        + "\nYou MUST design each workout day to align with the specified focus. "
        "The workout title and exercises should directly reflect this focus."
    )


def limitations_clause(contact: ContactRecord, form: FormData) -> str:
    limitations = active_limitations(form)
    if not limitations:
        return NO_LIMITATIONS_TEXT
    return (
        f"MOVEMENT LIMITATIONS: {', '.join(limitations)}. "
        "YOU MUST modify exercises to work around these limitations."
    )


def medical_alerts_clause(contact: ContactRecord, form: FormData) -> str:
    alerts = medical_alerts(form)
    if not alerts:
        return ""
    return (
        "MEDICAL SCREENING ALERTS:\n- "
        + "\n- ".join(alerts)
        + "\n⚠️ IMPORTANT: Design a conservative program that accounts for these "
        "medical considerations."
    )


def modification_examples_clause(contact: ContactRecord, form: FormData) -> str:
    return MODIFICATION_EXAMPLES


def medical_considerations_clause(contact: ContactRecord, form: FormData) -> str:
    return MEDICAL_CONSIDERATIONS if medical_alerts(form) else ""


def requirements_clause(contact: ContactRecord, form: FormData) -> str:
    lines = [
        "Create a comprehensive training program with:",
        "1. A detailed program overview with separate sections for explanation, "
        "progression, terminology, principles, and notes",
        f"2. {form.days_per_week} distinct workouts per week (e.g., Upper/Lower split, "
        "Push/Pull/Legs, etc.)",
        "3. Each workout should have 5-8 exercises with specific sets, reps, and "
        "exercise variations",
        "4. Include form cues and technique notes for each exercise",
        "5. Provide 1-2 alternative exercise variations for each exercise",
    ]
    if form.current_workout_routine:
        lines.append(
            f"6. Consider their current routine ({form.current_workout_routine}) "
            "when designing progression"
        )
    return "\n".join(lines)


def response_format_clause(contact: ContactRecord, form: FormData) -> str:
    return RESPONSE_FORMAT


def critical_instructions_clause(contact: ContactRecord, form: FormData) -> str:
    if medical_alerts(form):
        intensity = (
            "Use CONSERVATIVE programming due to medical screening alerts - moderate "
            "intensity, avoid high-impact"
        )
    else:
        intensity = "Include specific form cues and technique notes for each exercise"

    if form.biggest_obstacles:
        obstacle = f"Address their biggest obstacle: {form.biggest_obstacles}"
    else:
        obstacle = "Focus on sustainable, progressive programming"

    return "\n".join([
        "CRITICAL INSTRUCTIONS:",
        f"1. Create exactly {form.days_per_week} distinct workouts that form a complete "
        "training split",
        "2. MODIFY exercises based on limitations - use safer alternatives, reduced ROM, "
        "or easier progressions",
        f"3. {intensity}",
        f"4. {obstacle}",
        '5. ALWAYS include 1-2 exercise variations for each exercise in the "variations" field',
        "6. NEVER mention or recommend consulting a physical therapist, doctor, physician, "
        "medical professional, or healthcare provider. Simply provide exercise "
        "modifications and alternatives instead.",
        EXERCISE_ORDER_RULES,
    ])


ClauseBuilder = Callable[[ContactRecord, FormData], str]

PROMPT_CLAUSES: tuple[ClauseBuilder, ...] = (
    intro_clause,
    client_info_clause,
    metrics_clause,
    client_background_clause,
    trainer_notes_clause,
    day_focus_clause,
    limitations_clause,
    medical_alerts_clause,
    modification_examples_clause,
    medical_considerations_clause,
    requirements_clause,
    response_format_clause,
    critical_instructions_clause,
)


def build_program_prompt(contact: ContactRecord, form: FormData) -> str:
    """Render the generation prompt for one client."""
    fragments = [clause(contact, form) for clause in PROMPT_CLAUSES]
    return "\n\n".join(fragment for fragment in fragments if fragment)

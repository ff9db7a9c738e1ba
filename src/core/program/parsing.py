"""
Parsing of the model's program response.

The model is asked for bare JSON but sometimes wraps it in a markdown
fence, and occasionally answers in prose. A response that can't be parsed
is not an error: it becomes an unstructured program that still renders
and still gets delivered.

Two response schemas are in circulation: the current
``weekTemplate.workouts`` and the older ``weeks[0].workouts``.
normalize_program folds both into ProgramContent.workouts right after
parsing, so nothing downstream sees the difference.
"""

import json
import logging
import re
from typing import Any

from .models import Exercise, ProgramContent, Workout

logger = logging.getLogger(__name__)

PARSE_ERROR_MESSAGE = "Error generating structured program. Please try again."

_JSON_FENCE = re.compile(r"```json\s*\n?([\s\S]*?)\n?```")
_ANY_FENCE = re.compile(r"```\s*\n?([\s\S]*?)\n?```")


def extract_json_text(raw: str) -> str:
    """Return the JSON candidate: a ```json block, else any fenced block, else the text."""
    text = raw.strip()

    match = _JSON_FENCE.search(text)
    if match:
        return match.group(1).strip()

    match = _ANY_FENCE.search(text)
    if match:
        return match.group(1).strip()

    return text


def fallback_program(raw: str) -> dict[str, Any]:
    return {
        "basicExplanation": PARSE_ERROR_MESSAGE,
        "programOverview": PARSE_ERROR_MESSAGE,
        "programText": raw,
        "weekTemplate": None,
    }


def parse_program_response(raw: str) -> dict[str, Any]:
    """
    Parse the model response into a dict. Never raises.

    Anything that isn't a JSON object comes back as the fallback structure
    with the original text under "programText".
    """
    try:
        parsed = json.loads(extract_json_text(raw))
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(
            "Failed to parse program response as JSON",
            extra={"error": str(e), "preview": str(raw)[:500]},
        )
        return fallback_program(raw)

    if not isinstance(parsed, dict):
        logger.warning(
            "Program response JSON is not an object",
            extra={"type": type(parsed).__name__},
        )
        return fallback_program(raw)

    workouts = _raw_workouts(parsed)
    logger.info(
        "Parsed program response",
        extra={
            "has_week_template": bool(parsed.get("weekTemplate")),
            "has_weeks": bool(parsed.get("weeks")),
            "workouts": len(workouts) if workouts is not None else 0,
        },
    )
    return parsed


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return str(value)


def _raw_workouts(data: dict[str, Any]) -> list | None:
    """Workouts from either schema, or None when neither is present."""
    template = data.get("weekTemplate")
    if isinstance(template, dict):
        workouts = template.get("workouts")
        return workouts if isinstance(workouts, list) else []

    weeks = data.get("weeks")
    if isinstance(weeks, list):
        first = weeks[0] if weeks else None
        workouts = first.get("workouts") if isinstance(first, dict) else None
        return workouts if isinstance(workouts, list) else []

    if template or weeks:
        # Any other non-empty template/weeks value still counts as structured
        return []
    return None


def _exercise(data: Any) -> Exercise:
    if not isinstance(data, dict):
        return Exercise()
    return Exercise(
        name=_text(data.get("name")),
        sets=_text(data.get("sets")),
        reps=_text(data.get("reps")),
        notes=_text(data.get("notes")),
        variations=_text(data.get("variations") or data.get("variation")),
        video_url=_text(data.get("videoUrl")),
    )


def _workout(data: Any) -> Workout:
    if not isinstance(data, dict):
        return Workout()
    exercises = data.get("exercises")
    if not isinstance(exercises, list):
        exercises = []
    return Workout(
        day=_text(data.get("day")),
        title=_text(data.get("title")),
        focus=_text(data.get("focus")),
        exercises=[_exercise(item) for item in exercises],
    )


def normalize_program(data: dict[str, Any]) -> ProgramContent:
    """Collapse either response schema into ProgramContent, keeping list order."""
    raw_workouts = _raw_workouts(data)
    return ProgramContent(
        basic_explanation=_text(data.get("basicExplanation") or data.get("programOverview")),
        progression_notes=_text(data.get("progressionNotes")),
        terminology=_text(data.get("terminology")),
        principles=_text(data.get("principles")),
        important_notes=_text(data.get("importantNotes") or data.get("generalNotes")),
        program_text=_text(data.get("programText")),
        workouts=None if raw_workouts is None else [_workout(item) for item in raw_workouts],
    )

# dayplanner/appointments.py
import re
from typing import List, Optional, Tuple

from loguru import logger

from .models import Appointment, AppointmentType
from .tasks import TaskKind
from .timeutils import to_minutes

_CLAUSE_SPLIT = re.compile(r"[,;\n]|(?:\s+and\s+)", re.IGNORECASE)

# First matching rule wins.
_INTENT_RULES: List[Tuple[re.Pattern, AppointmentType, Optional[TaskKind]]] = [
    (re.compile(r"walk|stroll|park|outside", re.I), AppointmentType.OUTING, TaskKind.WALK),
    (
        re.compile(r"visit|friend|coming over|guest|playdate|play date|someone.*over", re.I),
        AppointmentType.VISITOR,
        None,
    ),
    (
        re.compile(r"doctor|appointment|checkup|check-up|clinic|hospital", re.I),
        AppointmentType.APPOINTMENT,
        None,
    ),
    (
        re.compile(r"library|cafe|coffee|lunch|brunch|shopping|errand|museum|zoo", re.I),
        AppointmentType.OUTING,
        None,
    ),
]

_TIME = r"\d{1,2}(?::\d{2})?\s*(?:am|pm)?"
_RANGE = re.compile(
    rf"(?:from\s+)?({_TIME})\s*(?:-|to|until|til)\s*({_TIME})", re.IGNORECASE
)
_SINGLE = re.compile(rf"(?:at\s+)?({_TIME})", re.IGNORECASE)
_MERIDIEM = re.compile(r"am|pm", re.IGNORECASE)
_LEADING_HOUR = re.compile(r"^\s*(\d{1,2})")

APPOINTMENT_SPAN = 60
DEFAULT_SPAN = 90
MINUTES_PER_DAY = 1440


def classify(clause: str) -> Tuple[AppointmentType, Optional[TaskKind]]:
    for pattern, kind, fulfills in _INTENT_RULES:
        if pattern.search(clause):
            return kind, fulfills
    return AppointmentType.OTHER, None


def _infer_end_meridiem(start: str, end: str) -> str:
    """Give a bare range end an AM/PM, leaning towards the afternoon."""
    if _MERIDIEM.search(end):
        return end
    if re.search(r"pm", start, re.IGNORECASE):
        return end + " PM"
    m = _LEADING_HOUR.match(end)
    if m and 1 <= int(m.group(1)) <= 7:
        return end + " PM"
    return end


def _parse_clause(part: str) -> Appointment:
    clause = part.strip().lower()
    kind, fulfills = classify(clause)
    appointment = Appointment(description=part.strip(), type=kind, fulfills_task=fulfills)

    range_match = _RANGE.search(clause)
    if range_match:
        start_text = range_match.group(1)
        end_text = _infer_end_meridiem(start_text, range_match.group(2))
        start, end = to_minutes(start_text), to_minutes(end_text)
        # "room 12-42" is not a clock range
        if start < MINUTES_PER_DAY and end <= MINUTES_PER_DAY:
            appointment.start_minutes, appointment.end_minutes = start, end
        return appointment

    single_match = _SINGLE.search(clause)
    if single_match:
        span = APPOINTMENT_SPAN if kind == AppointmentType.APPOINTMENT else DEFAULT_SPAN
        start = to_minutes(single_match.group(1))
        if start < MINUTES_PER_DAY:
            appointment.start_minutes = start
            appointment.end_minutes = min(start + span, MINUTES_PER_DAY)
    return appointment


def parse_appointments(text: Optional[str]) -> List[Appointment]:
    """
    Split free text into clauses and turn each into an Appointment.

    Clauses are separated by commas, semicolons, newlines or the word "and".
    A clause without a recognisable time is kept, typed but untimed.
    """
    if not text or not text.strip():
        return []

    appointments = []
    for part in _CLAUSE_SPLIT.split(text):
        if not part or not part.strip():
            continue
        appointment = _parse_clause(part)
        logger.debug(
            "Parsed {!r} as {} [{}, {})",
            appointment.description,
            appointment.type.value,
            appointment.start_minutes,
            appointment.end_minutes,
        )
        appointments.append(appointment)
    return appointments

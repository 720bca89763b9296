# dayplanner/tasks.py
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class TaskKind(str, Enum):
    READ_BOOKS = "read_books"
    EATING_SOLIDS = "eating_solids"
    WALK = "walk"
    BATH = "bath"
    VESTIBULAR_PLAY = "vestibular_play"
    CRAWLING_PRACTICE = "crawling_practice"
    MUSIC_TIME = "music_time"


@dataclass(frozen=True)
class RecurringSlot:
    label: str
    time: str                 # default preferred start, "H:MM AM/PM"
    duration: int             # minutes
    social: bool = False      # good to do while visitors are over
    exclusive: bool = False   # needs the caregiver's full attention
    exempt_from_day_end: bool = False


# Order matters: visitor-window staggering uses a task's position among the social rows.
RECURRING_SLOTS: Dict[TaskKind, RecurringSlot] = {
    TaskKind.READ_BOOKS: RecurringSlot("Read 5 books", "9:00 AM", 20, social=True),
    TaskKind.EATING_SOLIDS: RecurringSlot("Eating solids", "12:30 PM", 30, exclusive=True),
    TaskKind.WALK: RecurringSlot("Going for a walk", "3:30 PM", 45, social=True, exclusive=True),
    TaskKind.BATH: RecurringSlot(
        "Having a bath", "6:00 PM", 30, exclusive=True, exempt_from_day_end=True
    ),
    TaskKind.VESTIBULAR_PLAY: RecurringSlot("Vestibular play", "11:00 AM", 15, social=True),
    TaskKind.CRAWLING_PRACTICE: RecurringSlot(
        "Crawling/walking practice", "2:30 PM", 20, social=True
    ),
    TaskKind.MUSIC_TIME: RecurringSlot("Music time", "4:30 PM", 15, social=True),
}

DEFAULT_SLOT = RecurringSlot("", "9:00 AM", 20)

_BY_LABEL = {slot.label.lower(): kind for kind, slot in RECURRING_SLOTS.items()}


def resolve_task(label: str) -> Optional[TaskKind]:
    """Map a configured task label (or a kind value) to its TaskKind, if known."""
    key = label.strip().lower()
    if key in _BY_LABEL:
        return _BY_LABEL[key]
    try:
        return TaskKind(key)
    except ValueError:
        return None


def slot_for(kind: Optional[TaskKind]) -> RecurringSlot:
    if kind is None:
        return DEFAULT_SLOT
    return RECURRING_SLOTS[kind]


def social_kinds() -> List[TaskKind]:
    return [kind for kind, slot in RECURRING_SLOTS.items() if slot.social]

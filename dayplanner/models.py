# dayplanner/models.py
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from .tasks import TaskKind


class AppointmentType(str, Enum):
    OUTING = "outing"
    VISITOR = "visitor"
    APPOINTMENT = "appointment"
    OTHER = "other"


class Energy(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Category(str, Enum):
    SENSORY = "sensory"
    MOTOR = "motor"
    COGNITIVE = "cognitive"
    SOCIAL = "social"
    CREATIVE = "creative"


class WeatherNeed(str, Enum):
    GOOD = "good"
    BAD = "bad"
    ANY = "any"


class ItemType(str, Enum):
    FEEDING = "feeding"
    NAP = "nap"
    RECURRING = "recurring"
    BONUS = "bonus"


class TimeBlock(str, Enum):
    MORNING = "morning"
    MIDDAY = "midday"
    AFTERNOON = "afternoon"
    EVENING = "evening"


@dataclass(frozen=True)
class Interval:
    start: int  # minutes since midnight
    end: int

    def __post_init__(self):
        if self.end <= self.start:
            raise ValueError(f"interval end ({self.end}) must be after start ({self.start})")

    def overlaps(self, other: "Interval") -> bool:
        return self.start < other.end and self.end > other.start


@dataclass
class Appointment:
    description: str
    type: AppointmentType = AppointmentType.OTHER
    start_minutes: Optional[int] = None
    end_minutes: Optional[int] = None
    fulfills_task: Optional[TaskKind] = None

    @property
    def is_timed(self) -> bool:
        return self.start_minutes is not None and self.end_minutes is not None

    @property
    def interval(self) -> Optional[Interval]:
        """Occupied range, or None when untimed or degenerate (end before start)."""
        if not self.is_timed or self.end_minutes <= self.start_minutes:
            return None
        return Interval(self.start_minutes, self.end_minutes)


@dataclass(frozen=True)
class AgeRange:
    min: int  # months, inclusive
    max: int

    def contains(self, months: int) -> bool:
        return self.min <= months <= self.max


@dataclass(frozen=True)
class Activity:
    id: str
    title: str
    description: str
    duration_minutes: int
    energy_required: Energy
    indoor: bool
    category: Category
    age_range: AgeRange
    weather_dependent: Optional[WeatherNeed] = None
    tags: FrozenSet[str] = frozenset()
    materials: Tuple[str, ...] = ()


@dataclass
class WeatherData:
    is_rainy: bool = False
    is_good_weather: bool = True
    temperature: Optional[float] = None
    condition: str = ""
    description: str = ""


@dataclass
class SurveyContext:
    energy_level: Energy = Energy.MEDIUM
    staying_home: bool = False
    wants_crafts: bool = False
    activity_moods: List[str] = field(default_factory=list)
    appointments_text: str = ""
    age_months: int = 0
    parsed_appointments: Optional[List[Appointment]] = None  # pre-parsed by the caller

    @property
    def has_appointments(self) -> bool:
        if self.parsed_appointments:
            return True
        return bool(self.appointments_text and self.appointments_text.strip())


DEFAULT_RECURRING_TASKS = [
    "Read 5 books",
    "Eating solids",
    "Going for a walk",
    "Having a bath",
    "Vestibular play",
    "Crawling/walking practice",
    "Music time",
]


@dataclass
class UserPreferences:
    feeding_times: List[str] = field(
        default_factory=lambda: ["8:00 AM", "12:00 PM", "4:00 PM", "7:30 PM"]
    )
    naps_per_day: int = 2
    nap_duration: int = 30  # minutes
    recurring_tasks: List[str] = field(default_factory=lambda: list(DEFAULT_RECURRING_TASKS))
    baby_birth_date: Optional[date] = None
    baby_name: str = "Baby"

    def age_in_months(self, today: Optional[date] = None) -> int:
        """Whole calendar months since birth, never negative."""
        if self.baby_birth_date is None:
            return 0
        today = today or date.today()
        months = (today.year - self.baby_birth_date.year) * 12 + (
            today.month - self.baby_birth_date.month
        )
        return max(0, months)


@dataclass
class ScheduledItem:
    id: str
    task: str
    type: ItemType
    time_block: Optional[TimeBlock] = None
    suggested_time: Optional[str] = None  # "H:MM AM/PM"
    start_minutes: Optional[int] = None
    duration_minutes: int = 0
    activity: Optional[Activity] = None
    social_activity: Optional[bool] = None
    can_overlap: Optional[bool] = None
    overlap: bool = False  # placed by the fallback on top of another item
    past_day_end: bool = False  # ends after the day end it was placed against
    completed: bool = False

    @property
    def interval(self) -> Optional[Interval]:
        if self.start_minutes is None or self.duration_minutes <= 0:
            return None
        return Interval(self.start_minutes, self.start_minutes + self.duration_minutes)

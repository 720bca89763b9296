from .activities import (
    ActivityCatalog,
    ActivitySelector,
    get_replacement_activity,
    load_catalog,
    score_activity,
    select_bonus_activities,
)
from .allocator import TimeAllocator
from .appointments import parse_appointments
from .config import PlannerConfig
from .models import (
    Activity,
    Appointment,
    ScheduledItem,
    SurveyContext,
    UserPreferences,
    WeatherData,
)
from .scheduler import generate_schedule, schedule_frame, sort_items
from .tasks import TaskKind

__all__ = [
    "Activity",
    "ActivityCatalog",
    "ActivitySelector",
    "Appointment",
    "PlannerConfig",
    "ScheduledItem",
    "SurveyContext",
    "TaskKind",
    "TimeAllocator",
    "UserPreferences",
    "WeatherData",
    "generate_schedule",
    "get_replacement_activity",
    "load_catalog",
    "parse_appointments",
    "schedule_frame",
    "score_activity",
    "select_bonus_activities",
    "sort_items",
]

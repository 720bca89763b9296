# dayplanner/scheduler.py
import re
from typing import List, Optional

import numpy as np
import pandas as pd
from loguru import logger

from .activities import ActivityCatalog, ActivitySelector, is_food_activity
from .allocator import TimeAllocator
from .appointments import parse_appointments
from .config import DEFAULT_CONFIG, PlannerConfig
from .metrics import DEGRADED_PLACEMENTS, SCHEDULE_TIME
from .models import (
    Appointment,
    AppointmentType,
    Category,
    ItemType,
    ScheduledItem,
    SurveyContext,
    UserPreferences,
    WeatherData,
)
from .tasks import resolve_task, slot_for, social_kinds
from .timeutils import to_minutes, to_time_block, to_time_string

VISITOR_FRIENDLY_CATEGORIES = {Category.SENSORY, Category.SOCIAL, Category.CREATIVE}


def _timed_item(item_id: str, task: str, item_type: ItemType, start: int,
                duration: int, **extra) -> ScheduledItem:
    return ScheduledItem(
        id=item_id,
        task=task,
        type=item_type,
        time_block=to_time_block(start),
        suggested_time=to_time_string(start),
        start_minutes=start,
        duration_minutes=duration,
        **extra,
    )


def _record_degraded(item: ScheduledItem) -> None:
    if item.overlap or item.past_day_end:
        DEGRADED_PLACEMENTS.labels(item_type=item.type.value).inc()


def _companion(description: str) -> str:
    """Who a fulfilling appointment is with: "walk with Sam at 10" -> "Sam"."""
    name = re.sub(r"walk.*with\s*", "", description, flags=re.IGNORECASE)
    name = re.sub(r"at\s*\d.*", "", name, flags=re.IGNORECASE).strip()
    return name or "friend"


def _visitor_slot(visitor: Optional[Appointment], position: int, slots: int) -> Optional[int]:
    """Start `position` of `slots` evenly spaced points inside the visit."""
    if visitor is None or visitor.interval is None:
        return None
    span = visitor.end_minutes - visitor.start_minutes
    return visitor.start_minutes + (span * (position + 1)) // (slots + 1)


def sort_items(items: List[ScheduledItem]) -> List[ScheduledItem]:
    """Order by suggested time; untimed items first. Works on UI-edited lists too."""
    return sorted(
        items,
        key=lambda item: to_minutes(item.suggested_time) if item.suggested_time else 0,
    )


@SCHEDULE_TIME.time()
def generate_schedule(survey: SurveyContext,
                      weather: Optional[WeatherData],
                      preferences: UserPreferences,
                      catalog: Optional[ActivityCatalog] = None,
                      rng: Optional[np.random.Generator] = None,
                      config: Optional[PlannerConfig] = None) -> List[ScheduledItem]:
    """
    Build today's ordered list of feeds, naps, recurring tasks and bonus activities.

    Placement order is fixed (feeds, appointments, naps, recurring tasks,
    bonus activities) and each placement is an obstacle for the next ones.
    """
    config = config or DEFAULT_CONFIG
    allocator = TimeAllocator(config)
    items: List[ScheduledItem] = []

    # 1) Feeds are anchors, kept even past the day-end boundary
    for index, time_text in enumerate(preferences.feeding_times or []):
        start = to_minutes(time_text)
        allocator.reserve(start, config.feed_duration)
        items.append(_timed_item(
            f"feeding-{index}", "Feed baby", ItemType.FEEDING, start, config.feed_duration
        ))

    # 2) Appointments
    if survey.parsed_appointments is not None:
        appointments = survey.parsed_appointments
    else:
        appointments = parse_appointments(survey.appointments_text)
    for apt in appointments:
        if apt.interval is not None:
            allocator.reserve(apt.start_minutes, apt.end_minutes - apt.start_minutes)

    fulfilled = {apt.fulfills_task: apt for apt in reversed(appointments) if apt.fulfills_task}
    visitor = next((a for a in appointments if a.type == AppointmentType.VISITOR), None)

    # 3) Naps
    nap_duration = preferences.nap_duration or config.default_nap_duration
    for i in range(max(0, preferences.naps_per_day or 0)):
        nap_time = config.nap_times[min(i, len(config.nap_times) - 1)]
        placement = allocator.place(to_minutes(nap_time), nap_duration)
        item = _timed_item(
            f"nap-{i}", f"Nap {i + 1} (~{nap_duration}min)", ItemType.NAP,
            placement.start, nap_duration, overlap=placement.overlap,
            past_day_end=placement.past_day_end,
        )
        _record_degraded(item)
        items.append(item)

    # 4) Recurring tasks
    social = social_kinds()
    for index, label in enumerate(preferences.recurring_tasks or []):
        kind = resolve_task(label)
        slot = slot_for(kind)
        item_id = f"recurring-{index}"

        # an untimed fulfilling appointment has nothing to anchor to
        apt = fulfilled.get(kind) if kind is not None else None
        if apt is not None and apt.start_minutes is not None:
            task = f"{label} (with {_companion(apt.description)})"
            duration = apt.end_minutes - apt.start_minutes if apt.interval else 0
            items.append(_timed_item(
                item_id, task, ItemType.RECURRING, apt.start_minutes, duration
            ))
            continue

        preferred = to_minutes(slot.time)
        if kind in social:
            visit_start = _visitor_slot(visitor, social.index(kind), len(social))
            if visit_start is not None:
                preferred = visit_start

        placement = allocator.place(preferred, slot.duration, exempt=slot.exempt_from_day_end)
        item = _timed_item(
            item_id, label, ItemType.RECURRING, placement.start, slot.duration,
            social_activity=slot.social,
            can_overlap=not slot.exclusive,
            overlap=placement.overlap,
            past_day_end=placement.past_day_end,
        )
        _record_degraded(item)
        items.append(item)

    # 5) Bonus activities
    slot_times = list(config.bonus_slot_times[:config.bonus_count])
    selector = ActivitySelector(catalog, rng, config=config)
    bonus = selector.select(survey, weather, config.bonus_count, slot_times)
    used_ids = {a.id for a in bonus}
    for index, activity in enumerate(bonus):
        preferred = slot_times[index] if index < len(slot_times) else config.default_bonus_slot
        if activity.indoor and activity.category in VISITOR_FRIENDLY_CATEGORIES:
            visit_start = _visitor_slot(visitor, index, config.bonus_count)
            if visit_start is not None:
                preferred = visit_start

        # Food outings must end by the cutoff wherever they finally land;
        # swap in the best other activity when one cannot.
        end_by = None
        while activity is not None and is_food_activity(activity):
            end_by = config.food_cutoff
            start = allocator.place_near(preferred, activity.duration_minutes, end_by)
            if allocator.is_free(start, start + activity.duration_minutes, end_by):
                break
            logger.debug("No room for {} before the food cutoff, replacing it", activity.id)
            activity = selector.replacement(survey, weather, used_ids, slot_time=preferred)
            end_by = None
            if activity is not None:
                used_ids.add(activity.id)
        if activity is None:
            continue

        placement = allocator.place(preferred, activity.duration_minutes, end_by=end_by)
        item = _timed_item(
            f"bonus-{index}",
            f"{activity.title} ({activity.duration_minutes}min)",
            ItemType.BONUS,
            placement.start,
            activity.duration_minutes,
            activity=activity,
            overlap=placement.overlap,
            past_day_end=placement.past_day_end,
        )
        _record_degraded(item)
        items.append(item)

    # 6) Sort
    items = sort_items(items)
    logger.info(
        "Generated schedule with {} items ({} appointments, {} degraded)",
        len(items),
        len(appointments),
        sum(1 for i in items if i.overlap or i.past_day_end),
    )
    return items


def schedule_frame(items: List[ScheduledItem]) -> pd.DataFrame:
    """
    Flatten a schedule into a dataframe.

    Returns:
        dataframe with columns: id, task, type, start, end, time_block
        (start/end are "H:MM AM/PM", end is empty for untimed items)
    """
    rows = []
    for item in items:
        interval = item.interval
        rows.append({
            "id": item.id,
            "task": item.task,
            "type": item.type.value,
            "start": item.suggested_time,
            "end": to_time_string(interval.end) if interval else None,
            "time_block": item.time_block.value if item.time_block else None,
            "start_minutes": item.start_minutes,
        })
    df = pd.DataFrame(
        rows, columns=["id", "task", "type", "start", "end", "time_block", "start_minutes"]
    )
    df = df.sort_values("start_minutes", kind="stable", na_position="first")
    return df.drop(columns="start_minutes").reset_index(drop=True)

# dayplanner/activities.py
import json
import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from .config import DEFAULT_CONFIG, PlannerConfig
from .models import (
    Activity,
    AgeRange,
    Category,
    Energy,
    SurveyContext,
    WeatherData,
    WeatherNeed,
)

CATALOG_PATH = Path(__file__).parent / "data" / "activities.json"

# Walking and bathing are already recurring tasks.
EXCLUDED_BONUS_PATTERNS = [
    re.compile(r"walk", re.I),
    re.compile(r"stroll", re.I),
    re.compile(r"bath", re.I),
]

FOOD_KEYWORDS = ("cafe", "coffee", "brunch", "lunch")

BASE_SCORE = 50.0


def _activity_from_record(rec: Dict) -> Activity:
    weather = rec.get("weatherDependent")
    return Activity(
        id=rec["id"],
        title=rec["title"],
        description=rec.get("description", ""),
        duration_minutes=int(rec["duration"]),
        energy_required=Energy(rec["energyRequired"]),
        indoor=bool(rec["indoor"]),
        category=Category(rec["category"]),
        age_range=AgeRange(int(rec["ageRange"]["min"]), int(rec["ageRange"]["max"])),
        weather_dependent=WeatherNeed(weather) if weather else None,
        tags=frozenset(rec.get("tags", [])),
        materials=tuple(rec.get("materials", [])),
    )


class ActivityCatalog:
    """Read-only collection of activities, safe to share between runs."""

    def __init__(self, activities: Iterable[Activity]):
        self._activities: Tuple[Activity, ...] = tuple(activities)
        self._by_id = {a.id: a for a in self._activities}

    @classmethod
    def from_json(cls, path: Path) -> "ActivityCatalog":
        with open(path, encoding="utf-8") as f:
            records = json.load(f)
        return cls(_activity_from_record(r) for r in records)

    def __iter__(self) -> Iterator[Activity]:
        return iter(self._activities)

    def __len__(self) -> int:
        return len(self._activities)

    def get(self, activity_id: str) -> Optional[Activity]:
        return self._by_id.get(activity_id)

    def by_category(self, category: Category, age_months: int) -> List[Activity]:
        return [
            a for a in self._activities
            if a.category == category and a.age_range.contains(age_months)
        ]


@lru_cache(maxsize=None)
def load_catalog(path: Optional[str] = None) -> ActivityCatalog:
    """Load (once) the bundled catalog, or the one at `path`."""
    catalog = ActivityCatalog.from_json(Path(path) if path else CATALOG_PATH)
    logger.debug("Loaded {} activities", len(catalog))
    return catalog


def overlaps_recurring_task(activity: Activity) -> bool:
    text = activity.title + " " + " ".join(sorted(activity.tags))
    return any(p.search(text) for p in EXCLUDED_BONUS_PATTERNS)


def is_food_activity(activity: Activity) -> bool:
    """Cafe or meal outings, spotted by keyword in title, tags or id."""
    title = activity.title.lower()
    if any(k in title for k in FOOD_KEYWORDS):
        return True
    if any(k in tag.lower() for tag in activity.tags for k in FOOD_KEYWORDS):
        return True
    return any(k in activity.id.lower() for k in FOOD_KEYWORDS)


def fits_food_cutoff(activity: Activity, slot_start: Optional[int],
                     cutoff: int = DEFAULT_CONFIG.food_cutoff) -> bool:
    if slot_start is None or not is_food_activity(activity):
        return True
    return slot_start + activity.duration_minutes <= cutoff


def score_activity(activity: Activity,
                   context: SurveyContext,
                   weather: Optional[WeatherData],
                   rng: Optional[np.random.Generator] = None,
                   jitter: float = DEFAULT_CONFIG.score_jitter) -> float:
    """
    How well an activity suits today. 0 means disqualified.

    A random value in [0, jitter) is added so repeated days differ; pass a
    seeded generator or jitter=0 for reproducible scores.
    """
    if not activity.age_range.contains(context.age_months):
        return 0.0

    outdoor = not activity.indoor
    score = BASE_SCORE

    if weather is not None:
        if outdoor and weather.is_rainy:
            return 0.0
        if outdoor and not context.staying_home and weather.is_good_weather:
            score += 20
        if activity.weather_dependent == WeatherNeed.GOOD and not weather.is_good_weather:
            score -= 30

    if outdoor and context.staying_home:
        return 0.0
    if outdoor:
        score += 15

    if context.energy_level == Energy.LOW:
        if activity.energy_required == Energy.HIGH:
            score -= 40
        elif activity.energy_required == Energy.LOW:
            score += 20
    elif context.energy_level == Energy.HIGH and activity.energy_required == Energy.HIGH:
        score += 15

    if context.wants_crafts:
        if activity.category == Category.CREATIVE:
            score += 30
        if "messy" in activity.tags:
            score += 10

    if context.has_appointments:
        if activity.duration_minutes <= 15:
            score += 15
        elif activity.duration_minutes >= 30:
            score -= 10

    if jitter:
        rng = rng if rng is not None else np.random.default_rng()
        score += float(rng.random()) * jitter

    return max(0.0, score)


class ActivitySelector:
    """Scores the catalog for one day and picks bonus activities from it."""

    def __init__(self,
                 catalog: Optional[ActivityCatalog] = None,
                 rng: Optional[np.random.Generator] = None,
                 jitter: Optional[float] = None,
                 config: Optional[PlannerConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.catalog = catalog if catalog is not None else load_catalog()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.jitter = self.config.score_jitter if jitter is None else jitter

    def ranked(self, survey: SurveyContext, weather: Optional[WeatherData],
               exclude_ids: Iterable[str] = ()) -> List[Activity]:
        """Eligible activities, best first."""
        excluded = set(exclude_ids)
        scored = []
        for activity in self.catalog:
            if activity.id in excluded or overlaps_recurring_task(activity):
                continue
            score = score_activity(activity, survey, weather, self.rng, self.jitter)
            if score > 0:
                scored.append((score, activity))
        # sort is stable, so equal scores keep catalog order
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [activity for _, activity in scored]

    def _slot_start(self, slot_times: Optional[Sequence[int]], index: int) -> Optional[int]:
        if not slot_times:
            return None
        if index < len(slot_times):
            return slot_times[index]
        return slot_times[-1]

    def select(self,
               survey: SurveyContext,
               weather: Optional[WeatherData],
               count: int = 3,
               slot_times: Optional[Sequence[int]] = None) -> List[Activity]:
        """
        Pick `count` activities, one per category first, then best remaining.

        With slot_times, the activity chosen for slot i starts at slot_times[i]
        (or the last given time) and food outings that would run past the
        cutoff are skipped for that slot.
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")

        ranked = self.ranked(survey, weather)
        selected: List[Activity] = []
        used_categories = set()
        cutoff = self.config.food_cutoff

        for activity in ranked:
            if len(selected) >= count:
                break
            if activity.category in used_categories:
                continue
            if not fits_food_cutoff(activity, self._slot_start(slot_times, len(selected)), cutoff):
                continue
            selected.append(activity)
            used_categories.add(activity.category)

        for activity in ranked:
            if len(selected) >= count:
                break
            if activity in selected:
                continue
            if not fits_food_cutoff(activity, self._slot_start(slot_times, len(selected)), cutoff):
                continue
            selected.append(activity)

        logger.debug("Selected bonus activities: {}", [a.id for a in selected])
        return selected

    def replacement(self,
                    survey: SurveyContext,
                    weather: Optional[WeatherData],
                    excluded_ids: Iterable[str],
                    slot_time: Optional[int] = None) -> Optional[Activity]:
        """Best eligible activity not in excluded_ids, or None."""
        for activity in self.ranked(survey, weather, exclude_ids=excluded_ids):
            if fits_food_cutoff(activity, slot_time, self.config.food_cutoff):
                return activity
        return None


def select_bonus_activities(survey: SurveyContext,
                            weather: Optional[WeatherData],
                            count: int = 3,
                            slot_times: Optional[Sequence[int]] = None,
                            catalog: Optional[ActivityCatalog] = None,
                            rng: Optional[np.random.Generator] = None) -> List[Activity]:
    return ActivitySelector(catalog, rng).select(survey, weather, count, slot_times)


def get_replacement_activity(survey: SurveyContext,
                             weather: Optional[WeatherData],
                             excluded_ids: Iterable[str],
                             slot_time: Optional[int] = None,
                             catalog: Optional[ActivityCatalog] = None,
                             rng: Optional[np.random.Generator] = None) -> Optional[Activity]:
    return ActivitySelector(catalog, rng).replacement(survey, weather, excluded_ids, slot_time)

"""Shared fixtures for the day planner tests."""

import numpy as np
import pytest

from dayplanner.activities import ActivityCatalog, ActivitySelector
from dayplanner.models import (
    Activity,
    AgeRange,
    Category,
    Energy,
    SurveyContext,
    WeatherData,
)


def make_activity(id="act", title=None, duration=20, energy=Energy.MEDIUM, indoor=True,
                  category=Category.SENSORY, age=(0, 36), weather_dependent=None, tags=()):
    return Activity(
        id=id,
        title=title or id.replace("-", " ").title(),
        description="",
        duration_minutes=duration,
        energy_required=energy,
        indoor=indoor,
        category=category,
        age_range=AgeRange(*age),
        weather_dependent=weather_dependent,
        tags=frozenset(tags),
    )


@pytest.fixture
def survey():
    return SurveyContext(energy_level=Energy.MEDIUM, staying_home=False, age_months=10)


@pytest.fixture
def good_weather():
    return WeatherData(is_rainy=False, is_good_weather=True)


@pytest.fixture
def bad_weather():
    return WeatherData(is_rainy=False, is_good_weather=False)


@pytest.fixture
def rainy_weather():
    return WeatherData(is_rainy=True, is_good_weather=False)


@pytest.fixture
def small_catalog():
    return ActivityCatalog([
        make_activity("sensory-a", category=Category.SENSORY, duration=10, energy=Energy.LOW),
        make_activity("sensory-b", category=Category.SENSORY, duration=20),
        make_activity("motor-a", category=Category.MOTOR, duration=15),
        make_activity("cognitive-a", category=Category.COGNITIVE, duration=15),
        make_activity("creative-a", category=Category.CREATIVE, duration=20, tags=["messy"]),
        make_activity("cafe-visit", title="Cafe visit", category=Category.SOCIAL,
                      duration=60, energy=Energy.LOW, tags=["outing"]),
        make_activity("evening-walk", title="Evening walk", category=Category.MOTOR),
        make_activity("bath-toys", title="Bath toys", tags=["bath", "water"]),
    ])


@pytest.fixture
def selector(small_catalog):
    """Selector without random noise so rankings are reproducible."""
    return ActivitySelector(small_catalog, rng=np.random.default_rng(0), jitter=0.0)

"""Tests for activity scoring, selection and replacement."""

import numpy as np
import pytest

from dayplanner.activities import (
    ActivitySelector,
    fits_food_cutoff,
    is_food_activity,
    load_catalog,
    overlaps_recurring_task,
    score_activity,
    select_bonus_activities,
    get_replacement_activity,
)
from dayplanner.models import Category, Energy, SurveyContext, WeatherNeed

from .conftest import make_activity


def score(activity, context, weather):
    return score_activity(activity, context, weather, jitter=0.0)


class TestScoreActivity:
    """Test hard disqualifications and score adjustments."""

    def test_base_score(self, survey, good_weather):
        assert score(make_activity(), survey, good_weather) == 50

    @pytest.mark.parametrize("age", [0, 5, 9, 37, 48])
    def test_age_gating(self, good_weather, age):
        activity = make_activity(age=(10, 36))
        context = SurveyContext(age_months=age)
        assert score_activity(activity, context, good_weather) == 0

    def test_age_bounds_inclusive(self, good_weather):
        activity = make_activity(age=(10, 36))
        assert score(activity, SurveyContext(age_months=10), good_weather) > 0
        assert score(activity, SurveyContext(age_months=36), good_weather) > 0

    def test_rain_disqualifies_outdoor(self, survey, rainy_weather):
        for activity in load_catalog():
            if not activity.indoor:
                assert score_activity(activity, survey, rainy_weather) == 0

    def test_staying_home_disqualifies_outdoor(self, good_weather):
        context = SurveyContext(staying_home=True, age_months=10)
        assert score(make_activity(indoor=False), context, good_weather) == 0
        assert score(make_activity(indoor=True), context, good_weather) == 50

    def test_outdoor_on_good_day(self, survey, good_weather):
        assert score(make_activity(indoor=False), survey, good_weather) == 85

    def test_good_weather_activity_on_bad_day(self, survey, bad_weather):
        activity = make_activity(indoor=False, weather_dependent=WeatherNeed.GOOD)
        assert score(activity, survey, bad_weather) == 35

    def test_no_weather_skips_weather_rules(self, survey):
        assert score(make_activity(indoor=False), survey, None) == 65

    def test_energy_matching(self, good_weather):
        low_day = SurveyContext(energy_level=Energy.LOW, age_months=10)
        high_day = SurveyContext(energy_level=Energy.HIGH, age_months=10)

        assert score(make_activity(energy=Energy.HIGH), low_day, good_weather) == 10
        assert score(make_activity(energy=Energy.LOW), low_day, good_weather) == 70
        assert score(make_activity(energy=Energy.HIGH), high_day, good_weather) == 65
        assert score(make_activity(energy=Energy.LOW), high_day, good_weather) == 50

    def test_crafts_boost(self, good_weather):
        context = SurveyContext(wants_crafts=True, age_months=10)
        creative = make_activity(category=Category.CREATIVE, tags=["messy"])
        messy = make_activity(category=Category.SENSORY, tags=["messy"])

        assert score(creative, context, good_weather) == 90
        assert score(messy, context, good_weather) == 60

    def test_busy_day_prefers_short(self, good_weather):
        context = SurveyContext(appointments_text="doctor at 10", age_months=10)

        assert score(make_activity(duration=10), context, good_weather) == 65
        assert score(make_activity(duration=20), context, good_weather) == 50
        assert score(make_activity(duration=30), context, good_weather) == 40

    def test_jitter_range(self, survey, good_weather):
        rng = np.random.default_rng(42)
        for _ in range(50):
            value = score_activity(make_activity(), survey, good_weather, rng=rng)
            assert 50 <= value < 70

    def test_never_negative(self, good_weather):
        context = SurveyContext(energy_level=Energy.LOW, appointments_text="x", age_months=10)
        activity = make_activity(energy=Energy.HIGH, duration=45)
        assert score(activity, context, good_weather) == 0


class TestKeywordFilters:
    """Test recurring-task exclusion and food detection."""

    def test_recurring_overlap(self):
        assert overlaps_recurring_task(make_activity(title="Evening walk"))
        assert overlaps_recurring_task(make_activity(title="Nature stroll"))
        assert overlaps_recurring_task(make_activity(title="Splash", tags=["bath"]))
        assert not overlaps_recurring_task(make_activity(title="Stacking cups"))

    def test_food_detection(self):
        assert is_food_activity(make_activity(id="x", title="Cafe visit"))
        assert is_food_activity(make_activity(id="x", title="Catch-up", tags=["Coffee"]))
        assert is_food_activity(make_activity(id="lunch-date", title="Date"))
        assert not is_food_activity(make_activity(id="x", title="Playgroup"))

    def test_three_pm_cutoff_edge(self):
        cafe = make_activity(id="cafe", duration=60)

        assert not fits_food_cutoff(cafe, 870)
        assert fits_food_cutoff(cafe, 840)
        assert fits_food_cutoff(cafe, None)
        assert fits_food_cutoff(make_activity(id="puzzle", duration=60), 870)


class TestSelect:
    """Test category-diverse selection."""

    def test_one_per_category_first(self, selector, survey, good_weather):
        picked = selector.select(survey, good_weather, count=3)
        assert [a.id for a in picked] == ["sensory-a", "motor-a", "cognitive-a"]

    def test_fill_remaining_by_score(self, selector, survey, good_weather):
        picked = selector.select(survey, good_weather, count=6)
        assert [a.id for a in picked] == [
            "sensory-a", "motor-a", "cognitive-a", "creative-a", "cafe-visit", "sensory-b",
        ]

    def test_small_pool_returns_fewer(self, selector, survey, good_weather):
        picked = selector.select(survey, good_weather, count=10)
        assert len(picked) == 6
        assert not {"evening-walk", "bath-toys"} & {a.id for a in picked}

    def test_zero_count(self, selector, survey, good_weather):
        assert selector.select(survey, good_weather, count=0) == []

    def test_negative_count(self, selector, survey, good_weather):
        with pytest.raises(ValueError):
            selector.select(survey, good_weather, count=-1)

    def test_food_skipped_for_late_slot(self, selector, good_weather):
        tired = SurveyContext(energy_level=Energy.LOW, age_months=10)

        unconstrained = selector.select(tired, good_weather, count=2)
        late = selector.select(tired, good_weather, count=2, slot_times=[570, 870])
        on_time = selector.select(tired, good_weather, count=2, slot_times=[570, 840])

        assert [a.id for a in unconstrained] == ["sensory-a", "cafe-visit"]
        assert [a.id for a in late] == ["sensory-a", "motor-a"]
        assert [a.id for a in on_time] == ["sensory-a", "cafe-visit"]

    def test_diverse_from_bundled_catalog(self, survey, good_weather):
        picked = select_bonus_activities(survey, good_weather, 3, rng=np.random.default_rng(1))
        assert len(picked) == 3
        assert len({a.category for a in picked}) == 3

    def test_catalog_is_shared_read_only(self, small_catalog, survey, good_weather):
        first = ActivitySelector(small_catalog, jitter=0.0).select(survey, good_weather)
        second = ActivitySelector(small_catalog, jitter=0.0).select(survey, good_weather)
        assert first == second
        assert len(small_catalog) == 8


class TestReplacement:
    """Test single-activity replacement."""

    def test_excludes_ids(self, selector, survey, good_weather):
        found = selector.replacement(survey, good_weather, ["sensory-a"])
        assert found.id == "sensory-b"

    def test_food_cutoff_applies(self, selector, good_weather):
        tired = SurveyContext(energy_level=Energy.LOW, age_months=10)

        assert selector.replacement(tired, good_weather, ["sensory-a"]).id == "cafe-visit"
        assert selector.replacement(tired, good_weather, ["sensory-a"], 840).id == "cafe-visit"
        assert selector.replacement(tired, good_weather, ["sensory-a"], 870).id == "sensory-b"

    def test_none_when_exhausted(self, selector, survey, good_weather, small_catalog):
        all_ids = [a.id for a in small_catalog]
        assert selector.replacement(survey, good_weather, all_ids) is None

    def test_module_level_helper(self, survey, good_weather):
        found = get_replacement_activity(
            survey, good_weather, [], rng=np.random.default_rng(5)
        )
        assert found is not None
        assert not overlaps_recurring_task(found)


class TestCatalog:
    def test_bundled_catalog(self):
        catalog = load_catalog()

        assert len(catalog) > 20
        assert is_food_activity(catalog.get("cafe-catchup"))
        assert catalog.get("missing") is None

    def test_by_category_is_age_filtered(self):
        creative = {a.id for a in load_catalog().by_category(Category.CREATIVE, 10)}

        assert "finger-painting" in creative
        assert "chalk-drawing" not in creative

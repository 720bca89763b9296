# dayplanner/config.py
from dataclasses import dataclass
from typing import Tuple


@dataclass
class PlannerConfig:
    day_end: int = 1110           # 5:30 PM, flexible items must end by this
    day_start: int = 420          # 7:00 AM, backward searches stop here
    search_step: int = 15         # minutes
    food_cutoff: int = 900        # 3:00 PM, cafe/meal outings must end by this
    feed_duration: int = 30
    nap_times: Tuple[str, ...] = ("10:00 AM", "2:30 PM")
    default_nap_duration: int = 30
    bonus_count: int = 3
    bonus_slot_times: Tuple[int, ...] = (570, 810, 930)  # 9:30 AM, 1:30 PM, 3:30 PM
    default_bonus_slot: int = 570
    score_jitter: float = 20.0    # width of the random tiebreak added to scores


DEFAULT_CONFIG = PlannerConfig()

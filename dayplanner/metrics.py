# dayplanner/metrics.py
from prometheus_client import Counter, Summary

SCHEDULE_TIME = Summary(
    "dayplanner_schedule_generation_seconds",
    "Time spent generating a daily schedule",
)

DEGRADED_PLACEMENTS = Counter(
    "dayplanner_degraded_placements_total",
    "Items kept at a slot that overlaps another item or runs past the day end",
    ["item_type"],  # feeding / nap / recurring / bonus
)

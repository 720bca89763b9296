# demo.py
from datetime import date

import matplotlib.pyplot as plt
import numpy as np

from dayplanner.models import Energy, SurveyContext, UserPreferences, WeatherData
from dayplanner.scheduler import generate_schedule, schedule_frame


def main():
    prefs = UserPreferences(
        feeding_times=["7:00 AM", "11:00 AM", "3:00 PM", "7:00 PM"],
        naps_per_day=2,
        nap_duration=45,
        baby_birth_date=date(2025, 11, 2),
    )

    survey = SurveyContext(
        energy_level=Energy.MEDIUM,
        staying_home=False,
        wants_crafts=True,
        appointments_text="Friend coming over 2-4pm, doctor appointment at 10am",
        age_months=prefs.age_in_months(),
    )

    weather = WeatherData(
        is_rainy=False,
        is_good_weather=True,
        temperature=21,
        condition="Mainly clear",
    )

    items = generate_schedule(
        survey=survey,
        weather=weather,
        preferences=prefs,
        rng=np.random.default_rng(7),
    )

    print("=== Schedule ===")
    print(schedule_frame(items))

    # Plot the day as a timeline
    colors = {"feeding": "#d62728", "nap": "#7f7f7f", "recurring": "#1f77b4", "bonus": "#2ca02c"}
    timed = [i for i in items if i.interval is not None]
    plt.figure(figsize=(10, 4))
    for row, item in enumerate(timed):
        plt.barh(row, item.duration_minutes / 60, left=item.start_minutes / 60,
                 color=colors[item.type.value])
    plt.yticks(range(len(timed)), [i.task for i in timed])
    plt.gca().invert_yaxis()
    plt.title("Today")
    plt.xlabel("Hour")
    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()

# demo.py
from datetime import date

import matplotlib.pyplot as plt
import pandas as pd

from streamplan.content import check_watchlist_readiness
from streamplan.frames import deferred_frame, monthly_frame, schedule_frame
from streamplan.logs import setup_logging
from streamplan.models import PlannerPrefs
from streamplan.samples import sample_watchlist
from streamplan.scheduler import generate_plan


def main():
    setup_logging()

    budget = 35.0
    prefs = PlannerPrefs(daily_watch_hours=2, days_in_month=30)
    watchlist = sample_watchlist()

    readiness = check_watchlist_readiness(watchlist)
    if not readiness.is_ready:
        print("High-priority titles without a platform:",
              [e.title for e in readiness.high_priority_missing_platform])

    result = generate_plan(
        watchlist=watchlist,
        budget=budget,
        prefs=prefs,
        start=date(2025, 11, 1),
    )

    pd.set_option("display.width", 160)
    print("=== Plan ===")
    print(result.explanation)
    print(f"Months: {result.total_months_needed}  "
          f"avg ${result.average_monthly_cost:.2f}/month  "
          f"coverage {result.coverage_percent}%  "
          f"savings ${result.estimated_savings:.2f}")
    print()
    print(monthly_frame(result))
    print()
    print(schedule_frame(result))

    deferred = deferred_frame(result)
    if not deferred.empty:
        print()
        print("=== Deferred ===")
        print(deferred)

    # Plot monthly cost against the budget
    months = monthly_frame(result)
    plt.figure(figsize=(10, 3))
    plt.bar(months["month"], months["monthly_cost"])
    plt.axhline(budget, color="red", linestyle="--", label="Budget")
    plt.title("Monthly Subscription Cost")
    plt.xlabel("Month")
    plt.ylabel("Cost ($)")
    plt.legend()
    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()

# streamplan/scheduler.py
import logging
import math
from datetime import date
from typing import FrozenSet, Iterable, List, Optional

import pandas as pd

from .allocation import schedule_month
from .catalog import DEFAULT_CATALOG, PlatformCatalog
from .content import ContentTable, active_bucket
from .models import (
    Action,
    MonthlyPlan,
    OptimizationResult,
    PlannerPrefs,
    RotationState,
    WatchlistEntry,
)
from .optimizer import select_platforms
from .report import build_result, empty_result

logger = logging.getLogger(__name__)


def planning_horizon(table: ContentTable, prefs: PlannerPrefs) -> int:
    """Months the rotation may run: enough for all content plus a buffer, hard-capped."""
    months = math.ceil(table.total_schedulable_minutes() / prefs.monthly_capacity_minutes)
    return min(months + prefs.horizon_buffer_months, prefs.max_months)


def classify_action(offset: int,
                    previous: FrozenSet[str],
                    current: FrozenSet[str]) -> Action:
    if offset == 0:
        return "subscribe"
    return "keep" if current == previous else "rotate"


def generate_plan(watchlist: Iterable[WatchlistEntry],
                  budget: float,
                  prefs: Optional[PlannerPrefs] = None,
                  catalog: Optional[PlatformCatalog] = None,
                  start: Optional[date] = None) -> OptimizationResult:
    """
    Plan subscriptions month by month until the watchlist is done.

    start: any day of the first simulated month (defaults to today).
    Each month picks the highest priority tier with content left, buys the
    platforms it needs within `budget`, and spends the month's viewing time
    fairly. Stops when nothing schedulable is left (DONE), when no platform is
    affordable (STALLED) or when the horizon is reached.
    """
    prefs = prefs or PlannerPrefs()
    catalog = catalog or DEFAULT_CATALOG
    watchlist = list(watchlist)

    if not watchlist:
        return empty_result(RotationState.DONE)
    if budget <= 0:
        logger.info("Budget $%.2f leaves nothing to plan", budget)
        return empty_result(RotationState.STALLED)

    table = ContentTable.from_watchlist(watchlist, prefs)
    horizon = planning_horizon(table, prefs)
    first_period = pd.Period(start or date.today(), freq="M")

    schedule: List[MonthlyPlan] = []
    previous: FrozenSet[str] = frozenset()
    status = RotationState.ACTIVE

    for offset in range(horizon):
        # 1) Highest tier that still has something to watch
        bucket = active_bucket(table)
        if bucket is None:
            status = RotationState.DONE
            break

        # 2) Platforms for that tier under the hard budget cap
        selection = select_platforms(bucket, table, budget, previous, catalog, prefs)
        if not selection.platforms:
            status = RotationState.STALLED
            break

        monthly_cost = round(sum(s.cost for s in selection.platforms), 2)
        if monthly_cost > budget:
            logger.error(
                "Budget invariant violated: month %d costs $%.2f > $%.2f; stopping",
                offset, monthly_cost, budget,
            )
            status = RotationState.STALLED
            break

        # 3) Spend the month's viewing time
        period = first_period + offset
        month = schedule_month(selection.platforms, table, period.start_time.date(), prefs)

        current = frozenset(s.platform for s in selection.platforms)
        schedule.append(MonthlyPlan(
            month=period.strftime("%b"),
            month_index=period.month - 1,
            year=period.year,
            services=selection.platforms,
            items=month.items,
            monthly_cost=monthly_cost,
            action=classify_action(offset, previous, current),
            total_watch_hours=month.total_watch_hours,
            is_budget_constrained=monthly_cost >= budget * prefs.budget_constrained_ratio,
        ))
        logger.debug(
            "%s %d: %s tier, %s, $%.2f, %d min watched",
            period.strftime("%b"), period.year, bucket.priority,
            sorted(current), monthly_cost, month.watched_minutes,
            extra={
                "month": str(period),
                "tier": bucket.priority,
                "platforms": sorted(current),
                "cost": monthly_cost,
                "watched_minutes": month.watched_minutes,
            },
        )
        previous = current
    else:
        if active_bucket(table) is None:
            status = RotationState.DONE

    logger.info("Rotation ended %s after %d month(s)", status.value, len(schedule),
                extra={"status": status.value, "months": len(schedule)})
    return build_result(table, schedule, budget, catalog, status)

# streamplan/report.py
from typing import List, Sequence

from .catalog import PlatformCatalog
from .content import ContentTable
from .models import (
    ContentState,
    DeferredItem,
    MonthlyPlan,
    OptimizationResult,
    OptimizedService,
    RotationState,
)

REASON_PENDING = "Pending platform selection - marked as 'decide later'."
REASON_NO_PLATFORM = "No streaming platform available. Please select a platform manually."
REASON_TOO_LONG = "Runtime exceeds a full month of viewing time ({hours:g} hours)."
REASON_BUDGET = "Could not fit within budget constraints. Consider increasing budget."

NO_PLAN_EXPLANATION = (
    "No plan could be produced: no platforms selected. "
    "Try increasing your budget or adding content to your watchlist."
)


def deferral_reason(state: ContentState, table: ContentTable) -> str:
    entry = state.entry
    if entry.is_deferred:
        return REASON_PENDING
    if not entry.effective_platforms:
        return REASON_NO_PLATFORM
    if table.exceeds_month(state):
        return REASON_TOO_LONG.format(hours=table.prefs.monthly_capacity_minutes / 60)
    return REASON_BUDGET


def collect_deferred(table: ContentTable) -> List[DeferredItem]:
    """Every entry with unwatched time left, tagged with why."""
    return [
        DeferredItem(entry=s.entry, reason=deferral_reason(s, table))
        for s in table
        if s.remaining_minutes > 0
    ]


def coverage_percent(total_items: int, deferred_count: int) -> int:
    if total_items <= 0:
        return 0
    # Halves round up: 1 of 8 covered is 13%.
    covered = total_items - deferred_count
    return (200 * covered + total_items) // (2 * total_items)


def estimated_savings(schedule: Sequence[MonthlyPlan], catalog: PlatformCatalog) -> float:
    """What subscribing to everything for the same months would have cost, minus the plan."""
    spent = sum(m.monthly_cost for m in schedule)
    return round(catalog.total_price() * len(schedule) - spent, 2)


def explain(selected: Sequence[OptimizedService],
            deferred: Sequence[DeferredItem],
            budget: float,
            schedule: Sequence[MonthlyPlan]) -> str:
    if not selected:
        return NO_PLAN_EXPLANATION

    names = ", ".join(s.name for s in selected)
    item_count = sum(len(m.items) for m in schedule)
    months = len(schedule)

    parts = [
        f"Based on your ${budget:g}/month budget, start with {names}.",
        f"Watch {item_count} items in {months} month{'s' if months > 1 else ''} by rotating services.",
    ]
    top = selected[0]
    parts.append(f"{top.name} offers best value at ${top.cost:.2f}/month.")
    if deferred:
        parts.append(
            f"{len(deferred)} item{'s' if len(deferred) > 1 else ''} couldn't be scheduled."
        )
    total = sum(m.monthly_cost for m in schedule)
    parts.append(f"Total cost: ${total:.2f}.")
    return " ".join(parts)


def empty_result(status: RotationState) -> OptimizationResult:
    return OptimizationResult(
        subscribe_this_month=(),
        deferred_items=(),
        total_cost=0.0,
        estimated_savings=0.0,
        coverage_percent=0,
        explanation=NO_PLAN_EXPLANATION,
        rotation_schedule=(),
        total_months_needed=0,
        average_monthly_cost=0.0,
        status=status,
    )


def build_result(table: ContentTable,
                 schedule: Sequence[MonthlyPlan],
                 budget: float,
                 catalog: PlatformCatalog,
                 status: RotationState) -> OptimizationResult:
    deferred = collect_deferred(table)
    months = len(schedule)
    total_spent = round(sum(m.monthly_cost for m in schedule), 2)
    first = schedule[0] if schedule else None
    selected = first.services if first else ()

    return OptimizationResult(
        subscribe_this_month=tuple(selected),
        deferred_items=tuple(deferred),
        total_cost=first.monthly_cost if first else 0.0,
        estimated_savings=estimated_savings(schedule, catalog),
        coverage_percent=coverage_percent(len(table), len(deferred)),
        explanation=explain(selected, deferred, budget, schedule),
        rotation_schedule=tuple(schedule),
        total_months_needed=months,
        average_monthly_cost=round(total_spent / months, 2) if months else 0.0,
        status=status,
    )

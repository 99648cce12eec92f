# streamplan/optimizer.py
import logging
from dataclasses import dataclass
from typing import AbstractSet, Iterable, List, Optional, Set, Tuple

import pandas as pd

from .catalog import DEFAULT_CATALOG, PlatformCatalog
from .content import Bucket, ContentTable
from .models import (
    PRIORITY_ORDER,
    ContentState,
    OptimizedService,
    PlannerPrefs,
    WatchlistEntry,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    platforms: Tuple[OptimizedService, ...]
    items_to_schedule: Tuple[WatchlistEntry, ...]
    deferred_this_month: Tuple[WatchlistEntry, ...]
    total_cost: float


def within_budget(total: float, cost: float, budget: float) -> bool:
    # Prices carry cents; compare at cent precision so 7.99 + 9.99 fits 17.98.
    return round(total + cost, 2) <= budget


def platform_sort_key(platform: str,
                      catalog: PlatformCatalog,
                      previous: AbstractSet[str]) -> Tuple[float, bool, Tuple[int, str]]:
    """Price first, then last month's platforms, then catalog declaration order."""
    return (catalog.price(platform), platform not in previous, catalog.order_key(platform))


def cheapest_platform(entry: WatchlistEntry,
                      catalog: PlatformCatalog,
                      previous: AbstractSet[str] = frozenset(),
                      among: Optional[AbstractSet[str]] = None) -> Optional[str]:
    platforms = [p for p in entry.effective_platforms if among is None or p in among]
    if not platforms:
        return None
    return min(platforms, key=lambda p: platform_sort_key(p, catalog, previous))


def _group_by_cheapest(states: Iterable[ContentState],
                       catalog: PlatformCatalog,
                       previous: AbstractSet[str]) -> pd.DataFrame:
    """One row per candidate platform group, in acceptance order."""
    rows = []
    for pos, state in enumerate(states):
        if state.remaining_minutes <= 0:
            continue
        platform = cheapest_platform(state.entry, catalog, previous)
        if platform is None:
            continue
        rows.append({
            "pos": pos,
            "platform": platform,
            "price": catalog.price(platform),
            "fresh": platform not in previous,
            "order": catalog.order_key(platform)[0],
        })

    if not rows:
        return pd.DataFrame(columns=["platform", "price", "fresh", "order", "positions"])

    df = pd.DataFrame(rows)
    groups = (
        df.groupby("platform", sort=False)
        .agg(price=("price", "first"),
             fresh=("fresh", "first"),
             order=("order", "first"),
             positions=("pos", list))
        .reset_index()
        .sort_values(["price", "fresh", "order", "platform"], kind="mergesort")
    )
    return groups


def _build_service(platform: str,
                   states: List[ContentState],
                   catalog: PlatformCatalog,
                   prefs: PlannerPrefs) -> OptimizedService:
    cost = catalog.price(platform)
    hours = sum(s.remaining_minutes for s in states) / 60
    capacity_hours = prefs.monthly_capacity_minutes / 60
    return OptimizedService(
        platform=platform,
        name=catalog.name(platform),
        cost=cost,
        items=tuple(s.entry for s in states),
        value_density=hours / cost,
        watch_hours=min(hours, capacity_hours),
        color=catalog.color(platform),
    )


def select_platforms(bucket: Bucket,
                     table: ContentTable,
                     budget: float,
                     previous_platforms: Optional[AbstractSet[str]] = None,
                     catalog: Optional[PlatformCatalog] = None,
                     prefs: Optional[PlannerPrefs] = None) -> Selection:
    """
    Choose this month's platforms under a hard budget cap.

    The active bucket's entries are grouped by their cheapest platform and the
    groups are accepted cheapest first while they fit. Leftover budget only
    covers lower-priority entries through platforms that are already selected
    or that were paid for last month; a platform nobody used last month is
    never added just because it is affordable.
    """
    catalog = catalog or DEFAULT_CATALOG
    prefs = prefs or table.prefs
    previous = frozenset(previous_platforms or ())

    bucket_states = list(bucket.states)
    groups = _group_by_cheapest(bucket_states, catalog, previous)

    selected: List[str] = []
    total = 0.0
    for row in groups.itertuples(index=False):
        price = float(row.price)
        if within_budget(total, price, budget):
            selected.append(row.platform)
            total = round(total + price, 2)
        else:
            logger.warning(
                "Deferring %d %s-priority item(s): %s ($%.2f) does not fit the $%.2f budget",
                len(row.positions), bucket.priority, row.platform, price, budget,
            )

    # Lower tiers ride along on what is already paid for, or on last month's platforms.
    if selected:
        active_rank = PRIORITY_ORDER.index(bucket.priority)
        for state in table:
            if not table.is_schedulable(state):
                continue
            if PRIORITY_ORDER.index(state.entry.priority) <= active_rank:
                continue
            if any(p in selected for p in state.entry.effective_platforms):
                continue
            reusable = cheapest_platform(state.entry, catalog, previous, among=previous)
            if reusable is None:
                continue
            price = catalog.price(reusable)
            if within_budget(total, price, budget):
                selected.append(reusable)
                total = round(total + price, 2)
                logger.debug("Keeping %s for lower-priority %r", reusable, state.entry.title)

    if total > budget:
        logger.error("Platform selection cost $%.2f exceeds budget $%.2f", total, budget)

    chosen: Set[str] = set(selected)
    covered = {platform: [] for platform in selected}
    items: List[WatchlistEntry] = []
    for state in table:
        if not table.is_schedulable(state):
            continue
        platform = cheapest_platform(state.entry, catalog, previous, among=chosen)
        if platform is None:
            continue
        covered[platform].append(state)
        items.append(state.entry)

    services = [_build_service(p, covered[p], catalog, prefs) for p in selected]
    # Most content first, then best value; full ties keep cheapest-first order.
    services.sort(key=lambda s: (len(s.items), s.value_density), reverse=True)

    scheduled_ids = {id(e) for e in items}
    deferred = tuple(s.entry for s in bucket_states if id(s.entry) not in scheduled_ids)

    return Selection(
        platforms=tuple(services),
        items_to_schedule=tuple(items),
        deferred_this_month=deferred,
        total_cost=total,
    )

# streamplan/allocation.py
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .content import ContentTable
from .models import (
    PRIORITY_ORDER,
    ContentState,
    OptimizedService,
    PlannerPrefs,
    ScheduledItem,
)


@dataclass(frozen=True)
class MonthSchedule:
    items: Tuple[ScheduledItem, ...]
    watched_minutes: int

    @property
    def total_watch_hours(self) -> float:
        return self.watched_minutes / 60


def fair_shares(needs: Sequence[int], available: int) -> np.ndarray:
    """
    Split `available` minutes across items with the given needs.

    Every still-needy item gets an equal floor share; whatever an item does not
    need goes back to the pool and is split again among the rest. Minutes too
    few to split evenly are handed out one at a time in item order. Either all
    needs are met or the whole pool is used.
    """
    needs = np.clip(np.asarray(needs, dtype=np.int64), 0, None)
    alloc = np.zeros_like(needs)
    pool = max(int(available), 0)

    # Each full round either satisfies an item or leaves pool < len(hungry).
    for _ in range(len(needs) + 1):
        hungry = np.flatnonzero(alloc < needs)
        if pool <= 0 or hungry.size == 0:
            break
        share = pool // hungry.size
        if share == 0:
            give = hungry[:pool]
            alloc[give] += 1
            pool -= int(give.size)
            break
        grant = np.minimum(needs[hungry] - alloc[hungry], share)
        alloc[hungry] += grant
        pool -= int(grant.sum())

    return alloc


def _day_to_date(month_start: date, day: int) -> date:
    return (pd.Timestamp(month_start) + pd.Timedelta(days=day - 1)).date()


def _scheduled(state: ContentState, start_day: int, end_day: int,
               minutes: int, month_start: date) -> ScheduledItem:
    return ScheduledItem(
        entry=state.entry,
        start_day=start_day,
        end_day=end_day,
        start_date=_day_to_date(month_start, start_day),
        end_date=_day_to_date(month_start, end_day),
        watch_minutes=minutes,
        remaining_minutes=state.remaining_minutes,
    )


def _candidates(services: Iterable[OptimizedService],
                table: ContentTable) -> List[ContentState]:
    chosen = {s.platform for s in services}
    return [
        s for s in table
        if table.is_schedulable(s)
        and any(p in chosen for p in s.entry.effective_platforms)
    ]


def schedule_month(services: Sequence[OptimizedService],
                   table: ContentTable,
                   month_start: date,
                   prefs: Optional[PlannerPrefs] = None) -> MonthSchedule:
    """
    Spend one simulated month of viewing time on the selected platforms.

    Tiers are served high -> medium -> low while capacity lasts. Within a
    tier, movies go first and only whole (one sitting, one day each); series
    then share what is left fairly and are watched interleaved from the
    current day on. Remaining minutes in `table` are updated in place.
    """
    prefs = prefs or table.prefs
    day_len = prefs.minutes_per_day
    month_len = prefs.monthly_capacity_minutes

    candidates = _candidates(services, table)
    capacity = month_len
    clock = 0  # minutes into the month's viewing timeline
    scheduled: List[ScheduledItem] = []

    for priority in PRIORITY_ORDER:
        tier = [s for s in candidates if s.entry.priority == priority]
        if not tier:
            continue
        if capacity <= 0:
            break

        for state in (s for s in tier if s.entry.is_movie):
            minutes = state.remaining_minutes
            start = -(-clock // day_len) * day_len  # next free day
            if start >= month_len:
                break
            if minutes > capacity:
                continue  # waits for a month with room
            day = start // day_len + 1
            table.consume(state, minutes)
            scheduled.append(_scheduled(state, day, day, minutes, month_start))
            capacity -= minutes
            clock = start + day_len

        series = [s for s in tier if not s.entry.is_movie and s.remaining_minutes > 0]
        available = min(capacity, month_len - clock)
        if not series or available <= 0:
            continue

        alloc = fair_shares([s.remaining_minutes for s in series], available)
        window_start = clock
        for state, minutes in zip(series, alloc.tolist()):
            if minutes <= 0:
                continue
            # Interleaved viewing: done once every other series got min(a_j, a_i).
            finish = int(np.minimum(alloc, minutes).sum())
            start_day = window_start // day_len + 1
            end_day = (window_start + finish - 1) // day_len + 1
            table.consume(state, minutes)
            scheduled.append(_scheduled(state, start_day, end_day, minutes, month_start))

        used = int(alloc.sum())
        capacity -= used
        clock += used

    return MonthSchedule(items=tuple(scheduled), watched_minutes=month_len - capacity)

# streamplan/content.py
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .models import (
    PRIORITY_ORDER,
    ContentState,
    PlannerPrefs,
    WatchlistEntry,
    WatchlistReadiness,
)


def real_watch_minutes(entry: WatchlistEntry, prefs: PlannerPrefs) -> int:
    """Actual runtime in minutes. Priority never changes this number."""
    if entry.total_minutes and entry.total_minutes > 0:
        return int(entry.total_minutes)
    if entry.is_movie:
        return prefs.default_movie_minutes
    episodes = entry.episode_count or prefs.default_episode_count
    return episodes * prefs.default_episode_minutes


@dataclass(frozen=True)
class Bucket:
    priority: str
    states: Tuple[ContentState, ...]

    @property
    def items(self) -> Tuple[WatchlistEntry, ...]:
        return tuple(s.entry for s in self.states)


class ContentTable:
    """
    Remaining-time bookkeeping for one optimization run.

    States are kept in watchlist order; `get` resolves an id to the first
    entry carrying it.
    """

    def __init__(self, states: Iterable[ContentState], prefs: PlannerPrefs):
        self.prefs = prefs
        self._states: List[ContentState] = list(states)
        self._index: Dict[str, int] = {}
        for idx, state in enumerate(self._states):
            self._index.setdefault(state.entry.id, idx)

    @classmethod
    def from_watchlist(cls, watchlist: Iterable[WatchlistEntry],
                       prefs: Optional[PlannerPrefs] = None) -> "ContentTable":
        prefs = prefs or PlannerPrefs()
        states = []
        for entry in watchlist:
            minutes = real_watch_minutes(entry, prefs)
            states.append(ContentState(entry=entry,
                                       real_minutes=minutes,
                                       remaining_minutes=minutes))
        return cls(states, prefs)

    def __iter__(self) -> Iterator[ContentState]:
        return iter(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def get(self, entry_id: str) -> Optional[ContentState]:
        idx = self._index.get(entry_id)
        return self._states[idx] if idx is not None else None

    def exceeds_month(self, state: ContentState) -> bool:
        # Movies are watched in one sitting, so they must fit one month.
        return (state.entry.is_movie
                and state.remaining_minutes > self.prefs.monthly_capacity_minutes)

    def is_schedulable(self, state: ContentState) -> bool:
        entry = state.entry
        if entry.is_deferred or not entry.effective_platforms:
            return False
        if state.remaining_minutes <= 0:
            return False
        return not self.exceeds_month(state)

    def schedulable(self) -> List[ContentState]:
        return [s for s in self._states if self.is_schedulable(s)]

    def consume(self, state: ContentState, minutes: int) -> int:
        """Take `minutes` off an entry's remaining time; returns the new remainder."""
        if minutes < 0 or minutes > state.remaining_minutes:
            raise ValueError(
                f"cannot consume {minutes} min from {state.entry.id!r} "
                f"({state.remaining_minutes} min remaining)"
            )
        state.remaining_minutes -= minutes
        return state.remaining_minutes

    def total_schedulable_minutes(self) -> int:
        return sum(s.remaining_minutes for s in self.schedulable())


def active_bucket(table: ContentTable) -> Optional[Bucket]:
    """Highest priority tier that still has schedulable content, or None."""
    for priority in PRIORITY_ORDER:
        states = tuple(
            s for s in table
            if s.entry.priority == priority and table.is_schedulable(s)
        )
        if states:
            return Bucket(priority=priority, states=states)
    return None


def check_watchlist_readiness(watchlist: Iterable[WatchlistEntry]) -> WatchlistReadiness:
    """
    Report entries that block a useful plan.

    The watchlist is ready when no high-priority entry is missing a platform;
    deferred entries are listed separately and do not block.
    """
    high_missing, other_missing, pending = [], [], []
    for entry in watchlist:
        if entry.is_deferred:
            pending.append(entry)
            continue
        if not entry.effective_platforms:
            if entry.priority == "high":
                high_missing.append(entry)
            else:
                other_missing.append(entry)

    return WatchlistReadiness(
        is_ready=not high_missing,
        high_priority_missing_platform=tuple(high_missing),
        other_missing_platform=tuple(other_missing),
        pending_decision=tuple(pending),
    )

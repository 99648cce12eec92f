# streamplan/models.py
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Literal, Optional, Tuple, Union

Kind = Literal["movie", "series"]
Priority = Literal["high", "medium", "low"]
Action = Literal["subscribe", "rotate", "keep", "cancel"]

# Strict processing order; priority is ordinal only, it never scales runtime.
PRIORITY_ORDER: Tuple[str, ...] = ("high", "medium", "low")
KINDS: Tuple[str, ...] = ("movie", "series")


@dataclass
class PlannerPrefs:
    daily_watch_hours: int = 2
    days_in_month: int = 30
    default_movie_minutes: int = 120
    default_episode_minutes: int = 45
    default_episode_count: int = 10
    horizon_buffer_months: int = 3
    max_months: int = 24               # hard cap on the rotation horizon
    budget_constrained_ratio: float = 0.9

    @property
    def minutes_per_day(self) -> int:
        return self.daily_watch_hours * 60

    @property
    def monthly_capacity_minutes(self) -> int:
        return self.minutes_per_day * self.days_in_month


# Platform decision state of a watchlist entry


@dataclass(frozen=True)
class Unresolved:
    pass


@dataclass(frozen=True)
class DeferDecision:
    """User chose "decide later"; the entry is never scheduled."""


@dataclass(frozen=True)
class PlatformOverride:
    """User picked one platform; it replaces the entry's platform list."""
    platform: str


PlatformDecision = Union[Unresolved, DeferDecision, PlatformOverride]
UNRESOLVED = Unresolved()


@dataclass(frozen=True)
class WatchlistEntry:
    id: str
    title: str
    kind: Kind
    priority: Priority = "low"
    platforms: Tuple[str, ...] = ()
    decision: PlatformDecision = UNRESOLVED
    total_minutes: Optional[int] = None
    episode_count: Optional[int] = None   # series only
    year: Optional[int] = None

    @classmethod
    def create(cls,
               id: str,
               title: str,
               kind: str,
               priority: Optional[str] = None,
               platforms=(),
               defer: bool = False,
               override: Optional[str] = None,
               total_minutes: Optional[int] = None,
               episode_count: Optional[int] = None,
               year: Optional[int] = None) -> "WatchlistEntry":
        """
        Build an entry from loose field values.

        `defer` and `override` are mutually exclusive; a missing priority
        means "low".
        """
        if kind not in KINDS:
            raise ValueError(f"unknown kind: {kind!r}")
        priority = priority or "low"
        if priority not in PRIORITY_ORDER:
            raise ValueError(f"unknown priority: {priority!r}")
        if defer and override:
            raise ValueError("an entry cannot be both deferred and overridden")

        decision: PlatformDecision = UNRESOLVED
        if defer:
            decision = DeferDecision()
        elif override:
            decision = PlatformOverride(override)

        return cls(
            id=str(id),
            title=title,
            kind=kind,
            priority=priority,
            platforms=tuple(platforms),
            decision=decision,
            total_minutes=total_minutes,
            episode_count=episode_count,
            year=year,
        )

    @property
    def is_deferred(self) -> bool:
        return isinstance(self.decision, DeferDecision)

    @property
    def effective_platforms(self) -> Tuple[str, ...]:
        if isinstance(self.decision, PlatformOverride):
            return (self.decision.platform,)
        return self.platforms

    @property
    def is_movie(self) -> bool:
        return self.kind == "movie"


@dataclass(frozen=True)
class PlatformRecord:
    id: str
    name: str
    price: float      # monthly, > 0
    color: str = "gray"
    logo: str = ""


@dataclass
class ContentState:
    entry: WatchlistEntry
    real_minutes: int        # actual runtime, never multiplied by priority
    remaining_minutes: int   # 0 <= remaining <= real


@dataclass(frozen=True)
class OptimizedService:
    platform: str
    name: str
    cost: float
    items: Tuple[WatchlistEntry, ...]
    value_density: float     # covered hours per currency unit, ranking only
    watch_hours: float       # covered hours, clamped to monthly capacity
    color: str = "gray"


@dataclass(frozen=True)
class ScheduledItem:
    entry: WatchlistEntry
    start_day: int
    end_day: int
    start_date: date
    end_date: date
    watch_minutes: int
    remaining_minutes: int

    @property
    def watch_hours(self) -> float:
        return self.watch_minutes / 60


@dataclass(frozen=True)
class MonthlyPlan:
    month: str
    month_index: int
    year: int
    services: Tuple[OptimizedService, ...]
    items: Tuple[ScheduledItem, ...]
    monthly_cost: float
    action: Action
    total_watch_hours: float
    is_budget_constrained: bool

    @property
    def platform_ids(self) -> Tuple[str, ...]:
        return tuple(s.platform for s in self.services)


@dataclass(frozen=True)
class DeferredItem:
    entry: WatchlistEntry
    reason: str


class RotationState(str, Enum):
    ACTIVE = "active"
    DONE = "done"
    STALLED = "stalled"


@dataclass(frozen=True)
class OptimizationResult:
    subscribe_this_month: Tuple[OptimizedService, ...]
    deferred_items: Tuple[DeferredItem, ...]
    total_cost: float            # first month's cost
    estimated_savings: float
    coverage_percent: int
    explanation: str
    rotation_schedule: Tuple[MonthlyPlan, ...]
    total_months_needed: int
    average_monthly_cost: float
    status: RotationState = RotationState.DONE


@dataclass(frozen=True)
class WatchlistReadiness:
    is_ready: bool
    high_priority_missing_platform: Tuple[WatchlistEntry, ...] = field(default_factory=tuple)
    other_missing_platform: Tuple[WatchlistEntry, ...] = field(default_factory=tuple)
    pending_decision: Tuple[WatchlistEntry, ...] = field(default_factory=tuple)

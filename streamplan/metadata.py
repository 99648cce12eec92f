# streamplan/metadata.py
"""
Turning title metadata into watchlist entries.

The lookup service itself (title search, watch providers, runtimes) lives
outside this package; anything with a `lookup(title)` method returning
`TitleMetadata` can feed `build_watchlist`.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

from .catalog import TMDB_PROVIDER_MAP
from .models import PlannerPrefs, WatchlistEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TitleMetadata:
    title: str
    kind: str                           # "movie", "series" or TMDB's "tv"
    provider_ids: Tuple[int, ...] = ()  # TMDB watch-provider ids
    episode_count: Optional[int] = None
    total_minutes: Optional[int] = None
    episode_runtime: Optional[int] = None
    year: Optional[int] = None
    id: Optional[str] = None


class MetadataLookup(Protocol):
    def lookup(self, title: str) -> Optional[TitleMetadata]:
        ...


def normalize_kind(kind: str) -> str:
    return "series" if kind in ("tv", "series") else "movie"


def platforms_from_provider_ids(provider_ids: Iterable[int],
                                provider_map: Mapping[int, str] = TMDB_PROVIDER_MAP) -> Tuple[str, ...]:
    """Catalog ids for the given provider ids, first-seen order, unknown ids dropped."""
    seen: Dict[str, None] = {}
    for pid in provider_ids:
        platform = provider_map.get(pid)
        if platform is not None:
            seen.setdefault(platform, None)
    return tuple(seen)


def total_runtime_minutes(meta: TitleMetadata, prefs: PlannerPrefs) -> Optional[int]:
    if meta.total_minutes:
        return meta.total_minutes
    if normalize_kind(meta.kind) == "movie":
        return prefs.default_movie_minutes
    if meta.episode_count:
        return meta.episode_count * (meta.episode_runtime or prefs.default_episode_minutes)
    # Unknown episode count: the planner falls back to its own series default.
    return None


def entry_from_metadata(meta: TitleMetadata,
                        priority: str = "low",
                        entry_id: Optional[str] = None,
                        prefs: Optional[PlannerPrefs] = None) -> WatchlistEntry:
    prefs = prefs or PlannerPrefs()
    kind = normalize_kind(meta.kind)
    return WatchlistEntry.create(
        id=entry_id or meta.id or meta.title.lower().replace(" ", "-"),
        title=meta.title,
        kind=kind,
        priority=priority,
        platforms=platforms_from_provider_ids(meta.provider_ids),
        total_minutes=total_runtime_minutes(meta, prefs),
        episode_count=meta.episode_count if kind == "series" else None,
        year=meta.year,
    )


def build_watchlist(requests: Iterable[Tuple[str, str]],
                    lookup: MetadataLookup,
                    prefs: Optional[PlannerPrefs] = None) -> Tuple[List[WatchlistEntry], List[str]]:
    """
    Resolve (title, priority) pairs through `lookup`.

    Returns the entries plus the titles the lookup could not find.
    """
    entries: List[WatchlistEntry] = []
    missing: List[str] = []
    for title, priority in requests:
        meta = lookup.lookup(title)
        if meta is None:
            logger.warning("No metadata found for %r", title)
            missing.append(title)
            continue
        entries.append(entry_from_metadata(meta, priority, prefs=prefs))
    return entries, missing

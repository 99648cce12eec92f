# streamplan/catalog.py
from typing import Dict, Iterable, Tuple

from .models import PlatformRecord

# Price used for platform ids that are not in the catalog.
FALLBACK_PRICE = 9.99

STREAMING_SERVICES: Tuple[PlatformRecord, ...] = (
    PlatformRecord("netflix", "Netflix", 7.99, "netflix", "🔴"),
    PlatformRecord("disney", "Disney+", 9.99, "disney", "🏰"),
    PlatformRecord("hulu", "Hulu", 9.99, "hulu", "🟢"),
    PlatformRecord("amazon", "Prime Video", 8.99, "amazon", "📦"),
    PlatformRecord("hbo", "Max", 10.99, "hbo", "🟣"),
    PlatformRecord("apple", "Apple TV+", 12.99, "apple", "🍎"),
    PlatformRecord("paramount", "Paramount+", 7.99, "paramount", "⛰️"),
    PlatformRecord("peacock", "Peacock", 8.99, "peacock", "🦚"),
)

# TMDB watch-provider id -> catalog id
TMDB_PROVIDER_MAP: Dict[int, str] = {
    8: "netflix",
    337: "disney",
    15: "hulu",
    9: "amazon",
    119: "amazon",     # Prime Video (alternate id)
    1899: "hbo",
    384: "hbo",        # HBO Max (legacy id)
    350: "apple",
    531: "paramount",
    386: "peacock",
}


class PlatformCatalog:
    """Read-only platform table; declaration order is the tie-break order."""

    def __init__(self, records: Iterable[PlatformRecord]):
        self._records: Tuple[PlatformRecord, ...] = tuple(records)
        self._by_id: Dict[str, PlatformRecord] = {}
        self._order: Dict[str, int] = {}
        for idx, rec in enumerate(self._records):
            if rec.price <= 0:
                raise ValueError(f"platform {rec.id!r} must have a positive price")
            self._by_id.setdefault(rec.id, rec)
            self._order.setdefault(rec.id, idx)

    def __iter__(self):
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def price(self, platform_id: str) -> float:
        rec = self._by_id.get(platform_id)
        return rec.price if rec else FALLBACK_PRICE

    def name(self, platform_id: str) -> str:
        rec = self._by_id.get(platform_id)
        return rec.name if rec else platform_id

    def color(self, platform_id: str) -> str:
        rec = self._by_id.get(platform_id)
        return rec.color if rec else "gray"

    def logo(self, platform_id: str) -> str:
        rec = self._by_id.get(platform_id)
        return rec.logo if rec else "📺"

    def label(self, platform_id: str) -> str:
        return f"{self.logo(platform_id)} {self.name(platform_id)}".strip()

    def order_key(self, platform_id: str) -> Tuple[int, str]:
        # Unknown ids sort after every catalog id, then alphabetically.
        return (self._order.get(platform_id, len(self._records)), platform_id)

    def total_price(self) -> float:
        """Monthly cost of subscribing to every catalog platform."""
        return sum(rec.price for rec in self._records)


DEFAULT_CATALOG = PlatformCatalog(STREAMING_SERVICES)

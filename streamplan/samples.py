# streamplan/samples.py
from typing import List

from .models import WatchlistEntry


def sample_watchlist() -> List[WatchlistEntry]:
    """A ten-title watchlist spread across the default catalog."""
    return [
        WatchlistEntry.create("1", "Stranger Things", "series", "high", ["netflix"], episode_count=34, year=2016),
        WatchlistEntry.create("2", "The Bear", "series", "high", ["hulu"], episode_count=28, year=2022),
        WatchlistEntry.create("3", "The Mandalorian", "series", "high", ["disney"], episode_count=24, year=2019),
        WatchlistEntry.create("4", "Severance", "series", "high", ["apple"], episode_count=9, year=2022),
        WatchlistEntry.create("5", "Succession", "series", "medium", ["hbo"], episode_count=39, year=2018),
        WatchlistEntry.create("6", "Only Murders in the Building", "series", "medium", ["hulu"],
                              episode_count=30, year=2021),
        WatchlistEntry.create("7", "The Boys", "series", "high", ["amazon"], episode_count=32, year=2019),
        WatchlistEntry.create("8", "Yellowjackets", "series", "medium", ["paramount"], episode_count=19, year=2021),
        WatchlistEntry.create("9", "Oppenheimer", "movie", "high", ["peacock"], total_minutes=180, year=2023),
        WatchlistEntry.create("10", "Glass Onion", "movie", "medium", ["netflix"], total_minutes=139, year=2022),
    ]

import unittest

from streamplan.metadata import (
    TitleMetadata,
    build_watchlist,
    entry_from_metadata,
    platforms_from_provider_ids,
)
from streamplan.models import PlannerPrefs


class FakeLookup:
    def __init__(self, known):
        self.known = known
        self.calls = []

    def lookup(self, title):
        self.calls.append(title)
        return self.known.get(title)


class TestProviderMapping(unittest.TestCase):
    def test_maps_dedupes_and_drops_unknown(self):
        self.assertEqual(platforms_from_provider_ids([8, 119, 9, 999]), ("netflix", "amazon"))

    def test_custom_map(self):
        self.assertEqual(platforms_from_provider_ids([1, 2], {2: "b"}), ("b",))


class TestEntryFromMetadata(unittest.TestCase):
    def test_tv_show_runtime_from_episodes(self):
        meta = TitleMetadata("The Bear", "tv", (15,), episode_count=20, episode_runtime=30, id="136315")
        entry = entry_from_metadata(meta, "high")
        self.assertEqual(entry.kind, "series")
        self.assertEqual(entry.id, "136315")
        self.assertEqual(entry.platforms, ("hulu",))
        self.assertEqual(entry.total_minutes, 600)
        self.assertEqual(entry.episode_count, 20)
        self.assertEqual(entry.priority, "high")

    def test_series_without_runtime_uses_default_episode_length(self):
        meta = TitleMetadata("Show", "series", episode_count=4)
        self.assertEqual(entry_from_metadata(meta).total_minutes, 180)

    def test_series_without_episode_count_left_to_planner(self):
        meta = TitleMetadata("Show", "tv")
        entry = entry_from_metadata(meta)
        self.assertIsNone(entry.total_minutes)
        self.assertEqual(entry.priority, "low")

    def test_movie_runtime(self):
        self.assertEqual(entry_from_metadata(TitleMetadata("Film", "movie", total_minutes=95)).total_minutes, 95)
        prefs = PlannerPrefs(default_movie_minutes=100)
        self.assertEqual(entry_from_metadata(TitleMetadata("Film", "movie"), prefs=prefs).total_minutes, 100)

    def test_generated_id(self):
        entry = entry_from_metadata(TitleMetadata("Glass Onion", "movie"))
        self.assertEqual(entry.id, "glass-onion")
        self.assertIsNone(entry.episode_count)


class TestBuildWatchlist(unittest.TestCase):
    def test_resolves_known_titles(self):
        lookup = FakeLookup({
            "Severance": TitleMetadata("Severance", "tv", (350,), episode_count=9, episode_runtime=50),
        })
        with self.assertLogs("streamplan.metadata", level="WARNING"):
            entries, missing = build_watchlist([("Severance", "high"), ("Nope", "low")], lookup)
        self.assertEqual([e.title for e in entries], ["Severance"])
        self.assertEqual(entries[0].platforms, ("apple",))
        self.assertEqual(missing, ["Nope"])
        self.assertEqual(lookup.calls, ["Severance", "Nope"])


if __name__ == "__main__":
    unittest.main()

import unittest

from streamplan.content import (
    ContentTable,
    active_bucket,
    check_watchlist_readiness,
    real_watch_minutes,
)
from streamplan.models import (
    DeferDecision,
    PlannerPrefs,
    PlatformOverride,
    WatchlistEntry,
)


def movie(id, priority="high", platforms=("a",), **kw):
    return WatchlistEntry.create(id, f"Movie {id}", "movie", priority, platforms, **kw)


def series(id, priority="high", platforms=("a",), **kw):
    return WatchlistEntry.create(id, f"Series {id}", "series", priority, platforms, **kw)


class TestWatchlistEntry(unittest.TestCase):
    def test_missing_priority_is_low(self):
        entry = WatchlistEntry.create("1", "X", "movie", None, ["a"])
        self.assertEqual(entry.priority, "low")

    def test_unknown_kind_or_priority_rejected(self):
        with self.assertRaises(ValueError):
            WatchlistEntry.create("1", "X", "tv", "high")
        with self.assertRaises(ValueError):
            WatchlistEntry.create("1", "X", "movie", "urgent")

    def test_defer_and_override_are_exclusive(self):
        with self.assertRaises(ValueError):
            movie("1", defer=True, override="a")

    def test_override_replaces_platform_list(self):
        entry = movie("1", platforms=("a", "b"), override="c")
        self.assertEqual(entry.decision, PlatformOverride("c"))
        self.assertEqual(entry.effective_platforms, ("c",))

    def test_defer_flag(self):
        entry = movie("1", defer=True)
        self.assertIsInstance(entry.decision, DeferDecision)
        self.assertTrue(entry.is_deferred)


class TestRealWatchMinutes(unittest.TestCase):
    def setUp(self):
        self.prefs = PlannerPrefs()

    def test_defaults(self):
        self.assertEqual(real_watch_minutes(movie("1"), self.prefs), 120)
        self.assertEqual(real_watch_minutes(series("2"), self.prefs), 450)
        self.assertEqual(real_watch_minutes(series("3", episode_count=8), self.prefs), 360)

    def test_explicit_duration_wins(self):
        self.assertEqual(real_watch_minutes(movie("1", total_minutes=95), self.prefs), 95)
        self.assertEqual(
            real_watch_minutes(series("2", episode_count=8, total_minutes=500), self.prefs), 500
        )

    def test_non_positive_duration_falls_back(self):
        self.assertEqual(real_watch_minutes(movie("1", total_minutes=0), self.prefs), 120)

    def test_prefs_change_defaults(self):
        prefs = PlannerPrefs(default_episode_minutes=30, default_episode_count=4)
        self.assertEqual(real_watch_minutes(series("1"), prefs), 120)


class TestContentTable(unittest.TestCase):
    def test_remaining_starts_at_real_minutes(self):
        table = ContentTable.from_watchlist([movie("1"), series("2", episode_count=2)])
        self.assertEqual(len(table), 2)
        self.assertEqual(table.get("1").remaining_minutes, 120)
        self.assertEqual(table.get("2").real_minutes, 90)
        self.assertIsNone(table.get("missing"))

    def test_duplicate_ids_resolve_to_first(self):
        first = movie("1", total_minutes=100)
        table = ContentTable.from_watchlist([first, movie("1", total_minutes=200)])
        self.assertEqual(len(table), 2)
        self.assertIs(table.get("1").entry, first)

    def test_consume_bounds(self):
        table = ContentTable.from_watchlist([series("1", total_minutes=100)])
        state = table.get("1")
        self.assertEqual(table.consume(state, 40), 60)
        with self.assertRaises(ValueError):
            table.consume(state, 61)
        with self.assertRaises(ValueError):
            table.consume(state, -1)
        self.assertEqual(state.remaining_minutes, 60)

    def test_schedulable_rules(self):
        table = ContentTable.from_watchlist([
            movie("ok"),
            movie("deferred", defer=True),
            movie("nowhere", platforms=()),
            movie("override-only", platforms=(), override="a"),
            movie("too-long", total_minutes=4000),
            series("long-series", total_minutes=4000),
        ])
        flags = {s.entry.id: table.is_schedulable(s) for s in table}
        self.assertEqual(flags, {
            "ok": True,
            "deferred": False,
            "nowhere": False,
            "override-only": True,
            "too-long": False,
            "long-series": True,
        })
        self.assertEqual(table.total_schedulable_minutes(), 120 + 120 + 4000)

    def test_finished_entry_not_schedulable(self):
        table = ContentTable.from_watchlist([movie("1")])
        state = table.get("1")
        table.consume(state, 120)
        self.assertFalse(table.is_schedulable(state))


class TestActiveBucket(unittest.TestCase):
    def test_highest_tier_first(self):
        table = ContentTable.from_watchlist([
            movie("low", priority="low"),
            movie("high1", priority="high"),
            movie("med", priority="medium"),
            series("high2", priority="high"),
        ])
        bucket = active_bucket(table)
        self.assertEqual(bucket.priority, "high")
        self.assertEqual([e.id for e in bucket.items], ["high1", "high2"])

    def test_falls_through_when_tier_exhausted(self):
        table = ContentTable.from_watchlist([
            movie("high", priority="high"),
            movie("med", priority="medium"),
        ])
        table.consume(table.get("high"), 120)
        self.assertEqual(active_bucket(table).priority, "medium")

    def test_unschedulable_tier_is_skipped(self):
        table = ContentTable.from_watchlist([
            movie("high", priority="high", platforms=()),
            movie("low", priority="low"),
        ])
        bucket = active_bucket(table)
        self.assertEqual(bucket.priority, "low")

    def test_none_when_nothing_schedulable(self):
        table = ContentTable.from_watchlist([movie("1", defer=True)])
        self.assertIsNone(active_bucket(table))
        self.assertIsNone(active_bucket(ContentTable.from_watchlist([])))


class TestReadiness(unittest.TestCase):
    def test_high_priority_without_platform_blocks(self):
        readiness = check_watchlist_readiness([
            movie("1", priority="high", platforms=()),
            movie("2", priority="low", platforms=()),
            movie("3", defer=True, platforms=()),
            movie("4"),
        ])
        self.assertFalse(readiness.is_ready)
        self.assertEqual([e.id for e in readiness.high_priority_missing_platform], ["1"])
        self.assertEqual([e.id for e in readiness.other_missing_platform], ["2"])
        self.assertEqual([e.id for e in readiness.pending_decision], ["3"])

    def test_override_counts_as_platform(self):
        readiness = check_watchlist_readiness([movie("1", platforms=(), override="a")])
        self.assertTrue(readiness.is_ready)


if __name__ == "__main__":
    unittest.main()

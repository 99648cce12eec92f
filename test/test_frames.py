import json
import unittest
from datetime import date

from streamplan.catalog import PlatformCatalog
from streamplan.frames import (
    MONTHLY_COLUMNS,
    SCHEDULE_COLUMNS,
    calendar_events,
    deferred_frame,
    monthly_frame,
    result_to_dict,
    schedule_frame,
)
from streamplan.models import PlatformRecord, WatchlistEntry
from streamplan.scheduler import generate_plan

CATALOG = PlatformCatalog([
    PlatformRecord("a", "Alpha", 10.0),
    PlatformRecord("z", "Zed", 50.0),
])


def sample_result():
    watchlist = [
        WatchlistEntry.create("m", "Movie", "movie", "high", ["a"]),
        WatchlistEntry.create("s", "Show", "series", "medium", ["a"], episode_count=10),
        WatchlistEntry.create("x", "Elsewhere", "series", "low", [], override="z"),
        WatchlistEntry.create("d", "Undecided", "movie", "low", ["a"], defer=True),
    ]
    return generate_plan(watchlist, 10, catalog=CATALOG, start=date(2025, 6, 3))


class TestFrames(unittest.TestCase):
    def setUp(self):
        self.result = sample_result()

    def test_schedule_frame(self):
        df = schedule_frame(self.result)
        self.assertEqual(list(df.columns), SCHEDULE_COLUMNS)
        self.assertEqual(df["title"].tolist(), ["Movie", "Show"])
        self.assertEqual(df["watch_hours"].tolist(), [2.0, 7.5])
        self.assertEqual(df["month"].tolist(), ["Jun", "Jun"])
        self.assertEqual(df.loc[1, "end_day"], 5)

    def test_monthly_frame(self):
        df = monthly_frame(self.result)
        self.assertEqual(list(df.columns), MONTHLY_COLUMNS)
        self.assertEqual(len(df), 1)
        row = df.iloc[0]
        self.assertEqual(row["month"], "Jun 2025")
        self.assertEqual(row["platforms"], "Alpha")
        self.assertEqual(row["monthly_cost"], 10.0)
        self.assertEqual(row["action"], "subscribe")

    def test_deferred_frame(self):
        df = deferred_frame(self.result)
        self.assertEqual(df["title"].tolist(), ["Elsewhere", "Undecided"])

    def test_empty_result_frames(self):
        result = generate_plan([], 10, catalog=CATALOG)
        self.assertTrue(schedule_frame(result).empty)
        self.assertTrue(monthly_frame(result).empty)
        self.assertEqual(list(monthly_frame(result).columns), MONTHLY_COLUMNS)

    def test_calendar_events_have_exclusive_end(self):
        events = calendar_events(self.result)
        self.assertEqual(len(events), 2)
        movie, show = events
        self.assertEqual(movie["start"], "2025-06-01")
        self.assertEqual(movie["end"], "2025-06-02")
        self.assertEqual(show["start"], "2025-06-02")
        self.assertEqual(show["end"], "2025-06-06")
        self.assertTrue(movie["allDay"])
        self.assertEqual(movie["id"], "m-2025-06")

    def test_result_to_dict_is_json_safe(self):
        data = result_to_dict(self.result)
        text = json.dumps(data)
        self.assertIn('"status": "stalled"', text)
        month = data["rotation_schedule"][0]
        self.assertEqual(month["items"][0]["start_date"], "2025-06-01")
        decisions = {d["entry"]["id"]: d["entry"]["decision"] for d in data["deferred_items"]}
        self.assertEqual(decisions["x"], {"type": "override", "platform": "z"})
        self.assertEqual(decisions["d"], {"type": "deferred"})
        self.assertEqual(month["items"][0]["entry"]["decision"], {"type": "unresolved"})


if __name__ == "__main__":
    unittest.main()

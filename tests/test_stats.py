import math
import os
import sys
import time
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

PROJECT_SRC = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(PROJECT_SRC))

from analyze_ebay.models import ListingRecord
from analyze_ebay.stats import StatBucket, aggregate, local_time, weekday_label, time_of_day_label


def local(*args):
    """A timezone aware datetime in the machine's local zone"""
    return datetime(*args).astimezone()


def make_record(item_id, price, end_time, listing_type="Auction"):
    return ListingRecord(
        item_id=item_id,
        title=f"Item {item_id}",
        price=price,
        end_time=end_time,
        listing_type=listing_type,
        selling_state="EndedWithSales",
        condition_label="Used",
    )


class StatBucketTests(unittest.TestCase):
    def test_quartiles_interpolate_at_n_plus_one_rank(self):
        bucket = StatBucket("test")
        for value in [40, 10, 30, 20]:
            bucket.add(value)

        self.assertAlmostEqual(bucket.q1, 12.5)
        self.assertAlmostEqual(bucket.q3, 37.5)
        # repeatable
        self.assertEqual(bucket.q1, bucket.q1)
        self.assertEqual(bucket.q3, bucket.q3)

    def test_summary_values(self):
        bucket = StatBucket("test")
        for value in [10, 20, 30, 40]:
            bucket.add(value)

        self.assertEqual(bucket.count, 4)
        self.assertAlmostEqual(bucket.mean, 25.0)
        self.assertEqual(bucket.min, 10.0)
        self.assertEqual(bucket.max, 40.0)
        self.assertAlmostEqual(bucket.profit_margin, 0.87 * 37.5 - 12.5)

    def test_quartiles_odd_count(self):
        bucket = StatBucket("odd")
        for value in [1, 2, 3, 4, 5]:
            bucket.add(value)

        self.assertAlmostEqual(bucket.q1, 1.5)
        self.assertAlmostEqual(bucket.q3, 4.5)

    def test_quartiles_clamp_to_extremes(self):
        bucket = StatBucket("pair")
        bucket.add(10.0)
        bucket.add(20.0)

        self.assertEqual(bucket.q1, 10.0)
        self.assertEqual(bucket.q3, 20.0)

    def test_single_value(self):
        bucket = StatBucket("one")
        bucket.add(7.0)

        self.assertEqual(bucket.q1, 7.0)
        self.assertEqual(bucket.q3, 7.0)

    def test_empty_bucket_is_nan(self):
        bucket = StatBucket("empty")

        self.assertEqual(bucket.count, 0)
        self.assertTrue(math.isnan(bucket.mean))
        self.assertTrue(math.isnan(bucket.q1))
        self.assertTrue(math.isnan(bucket.min))
        self.assertTrue(math.isnan(bucket.profit_margin))


class LabelTests(unittest.TestCase):
    def test_weekday(self):
        # 2026-10-18 is a Sunday
        self.assertEqual(weekday_label(local(2026, 10, 18, 12, 0)), "Sunday")
        self.assertEqual(weekday_label(local(2026, 10, 19, 12, 0)), "Monday")
        self.assertEqual(weekday_label(local(2026, 10, 24, 12, 0)), "Saturday")

    def test_time_of_day_boundaries(self):
        self.assertEqual(time_of_day_label(local(2026, 10, 18, 0, 0)), "Early")
        self.assertEqual(time_of_day_label(local(2026, 10, 18, 5, 59)), "Early")
        self.assertEqual(time_of_day_label(local(2026, 10, 18, 6, 0)), "Morning")
        self.assertEqual(time_of_day_label(local(2026, 10, 18, 12, 0)), "Afternoon")
        self.assertEqual(time_of_day_label(local(2026, 10, 18, 18, 0)), "Evening")
        self.assertEqual(time_of_day_label(local(2026, 10, 18, 23, 59)), "Evening")


class AggregateTests(unittest.TestCase):
    def setUp(self):
        self.now = local(2026, 10, 19, 12, 0)
        self.listings = [
            make_record("1", 10.0, local(2026, 10, 18, 2, 0), "Auction"),
            make_record("2", 20.0, local(2026, 10, 15, 8, 0), "FixedPrice"),
            make_record("3", 30.0, local(2026, 10, 9, 13, 0), "StoreInventory"),
            make_record("4", 40.0, local(2026, 10, 1, 19, 0), "AuctionWithBIN"),
            make_record("5", 50.0, local(2026, 9, 20, 20, 30), "Auction"),
        ]

    def test_partitions_are_exhaustive(self):
        result = aggregate(self.listings, now=self.now)
        total = len(self.listings)

        self.assertEqual(result.overall.count, total)
        self.assertEqual(sum(b.count for b in result.by_time_of_day.values()), total)
        self.assertEqual(sum(b.count for b in result.by_weekday.values()), total)
        self.assertEqual(sum(b.count for b in result.by_type.values()), total)
        self.assertEqual(sum(b.count for b in result.weekly.values()), total)

    def test_listing_type_buckets(self):
        result = aggregate(self.listings, now=self.now)

        self.assertEqual(result.by_type["Auction"].values, [10.0, 50.0])
        self.assertEqual(result.by_type["FixedPrice"].values, [20.0])
        self.assertEqual(result.by_type["StoreInventory"].values, [30.0])
        self.assertEqual(result.by_type["Misc/Unknown Listing Types"].values, [40.0])

    def test_sorted_newest_first(self):
        result = aggregate(reversed(self.listings), now=self.now)

        self.assertEqual([r.item_id for r in result.ordered], ["1", "2", "3", "4", "5"])

    def test_weekly_buckets(self):
        result = aggregate(self.listings, now=self.now)
        weeks = result.weekly_chronological()

        # boundaries step back from 10/12 12:00 to 09/14; 09/21 stays empty
        self.assertEqual(len(weeks), 5)
        self.assertEqual([w.values for w in weeks], [[50.0], [], [40.0], [30.0], [10.0, 20.0]])

    def test_first_week_always_present(self):
        result = aggregate([], now=self.now)

        self.assertEqual(len(result.weekly), 1)
        self.assertEqual(result.overall.count, 0)

    def test_listing_on_boundary_stays_in_that_week(self):
        boundary = self.now - timedelta(weeks=1)
        result = aggregate([make_record("1", 5.0, boundary)], now=self.now)

        self.assertEqual(len(result.weekly), 1)
        self.assertEqual(result.weekly[boundary].values, [5.0])

    def test_utc_end_times(self):
        end = datetime(2026, 10, 10, 12, 0, tzinfo=timezone.utc)
        result = aggregate([make_record("1", 5.0, end)], now=self.now)

        self.assertEqual(result.overall.count, 1)
        self.assertEqual(sum(b.count for b in result.by_weekday.values()), 1)

    def test_naive_times(self):
        now = datetime(2026, 10, 19, 12, 0)
        listings = [
            make_record("1", 5.0, datetime(2026, 10, 15, 9, 0)),
            make_record("2", 7.0, datetime(2026, 10, 3, 9, 0)),
        ]

        result = aggregate(listings, now=now)

        self.assertEqual(sorted(result.weekly), [
            datetime(2026, 9, 28, 12, 0),
            datetime(2026, 10, 5, 12, 0),
            datetime(2026, 10, 12, 12, 0),
        ])
        self.assertEqual(result.weekly[datetime(2026, 10, 5, 12, 0)].count, 0)


@unittest.skipUnless(hasattr(time, "tzset"), "needs time.tzset")
class DaylightSavingTests(unittest.TestCase):
    def setUp(self):
        self._original_tz = os.environ.get("TZ")
        os.environ["TZ"] = "America/New_York"
        time.tzset()

    def tearDown(self):
        if self._original_tz is None:
            os.environ.pop("TZ", None)
        else:
            os.environ["TZ"] = self._original_tz
        time.tzset()

    def test_week_boundaries_keep_wall_clock_hour(self):
        # US daylight saving ends 2026-11-01
        now = datetime(2026, 11, 10, 12, 0).astimezone()
        end = datetime(2026, 10, 20, 13, 0).astimezone()

        result = aggregate([make_record("1", 5.0, end)], now=now)
        weeks = sorted(result.weekly)

        self.assertEqual(len(weeks), 3)
        self.assertEqual([local_time(week).hour for week in weeks], [12, 12, 12])
        self.assertEqual(local_time(weeks[0]).date().isoformat(), "2026-10-20")
        self.assertEqual(result.weekly[weeks[0]].values, [5.0])


if __name__ == '__main__':
    unittest.main()

"""
Descriptive statistics over sold prices, bucketed by listing type, weekday,
time of day and trailing week.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

import numpy as np

from . import config
from .models import ListingRecord, ListingType

logger = logging.getLogger(__name__)

WEEK = timedelta(weeks=1)

TYPE_LABELS = {
    ListingType.AUCTION: config.AUCTION,
    ListingType.FIXED_PRICE: config.FIXED,
    ListingType.STORE_INVENTORY: config.STORE,
    ListingType.OTHER: config.MISC,
}

# (label, first hour, end hour) half open
TIME_OF_DAY = [
    (config.EARLY, 0, 6),
    (config.MORNING, 6, 12),
    (config.AFTERNOON, 12, 18),
    (config.EVENING, 18, 24),
]


class StatBucket:
    """Price samples for one partition plus the statistics derived from them"""

    def __init__(self, label: str):
        self.label = label
        self.values: List[float] = []

    def add(self, value: float):
        self.values.append(value)

    @property
    def count(self) -> int:
        return len(self.values)

    def _reduce(self, fn) -> float:
        if not self.values:
            return float('nan')
        return float(fn(np.asarray(self.values, dtype=float)))

    @property
    def mean(self) -> float:
        return self._reduce(np.mean)

    def percentile(self, p: float) -> float:
        """Interpolates at rank p(n+1)/100, clamped to the min and max"""
        return self._reduce(lambda a: np.percentile(a, p, method='weibull'))

    @property
    def q1(self) -> float:
        return self.percentile(25)

    @property
    def q3(self) -> float:
        return self.percentile(75)

    @property
    def min(self) -> float:
        return self._reduce(np.min)

    @property
    def max(self) -> float:
        return self._reduce(np.max)

    @property
    def profit_margin(self) -> float:
        return config.FEE_RETAINED * self.q3 - self.q1

    def __repr__(self):
        return f"StatBucket({self.label!r}, n={self.count})"


def local_time(moment: datetime) -> datetime:
    # naive datetimes are taken as already local
    if moment.tzinfo is None:
        return moment
    return moment.astimezone()


def weekday_label(moment: datetime) -> str:
    # datetime.weekday() is Monday == 0; labels start on Sunday
    return config.WEEKDAYS[(local_time(moment).weekday() + 1) % 7]


def time_of_day_label(moment: datetime) -> str:
    hour = local_time(moment).hour
    for label, start, end in TIME_OF_DAY:
        if start <= hour < end:
            return label
    raise ValueError(f"hour out of range: {hour}")


@dataclass
class Aggregation:
    overall: StatBucket
    by_type: Dict[str, StatBucket]
    by_weekday: Dict[str, StatBucket]
    by_time_of_day: Dict[str, StatBucket]
    weekly: Dict[datetime, StatBucket]
    ordered: List[ListingRecord] = field(default_factory=list)

    def weekly_chronological(self) -> List[StatBucket]:
        return [self.weekly[key] for key in sorted(self.weekly)]


def aggregate(listings: Iterable[ListingRecord], now: Optional[datetime] = None) -> Aggregation:
    """
    Bucket every listing's price into the overall, listing type, weekday,
    time of day and weekly partitions.

    Weekly buckets are keyed by a boundary that starts one week before ``now``
    and steps back one week of local wall clock time at a time; a listing
    lands in the latest boundary that is not after its end time. Listings ending after the first boundary
    share the first bucket. Buckets are created as older listings need them.
    """
    if now is None:
        now = datetime.now().astimezone()

    ordered = sorted(listings, key=lambda record: record.end_time, reverse=True)

    result = Aggregation(
        overall=StatBucket(config.ALL_STATS),
        by_type={label: StatBucket(label) for label in TYPE_LABELS.values()},
        by_weekday={day: StatBucket(day) for day in config.WEEKDAYS},
        by_time_of_day={label: StatBucket(label) for label, _, _ in TIME_OF_DAY},
        weekly={},
        ordered=ordered,
    )

    # step back on local wall clock time so boundaries keep their hour across DST
    aware = now.tzinfo is not None
    wall = local_time(now).replace(tzinfo=None) - WEEK
    boundary = _localize(wall, aware)
    result.weekly[boundary] = StatBucket(format_boundary(boundary))

    for record in ordered:
        price = record.price
        result.overall.add(price)
        result.by_type[TYPE_LABELS[record.kind]].add(price)
        result.by_weekday[weekday_label(record.end_time)].add(price)
        result.by_time_of_day[time_of_day_label(record.end_time)].add(price)

        # ordered newest first, so the boundary only ever moves back
        while record.end_time < boundary:
            wall -= WEEK
            boundary = _localize(wall, aware)
            result.weekly[boundary] = StatBucket(format_boundary(boundary))
        result.weekly[boundary].add(price)

    logger.debug(f"Aggregated {result.overall.count} listings into {len(result.weekly)} weeks")
    return result


def _localize(wall: datetime, aware: bool) -> datetime:
    return wall.astimezone() if aware else wall


def format_boundary(boundary: datetime) -> str:
    return local_time(boundary).strftime("%a %b %d %H:%M:%S %Z %Y")

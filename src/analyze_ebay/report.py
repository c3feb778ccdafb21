"""
Plain text report and item detail output
"""
import logging
import math
from typing import IO, Iterable, List

from . import config
from .models import ListingRecord
from .stats import Aggregation, StatBucket, local_time

logger = logging.getLogger(__name__)


def format_number(value: float) -> str:
    if isinstance(value, float) and math.isnan(value):
        return "NaN"
    return str(value)


def format_stats(bucket: StatBucket) -> List[str]:
    return [
        bucket.label,
        f"MEAN: {format_number(bucket.mean)}",
        f"Q1: {format_number(bucket.q1)}",
        # Q2 is the 75th percentile, the label is kept for existing readers
        f"Q2: {format_number(bucket.q3)}",
        f"MIN: {format_number(bucket.min)}",
        f"MAX: {format_number(bucket.max)}",
        "REASONABLE PROFIT MARGIN (EXCLUDES SHIPPING & HANDLING COSTS): "
        f"{format_number(bucket.profit_margin)}",
        f"NUM ITEMS: {bucket.count}",
        config.STATS_RULE,
    ]


def format_trend(means: Iterable[float]) -> str:
    """Weekly means oldest to newest, e.g. ``5.0->7.5->10.0``"""
    return config.TREND_SEPARATOR.join(format_number(mean) for mean in means)


def report_buckets(aggregation: Aggregation) -> List[StatBucket]:
    """Buckets in report order. Misc appears twice, after the types and after time of day."""
    misc = aggregation.by_type[config.MISC]
    buckets = [aggregation.overall]
    buckets += [aggregation.by_type[label] for label in (config.AUCTION, config.FIXED, config.STORE)]
    buckets.append(misc)
    buckets += [aggregation.by_weekday[day] for day in config.WEEKDAYS]
    buckets += list(aggregation.by_time_of_day.values())
    buckets.append(misc)
    buckets += aggregation.weekly_chronological()
    return buckets


def write_report(out: IO[str], aggregation: Aggregation):
    lines = ["", "", config.REPORT_HEADER_RULE]
    for bucket in report_buckets(aggregation):
        lines += format_stats(bucket)

    lines.append(config.WEEKLY_AVERAGE)
    lines.append(format_trend(bucket.mean for bucket in aggregation.weekly_chronological()))

    out.write("\n".join(lines))
    out.write("\n")


def format_item(record: ListingRecord) -> List[str]:
    return [
        record.title,
        format_number(record.price),
        local_time(record.end_time).isoformat(),
        record.listing_type,
        record.selling_state,
        record.condition_label,
        "",
    ]


def write_item_details(out: IO[str], listings: Iterable[ListingRecord]):
    """Six lines per listing then a blank line, in the order given"""
    count = 0
    for record in listings:
        out.write("\n".join(format_item(record)))
        out.write("\n")
        count += 1
    logger.debug(f"Wrote details for {count} listings")

"""
Merge freshly fetched listings into the snapshot mapping
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from .models import ListingRecord

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    duplicates: int = 0
    new_items: int = 0


def merge_listings(listings: Dict[str, ListingRecord],
                   incoming: Iterable[ListingRecord],
                   result: Optional[MergeResult] = None) -> MergeResult:
    """
    Insert each incoming record unless its id is already present.

    The first copy of an id wins; later copies only bump ``duplicates``.
    ``result`` is updated in place as records arrive, so a caller that passes
    one in still has the partial counts if ``incoming`` raises part way.
    """
    if result is None:
        result = MergeResult()

    for record in incoming:
        if record.item_id in listings:
            result.duplicates += 1
        else:
            listings[record.item_id] = record
            result.new_items += 1

    logger.debug(f"Merged: {result.new_items} new, {result.duplicates} duplicates")
    return result

"""
Snapshot store for previously seen listings

The snapshot is a JSON Lines file, one listing per line. It is read in full
at start-up and rewritten in full at the end of a run.
"""
import json
import logging
import os
from typing import Dict, List, Tuple

from . import config
from .models import ListingRecord

logger = logging.getLogger(__name__)

ListingMap = Dict[str, ListingRecord]


class SnapshotError(Exception):
    """Raised when an existing snapshot file cannot be read back"""
    pass


def load(path: str) -> Tuple[ListingMap, List[str]]:
    """
    Read a snapshot into a mapping keyed by item id.

    Returns the mapping and the status lines to echo ("Existing file not found"
    on a first run). A missing file is not an error; a damaged one is.
    """
    listings: ListingMap = {}
    if not os.path.exists(path):
        logger.info(f"No snapshot at {path}")
        return listings, [config.EXISTING_FILE_NOT_FOUND]

    with open(path, 'r', encoding='utf-8') as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                record = ListingRecord.from_dict(json.loads(line))
            except (ValueError, KeyError, TypeError) as e:
                raise SnapshotError(f"{path}:{line_number}: unreadable record: {e}") from e
            listings[record.item_id] = record

    logger.debug(f"Loaded {len(listings)} listings from {path}")
    return listings, [config.ITEMS_ALREADY_IN_FILE + str(len(listings)), config.REACHED_EOF]


def save(path: str, listings: ListingMap):
    """Overwrite the snapshot with every listing in the mapping"""
    with open(path, 'w', encoding='utf-8') as f:
        for record in listings.values():
            f.write(json.dumps(record.to_dict()))
            f.write("\n")
    logger.debug(f"Saved {len(listings)} listings to {path}")

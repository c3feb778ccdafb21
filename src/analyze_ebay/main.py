"""
analyze-ebay command line entry point

Finds items that sold on eBay for the given keywords, condition and price
range, adds them to a snapshot file unique to the query and writes a report
of summary statistics next to it:

    <keywords> <condition> --min<min> --max<max>            snapshot
    <keywords> <condition> --min<min> --max<max>.txt        report
    <keywords> <condition> --min<min> --max<max>_items.txt  item details
"""
import logging
import os
import sys
from typing import List, Optional

import requests

from . import config as constants
from . import store
from .args import ArgumentError, parse_args
from .client import APIError, FindingClient
from .config import ConfigurationError, get_config
from .merge import MergeResult, merge_listings
from .report import write_item_details, write_report
from .stats import aggregate

logger = logging.getLogger(__name__)


def _echo(output, line: str):
    print(line)
    output.write(line + "\n")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    if argv is None:
        argv = sys.argv[1:]

    try:
        query = parse_args(argv)
    except ArgumentError as e:
        print(str(e), file=sys.stderr)
        return 1

    config = get_config()
    logging.basicConfig(level=config.log_level.upper(),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    print(query.condition.api_value)

    snapshot_path = os.path.join(config.output_dir, query.snapshot_name())
    try:
        listings, status = store.load(snapshot_path)
    except store.SnapshotError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    report_path = snapshot_path + constants.TXT_EXT
    items_path = snapshot_path + constants.ITEMS_SUFFIX + constants.TXT_EXT

    with open(report_path, 'w', encoding='utf-8') as output, \
            open(items_path, 'w', encoding='utf-8') as item_output:
        for line in status:
            _echo(output, line)

        print(query.keywords)
        result = MergeResult()
        try:
            client = FindingClient(config)
            merge_listings(listings, client.iter_listings(query), result)
        except (APIError, ConfigurationError, requests.exceptions.RequestException):
            # keep whatever was merged before the failure
            logger.exception("Search stopped early")

        _echo(output, constants.NUM_DUP + str(result.duplicates))
        _echo(output, constants.NUM_NEW + str(result.new_items))

        aggregation = aggregate(listings.values())
        write_report(output, aggregation)
        write_item_details(item_output, aggregation.ordered)

    store.save(snapshot_path, listings)
    return 0


if __name__ == "__main__":
    sys.exit(main())

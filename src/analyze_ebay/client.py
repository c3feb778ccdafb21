"""
eBay Finding API client for completed (sold) listings
"""
import requests
import logging
import time
from datetime import datetime
from typing import Iterator, Optional

from . import config as constants
from .config import Config, get_config
from .models import ListingRecord, QuerySpec, SearchPage

logger = logging.getLogger(__name__)

OPERATION_NAME = "findCompletedItems"
SERVICE_VERSION = "1.13.0"
RESPONSE_KEY = "findCompletedItemsResponse"


class APIError(Exception):
    """Raised when the Finding API call fails or reports a failure"""
    pass


class RateLimitError(APIError):
    pass


class UnauthorizedError(APIError):
    pass


def _first(data: dict, key: str, default=None):
    """Finding API JSON wraps every value in a single element list"""
    value = data.get(key)
    if isinstance(value, list):
        return value[0] if value else default
    if value is None:
        return default
    return value


def parse_end_time(raw: str) -> datetime:
    # e.g. 2026-10-01T18:22:11.000Z
    return datetime.fromisoformat(raw.replace('Z', '+00:00'))


def parse_item(item: dict) -> Optional[ListingRecord]:
    """Parse a searchResult item into a ListingRecord, None if unusable"""
    try:
        item_id = _first(item, 'itemId')
        if not item_id:
            logger.warning("Skipping item without an itemId")
            return None

        selling_status = _first(item, 'sellingStatus', {})
        price_info = _first(selling_status, 'convertedCurrentPrice', {})
        listing_info = _first(item, 'listingInfo', {})
        condition = _first(item, 'condition', {})

        return ListingRecord(
            item_id=str(item_id),
            title=_first(item, 'title', ''),
            price=float(price_info.get('__value__', 0)),
            end_time=parse_end_time(_first(listing_info, 'endTime')),
            listing_type=_first(listing_info, 'listingType', 'Unknown'),
            selling_state=_first(selling_status, 'sellingState', 'Unknown'),
            condition_label=_first(condition, 'conditionDisplayName', 'Unknown'),
        )
    except (AttributeError, TypeError, ValueError) as e:
        logger.warning(f"Skipping unparseable item {item.get('itemId')}: {e}")
        return None


class FindingClient:
    def __init__(self, config: Optional[Config] = None):
        self.config = config or get_config()
        self.config.validate()
        self.base_url = self.config.ebay_finding_api_url
        self.headers = {
            'X-EBAY-SOA-SECURITY-APPNAME': self.config.ebay_app_id,
            'X-EBAY-SOA-OPERATION-NAME': OPERATION_NAME,
            'X-EBAY-SOA-GLOBAL-ID': self.config.ebay_global_id,
        }

    def build_params(self, query: QuerySpec, page_number: int, page_size: int) -> dict:
        params = {
            'OPERATION-NAME': OPERATION_NAME,
            'SERVICE-VERSION': SERVICE_VERSION,
            'SECURITY-APPNAME': self.config.ebay_app_id,
            'GLOBAL-ID': self.config.ebay_global_id,
            'RESPONSE-DATA-FORMAT': 'JSON',
            'REST-PAYLOAD': 'true',
            'keywords': query.keywords,
            'paginationInput.pageNumber': str(page_number),
            'paginationInput.entriesPerPage': str(page_size),
        }

        filters = [
            ('SoldItemsOnly', 'true'),
            ('Condition', query.condition.api_value),
        ]
        if query.min_price is not None:
            filters.append(('MinPrice', str(query.min_price)))
        if query.max_price is not None:
            filters.append(('MaxPrice', str(query.max_price)))

        for index, (name, value) in enumerate(filters):
            params[f'itemFilter({index}).name'] = name
            params[f'itemFilter({index}).value'] = value
        return params

    def _get(self, params: dict, max_retries: int = 3) -> dict:
        """GET with retries on 429, 5xx, timeouts and connection errors"""
        for attempt in range(max_retries):
            last_attempt = attempt == max_retries - 1
            try:
                response = requests.get(self.base_url, headers=self.headers, params=params, timeout=30)
            except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
                if last_attempt:
                    raise APIError(f"Network error: {e}") from e
                logger.warning(f"Network error, retrying: {e}")
                time.sleep(2 ** attempt)
                continue

            if response.status_code == 200:
                try:
                    return response.json()
                except ValueError as e:
                    raise APIError(f"Response was not JSON: {e}") from e
            if response.status_code in (401, 403):
                raise UnauthorizedError(f"Request rejected ({response.status_code}); check EBAY_APP_ID")
            if response.status_code == 429:
                if last_attempt:
                    raise RateLimitError("Rate limit exceeded")
                logger.warning("Rate limited, retrying")
                time.sleep(2 * 2 ** attempt)
                continue
            if response.status_code >= 500:
                if last_attempt:
                    raise APIError(f"Server error {response.status_code}")
                logger.warning(f"Server error {response.status_code}, retrying")
                time.sleep(2 ** attempt)
                continue
            raise APIError(f"Unexpected status {response.status_code}: {response.text[:200]}")

        raise APIError("No attempts made")

    def find_completed_items(self, query: QuerySpec, page_number: int = 1,
                             page_size: Optional[int] = None, max_retries: int = 3) -> SearchPage:
        page_size = page_size or self.config.page_size
        data = self._get(self.build_params(query, page_number, page_size), max_retries=max_retries)
        try:
            return self._parse_page(data, page_number)
        except (AttributeError, TypeError, ValueError) as e:
            raise APIError(f"Malformed {OPERATION_NAME} response for page {page_number}: {e}") from e

    def _parse_page(self, data: dict, page_number: int) -> SearchPage:
        result = _first(data, RESPONSE_KEY, {})
        ack = _first(result, 'ack', 'Failure')
        if ack not in ('Success', 'Warning'):
            error = _first(_first(result, 'errorMessage', {}), 'error', {})
            raise APIError(f"{OPERATION_NAME} failed: {_first(error, 'message', 'Unknown error')}")

        pagination = _first(result, 'paginationOutput', {})
        total_pages = int(_first(pagination, 'totalPages', 0))

        search_result = _first(result, 'searchResult', {})
        raw_items = search_result.get('item', [])
        items = []
        for raw in raw_items:
            record = parse_item(raw)
            if record is not None:
                items.append(record)

        return SearchPage(page_number=page_number, total_pages=total_pages,
                          items=items, raw_count=len(raw_items))

    def iter_pages(self, query: QuerySpec, page_size: Optional[int] = None) -> Iterator[SearchPage]:
        """Yield pages 1, 2, ... until a page comes back empty or past the last page"""
        page_number = 1
        while True:
            page = self.find_completed_items(query, page_number, page_size)
            # a page whose items were all skipped still counts as a page
            if not page.raw_count or page_number > page.total_pages:
                return
            print(f"{constants.PAGE}{page_number}")
            logger.info(f"Fetched page {page_number}/{page.total_pages} ({len(page.items)} items)")
            yield page
            page_number += 1

    def iter_listings(self, query: QuerySpec, page_size: Optional[int] = None) -> Iterator[ListingRecord]:
        for page in self.iter_pages(query, page_size):
            yield from page.items

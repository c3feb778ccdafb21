"""
analyze-ebay: sold listing statistics from the eBay Finding API
"""
from .args import ArgumentError, parse_args
from .client import APIError, FindingClient
from .config import Config, get_config
from .merge import MergeResult, merge_listings
from .models import Condition, ListingRecord, ListingType, QuerySpec, SearchPage
from .stats import Aggregation, StatBucket, aggregate

__all__ = [
    'ArgumentError', 'parse_args', 'APIError', 'FindingClient', 'Config', 'get_config',
    'MergeResult', 'merge_listings', 'Condition', 'ListingRecord', 'ListingType',
    'QuerySpec', 'SearchPage', 'Aggregation', 'StatBucket', 'aggregate',
]

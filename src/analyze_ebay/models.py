"""
Data models for completed eBay listings and search queries
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from . import config


class Condition(Enum):
    """Condition filter sent with the search (label, API value, flag)"""
    USED = ("Used", "Used", config.USED_OPTION)  # used, refurbished or for parts
    NEW = ("New", "New", config.NEW_OPTION)
    BROKEN = ("Broken", "7000", config.BROKEN_OPTION)  # "For parts or not working"

    def __init__(self, label: str, api_value: str, flag: str):
        self.label = label
        self.api_value = api_value
        self.flag = flag

    @classmethod
    def from_flag(cls, flag: str) -> Optional['Condition']:
        for condition in cls:
            if condition.flag == flag:
                return condition
        return None


class ListingType(Enum):
    AUCTION = config.AUCTION
    FIXED_PRICE = config.FIXED
    STORE_INVENTORY = config.STORE
    OTHER = "Other"

    @classmethod
    def classify(cls, raw: str) -> 'ListingType':
        """Map a raw listingType string onto a known type, else OTHER"""
        for listing_type in (cls.AUCTION, cls.FIXED_PRICE, cls.STORE_INVENTORY):
            if raw == listing_type.value:
                return listing_type
        return cls.OTHER


@dataclass
class ListingRecord:
    """One sold listing as returned by findCompletedItems"""
    item_id: str
    title: str
    price: float  # convertedCurrentPrice
    end_time: datetime  # timezone aware
    listing_type: str  # raw value, e.g. Auction, FixedPrice, AuctionWithBIN
    selling_state: str
    condition_label: str

    @property
    def kind(self) -> ListingType:
        return ListingType.classify(self.listing_type)

    def to_dict(self) -> dict:
        return {
            'item_id': self.item_id,
            'title': self.title,
            'price': self.price,
            'end_time': self.end_time.isoformat(),
            'listing_type': self.listing_type,
            'selling_state': self.selling_state,
            'condition_label': self.condition_label,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ListingRecord':
        return cls(
            item_id=str(data['item_id']),
            title=data['title'],
            price=float(data['price']),
            end_time=datetime.fromisoformat(data['end_time']),
            listing_type=data['listing_type'],
            selling_state=data['selling_state'],
            condition_label=data['condition_label'],
        )


@dataclass
class QuerySpec:
    """A validated search request built from the command line"""
    keywords: str
    condition: Condition = Condition.USED
    min_price: Optional[float] = None
    max_price: Optional[float] = None

    def __post_init__(self):
        if self.max_price is not None and self.min_price is None:
            raise ValueError("max_price requires min_price")

    def snapshot_name(self) -> str:
        """File name for the persisted listings of this query"""
        min_price = self.min_price if self.min_price is not None else -1.0
        max_price = self.max_price if self.max_price is not None else -1.0
        name = (f"{self.keywords} {self.condition.api_value} "
                f"{config.MIN_COMMAND_OPTION}{float(min_price)} "
                f"{config.MAX_COMMAND_OPTION}{float(max_price)}")
        return name.replace("/", "")


@dataclass
class SearchPage:
    """A single page of findCompletedItems results"""
    page_number: int
    total_pages: int
    items: List[ListingRecord] = field(default_factory=list)
    raw_count: int = 0  # items returned, including any that failed to parse

"""
Configuration settings and report constants for analyze-ebay
"""
import os
import logging
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Command line options
MIN_COMMAND_OPTION = "--min"
MAX_COMMAND_OPTION = "--max"
USED_OPTION = "--u"
NEW_OPTION = "--n"
BROKEN_OPTION = "--b"

# Argument errors
NO_KEYWORDS_ERROR = "ERROR: NO KEYWORDS"
MAX_BEFORE_MIN_ERROR = "ERROR: MAX FOUND BEFORE MIN SPECIFIED"
MIN_VALUE_INVALID = "ERROR: INVALID VALUE SPECIFIED FOR MIN"
MIN_VALUE_NOT_SPECIFIED = "ERROR: MIN VALUE NOT SPECIFIED"
MAX_VALUE_INVALID = "ERROR: INVALID VALUE SPECIFIED FOR MAX"
MAX_VALUE_NOT_SPECIFIED = "ERROR: MAX VALUE NOT SPECIFIED"
ONLY_MAX_AFTER_MIN = "ERROR: CAN ONLY HAVE THE MAX SPECIFIED AFTER MIN"

# Output files
TXT_EXT = ".txt"
ITEMS_SUFFIX = "_items"

# Progress and summary lines
ITEMS_ALREADY_IN_FILE = "Items already in file: "
REACHED_EOF = "Reached end of file"
EXISTING_FILE_NOT_FOUND = "Existing file not found"
PAGE = "Page"
NUM_DUP = "Number of Duplicates: "
NUM_NEW = "Number of New Items: "

# Bucket labels
ALL_STATS = "All Stats"
AUCTION = "Auction"
FIXED = "FixedPrice"
STORE = "StoreInventory"
MISC = "Misc/Unknown Listing Types"

EARLY = "Early"
MORNING = "Morning"
AFTERNOON = "Afternoon"
EVENING = "Evening"

WEEKDAYS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

WEEKLY_AVERAGE = "Weekly Average Over Time"
TREND_SEPARATOR = "->"

REPORT_HEADER_RULE = "-------------------------------------"
STATS_RULE = "------------------------------"

# Assumes ~13% marketplace fees come off the upper quartile
FEE_RETAINED = 0.87

DEFAULT_FINDING_API_URL = "https://svcs.ebay.com/services/search/FindingService/v1"


class ConfigurationError(Exception):
    """Raised when configuration is invalid or incomplete"""
    pass


class Config:
    """analyze-ebay configuration"""

    def __init__(self):
        # Finding API only needs the application id
        self.ebay_app_id = os.getenv('EBAY_APP_ID')

        # API Endpoints
        self.ebay_finding_api_url = os.getenv('EBAY_FINDING_API_URL', DEFAULT_FINDING_API_URL)
        self.ebay_global_id = os.getenv('EBAY_GLOBAL_ID', 'EBAY-US')

        self.page_size = int(os.getenv('EBAY_PAGE_SIZE', '100'))
        self.output_dir = os.getenv('ANALYZE_EBAY_OUTPUT_DIR', '.')
        self.log_level = os.getenv('LOG_LEVEL', 'WARNING')

    def validate(self):
        """Validate required configuration"""
        if not self.ebay_app_id:
            raise ConfigurationError("EBAY_APP_ID not set")
        if self.page_size < 1 or self.page_size > 100:
            raise ConfigurationError("EBAY_PAGE_SIZE must be between 1 and 100")

# Global configuration instance
_config: Optional[Config] = None

def get_config() -> Config:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = Config()
    return _config

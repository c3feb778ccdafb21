"""
Command line parsing for analyze-ebay

Usage:
    analyze-ebay keyword1 keyword2 ... [--u|--n|--b] [--min <min> [--max <max>]]
"""
import logging
from typing import List, Optional, Sequence

from . import config
from .models import Condition, QuerySpec

logger = logging.getLogger(__name__)

OPTION_FLAGS = (
    config.MIN_COMMAND_OPTION,
    config.MAX_COMMAND_OPTION,
    config.USED_OPTION,
    config.NEW_OPTION,
    config.BROKEN_OPTION,
)


class ArgumentError(Exception):
    """Base class for command line errors; str() is the message for stderr"""
    message = "ERROR: INVALID ARGUMENTS"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class NoKeywords(ArgumentError):
    message = config.NO_KEYWORDS_ERROR


class MaxBeforeMin(ArgumentError):
    message = config.MAX_BEFORE_MIN_ERROR


class MinValueMissing(ArgumentError):
    message = config.MIN_VALUE_NOT_SPECIFIED


class MinValueInvalid(ArgumentError):
    message = config.MIN_VALUE_INVALID


class MaxValueMissing(ArgumentError):
    message = config.MAX_VALUE_NOT_SPECIFIED


class MaxValueInvalid(ArgumentError):
    message = config.MAX_VALUE_INVALID


class MaxAfterMinOnly(ArgumentError):
    message = config.ONLY_MAX_AFTER_MIN


def _parse_number(token: str, error: type) -> float:
    try:
        return float(token)
    except ValueError:
        raise error()


def _parse_price_range(args: Sequence[str], min_index: int):
    """Parse ``--min <value> [--max <value>]`` starting at ``min_index``"""
    last_index = len(args) - 1
    value_index = min_index + 1
    max_option_index = min_index + 2
    max_value_index = min_index + 3

    if last_index < value_index:
        raise MinValueMissing()
    min_price = _parse_number(args[value_index], MinValueInvalid)

    max_price = None
    if last_index >= max_option_index:
        if args[max_option_index] != config.MAX_COMMAND_OPTION or last_index > max_value_index:
            raise MaxAfterMinOnly()
        if last_index < max_value_index:
            raise MaxValueMissing()
        max_price = _parse_number(args[max_value_index], MaxValueInvalid)

    return min_price, max_price


def parse_args(args: Sequence[str]) -> QuerySpec:
    """
    Turn raw command line tokens into a QuerySpec.

    Keywords run until the first option flag. A condition flag ends the scan.
    ``--min`` takes a value and may only be followed by ``--max <value>``;
    nothing after that is examined.

    Raises:
        ArgumentError: one of its subclasses, describing the first problem found
    """
    args = list(args)
    if not args:
        raise NoKeywords()
    if args == [config.MIN_COMMAND_OPTION]:
        raise MinValueMissing()
    if args[0] in OPTION_FLAGS:
        raise NoKeywords()

    keywords: List[str] = [args[0]]
    condition = Condition.USED

    for i in range(1, len(args)):
        token = args[i]

        flagged = Condition.from_flag(token)
        if flagged is not None:
            condition = flagged
            break

        if token == config.MIN_COMMAND_OPTION:
            min_price, max_price = _parse_price_range(args, i)
            return QuerySpec(" ".join(keywords), condition, min_price, max_price)

        if token == config.MAX_COMMAND_OPTION:
            raise MaxBeforeMin()

        keywords.append(token)

    return QuerySpec(" ".join(keywords), condition)

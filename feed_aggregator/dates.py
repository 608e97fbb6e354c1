"""Publish date parsing for date-based queries."""

from datetime import UTC, datetime
from enum import Enum

from dateutil import parser as date_parser

from .exceptions import MalformedDateError


class DatePolicy(Enum):
    """How date-based queries treat publish dates that cannot be parsed."""

    STRICT = "strict"
    LENIENT = "lenient"


# Zone names allowed by RFC 2822 section 4.3, as UTC offsets in seconds
RFC2822_ZONES = {
    "UT": 0,
    "UTC": 0,
    "GMT": 0,
    "EST": -5 * 3600,
    "EDT": -4 * 3600,
    "CST": -6 * 3600,
    "CDT": -5 * 3600,
    "MST": -7 * 3600,
    "MDT": -6 * 3600,
    "PST": -8 * 3600,
    "PDT": -7 * 3600,
}

_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def parse_pub_date(value: str) -> datetime:
    """Parse an RFC-2822 or ISO-8601 style publish date.

    RFC-2822 zone names such as ``EST`` or ``PDT`` are honored. Naive results
    are taken to be UTC so that every parsed date is comparable.

    Raises:
        MalformedDateError: If the value is not a recognizable date or lacks
            a year, month or day
    """
    try:
        parsed = date_parser.parse(value, default=_DEFAULTS[0], tzinfos=RFC2822_ZONES)
        other = date_parser.parse(value, default=_DEFAULTS[1], tzinfos=RFC2822_ZONES)
    except (ValueError, OverflowError, TypeError) as e:
        raise MalformedDateError(value) from e

    # A missing year, month or day would be filled in from the default
    if parsed.date() != other.date():
        raise MalformedDateError(value)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def try_parse_pub_date(value: str | None) -> datetime | None:
    """Parse a publish date, returning None when absent or malformed."""
    if value is None:
        return None
    try:
        return parse_pub_date(value)
    except MalformedDateError:
        return None

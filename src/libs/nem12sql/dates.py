"""Date helpers for the NEM12 Date8 format and SQL timestamp output."""

from datetime import datetime

from .exceptions import InvalidDateError, InvalidDateFormatError

DATE8_LENGTH = 8


def parse_compact_date(token: str) -> datetime:
    """
    Parse a NEM12 Date8 token (YYYYMMDD) to a naive datetime at midnight.

    Raises:
        InvalidDateFormatError: token is not exactly eight ASCII digits
        InvalidDateError: the digits do not form a real calendar date
    """
    if not token or len(token) != DATE8_LENGTH or not (token.isascii() and token.isdigit()):
        raise InvalidDateFormatError("Invalid NEM12 date format - expected YYYYMMDD")

    try:
        return datetime(int(token[0:4]), int(token[4:6]), int(token[6:8]))
    except ValueError as e:
        raise InvalidDateError(f"Invalid NEM12 date: {token}") from e


def format_timestamp(dt: datetime) -> str:
    """Format as YYYY-MM-DD HH:MM:SS without any timezone conversion."""
    return f"{format_date_only(dt)} {dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"


def format_date_only(dt: datetime) -> str:
    # strftime does not zero-pad years below 1000 on every platform
    return f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"

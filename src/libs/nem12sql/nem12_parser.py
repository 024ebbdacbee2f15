"""
Line-oriented NEM12 parser.

Each CSV line is handled on its own, with the active meter and interval
length carried between lines in a ParserContext. A bad line raises a
NEM12ParseError; parse_records() turns that into a "Line <n>: ..." message
and carries on with the next line, so one malformed record never costs the
readings of the rest of the file.
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Protocol

from .dates import parse_compact_date
from .exceptions import (
    InvalidDateFormatError,
    InvalidFormatError,
    MissingMeterContextError,
    NEM12ParseError,
    UnknownRecordTypeError,
)
from .nem_objects import DEFAULT_INTERVAL_LENGTH, MeterReading, ParserContext, ParseResult
from .streaming import iter_nem12_records

log = logging.getLogger(__name__)

NEM_FORMAT = "NEM12"
FIELD_DELIMITER = ","
MINUTES_PER_DAY = 24 * 60

RECORD_HEADER = "100"
RECORD_NMI_DATA = "200"
RECORD_INTERVAL_DATA = "300"
RECORD_END_NMI = "500"
RECORD_END_FILE = "900"

# Column positions
COL_RECORD_TYPE = 0
COL_NMI = 1
COL_INTERVAL_LENGTH = 8
COL_INTERVAL_DATE = 1
COL_CONSUMPTION_START = 2


class NEMParser(Protocol):
    """Anything the processing pipeline can use to turn file text into readings."""

    def new_context(self) -> ParserContext: ...

    def parse_line(self, line: str, context: ParserContext) -> list[MeterReading]: ...

    def parse_records(self, records: Iterable[tuple[int, str]]) -> ParseResult: ...

    def parse_content(self, content: str) -> ParseResult: ...


class NEM12Parser:
    """NEM12 implementation of the NEMParser protocol."""

    def new_context(self) -> ParserContext:
        return ParserContext()

    def parse_line(self, line: str, context: ParserContext) -> list[MeterReading]:
        return parse_nem12_line(line, context)

    def parse_records(self, records: Iterable[tuple[int, str]]) -> ParseResult:
        """
        Parse numbered, trimmed lines with a fresh context.

        Args:
            records: (line_number, line) pairs, blank lines already removed

        Returns:
            ParseResult with every reading from good lines and one error per bad line
        """
        context = self.new_context()
        readings: list[MeterReading] = []
        errors: list[str] = []

        for line_number, line in records:
            try:
                readings.extend(self.parse_line(line, context))
            except NEM12ParseError as e:
                log.debug(f"Line {line_number} rejected: {e}")
                errors.append(f"Line {line_number}: {e}")

        return ParseResult(readings=readings, errors=errors)

    def parse_content(self, content: str) -> ParseResult:
        return self.parse_records(iter_nem12_records(content.split("\n")))


def parse_nem12_line(line: str, context: ParserContext) -> list[MeterReading]:
    """
    Parse one NEM12 record, updating context and returning any readings.

    Raises:
        NEM12ParseError: the record is invalid in the current context
    """
    fields = [f.strip() for f in line.split(FIELD_DELIMITER)]
    record_type = fields[COL_RECORD_TYPE]

    if record_type == RECORD_HEADER:
        _validate_header(fields)
        return []

    if record_type == RECORD_NMI_DATA:
        context.current_meter_id = fields[COL_NMI] if len(fields) > COL_NMI else ""
        context.interval_length = _parse_interval_length(fields)
        return []

    if record_type == RECORD_INTERVAL_DATA:
        return _parse_interval_data(fields, context)

    if record_type == RECORD_END_NMI:
        context.current_meter_id = ""
        return []

    if record_type == RECORD_END_FILE:
        return []

    raise UnknownRecordTypeError(record_type)


def _validate_header(fields: list[str]) -> None:
    """
    Validate header record (100).

    Format: RecordIndicator,VersionHeader,DateTime,FromParticipant,ToParticipant
    """
    if len(fields) <= COL_NMI or fields[COL_NMI] != NEM_FORMAT:
        raise InvalidFormatError(f"Invalid {NEM_FORMAT} format - expected {NEM_FORMAT} in header")


def _parse_interval_length(fields: list[str]) -> int:
    """IntervalLength of a 200 record, or the default when absent or unusable."""
    if len(fields) <= COL_INTERVAL_LENGTH:
        return DEFAULT_INTERVAL_LENGTH
    try:
        interval = int(fields[COL_INTERVAL_LENGTH])
    except ValueError:
        return DEFAULT_INTERVAL_LENGTH
    return interval if interval > 0 else DEFAULT_INTERVAL_LENGTH


def _parse_interval_data(fields: list[str], context: ParserContext) -> list[MeterReading]:
    """
    Parse interval data record (300) into readings for the active meter.

    Format: RecordIndicator,IntervalDate,IntervalValue1...IntervalValueN,...

    Only the first 1440 / IntervalLength values are read. Anything after
    them (quality flags, reason codes) is ignored, and a short line simply
    yields fewer readings.
    """
    if not context.current_meter_id:
        raise MissingMeterContextError("Interval data found without NMI context")

    date_token = fields[COL_INTERVAL_DATE] if len(fields) > COL_INTERVAL_DATE else ""
    try:
        day_anchor = parse_compact_date(date_token)
    except InvalidDateFormatError as e:
        raise InvalidDateFormatError(f"Invalid interval date '{date_token}': {e}") from e

    num_intervals = MINUTES_PER_DAY // context.interval_length
    values = fields[COL_CONSUMPTION_START : COL_CONSUMPTION_START + num_intervals]
    interval_delta = timedelta(minutes=context.interval_length)

    readings = []
    for i, val in enumerate(values):
        reading = _create_reading(val, i, day_anchor, interval_delta, context.current_meter_id)
        if reading is not None:
            readings.append(reading)

    return readings


def _create_reading(
    val: str,
    index: int,
    day_anchor: datetime,
    interval_delta: timedelta,
    meter_id: str,
) -> MeterReading | None:
    consumption = _parse_consumption(val)
    if consumption is None:
        return None

    return MeterReading(
        meter_id=meter_id,
        timestamp=day_anchor + index * interval_delta,
        consumption=consumption,
    )


def _parse_consumption(val: str) -> Decimal | None:
    """Exact decimal value of an interval field, or None for blank/non-numeric."""
    if not val:
        return None
    try:
        consumption = Decimal(val)
    except InvalidOperation:
        return None
    # Decimal() also accepts "NaN" and "Infinity"
    if not consumption.is_finite():
        return None
    return consumption

"""
nem12sql
~~~~~~~~
Convert AEMO NEM12 interval metering files to SQL INSERT statements.

Readings that share a meter and timestamp are kept and disambiguated with
register suffixes (NMI_R1, NMI_R2, ...) rather than dropped.
"""

import logging
from logging import NullHandler

from .dates import format_date_only, format_timestamp, parse_compact_date
from .exceptions import (
    FileValidationError,
    InvalidDateError,
    InvalidDateFormatError,
    InvalidFormatError,
    MissingMeterContextError,
    NEM12ParseError,
    NEMProcessingError,
    UnknownRecordTypeError,
)
from .nem12_parser import NEM12Parser, NEMParser, parse_nem12_line
from .nem_objects import (
    DateRange,
    MeterReading,
    ParserContext,
    ParseResult,
    ProcessingResult,
    ProcessingSummary,
    RegisterProcessingResult,
)
from .registers import add_register_suffixes, sort_by_nmi, split_register_suffix
from .sql_generator import SQLGenerator
from .streaming import stream_nem12_file
from .summary import generate_summary
from .version import __version__

__all__ = [
    "DateRange",
    "FileValidationError",
    "InvalidDateError",
    "InvalidDateFormatError",
    "InvalidFormatError",
    "MeterReading",
    "MissingMeterContextError",
    "NEM12ParseError",
    "NEM12Parser",
    "NEMParser",
    "NEMProcessingError",
    "ParseResult",
    "ParserContext",
    "ProcessingResult",
    "ProcessingSummary",
    "RegisterProcessingResult",
    "SQLGenerator",
    "UnknownRecordTypeError",
    "__version__",
    "add_register_suffixes",
    "format_date_only",
    "format_timestamp",
    "generate_summary",
    "parse_compact_date",
    "parse_nem12_line",
    "sort_by_nmi",
    "split_register_suffix",
    "stream_nem12_file",
]

# Set default logging handler to avoid "No handler found" warnings.
logging.getLogger(__name__).addHandler(NullHandler())

"""Data objects produced while converting NEM12 files."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, NamedTuple

DEFAULT_INTERVAL_LENGTH = 30


class MeterReading(NamedTuple):
    """One interval consumption value for a meter."""

    meter_id: str
    timestamp: datetime
    consumption: Decimal
    register: str = ""


@dataclass
class ParserContext:
    """State carried from one NEM12 line to the next within a file."""

    current_meter_id: str = ""
    interval_length: int = DEFAULT_INTERVAL_LENGTH

    def reset(self) -> None:
        self.current_meter_id = ""
        self.interval_length = DEFAULT_INTERVAL_LENGTH


class ParseResult(NamedTuple):
    readings: list[MeterReading]
    errors: list[str]


class RegisterProcessingResult(NamedTuple):
    processed_readings: list[MeterReading]
    duplicates_found: int
    register_stats: dict[str, int]


@dataclass
class DateRange:
    start: str = ""
    end: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"start": self.start, "end": self.end}


@dataclass
class ProcessingSummary:
    total_records: int
    unique_records: int
    duplicates_found: int
    register_stats: dict[str, int]
    nmis: list[str]
    date_range: DateRange
    processing_time: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalRecords": self.total_records,
            "uniqueRecords": self.unique_records,
            "duplicatesFound": self.duplicates_found,
            "registerStats": dict(self.register_stats),
            "nmis": list(self.nmis),
            "dateRange": self.date_range.to_dict(),
            "processingTime": self.processing_time,
        }


@dataclass
class ProcessingResult:
    """
    Result of converting one file.

    `readings` holds the final sorted readings for callers that want to
    post-process them (e.g. as a DataFrame); it is not part of `to_dict()`.
    `sql_parameters` is only populated in parameterized mode.
    """

    sql_statements: list[str]
    summary: ProcessingSummary
    errors: list[str]
    sql_parameters: list[tuple] | None = None
    readings: list[MeterReading] = field(default_factory=list, repr=False)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "sqlStatements": list(self.sql_statements),
            "summary": self.summary.to_dict(),
            "errors": list(self.errors),
        }
        if self.sql_parameters is not None:
            result["sqlParameters"] = [[str(p) for p in params] for params in self.sql_parameters]
        return result

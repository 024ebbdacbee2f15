"""Processing summary for a converted NEM12 file."""

import time

from .dates import format_date_only
from .nem_objects import DateRange, MeterReading, ProcessingSummary
from .registers import base_meter_id


def generate_summary(
    original_readings: list[MeterReading],
    processed_readings: list[MeterReading],
    duplicates_found: int,
    register_stats: dict[str, int],
    start_time: float,
) -> ProcessingSummary:
    """
    Build the summary for one run.

    Args:
        original_readings: Readings as parsed, before register suffixes
        processed_readings: Final suffixed and sorted readings
        duplicates_found: Readings beyond the first in each colliding group
        register_stats: Count per register tag ("original", "R1", ...)
        start_time: time.time() when processing started

    Returns:
        ProcessingSummary; processing_time is in milliseconds
    """
    return ProcessingSummary(
        total_records=len(original_readings),
        unique_records=len(processed_readings),
        duplicates_found=duplicates_found,
        register_stats=register_stats,
        nmis=extract_unique_nmis(processed_readings),
        date_range=calculate_date_range(processed_readings),
        processing_time=int((time.time() - start_time) * 1000),
    )


def extract_unique_nmis(readings: list[MeterReading]) -> list[str]:
    """Base NMIs (register suffix removed) in order of first appearance."""
    return list(dict.fromkeys(base_meter_id(r.meter_id) for r in readings))


def calculate_date_range(readings: list[MeterReading]) -> DateRange:
    if not readings:
        return DateRange()

    timestamps = [r.timestamp for r in readings]
    return DateRange(start=format_date_only(min(timestamps)), end=format_date_only(max(timestamps)))

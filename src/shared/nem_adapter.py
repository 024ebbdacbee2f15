"""
pandas adapter for processed NEM12 readings.

Column layout:
- readings: nmi, register, ts, consumption (one row per SQL statement)
- register stats: register, count
"""

import pandas as pd

from libs.nem12sql import MeterReading, ProcessingSummary
from libs.nem12sql.dates import format_timestamp
from libs.nem12sql.sql_generator import format_consumption

READING_COLUMNS = ["nmi", "register", "ts", "consumption"]


def readings_as_data_frame(readings: list[MeterReading]) -> pd.DataFrame:
    """
    Build a DataFrame with one row per reading, in the given order.

    Timestamps are formatted as "%Y-%m-%d %H:%M:%S" and consumption kept as
    its exact decimal text, so writing the frame to CSV loses no precision.

    Args:
        readings: Final (suffixed, sorted) readings

    Returns:
        DataFrame with READING_COLUMNS
    """
    n = len(readings)
    d: dict[str, list] = {col: [None] * n for col in READING_COLUMNS}

    for i, reading in enumerate(readings):
        d["nmi"][i] = reading.meter_id
        d["register"][i] = reading.register
        d["ts"][i] = format_timestamp(reading.timestamp)
        d["consumption"][i] = format_consumption(reading.consumption)

    return pd.DataFrame(data=d, columns=READING_COLUMNS)


def register_stats_as_data_frame(summary: ProcessingSummary) -> pd.DataFrame:
    """Register counts as a two-column frame, "original" first when present."""
    stats = summary.register_stats
    ordered = sorted(stats, key=lambda register: register != "original")
    return pd.DataFrame(
        {"register": ordered, "count": [stats[register] for register in ordered]},
        columns=["register", "count"],
    )

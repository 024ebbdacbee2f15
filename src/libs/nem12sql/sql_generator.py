"""
SQL INSERT rendering for meter readings.

Inline statements interpolate the meter id verbatim. Quotes inside an id
are NOT escaped, so inline output must only be run against trusted input;
use parameterized=True to get placeholder statements plus bound values.
"""

import uuid
from decimal import Decimal

from .dates import format_timestamp
from .nem_objects import MeterReading

DEFAULT_TABLE_NAME = "meter_readings"
PLACEHOLDER = "%s"


class SQLGenerator:
    """
    Render one INSERT statement per reading.

    Args:
        table_name: Target table
        include_id: Prepend an `id` column holding a fresh UUID per row
        parameterized: Emit %s placeholders instead of literal values
    """

    def __init__(
        self,
        table_name: str = DEFAULT_TABLE_NAME,
        include_id: bool = False,
        parameterized: bool = False,
    ) -> None:
        self.table_name = table_name
        self.include_id = include_id
        self.parameterized = parameterized

    @property
    def columns(self) -> list[str]:
        cols = ["nmi", "timestamp", "consumption"]
        return ["id", *cols] if self.include_id else cols

    def generate_inserts(self, readings: list[MeterReading]) -> list[str]:
        if self.parameterized:
            return [statement for statement, _ in self.generate_parameterized(readings)]
        return [self._render_inline(r) for r in readings]

    def generate_parameterized(self, readings: list[MeterReading]) -> list[tuple[str, tuple]]:
        """Return (statement, params) pairs suitable for DB-API `execute`."""
        statement = self._statement(", ".join([PLACEHOLDER] * len(self.columns)))
        return [(statement, self._params(r)) for r in readings]

    def _render_inline(self, reading: MeterReading) -> str:
        timestamp = format_timestamp(reading.timestamp)
        values = f"'{reading.meter_id}', '{timestamp}', {format_consumption(reading.consumption)}"
        if self.include_id:
            values = f"'{uuid.uuid4()}', {values}"
        return self._statement(values)

    def _params(self, reading: MeterReading) -> tuple:
        params = (reading.meter_id, format_timestamp(reading.timestamp), reading.consumption)
        if self.include_id:
            return (str(uuid.uuid4()), *params)
        return params

    def _statement(self, values: str) -> str:
        return f"INSERT INTO {self.table_name} ({', '.join(self.columns)}) VALUES ({values});"


def format_consumption(consumption: Decimal) -> str:
    """Full-precision positional text, e.g. Decimal("1E+3") -> "1000"."""
    return format(consumption, "f")

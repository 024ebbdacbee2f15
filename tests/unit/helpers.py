"""Builders for NEM12 test content."""

from datetime import datetime
from decimal import Decimal

from libs.nem12sql import MeterReading

HEADER_ROW = "100,NEM12,200506081149,UNITEDDP,NEMMCO"
END_ROW = "900"


def nmi_row(nmi: str, interval: int | str = 30) -> str:
    """Build a 200 record with the given NMI and interval length."""
    return f"200,{nmi},E1E2,1,E1,N1,01009,kWh,{interval},20050610"


def interval_row(date: str, values: list[str]) -> str:
    """Build a 300 record followed by the usual quality/timestamp trailer."""
    return ",".join(["300", date, *values, "A", "", "", "20050310121004", "20050310182204"])


def nem12_content(*rows: str) -> str:
    return "\n".join([HEADER_ROW, *rows, END_ROW])


def reading(meter_id: str, ts: str, consumption: str = "1.0", register: str = "") -> MeterReading:
    """Build a reading from an ISO timestamp string."""
    return MeterReading(meter_id, datetime.fromisoformat(ts), Decimal(consumption), register)

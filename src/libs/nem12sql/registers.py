"""
Register suffix handling for readings that collide on (meter, timestamp).

A file can legitimately contain several readings for the same meter and
interval (e.g. repeated 300 rows for one day). To keep every reading while
still producing a unique key per row, each member of a colliding group is
renamed to "<meter>_R<k>" in file order. Readings that do not collide are
left untouched.
"""

import logging
import re
from datetime import datetime

from .nem_objects import MeterReading, RegisterProcessingResult

log = logging.getLogger(__name__)

REGISTER_SEPARATOR = "_"
REGISTER_PREFIX = "R"
ORIGINAL_REGISTER = "original"

_REGISTER_SUFFIX_RE = re.compile(rf"^(?P<base>.+){REGISTER_SEPARATOR}(?P<register>{REGISTER_PREFIX}\d+)$")


def add_register_suffixes(readings: list[MeterReading]) -> RegisterProcessingResult:
    """
    Give every member of a colliding (meter_id, timestamp) group an R<k> suffix.

    Groups keep the order in which they were first seen, and members keep
    file order within their group, so the first duplicate becomes R1.

    Args:
        readings: Readings in parse order

    Returns:
        RegisterProcessingResult with the renamed readings, the number of
        readings beyond the first in each group, and per-register counts
        ("original" for readings that did not collide)
    """
    groups: dict[tuple[str, datetime], list[MeterReading]] = {}
    for reading in readings:
        groups.setdefault((reading.meter_id, reading.timestamp), []).append(reading)

    processed: list[MeterReading] = []
    register_stats: dict[str, int] = {}
    duplicates_found = 0

    for group in groups.values():
        if len(group) == 1:
            processed.append(group[0])
            register_stats[ORIGINAL_REGISTER] = register_stats.get(ORIGINAL_REGISTER, 0) + 1
            continue

        duplicates_found += len(group) - 1
        for k, reading in enumerate(group, 1):
            register = f"{REGISTER_PREFIX}{k}"
            register_stats[register] = register_stats.get(register, 0) + 1
            processed.append(
                reading._replace(
                    meter_id=f"{reading.meter_id}{REGISTER_SEPARATOR}{register}",
                    register=register,
                )
            )

    if duplicates_found:
        log.info(f"Found {duplicates_found} duplicate readings across {len(groups)} meter/timestamp groups")

    return RegisterProcessingResult(
        processed_readings=processed,
        duplicates_found=duplicates_found,
        register_stats=register_stats,
    )


def split_register_suffix(meter_id: str) -> tuple[str, str]:
    """
    Split "NMI_R2" into ("NMI", "R2"); ids without a register suffix get "".
    """
    match = _REGISTER_SUFFIX_RE.match(meter_id)
    if match is None:
        return meter_id, ""
    return match.group("base"), match.group("register")


def base_meter_id(meter_id: str) -> str:
    return split_register_suffix(meter_id)[0]


def sort_by_nmi(readings: list[MeterReading]) -> list[MeterReading]:
    """
    Order readings by base NMI, then register, then timestamp.

    Unsuffixed readings come before suffixed ones for the same NMI.
    Registers compare as plain strings, so "R10" sorts before "R2".
    Meter ids also compare by code point rather than locale collation, so
    "ABD" sorts before "abc"; NMIs are uppercase alphanumeric in practice.
    The sort is stable and returns a new list.
    """
    return sorted(readings, key=_sort_key)


def _sort_key(reading: MeterReading) -> tuple[str, bool, str, datetime]:
    base, register = split_register_suffix(reading.meter_id)
    return base, register != "", register, reading.timestamp

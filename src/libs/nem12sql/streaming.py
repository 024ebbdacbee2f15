"""
Streaming line readers for NEM12 files.

Large files can be fed to the parser without loading them whole: text is
read in fixed-size chunks and split into lines with only the incomplete
tail of the previous chunk held in memory.
"""

import logging
from collections.abc import Generator, Iterable
from pathlib import Path

log = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


def stream_nem12_file(
    file_path: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Generator[tuple[int, str]]:
    """
    Stream a NEM12 CSV file yielding (line_number, line) for each record.

    Memory efficient: holds at most one chunk plus one partial line.

    Args:
        file_path: Path to NEM12 CSV file
        chunk_size: Number of characters read per chunk

    Yields:
        Tuples of (line_number, trimmed_line); blank lines are skipped and not counted

    Example:
        parser = NEM12Parser()
        result = parser.parse_records(stream_nem12_file("data.csv"))
    """
    # utf-8-sig drops a leading BOM that would otherwise corrupt the first record type
    with Path(file_path).open(encoding="utf-8-sig", newline="") as f:
        chunks = iter(lambda: f.read(chunk_size), "")
        yield from iter_nem12_records(iter_chunked_lines(chunks))


def iter_chunked_lines(chunks: Iterable[str]) -> Generator[str]:
    """
    Re-assemble lines from arbitrary text chunks.

    The trailing partial line of each chunk is buffered until the next
    chunk completes it. A final line without a terminating newline is
    still yielded.
    """
    buffer = ""
    for chunk in chunks:
        buffer += chunk
        lines = buffer.split("\n")
        buffer = lines.pop()
        yield from lines

    if buffer:
        yield buffer


def iter_nem12_records(lines: Iterable[str]) -> Generator[tuple[int, str]]:
    """Trim lines, drop blank ones, and number the rest from 1."""
    line_number = 0
    for line in lines:
        line = line.strip()
        if not line:
            continue
        line_number += 1
        yield line_number, line

    log.debug(f"Read {line_number} non-blank lines")

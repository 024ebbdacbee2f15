#!/usr/bin/env python3
"""
Local NEM12 to SQL converter.

Converts a NEM12 CSV file on disk to a SQL script of INSERT statements.
Use --stream for files too large to comfortably hold in memory.

Usage:
    uv run scripts/process_nem12_locally.py <nem12_file> [-o out.sql] [--stream]

Example:
    uv run scripts/process_nem12_locally.py /path/to/NEM12_sample.csv --csv readings.csv
    uv run scripts/process_nem12_locally.py /path/to/NEM12_sample.csv --parameterized --json summary.json
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from libs.nem12sql import FileValidationError, NEMProcessingError, ProcessingResult, SQLGenerator, stream_nem12_file
from shared import (
    LocalFileSource,
    NEM12FileValidator,
    NEMProcessor,
    get_sql_options,
    readings_as_data_frame,
    register_stats_as_data_frame,
)

MAX_ERRORS_SHOWN = 10


def format_duration(milliseconds: float) -> str:
    """Format duration in human-readable format."""
    seconds = milliseconds / 1000
    if seconds < 1:
        return f"{int(milliseconds)}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}m {secs}s"


def build_processor(
    include_id: bool = False,
    parameterized: bool = False,
    max_size_mb: int | None = None,
) -> NEMProcessor:
    """Processor using environment SQL options, overridden by CLI flags."""
    options = get_sql_options()
    options["include_id"] = options["include_id"] or include_id
    options["parameterized"] = options["parameterized"] or parameterized

    validator = NEM12FileValidator(max_size_mb * 1024 * 1024) if max_size_mb else NEM12FileValidator()
    return NEMProcessor(file_validator=validator, sql_generator=SQLGenerator(**options))


def process_nem12_file(file_path: str, processor: NEMProcessor, stream: bool = False) -> ProcessingResult:
    """Validate and convert a local NEM12 file."""
    source = LocalFileSource(file_path)

    if stream:
        processor.validate_file(source)
        return processor.process_records(stream_nem12_file(file_path), source.name)

    return asyncio.run(processor.process_file(source))


def write_outputs(
    result: ProcessingResult,
    sql_path: Path,
    csv_path: Path | None = None,
    json_path: Path | None = None,
) -> None:
    sql_path.write_text("\n".join(result.sql_statements), encoding="utf-8")
    print(f"  SQL written to {sql_path}")

    if csv_path:
        readings_as_data_frame(result.readings).to_csv(csv_path, index=False)
        print(f"  Readings CSV written to {csv_path}")

    if json_path:
        doc = result.to_dict()
        del doc["sqlStatements"]
        json_path.write_text(json.dumps(doc, indent=2), encoding="utf-8")
        print(f"  Summary JSON written to {json_path}")


def print_summary(result: ProcessingResult, verbose: bool = True) -> None:
    summary = result.summary

    print("\n" + "=" * 60)
    print("Processing Summary")
    print("=" * 60)
    print(f"Total Records:        {summary.total_records:,}")
    print(f"Unique Records:       {summary.unique_records:,}")
    print(f"Duplicates Found:     {summary.duplicates_found:,}")
    print(f"NMIs:                 {len(summary.nmis)}")
    if summary.date_range.start:
        print(f"Date Range:           {summary.date_range.start} to {summary.date_range.end}")
    print(f"Processing Time:      {format_duration(summary.processing_time)}")

    if verbose:
        print("\nRegister Stats:")
        stats_df = register_stats_as_data_frame(summary)
        for register, count in zip(stats_df["register"], stats_df["count"], strict=True):
            print(f"  {register:<10} {int(count):,}")

    if result.errors:
        print(f"\nLine Errors ({len(result.errors)} total):")
        for error in result.errors[:MAX_ERRORS_SHOWN]:
            print(f"  - {error}")
        if len(result.errors) > MAX_ERRORS_SHOWN:
            print(f"  ... and {len(result.errors) - MAX_ERRORS_SHOWN} more")

    print("=" * 60)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Convert a NEM12 file to SQL INSERT statements")
    parser.add_argument("file", help="Path to NEM12 CSV file")
    parser.add_argument("-o", "--output", help="SQL output path (default: <file>.sql)")
    parser.add_argument("--csv", help="Also write final readings as CSV")
    parser.add_argument("--json", help="Also write summary and errors as JSON")
    parser.add_argument("--include-id", action="store_true", help="Add a UUID id column to every INSERT")
    parser.add_argument("--parameterized", action="store_true", help="Emit %%s placeholder statements")
    parser.add_argument("--max-size-mb", type=int, help="Reject files larger than this")
    parser.add_argument("--stream", action="store_true", help="Read the file in chunks instead of all at once")
    parser.add_argument("-q", "--quiet", action="store_true", help="Minimal output (no register breakdown)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    file_path = Path(args.file)
    if not file_path.exists():
        print(f"Error: File not found: {file_path}")
        return 1

    print("=" * 60)
    print("Local NEM12 to SQL")
    print(f"File: {file_path}")
    print(f"Streaming: {args.stream}")
    print("=" * 60)

    processor = build_processor(args.include_id, args.parameterized, args.max_size_mb)

    try:
        result = process_nem12_file(str(file_path), processor, stream=args.stream)
    except (FileValidationError, NEMProcessingError) as e:
        print(f"Error: {e}")
        return 1

    sql_path = Path(args.output) if args.output else file_path.with_suffix(".sql")
    write_outputs(
        result,
        sql_path,
        csv_path=Path(args.csv) if args.csv else None,
        json_path=Path(args.json) if args.json else None,
    )
    print_summary(result, verbose=not args.quiet)
    return 0


if __name__ == "__main__":
    sys.exit(main())

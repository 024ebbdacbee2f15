"""
NEM12 to SQL processing pipeline.

parse -> register suffixes -> sort -> SQL statements + summary

The parser and file validator are injected, so another file format only
needs a new NEMParser implementation; nothing here changes.
"""

import time
from collections.abc import Iterable

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from libs.nem12sql import (
    NEM12Parser,
    NEMParser,
    NEMProcessingError,
    ProcessingResult,
    SQLGenerator,
    add_register_suffixes,
    generate_summary,
    sort_by_nmi,
)
from libs.nem12sql.nem_objects import ParseResult
from shared.config import get_sql_options
from shared.sources import FileSource
from shared.validators import CSVFileValidator, FileValidator

logger = Logger(service="nem12-processor", child=True)

# Failures while reading file content or metadata
READ_ERRORS = (OSError, UnicodeDecodeError, BotoCoreError, ClientError)


class NEMProcessor:
    """
    Convert NEM files to SQL INSERT statements.

    Args:
        parser: Format parser (default: NEM12Parser)
        file_validator: Checks run before reading the file (default: CSVFileValidator)
        sql_generator: Statement renderer (default: built from environment options)
    """

    def __init__(
        self,
        parser: NEMParser | None = None,
        file_validator: FileValidator | None = None,
        sql_generator: SQLGenerator | None = None,
    ) -> None:
        self.parser = parser or NEM12Parser()
        self.file_validator = file_validator or CSVFileValidator()
        self.sql_generator = sql_generator or SQLGenerator(**get_sql_options())

    def validate_file(self, file: FileSource | None) -> None:
        """
        Run the file validator.

        Raises:
            FileValidationError: the file was rejected
            NEMProcessingError: the file's size could not be read (e.g. S3 head_object failed)
        """
        try:
            self.file_validator.validate(file)
        except READ_ERRORS as e:
            raise _read_failure(file.name, e) from e

    async def process_file(self, file: FileSource | None) -> ProcessingResult:
        """
        Validate, read and convert one file.

        Raises:
            FileValidationError: the file was rejected before reading
            NEMProcessingError: the file could not be read
        """
        start_time = time.time()
        self.validate_file(file)

        try:
            content = await file.read_text()
        except READ_ERRORS as e:
            raise _read_failure(file.name, e) from e

        return self._build_result(self.parser.parse_content(content), start_time, file.name)

    def process_content(self, content: str) -> ProcessingResult:
        start_time = time.time()
        return self._build_result(self.parser.parse_content(content), start_time)

    def process_records(self, records: Iterable[tuple[int, str]], file_name: str = "") -> ProcessingResult:
        """
        Convert numbered lines, e.g. from libs.nem12sql.stream_nem12_file.

        Lazy record sources are read while parsing, so read failures
        surface here and are raised as NEMProcessingError.
        """
        start_time = time.time()
        try:
            parsed = self.parser.parse_records(records)
        except READ_ERRORS as e:
            raise _read_failure(file_name, e) from e
        return self._build_result(parsed, start_time, file_name)

    def _build_result(self, parsed: ParseResult, start_time: float, file_name: str = "") -> ProcessingResult:
        registers = add_register_suffixes(parsed.readings)
        sorted_readings = sort_by_nmi(registers.processed_readings)

        sql_parameters = None
        if self.sql_generator.parameterized:
            pairs = self.sql_generator.generate_parameterized(sorted_readings)
            sql_statements = [statement for statement, _ in pairs]
            sql_parameters = [params for _, params in pairs]
        else:
            sql_statements = self.sql_generator.generate_inserts(sorted_readings)

        summary = generate_summary(
            parsed.readings,
            sorted_readings,
            registers.duplicates_found,
            registers.register_stats,
            start_time,
        )

        if parsed.errors:
            logger.warning(
                "Lines rejected during parsing",
                extra={"file_name": file_name, "error_count": len(parsed.errors), "first_error": parsed.errors[0]},
            )
        logger.info(
            "File processed",
            extra={
                "file_name": file_name,
                "total_records": summary.total_records,
                "duplicates_found": summary.duplicates_found,
                "nmis": len(summary.nmis),
                "processing_time_ms": summary.processing_time,
            },
        )

        return ProcessingResult(
            sql_statements=sql_statements,
            summary=summary,
            errors=parsed.errors,
            sql_parameters=sql_parameters,
            readings=sorted_readings,
        )


def process_nem12_text(content: str, sql_generator: SQLGenerator | None = None) -> ProcessingResult:
    """Convert NEM12 text with a fresh NEM12 processor."""
    return NEMProcessor(sql_generator=sql_generator).process_content(content)


def _read_failure(file_name: str, error: Exception) -> NEMProcessingError:
    logger.error("Failed to read file", exc_info=error, extra={"file_name": file_name, "error": str(error)})
    return NEMProcessingError(f"Failed to process NEM file: {error}")

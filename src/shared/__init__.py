"""
Shared pipeline components for the NEM12 to SQL converter.

This package wires the nem12sql library to file sources, validators and
environment configuration.
"""

from shared.common import CSV_EXTENSION, SQL_EXTENSION, SUMMARY_SUFFIX
from shared.config import MAX_FILE_SIZE_MB, OUTPUT_BUCKET, OUTPUT_PREFIX, get_sql_options
from shared.nem_adapter import readings_as_data_frame, register_stats_as_data_frame
from shared.nem_processor import NEMProcessor, process_nem12_text
from shared.sources import FileSource, InMemoryFileSource, LocalFileSource, S3FileSource
from shared.validators import CSVFileValidator, FileValidator, NEM12FileValidator

__all__ = [
    "CSV_EXTENSION",
    "MAX_FILE_SIZE_MB",
    "OUTPUT_BUCKET",
    "OUTPUT_PREFIX",
    "SQL_EXTENSION",
    "SUMMARY_SUFFIX",
    "CSVFileValidator",
    "FileSource",
    "FileValidator",
    "InMemoryFileSource",
    "LocalFileSource",
    "NEM12FileValidator",
    "NEMProcessor",
    "S3FileSource",
    "get_sql_options",
    "process_nem12_text",
    "readings_as_data_frame",
    "register_stats_as_data_frame",
]

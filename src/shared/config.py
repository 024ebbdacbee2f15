"""Configuration for the NEM12 to SQL pipeline, read from environment variables."""

import os
from typing import Any

from aws_lambda_powertools import Logger

logger = Logger(service="nem12-sql", child=True)

# S3 output configuration
OUTPUT_BUCKET = os.environ.get("OUTPUT_BUCKET", "nem12-sql-output")
OUTPUT_PREFIX = os.environ.get("OUTPUT_PREFIX", "sql/")

# Upload limits
MAX_FILE_SIZE_MB = int(os.environ.get("MAX_FILE_SIZE_MB", "10"))

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in _TRUTHY


def get_sql_options() -> dict[str, Any]:
    """
    SQL rendering options from environment variables.

    Read at call time so a long-lived process picks up changes.

    Returns:
        Dict with table_name, include_id and parameterized, matching
        SQLGenerator's keyword arguments
    """
    options = {
        "table_name": os.environ.get("SQL_TABLE_NAME", "meter_readings"),
        "include_id": _env_flag("SQL_INCLUDE_ID"),
        "parameterized": _env_flag("SQL_PARAMETERIZED"),
    }
    logger.debug("Loaded SQL options", extra=options)
    return options

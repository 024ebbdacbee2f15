"""File validators run before any NEM12 parsing starts."""

from typing import Protocol

from aws_lambda_powertools import Logger

from libs.nem12sql.exceptions import FileValidationError
from shared.common import BYTES_PER_MB, CSV_EXTENSION
from shared.config import MAX_FILE_SIZE_MB
from shared.sources import FileSource

logger = Logger(service="nem12-sql", child=True)


class FileValidator(Protocol):
    def validate(self, file: FileSource | None) -> None: ...


class CSVFileValidator:
    """Reject missing files and anything not named *.csv."""

    def validate(self, file: FileSource | None) -> None:
        if file is None:
            raise FileValidationError("No file provided")

        if not file.name.lower().endswith(CSV_EXTENSION):
            logger.warning("Rejected non-CSV file", extra={"file_name": file.name})
            raise FileValidationError("File must be a CSV file")


class NEM12FileValidator(CSVFileValidator):
    """CSV checks plus an upper bound on file size."""

    def __init__(self, max_file_size: int = MAX_FILE_SIZE_MB * BYTES_PER_MB) -> None:
        self.max_file_size = max_file_size

    def validate(self, file: FileSource | None) -> None:
        super().validate(file)

        if file.size > self.max_file_size:
            logger.warning(
                "Rejected oversized file",
                extra={"file_name": file.name, "size": file.size, "max_size": self.max_file_size},
            )
            raise FileValidationError(f"File size must be less than {self.max_file_size / BYTES_PER_MB:g}MB")

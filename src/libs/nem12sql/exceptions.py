"""Exceptions raised while converting NEM12 files to SQL."""


class NEM12ParseError(ValueError):
    """A single NEM12 line could not be parsed. Never fatal to the file."""


class InvalidFormatError(NEM12ParseError):
    pass


class MissingMeterContextError(NEM12ParseError):
    pass


class InvalidDateFormatError(NEM12ParseError):
    pass


class InvalidDateError(NEM12ParseError):
    pass


class UnknownRecordTypeError(NEM12ParseError):
    def __init__(self, record_type: str) -> None:
        self.record_type = record_type
        super().__init__(f"Unknown NEM12 record type: {record_type}")


class NEMProcessingError(Exception):
    """The whole file could not be processed."""


class FileValidationError(NEMProcessingError):
    """The supplied file was rejected before parsing started."""

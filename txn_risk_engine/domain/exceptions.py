"""Domain-specific exceptions"""

from typing import List


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class CSVValidationError(DomainException):
    """CSV header is missing one or more required columns"""

    def __init__(self, missing_columns: List[str]):
        self.missing_columns = list(missing_columns)
        super().__init__(f"CSV missing required columns: {', '.join(self.missing_columns)}")


class UnsupportedFileError(DomainException):
    """Uploaded file is not a CSV file"""

    pass


class InvalidEncodingError(DomainException):
    """Uploaded file could not be decoded as UTF-8 text"""

    pass


class PayloadTooLargeError(DomainException):
    """Uploaded file exceeds the configured size limit"""

    def __init__(self, size_bytes: int, limit_bytes: int):
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(f"File size {size_bytes} bytes exceeds the {limit_bytes} byte limit")

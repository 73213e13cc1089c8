class SmartMedError(Exception):
    """Base exception for inventory upload and storage errors."""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class MalformedFileError(SmartMedError):
    """Raised when an upload is not a CSV file or cannot be read."""


class CsvParseError(SmartMedError):
    """Raised when the text of an upload has no usable header row."""


class PersistenceError(SmartMedError):
    """Raised when the hosted database rejects or fails a request."""

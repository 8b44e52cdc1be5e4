"""Custom exceptions for the HEC uploader."""

class SplunkUploaderException(Exception):
    """Base exception for the HEC uploader."""
    pass

class ConfigurationError(SplunkUploaderException):
    """Settings or input paths are missing, unreadable or invalid."""
    pass

class HECTransportError(SplunkUploaderException):
    """Connection or I/O failure while sending a chunk to HEC."""
    pass

class HECResponseError(SplunkUploaderException):
    """HEC answered a chunk with an error status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code

class PayloadTooLargeError(SplunkUploaderException):
    """A payload exceeded the HEC request ceiling. Not recoverable."""
    pass

class RecordTooLargeError(SplunkUploaderException):
    """A single record does not fit in one read block."""
    pass

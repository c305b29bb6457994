"""Error types for the Carbovid service."""


class CarbovidError(Exception):
    """Base class for all service errors."""


class ValidationError(CarbovidError, ValueError):
    """Raised when a user supplied value is rejected.

    The message is user-facing and is returned verbatim in the ``error`` field
    of correlation responses.
    """


class RegionNotFoundError(ValidationError):
    """Raised when a region id is not part of the region directory."""

    def __init__(self, message: str = "Invalid region id") -> None:
        super().__init__(message)


class DateParseError(ValidationError):
    """Raised when a date string is not in ``YYYY-MM-DD`` format."""


class InvalidRangeError(ValidationError):
    """Raised when the end of a date range lies before its start."""

    def __init__(self, message: str = "to date is before from date") -> None:
        super().__init__(message)


class RangeTooLongError(ValidationError):
    """Raised when a date range spans more days than allowed."""


class UpstreamError(CarbovidError):
    """Raised when an upstream API call fails or returns unusable data."""

    def __init__(self, provider: str, reason: str) -> None:
        super().__init__(f"{provider}: {reason}")
        self.provider = provider
        self.reason = reason

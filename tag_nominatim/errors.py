"""
Errors Module
-----------
Exception types raised by the Nominatim client.
Each failure class gets its own type so callers can decide whether to retry,
report to a user or give up.
"""
from typing import Optional


class NominatimError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(NominatimError):
    """Invalid client configuration (base URL, identification, timeout)."""


class InvalidCoordinatesError(NominatimError, ValueError):
    """Latitude or longitude outside the geographic range."""


class TransportError(NominatimError):
    """The request never produced an HTTP response."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class RequestTimeoutError(TransportError):
    """The server did not answer within the configured timeout."""


class ApiError(NominatimError):
    """The server answered with an error status or an error document."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"Nominatim API error ({status_code}): {message}")
        self.status_code = status_code
        self.message = message


class ParseError(NominatimError):
    """The response body is not the JSON document we expected."""

    def __init__(self, detail: str, body: Optional[str] = None):
        super().__init__(f"Could not parse Nominatim response: {detail}")
        self.detail = detail
        self.body = body

"""
Exceptions raised by the Mantle API client.

Configuration and argument problems are raised before any network I/O and
also subclass ``ValueError``. Transport and decoding failures wrap the
underlying exception, which stays available as ``__cause__``.
"""

from typing import Optional


class MantleError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(MantleError, ValueError):
    """The client was constructed with unusable credentials or settings."""


class ValidationError(MantleError, ValueError):
    """An endpoint argument failed its precondition."""


class UnsupportedMethodError(MantleError, ValueError):
    """An HTTP method outside GET, POST, PUT and DELETE was requested."""

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Unsupported HTTP method: {method}")


class TransportError(MantleError):
    """The request could not be sent or no response was received."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(message)


class ParseError(MantleError):
    """The response body was not valid JSON."""

    def __init__(self, path: str, message: str, body: Optional[str] = None):
        self.path = path
        self.body = body
        super().__init__(message)

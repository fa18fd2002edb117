"""
Mantle API client.

Typed access to the Mantle customer identity and subscription billing API.
"""

import logging

from .api import MantleClient, UsageEvent
from .config import DEFAULT_API_URL, ClientConfig
from .exceptions import (
    ConfigError,
    MantleError,
    ParseError,
    TransportError,
    UnsupportedMethodError,
    ValidationError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "MantleClient",
    "UsageEvent",
    "ClientConfig",
    "DEFAULT_API_URL",
    "MantleError",
    "ConfigError",
    "ValidationError",
    "UnsupportedMethodError",
    "TransportError",
    "ParseError",
]

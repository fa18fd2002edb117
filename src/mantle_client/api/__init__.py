"""
API Client Module

Provides the HTTP client for the Mantle app API.
"""

from .client import MantleClient
from .models import UsageEvent

__all__ = ["MantleClient", "UsageEvent"]

"""
Configuration for the Mantle API client.

Library defaults live in the module-level ``config`` instance. Credentials
are held per client in a frozen ``ClientConfig`` so a client's identity
cannot change once it has been constructed.
"""

import sys
from dataclasses import dataclass, field
from typing import Optional

from .exceptions import ConfigError


DEFAULT_API_URL = "https://appapi.heymantle.com/v1"


@dataclass
class APIConfig:
    """HTTP settings applied to every request."""
    base_url: str = DEFAULT_API_URL
    timeout_seconds: float = 30.0
    user_agent: str = "mantle-client-python"


@dataclass
class LogConfig:
    """Logging configuration used by the command-line entry point."""
    log_level: str = "INFO"
    log_format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format: str = "%H:%M:%S"


@dataclass
class Config:
    """Master configuration combining all sub-configurations."""
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)


def running_in_browser() -> bool:
    """True when the interpreter is hosted by a browser (Pyodide, PyScript)."""
    return sys.platform == "emscripten"


@dataclass(frozen=True)
class ClientConfig:
    """
    Credentials and endpoint for a single client.

    Exactly the values sent on every request: the app id, at least one of
    the server-side API key or the per-customer API token, and the base URL.

    Raises:
        ConfigError: If the app id is missing, both credentials are missing,
            or an API key is supplied in a browser context.
    """
    app_id: str
    api_key: Optional[str] = None
    customer_api_token: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    is_browser_context: bool = False

    def __post_init__(self):
        if not self.app_id:
            raise ConfigError("MantleClient app_id is required")
        if self.api_key and (self.is_browser_context or running_in_browser()):
            raise ConfigError("MantleClient api_key should never be used in the browser")
        if not self.api_key and not self.customer_api_token:
            raise ConfigError("MantleClient one of api_key or customer_api_token is required")

    def __repr__(self) -> str:
        # Secrets stay out of logs and tracebacks
        return (
            f"ClientConfig(app_id={self.app_id!r}, "
            f"api_key={'***' if self.api_key else None}, "
            f"customer_api_token={'***' if self.customer_api_token else None}, "
            f"api_url={self.api_url!r})"
        )


# Global configuration instance
config = Config()

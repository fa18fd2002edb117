"""
Tests for client construction and credential checks.
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mantle_client import ClientConfig, ConfigError, DEFAULT_API_URL, MantleClient
from mantle_client import config as config_module
from mantle_client.config import Config


class TestClientConstruction:
    """Tests for MantleClient construction."""

    def test_initializes_with_api_key(self):
        """Test that required parameters are stored."""
        client = MantleClient(app_id="test_app_id", api_key="test_api_key")

        assert client.app_id == "test_app_id"
        assert client.api_key == "test_api_key"
        assert client.customer_api_token is None
        assert client.api_url == DEFAULT_API_URL

    def test_initializes_with_customer_token(self):
        """Test that a customer token alone is enough."""
        client = MantleClient(app_id="test_app_id", customer_api_token="tok")

        assert client.customer_api_token == "tok"
        assert client.api_key is None

    def test_default_api_url(self):
        """Test the default base URL."""
        assert DEFAULT_API_URL == "https://appapi.heymantle.com/v1"

    @pytest.mark.parametrize("app_id", [None, ""])
    def test_missing_app_id(self, app_id):
        """Test that a missing app id is rejected and named."""
        with pytest.raises(ConfigError, match="app_id"):
            MantleClient(app_id=app_id, api_key="test_api_key")

    def test_missing_both_credentials(self):
        """Test that one credential is required."""
        with pytest.raises(ConfigError, match="one of api_key or customer_api_token is required"):
            MantleClient(app_id="test_app_id")

    def test_config_error_is_value_error(self):
        """Test that ConfigError can be caught as ValueError."""
        with pytest.raises(ValueError):
            MantleClient(app_id="test_app_id")

    def test_api_key_rejected_in_browser_context(self):
        """Test that an API key cannot be used in a browser."""
        with pytest.raises(ConfigError, match="browser"):
            MantleClient(app_id="test_app_id", api_key="test_api_key", is_browser_context=True)

    def test_customer_token_allowed_in_browser_context(self):
        """Test that the customer token is fine in a browser."""
        client = MantleClient(app_id="test_app_id", customer_api_token="tok", is_browser_context=True)

        assert client.customer_api_token == "tok"

    def test_browser_runtime_detected(self, monkeypatch):
        """Test that a browser-hosted interpreter rejects the API key."""
        monkeypatch.setattr(config_module.sys, "platform", "emscripten")

        with pytest.raises(ConfigError, match="browser"):
            MantleClient(app_id="test_app_id", api_key="test_api_key")

    def test_timeout_defaults_to_config(self):
        """Test that the transport timeout comes from the global config."""
        client = MantleClient(app_id="test_app_id", api_key="test_api_key")

        assert client.timeout == config_module.config.api.timeout_seconds

    def test_api_url_defaults_to_config(self, monkeypatch):
        """Test that the base URL falls back to the global config."""
        monkeypatch.setattr(config_module.config.api, "base_url", "https://other.example/v2")

        client = MantleClient(app_id="test_app_id", api_key="test_api_key")

        assert client.api_url == "https://other.example/v2"

    def test_explicit_api_url_wins(self, monkeypatch):
        """Test that an explicit base URL overrides the config."""
        monkeypatch.setattr(config_module.config.api, "base_url", "https://other.example/v2")

        client = MantleClient(app_id="test_app_id", api_key="test_api_key", api_url="http://localhost/v1")

        assert client.api_url == "http://localhost/v1"

    def test_from_config(self):
        """Test building a client from a ClientConfig."""
        holder = ClientConfig(app_id="a", customer_api_token="t", api_url="http://localhost:8080/v1")
        client = MantleClient.from_config(holder, timeout=5)

        assert client.app_id == "a"
        assert client.api_url == "http://localhost:8080/v1"
        assert client.timeout == 5


class TestClientConfig:
    """Tests for the ClientConfig holder."""

    def test_is_immutable(self):
        """Test that credentials cannot be changed after construction."""
        holder = ClientConfig(app_id="a", api_key="k")

        with pytest.raises(AttributeError):
            holder.api_key = "other"

    def test_repr_hides_secrets(self):
        """Test that secrets are masked in the repr."""
        holder = ClientConfig(app_id="a", api_key="secret-key", customer_api_token="secret-token")

        text = repr(holder)
        assert "secret-key" not in text
        assert "secret-token" not in text
        assert "'a'" in text

    def test_global_config_defaults(self):
        """Test library defaults."""
        defaults = Config()

        assert defaults.api.base_url == DEFAULT_API_URL
        assert defaults.api.timeout_seconds > 0
        assert defaults.log.log_level == "INFO"

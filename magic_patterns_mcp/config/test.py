"""Tests for configuration management."""

import pytest
from pydantic import SecretStr

from .lib import (
    ConfigurationError,
    EnvConfig,
    EnvVar,
    _convert_value,
    describe_environment,
    get_api_key,
    get_environment,
    get_environment_info,
    get_request_timeout,
    list_environment_variables,
    require_environment,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("MAGIC_PATTERNS_TIMEOUT", raising=False)
        assert get_environment(EnvVar.MAGIC_PATTERNS_TIMEOUT) == 300.0

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("MAGIC_PATTERNS_TIMEOUT", "12")
        assert get_environment(EnvVar.MAGIC_PATTERNS_TIMEOUT, override=5.0) == 5.0

    @pytest.mark.unit
    def test_float_type_conversion(self, monkeypatch):
        """Float type conversion from string."""
        monkeypatch.setenv("MAGIC_PATTERNS_TIMEOUT", "42.5")
        result = get_environment(EnvVar.MAGIC_PATTERNS_TIMEOUT)
        assert result == 42.5
        assert isinstance(result, float)

    @pytest.mark.unit
    def test_invalid_float_returns_default(self, monkeypatch):
        """Invalid float value returns default."""
        monkeypatch.setenv("MAGIC_PATTERNS_TIMEOUT", "soon")
        assert get_environment(EnvVar.MAGIC_PATTERNS_TIMEOUT) == 300.0

    @pytest.mark.unit
    def test_string_type(self, monkeypatch):
        """String type returns as-is."""
        monkeypatch.setenv("MAGIC_PATTERNS_LOG_LEVEL", "DEBUG")
        assert get_environment(EnvVar.MAGIC_PATTERNS_LOG_LEVEL) == "DEBUG"

    @pytest.mark.unit
    def test_none_default_for_api_key(self, monkeypatch):
        """API key defaults to None when not set."""
        monkeypatch.delenv("MAGIC_PATTERNS_API_KEY", raising=False)
        assert get_environment(EnvVar.MAGIC_PATTERNS_API_KEY) is None


class TestConvertValue:
    """Tests for raw string conversion."""

    @pytest.mark.unit
    def test_unset_gives_default(self):
        assert _convert_value(None, float, 300.0) == 300.0

    @pytest.mark.unit
    def test_string_kept_verbatim(self):
        assert _convert_value(" warning ", str, "INFO") == " warning "

    @pytest.mark.unit
    def test_float_parsed(self):
        assert _convert_value("1e2", float, 300.0) == 100.0


class TestRequireEnvironment:
    """Tests for required variables."""

    @pytest.mark.unit
    def test_missing_raises(self, monkeypatch):
        """Missing variable raises ConfigurationError naming it."""
        monkeypatch.delenv("MAGIC_PATTERNS_API_KEY", raising=False)
        with pytest.raises(ConfigurationError, match="MAGIC_PATTERNS_API_KEY"):
            require_environment(EnvVar.MAGIC_PATTERNS_API_KEY)

    @pytest.mark.unit
    def test_blank_counts_as_missing(self, monkeypatch):
        """Whitespace-only value is treated as unset."""
        monkeypatch.setenv("MAGIC_PATTERNS_API_KEY", "   ")
        with pytest.raises(ConfigurationError) as exc_info:
            require_environment(EnvVar.MAGIC_PATTERNS_API_KEY)
        assert exc_info.value.env_var is EnvVar.MAGIC_PATTERNS_API_KEY


class TestGetApiKey:
    """Tests for credential loading."""

    @pytest.mark.unit
    def test_returns_secret(self, monkeypatch):
        """Key is wrapped and masked."""
        monkeypatch.setenv("MAGIC_PATTERNS_API_KEY", "mp-secret-123")
        key = get_api_key()
        assert isinstance(key, SecretStr)
        assert key.get_secret_value() == "mp-secret-123"
        assert "mp-secret-123" not in repr(key)
        assert "mp-secret-123" not in str(key)

    @pytest.mark.unit
    def test_strips_whitespace(self, monkeypatch):
        """Surrounding whitespace from .env files is dropped."""
        monkeypatch.setenv("MAGIC_PATTERNS_API_KEY", " mp-key\n")
        assert get_api_key().get_secret_value() == "mp-key"

    @pytest.mark.unit
    def test_missing_is_fatal(self, monkeypatch):
        """Missing key raises ConfigurationError."""
        monkeypatch.delenv("MAGIC_PATTERNS_API_KEY", raising=False)
        with pytest.raises(ConfigurationError):
            get_api_key()

    @pytest.mark.unit
    def test_override(self, monkeypatch):
        """Override wins over environment."""
        monkeypatch.setenv("MAGIC_PATTERNS_API_KEY", "from-env")
        assert get_api_key("explicit").get_secret_value() == "explicit"


class TestGetRequestTimeout:
    """Tests for timeout resolution."""

    @pytest.mark.unit
    def test_non_positive_falls_back(self, monkeypatch):
        """Zero or negative timeout uses default."""
        monkeypatch.setenv("MAGIC_PATTERNS_TIMEOUT", "0")
        assert get_request_timeout() == 300.0

    @pytest.mark.unit
    def test_override(self):
        """Override is used when positive."""
        assert get_request_timeout(10.0) == 10.0


class TestIntrospection:
    """Tests for metadata and listing."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.MAGIC_PATTERNS_TIMEOUT)
        assert isinstance(info, EnvConfig)
        assert info.name == "MAGIC_PATTERNS_TIMEOUT"
        assert info.var_type is float
        assert info.category == "api"

    @pytest.mark.unit
    def test_list_all(self):
        """Returns all EnvVar members when no category."""
        assert list_environment_variables() == list(EnvVar)

    @pytest.mark.unit
    def test_filter_by_category(self):
        """Filters by category correctly."""
        api_vars = list_environment_variables("api")
        assert EnvVar.MAGIC_PATTERNS_API_KEY in api_vars
        assert EnvVar.MAGIC_PATTERNS_LOG_LEVEL not in api_vars

    @pytest.mark.unit
    def test_describe_masks_secret(self, monkeypatch):
        """Secret values are never shown."""
        monkeypatch.setenv("MAGIC_PATTERNS_API_KEY", "mp-secret-123")
        rows = {row["name"]: row for row in describe_environment()}
        key_row = rows["MAGIC_PATTERNS_API_KEY"]
        assert key_row["set"] is True
        assert key_row["value"] == "********"
        assert "mp-secret-123" not in repr(rows)

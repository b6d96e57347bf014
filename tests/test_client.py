"""Tests for client configuration and exceptions."""

import pytest
from couch_tools.client.config import CouchConfig
from couch_tools.client.exceptions import (
    ConfigurationError,
    CouchError,
    DecodeError,
    ServerError,
    TransportError,
)


class TestCouchConfig:
    """Tests for CouchConfig."""

    def test_default_values(self, monkeypatch):
        """Test default configuration values."""
        for var in ("COUCH_URI", "COUCH_URL", "COUCH_DB_PREFIX", "COUCH_GZIP", "COUCH_TIMEOUT",
                    "COUCH_VERIFY_SSL"):
            monkeypatch.delenv(var, raising=False)
        config = CouchConfig(_env_file=None)
        assert config.uri == "http://localhost:5984"
        assert config.db_prefix == ""
        assert config.gzip is True
        assert config.timeout == 4
        assert config.verify_ssl is True

    def test_uri_validation(self):
        """Test URI must start with http."""
        with pytest.raises(ValueError, match="URI must start with http"):
            CouchConfig(uri="invalid-uri")

    def test_uri_requires_host(self):
        """Test URI without a host is rejected."""
        with pytest.raises(ValueError, match="no host"):
            CouchConfig(uri="http:///_all_dbs")

    def test_timeout_bounds(self):
        """Test timeout must be a positive whole number of seconds."""
        with pytest.raises(ValueError):
            CouchConfig(timeout=0)
        with pytest.raises(ValueError):
            CouchConfig(timeout=1000)

    def test_assignment_is_validated(self):
        """Test assigned values go through the same bounds as construction."""
        config = CouchConfig(timeout=4)
        with pytest.raises(ValueError):
            config.timeout = 0
        assert config.timeout == 4

    def test_from_environment(self, monkeypatch):
        """Test settings are read from COUCH_ variables."""
        monkeypatch.setenv("COUCH_URI", "https://couch.example.com")
        monkeypatch.setenv("COUCH_DB_PREFIX", "staging_")
        monkeypatch.setenv("COUCH_GZIP", "false")
        monkeypatch.setenv("COUCH_TIMEOUT", "10")
        config = CouchConfig(_env_file=None)
        assert config.uri == "https://couch.example.com"
        assert config.db_prefix == "staging_"
        assert config.gzip is False
        assert config.timeout == 10

    def test_copy_is_independent(self):
        """Test a copied config does not share mutations."""
        config = CouchConfig(db_prefix="a_")
        clone = config.model_copy()
        clone.db_prefix = "b_"
        assert config.db_prefix == "a_"


class TestExceptions:
    """Tests for exception hierarchy."""

    def test_couch_error_base(self):
        """Test base CouchError."""
        error = CouchError("Test error")
        assert str(error) == "Test error"
        assert error.message == "Test error"

    def test_hierarchy(self):
        """Test all errors derive from CouchError."""
        for cls in (ConfigurationError, TransportError, DecodeError, ServerError):
            assert issubclass(cls, CouchError)

    def test_server_error_default_message(self):
        """Test ServerError falls back to a generic message."""
        assert str(ServerError()) == "unspecified error"
        assert str(ServerError(None)) == "unspecified error"
        assert str(ServerError("file_exists")) == "file_exists"

    def test_decode_error_with_status(self):
        """Test DecodeError mentions the status code when known."""
        error = DecodeError("not JSON", status_code=502)
        assert error.status_code == 502
        assert str(error) == "HTTP 502: not JSON"
        assert str(DecodeError("not JSON")) == "not JSON"

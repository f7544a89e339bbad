"""
Tests for two-tier configuration loading.
"""
from unittest.mock import MagicMock, patch

import pytest
import requests

from directive_validator import ConfigError
from directive_validator.config_loader import ConfigLoader

DIRECTIVES = """
records:
  widget:
    description: "Widget"
    fields:
      Code: "len:3"
"""


@pytest.fixture
def cache_dir(tmp_path, monkeypatch):
    """Point the remote document cache at a temporary directory."""
    path = tmp_path / "cache"
    monkeypatch.setattr(ConfigLoader, "CACHE_DIR", path)
    return path


def write_local_config(tmp_path, directives_uri, extra=""):
    config = tmp_path / "local-config.yaml"
    config.write_text(f"metadata_key: check\ndirectives_uri: {directives_uri}\n{extra}")
    return str(config)


class TestBundledConfig:
    """Test the configuration shipped with the package."""

    def test_loads(self):
        """Test bundled config loads with the default metadata key."""
        loader = ConfigLoader()
        assert loader.get_metadata_key() == "validate"
        assert "person" in loader.get_directive_config()["records"]

    def test_config_age(self):
        """Test config age is tracked."""
        age = ConfigLoader().get_directive_config_age()
        assert age is not None and age >= 0


class TestLocalFiles:
    """Test relative and file:// directive documents."""

    def test_relative_path(self, tmp_path):
        """Test relative URIs resolve against the local config directory."""
        (tmp_path / "widgets.yaml").write_text(DIRECTIVES)
        loader = ConfigLoader(write_local_config(tmp_path, "widgets.yaml"))
        assert loader.get_metadata_key() == "check"
        assert loader.get_directive_config()["records"]["widget"]["fields"] == {
            "Code": "len:3"
        }

    def test_file_uri(self, tmp_path):
        """Test absolute file:// URIs."""
        directives = tmp_path / "widgets.yaml"
        directives.write_text(DIRECTIVES)
        loader = ConfigLoader(write_local_config(tmp_path, f"file://{directives}"))
        assert "widget" in loader.get_directive_config()["records"]

    def test_no_directives_uri(self, tmp_path):
        """Test a config without a directive document has no record types."""
        config = tmp_path / "local-config.yaml"
        config.write_text("metadata_key: validate\n")
        loader = ConfigLoader(str(config))
        assert loader.get_directive_config() == {"records": {}}

    def test_missing_file(self, tmp_path):
        """Test a missing directive document."""
        with pytest.raises(ConfigError):
            ConfigLoader(write_local_config(tmp_path, "missing.yaml"))

    def test_missing_local_config(self, tmp_path):
        """Test a missing local config."""
        with pytest.raises(ConfigError):
            ConfigLoader(str(tmp_path / "nope.yaml"))

    def test_unsupported_scheme(self, tmp_path):
        """Test unsupported URI schemes."""
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader(write_local_config(tmp_path, "ftp://example.com/d.yaml"))
        assert "ftp" in str(exc_info.value)


class TestShapeChecks:
    """Test jsonschema shape checks."""

    def test_missing_records(self, tmp_path):
        """Test a directive document without 'records'."""
        (tmp_path / "bad.yaml").write_text("other: 1\n")
        with pytest.raises(ConfigError):
            ConfigLoader(write_local_config(tmp_path, "bad.yaml"))

    def test_non_string_directive(self, tmp_path):
        """Test directives must be strings."""
        (tmp_path / "bad.yaml").write_text(
            "records:\n  widget:\n    fields:\n      Code: 3\n"
        )
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader(write_local_config(tmp_path, "bad.yaml"))
        assert "Code" in str(exc_info.value)

    def test_bad_local_setting(self, tmp_path):
        """Test local settings are shape-checked."""
        (tmp_path / "widgets.yaml").write_text(DIRECTIVES)
        with pytest.raises(ConfigError):
            ConfigLoader(write_local_config(
                tmp_path, "widgets.yaml", "fetch_timeout_seconds: -1\n"
            ))


class TestRemoteFetch:
    """Test http(s) directive documents."""

    URI = "https://config.example.com/directives.yaml"

    def test_fetch_and_cache(self, tmp_path, cache_dir):
        """Test remote documents are fetched once and then served from cache."""
        response = MagicMock()
        response.text = DIRECTIVES
        config_path = write_local_config(tmp_path, self.URI)

        with patch("directive_validator.config_loader.requests.get",
                   return_value=response) as mock_get:
            loader = ConfigLoader(config_path)
            assert "widget" in loader.get_directive_config()["records"]
            mock_get.assert_called_once_with(self.URI, timeout=10)

            ConfigLoader(config_path)
            assert mock_get.call_count == 1

        assert len(list(cache_dir.glob("directives_*.yaml"))) == 1

    def test_clear_cache(self, tmp_path, cache_dir):
        """Test cached documents are removed."""
        response = MagicMock()
        response.text = DIRECTIVES
        with patch("directive_validator.config_loader.requests.get",
                   return_value=response):
            loader = ConfigLoader(write_local_config(tmp_path, self.URI))
        loader.clear_cache()
        assert list(cache_dir.glob("directives_*.yaml")) == []

    def test_fetch_failure(self, tmp_path, cache_dir):
        """Test network errors surface as ConfigError."""
        with patch("directive_validator.config_loader.requests.get",
                   side_effect=requests.exceptions.ConnectionError("down")):
            with pytest.raises(ConfigError) as exc_info:
                ConfigLoader(write_local_config(tmp_path, self.URI))
        assert "down" in str(exc_info.value)
        assert not cache_dir.exists()

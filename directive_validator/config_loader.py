"""Two-tier configuration loading with URI fetching and caching."""

import hashlib
import logging
import os
import time
import urllib.parse
from importlib.resources import files
from pathlib import Path
from typing import Any, Dict, Optional

import requests
import yaml
from jsonschema import ValidationError, validate

from .errors import ConfigError
from .record_fields import DEFAULT_METADATA_KEY

logger = logging.getLogger(__name__)

LOCAL_CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "metadata_key": {"type": "string", "minLength": 1},
        "directives_uri": {"type": "string", "minLength": 1},
        "fetch_timeout_seconds": {"type": "number", "exclusiveMinimum": 0},
    },
}

DIRECTIVES_SCHEMA = {
    "type": "object",
    "required": ["records"],
    "properties": {
        "records": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["fields"],
                "properties": {
                    "description": {"type": "string"},
                    "fields": {
                        "type": "object",
                        "additionalProperties": {"type": "string"},
                    },
                },
            },
        },
    },
}


class ConfigLoader:
    """Handles two-tier configuration: local settings + directive sets."""

    CACHE_DIR = Path.home() / ".cache" / "directive-validator"
    DEFAULT_TIMEOUT = 10

    def __init__(self, config_path: Optional[str] = None):
        """
        Load the local config and the directive document it points to.

        Args:
            config_path: Path to a local config YAML file. Defaults to the
                ``local-config.yaml`` bundled with the package.

        Raises:
            ConfigError: If either document cannot be loaded or fails its
                shape check
        """
        if config_path is None:
            config_file = files("directive_validator").joinpath("local-config.yaml")
            self.local_config_path = str(config_file)
        else:
            self.local_config_path = os.path.abspath(config_path)

        self.cache_dir = self.CACHE_DIR

        self.local_config = self._load_yaml(self.local_config_path) or {}
        self._check_shape(self.local_config, LOCAL_CONFIG_SCHEMA, self.local_config_path)

        self.load_directives()

    def load_directives(self) -> None:
        """(Re)load the directive document named by ``directives_uri``."""
        uri = self.get_directives_uri()
        if uri:
            document = self._load_config_from_uri(uri)
        else:
            # No directive document configured - no named record types
            document = {"records": {}}
        self._check_shape(document, DIRECTIVES_SCHEMA, uri or "<empty>")

        self.directive_config = document
        self.directive_config_loaded_at = time.time()
        logger.info(
            f"Loaded {len(document['records'])} record type(s) from {uri or '<empty>'}"
        )

    def _check_shape(self, document: Any, schema: Dict[str, Any], source: str) -> None:
        try:
            validate(instance=document, schema=schema)
        except ValidationError as e:
            error_path = " -> ".join(str(p) for p in e.path) if e.path else "root"
            raise ConfigError(
                f"Invalid configuration in {source} at {error_path}: {e.message}"
            ) from e

    def _load_yaml(self, path: str) -> Any:
        """Load YAML file from disk."""
        try:
            with open(path) as f:
                return yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

    def _load_config_from_uri(self, uri: str) -> Any:
        """
        Load config from URI (with caching).

        Supports:
        - Relative paths - resolved against the local config directory
        - file:// - Local filesystem (absolute paths)
        - https:// - Remote HTTP/HTTPS
        - http:// - Remote HTTP

        Args:
            uri: Config URI or relative path

        Returns:
            Parsed YAML document
        """
        parsed = urllib.parse.urlparse(uri)

        if not parsed.scheme:
            config_dir = os.path.dirname(os.path.abspath(self.local_config_path))
            return self._load_yaml(os.path.join(config_dir, uri))

        if parsed.scheme == "file":
            return self._load_yaml(urllib.parse.unquote(parsed.path))

        if parsed.scheme in ("http", "https"):
            cache_key = hashlib.sha256(uri.encode()).hexdigest()
            cache_path = self.cache_dir / f"directives_{cache_key}.yaml"

            if cache_path.exists():
                logger.debug(f"Using cached directives for {uri}: {cache_path}")
                return self._load_yaml(str(cache_path))

            content = self._fetch_uri(uri)
            try:
                document = yaml.safe_load(content)
            except yaml.YAMLError as e:
                raise ConfigError(f"Failed to parse config from {uri}: {e}") from e
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            cache_path.write_text(content)
            return document

        raise ConfigError(f"Unsupported URI scheme: {parsed.scheme} in {uri}")

    def _fetch_uri(self, uri: str) -> str:
        """Fetch content from HTTP/HTTPS URI."""
        timeout = self.local_config.get("fetch_timeout_seconds", self.DEFAULT_TIMEOUT)
        try:
            response = requests.get(uri, timeout=timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ConfigError(f"Failed to fetch config from {uri}: {e}") from e
        return response.text

    def clear_cache(self) -> None:
        """Remove cached remote directive documents."""
        if not self.cache_dir.exists():
            return
        for cached in self.cache_dir.glob("directives_*.yaml"):
            cached.unlink()

    def get_local_config(self) -> Dict[str, Any]:
        """Get local configuration (tier 1)."""
        return self.local_config

    def get_directive_config(self) -> Dict[str, Any]:
        """Get directive configuration (tier 2)."""
        return self.directive_config

    def get_directives_uri(self) -> Optional[str]:
        return self.local_config.get("directives_uri")

    def get_metadata_key(self) -> str:
        """Dataclass metadata key that holds a field's directive."""
        return self.local_config.get("metadata_key", DEFAULT_METADATA_KEY)

    def get_directive_config_age(self) -> Optional[float]:
        """
        Get age of the directive config in seconds since it was loaded.

        Returns:
            Age in seconds, or None if not loaded
        """
        if hasattr(self, "directive_config_loaded_at"):
            return time.time() - self.directive_config_loaded_at
        return None

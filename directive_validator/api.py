"""
Public API for directive-validator

This is the "front door" - the main entry point for all validation operations.
"""

import logging
from typing import Any, Dict, List, Optional

from .config_loader import ConfigLoader
from .directive_parser import parse_directive
from .errors import FieldError
from .validation_engine import ValidationEngine, collect_errors, validate

logger = logging.getLogger(__name__)


class ValidationService:
    """
    Main validation service class.

    Validates records either against directives they carry themselves
    (dataclass field metadata, or an explicit mapping) or against the
    named directive sets from configuration.

    Example:
        from directive_validator import ValidationService

        service = ValidationService()
        results = service.validate_record("person", {"Name": "Al", "Age": 150})

        for result in results:
            if result['status'] == 'FAIL':
                print(f"{result['field']}: {result['message']}")
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize validation service.

        Args:
            config_path: Optional local config YAML path; defaults to the
                bundled ``local-config.yaml``

        Raises:
            ConfigError: If configuration cannot be loaded
        """
        self.config_path = config_path
        self._initialize()

    def _initialize(self):
        """Internal initialization logic (used by __init__ and reload_config)."""
        self.config_loader = ConfigLoader(self.config_path)
        self.engine = ValidationEngine(self.config_loader)

    def validate(self, record: Any, directives: Optional[Dict[str, str]] = None) -> None:
        """
        Validate a record against the directives it carries.

        Args:
            record: Dataclass instance, mapping (with ``directives``), or
                list of FieldSpec
            directives: Optional explicit ``{field: directive}`` mapping

        Raises:
            NotStructError: ``record`` is not a structured value
            ValidationErrors: One or more fields failed
        """
        validate(record, directives, self.engine.metadata_key)

    def collect_errors(
        self, record: Any, directives: Optional[Dict[str, str]] = None
    ) -> List[FieldError]:
        """Same as ``validate`` but returns the FieldError list instead of raising."""
        return collect_errors(record, directives, self.engine.metadata_key)

    def validate_record(self, record_type: str, record: Any) -> List[Dict[str, Any]]:
        """
        Validate a record against a configured directive set.

        Args:
            record_type: Configured record type (e.g., "person")
            record: Mapping or dataclass instance

        Returns:
            List of result dicts, each containing:
                - field: Field name
                - status: "PASS" or "FAIL"
                - kind: ErrorKind name (empty for PASS)
                - message: Failure message (empty for PASS)

        Raises:
            ValueError: If record_type is not configured
            NotStructError: If record is not a structured value
        """
        return self.engine.check(record_type, record)

    def batch_validate(
        self, records: List[Any], record_type: str, id_fields: List[str]
    ) -> List[Dict[str, Any]]:
        """
        Validate multiple records of one configured type.

        Args:
            records: List of record mappings
            record_type: Configured record type for all records
            id_fields: Field names used to build each record's identifier

        Returns:
            List of per-record results, each containing:
                - record_id: Extracted record identifier
                - record_type: The record type
                - results: Same format as validate_record()

        Example:
            results = service.batch_validate(
                [{"id": "P-1", "Name": "Alice", "Age": 30},
                 {"id": "P-2", "Name": "Al", "Age": 150}],
                "person",
                ["id"],
            )
        """
        results = []
        for record in records:
            results.append(
                {
                    "record_id": self._extract_id(record, id_fields),
                    "record_type": record_type,
                    "results": self.engine.check(record_type, record),
                }
            )
        return results

    def parse_directive(self, raw: str) -> Dict[str, Any]:
        """
        Parse a directive string and describe it.

        Returns:
            Dict with ``operation`` and ``arguments``

        Raises:
            InvalidSyntaxError, UnsupportedOperationError: Malformed directive
        """
        directive = parse_directive(raw)
        return {
            "operation": directive.operation.value,
            "arguments": list(directive.arguments),
        }

    def discover_record_types(self) -> Dict[str, Dict[str, Any]]:
        """
        Discover configured record types and their field directives.

        Example:
            for name, info in service.discover_record_types().items():
                print(f"{name}: {info['description']}")
        """
        return self.engine.discover_record_types()

    def reload_config(self) -> None:
        """
        Reload configuration from source.

        Clears cached remote directive documents, then re-reads the local
        config and the directive document it points to.
        """
        self.config_loader.clear_cache()
        self._initialize()
        logger.info(
            f"Configuration reloaded ({len(self.engine.record_sets)} record type(s))"
        )

    def get_config_age(self) -> Optional[float]:
        """Seconds since the directive document was loaded."""
        return self.config_loader.get_directive_config_age()

    def _extract_id(self, record, id_fields):
        """
        Extract record identifier from record data.

        Returns:
            String identifier (concatenated if multiple fields), or "unknown"
        """
        id_parts = []
        for field in id_fields:
            if isinstance(record, dict):
                if field in record:
                    id_parts.append(str(record[field]))
            elif hasattr(record, field):
                id_parts.append(str(getattr(record, field)))

        if not id_parts:
            return "unknown"

        return "-".join(id_parts)

import logging
from typing import Any, Dict, Iterable, List, Optional

from .directive_parser import parse_directive
from .dispatch import validate_value
from .errors import (
    DirectiveValidatorError,
    FieldError,
    UnexportedFieldError,
    ValidationErrors,
)
from .record_fields import DEFAULT_METADATA_KEY, FieldSpec, enumerate_fields

logger = logging.getLogger(__name__)


def check_fields(fields: Iterable[FieldSpec]) -> List[FieldError]:
    """
    Run every field's directive and collect the failures.

    A failing field never stops the others. An unexported field is reported
    and its directive still runs, so both errors may appear for one field.

    Args:
        fields: Ordered FieldSpec entries

    Returns:
        FieldError list in field order (empty when every field passes)
    """
    errors = []
    for spec in fields:
        if not spec.exported:
            errors.append(FieldError(spec.name, UnexportedFieldError()))

        try:
            directive = parse_directive(spec.directive)
            logger.debug(f"Field '{spec.name}': applying '{directive}'")
            validate_value(spec.value, directive)
        except DirectiveValidatorError as e:
            errors.append(FieldError(spec.name, e))

    return errors


def validate_fields(fields: Iterable[FieldSpec]) -> None:
    """Like ``check_fields`` but raises ValidationErrors on any failure."""
    errors = check_fields(fields)
    if errors:
        raise ValidationErrors(errors)


def collect_errors(
    record: Any,
    directives: Optional[Dict[str, str]] = None,
    metadata_key: str = DEFAULT_METADATA_KEY,
) -> List[FieldError]:
    """
    Validate ``record`` and return its field errors without raising.

    Raises:
        NotStructError: ``record`` is not a structured value
    """
    return check_fields(enumerate_fields(record, directives, metadata_key))


def validate(
    record: Any,
    directives: Optional[Dict[str, str]] = None,
    metadata_key: str = DEFAULT_METADATA_KEY,
) -> None:
    """
    Validate every directive-bearing field of ``record``.

    Args:
        record: Dataclass instance, mapping (with ``directives``), or list
            of FieldSpec
        directives: Optional explicit ``{field name: directive}`` mapping
        metadata_key: Dataclass metadata key holding the directive

    Raises:
        NotStructError: ``record`` is not a structured value; no field is
            checked in that case
        ValidationErrors: One or more fields failed

    Example:
        @dataclass
        class Person:
            Name: str = directive_field("min:3")
            Age: int = directive_field("max:120")

        validate(Person(Name="Al", Age=150))
        # ValidationErrors: Name: min validation failed: len(Al) == 2 < 3
        #                   Age: max validation failed: 150 > 120
    """
    validate_fields(enumerate_fields(record, directives, metadata_key))


class ValidationEngine:
    """Validates records against the named directive sets from configuration."""

    def __init__(self, config_loader):
        """
        Initialize validation engine with configuration.

        Args:
            config_loader: ConfigLoader instance
        """
        self.config_loader = config_loader
        self.metadata_key = config_loader.get_metadata_key()
        self.record_sets = config_loader.get_directive_config().get("records", {})

    def get_directives(self, record_type: str) -> Dict[str, str]:
        """
        Return the ``{field: directive}`` mapping configured for ``record_type``.

        Raises:
            ValueError: If ``record_type`` is not configured
        """
        if record_type not in self.record_sets:
            raise ValueError(f"Unknown record type: {record_type}")
        return dict(self.record_sets[record_type].get("fields", {}))

    def validate(self, record_type: str, record: Any) -> None:
        """
        Validate ``record`` against the configured directives of ``record_type``.

        Raises:
            ValueError: Unknown record type
            NotStructError: ``record`` is not a structured value
            ValidationErrors: One or more fields failed
        """
        validate(record, self.get_directives(record_type), self.metadata_key)

    def check(self, record_type: str, record: Any) -> List[Dict[str, Any]]:
        """
        Validate ``record`` and return one result dict per checked field.

        Returns:
            List of dicts with structure:
            [{
                "field": str,
                "status": "PASS" | "FAIL",
                "kind": str,     # ErrorKind name, empty for PASS
                "message": str,  # empty for PASS
            }, ...]
            A field can appear twice when it is both unexported and failing.
        """
        directives = self.get_directives(record_type)
        fields = enumerate_fields(record, directives, self.metadata_key)
        errors = check_fields(fields)

        results = []
        for spec in fields:
            field_errors = [e for e in errors if e.field_name == spec.name]
            if not field_errors:
                results.append(
                    {"field": spec.name, "status": "PASS", "kind": "", "message": ""}
                )
            results.extend(e.to_dict() for e in field_errors)
        return results

    def discover_record_types(self) -> Dict[str, Dict[str, Any]]:
        """
        Describe every configured record type.

        Returns:
            Dict mapping record type to {description, fields} where fields
            maps field name to directive string
        """
        return {
            name: {
                "description": record_set.get("description", ""),
                "fields": dict(record_set.get("fields", {})),
            }
            for name, record_set in self.record_sets.items()
        }

"""
Error taxonomy for directive validation.

Every failure the library reports is an instance of one of the
DirectiveValidatorError subclasses below. Each subclass carries an
ErrorKind whose value is the canonical base message, so callers can match
either on the class (``isinstance``) or on ``err.kind``.

Per-field failures are wrapped in FieldError and collected into a single
ValidationErrors, which keeps every entry individually inspectable.
"""

from enum import Enum
from typing import Iterator, List, Optional


class ErrorKind(Enum):
    """Fixed set of error categories surfaced to callers."""

    NOT_STRUCT = "wrong argument given, should be a struct"
    INVALID_SYNTAX = "invalid validator syntax"
    UNEXPORTED_FIELD = "validation for unexported field is not allowed"
    LENGTH_FAILED = "len validation failed"
    IN_FAILED = "in validation failed"
    MAX_FAILED = "max validation failed"
    MIN_FAILED = "min validation failed"
    UNSUPPORTED_TYPE = "unsupported type to validate"
    UNSUPPORTED_OPERATION = "unsupported validation operation"
    UNSUPPORTED_OPERATION_FOR_TYPE = "this operation is not supported for this type"


class DirectiveValidatorError(Exception):
    """Base class for all taxonomy errors."""

    kind: ErrorKind

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        if detail:
            super().__init__(f"{self.kind.value}: {detail}")
        else:
            super().__init__(self.kind.value)


class NotStructError(DirectiveValidatorError, TypeError):
    kind = ErrorKind.NOT_STRUCT


class InvalidSyntaxError(DirectiveValidatorError, ValueError):
    kind = ErrorKind.INVALID_SYNTAX


class UnexportedFieldError(DirectiveValidatorError):
    kind = ErrorKind.UNEXPORTED_FIELD


class LengthValidationError(DirectiveValidatorError):
    kind = ErrorKind.LENGTH_FAILED


class InValidationError(DirectiveValidatorError):
    kind = ErrorKind.IN_FAILED


class MaxValidationError(DirectiveValidatorError):
    kind = ErrorKind.MAX_FAILED


class MinValidationError(DirectiveValidatorError):
    kind = ErrorKind.MIN_FAILED


class UnsupportedTypeError(DirectiveValidatorError):
    kind = ErrorKind.UNSUPPORTED_TYPE


class UnsupportedOperationError(DirectiveValidatorError):
    kind = ErrorKind.UNSUPPORTED_OPERATION


class UnsupportedOperationForTypeError(DirectiveValidatorError):
    kind = ErrorKind.UNSUPPORTED_OPERATION_FOR_TYPE


class FieldError(Exception):
    """A validation failure attributed to one named field."""

    def __init__(self, field_name: str, cause: DirectiveValidatorError):
        self.field_name = field_name
        self.cause = cause
        super().__init__(f"{field_name}: {cause}")

    @property
    def kind(self) -> ErrorKind:
        return self.cause.kind

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly result entry."""
        return {
            "field": self.field_name,
            "status": "FAIL",
            "kind": self.kind.name,
            "message": str(self.cause),
        }


class ValidationErrors(Exception):
    """
    Composite failure raised when one or more fields fail validation.

    The entries keep their declaration order. ``str()`` joins the
    per-field renderings with newlines.
    """

    def __init__(self, errors: List[FieldError]):
        if not errors:
            raise ValueError("ValidationErrors requires at least one FieldError")
        self.errors = list(errors)
        super().__init__("\n".join(str(e) for e in self.errors))

    def __iter__(self) -> Iterator[FieldError]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def kinds(self) -> List[ErrorKind]:
        """Return the error kind of each entry, in order."""
        return [e.kind for e in self.errors]

    def for_field(self, field_name: str) -> List[FieldError]:
        """Return the entries attributed to ``field_name``."""
        return [e for e in self.errors if e.field_name == field_name]


class ConfigError(RuntimeError):
    """Raised when configuration cannot be loaded or fails its shape check."""

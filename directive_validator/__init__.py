"""
directive-validator: Field validation driven by declarative directives

Each field of a record may carry a directive such as ``"min:3"``,
``"len:2"`` or ``"in:home,work"``. This library provides:
- A parser for the directive grammar
- Integer and text validator strategies (and lists/tuples of them)
- A validation engine that collects every failing field
- Named directive sets loaded from YAML configuration

Example:
    from dataclasses import dataclass
    from directive_validator import directive_field, validate

    @dataclass
    class Person:
        Name: str = directive_field("min:3")
        Age: int = directive_field("max:120")

    validate(Person(Name="Alice", Age=30))
"""

from .api import ValidationService
from .directive_parser import Directive, Operation, parse_directive
from .errors import (
    ConfigError,
    DirectiveValidatorError,
    ErrorKind,
    FieldError,
    InValidationError,
    InvalidSyntaxError,
    LengthValidationError,
    MaxValidationError,
    MinValidationError,
    NotStructError,
    UnexportedFieldError,
    UnsupportedOperationError,
    UnsupportedOperationForTypeError,
    UnsupportedTypeError,
    ValidationErrors,
)
from .record_fields import FieldSpec, directive_field
from .validation_engine import collect_errors, validate, validate_fields

__version__ = "0.1.0"
__all__ = [
    "ValidationService",
    "Directive",
    "Operation",
    "parse_directive",
    "FieldSpec",
    "directive_field",
    "validate",
    "validate_fields",
    "collect_errors",
    "ErrorKind",
    "DirectiveValidatorError",
    "FieldError",
    "ValidationErrors",
    "ConfigError",
    "NotStructError",
    "InvalidSyntaxError",
    "UnexportedFieldError",
    "LengthValidationError",
    "InValidationError",
    "MaxValidationError",
    "MinValidationError",
    "UnsupportedTypeError",
    "UnsupportedOperationError",
    "UnsupportedOperationForTypeError",
]

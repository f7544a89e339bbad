"""
Record field enumeration.

Turns a record into the ordered ``FieldSpec`` tuples the validation engine
consumes. Three record shapes are accepted:

- a dataclass instance, with directives stored in field metadata
  (see ``directive_field``) or supplied as an explicit mapping;
- a mapping of field name to value, with an explicit directives mapping;
- a list or tuple of ``FieldSpec`` built by the caller.

Field names starting with an underscore are treated as not exported.
"""

import dataclasses
from collections.abc import Mapping
from typing import Any, Dict, List, NamedTuple, Optional

from .errors import NotStructError

DEFAULT_METADATA_KEY = "validate"


class FieldSpec(NamedTuple):
    name: str
    exported: bool
    directive: str
    value: Any


def is_exported(name: str) -> bool:
    return not name.startswith("_")


def directive_field(directive: str, metadata_key: str = DEFAULT_METADATA_KEY, **kwargs):
    """
    Declare a dataclass field carrying a validation directive.

    Example:
        @dataclass
        class Person:
            name: str = directive_field("min:3")
            age: int = directive_field("max:120", default=0)
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[metadata_key] = directive
    return dataclasses.field(metadata=metadata, **kwargs)


def enumerate_fields(
    record: Any,
    directives: Optional[Dict[str, str]] = None,
    metadata_key: str = DEFAULT_METADATA_KEY,
) -> List[FieldSpec]:
    """
    List the directive-bearing fields of ``record`` in declaration order.

    Args:
        record: Dataclass instance, mapping, or list of FieldSpec
        directives: Optional explicit ``{field name: directive}`` mapping;
            required for mapping records, overrides metadata for dataclasses
        metadata_key: Dataclass metadata key holding the directive

    Returns:
        FieldSpec list, one entry per field that carries a directive

    Raises:
        NotStructError: ``record`` has no named fields to enumerate
    """
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        specs = []
        for f in dataclasses.fields(record):
            if directives is not None:
                directive = directives.get(f.name)
            else:
                directive = f.metadata.get(metadata_key)
            if directive is None:
                continue
            specs.append(
                FieldSpec(f.name, is_exported(f.name), directive, getattr(record, f.name))
            )
        if directives is not None:
            # Configured directives naming absent fields still run, against None.
            declared = {f.name for f in dataclasses.fields(record)}
            specs.extend(
                FieldSpec(name, is_exported(name), directive, None)
                for name, directive in directives.items()
                if name not in declared
            )
        return specs

    if isinstance(record, Mapping):
        if directives is None:
            raise NotStructError(
                "mapping records need an explicit directives mapping"
            )
        specs = [
            FieldSpec(name, is_exported(name), directives[name], value)
            for name, value in record.items()
            if name in directives
        ]
        # Directives naming absent fields still run, against None.
        specs.extend(
            FieldSpec(name, is_exported(name), directive, None)
            for name, directive in directives.items()
            if name not in record
        )
        return specs

    # An empty list carries no field names, so it is not a record.
    if isinstance(record, (list, tuple)) and record and all(
        isinstance(f, FieldSpec) for f in record
    ):
        return list(record)

    raise NotStructError(f"got {type(record).__name__}")

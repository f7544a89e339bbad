"""
Directive Parser

Turns a raw directive string of the form ``"<op>:<arg>[,<arg>]*"`` into a
Directive. Tokens are kept verbatim; no whitespace is trimmed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .errors import InvalidSyntaxError, UnsupportedOperationError


class Operation(Enum):
    IN = "in"
    LEN = "len"
    MIN = "min"
    MAX = "max"


SUPPORTED_OPERATIONS = tuple(op.value for op in Operation)


@dataclass(frozen=True)
class Directive:
    """Parsed ``(operation, arguments)`` pair from a field's directive string."""

    operation: Operation
    arguments: Tuple[str, ...]

    def __str__(self) -> str:
        return f"{self.operation.value}:{','.join(self.arguments)}"


def parse_directive(raw: str) -> Directive:
    """
    Parse a directive string.

    Args:
        raw: Directive text, e.g. ``"min:5"`` or ``"in:a,b,c"``

    Returns:
        Directive with the operation and its ordered argument tokens

    Raises:
        InvalidSyntaxError: Not a string, wrong colon count, empty argument
            list, or more than one argument for an operation other than ``in``
        UnsupportedOperationError: Operation name is not one of
            ``in``, ``len``, ``min``, ``max``
    """
    if not isinstance(raw, str):
        raise InvalidSyntaxError(
            f"directive must be a string, got {type(raw).__name__}"
        )

    parts = raw.split(":")
    if len(parts) != 2:
        raise InvalidSyntaxError(
            f"expected exactly one colon, found {len(parts) - 1}"
        )

    op_name, arg_blob = parts
    if op_name not in SUPPORTED_OPERATIONS:
        raise UnsupportedOperationError(f"unsupported operation ({op_name})")

    if not arg_blob:
        raise InvalidSyntaxError("zero arguments for operation is provided")

    args = arg_blob.split(",")
    if op_name != Operation.IN.value and len(args) != 1:
        raise InvalidSyntaxError(
            f'too many arguments ({len(args)}) for operation "{op_name}"'
        )

    return Directive(operation=Operation(op_name), arguments=tuple(args))

"""
Dispatch Layer

Selects a validator strategy from a value's runtime type and applies a
parsed directive to it. Sequences are checked element by element and stop
at the first failing element.
"""

import logging
from typing import Any

from .directive_parser import Directive, Operation
from .errors import InvalidSyntaxError, UnsupportedTypeError
from .validating_types import IntValidating, StringValidating, Validating, parse_int

logger = logging.getLogger(__name__)


def execute_validating(strategy: Validating, directive: Directive) -> None:
    """
    Run one directive against a scalar strategy.

    Args:
        strategy: Strategy bound to the value under test
        directive: Parsed directive

    Raises:
        InvalidSyntaxError: An argument token does not parse, or ``len``
            was given a negative bound
        DirectiveValidatorError: The check itself failed
    """
    if directive.operation is Operation.IN:
        values = set()
        for token in directive.arguments:
            values.add(strategy.parse(token))
        strategy.membership(values)
        return

    token = directive.arguments[0]
    try:
        bound = parse_int(token)
    except ValueError as e:
        raise InvalidSyntaxError(f'can\'t parse int argument "{token}" {e}') from e

    if directive.operation is Operation.LEN:
        if bound < 0:
            raise InvalidSyntaxError(f"negative value for len operation ({bound})")
        strategy.length(bound)
    elif directive.operation is Operation.MIN:
        strategy.minimum(bound)
    else:
        strategy.maximum(bound)


def validate_value(value: Any, directive: Directive) -> None:
    """
    Apply ``directive`` to a runtime value.

    Supported kinds are ``int``, ``str``, and ``list``/``tuple`` of those.
    ``bool`` is rejected even though it subclasses ``int``.

    Raises:
        UnsupportedTypeError: The value's type has no strategy
        DirectiveValidatorError: The first failing check
    """
    if isinstance(value, bool):
        raise UnsupportedTypeError(f"({type(value).__name__})")

    if isinstance(value, int):
        execute_validating(IntValidating(value), directive)
    elif isinstance(value, str):
        execute_validating(StringValidating(value), directive)
    elif isinstance(value, (list, tuple)):
        logger.debug(f"Checking {len(value)} elements against '{directive}'")
        for element in value:
            validate_value(element, directive)
    else:
        raise UnsupportedTypeError(f"({type(value).__name__})")

"""
Typed validator strategies.

Each supported scalar type implements the same capability set so the
dispatch layer can treat them uniformly. The only asymmetry, ``length`` on
integers, is a guaranteed failure rather than a special case elsewhere.
"""

import re
from abc import ABC, abstractmethod
from typing import AbstractSet, Any

from .errors import (
    InValidationError,
    InvalidSyntaxError,
    LengthValidationError,
    MaxValidationError,
    MinValidationError,
    UnsupportedOperationForTypeError,
)


_INT_TOKEN = re.compile(r"[+-]?[0-9]+")


def parse_int(token: str) -> int:
    """Parse a base-10 integer token; surrounding whitespace is not allowed."""
    if not _INT_TOKEN.fullmatch(token):
        raise ValueError(f"invalid base-10 integer: {token!r}")
    return int(token)


def render_set(values: AbstractSet[Any]) -> str:
    """Render a membership set in sorted order for stable messages."""
    return "[" + ", ".join(repr(v) for v in sorted(values)) + "]"


class Validating(ABC):
    """
    Capability set shared by all scalar strategies.

    Every check returns None on success and raises a taxonomy error on
    failure. ``parse`` converts a directive token into the strategy's
    value type, used to build membership sets.
    """

    def __init__(self, value):
        self.value = value

    @abstractmethod
    def length(self, bound: int) -> None:
        """Check the value's length equals ``bound``."""

    @abstractmethod
    def minimum(self, bound: int) -> None:
        """Check the value is not below ``bound``."""

    @abstractmethod
    def maximum(self, bound: int) -> None:
        """Check the value is not above ``bound``."""

    @abstractmethod
    def membership(self, values: AbstractSet[Any]) -> None:
        """Check the value is one of ``values``."""

    @abstractmethod
    def parse(self, token: str) -> Any:
        """Convert a directive token into this strategy's value type."""


class IntValidating(Validating):
    """Strategy for integer values; bounds compare the value itself."""

    def length(self, bound: int) -> None:
        raise UnsupportedOperationForTypeError('operation "len" on type int')

    def minimum(self, bound: int) -> None:
        if self.value < bound:
            raise MinValidationError(f"{self.value} < {bound}")

    def maximum(self, bound: int) -> None:
        if self.value > bound:
            raise MaxValidationError(f"{self.value} > {bound}")

    def membership(self, values: AbstractSet[int]) -> None:
        if self.value not in values:
            raise InValidationError(f"{self.value} is not in {render_set(values)}")

    def parse(self, token: str) -> int:
        try:
            return parse_int(token)
        except ValueError as e:
            raise InvalidSyntaxError(f'can\'t parse argument "{token}" {e}') from e


class StringValidating(Validating):
    """Strategy for text values; bounds compare the character count."""

    def length(self, bound: int) -> None:
        if len(self.value) != bound:
            raise LengthValidationError(
                f"len({self.value}) == {len(self.value)} != {bound}"
            )

    def minimum(self, bound: int) -> None:
        if len(self.value) < bound:
            raise MinValidationError(
                f"len({self.value}) == {len(self.value)} < {bound}"
            )

    def maximum(self, bound: int) -> None:
        if len(self.value) > bound:
            raise MaxValidationError(
                f"len({self.value}) == {len(self.value)} > {bound}"
            )

    def membership(self, values: AbstractSet[str]) -> None:
        if self.value not in values:
            raise InValidationError(
                f'"{self.value}" is not in {render_set(values)}'
            )

    def parse(self, token: str) -> str:
        return token

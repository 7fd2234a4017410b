"""Numeric attribute types.

Values are read leniently, by their longest numeric prefix: "12px" is 12
and "3.5e2 units" is 350.0. Integer types read only leading digits (with an
optional sign, or a 0x prefix for hex), so "12.7" is 12.
"""

from __future__ import annotations

import math
import re

from qwxml.exceptions import TypeMismatchError
from qwxml.parser.attribute import Attribute
from qwxml.parser.registry import DEFAULT_REGISTRY

INTEGER_TYPES = frozenset({"int", "integer"})

_FLOAT_PREFIX = re.compile(
    r"[+-]?(?:Infinity|(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)
_HEX_PREFIX = re.compile(r"([+-]?)0[xX]([0-9a-fA-F]+)")
_BARE_HEX_PREFIX = re.compile(r"[+-]?0[xX]")
_INT_PREFIX = re.compile(r"[+-]?[0-9]+")


def parse_float(text: str) -> float:
    """Longest float prefix of a string, NaN if there is none."""
    match = _FLOAT_PREFIX.match(text.lstrip())
    if match is None:
        return math.nan
    return float(match.group(0).replace("Infinity", "inf"))


def parse_int(text: str) -> int | None:
    """Leading integer of a string (decimal or 0x hex), None if there is none."""
    text = text.lstrip()

    hex_match = _HEX_PREFIX.match(text)
    if hex_match:
        sign, digits = hex_match.groups()
        value = int(digits, 16)
        return -value if sign == "-" else value
    if _BARE_HEX_PREFIX.match(text):
        # "0x" without hex digits
        return None

    match = _INT_PREFIX.match(text)
    if match is None:
        return None
    return int(match.group(0))


class Number(Attribute):
    """number/float read as float, int/integer read as int."""

    def _construct(self) -> float | int:
        if self.type in INTEGER_TYPES:
            result = parse_int(self.value)
            if result is None:
                raise TypeMismatchError(self.name, self.value, self.type)
            return result

        value = parse_float(self.value)
        if math.isnan(value):
            raise TypeMismatchError(self.name, self.value, self.type)
        return value


class NumberList(Attribute):
    """list/array - numbers separated by commas and/or whitespace."""

    def _construct(self) -> list[float]:
        items = [item for item in re.split(r"[\s,]+", self.value.strip()) if item]
        result = []
        for item in items:
            value = parse_float(item)
            if math.isnan(value):
                raise TypeMismatchError(self.name, self.value, self.type)
            result.append(value)
        return result


DEFAULT_REGISTRY.types.associate(Number, "number", "int", "integer", "float")
DEFAULT_REGISTRY.types.associate(NumberList, "list", "array")

"""
Parse the two integer operands out of a request's query parameters.
"""

import re
from typing import Mapping

from errors import InvalidInputCount, InvalidNumber


# Base-10 literal: optional sign, ASCII digits only
_INT_RE = re.compile(r"[+-]?[0-9]+")

# Values must fit a signed 64-bit integer (SQLite INTEGER)
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def parse_int(name: str, value: str) -> int:
    """Parse one parameter value, raising InvalidNumber if it is not an integer."""
    if not _INT_RE.fullmatch(value):
        raise InvalidNumber(name, value)
    number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        raise InvalidNumber(name, value)
    return number


def retrieve_numbers(values: Mapping[str, str]) -> tuple[int, int]:
    """
    Return the two operands carried by ``values``.

    Parameter names are not checked; the mapping must hold exactly two
    entries and both must be integers. Operands come back in the mapping's
    iteration order, which for a query string is the order the parameters
    first appear in the URL.
    """
    if len(values) != 2:
        raise InvalidInputCount(len(values))
    numbers = [parse_int(name, value) for name, value in values.items()]
    return numbers[0], numbers[1]

"""
Value Types - Type system for CareerSQL
Handles type inference, comparison and display conversion of dataset values.
"""

import re
from enum import Enum
from typing import Any


class Type(Enum):
    """Column types as reported by the console"""
    INTEGER = 'integer'
    NUMERIC = 'numeric'
    TEXT = 'text'
    NULL = 'null'


def infer_type(value: Any) -> Type:
    """Infer the console type of a raw dataset value"""
    if value is None:
        return Type.NULL
    if isinstance(value, bool):
        return Type.TEXT
    if isinstance(value, int):
        return Type.INTEGER
    if isinstance(value, float):
        return Type.INTEGER if value.is_integer() else Type.NUMERIC
    return Type.TEXT


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def like_to_regex(pattern: str) -> 're.Pattern':
    """Translate a SQL LIKE pattern (% and _ wildcards) to a compiled regex"""
    parts = []
    for char in pattern:
        if char == '%':
            parts.append('.*')
        elif char == '_':
            parts.append('.')
        else:
            parts.append(re.escape(char))
    return re.compile('^' + ''.join(parts) + '$', re.IGNORECASE | re.DOTALL)


class Value:
    """Typed wrapper around a raw dataset value"""

    def __init__(self, value: Any = None):
        self._value = value
        self.type = infer_type(value)

    @property
    def value(self) -> Any:
        return self._value

    def is_null(self) -> bool:
        return self.type == Type.NULL

    def to_display(self) -> str:
        """Render the value the way the console prints it"""
        if self._value is None:
            return 'NULL'
        if isinstance(self._value, float) and self._value.is_integer():
            return str(int(self._value))
        return str(self._value)

    def sort_key(self) -> tuple:
        """
        Key usable for sorting mixed columns.

        NULLs sort after everything else, numbers before strings.
        """
        if self._value is None:
            return (2, 0, '')
        if is_number(self._value):
            return (0, self._value, '')
        return (1, 0, str(self._value))

    def compare(self, other: Any, operator: str) -> bool:
        """
        Compare against a literal using a WHERE operator.

        Numbers compare numerically when both sides are numeric (a numeric
        string column value is coerced), otherwise both sides compare as
        strings. NULL never matches.
        """
        if self._value is None or other is None:
            return False

        if operator == 'LIKE':
            return like_to_regex(str(other)).match(self.to_display()) is not None

        left, right = self._value, other
        if is_number(right) and not is_number(left):
            try:
                left = float(left)
            except (TypeError, ValueError):
                right = str(right)
        elif is_number(left) and not is_number(right):
            left = self.to_display()

        if not (is_number(left) and is_number(right)):
            left, right = str(left), str(right)

        if operator == '=':
            return left == right
        elif operator == '!=':
            return left != right
        elif operator == '<':
            return left < right
        elif operator == '>':
            return left > right
        elif operator == '<=':
            return left <= right
        elif operator == '>=':
            return left >= right
        raise ValueError(f"Unsupported operator: {operator}")

    def __eq__(self, other):
        if isinstance(other, Value):
            return self._value == other._value
        return self._value == other

    def __hash__(self):
        return hash((self.type, self._value))

    def __repr__(self):
        return f"Value({self.type.name}, {self._value!r})"

    def __str__(self):
        return self.to_display()

# Copyright (C) 2012 Anaconda, Inc
# SPDX-License-Identifier: BSD-3-Clause
"""Coercion of configuration strings into python values."""

BOOLISH_TRUE = ("true", "yes", "on", "y", "1")
BOOLISH_FALSE = ("false", "off", "n", "no", "none", "0", "")


class TypeCoercionError(TypeError, ValueError):
    def __init__(self, value, msg):
        self.value = value
        super().__init__(msg)


def boolify(value):
    """Convert a number, string, or sequence type into a pure boolean.

    Examples:
        >>> boolify("yes")
        True
        >>> boolify("0")
        False
        >>> boolify(None)
        False

    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in BOOLISH_TRUE:
            return True
        if lowered in BOOLISH_FALSE:
            return False
    raise TypeCoercionError(value, f"The value {value!r} cannot be boolified.")


def numberify(value):
    """Convert a string into an int or float.

    Examples:
        >>> numberify("3")
        3
        >>> numberify("9.15")
        9.15

    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    try:
        return float(value)
    except (TypeError, ValueError):
        raise TypeCoercionError(
            value, f"The value {value!r} cannot be converted to a number."
        )

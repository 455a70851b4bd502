"""Decoders for fields the MaaS360 API encodes inconsistently.

The vendor renders many numeric fields either as a JSON number, as a
string of digits, or as an empty string when there is no value. Some
identifier-like fields (IMEI, phone number, device IDs) arrive as either
a string or a number. These helpers normalize both cases so that record
classes never have to inspect raw types.

Example:
    >>> FlexibleInt.from_json("123") == FlexibleInt.from_json(123)
    True
    >>> FlexibleInt.from_json("").is_set
    False
"""
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_INTEGER_STRING = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class FlexibleInt:
    """An integer that may be absent.

    Attributes:
        value: The decoded integer, 0 when absent
        is_set: Whether the vendor supplied a usable value
    """
    value: int = 0
    is_set: bool = False

    @classmethod
    def from_json(cls, raw: Any) -> "FlexibleInt":
        """Decode a raw JSON value.

        Integers are used as-is, strings are parsed as base-10 integers.
        Anything else (empty or unparsable strings, null, floats, objects)
        decodes as absent.
        """
        if isinstance(raw, int) and not isinstance(raw, bool):
            if INT64_MIN <= raw <= INT64_MAX:
                return cls(raw, True)
            return cls()

        if isinstance(raw, str) and _INTEGER_STRING.fullmatch(raw):
            parsed = int(raw)
            if INT64_MIN <= parsed <= INT64_MAX:
                return cls(parsed, True)

        return cls()

    def to_json(self) -> Union[int, str]:
        """Encode back to the vendor's canonical form ("" when absent)."""
        if not self.is_set:
            return ""
        return self.value

    def __int__(self) -> int:
        return self.value if self.is_set else 0

    def __str__(self) -> str:
        return str(self.value) if self.is_set else ""


def flexible_int(raw: Any) -> int:
    """Decode a string-or-number field straight to an int (0 when absent)."""
    return int(FlexibleInt.from_json(raw))


def flexible_str(raw: Any) -> Optional[str]:
    """Normalize a string-or-number field to a string.

    Returns None for null and empty strings. Integral floats lose their
    fractional part so large identifiers do not render as 3.5e+14.
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        return str(raw).lower()
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    return str(raw)

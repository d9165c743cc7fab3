"""Ordered field lookup over loosely-typed mappings.

Pages rename the same logical field freely (``orderId``, ``orderNumber``,
``confirmationNumber``...), so every lookup takes a list of candidate names
and the first usable value wins, regardless of what later names hold.
"""
import math
import re
from collections.abc import Mapping, Sequence
from typing import Any

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


class FieldResolver:
    """Stateless resolver; a single instance can be shared."""

    @staticmethod
    def parse_number(value: Any) -> float | None:
        """Coerce a number or numeric string to float.

        Strings are stripped of everything except digits, ``.`` and ``-``
        before parsing. Anything unparsable is None, never 0.
        """
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            number = float(value)
            return number if math.isfinite(number) else None
        if isinstance(value, str):
            cleaned = _NON_NUMERIC.sub("", value)
            if not cleaned:
                return None
            try:
                number = float(cleaned)
            except ValueError:
                return None
            return number if math.isfinite(number) else None
        return None

    def resolve_string(self, obj: Any, names: Sequence[str]) -> str | None:
        if not isinstance(obj, Mapping):
            return None
        for name in names:
            value = obj.get(name)
            if isinstance(value, str) and value:
                return value
            # Numeric identifiers are common in state trees (orderId: 1234)
            if isinstance(value, int) and not isinstance(value, bool):
                return str(value)
        return None

    def resolve_number(self, obj: Any, names: Sequence[str]) -> float | None:
        if not isinstance(obj, Mapping):
            return None
        for name in names:
            parsed = self.parse_number(obj.get(name))
            if parsed is not None:
                return parsed
        return None

    @staticmethod
    def get_path(obj: Any, path: Sequence[str]) -> Any:
        """Walk a key path; None as soon as an intermediate is not a mapping."""
        current = obj
        for key in path:
            if not isinstance(current, Mapping):
                return None
            current = current.get(key)
        return current

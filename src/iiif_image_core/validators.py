"""Grammars of the IIIF Image API 2.x parameters.

Each kind maps to a list of alternatives joined into one anchored pattern;
a value is accepted only when the whole string matches.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Final

from .errors import InvalidParameter

INT_RE: Final = r"\d+"
FLOAT_RE: Final = r"\d+(?:\.\d+)?"

QUALITIES: Final = ("color", "gray", "bitonal", "default")
FORMATS: Final = ("jpg", "tif", "gif", "png", "webp")

GRAMMARS: Final[dict[str, tuple[str, ...]]] = {
    "quality": QUALITIES,
    "format": FORMATS,
    "region": (
        "full",
        "square",
        f"pct:{FLOAT_RE},{FLOAT_RE},{FLOAT_RE},{FLOAT_RE}",
        f"{INT_RE},{INT_RE},{INT_RE},{INT_RE}",
    ),
    "size": ("full", "max", f"pct:{FLOAT_RE}", f"{INT_RE},", f",{INT_RE}", f"!?{INT_RE},{INT_RE}"),
    "rotation": (f"!?{FLOAT_RE}",),
}

KINDS: Final = tuple(GRAMMARS)


@lru_cache(maxsize=None)
def grammar(kind: str) -> re.Pattern[str]:
    """Return the compiled pattern accepting exactly the values of `kind`."""
    try:
        alternatives = GRAMMARS[kind]
    except KeyError:
        raise ValueError(f"Unknown parameter kind: {kind!r}") from None
    return re.compile("(?:" + "|".join(alternatives) + ")", re.ASCII)


def is_valid(kind: str, value: str) -> bool:
    """Non-raising variant of `validate`."""
    if not isinstance(value, str):
        return False
    return grammar(kind).fullmatch(value) is not None


def validate(kind: str, value: str) -> bool:
    """Return True when `value` fully matches the grammar of `kind`.

    Raises `InvalidParameter` naming the kind and the offending value
    otherwise.
    """
    if not is_valid(kind, value):
        raise InvalidParameter(kind, str(value), "does not match the IIIF grammar")
    return True


__all__ = ["FORMATS", "GRAMMARS", "KINDS", "QUALITIES", "grammar", "is_valid", "validate"]

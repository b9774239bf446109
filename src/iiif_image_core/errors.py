"""Error taxonomy for rejected IIIF image request parameters."""

from __future__ import annotations


class IIIFError(ValueError):
    """Base class for every error raised while interpreting a request."""


class InvalidParameter(IIIFError):
    """Raised when a parameter string is malformed or semantically invalid.

    Carries the parameter kind (`region`, `size`, `rotation`, `quality`,
    `format` or `request`), the raw offending string and a human-readable
    reason.
    """

    def __init__(self, kind: str, value: str, reason: str = "") -> None:
        self.kind = kind
        self.value = value
        self.reason = reason
        message = f"Invalid {kind}: {value}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidRegion(InvalidParameter):
    """Raised when a region resolves to a zero-area rectangle."""

    def __init__(self, value: str, reason: str = "width and height must both be > 0") -> None:
        super().__init__("region", value, reason)


class InvalidSize(InvalidParameter):
    """Raised when a size resolves to a zero or non-positive target."""

    def __init__(self, value: str, reason: str = "width and height must both be > 0") -> None:
        super().__init__("size", value, reason)


__all__ = ["IIIFError", "InvalidParameter", "InvalidRegion", "InvalidSize"]

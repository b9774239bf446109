"""Parsing of the IIIF image request path tail.

`{region}/{size}/{rotation}/{quality}.{format}`, as it follows the image
identifier in a IIIF Image API 2.x URL.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import unquote

from .directives import Dimensions, Directive
from .errors import InvalidParameter
from .operations import Operations


@dataclass(frozen=True)
class ImageRequest:
    """Raw parameter strings of one image request; validated on apply."""

    region: str = "full"
    size: str = "max"
    rotation: str = "0"
    quality: str = "default"
    format: str = "jpg"

    @property
    def path(self) -> str:
        return f"{self.region}/{self.size}/{self.rotation}/{self.quality}.{self.format}"


def parse_request_path(path: str) -> ImageRequest:
    """Split a request path tail into its five parameters.

    Segments are percent-decoded (`%21` for `!`). Leading and trailing slashes
    are ignored. Raises `InvalidParameter` with kind `request` when the path
    does not have exactly four segments or the last one lacks a format.
    """
    raw = str(path or "")
    segments = [unquote(part) for part in raw.strip("/").split("/")]
    if len(segments) != 4:
        raise InvalidParameter("request", raw, "expected region/size/rotation/quality.format")

    region, size, rotation, tail = segments
    quality, sep, fmt = tail.rpartition(".")
    if not sep or not quality or not fmt:
        raise InvalidParameter("request", raw, "missing quality or format")

    return ImageRequest(region=region, size=size, rotation=rotation, quality=quality, format=fmt)


def plan(width: int, height: int, request: ImageRequest | str) -> tuple[list[Directive], Dimensions]:
    """Interpret a request against a source of `width` x `height` pixels.

    Returns the ordered directive list and the tracked dimensions after the
    region step.
    """
    if isinstance(request, str):
        request = parse_request_path(request)
    ops = Operations(Dimensions(width, height)).apply(request)
    return ops.directives, ops.dims


__all__ = ["ImageRequest", "parse_request_path", "plan"]

"""Interpreter turning IIIF Image API 2.x parameters into pipeline directives.

The module-level `resolve_*` helpers are pure: they take the current
`Dimensions` explicitly and return the directives to emit (plus the new
dimensions for `region`). `Operations` threads that state through one
request and forwards every directive to its pipeline in call order.

Every helper validates its whole input before computing any geometry, so a
rejected parameter never emits a directive.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from .directives import (
    FIT_COVER,
    FIT_INSIDE,
    Dimensions,
    Directive,
    ExplicitSize,
    Extract,
    FlipHorizontal,
    FullSize,
    Grayscale,
    MaxSize,
    PercentSize,
    Resize,
    Rotate,
    SetOutputFormat,
    SizeRequest,
    Threshold,
    round_half_up,
)
from .errors import InvalidParameter, InvalidRegion, InvalidSize
from .logger import get_logger
from .pipeline import Pipeline, RecordingPipeline, replay
from .validators import validate

if TYPE_CHECKING:
    from .request import ImageRequest

logger = get_logger(__name__)

T = TypeVar("T")


def _square_crop(dims: Dimensions) -> Extract | None:
    if dims.width == dims.height:
        return None
    side = min(dims.width, dims.height)
    offset = abs(dims.width - dims.height) // 2
    if dims.width > dims.height:
        return Extract(left=offset, top=0, width=side, height=side)
    return Extract(left=0, top=offset, width=side, height=side)


def resolve_region(value: str, dims: Dimensions) -> tuple[Extract | None, Dimensions]:
    """Resolve a `region` value against `dims`.

    Returns the crop to emit (None for a no-op) and the dimensions after it.
    """
    validate("region", value)

    if value == "full":
        return None, dims.copy()

    if value == "square":
        crop = _square_crop(dims)
    else:
        if value.startswith("pct:"):
            x_pct, y_pct, w_pct, h_pct = (float(part) / 100.0 for part in value[len("pct:") :].split(","))
            scaled = (dims.width * x_pct, dims.height * y_pct, dims.width * w_pct, dims.height * h_pct)
            if not all(math.isfinite(v) for v in scaled):
                raise InvalidRegion(value, "percentage is out of range")
            left, top, width, height = (round_half_up(v) for v in scaled)
        else:
            left, top, width, height = (int(part) for part in value.split(","))

        if width == 0 or height == 0:
            raise InvalidRegion(value)
        crop = Extract(left=left, top=top, width=width, height=height)

    if crop is None:
        return None, dims.copy()
    return crop, Dimensions(crop.width, crop.height)


def parse_size(value: str) -> SizeRequest:
    """Classify a `size` value into its tagged form."""
    validate("size", value)

    if value == "full":
        return FullSize()
    if value == "max":
        return MaxSize()
    if value.startswith("pct:"):
        return PercentSize(float(value[len("pct:") :]))

    fit = FIT_COVER
    body = value
    if body.startswith("!"):
        fit = FIT_INSIDE
        body = body[1:]
    raw_w, raw_h = body.split(",")
    width = int(raw_w) if raw_w else None
    height = int(raw_h) if raw_h else None
    return ExplicitSize(width=width, height=height, fit=fit)


def resolve_size(request: SizeRequest, dims: Dimensions, raw: str = "") -> Resize | None:
    """Resolve a parsed size against `dims`; `raw` is only used in errors."""
    if isinstance(request, (FullSize, MaxSize)):
        return None

    if isinstance(request, PercentSize):
        if not request.percent > 0:
            raise InvalidSize(raw or f"pct:{request.percent}", "percentage must be > 0")
        scaled = dims.width * (request.percent / 100.0)
        if not math.isfinite(scaled):
            raise InvalidSize(raw or f"pct:{request.percent}", "percentage is out of range")
        request = ExplicitSize(width=round_half_up(scaled), height=None)

    if isinstance(request, ExplicitSize):
        if request.width == 0 or request.height == 0:
            raise InvalidSize(raw or repr(request))
        return Resize(width=request.width, height=request.height, fit=request.fit)

    raise TypeError(f"Unsupported size request: {request!r}")


def resolve_rotation(value: str) -> list[Directive]:
    """Directives for a `rotation` value: optional mirror, then rotate.

    Only the literal `0` is a no-op; `!0` still mirrors.
    """
    validate("rotation", value)

    if value == "0":
        return []

    mirror = value.startswith("!")
    number = value[1:] if mirror else value
    try:
        degrees = float(number)
    except ValueError:
        raise InvalidParameter("rotation", value, "rotation value is not numeric") from None

    directives: list[Directive] = [FlipHorizontal()] if mirror else []
    directives.append(Rotate(degrees))
    return directives


def resolve_quality(value: str) -> list[Directive]:
    validate("quality", value)

    if value == "gray":
        return [Grayscale()]
    if value == "bitonal":
        return [Threshold()]
    return []


def resolve_format(value: str) -> list[Directive]:
    validate("format", value)
    return [SetOutputFormat(value)]


class Operations:
    """Per-request interpreter for the IIIF parameters.

    Call `region`, `size`, `rotation` and `quality` in that order; `format`
    may be applied at any point. Each method returns the interpreter so calls
    can be chained.
    """

    def __init__(self, dims: Dimensions | tuple[int, int], pipeline: Pipeline | None = None) -> None:
        if isinstance(dims, Dimensions):
            self.dims = dims.copy()
        else:
            self.dims = Dimensions(*dims)
        self.pipeline: Pipeline = pipeline if pipeline is not None else RecordingPipeline()
        self._sized = False

    @property
    def directives(self) -> list[Directive]:
        """Directives accumulated by the pipeline, when it records them."""
        return list(getattr(self.pipeline, "directives", []))

    def _emit(self, kind: str, value: str, directives: list[Directive]) -> None:
        if not directives:
            logger.debug("%s=%s is a no-op", kind, value)
            return
        for directive in directives:
            logger.debug("%s=%s -> %s", kind, value, directive.as_dict())
        replay(directives, self.pipeline)

    def _resolve(self, resolver: Callable[[], T]) -> T:
        try:
            return resolver()
        except InvalidParameter as exc:
            logger.warning("Rejected %s parameter %r: %s", exc.kind, exc.value, exc)
            raise

    def region(self, value: str) -> Operations:
        if self._sized:
            raise InvalidParameter("region", value, "region must be applied before size")
        crop, dims = self._resolve(lambda: resolve_region(value, self.dims))
        self._emit("region", value, [crop] if crop else [])
        self.dims = dims
        return self

    def size(self, value: str) -> Operations:
        resize = self._resolve(lambda: resolve_size(parse_size(value), self.dims, raw=value))
        self._emit("size", value, [resize] if resize else [])
        self._sized = True
        return self

    def rotation(self, value: str) -> Operations:
        self._emit("rotation", value, self._resolve(lambda: resolve_rotation(value)))
        return self

    def quality(self, value: str) -> Operations:
        self._emit("quality", value, self._resolve(lambda: resolve_quality(value)))
        return self

    def format(self, value: str) -> Operations:
        self._emit("format", value, self._resolve(lambda: resolve_format(value)))
        return self

    def apply(self, request: ImageRequest) -> Operations:
        """Apply all five parameters of a parsed request in IIIF order."""
        return (
            self.region(request.region)
            .size(request.size)
            .rotation(request.rotation)
            .quality(request.quality)
            .format(request.format)
        )


__all__ = [
    "Operations",
    "parse_size",
    "resolve_format",
    "resolve_quality",
    "resolve_region",
    "resolve_rotation",
    "resolve_size",
    "round_half_up",
]

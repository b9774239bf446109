"""Image pipeline collaborators driven by the parameter interpreter.

`RecordingPipeline` only accumulates directives so callers can inspect or
serialize the plan. `PillowPipeline` realizes each directive eagerly on an
in-memory Pillow image; decoding and encoding stay with the caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Final, Protocol

from PIL import Image, ImageOps

from .config_manager import get_config_manager
from .directives import (
    FIT_COVER,
    FIT_INSIDE,
    Directive,
    Extract,
    FitMode,
    FlipHorizontal,
    Grayscale,
    Resize,
    Rotate,
    SetOutputFormat,
    Threshold,
    round_half_up,
)
from .logger import get_logger

logger = get_logger(__name__)

PIL_FORMATS: Final = {
    "jpg": "JPEG",
    "tif": "TIFF",
    "gif": "GIF",
    "png": "PNG",
    "webp": "WEBP",
}

RESAMPLE_FILTERS: Final = {
    "nearest": Image.Resampling.NEAREST,
    "bilinear": Image.Resampling.BILINEAR,
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
}

DEFAULT_THRESHOLD: Final = 128


class Pipeline(Protocol):
    """Operations the interpreter invokes, in call order."""

    def extract(self, left: int, top: int, width: int, height: int) -> Any: ...

    def resize(self, width: int | None, height: int | None, fit: FitMode = FIT_COVER) -> Any: ...

    def rotate(self, degrees: float) -> Any: ...

    def flip_horizontal(self) -> Any: ...

    def grayscale(self) -> Any: ...

    def threshold(self) -> Any: ...

    def set_output_format(self, fmt: str) -> Any: ...


def replay(directives: Iterable[Directive], pipeline: Pipeline) -> Pipeline:
    """Forward previously recorded directives to another pipeline, in order."""
    for directive in directives:
        if isinstance(directive, Extract):
            pipeline.extract(directive.left, directive.top, directive.width, directive.height)
        elif isinstance(directive, Resize):
            pipeline.resize(directive.width, directive.height, directive.fit)
        elif isinstance(directive, Rotate):
            pipeline.rotate(directive.degrees)
        elif isinstance(directive, FlipHorizontal):
            pipeline.flip_horizontal()
        elif isinstance(directive, Grayscale):
            pipeline.grayscale()
        elif isinstance(directive, Threshold):
            pipeline.threshold()
        elif isinstance(directive, SetOutputFormat):
            pipeline.set_output_format(directive.format)
        else:
            raise TypeError(f"Unsupported directive: {directive!r}")
    return pipeline


class RecordingPipeline:
    """Accumulates directives without touching any pixels."""

    def __init__(self) -> None:
        self.directives: list[Directive] = []

    def _append(self, directive: Directive) -> RecordingPipeline:
        self.directives.append(directive)
        return self

    def extract(self, left: int, top: int, width: int, height: int) -> RecordingPipeline:
        return self._append(Extract(left, top, width, height))

    def resize(self, width: int | None, height: int | None, fit: FitMode = FIT_COVER) -> RecordingPipeline:
        return self._append(Resize(width, height, fit))

    def rotate(self, degrees: float) -> RecordingPipeline:
        return self._append(Rotate(degrees))

    def flip_horizontal(self) -> RecordingPipeline:
        return self._append(FlipHorizontal())

    def grayscale(self) -> RecordingPipeline:
        return self._append(Grayscale())

    def threshold(self) -> RecordingPipeline:
        return self._append(Threshold())

    def set_output_format(self, fmt: str) -> RecordingPipeline:
        return self._append(SetOutputFormat(fmt))

    def as_dicts(self) -> list[dict[str, Any]]:
        return [d.as_dict() for d in self.directives]


def _resample_filter(name: str | None) -> Image.Resampling:
    key = str(name or "lanczos").strip().lower()
    if key not in RESAMPLE_FILTERS:
        logger.warning("Unknown resample filter %r, falling back to lanczos", name)
        key = "lanczos"
    return RESAMPLE_FILTERS[key]


def target_size(
    current: tuple[int, int],
    width: int | None,
    height: int | None,
    fit: FitMode = FIT_COVER,
) -> tuple[int, int]:
    """Compute the pixel size a resize directive produces.

    `cover` forces both given sides; `inside` keeps the aspect ratio and fits
    within the given box. A missing side is derived from the aspect ratio.
    """
    cur_w, cur_h = current
    if width is None and height is None:
        return cur_w, cur_h

    if fit == FIT_INSIDE or width is None or height is None:
        scales = [side / cur for side, cur in ((width, cur_w), (height, cur_h)) if side is not None]
        scale = min(scales)
        return max(1, round_half_up(cur_w * scale)), max(1, round_half_up(cur_h * scale))

    return width, height


class PillowPipeline:
    """Applies directives to a Pillow image as they arrive.

    The image is replaced on every step; the caller reads `image` once the
    interpreter has finished and encodes it with `pil_format`.
    """

    def __init__(self, image: Image.Image, threshold: int | None = None, resample: str | None = None) -> None:
        cm = get_config_manager()
        self.image = image
        self.threshold_level = int(
            threshold if threshold is not None else cm.get_setting("pipeline.threshold", DEFAULT_THRESHOLD)
        )
        self.resample = _resample_filter(resample or cm.get_setting("pipeline.resample", "lanczos"))
        self.output_format: str | None = None
        self.applied = RecordingPipeline()

    @property
    def directives(self) -> list[Directive]:
        return self.applied.directives

    @property
    def pil_format(self) -> str | None:
        """Pillow format name for the selected output format, if any."""
        if self.output_format is None:
            return None
        return PIL_FORMATS[self.output_format]

    def extract(self, left: int, top: int, width: int, height: int) -> PillowPipeline:
        self.image = self.image.crop((left, top, left + width, top + height))
        self.applied.extract(left, top, width, height)
        return self

    def resize(self, width: int | None, height: int | None, fit: FitMode = FIT_COVER) -> PillowPipeline:
        size = target_size(self.image.size, width, height, fit)
        if size != self.image.size:
            self.image = self.image.resize(size, resample=self.resample)
        self.applied.resize(width, height, fit)
        return self

    def rotate(self, degrees: float) -> PillowPipeline:
        # IIIF rotates clockwise, Pillow counter-clockwise
        self.image = self.image.rotate(-degrees, expand=True, resample=Image.Resampling.BICUBIC)
        self.applied.rotate(degrees)
        return self

    def flip_horizontal(self) -> PillowPipeline:
        self.image = ImageOps.mirror(self.image)
        self.applied.flip_horizontal()
        return self

    def grayscale(self) -> PillowPipeline:
        self.image = self.image.convert("L")
        self.applied.grayscale()
        return self

    def threshold(self) -> PillowPipeline:
        level = self.threshold_level
        self.image = self.image.convert("L").point(lambda p: 255 if p >= level else 0)
        self.applied.threshold()
        return self

    def set_output_format(self, fmt: str) -> PillowPipeline:
        if fmt not in PIL_FORMATS:
            raise ValueError(f"Unsupported output format: {fmt}")
        self.output_format = fmt
        self.applied.set_output_format(fmt)
        return self


__all__ = [
    "PIL_FORMATS",
    "Pipeline",
    "PillowPipeline",
    "RecordingPipeline",
    "replay",
    "target_size",
]

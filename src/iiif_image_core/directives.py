"""Value types exchanged between the interpreter and the image pipeline."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Literal, Union

FitMode = Literal["cover", "inside"]
FIT_COVER: FitMode = "cover"
FIT_INSIDE: FitMode = "inside"


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (not banker's rounding)."""
    return int(math.floor(value + 0.5))


@dataclass
class Dimensions:
    """Current pixel extent of the image as transformed so far."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if int(self.width) <= 0 or int(self.height) <= 0:
            raise ValueError(f"Dimensions must be positive, got {self.width}x{self.height}")
        self.width = int(self.width)
        self.height = int(self.height)

    def copy(self) -> Dimensions:
        return Dimensions(self.width, self.height)


class _Directive:
    """Shared helpers for the frozen directive dataclasses below."""

    name: str = ""

    def as_dict(self) -> dict[str, Any]:
        """Serialize as `{"op": name, **params}` for logging and the CLI."""
        return {"op": self.name, **asdict(self)}


@dataclass(frozen=True)
class Extract(_Directive):
    """Crop to a pixel rectangle."""

    left: int
    top: int
    width: int
    height: int

    name = "extract"


@dataclass(frozen=True)
class Resize(_Directive):
    """Resize; a `None` side is derived from the aspect ratio."""

    width: int | None
    height: int | None
    fit: FitMode = FIT_COVER

    name = "resize"


@dataclass(frozen=True)
class Rotate(_Directive):
    degrees: float

    name = "rotate"


@dataclass(frozen=True)
class FlipHorizontal(_Directive):
    name = "flip_horizontal"


@dataclass(frozen=True)
class Grayscale(_Directive):
    name = "grayscale"


@dataclass(frozen=True)
class Threshold(_Directive):
    name = "threshold"


@dataclass(frozen=True)
class SetOutputFormat(_Directive):
    format: str

    name = "set_output_format"


Directive = Union[Extract, Resize, Rotate, FlipHorizontal, Grayscale, Threshold, SetOutputFormat]


# Parsed forms of the `size` parameter.


@dataclass(frozen=True)
class FullSize:
    pass


@dataclass(frozen=True)
class MaxSize:
    pass


@dataclass(frozen=True)
class PercentSize:
    percent: float


@dataclass(frozen=True)
class ExplicitSize:
    width: int | None
    height: int | None
    fit: FitMode = FIT_COVER


SizeRequest = Union[FullSize, MaxSize, PercentSize, ExplicitSize]


__all__ = [
    "FIT_COVER",
    "FIT_INSIDE",
    "Dimensions",
    "Directive",
    "ExplicitSize",
    "Extract",
    "FitMode",
    "FlipHorizontal",
    "FullSize",
    "Grayscale",
    "MaxSize",
    "PercentSize",
    "Resize",
    "Rotate",
    "SetOutputFormat",
    "SizeRequest",
    "Threshold",
    "round_half_up",
]

"""Interpreter for IIIF Image API 2.x region/size/rotation/quality/format parameters."""

from .directives import (
    Dimensions,
    Extract,
    FlipHorizontal,
    Grayscale,
    Resize,
    Rotate,
    SetOutputFormat,
    Threshold,
)
from .errors import IIIFError, InvalidParameter, InvalidRegion, InvalidSize
from .operations import Operations
from .pipeline import PillowPipeline, RecordingPipeline
from .request import ImageRequest, parse_request_path, plan
from .validators import FORMATS, QUALITIES, validate

__version__ = "0.1.0"

__all__ = [
    "FORMATS",
    "QUALITIES",
    "Dimensions",
    "Extract",
    "FlipHorizontal",
    "Grayscale",
    "IIIFError",
    "ImageRequest",
    "InvalidParameter",
    "InvalidRegion",
    "InvalidSize",
    "Operations",
    "PillowPipeline",
    "RecordingPipeline",
    "Resize",
    "Rotate",
    "SetOutputFormat",
    "Threshold",
    "__version__",
    "parse_request_path",
    "plan",
    "validate",
]

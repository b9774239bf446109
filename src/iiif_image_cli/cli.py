import argparse
import json
import sys

from iiif_image_core import __version__
from iiif_image_core.config_manager import get_config_manager
from iiif_image_core.errors import IIIFError
from iiif_image_core.logger import get_logger, setup_logging
from iiif_image_core.request import ImageRequest, parse_request_path, plan

logger = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Print the transform plan of a IIIF Image API 2.x request for a source of the given size."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("width", type=int, help="Source image width in pixels")
    parser.add_argument("height", type=int, help="Source image height in pixels")
    parser.add_argument(
        "path",
        nargs="?",
        help="Request tail, e.g. 'full/max/0/default.jpg' (overrides the parameter flags)",
    )
    parser.add_argument("--region", default="full", help="IIIF region (e.g. full, square, pct:10,10,50,50)")
    parser.add_argument("--size", default="max", help="IIIF size (e.g. max, 500,, !300,300, pct:50)")
    parser.add_argument("--rotation", default="0", help="IIIF rotation (e.g. 90, !180)")
    parser.add_argument("--quality", default="default", help="IIIF quality (color, gray, bitonal, default)")
    parser.add_argument("--format", default="jpg", help="Output format (jpg, tif, gif, png, webp)")
    parser.add_argument("--indent", type=int, help="JSON indent (defaults to config cli.indent)")
    return parser


def _request_from_args(args: argparse.Namespace) -> ImageRequest:
    if args.path:
        return parse_request_path(args.path)
    return ImageRequest(
        region=args.region,
        size=args.size,
        rotation=args.rotation,
        quality=args.quality,
        format=args.format,
    )


def main(argv=None) -> int:
    """CLI entry point; returns the process exit code."""
    args = _build_parser().parse_args(argv)
    setup_logging(console=False)

    indent = args.indent if args.indent is not None else get_config_manager().get_setting("cli.indent", 2)

    try:
        request = _request_from_args(args)
        directives, dims = plan(args.width, args.height, request)
    except IIIFError as exc:
        logger.error("Request rejected: %s", exc)
        print(f"❌ {exc}", file=sys.stderr)
        return 2
    except ValueError as exc:
        # Non-positive source dimensions
        print(f"❌ {exc}", file=sys.stderr)
        return 2

    payload = {
        "request": request.path,
        "source": {"width": args.width, "height": args.height},
        "dimensions": {"width": dims.width, "height": dims.height},
        "directives": [d.as_dict() for d in directives],
    }
    print(json.dumps(payload, indent=indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())

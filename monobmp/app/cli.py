from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from ..codec.decoding import load, read_header
from ..codec.encoding import save
from ..errors import BmpError, IoFailure
from ..rendering import ConversionSettings, load_image, raster_from_image, raster_to_image
from ..transform import add_border, normalize, scale_up

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="monobmp",
        description="Encode and decode monochrome 1-bit BMP files.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    info = sub.add_parser("info", help="Show the header fields of a BMP file")
    info.add_argument("path")

    convert = sub.add_parser("convert", help="Convert an image (.png/.jpg/...) to a monochrome BMP")
    convert.add_argument("src")
    convert.add_argument("dst")
    convert.add_argument("--no-dither", action="store_true", help="Threshold instead of dithering")
    convert.add_argument("--scale", type=int, default=1, help="Scale every pixel up by this factor")
    convert.add_argument("--border", type=int, default=0, help="Add a border of this many pixels")

    export = sub.add_parser("export", help="Convert a monochrome BMP to another image format")
    export.add_argument("src")
    export.add_argument("dst")

    norm = sub.add_parser("normalize", help="Remove the border and shrink modules to one pixel")
    norm.add_argument("src")
    norm.add_argument("dst")
    return parser.parse_args(argv)


def show_info(args: argparse.Namespace) -> int:
    """Print the declared header fields of a BMP file."""
    try:
        with open(args.path, "rb") as handle:
            header = read_header(handle)
    except OSError as exc:
        raise IoFailure(f"Cannot read {args.path}: {exc}") from exc
    print(f"width: {header.width}")
    print(f"height: {header.height}")
    print(f"bits_per_pixel: {header.bits_per_pixel}")
    print(f"compression: {header.compression}")
    print(f"file_size: {header.file_size}")
    print(f"data_offset: {header.data_offset}")
    print(f"image_size: {header.image_size}")
    print(f"colors_used: {header.colors_used}")
    return 0


def convert_image(args: argparse.Namespace) -> int:
    """Convert a Pillow-readable image to a monochrome BMP."""
    settings = ConversionSettings(dither=not args.no_dither)
    try:
        img = load_image(args.src)
    except OSError as exc:
        raise IoFailure(f"Cannot open image {args.src}: {exc}") from exc
    raster = raster_from_image(img, settings)
    if args.scale != 1:
        raster = scale_up(raster, args.scale)
    if args.border:
        raster = add_border(raster, args.border)
    save(raster, args.dst)
    logger.debug("Wrote %dx%d bitmap to %s", raster.width, raster.height, args.dst)
    return 0


def export_image(args: argparse.Namespace) -> int:
    """Write a monochrome BMP in the format implied by the destination suffix."""
    raster = load(args.src)
    try:
        raster_to_image(raster).save(args.dst)
    except (OSError, ValueError) as exc:
        raise IoFailure(f"Cannot write image {args.dst}: {exc}") from exc
    return 0


def normalize_file(args: argparse.Namespace) -> int:
    """Normalize a BMP and print its new size."""
    raster = normalize(load(args.src))
    save(raster, args.dst)
    print(f"{raster.width}x{raster.height}")
    return 0


COMMANDS = {
    "info": show_info,
    "convert": convert_image,
    "export": export_image,
    "normalize": normalize_file,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Run the monobmp command line; returns the exit status."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return COMMANDS[args.command](args)
    except BmpError as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

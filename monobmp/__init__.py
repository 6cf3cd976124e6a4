"""Encode and decode monochrome 1-bit BMP files."""

from .codec.decoding import BitmapInfo, decode, decode_bytes, load, read_header
from .codec.encoding import encode, encode_bytes, save
from .codec.layout import Layout, compute_layout
from .errors import (
    BmpError,
    DecodeError,
    DimensionOverflow,
    EmptyImage,
    InconsistentRowWidth,
    InvalidDimensions,
    InvalidPalette,
    InvalidScale,
    InvalidSignature,
    IoFailure,
    OversizedBitmap,
    UnexpectedEof,
    UnsupportedBitDepth,
    UnsupportedCompression,
)
from .raster import Raster, build, from_flat
from .transform import add_border, normalize, remove_border, scale_down, scale_up

__version__ = "1.1.0"

__all__ = [
    "BitmapInfo",
    "BmpError",
    "DecodeError",
    "DimensionOverflow",
    "EmptyImage",
    "InconsistentRowWidth",
    "InvalidDimensions",
    "InvalidPalette",
    "InvalidScale",
    "InvalidSignature",
    "IoFailure",
    "Layout",
    "OversizedBitmap",
    "Raster",
    "UnexpectedEof",
    "UnsupportedBitDepth",
    "UnsupportedCompression",
    "add_border",
    "build",
    "compute_layout",
    "decode",
    "decode_bytes",
    "encode",
    "encode_bytes",
    "from_flat",
    "load",
    "normalize",
    "read_header",
    "remove_border",
    "save",
    "scale_down",
    "scale_up",
]

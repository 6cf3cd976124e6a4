from __future__ import annotations


class BmpError(Exception):
    """Base class for every error raised by monobmp."""


class EmptyImage(BmpError, ValueError):
    """Raster has no rows or its rows have no pixels."""


class InconsistentRowWidth(BmpError, ValueError):
    """Rows of a raster differ in length."""


class DimensionOverflow(BmpError, ValueError):
    """Width/height do not fit the 32-bit size fields of the format."""


class InvalidScale(BmpError, ValueError):
    """Scale factor or border size cannot be applied to the raster."""


class DecodeError(BmpError):
    """Input is not a supported monochrome bitmap."""


class InvalidSignature(DecodeError):
    pass


class UnsupportedBitDepth(DecodeError):
    pass


class UnsupportedCompression(DecodeError):
    pass


class InvalidDimensions(DecodeError, ValueError):
    pass


class InvalidPalette(DecodeError):
    pass


class UnexpectedEof(DecodeError):
    pass


class OversizedBitmap(DimensionOverflow, DecodeError):
    """File declares dimensions past the 32-bit size fields."""


class IoFailure(BmpError):
    """Underlying sink or source failed; the OSError is chained as __cause__."""


__all__ = [
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
    "OversizedBitmap",
    "UnexpectedEof",
    "UnsupportedBitDepth",
    "UnsupportedCompression",
]

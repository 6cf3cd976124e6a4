from __future__ import annotations

import struct
from dataclasses import dataclass

from ..errors import DimensionOverflow, InvalidDimensions

SIGNATURE = b"BM"
FILE_HEADER_SIZE = 14
INFO_HEADER_SIZE = 40
PALETTE_ENTRIES = 2
PALETTE_ENTRY_SIZE = 4
PALETTE_SIZE = PALETTE_ENTRIES * PALETTE_ENTRY_SIZE
PIXEL_DATA_OFFSET = FILE_HEADER_SIZE + INFO_HEADER_SIZE + PALETTE_SIZE
BITS_PER_PIXEL = 1
COMPRESSION_NONE = 0

UINT32_MAX = 0xFFFFFFFF
INT32_MAX = 0x7FFFFFFF

# signature, file size, reserved, pixel data offset
FILE_HEADER = struct.Struct("<2sIII")
# size, width, height, planes, bit depth, compression, image size,
# x/y pixels per meter, colors used, colors important
INFO_HEADER = struct.Struct("<IiiHHIIiiII")


@dataclass(frozen=True)
class Layout:
    """Byte geometry of a 1-bit bitmap, derived from width and height."""

    width: int
    height: int
    row_stride_bytes: int
    pixel_array_size: int
    pixel_data_offset: int
    total_file_size: int

    @property
    def row_content_bytes(self) -> int:
        """Bytes that carry pixel bits in a row, before padding."""
        return (self.width + 7) // 8

    @property
    def row_padding_bytes(self) -> int:
        return self.row_stride_bytes - self.row_content_bytes


def row_stride(width: int) -> int:
    """Return bytes per stored row: ceil(width / 8) rounded up to 4."""
    return ((width * BITS_PER_PIXEL + 31) // 32) * 4


def compute_layout(width: int, height: int) -> Layout:
    """Compute the file layout for a ``width`` x ``height`` raster.

    Arithmetic is done on unbounded ints and checked against the 32-bit
    header fields before anything is narrowed.
    """
    if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
        raise InvalidDimensions(f"Width must be a positive integer, got {width!r}")
    if isinstance(height, bool) or not isinstance(height, int) or height <= 0:
        raise InvalidDimensions(f"Height must be a positive integer, got {height!r}")
    if width > INT32_MAX or height > INT32_MAX:
        raise DimensionOverflow(f"Dimensions {width}x{height} exceed the signed 32-bit header fields")
    stride = row_stride(width)
    pixel_array_size = stride * height
    total_file_size = PIXEL_DATA_OFFSET + pixel_array_size
    if pixel_array_size > UINT32_MAX or total_file_size > UINT32_MAX:
        raise DimensionOverflow(f"Dimensions {width}x{height} need {total_file_size} bytes, over the 32-bit limit")
    return Layout(
        width=width,
        height=height,
        row_stride_bytes=stride,
        pixel_array_size=pixel_array_size,
        pixel_data_offset=PIXEL_DATA_OFFSET,
        total_file_size=total_file_size,
    )

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import BinaryIO, List

from ..errors import (
    DimensionOverflow,
    InvalidDimensions,
    InvalidPalette,
    InvalidSignature,
    IoFailure,
    OversizedBitmap,
    UnexpectedEof,
    UnsupportedBitDepth,
    UnsupportedCompression,
)
from ..raster import Raster, Row
from .layout import (
    BITS_PER_PIXEL,
    COMPRESSION_NONE,
    FILE_HEADER,
    FILE_HEADER_SIZE,
    INFO_HEADER,
    INFO_HEADER_SIZE,
    PALETTE_SIZE,
    SIGNATURE,
    compute_layout,
)

logger = logging.getLogger(__name__)

# upper bound for a single read() so memory follows the bytes actually present
READ_CHUNK_SIZE = 1 << 16


@dataclass(frozen=True)
class BitmapInfo:
    """Header fields exactly as declared by a file."""

    file_size: int
    data_offset: int
    info_header_size: int
    width: int
    height: int
    planes: int
    bits_per_pixel: int
    compression: int
    image_size: int
    x_pixels_per_meter: int
    y_pixels_per_meter: int
    colors_used: int
    colors_important: int


def _read(source: BinaryIO, size: int) -> bytes:
    try:
        data = source.read(size)
    except OSError as exc:
        raise IoFailure(f"Reading bitmap failed: {exc}") from exc
    return data or b""


def _read_exact(source: BinaryIO, size: int) -> bytes:
    # read() may return fewer bytes than asked on pipes and sockets, and
    # buffered file objects allocate the full requested size up front
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = _read(source, min(remaining, READ_CHUNK_SIZE))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_header(source: BinaryIO) -> BitmapInfo:
    """Read and check the file and info headers, leaving ``source`` at the palette."""
    head = _read_exact(source, FILE_HEADER_SIZE)
    if head[:2] != SIGNATURE:
        raise InvalidSignature(f"Bad signature {head[:2]!r}, expected {SIGNATURE!r}")
    if len(head) < FILE_HEADER_SIZE:
        raise UnexpectedEof("File header is truncated")
    _, file_size, _, data_offset = FILE_HEADER.unpack(head)

    info = _read_exact(source, INFO_HEADER_SIZE)
    if len(info) < INFO_HEADER_SIZE:
        raise UnexpectedEof("Info header is truncated")
    fields = INFO_HEADER.unpack(info)
    header = BitmapInfo(file_size, data_offset, *fields)

    if header.bits_per_pixel != BITS_PER_PIXEL:
        raise UnsupportedBitDepth(f"Unsupported bit depth: {header.bits_per_pixel}")
    if header.compression != COMPRESSION_NONE:
        raise UnsupportedCompression(f"Unsupported compression: {header.compression}")
    if header.width <= 0 or header.height <= 0:
        raise InvalidDimensions(f"Invalid dimensions {header.width}x{header.height}")
    return header


def unpack_row(data: bytes, width: int) -> Row:
    """Unpack ``width`` MSB-first bits; anything past ``width`` is ignored."""
    return tuple(bool(data[col >> 3] & (0x80 >> (col & 7))) for col in range(width))


def decode(source: BinaryIO) -> Raster:
    """Parse a 1-bit uncompressed BMP from ``source``."""
    header = read_header(source)
    # declared sizes and offsets are never trusted
    try:
        layout = compute_layout(header.width, header.height)
    except DimensionOverflow as exc:
        raise OversizedBitmap(str(exc)) from exc

    palette = _read_exact(source, PALETTE_SIZE)
    if len(palette) < PALETTE_SIZE:
        raise InvalidPalette(f"Palette is truncated: {len(palette)} of {PALETTE_SIZE} bytes")

    # headers and palette end exactly at layout.pixel_data_offset
    pixels = _read_exact(source, layout.pixel_array_size)
    if len(pixels) < layout.pixel_array_size:
        raise UnexpectedEof(f"Pixel array is truncated: {len(pixels)} of {layout.pixel_array_size} bytes")
    logger.debug(
        "Decoding %dx%d bitmap: stride=%d, declared size=%d",
        layout.width,
        layout.height,
        layout.row_stride_bytes,
        header.file_size,
    )

    stride = layout.row_stride_bytes
    rows: List[Row] = []
    for index in range(layout.height):
        start = index * stride
        rows.append(unpack_row(pixels[start : start + stride], layout.width))
    rows.reverse()
    return Raster(tuple(rows), layout.width)


def decode_bytes(data: bytes) -> Raster:
    """Decode a bitmap held in memory."""
    return decode(io.BytesIO(data))


def load(path: str) -> Raster:
    """Decode the bitmap file at ``path``; I/O errors become IoFailure."""
    try:
        with open(path, "rb") as handle:
            return decode(handle)
    except OSError as exc:
        raise IoFailure(f"Cannot read {path}: {exc}") from exc

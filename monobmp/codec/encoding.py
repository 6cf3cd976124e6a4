from __future__ import annotations

import io
import logging
from typing import BinaryIO, Sequence

from ..errors import IoFailure
from ..raster import Raster
from .layout import (
    BITS_PER_PIXEL,
    COMPRESSION_NONE,
    FILE_HEADER,
    INFO_HEADER,
    INFO_HEADER_SIZE,
    PALETTE_ENTRIES,
    SIGNATURE,
    Layout,
    compute_layout,
)

logger = logging.getLogger(__name__)

# B, G, R, reserved; entry 0 for bit value False, entry 1 for True.
PALETTE = (bytes([0x00, 0x00, 0x00, 0x00]), bytes([0xFF, 0xFF, 0xFF, 0x00]))


def pack_row(row: Sequence[bool], stride: int) -> bytes:
    """Pack a row of pixels MSB-first and zero-pad it to ``stride`` bytes."""
    out = bytearray(stride)
    for col, pix in enumerate(row):
        if pix:
            out[col >> 3] |= 0x80 >> (col & 7)
    return bytes(out)


def file_header(layout: Layout) -> bytes:
    """Build the 14-byte file header."""
    return FILE_HEADER.pack(SIGNATURE, layout.total_file_size, 0, layout.pixel_data_offset)


def info_header(layout: Layout) -> bytes:
    """Build the 40-byte info header for a 1-bit, uncompressed image."""
    return INFO_HEADER.pack(
        INFO_HEADER_SIZE,
        layout.width,
        layout.height,
        1,
        BITS_PER_PIXEL,
        COMPRESSION_NONE,
        layout.pixel_array_size,
        0,
        0,
        PALETTE_ENTRIES,
        PALETTE_ENTRIES,
    )


def encode(raster: Raster, sink: BinaryIO) -> None:
    """Write ``raster`` to ``sink`` as a 1-bit uncompressed BMP."""
    layout = compute_layout(raster.width, raster.height)
    logger.debug(
        "Encoding %dx%d raster: stride=%d, %d bytes",
        layout.width,
        layout.height,
        layout.row_stride_bytes,
        layout.total_file_size,
    )
    try:
        sink.write(file_header(layout))
        sink.write(info_header(layout))
        for entry in PALETTE:
            sink.write(entry)
        for row in reversed(raster.rows):
            sink.write(pack_row(row, layout.row_stride_bytes))
    except OSError as exc:
        raise IoFailure(f"Writing bitmap failed: {exc}") from exc


def encode_bytes(raster: Raster) -> bytes:
    """Return the encoded bitmap as bytes."""
    buffer = io.BytesIO()
    encode(raster, buffer)
    return buffer.getvalue()


def save(raster: Raster, path: str) -> None:
    """Encode ``raster`` and write it to ``path``.

    The whole file is encoded in memory first so a failure never leaves a
    truncated file on disk.
    """
    data = encode_bytes(raster)
    try:
        with open(path, "wb") as handle:
            handle.write(data)
    except OSError as exc:
        raise IoFailure(f"Cannot write {path}: {exc}") from exc

from __future__ import annotations

import logging
from typing import List

from .errors import InvalidScale
from .raster import Raster, Row

logger = logging.getLogger(__name__)


def scale_up(raster: Raster, factor: int) -> Raster:
    """Return a raster where every pixel becomes a ``factor`` x ``factor`` block."""
    if factor < 1:
        raise InvalidScale(f"Scale factor must be at least 1, got {factor}")
    rows: List[Row] = []
    for row in raster.rows:
        wide = tuple(pix for pix in row for _ in range(factor))
        rows.extend([wide] * factor)
    return Raster(tuple(rows), raster.width * factor)


def scale_down(raster: Raster, factor: int) -> Raster:
    """Inverse of :func:`scale_up`.

    Fails with InvalidScale unless the raster splits into uniform
    ``factor`` x ``factor`` blocks.
    """
    if factor < 2:
        raise InvalidScale(f"Scale factor must be at least 2, got {factor}")
    if raster.width % factor or raster.height % factor:
        raise InvalidScale(f"{raster.width}x{raster.height} raster is not divisible by {factor}")
    rows: List[Row] = []
    for top in range(0, raster.height, factor):
        block_rows = raster.rows[top : top + factor]
        out = []
        for left in range(0, raster.width, factor):
            value = block_rows[0][left]
            for row in block_rows:
                if any(pix != value for pix in row[left : left + factor]):
                    raise InvalidScale(f"Block at ({top}, {left}) is not uniform")
            out.append(value)
        rows.append(tuple(out))
    return Raster(tuple(rows), raster.width // factor)


def add_border(raster: Raster, size: int, value: bool = False) -> Raster:
    """Surround ``raster`` with ``size`` pixels of ``value`` on every side."""
    if size < 0:
        raise InvalidScale(f"Border size must not be negative, got {size}")
    width = raster.width + 2 * size
    edge = (value,) * size
    full = (value,) * width
    rows = [full] * size
    rows.extend(edge + row + edge for row in raster.rows)
    rows.extend([full] * size)
    return Raster(tuple(rows), width)


def _has_border(raster: Raster, value: bool) -> bool:
    if raster.width <= 2 or raster.height <= 2:
        return False
    first, last = raster.rows[0], raster.rows[-1]
    if any(pix != value for pix in first + last):
        return False
    return all(row[0] == value and row[-1] == value for row in raster.rows)


def remove_border(raster: Raster, value: bool = False) -> Raster:
    """Strip one-pixel frames made only of ``value`` while the raster is larger than 2x2."""
    current = raster
    while _has_border(current, value):
        rows = tuple(row[1:-1] for row in current.rows[1:-1])
        current = Raster(rows, current.width - 2)
    return current


def normalize(raster: Raster, max_factor: int = 10) -> Raster:
    """Drop the border and shrink modules to one pixel, e.g. for scanned QR codes."""
    trimmed = remove_border(raster)
    for factor in range(max_factor - 1, 1, -1):
        try:
            result = scale_down(trimmed, factor)
        except InvalidScale:
            continue
        logger.debug("Normalized %dx%d raster by factor %d", raster.width, raster.height, factor)
        return result
    return trimmed

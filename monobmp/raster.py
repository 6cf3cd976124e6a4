from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

from .codec.layout import compute_layout
from .errors import EmptyImage, InconsistentRowWidth

Row = Tuple[bool, ...]

_REPR_PIXEL_LIMIT = 50


@dataclass(frozen=True)
class Raster:
    """Immutable monochrome image, row-major with the top row first.

    Pixel values are stored as bools whatever type the caller passed.
    """

    rows: Tuple[Row, ...]
    width: int

    def __post_init__(self) -> None:
        rows = tuple(tuple(bool(value) for value in row) for row in self.rows)
        object.__setattr__(self, "rows", rows)
        self.validate()

    def validate(self) -> None:
        """Validate shape and the 32-bit layout bound."""
        if not self.rows or self.width <= 0:
            raise EmptyImage("Raster needs at least one row and one column")
        for index, row in enumerate(self.rows):
            if len(row) != self.width:
                raise InconsistentRowWidth(f"Row {index} has {len(row)} pixels, expected {self.width}")
        compute_layout(self.width, len(self.rows))

    @property
    def height(self) -> int:
        return len(self.rows)

    def pixel(self, row: int, col: int) -> bool:
        """Return the pixel at (row, col) where (0, 0) is the upper-left corner."""
        self._check_bounds(row, col)
        return self.rows[row][col]

    def get(self, x: int, y: int) -> bool:
        """Return the pixel where (0, 0) is the lower-left corner.

        ``x`` counts rows from the bottom, ``y`` counts columns, which is the
        order rows are stored in a file.
        """
        self._check_bounds(x, y)
        return self.rows[self.height - 1 - x][y]

    def _check_bounds(self, row: int, col: int) -> None:
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(f"Pixel ({row}, {col}) outside {self.width}x{self.height} raster")

    def __repr__(self) -> str:
        if self.width * self.height < _REPR_PIXEL_LIMIT:
            content = [[int(value) for value in row] for row in self.rows]
            return f"Raster(width={self.width}, rows={content})"
        return f"Raster(width={self.width}, height={self.height})"


def build(rows: Iterable[Iterable[object]]) -> Raster:
    """Build a Raster from row data, top row first.

    Pixel values are coerced with ``bool()``, so 0/1 rows work as well.
    """
    data = tuple(tuple(row) for row in rows)
    if not data or not data[0]:
        raise EmptyImage("Raster needs at least one row and one column")
    return Raster(data, len(data[0]))


def from_flat(pixels: Iterable[object], width: int) -> Raster:
    """Build a Raster from a flat row-major pixel sequence."""
    flat = [bool(value) for value in pixels]
    if not flat or width <= 0:
        raise EmptyImage("Raster needs at least one row and one column")
    if len(flat) % width != 0:
        raise InconsistentRowWidth("Pixels length must be a multiple of width")
    return build(flat[start : start + width] for start in range(0, len(flat), width))

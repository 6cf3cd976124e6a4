from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from PIL import Image, ImageOps

from ..raster import Raster, from_flat

DEFAULT_THRESHOLD_BIAS = 13


@dataclass
class ConversionSettings:
    dither: bool = True
    threshold_bias: int = DEFAULT_THRESHOLD_BIAS


def load_image(path: str) -> Image.Image:
    with Image.open(path) as img:
        img = ImageOps.exif_transpose(img)
        return img.copy()


def raster_from_image(img: Image.Image, settings: Optional[ConversionSettings] = None) -> Raster:
    """Convert a Pillow image to a Raster; light pixels become True."""
    settings = settings or ConversionSettings()
    if settings.dither:
        data = list(img.convert("1").getdata())
        return from_flat((p != 0 for p in data), img.width)
    data = list(img.convert("L").getdata())
    avg = sum(data) / len(data) if data else 0
    threshold = int(max(0, min(255, avg - settings.threshold_bias)))
    return from_flat((p > threshold for p in data), img.width)


def raster_to_image(raster: Raster) -> Image.Image:
    """Return a mode "1" image, True pixels white."""
    img = Image.new("1", (raster.width, raster.height))
    img.putdata([255 if pix else 0 for row in raster.rows for pix in row])
    return img

from __future__ import annotations

import random
from typing import List

import pytest

from monobmp import Raster, build


def _random_raster(rng: random.Random, max_side: int = 20) -> Raster:
    width = rng.randint(1, max_side)
    height = rng.randint(1, max_side)
    return build([[rng.random() < 0.5 for _ in range(width)] for _ in range(height)])


@pytest.fixture
def random_rasters() -> List[Raster]:
    rng = random.Random(1234)
    return [_random_raster(rng) for _ in range(40)]


@pytest.fixture
def checker_21() -> Raster:
    width = 21
    pixels = [i % 2 == 0 for i in range(width * width)]
    return build(pixels[row * width : (row + 1) * width] for row in range(width))


@pytest.fixture
def small_raster() -> Raster:
    # 2x2, only the upper-left pixel set
    return build([[True, False], [False, False]])

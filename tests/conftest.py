"""Shared fixtures.

- fixed random seeds
- the reference color table used by the conversion tests
"""

from __future__ import annotations

import numpy as np
import pytest

from prism_color import Color


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    """Pin the legacy NumPy random state."""
    np.random.seed(12345)


@pytest.fixture()
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)


@pytest.fixture()
def random_colors(rng: np.random.Generator) -> list[Color]:
    return [Color(*rng.random(3)) for _ in range(200)]


def almosteq(v1: float, v2: float, delta: float = 1.0 / 256.0) -> bool:
    """Relative error below one 8-bit step; values near zero always match."""
    if abs(v1) > delta:
        return abs((v1 - v2) / v1) < delta
    return True

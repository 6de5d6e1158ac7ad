from __future__ import annotations

from typing import Callable

import numpy as np
import pytest

from supernova import FPS, Star

DT = 1.0 / FPS


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def star(rng: np.random.Generator) -> Star:
    return Star(rng=rng)


@pytest.fixture
def run_until() -> Callable[[Star, str], int]:
    """Advance a star at the display rate until it enters phase."""

    def _run(s: Star, phase: str, limit: int = 2000) -> int:
        for tick in range(1, limit + 1):
            s.advance(DT)
            if s.phase == phase:
                return tick
        raise AssertionError(f"never reached {phase} (stuck in {s.phase})")

    return _run

"""Shared fixtures: synthetic PCM tones."""

from __future__ import annotations

import numpy as np
import pytest

SAMPLE_RATE = 44_100


def _sine(
    freq: float,
    n_samples: int,
    sample_rate: int = SAMPLE_RATE,
    amplitude: float = 16_000,
    start: int = 0,
) -> np.ndarray:
    """int16 sine starting at sample index *start* of an endless tone."""
    t = (np.arange(n_samples) + start) / sample_rate
    return np.round(amplitude * np.sin(2.0 * np.pi * freq * t)).astype(np.int16)


@pytest.fixture()
def make_sine():
    return _sine


@pytest.fixture()
def sample_rate() -> int:
    return SAMPLE_RATE

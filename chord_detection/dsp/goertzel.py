"""
chord_detection.dsp.goertzel
~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Single-frequency spectral estimation with the Goertzel recursion.

The recursion ``s[n] = x[n] + 2 cos(w) s[n-1] - s[n-2]`` is an all-pole
IIR filter, so each :meth:`Goertzel.add` call hands the whole slice to
:func:`scipy.signal.lfilter` and carries the filter state over to the
next call. Feeding a block in several slices therefore gives exactly the
same result as feeding it in one.

Usage::

    params = GoertzelParameters(110.0, 44_100, 1024)
    mag = params.start().add(block[pos:]).add(block[:pos]).finish_mag()
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike
from scipy.signal import lfilter


class GoertzelParameters:
    """Precomputed coefficients for one target frequency.

    Parameters
    ----------
    target_freq : float
        Frequency to measure, in Hz. Not rounded to a DFT bin.
    sample_rate : float
        Sample rate of the analysed signal, in Hz.
    block_len : int
        Number of samples the caller intends to feed. Informational only:
        the magnitude is computed over whatever was actually added.
    """

    __slots__ = ("target_freq", "sample_rate", "block_len", "cosine", "sine", "coeff", "_a")

    def __init__(self, target_freq: float, sample_rate: float, block_len: int) -> None:
        self.target_freq = float(target_freq)
        self.sample_rate = float(sample_rate)
        self.block_len = int(block_len)

        omega = 2.0 * math.pi * self.target_freq / self.sample_rate
        self.cosine = math.cos(omega)
        self.sine = math.sin(omega)
        self.coeff = 2.0 * self.cosine
        # y[n] = x[n] + coeff * y[n-1] - y[n-2]
        self._a = np.array([1.0, -self.coeff, 1.0])

    def start(self) -> Goertzel:
        """Return a fresh accumulator for these coefficients."""
        return Goertzel(self)


_B = np.array([1.0, 0.0, 0.0])


class Goertzel:
    """Streaming accumulator created by :meth:`GoertzelParameters.start`."""

    __slots__ = ("params", "_zi")

    def __init__(self, params: GoertzelParameters) -> None:
        self.params = params
        self._zi = np.zeros(2)

    def add(self, samples: ArrayLike) -> Goertzel:
        """Feed the next slice of the block. Returns *self* for chaining."""
        x = np.asarray(samples, dtype=np.float64)
        if x.size:
            _, self._zi = lfilter(_B, self.params._a, x, zi=self._zi)
        return self

    def finish_mag(self) -> float:
        """Magnitude of the target frequency over everything added so far."""
        # Transposed direct form II state: zi = [coeff*s1 - s2, -s1]
        s1 = -self._zi[1]
        s2 = self.params.coeff * s1 - self._zi[0]
        real = s1 - s2 * self.params.cosine
        imag = s2 * self.params.sine
        return math.sqrt(real * real + imag * imag)


def goertzel_mag(samples: ArrayLike, target_freq: float, sample_rate: float) -> float:
    """One-shot magnitude of *target_freq* in *samples*.

    Parameters
    ----------
    samples : ArrayLike
        The block to analyse.
    target_freq : float
        Frequency in Hz.
    sample_rate : float
        Sample rate in Hz.

    Returns
    -------
    float
        Non-negative magnitude; ``0.0`` for an all-zero block.
    """
    x = np.asarray(samples)
    return GoertzelParameters(target_freq, sample_rate, x.size).start().add(x).finish_mag()

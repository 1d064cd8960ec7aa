"""
chord_detection.dsp.spectrum
~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Full-spectrum helpers: the analysis window used by the chromagram and a
plain power spectrum for quick inspection of raw PCM.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from chord_detection.config import I16_MAX


def hamming_window(size: int) -> np.ndarray:
    """Periodic Hamming window ``0.54 - 0.46 cos(2 pi i / size)``.

    Unlike :func:`numpy.hamming` the denominator is *size*, not
    ``size - 1``, so the window tiles without a repeated end point.
    """
    i = np.arange(size, dtype=np.float64)
    window = 0.54 - 0.46 * np.cos(2.0 * np.pi * i / size)
    window.setflags(write=False)
    return window


def calculate_spectrum(samples: ArrayLike) -> np.ndarray:
    """Power spectrum ``|X_k|^2`` of int16 PCM scaled to ``[-1, 1]``.

    Parameters
    ----------
    samples : ArrayLike
        Mono int16 samples.

    Returns
    -------
    np.ndarray
        One power value per FFT bin (same length as *samples*).
    """
    x = np.asarray(samples, dtype=np.float64) / I16_MAX
    spectrum = np.fft.fft(x)
    return spectrum.real ** 2 + spectrum.imag ** 2

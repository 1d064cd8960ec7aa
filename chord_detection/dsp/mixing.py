"""
chord_detection.dsp.mixing
~~~~~~~~~~~~~~~~~~~~~~~~~~

Channel down-mixing of interleaved PCM frames.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike


def make_mono(
    samples: ArrayLike,
    channel_count: int,
    out: np.ndarray | None = None,
) -> np.ndarray:
    """Average interleaved channels into one channel.

    Integer input is averaged in 64-bit arithmetic and truncated toward
    zero, so ``(-3 + 0) / 2`` becomes ``-1`` rather than ``-2``. Float
    input is averaged without rounding.

    Parameters
    ----------
    samples : ArrayLike
        Interleaved samples ``[l0, r0, l1, r1, ...]``.
    channel_count : int
        Number of interleaved channels.
    out : np.ndarray, optional
        Destination array of length ``len(samples) // channel_count``.

    Returns
    -------
    np.ndarray
        Mono samples, same dtype as the input (or *out*'s dtype).

    Raises
    ------
    ValueError
        If the sample count is not a multiple of *channel_count*.
    """
    x = np.asarray(samples)
    if channel_count < 1:
        raise ValueError(f"channel_count must be >= 1, got {channel_count}")
    if x.shape[0] % channel_count:
        raise ValueError(
            f"{x.shape[0]} samples is not a whole number of {channel_count}-channel frames"
        )
    if channel_count == 1:
        if out is None:
            return x
        out[:] = x
        return out

    frames = x.reshape(-1, channel_count)
    if np.issubdtype(x.dtype, np.integer):
        mixed = np.trunc(frames.sum(axis=1, dtype=np.int64) / channel_count)
    else:
        mixed = frames.mean(axis=1)

    if out is None:
        return mixed.astype(x.dtype)
    out[:] = mixed
    return out

"""
chord_detection.dsp.buffer
~~~~~~~~~~~~~~~~~~~~~~~~~~

Fixed-capacity sample buffers used by the analyzers.

:class:`CircularBuffer` keeps a write cursor and never moves data, which
suits the gromagram (the Goertzel estimator reads the two halves in
order). :class:`ShiftBuffer` moves old samples left and appends new ones
at the end, so the chromagram's FFT always sees one contiguous,
chronologically ordered window.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, DTypeLike


class CircularBuffer:
    """The most recent ``capacity`` samples, oldest first from ``pos``.

    Parameters
    ----------
    capacity : int
        Number of samples held. Never changes.
    dtype : DTypeLike
        Sample type (``int16`` for raw PCM).
    """

    def __init__(self, capacity: int, dtype: DTypeLike = np.int16) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.data = np.zeros(capacity, dtype=dtype)
        self.pos = 0

    @property
    def capacity(self) -> int:
        return self.data.shape[0]

    def __len__(self) -> int:
        return self.capacity

    def write(self, samples: ArrayLike) -> None:
        """Append *samples*, overwriting the oldest and advancing ``pos``."""
        x = np.asarray(samples)
        n = x.shape[0]
        cap = self.capacity
        if n >= cap:
            # Only the last ``cap`` samples survive.
            self.pos = (self.pos + n - cap) % cap
            x = x[n - cap:]
            n = cap

        head = min(n, cap - self.pos)
        self.data[self.pos:self.pos + head] = x[:head]
        self.data[:n - head] = x[head:]
        self.pos = (self.pos + n) % cap

    def halves(self) -> tuple[np.ndarray, np.ndarray]:
        """Views ``(data[pos:], data[:pos])``: together, oldest to newest."""
        return self.data[self.pos:], self.data[:self.pos]

    def ordered(self) -> np.ndarray:
        """A chronologically ordered copy of the contents."""
        return np.concatenate(self.halves())

    def reset(self) -> None:
        self.data.fill(0)
        self.pos = 0


class ShiftBuffer:
    """Fixed-length window where new samples enter at the end.

    Parameters
    ----------
    capacity : int
        Window length.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.data = np.zeros(capacity, dtype=np.float64)

    def __len__(self) -> int:
        return self.data.shape[0]

    def push(self, samples: np.ndarray) -> None:
        """Shift the contents left by ``len(samples)`` and append *samples*."""
        n = samples.shape[0]
        if n == 0:
            return
        if n >= self.data.shape[0]:
            self.data[:] = samples[-self.data.shape[0]:]
            return
        self.data[:-n] = self.data[n:]
        self.data[-n:] = samples

    def reset(self) -> None:
        self.data.fill(0.0)

"""
chord_detection.data.preprocess
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Audio loading and frame slicing.

Turns audio files into the interleaved int16 PCM the analyzers consume,
and cuts PCM into the fixed-size frames a capture device would deliver.
"""

from __future__ import annotations

from typing import Iterator

import librosa
import numpy as np
from numpy.typing import ArrayLike

from chord_detection.config import I16_MAX, SR


def load_pcm16(
    audio_path: str,
    sample_rate: int = SR,
    channel_count: int = 1,
) -> np.ndarray:
    """
    Load an audio file as interleaved signed 16-bit PCM.

    Parameters
    ----------
    audio_path : str
        Path to a ``.wav`` / ``.flac`` / ``.mp3`` file.
    sample_rate : int
        Target sample rate; librosa resamples when the file differs.
    channel_count : int
        ``1`` to mix down to mono, ``2`` to keep a stereo file's channels
        interleaved.

    Returns
    -------
    np.ndarray
        int16 samples, interleaved when ``channel_count > 1``.

    Raises
    ------
    ValueError
        If the file's channel layout does not match *channel_count*.
    """
    # librosa returns float32 in [-1, 1], shape (n,) or (channels, n)
    y, _ = librosa.load(audio_path, sr=sample_rate, mono=channel_count == 1)

    if channel_count > 1:
        if y.ndim != 2 or y.shape[0] != channel_count:
            found = 1 if y.ndim == 1 else y.shape[0]
            raise ValueError(f"{audio_path} has {found} channel(s), expected {channel_count}")
        y = y.T.reshape(-1)

    pcm = np.clip(np.round(y * I16_MAX), -I16_MAX - 1, I16_MAX)
    return pcm.astype(np.int16)


def iter_frames(
    samples: ArrayLike,
    frame_size: int,
    channel_count: int = 1,
    pad: bool = False,
) -> Iterator[np.ndarray]:
    """Yield consecutive frames of ``frame_size`` samples per channel.

    Parameters
    ----------
    samples : ArrayLike
        Interleaved PCM.
    frame_size : int
        Samples per channel in each frame.
    channel_count : int
        Interleaved channels.
    pad : bool
        Zero-pad the final partial frame instead of dropping it.

    Yields
    ------
    np.ndarray
        Views into *samples* (or a padded copy for the last frame).
    """
    x = np.asarray(samples)
    step = frame_size * channel_count
    n_full = x.shape[0] // step
    for i in range(n_full):
        yield x[i * step:(i + 1) * step]

    tail = x[n_full * step:]
    if pad and tail.shape[0]:
        frame = np.zeros(step, dtype=x.dtype)
        frame[:tail.shape[0]] = tail
        yield frame


def get_frame_times(n_frames: int, frame_size: int, sample_rate: int = SR) -> np.ndarray:
    """Start time in seconds of each of *n_frames* consecutive frames.

    Useful for lining per-frame labels up with annotations given in
    seconds.
    """
    return librosa.samples_to_time(np.arange(n_frames) * frame_size, sr=sample_rate)

"""
chord_detection.core
~~~~~~~~~~~~~~~~~~~~

Clip-level pipeline: the layer that walks a whole recording through an
analyzer frame by frame, as a capture callback would, and turns the
resulting features into labels.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, TypeVar

import numpy as np
from numpy.typing import ArrayLike

from chord_detection.analysis.chromagram import Chromagram
from chord_detection.analysis.gromagram import Gromagram
from chord_detection.config import DEFAULT_FRAME_SIZE
from chord_detection.data.preprocess import iter_frames
from chord_detection.detector import ChordDetector

L = TypeVar("L")


def stream_gromagram(
    samples: ArrayLike,
    gromagram: Gromagram,
    frame_size: int = DEFAULT_FRAME_SIZE,
    normalize: bool = False,
) -> Iterator[np.ndarray]:
    """Feed *samples* to *gromagram* in frames, yielding each result.

    Parameters
    ----------
    samples : ArrayLike
        Interleaved int16 PCM matching the gromagram's channel count.
    gromagram : Gromagram
        Analyzer; its window carries over between frames.
    frame_size : int
        Samples per channel in each frame.
    normalize : bool
        Normalise each vector before yielding it.

    Yields
    ------
    np.ndarray
        A copy of the gromagram after every frame.
    """
    for frame in iter_frames(samples, frame_size, gromagram.channel_count, pad=True):
        gromagram.process_audio_frame(frame)
        if normalize:
            gromagram.normalize()
        yield gromagram.gromagram.copy()


def stream_chromagram(
    samples: ArrayLike,
    chromagram: Chromagram,
) -> Iterator[np.ndarray]:
    """Feed *samples* to *chromagram*, yielding each newly calculated vector.

    Frames that do not complete a calculation interval yield nothing;
    a trailing partial frame is dropped.
    """
    props = chromagram.props
    for frame in iter_frames(samples, props.frame_size, props.channel_count):
        counter_before = chromagram.num_samples_since_last_calculation
        chromagram.process_audio_frame(frame)
        if chromagram.num_samples_since_last_calculation < counter_before + props.frame_size:
            yield chromagram.chromagram.copy()


def predict(
    samples: ArrayLike,
    detector: ChordDetector[L],
    frame_size: int = DEFAULT_FRAME_SIZE,
) -> List[Optional[L]]:
    """Run end-to-end label prediction on a clip.

    Each frame updates the detector's gromagram window; the normalised
    window is classified after every frame.

    Parameters
    ----------
    samples : ArrayLike
        Interleaved int16 PCM.
    detector : ChordDetector
        A fitted detector.
    frame_size : int
        Samples per channel in each frame.

    Returns
    -------
    list
        One entry per frame: the confident label, or *None*.

    Raises
    ------
    NotTrainedError
        If *detector* has not been fitted.
    """
    detector.gromagram.reset()
    return [
        detector.detect(features)
        for features in stream_gromagram(samples, detector.gromagram, frame_size, normalize=True)
    ]

"""
chord_detection.data.dataset
~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Labelled training clips listed in a CSV index, and a helper that sweeps
all of them through a :class:`~chord_detection.detector.ChordDetector`.

The index has one row per clip::

    audio_file,label
    a_major_01.wav,A
    d_major_01.wav,D
"""

from __future__ import annotations

import logging
import os
from typing import Tuple

import numpy as np
import pandas as pd
from torch.utils.data import Dataset

from chord_detection.config import SR
from chord_detection.data.preprocess import load_pcm16
from chord_detection.detector import ChordDetector

logger = logging.getLogger(__name__)

_REQUIRED_COLUMNS = ("audio_file", "label")


class LabeledClipDataset(Dataset):  # type: ignore[type-arg]
    """Dataset of ``(pcm, label)`` pairs.

    Parameters
    ----------
    index_file : str
        CSV with ``audio_file`` and ``label`` columns.
    audio_dir : str
        Directory the ``audio_file`` paths are relative to.
    sample_rate : int
        Rate the clips are resampled to.
    channel_count : int
        Channels of the returned PCM (see :func:`load_pcm16`).

    Raises
    ------
    ValueError
        If the index is missing a required column.
    """

    def __init__(
        self,
        index_file: str,
        audio_dir: str,
        sample_rate: int = SR,
        channel_count: int = 1,
    ) -> None:
        self.audio_dir = audio_dir
        self.sample_rate = sample_rate
        self.channel_count = channel_count
        self.metadata = pd.read_csv(index_file, dtype={"label": str})

        missing = [c for c in _REQUIRED_COLUMNS if c not in self.metadata.columns]
        if missing:
            raise ValueError(f"{index_file} is missing column(s): {', '.join(missing)}")

    def __len__(self) -> int:
        return len(self.metadata)

    def __getitem__(self, idx: int) -> Tuple[np.ndarray, str]:
        row = self.metadata.iloc[idx]
        audio_path = os.path.join(self.audio_dir, row["audio_file"])
        pcm = load_pcm16(audio_path, sample_rate=self.sample_rate, channel_count=self.channel_count)
        return pcm, row["label"]

    @property
    def labels(self) -> list[str]:
        """Distinct labels in order of first appearance."""
        return list(pd.unique(self.metadata["label"]))


def fit_detector(detector: ChordDetector, dataset: LabeledClipDataset) -> ChordDetector:
    """Train *detector* on every clip of *dataset* and finish training.

    Returns
    -------
    ChordDetector
        The same detector, now fitted.
    """
    total = 0
    for i in range(len(dataset)):
        pcm, label = dataset[i]
        total += detector.train(pcm, label)
    logger.info("swept %d clips into %d training windows", len(dataset), total)
    detector.finish_training()
    return detector

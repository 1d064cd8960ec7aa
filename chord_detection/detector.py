"""
chord_detection.detector
~~~~~~~~~~~~~~~~~~~~~~~~

Supervised chord / note classifier on top of the gromagram.

Training clips are swept with a window of ``window_size`` samples that
advances by a quarter window (75 % overlap). Each position is analysed
from a clean gromagram, normalised, and stored with the one-hot encoding
of its label. :meth:`ChordDetector.finish_training` then fits a Gaussian
naive Bayes model in a single batch, after which the detector is frozen.

Usage::

    detector = ChordDetector(Gromagram(GromagramConfig(start_note=A1, notes_count=24)),
                             labels=["A", "D", "E"])
    for clip, label in clips:
        detector.train(clip, label)
    detector.finish_training()

    label = detector.detect(detector.extract_features(window))
    if label is None:
        ...  # nothing cleared the confidence threshold
"""

from __future__ import annotations

import logging
from typing import Generic, Sequence, TypeVar

import numpy as np
import torch
from numpy.typing import ArrayLike

from chord_detection.analysis.gromagram import Gromagram
from chord_detection.config import CONFIDENCE_THRESHOLD, TRAINING_STEP_DIVISOR, VAR_SMOOTHING
from chord_detection.errors import ConfigurationError, NotTrainedError, UnknownLabelError
from chord_detection.models.naive_bayes import GaussianNaiveBayes

logger = logging.getLogger(__name__)

L = TypeVar("L")


class ChordDetector(Generic[L]):
    """Classify gromagram feature vectors into a closed set of labels.

    Parameters
    ----------
    gromagram : Gromagram
        Feature extractor; owned by the detector from now on.
    labels : Sequence[L]
        Every label the detector may ever predict. Duplicates are dropped,
        first occurrence wins. Labels only need ``==``; ``str(label)`` is
        used for display.
    threshold : float
        Posterior a label must strictly exceed to be returned by
        :meth:`detect`.
    var_smoothing : float
        Passed to :class:`~chord_detection.models.GaussianNaiveBayes`.

    Raises
    ------
    ConfigurationError
        If *labels* is empty.
    """

    def __init__(
        self,
        gromagram: Gromagram,
        labels: Sequence[L],
        threshold: float = CONFIDENCE_THRESHOLD,
        var_smoothing: float = VAR_SMOOTHING,
    ) -> None:
        unique: list[L] = []
        for label in labels:
            if label not in unique:
                unique.append(label)
        if not unique:
            raise ConfigurationError("a detector needs at least one label")

        self.gromagram = gromagram
        self._labels: tuple[L, ...] = tuple(unique)
        self.threshold = threshold
        self._encoding = torch.eye(len(unique), dtype=torch.float64)

        self._training_input: list[np.ndarray] = []
        self._training_labels: list[int] = []
        self.model = GaussianNaiveBayes(len(gromagram), len(unique), var_smoothing)

    # ── Labels ──────────────────────────────────────────────────────
    @property
    def labels(self) -> tuple[L, ...]:
        return self._labels

    def label_index(self, label: L) -> int:
        """Position of *label* in the label set.

        Raises
        ------
        UnknownLabelError
            If *label* was not passed at construction.
        """
        for i, known in enumerate(self._labels):
            if known == label:
                return i
        raise UnknownLabelError(f"unknown label {label!s}; expected one of {[str(x) for x in self._labels]}")

    def one_hot(self, label: L) -> torch.Tensor:
        """One-hot row for *label* (a view into the encoding table)."""
        return self._encoding[self.label_index(label)]

    # ── Training ────────────────────────────────────────────────────
    def extract_features(self, wav_window: ArrayLike) -> np.ndarray:
        """Normalised gromagram of one window analysed from a clean state."""
        self.gromagram.reset()
        self.gromagram.process_audio_frame(wav_window)
        return self.gromagram.normalize().copy()

    def train(self, wav_samples: ArrayLike, label: L) -> int:
        """Add every window of a labelled clip to the training set.

        Parameters
        ----------
        wav_samples : ArrayLike
            Interleaved int16 PCM with the gromagram's channel count.
        label : L
            Label of the whole clip.

        Returns
        -------
        int
            Number of training examples added.

        Raises
        ------
        UnknownLabelError
            If *label* is not in the label set.
        RuntimeError
            If the model has already been fitted.
        """
        if self.is_trained:
            raise RuntimeError("model is already fitted; build a new detector to retrain")
        label_i = self.label_index(label)

        samples = np.asarray(wav_samples)
        channels = self.gromagram.channel_count
        window = self.gromagram.window_size * channels
        step = max(self.gromagram.window_size // TRAINING_STEP_DIVISOR, 1) * channels

        added = 0
        for start in range(0, samples.shape[0] - window + 1, step):
            self._training_input.append(self.extract_features(samples[start:start + window]))
            self._training_labels.append(label_i)
            added += 1

        if added:
            logger.info("label %s: %d training windows", label, added)
        else:
            logger.warning(
                "label %s: clip of %d samples is shorter than one %d-sample window",
                label,
                samples.shape[0],
                window,
            )
        return added

    def finish_training(self) -> None:
        """Fit the model on everything passed to :meth:`train`.

        Raises
        ------
        RuntimeError
            If called twice or before any training example was added.
        """
        if self.is_trained:
            raise RuntimeError("finish_training may only be called once")
        if not self._training_input:
            raise RuntimeError("no training examples; call train() first")

        inputs = torch.from_numpy(np.stack(self._training_input))
        targets = self._encoding[torch.tensor(self._training_labels)]
        self.model.fit(inputs, targets)
        self.model.eval()

        per_label = targets.sum(dim=0).tolist()
        logger.info(
            "fitted naive Bayes on %d examples (%s)",
            inputs.shape[0],
            ", ".join(f"{label}={int(n)}" for label, n in zip(self._labels, per_label)),
        )
        self._training_input.clear()
        self._training_labels.clear()

    @property
    def is_trained(self) -> bool:
        return self.model.fitted

    @property
    def n_training_examples(self) -> int:
        """Examples accumulated and not yet fitted."""
        return len(self._training_input)

    # ── Inference ───────────────────────────────────────────────────
    def predict_proba(self, features: ArrayLike) -> np.ndarray:
        """Posterior probability of every label, in label-set order.

        Raises
        ------
        NotTrainedError
            If :meth:`finish_training` has not run.
        """
        if not self.is_trained:
            raise NotTrainedError("model not trained; call finish_training() first")
        x = torch.as_tensor(np.asarray(features, dtype=np.float64))
        with torch.no_grad():
            return self.model(x)[0].numpy()

    def detect(self, features: ArrayLike) -> L | None:
        """Label whose posterior strictly exceeds :attr:`threshold`.

        Parameters
        ----------
        features : ArrayLike
            One normalised feature vector, e.g. from
            :meth:`extract_features`.

        Returns
        -------
        L | None
            The confident label, or *None* when no label clears the
            threshold.

        Raises
        ------
        NotTrainedError
            If :meth:`finish_training` has not run.
        """
        scores = self.predict_proba(features)
        for i, score in enumerate(scores):
            if score > self.threshold:
                return self._labels[i]
        logger.debug("no confident label (best %.3f)", scores.max())
        return None

"""
Tests for core.py — streaming whole clips through the analyzers.
"""

import numpy as np
import pytest

from chord_detection.analysis.chromagram import Chromagram
from chord_detection.analysis.gromagram import Gromagram, GromagramConfig
from chord_detection.core import predict, stream_chromagram, stream_gromagram
from chord_detection.detector import ChordDetector
from chord_detection.errors import NotTrainedError
from chord_detection.theory.notes import A1


def _detector(make_sine) -> ChordDetector:
    ggram = Gromagram(GromagramConfig(window_size=1024, start_note=A1, notes_count=24))
    detector = ChordDetector(ggram, labels=["low", "high"])
    detector.train(make_sine(110.0, 22_050), "low")
    detector.train(make_sine(196.0, 22_050), "high")
    detector.finish_training()
    return detector


class TestStreamGromagram:
    def test_one_vector_per_frame(self, make_sine):
        vectors = list(stream_gromagram(make_sine(110.0, 1000), Gromagram(), frame_size=256))
        # 3 full frames + 1 padded
        assert len(vectors) == 4
        assert all(v.shape == (12,) for v in vectors)

    def test_vectors_are_copies(self, make_sine):
        ggram = Gromagram()
        vectors = list(stream_gromagram(make_sine(110.0, 1024), ggram, frame_size=256))
        assert vectors[0] is not ggram.gromagram
        assert not np.array_equal(vectors[0], vectors[-1])

    def test_normalized_vectors(self, make_sine):
        vectors = list(
            stream_gromagram(make_sine(110.0, 1024), Gromagram(), frame_size=512, normalize=True)
        )
        for v in vectors:
            assert v.sum() == pytest.approx(1.0)


class TestStreamChromagram:
    def test_one_vector_per_interval(self, make_sine):
        vectors = list(stream_chromagram(make_sine(220.0, 4096 * 3 + 100), Chromagram()))
        assert len(vectors) == 3
        assert all(v.shape == (12,) for v in vectors)

    def test_nothing_before_first_interval(self, make_sine):
        assert list(stream_chromagram(make_sine(220.0, 4000), Chromagram())) == []


class TestPredict:
    def test_labels_per_frame(self, make_sine):
        detector = _detector(make_sine)
        labels = predict(make_sine(110.0, 4096, start=50_000), detector, frame_size=256)
        assert len(labels) == 16
        # once the window is full of the tone the answer is stable
        assert labels[-8:] == ["low"] * 8

    def test_switching_tones(self, make_sine):
        detector = _detector(make_sine)
        clip = np.concatenate([make_sine(110.0, 4096, start=1234), make_sine(196.0, 4096, start=999)])
        labels = predict(clip, detector, frame_size=512)
        assert labels[7] == "low"
        assert labels[-1] == "high"

    def test_untrained_detector(self, make_sine):
        detector = ChordDetector(Gromagram(), labels=["x"])
        with pytest.raises(NotTrainedError):
            predict(make_sine(110.0, 1024), detector)

"""
Tests for analysis/gromagram.py — sliding-window note energies.
"""

import numpy as np
import pytest

from chord_detection.analysis.gromagram import Gromagram, GromagramConfig
from chord_detection.errors import ConfigurationError
from chord_detection.theory.notes import A1, A2, note_to_hz


def _far_notes(center: int, min_distance: int, count: int = 24) -> list[int]:
    return [i for i in range(count) if abs(i - center) >= min_distance]


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class TestConfig:
    def test_defaults(self):
        ggram = Gromagram()
        assert ggram.props.window_size == 1024
        assert ggram.props.start_note == 28
        assert len(ggram) == 12
        assert ggram.gromagram.shape == (12,)

    def test_note_frequencies(self):
        ggram = Gromagram(GromagramConfig(start_note=A1, notes_count=13))
        assert ggram.note_frequencies[0] == pytest.approx(55.0)
        assert ggram.note_frequencies[12] == pytest.approx(110.0)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"window_size": 0},
            {"sample_rate": 0},
            {"channel_count": 0},
            {"notes_count": 0},
            {"start_note": -1},
        ],
    )
    def test_rejects_non_positive_sizes(self, overrides):
        with pytest.raises(ConfigurationError):
            Gromagram(GromagramConfig(**overrides))

    def test_rejects_notes_above_nyquist(self):
        with pytest.raises(ConfigurationError, match="Nyquist"):
            Gromagram(GromagramConfig(sample_rate=8000, start_note=100, notes_count=12))

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            Gromagram(GromagramConfig(window_size=-5))


# ---------------------------------------------------------------------------
# Pitch resolution
# ---------------------------------------------------------------------------


class TestPeaks:
    def test_a2_sine_peaks_at_a2(self, make_sine):
        ggram = Gromagram(
            GromagramConfig(window_size=1024, sample_rate=44_100, start_note=A1, notes_count=24)
        )
        ggram.process_audio_frame(make_sine(110.0, 1024))

        a2 = A2 - A1
        assert int(np.argmax(ggram.gromagram)) == a2
        assert ggram.gromagram[a2] > ggram.gromagram[a2 - 1]
        assert ggram.gromagram[a2] > ggram.gromagram[a2 + 1]

    def test_a2_dominates_distant_notes_with_long_window(self, make_sine):
        ggram = Gromagram(
            GromagramConfig(window_size=8192, sample_rate=44_100, start_note=A1, notes_count=24)
        )
        ggram.process_audio_frame(make_sine(110.0, 8192))

        a2 = A2 - A1
        peak = ggram.gromagram[a2]
        for i in _far_notes(a2, 3):
            assert peak >= 5 * ggram.gromagram[i], f"note {i} too close to the peak"

    @pytest.mark.parametrize("offset", range(12))
    def test_each_tracked_note_peaks_at_its_index(self, offset, make_sine):
        ggram = Gromagram(
            GromagramConfig(window_size=8192, sample_rate=44_100, start_note=A2, notes_count=12)
        )
        ggram.process_audio_frame(make_sine(note_to_hz(A2 + offset), 8192))

        energies = ggram.gromagram
        assert int(np.argmax(energies)) == offset
        if offset > 0:
            assert energies[offset] > energies[offset - 1]
        if offset < 11:
            assert energies[offset] > energies[offset + 1]

    def test_silence_is_zero(self):
        ggram = Gromagram()
        ggram.process_audio_frame(np.zeros(512, dtype=np.int16))
        assert not ggram.gromagram.any()


# ---------------------------------------------------------------------------
# Streaming and channels
# ---------------------------------------------------------------------------


class TestFrames:
    def test_small_frames_match_one_big_frame(self, make_sine):
        x = make_sine(196.0, 1024)
        whole, pieces = Gromagram(), Gromagram()
        whole.process_audio_frame(x)
        for frame in np.split(x, 8):
            pieces.process_audio_frame(frame)
        np.testing.assert_allclose(pieces.gromagram, whole.gromagram, rtol=1e-9)

    def test_stereo_frames_are_mixed_down(self, make_sine):
        x = make_sine(164.81, 1024)
        stereo = np.repeat(x, 2)
        mono_ggram = Gromagram()
        stereo_ggram = Gromagram(GromagramConfig(channel_count=2))
        mono_ggram.process_audio_frame(x)
        stereo_ggram.process_audio_frame(stereo)
        np.testing.assert_allclose(stereo_ggram.gromagram, mono_ggram.gromagram)

    def test_partial_stereo_frame_rejected(self):
        ggram = Gromagram(GromagramConfig(channel_count=2))
        with pytest.raises(ValueError):
            ggram.process_audio_frame(np.zeros(5, dtype=np.int16))

    def test_returns_the_live_vector(self, make_sine):
        ggram = Gromagram()
        assert ggram.process_audio_frame(make_sine(100.0, 64)) is ggram.gromagram

    def test_reset_forgets_audio(self, make_sine):
        ggram = Gromagram()
        ggram.process_audio_frame(make_sine(100.0, 700))
        ggram.reset()
        assert ggram.buffer.pos == 0
        assert not ggram.buffer.data.any()
        assert ggram.props.window_size == 1024


# ---------------------------------------------------------------------------
# normalize
# ---------------------------------------------------------------------------


class TestNormalize:
    def test_sums_to_one_and_keeps_order(self, make_sine):
        ggram = Gromagram()
        ggram.process_audio_frame(make_sine(130.0, 1024))
        before = ggram.gromagram.copy()

        ggram.normalize()

        assert ggram.gromagram.sum() == pytest.approx(1.0)
        assert np.argsort(ggram.gromagram).tolist() == np.argsort(before).tolist()

    def test_silence_stays_zero(self):
        ggram = Gromagram()
        ggram.process_audio_frame(np.zeros(1024, dtype=np.int16))
        ggram.normalize()
        assert np.isfinite(ggram.gromagram).all()
        assert not ggram.gromagram.any()

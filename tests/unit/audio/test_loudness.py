"""Unit tests for loudness measurement and equalization."""

import math

import numpy as np
import pytest

from take_average.audio.buffer import SampleBuffer
from take_average.audio.loudness import buffer_strength, normalize_buffers
from take_average.errors import InvalidArgumentError


def absolute_sum(buffer: SampleBuffer, frames: int) -> float:
    return sum(
        float(np.abs(buffer.get_channel_data(c)[:frames]).sum())
        for c in range(buffer.number_of_channels)
    )


class TestBufferStrength:
    """Tests for mean absolute amplitude."""

    def test_mean_absolute_amplitude(self) -> None:
        """Test the mean of absolute values over all channels."""
        buffer = SampleBuffer.from_channels([[0.5, -0.5], [0.25, -0.25]], 8000)
        assert buffer_strength(buffer) == pytest.approx(0.375)

    def test_prefix_window(self) -> None:
        """Test that only the first ``length`` frames are measured."""
        buffer = SampleBuffer.from_channels([[1.0, 1.0, 0.0, 0.0]], 8000)

        assert buffer_strength(buffer, 2) == pytest.approx(1.0)
        assert buffer_strength(buffer) == pytest.approx(0.5)

    @pytest.mark.parametrize("length", [4, 5, 1000, math.inf])
    def test_length_clamped_to_buffer(self, length: float) -> None:
        """Test that windows longer than the buffer measure the whole buffer."""
        buffer = SampleBuffer.from_channels([[0.2, -0.4, 0.6, -0.8]], 8000)
        assert buffer_strength(buffer, length) == pytest.approx(buffer_strength(buffer))

    def test_silence_is_zero(self) -> None:
        """Test that silence measures zero."""
        buffer = SampleBuffer.from_channels([[0.0] * 8], 8000)
        assert buffer_strength(buffer) == 0.0

    @pytest.mark.parametrize("length", [0, -3, math.nan])
    def test_rejects_invalid_window(self, length: float) -> None:
        """Test that empty or NaN windows raise InvalidArgumentError."""
        buffer = SampleBuffer.from_channels([[0.1, 0.2]], 8000)
        with pytest.raises(InvalidArgumentError):
            buffer_strength(buffer, length)

    def test_rejects_empty_buffer(self) -> None:
        """Test that a zero-length buffer cannot be measured."""
        buffer = SampleBuffer.from_channels([[]], 8000)
        with pytest.raises(InvalidArgumentError):
            buffer_strength(buffer)


class TestNormalizeBuffers:
    """Tests for in-place loudness equalization."""

    def test_matches_group_mean(self) -> None:
        """Test that sums 4 and 2 are both rescaled to the mean of 3."""
        loud = SampleBuffer.from_channels([[1.0, 1.0, 1.0, 1.0]], 8000)
        quiet = SampleBuffer.from_channels([[0.5, 0.5, 0.5, 0.5]], 8000)

        result = normalize_buffers([loud, quiet])

        assert result is None
        np.testing.assert_allclose(loud.get_channel_data(0), [0.75] * 4)
        np.testing.assert_allclose(quiet.get_channel_data(0), [0.75] * 4)

    def test_sums_equal_after_normalization(self) -> None:
        """Test that every buffer ends with the same absolute sum."""
        rng = np.random.default_rng(42)
        buffers = [
            SampleBuffer.from_channels(rng.uniform(-scale, scale, (2, 256)), 8000)
            for scale in (0.1, 0.4, 0.9)
        ]
        expected = np.mean([absolute_sum(b, 256) for b in buffers])

        normalize_buffers(buffers)

        for buffer in buffers:
            assert absolute_sum(buffer, 256) == pytest.approx(expected, rel=1e-5)

    def test_silent_buffer_left_unchanged(self) -> None:
        """Test that an all-zero buffer is not amplified."""
        silent = SampleBuffer.from_channels([[0.0, 0.0, 0.0]], 8000)
        loud = SampleBuffer.from_channels([[0.9, -0.9, 0.9]], 8000)

        normalize_buffers([silent, loud])

        np.testing.assert_array_equal(silent.get_channel_data(0), [0.0, 0.0, 0.0])
        assert np.all(np.isfinite(loud.get_channel_data(0)))

    def test_equal_buffers_untouched(self) -> None:
        """Test that buffers already at the mean keep their exact values."""
        values = [0.1, -0.3, 0.7]
        first = SampleBuffer.from_channels([values], 8000)
        second = SampleBuffer.from_channels([values], 8000)
        before = first.get_channel_data(0).copy()

        normalize_buffers([first, second])

        np.testing.assert_array_equal(first.get_channel_data(0), before)

    def test_mutates_in_place(self) -> None:
        """Test that channel arrays are rescaled without being replaced."""
        loud = SampleBuffer.from_channels([[1.0, 1.0]], 8000)
        quiet = SampleBuffer.from_channels([[0.5, 0.5]], 8000)
        original_array = loud.get_channel_data(0)

        normalize_buffers([loud, quiet])

        assert loud.get_channel_data(0) is original_array
        assert original_array[0] == pytest.approx(0.75)

    def test_window_measures_prefix_but_scales_whole_buffer(self) -> None:
        """Test that the factor comes from the window and applies to the tail too."""
        long = SampleBuffer.from_channels([[1.0, 1.0, 0.8, 0.8]], 8000)
        short = SampleBuffer.from_channels([[0.5, 0.5]], 8000)

        # Default window is the shortest length (2): sums 2 and 1, target 1.5
        normalize_buffers([long, short])

        np.testing.assert_allclose(long.get_channel_data(0), [0.75, 0.75, 0.6, 0.6])
        np.testing.assert_allclose(short.get_channel_data(0), [0.75, 0.75])

    def test_explicit_length(self) -> None:
        """Test that an explicit window overrides the shortest length."""
        a = SampleBuffer.from_channels([[1.0, 0.0]], 8000)
        b = SampleBuffer.from_channels([[0.5, 1.0]], 8000)

        # Window 1: sums 1.0 and 0.5, target 0.75
        normalize_buffers([a, b], length=1)

        np.testing.assert_allclose(a.get_channel_data(0), [0.75, 0.0])
        np.testing.assert_allclose(b.get_channel_data(0), [0.75, 1.5])

    def test_multichannel_sum(self) -> None:
        """Test that all channels contribute to a buffer's sum and are all scaled."""
        stereo = SampleBuffer.from_channels([[0.5, 0.5], [0.5, 0.5]], 8000)
        mono = SampleBuffer.from_channels([[1.0, 1.0]], 8000)

        # Sums 2 and 2: both already at the mean
        normalize_buffers([stereo, mono])

        np.testing.assert_array_equal(stereo.get_channel_data(1), [0.5, 0.5])
        np.testing.assert_array_equal(mono.get_channel_data(0), [1.0, 1.0])

    def test_empty_set_is_noop(self) -> None:
        """Test that normalizing no buffers does nothing."""
        normalize_buffers([])

    def test_rejects_negative_length(self) -> None:
        buffer = SampleBuffer.from_channels([[0.5]], 8000)
        with pytest.raises(InvalidArgumentError):
            normalize_buffers([buffer], length=-1)

"""Unit tests for per-sample averaging."""

import numpy as np
import pytest

from take_average.audio.averaging import average_buffers
from take_average.audio.buffer import SampleBuffer, create_buffer
from take_average.errors import InvalidArgumentError


class TestAverageBuffers:
    """Tests for average_buffers."""

    def test_per_sample_mean(self) -> None:
        """Test that each frame is the mean across takes."""
        a = SampleBuffer.from_channels([[0.0, 0.5, 1.0]], 8000)
        b = SampleBuffer.from_channels([[1.0, 0.5, 0.0]], 8000)
        c = SampleBuffer.from_channels([[0.5, -0.5, 0.5]], 8000)

        result = average_buffers([a, b, c])

        np.testing.assert_allclose(result.get_channel_data(0), [0.5, 1 / 6, 0.5], rtol=1e-6)
        assert result.sample_rate == 8000

    def test_single_buffer_is_copied(self) -> None:
        """Test that averaging one take yields an equal but separate buffer."""
        take = SampleBuffer.from_channels([[0.1, -0.2]], 8000)

        result = average_buffers([take])

        assert result is not take
        np.testing.assert_array_equal(result.get_channel_data(0), take.get_channel_data(0))

    def test_mixed_channel_counts_use_fallback(self) -> None:
        """Test that a mono take contributes to every output channel."""
        mono = SampleBuffer.from_channels([[0.4, 0.4]], 8000)
        stereo = SampleBuffer.from_channels([[0.0, 0.0], [0.8, 0.8]], 8000)

        result = average_buffers([mono, stereo])

        assert result.number_of_channels == 2
        np.testing.assert_allclose(result.get_channel_data(0), [0.2, 0.2])
        np.testing.assert_allclose(result.get_channel_data(1), [0.6, 0.6])

    def test_no_implicit_normalization(self) -> None:
        """Test that loud takes dominate when not normalized beforehand."""
        loud = SampleBuffer.from_channels([[1.0]], 8000)
        silent = SampleBuffer.from_channels([[0.0]], 8000)

        result = average_buffers([loud, silent])

        assert result.get_channel_data(0)[0] == pytest.approx(0.5)

    def test_inputs_not_modified(self) -> None:
        a = SampleBuffer.from_channels([[0.2, 0.4]], 8000)
        b = SampleBuffer.from_channels([[0.6, 0.8]], 8000)

        average_buffers([a, b])

        np.testing.assert_array_equal(a.get_channel_data(0), np.float32([0.2, 0.4]))

    def test_uses_factory(self) -> None:
        """Test that the output buffer comes from the injected factory."""
        shapes: list[tuple[int, int, int]] = []

        def factory(*, length: int, number_of_channels: int, sample_rate: int) -> SampleBuffer:
            shapes.append((length, number_of_channels, sample_rate))
            return create_buffer(
                length=length, number_of_channels=number_of_channels, sample_rate=sample_rate
            )

        take = SampleBuffer.from_channels([[0.1] * 5, [0.2] * 5, [0.3] * 5], 32000)
        average_buffers([take, take], factory)

        assert shapes == [(5, 3, 32000)]

    def test_rejects_empty_set(self) -> None:
        with pytest.raises(InvalidArgumentError, match="empty"):
            average_buffers([])

    def test_rejects_mismatched_lengths(self) -> None:
        """Test that takes must be stretched to one length first."""
        a = SampleBuffer.from_channels([[0.1, 0.2]], 8000)
        b = SampleBuffer.from_channels([[0.1, 0.2, 0.3]], 8000)
        with pytest.raises(InvalidArgumentError, match="one length"):
            average_buffers([a, b])

"""Channel-count reconciliation between takes.

Takes may arrive as a mix of mono, stereo and surround files. Instead of
up- or down-mixing, a request for a channel a buffer does not have is
answered with that buffer's last channel.
"""

from collections.abc import Iterable

import numpy as np
from numpy.typing import NDArray

from take_average.audio.buffer import AudioBufferLike
from take_average.errors import InvalidArgumentError


def channel_or_fallback(buffer: AudioBufferLike, channel_index: int) -> NDArray[np.float32]:
    """Return channel ``channel_index`` of ``buffer``, or its last channel.

    Args:
        buffer: Source buffer
        channel_index: Requested channel (>= 0)

    Returns:
        The channel's sample array (not a copy)

    Raises:
        InvalidArgumentError: If the buffer has no channels

    Example:
        >>> from take_average.audio import SampleBuffer
        >>> stereo = SampleBuffer.from_channels([[0.5], [0.25]], 44100)
        >>> channel_or_fallback(stereo, 5).tolist()
        [0.25]
    """
    if buffer.number_of_channels < 1:
        raise InvalidArgumentError("Buffer has no channels")
    if channel_index < 0:
        raise InvalidArgumentError(f"Channel index must be non-negative, got {channel_index}")

    if channel_index < buffer.number_of_channels:
        return buffer.get_channel_data(channel_index)
    return buffer.get_channel_data(buffer.number_of_channels - 1)


def max_channel_count(buffers: Iterable[AudioBufferLike]) -> int:
    """Largest channel count among ``buffers`` (0 for an empty set)."""
    return max((buffer.number_of_channels for buffer in buffers), default=0)

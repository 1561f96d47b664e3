"""Loudness measurement and equalization across takes."""

import logging
import math
from collections.abc import Sequence

import numpy as np

from take_average.audio.buffer import AudioBufferLike
from take_average.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def _absolute_sum(buffer: AudioBufferLike, frames: int) -> float:
    total = 0.0
    for channel in range(buffer.number_of_channels):
        samples = buffer.get_channel_data(channel)[:frames]
        total += float(np.abs(samples).sum(dtype=np.float64))
    return total


def buffer_strength(buffer: AudioBufferLike, length: float | None = None) -> float:
    """Mean absolute amplitude over the first ``length`` frames.

    ``length`` is clamped to the buffer length, so asking for more frames
    than exist measures the whole buffer.

    Args:
        buffer: Buffer to measure
        length: Optional prefix window in frames

    Returns:
        Mean absolute sample value over all channels in the window

    Raises:
        InvalidArgumentError: If the effective window is not finite or < 1
    """
    requested = buffer.length if length is None else length
    effective = min(buffer.length, requested)
    if math.isnan(requested) or not math.isfinite(effective) or effective < 1:
        raise InvalidArgumentError(f"Invalid strength window: {length!r}")

    frames = int(effective)
    return _absolute_sum(buffer, frames) / (frames * buffer.number_of_channels)


def normalize_buffers(buffers: Sequence[AudioBufferLike], length: int | None = None) -> None:
    """Rescale ``buffers`` IN PLACE so each has the same total absolute amplitude.

    Each buffer's sum of absolute samples over the first ``length`` frames
    (default: the shortest buffer) is matched to the mean of all sums. The
    factor is applied to the full buffer, not just the measured window.
    Silent buffers (sum 0) are left untouched, as are buffers whose factor
    is exactly 1.

    Args:
        buffers: Buffers to rescale; their channel data is mutated
        length: Optional measurement window in frames

    Raises:
        InvalidArgumentError: If ``length`` is negative
    """
    if not buffers:
        return
    if length is not None and length < 0:
        raise InvalidArgumentError(f"Length must be non-negative, got {length}")

    window = min(buffer.length for buffer in buffers) if length is None else int(length)
    sums = [_absolute_sum(buffer, window) for buffer in buffers]
    target = sum(sums) / len(sums)

    for index, (buffer, total) in enumerate(zip(buffers, sums, strict=True)):
        factor = target / total if total != 0 else 1.0
        if factor == 1.0:
            continue
        for channel in range(buffer.number_of_channels):
            buffer.get_channel_data(channel)[:] *= factor
        logger.debug(f"Buffer {index}: sum={total:.4f}, scaled by {factor:.4f}")

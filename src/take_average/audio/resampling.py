"""Length stretching by piecewise-linear interpolation.

Takes of the same recording rarely have exactly the same frame count. These
helpers stretch or compress every channel to a common length so the takes
can be averaged sample-by-sample. The sample rate is never changed: a
stretched buffer keeps its rate and plays back slightly faster or slower.
"""

import logging

import numpy as np
from numpy.typing import ArrayLike, NDArray

from take_average.audio.buffer import AudioBufferLike, BufferFactory, SampleBuffer
from take_average.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def stretch(channel_samples: ArrayLike, target_length: int) -> NDArray[np.float32]:
    """Stretch one channel to ``target_length`` samples.

    Output index ``i`` maps to source position ``i * (n - 1) / (target - 1)``
    and blends the two neighbouring source samples by the fractional part.
    The first and last output samples always equal the first and last
    source samples. Handles edge cases:
    - Same length: returns an exact copy
    - Single-sample source: broadcasts the value
    - Single-sample target: returns the first source sample

    Args:
        channel_samples: Source samples
        target_length: Number of output samples (>= 1)

    Returns:
        New float32 array of exactly ``target_length`` samples

    Raises:
        InvalidArgumentError: If ``target_length < 1`` or the source is empty

    Example:
        >>> stretch([0.0, 10.0], 5).tolist()
        [0.0, 2.5, 5.0, 7.5, 10.0]
    """
    if target_length < 1:
        raise InvalidArgumentError(f"Target length must be at least 1, got {target_length}")

    source = np.asarray(channel_samples, dtype=np.float32).reshape(-1)
    source_length = len(source)
    if source_length == 0:
        raise InvalidArgumentError("Cannot stretch an empty channel")

    target_length = int(target_length)
    if target_length == source_length:
        return source.copy()
    if source_length == 1:
        return np.full(target_length, source[0], dtype=np.float32)
    if target_length == 1:
        return source[:1].copy()

    positions = np.arange(target_length, dtype=np.float64) * (source_length - 1) / (
        target_length - 1
    )
    lower = np.floor(positions).astype(np.intp)
    upper = np.minimum(lower + 1, source_length - 1)
    fraction = positions - lower

    widened = source.astype(np.float64)
    blended = widened[lower] + (widened[upper] - widened[lower]) * fraction
    return blended.astype(np.float32)


def stretch_buffer(
    buffer: AudioBufferLike, target_length: int, buffer_factory: BufferFactory
) -> SampleBuffer:
    """Stretch every channel of ``buffer`` to ``target_length`` frames.

    The new buffer is allocated through ``buffer_factory`` with the source's
    channel count and sample rate. Errors raised by the factory propagate
    unchanged.

    Args:
        buffer: Source buffer (not modified)
        target_length: Frames per channel in the result (>= 1)
        buffer_factory: Allocator for the output buffer

    Returns:
        New buffer with ``length == target_length``

    Raises:
        InvalidArgumentError: If ``target_length < 1`` or the source is empty
    """
    if target_length < 1:
        raise InvalidArgumentError(f"Target length must be at least 1, got {target_length}")
    if buffer.length < 1:
        raise InvalidArgumentError("Cannot stretch an empty buffer")

    output = buffer_factory(
        length=target_length,
        number_of_channels=buffer.number_of_channels,
        sample_rate=buffer.sample_rate,
    )
    for channel in range(buffer.number_of_channels):
        output.get_channel_data(channel)[:] = stretch(
            buffer.get_channel_data(channel), target_length
        )

    logger.debug(
        f"Stretched {buffer.number_of_channels}ch buffer: {buffer.length} → {target_length} frames"
    )
    return output

"""Per-sample averaging of equally long takes."""

import logging
from collections.abc import Sequence

import numpy as np

from take_average.audio.buffer import AudioBufferLike, BufferFactory, SampleBuffer, create_buffer
from take_average.audio.channels import channel_or_fallback, max_channel_count
from take_average.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def average_buffers(
    buffers: Sequence[AudioBufferLike], buffer_factory: BufferFactory = create_buffer
) -> SampleBuffer:
    """Average ``buffers`` sample-by-sample into a new buffer.

    The result has the largest channel count among the inputs; buffers with
    fewer channels contribute their last channel in place of the missing
    ones. No loudness matching happens here: run ``normalize_buffers``
    first if the takes should weigh equally.

    Args:
        buffers: Takes of identical length and sample rate
        buffer_factory: Allocator for the output buffer

    Returns:
        New buffer holding the per-channel, per-frame mean

    Raises:
        InvalidArgumentError: If ``buffers`` is empty or lengths differ
    """
    if not buffers:
        raise InvalidArgumentError("Cannot average an empty set of buffers")

    lengths = {buffer.length for buffer in buffers}
    if len(lengths) != 1:
        raise InvalidArgumentError(
            f"Buffers must be stretched to one length before averaging, got {sorted(lengths)}"
        )

    first = buffers[0]
    number_of_channels = max_channel_count(buffers)
    output = buffer_factory(
        length=first.length,
        number_of_channels=number_of_channels,
        sample_rate=first.sample_rate,
    )

    for channel in range(number_of_channels):
        accumulator = np.zeros(first.length, dtype=np.float64)
        for buffer in buffers:
            accumulator += channel_or_fallback(buffer, channel)
        output.get_channel_data(channel)[:] = accumulator / len(buffers)

    logger.debug(
        f"Averaged {len(buffers)} buffers into {number_of_channels}ch × {first.length} frames"
    )
    return output

"""Complete averaging pipeline: stretch, equalize loudness, average."""

import logging
from collections.abc import Sequence

from take_average.audio.averaging import average_buffers
from take_average.audio.buffer import AudioBufferLike, BufferFactory, SampleBuffer, create_buffer
from take_average.audio.loudness import normalize_buffers
from take_average.audio.resampling import stretch_buffer
from take_average.errors import InvalidArgumentError
from take_average.utils.logging import log_event

logger = logging.getLogger(__name__)


def average_takes(
    buffers: Sequence[AudioBufferLike],
    *,
    target_length: int | None = None,
    normalize: bool = True,
    buffer_factory: BufferFactory = create_buffer,
) -> SampleBuffer:
    """Combine several takes into one averaged buffer.

    Every take is stretched to ``target_length`` frames (default: the
    shortest take), optionally loudness-matched, then averaged per sample.
    Stretching always produces fresh buffers, so the caller's inputs are
    never modified by normalization.

    Args:
        buffers: Decoded takes sharing one sample rate
        target_length: Frames in the result; defaults to the shortest take
        normalize: Equalize total absolute amplitude before averaging
        buffer_factory: Allocator for intermediate and output buffers

    Returns:
        Averaged buffer

    Raises:
        InvalidArgumentError: If no takes are given, sample rates differ,
            or ``target_length < 1``

    Example:
        >>> from take_average.audio import SampleBuffer
        >>> a = SampleBuffer.from_channels([[1.0, 1.0]], 44100)
        >>> b = SampleBuffer.from_channels([[0.5, 0.5, 0.5]], 44100)
        >>> average_takes([a, b], normalize=False).get_channel_data(0).tolist()
        [0.75, 0.75]
    """
    if not buffers:
        raise InvalidArgumentError("At least one take is required")

    sample_rates = {buffer.sample_rate for buffer in buffers}
    if len(sample_rates) != 1:
        raise InvalidArgumentError(
            f"All takes must share one sample rate, got {sorted(sample_rates)}"
        )

    if target_length is None:
        target_length = min(buffer.length for buffer in buffers)
    if target_length < 1:
        raise InvalidArgumentError(f"Target length must be at least 1, got {target_length}")

    logger.info(f"Stretching {len(buffers)} takes to {target_length} frames")
    stretched = [stretch_buffer(buffer, target_length, buffer_factory) for buffer in buffers]

    if normalize:
        # Mutates the stretched copies only
        normalize_buffers(stretched)

    averaged = average_buffers(stretched, buffer_factory)

    log_event(
        "takes_averaged",
        {
            "takes": len(buffers),
            "input_lengths": [buffer.length for buffer in buffers],
            "target_length": target_length,
            "channels": averaged.number_of_channels,
            "sample_rate": averaged.sample_rate,
            "normalized": normalize,
        },
    )
    return averaged

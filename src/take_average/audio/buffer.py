"""In-memory multi-channel audio buffers.

A ``SampleBuffer`` holds one float32 array per channel, all of the same
length, plus the sample rate they were recorded at. Buffers are treated as
immutable by every pipeline stage except ``normalize_buffers``, which rescales
channel data in place.

New buffers are always obtained through a ``BufferFactory`` so the numeric
code never depends on how a host allocates audio storage.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import ArrayLike, NDArray

from take_average.errors import InvalidArgumentError


@runtime_checkable
class AudioBufferLike(Protocol):
    """Read/write view over multi-channel audio used by the core functions."""

    @property
    def sample_rate(self) -> int: ...

    @property
    def number_of_channels(self) -> int: ...

    @property
    def length(self) -> int: ...

    def get_channel_data(self, channel: int) -> NDArray[np.float32]: ...


class BufferFactory(Protocol):
    """Allocator for zero-initialized buffers of a given shape."""

    def __call__(
        self, *, length: int, number_of_channels: int, sample_rate: int
    ) -> "SampleBuffer": ...


class SampleBuffer:
    """Multi-channel float32 audio block.

    Attributes:
        sample_rate: Frames per second
        number_of_channels: Channel count (>= 1)
        length: Frames per channel

    Example:
        >>> buf = SampleBuffer.from_channels([[0.0, 0.5], [0.0, -0.5]], 44100)
        >>> buf.number_of_channels, buf.length
        (2, 2)
    """

    __slots__ = ("_channels", "_sample_rate")

    def __init__(self, channels: Sequence[NDArray[np.float32]], sample_rate: int) -> None:
        """Wrap existing channel arrays without copying them.

        Args:
            channels: One 1-D float32 array per channel
            sample_rate: Sample rate in Hz

        Raises:
            InvalidArgumentError: If the rate is not positive, no channel is
                given, a channel is not a 1-D float32 array, or channel
                lengths differ
        """
        if sample_rate <= 0:
            raise InvalidArgumentError(f"Sample rate must be positive, got {sample_rate}")
        if len(channels) < 1:
            raise InvalidArgumentError("A buffer needs at least one channel")

        for index, channel in enumerate(channels):
            if not isinstance(channel, np.ndarray) or channel.ndim != 1:
                raise InvalidArgumentError(
                    f"Channel {index} must be a 1-D array, got shape {np.shape(channel)}"
                )
            if channel.dtype != np.float32:
                raise InvalidArgumentError(
                    f"Channel {index} must be float32, got {channel.dtype} "
                    "(use SampleBuffer.from_channels to convert)"
                )

        lengths = {len(channel) for channel in channels}
        if len(lengths) != 1:
            raise InvalidArgumentError(
                f"All channels must have the same length, got {sorted(lengths)}"
            )

        self._channels = list(channels)
        self._sample_rate = int(sample_rate)

    @classmethod
    def from_channels(cls, channels: Sequence[ArrayLike], sample_rate: int) -> "SampleBuffer":
        """Build a buffer from per-channel array-likes, copying into float32."""
        arrays = [np.array(channel, dtype=np.float32).reshape(-1) for channel in channels]
        return cls(arrays, sample_rate)

    @classmethod
    def from_frames(cls, frames: ArrayLike, sample_rate: int) -> "SampleBuffer":
        """Build a buffer from a ``(frames, channels)`` array.

        This is the layout soundfile returns with ``always_2d=True``.
        """
        data = np.asarray(frames, dtype=np.float32)
        if data.ndim == 1:
            data = data[:, np.newaxis]
        if data.ndim != 2:
            raise InvalidArgumentError(f"Expected a 2-D frame array, got {data.ndim} dimensions")
        return cls([np.ascontiguousarray(data[:, c]) for c in range(data.shape[1])], sample_rate)

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def number_of_channels(self) -> int:
        return len(self._channels)

    @property
    def length(self) -> int:
        return len(self._channels[0])

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return self.length / self._sample_rate

    def get_channel_data(self, channel: int) -> NDArray[np.float32]:
        """Return the live array backing ``channel`` (not a copy)."""
        if not 0 <= channel < len(self._channels):
            raise InvalidArgumentError(
                f"Channel {channel} out of range for {len(self._channels)} channels"
            )
        return self._channels[channel]

    def to_frames(self) -> NDArray[np.float32]:
        """Return a ``(length, channels)`` copy with frames interleaved row-wise."""
        return np.stack(self._channels, axis=1)

    def __repr__(self) -> str:
        return (
            f"SampleBuffer(channels={self.number_of_channels}, "
            f"length={self.length}, sample_rate={self.sample_rate})"
        )


def create_buffer(*, length: int, number_of_channels: int, sample_rate: int) -> SampleBuffer:
    """Default ``BufferFactory``: allocate a silent float32 buffer.

    Raises:
        InvalidArgumentError: If the requested shape is invalid
    """
    if length < 0:
        raise InvalidArgumentError(f"Length must be non-negative, got {length}")
    if number_of_channels < 1:
        raise InvalidArgumentError(
            f"Number of channels must be at least 1, got {number_of_channels}"
        )
    channels = [np.zeros(length, dtype=np.float32) for _ in range(number_of_channels)]
    return SampleBuffer(channels, sample_rate)

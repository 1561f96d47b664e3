"""Canonical 16-bit PCM WAV serialization.

The encoder always writes the same 44-byte header (RIFF, ``fmt `` with
PCM format 1 and 16 bits per sample, then ``data``) followed by frames
interleaved channel by channel, little-endian.
"""

import struct

import numpy as np
from numpy.typing import NDArray

from take_average.audio.buffer import AudioBufferLike, SampleBuffer
from take_average.errors import WavFormatError

HEADER_SIZE = 44
BYTES_PER_SAMPLE = 2
BITS_PER_SAMPLE = 16
PCM_FORMAT = 1

_RIFF_HEADER = struct.Struct("<4sI4s")
_CHUNK_HEADER = struct.Struct("<4sI")
_FMT_BODY = struct.Struct("<HHIIHH")


def wav_byte_size(length: int, number_of_channels: int) -> int:
    """Size in bytes of the encoded container.

    Example:
        >>> wav_byte_size(length=48000, number_of_channels=2)  # 1s stereo @ 48kHz
        192044
    """
    return HEADER_SIZE + length * number_of_channels * BYTES_PER_SAMPLE


def float32_to_int16(samples: NDArray[np.float32]) -> NDArray[np.int16]:
    """Clamp to [-1, 1] and scale asymmetrically into the int16 range.

    Negative values scale by 32768 and non-negative values by 32767, so
    -1.0 maps to -32768 and 1.0 to 32767. Fractions truncate toward zero.
    """
    clipped = np.clip(np.asarray(samples, dtype=np.float64), -1.0, 1.0)
    scaled = np.where(clipped < 0, clipped * 32768.0, clipped * 32767.0)
    return scaled.astype(np.int16)


def int16_to_float32(samples: NDArray[np.int16]) -> NDArray[np.float32]:
    """Inverse of :func:`float32_to_int16` up to quantization."""
    widened = samples.astype(np.float64)
    return np.where(widened < 0, widened / 32768.0, widened / 32767.0).astype(np.float32)


def encode_wav(buffer: AudioBufferLike) -> bytes:
    """Serialize ``buffer`` as a 16-bit PCM WAV file.

    The encoder trusts ``buffer.length`` and ``buffer.number_of_channels`` to
    describe the channel arrays; a malformed buffer is a caller bug.

    Args:
        buffer: Buffer to encode

    Returns:
        Complete WAV container, ``wav_byte_size(length, channels)`` bytes long
    """
    number_of_channels = buffer.number_of_channels
    length = buffer.length
    sample_rate = buffer.sample_rate
    data_size = length * number_of_channels * BYTES_PER_SAMPLE
    block_align = number_of_channels * BYTES_PER_SAMPLE

    header = b"".join(
        [
            _RIFF_HEADER.pack(b"RIFF", 36 + data_size, b"WAVE"),
            _CHUNK_HEADER.pack(b"fmt ", _FMT_BODY.size),
            _FMT_BODY.pack(
                PCM_FORMAT,
                number_of_channels,
                sample_rate,
                sample_rate * block_align,
                block_align,
                BITS_PER_SAMPLE,
            ),
            _CHUNK_HEADER.pack(b"data", data_size),
        ]
    )

    frames = np.empty((length, number_of_channels), dtype="<i2")
    for channel in range(number_of_channels):
        frames[:, channel] = float32_to_int16(buffer.get_channel_data(channel)[:length])

    return header + frames.tobytes()


def decode_wav(data: bytes) -> SampleBuffer:
    """Parse a 16-bit PCM WAV container back into a ``SampleBuffer``.

    Chunks other than ``fmt `` and ``data`` are skipped.

    Args:
        data: Complete WAV file contents

    Returns:
        Decoded buffer with float32 channels

    Raises:
        WavFormatError: If the container is not 16-bit PCM WAV or is truncated
    """
    if len(data) < _RIFF_HEADER.size:
        raise WavFormatError(f"WAV data too short: {len(data)} bytes")

    riff, _, wave = _RIFF_HEADER.unpack_from(data, 0)
    if riff != b"RIFF" or wave != b"WAVE":
        raise WavFormatError("Missing RIFF/WAVE header")

    fmt: tuple[int, ...] | None = None
    offset = _RIFF_HEADER.size
    while offset + _CHUNK_HEADER.size <= len(data):
        chunk_id, chunk_size = _CHUNK_HEADER.unpack_from(data, offset)
        body = offset + _CHUNK_HEADER.size

        if chunk_id == b"fmt ":
            if chunk_size < _FMT_BODY.size or body + _FMT_BODY.size > len(data):
                raise WavFormatError("Truncated fmt chunk")
            fmt = _FMT_BODY.unpack_from(data, body)
        elif chunk_id == b"data":
            if fmt is None:
                raise WavFormatError("data chunk precedes fmt chunk")
            if body + chunk_size > len(data):
                raise WavFormatError(
                    f"Truncated data chunk: expected {chunk_size} bytes, "
                    f"got {len(data) - body}"
                )
            return _decode_samples(fmt, data[body : body + chunk_size])

        # Chunks are word-aligned
        offset = body + chunk_size + (chunk_size & 1)

    raise WavFormatError("No data chunk found")


def _decode_samples(fmt: tuple[int, ...], payload: bytes) -> SampleBuffer:
    audio_format, number_of_channels, sample_rate, _, block_align, bits_per_sample = fmt
    if audio_format != PCM_FORMAT:
        raise WavFormatError(f"Unsupported audio format {audio_format}, expected PCM")
    if bits_per_sample != BITS_PER_SAMPLE:
        raise WavFormatError(f"Unsupported bit depth {bits_per_sample}, expected 16")
    if number_of_channels < 1 or block_align != number_of_channels * BYTES_PER_SAMPLE:
        raise WavFormatError(
            f"Inconsistent channel layout: channels={number_of_channels}, "
            f"block_align={block_align}"
        )
    if len(payload) % block_align != 0:
        raise WavFormatError(f"data chunk is not a whole number of {block_align}-byte frames")

    frames = np.frombuffer(payload, dtype="<i2").reshape(-1, number_of_channels)
    channels = [int16_to_float32(frames[:, c]) for c in range(number_of_channels)]
    return SampleBuffer(channels, sample_rate)

"""Audio buffers, stretching, loudness matching, averaging and WAV encoding."""

from .averaging import average_buffers
from .buffer import AudioBufferLike, BufferFactory, SampleBuffer, create_buffer
from .channels import channel_or_fallback, max_channel_count
from .loudness import buffer_strength, normalize_buffers
from .resampling import stretch, stretch_buffer
from .wav import decode_wav, encode_wav, wav_byte_size

__all__ = [
    # Buffers
    "AudioBufferLike",
    "BufferFactory",
    "SampleBuffer",
    "create_buffer",
    # Stretching
    "stretch",
    "stretch_buffer",
    # Channel reconciliation
    "channel_or_fallback",
    "max_channel_count",
    # Loudness
    "buffer_strength",
    "normalize_buffers",
    # Averaging
    "average_buffers",
    # WAV container
    "encode_wav",
    "decode_wav",
    "wav_byte_size",
]

"""Average several takes of a shared recording into one WAV file.

The numeric core lives in :mod:`take_average.audio`; :func:`average_takes`
runs the complete stretch, normalize, average sequence.
"""

from take_average.audio import SampleBuffer, encode_wav
from take_average.errors import InvalidArgumentError, WavFormatError
from take_average.naming import suggest_out_name
from take_average.pipeline import average_takes

__all__ = [
    "InvalidArgumentError",
    "SampleBuffer",
    "WavFormatError",
    "average_takes",
    "encode_wav",
    "suggest_out_name",
]

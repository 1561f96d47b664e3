"""Command-line front end for averaging takes.

Decodes every input file with soundfile, averages the takes and writes the
result as a 16-bit PCM WAV file.

Usage:
    take-average take1.wav take2.flac -o average.wav
"""

import argparse
import logging
import sys
from pathlib import Path

import soundfile as sf

from take_average.audio.buffer import SampleBuffer
from take_average.audio.wav import encode_wav
from take_average.config import TakeAverageConfig
from take_average.errors import InvalidArgumentError
from take_average.formatting import bytes_human, human_time
from take_average.naming import suggest_out_name
from take_average.pipeline import average_takes
from take_average.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def load_take(path: Path) -> SampleBuffer:
    """Decode an audio file into a float32 ``SampleBuffer``."""
    frames, sample_rate = sf.read(str(path), dtype="float32", always_2d=True)
    buffer = SampleBuffer.from_frames(frames, sample_rate)
    logger.info(
        f"Loaded {path.name}: {buffer.number_of_channels}ch, {buffer.sample_rate}Hz, "
        f"{human_time(buffer.duration)}"
    )
    return buffer


def load_takes(paths: list[Path], required_rate: int | None = None) -> list[SampleBuffer]:
    """Decode all takes and check they share one sample rate.

    Raises:
        InvalidArgumentError: If a take's sample rate differs
    """
    takes = [load_take(path) for path in paths]
    expected = required_rate if required_rate is not None else takes[0].sample_rate
    for path, take in zip(paths, takes, strict=True):
        if take.sample_rate != expected:
            raise InvalidArgumentError(
                f"{path.name} is {take.sample_rate}Hz, expected {expected}Hz"
            )
    return takes


def run(args: argparse.Namespace) -> Path:
    """Average the takes named in ``args`` and write the WAV file.

    Returns:
        Path of the written file
    """
    config = TakeAverageConfig.from_yaml_with_defaults(args.config)
    setup_logging(
        "DEBUG" if args.verbose else config.logging.level,
        json_format=config.logging.use_json,
    )

    if args.length is not None:
        config.averaging.target_length = args.length
    if args.no_normalize:
        config.averaging.normalize = False

    takes = load_takes(args.inputs, config.decoding.sample_rate)
    target_length = config.averaging.resolve_length([take.length for take in takes])

    averaged = average_takes(
        takes,
        target_length=target_length,
        normalize=config.averaging.normalize,
    )
    encoded = encode_wav(averaged)

    output = args.output or Path(suggest_out_name(*(path.name for path in args.inputs)))
    output.write_bytes(encoded)
    logger.info(
        f"Wrote {output} ({human_time(averaged.duration)}, {bytes_human(len(encoded))})"
    )
    return output


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Average several takes of the same recording into one WAV file"
    )
    parser.add_argument(
        "inputs",
        nargs="+",
        type=Path,
        help="Audio files to average",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output WAV path (default: derived from input names)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file",
    )
    parser.add_argument(
        "--length",
        type=int,
        default=None,
        help="Frames in the averaged output (default: shortest take)",
    )
    parser.add_argument(
        "--no-normalize",
        action="store_true",
        help="Skip loudness equalization before averaging",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the take-average CLI."""
    args = build_parser().parse_args(argv)

    try:
        run(args)
    except (ValueError, OSError, RuntimeError) as e:
        logger.error(f"Averaging failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

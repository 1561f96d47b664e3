"""Output file naming."""

import re

SEPARATOR = "__AVERAGE__"
OUTPUT_EXTENSION = ".wav"
DEFAULT_BASE_NAME = "average"

_EXTENSION_RE = re.compile(r"\.[^/.]+$")


def suggest_out_name(*names: str) -> str:
    """Derive the averaged file's name from the input names.

    Examples:
        >>> suggest_out_name("a.mp3", "b.wav")
        'a__AVERAGE__b.wav'
        >>> suggest_out_name()
        'average.wav'
    """
    bases = [_EXTENSION_RE.sub("", name) for name in names if name]
    bases = [base for base in bases if base]
    return (SEPARATOR.join(bases) or DEFAULT_BASE_NAME) + OUTPUT_EXTENSION

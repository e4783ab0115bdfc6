"""Character input layer: decoding caller-supplied input into text."""

from .decoding import BOMDetector, DecodedText, InputType, decode_input, read_source

__all__ = [
    "BOMDetector",
    "DecodedText",
    "InputType",
    "decode_input",
    "read_source",
]

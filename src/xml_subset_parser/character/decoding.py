"""Input normalisation: turn whatever the caller supplies into text.

The tokenizer works on Unicode text. Byte input is decoded as UTF-8 unless a
byte order mark names another Unicode encoding.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, ClassVar, Optional, TextIO, Tuple, Union

from xml_subset_parser.shared import InputDecodingError

InputType = Union[str, bytes, Path, BinaryIO, TextIO]

DEFAULT_ENCODING = "utf-8"


@dataclass
class DecodedText:
    """Text ready for tokenization plus how it was obtained."""

    text: str
    encoding: Optional[str] = None
    had_bom: bool = False


class BOMDetector:
    """Byte Order Mark (BOM) detection for the Unicode encodings."""

    # Longer patterns first: the UTF-32-LE mark starts with the UTF-16-LE one
    BOM_PATTERNS: ClassVar[Tuple[Tuple[bytes, str], ...]] = (
        (b"\xff\xfe\x00\x00", "utf-32-le"),
        (b"\x00\x00\xfe\xff", "utf-32-be"),
        (b"\xef\xbb\xbf", "utf-8"),
        (b"\xff\xfe", "utf-16-le"),
        (b"\xfe\xff", "utf-16-be"),
    )

    def detect(self, data: bytes) -> Optional[Tuple[str, int]]:
        """Return ``(encoding, bom_length)`` if ``data`` starts with a BOM."""
        for bom_bytes, encoding in self.BOM_PATTERNS:
            if data.startswith(bom_bytes):
                return encoding, len(bom_bytes)
        return None


_detector = BOMDetector()


def decode_input(data: Union[str, bytes], encoding: Optional[str] = None) -> DecodedText:
    """Decode ``data`` into text.

    Args:
        data: Text (returned unchanged) or bytes
        encoding: Explicit encoding, overriding BOM detection

    Raises:
        InputDecodingError: if the bytes are not valid in the chosen encoding
    """
    if isinstance(data, str):
        return DecodedText(text=data)

    if not isinstance(data, (bytes, bytearray)):
        raise TypeError(f"Expected str or bytes, got {type(data).__name__}")

    payload = bytes(data)
    had_bom = False
    if encoding is None:
        detected = _detector.detect(payload)
        if detected is not None:
            encoding, bom_length = detected
            payload = payload[bom_length:]
            had_bom = True
        else:
            encoding = DEFAULT_ENCODING

    try:
        text = payload.decode(encoding)
    except UnicodeDecodeError as e:
        raise InputDecodingError(
            f"Input is not valid {encoding}: {e.reason} at byte {e.start}",
            encoding=encoding,
        ) from e
    except LookupError as e:
        raise InputDecodingError(f"Unknown encoding `{encoding}`", encoding=encoding) from e

    return DecodedText(text=text, encoding=encoding, had_bom=had_bom)


def read_source(source: InputType, encoding: Optional[str] = None) -> DecodedText:
    """Read text from a string, bytes, a path or a file-like object."""
    if isinstance(source, (str, bytes, bytearray)):
        return decode_input(source, encoding)
    if isinstance(source, Path):
        return decode_input(source.read_bytes(), encoding)
    if hasattr(source, "read"):
        return decode_input(source.read(), encoding)
    raise TypeError(f"Unsupported input type: {type(source).__name__}")


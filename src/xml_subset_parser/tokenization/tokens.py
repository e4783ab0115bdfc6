"""Token types produced by the tokenizer."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Union


class Attribute(NamedTuple):
    """One ``name`` / ``value`` pair of a tag; ``value`` is None for a bare flag."""

    name: str
    value: Optional[str] = None

    @property
    def is_boolean(self) -> bool:
        """True for a flag attribute written without ``=value``."""
        return self.value is None

    def __str__(self) -> str:
        if self.value is None:
            return self.name
        return f"{self.name}={self.value!r}"


@dataclass(frozen=True)
class TokenPosition:
    """Position information for tokens (1-based line/column, 0-based offset)."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "column": self.column, "offset": self.offset}


@dataclass
class TextToken:
    """Character data between tags, with entities already expanded."""

    text: str
    position: Optional[TokenPosition] = field(default=None, compare=False)

    def __str__(self) -> str:
        return repr(self.text)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass
class TagToken:
    """One ``<...>`` region: opening, closing or (optionally) self-closing."""

    is_closing: bool
    name: str
    attributes: List[Attribute] = field(default_factory=list)
    self_closing: bool = False
    position: Optional[TokenPosition] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Tag name cannot be empty")

    @property
    def is_prolog(self) -> bool:
        return self.name == PROLOG_TAG_NAME

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute.value
        return default

    def __str__(self) -> str:
        parts = [("/" if self.is_closing else "") + self.name]
        parts.extend(
            attr.name if attr.value is None else f'{attr.name}="{attr.value}"'
            for attr in self.attributes
        )
        return "<" + " ".join(parts) + ("/>" if self.self_closing else ">")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "tag",
            "is_closing": self.is_closing,
            "self_closing": self.self_closing,
            "name": self.name,
            "attributes": [list(attr) for attr in self.attributes],
        }


Token = Union[TextToken, TagToken]

PROLOG_TAG_NAME = "?xml"

"""Error kinds and exception types for XML subset parsing.

Every failure raised by the tokenizer, the tag-interior parser and the tree
builder is a ``ParseError`` subclass carrying a machine-checkable ``ErrorKind``,
the human-readable message and, where known, the source position of the
offending token. Callers should match on ``kind`` rather than message wording.
"""

from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from xml_subset_parser.tokenization.tokens import TokenPosition


class ErrorKind(Enum):
    """Kinds of structural failure a parse can halt on."""

    # Character scanner
    LEX_UNEXPECTED_CHAR = auto()        # `<` inside a tag, `>` outside one
    LEX_UNTERMINATED_TAG = auto()       # end of input inside a tag
    LEX_UNTERMINATED_ENTITY = auto()    # dangling `&name` under the error policy

    # Tag interior and attributes
    TAG_MALFORMED = auto()              # leading whitespace, whitespace after `/`
    ATTR_EXPECTED_KEY = auto()          # `=` where a key was expected
    ATTR_EXPECTED_QUOTE = auto()        # non-quote (or end) after `=`
    ATTR_UNTERMINATED_VALUE = auto()    # end of tag inside a quoted value

    # Tree builder
    TREE_PROLOG_OUT_OF_PLACE = auto()
    TREE_MISMATCHED_CLOSE = auto()
    TREE_UNEXPECTED_CLOSE = auto()
    TREE_MULTIPLE_ROOTS = auto()
    TREE_UNEXPECTED_EOF = auto()
    TREE_DEPTH_EXCEEDED = auto()
    TREE_MISSING_ROOT = auto()

    # Input layer
    INPUT_DECODING = auto()

    @property
    def stage(self) -> str:
        """Pipeline stage that reports this kind."""
        if self.name.startswith("TREE_"):
            return "tree"
        if self is ErrorKind.INPUT_DECODING:
            return "input"
        return "tokenization"


class ParseError(Exception):
    """Base class for every fatal parsing failure."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        position: Optional["TokenPosition"] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.position = position

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.name}, {self.message!r})"

    @property
    def location(self) -> Optional[str]:
        """Render the position as ``line L, column C`` if one is known."""
        if self.position is None:
            return None
        return f"line {self.position.line}, column {self.position.column}"

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation of the error."""
        result: Dict[str, Any] = {
            "kind": self.kind.name,
            "stage": self.kind.stage,
            "message": self.message,
        }
        if self.position is not None:
            result["position"] = self.position.to_dict()
        return result


class TokenizationError(ParseError):
    """Raised by the character scanner and the tag-interior parser."""


class TreeBuildError(ParseError):
    """Raised by the tree builder on a structural violation."""


class InputDecodingError(ParseError):
    """Raised when byte input cannot be decoded to text."""

    def __init__(self, message: str, encoding: Optional[str] = None) -> None:
        super().__init__(ErrorKind.INPUT_DECODING, message)
        self.encoding = encoding

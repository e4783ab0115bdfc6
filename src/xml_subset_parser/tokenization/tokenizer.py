"""Character scanner turning text into text and tag tokens.

The scanner is single-pass over the input with a constant lookahead for the
comment delimiters. It keeps one accumulator for the current token and a
three-way state: character data, tag interior, or comment. A comment
remembers which of the other two states to resume once it closes, so a
comment inside a tag interior does not end the tag.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from xml_subset_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ErrorKind,
    TokenizationConfig,
    TokenizationError,
    get_logger,
)

from .entities import expand_entities
from .tags import TagParser
from .tokens import TagToken, TextToken, Token, TokenPosition

COMMENT_START = "<!--"
COMMENT_END = "-->"

MS_PER_SECOND = 1000


class TokenizerState(Enum):
    """State machine states for tokenization."""

    TEXT = auto()       # Accumulating character data
    TAG = auto()        # Accumulating a tag interior after `<`
    COMMENT = auto()    # Inside `<!-- ... -->`, nothing accumulated


@dataclass
class TokenizationResult:
    """Tokens produced by one tokenization plus advisory diagnostics."""

    tokens: List[Token]
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    character_count: int = 0
    processing_time_ms: float = 0.0

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    @property
    def text_tokens(self) -> List[TextToken]:
        return [token for token in self.tokens if isinstance(token, TextToken)]

    @property
    def tag_tokens(self) -> List[TagToken]:
        return [token for token in self.tokens if isinstance(token, TagToken)]

    @property
    def warnings(self) -> List[DiagnosticEntry]:
        return [
            diag for diag in self.diagnostics
            if diag.severity is DiagnosticSeverity.WARNING
        ]


class XMLTokenizer:
    """Converts a character sequence into an ordered list of tokens.

    Example:
        >>> result = XMLTokenizer().tokenize('<a k="v">hi</a>')
        >>> [str(token) for token in result.tokens]
        ['<a k="v">', "'hi'", '</a>']
    """

    def __init__(
        self,
        config: Optional[TokenizationConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the tokenizer.

        Args:
            config: Tokenization configuration (defaults to ``TokenizationConfig()``)
            correlation_id: Optional correlation ID for tracking requests
        """
        self.config = config or TokenizationConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_tokenizer")
        self._tag_parser = TagParser(
            self.config, on_unknown_entity=self._report_unknown_entity
        )
        self._reset_state()

    def _reset_state(self) -> None:
        self.state = TokenizerState.TEXT
        self._resume_state = TokenizerState.TEXT
        self._buffer: List[str] = []
        self.tokens: List[Token] = []
        self.diagnostics: List[DiagnosticEntry] = []

        self._line = 1
        self._column = 1
        self._offset = 0
        self._token_start: Optional[TokenPosition] = None
        self._comment_start: Optional[TokenPosition] = None

    def tokenize(self, text: str) -> TokenizationResult:
        """Tokenize ``text``.

        Raises:
            TokenizationError: at the first lexical, tag or attribute error
        """
        start_time = time.time()
        self._reset_state()

        self.logger.debug("Starting tokenization", extra={"char_count": len(text)})

        try:
            self._scan(text)
            self._finish()
        except TokenizationError as e:
            self.logger.info(
                "Tokenization halted",
                extra={
                    "error_kind": e.kind.name,
                    "error_message": e.message,
                    "position": e.position.to_dict() if e.position else None,
                },
            )
            raise

        processing_time = (time.time() - start_time) * MS_PER_SECOND
        result = TokenizationResult(
            tokens=self.tokens,
            diagnostics=self.diagnostics,
            character_count=len(text),
            processing_time_ms=processing_time,
        )

        self.logger.debug(
            "Tokenization completed",
            extra={
                "token_count": result.token_count,
                "warning_count": len(result.warnings),
                "processing_time_ms": processing_time,
            },
        )
        return result

    def _scan(self, text: str) -> None:
        index = 0
        length = len(text)
        while index < length:
            if self.state is TokenizerState.COMMENT:
                if text.startswith(COMMENT_END, index):
                    self._skip(len(COMMENT_END))
                    index += len(COMMENT_END)
                    self.state = self._resume_state
                    continue
            elif text.startswith(COMMENT_START, index):
                self._comment_start = self._position()
                self._resume_state = self.state
                self.state = TokenizerState.COMMENT
                self._skip(len(COMMENT_START))
                index += len(COMMENT_START)
                continue

            char = text[index]
            if self.state is not TokenizerState.COMMENT:
                self._process_character(char)
            self._advance(char)
            index += 1

    def _process_character(self, char: str) -> None:
        if char == "<":
            if self.state is TokenizerState.TAG:
                raise TokenizationError(
                    ErrorKind.LEX_UNEXPECTED_CHAR, "Unexpected `<`", self._position()
                )
            self._flush_text()
            self.state = TokenizerState.TAG
            self._token_start = self._position()

        elif char == ">":
            if self.state is TokenizerState.TEXT:
                raise TokenizationError(
                    ErrorKind.LEX_UNEXPECTED_CHAR, "Unexpected `>`", self._position()
                )
            if self._buffer:
                self.tokens.append(
                    self._tag_parser.parse("".join(self._buffer), self._token_start)
                )
            self._buffer = []
            self.state = TokenizerState.TEXT
            self._token_start = None

        else:
            if not self._buffer and self.state is TokenizerState.TEXT:
                self._token_start = self._position()
            self._buffer.append(char)

    def _finish(self) -> None:
        in_tag = self.state is TokenizerState.TAG
        if self.state is TokenizerState.COMMENT:
            in_tag = self._resume_state is TokenizerState.TAG
            self._add_diagnostic(
                "Unterminated comment runs to end of input",
                self._comment_start,
            )

        if in_tag:
            if self._buffer:
                raise TokenizationError(
                    ErrorKind.LEX_UNTERMINATED_TAG,
                    "Unexpected end of file. Expected `>`",
                    self._token_start,
                )
            return

        self._flush_text()

    def _flush_text(self) -> None:
        content = "".join(self._buffer)
        self._buffer = []
        if not content.strip():
            return

        try:
            expanded = expand_entities(
                content,
                policy=self.config.dangling_entity_policy,
                on_unknown=self._report_unknown_entity,
            )
        except TokenizationError as e:
            if e.position is None:
                e.position = self._token_start
            raise

        self.tokens.append(TextToken(expanded, self._token_start))

    def _report_unknown_entity(self, reference: str) -> None:
        if self.config.warn_unknown_entities:
            self._add_diagnostic(f"Unknown text entity `{reference}`", self._token_start)

    def _add_diagnostic(self, message: str, position: Optional[TokenPosition]) -> None:
        self.logger.warning(
            message,
            extra={"position": position.to_dict() if position else None},
        )
        self.diagnostics.append(DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            message=message,
            component="xml_tokenizer",
            position=position.to_dict() if position else None,
            correlation_id=self.correlation_id,
        ))

    def _position(self) -> Optional[TokenPosition]:
        if not self.config.track_positions:
            return None
        return TokenPosition(self._line, self._column, self._offset)

    def _advance(self, char: str) -> None:
        self._offset += 1
        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

    def _skip(self, count: int) -> None:
        # Comment delimiters never contain a newline
        self._offset += count
        self._column += count


def tokenize_text(text: str, config: Optional[TokenizationConfig] = None) -> List[Token]:
    """Tokenize ``text`` with a throwaway tokenizer and return the tokens."""
    return XMLTokenizer(config).tokenize(text).tokens

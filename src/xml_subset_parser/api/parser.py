"""Core parser API for XML subset parsing.

Two levels of use:

- Level 1: pipeline functions - ``tokenize()``, ``build_tree()``, ``parse()``,
  ``parse_string()``, ``parse_file()``. They return plain results and raise a
  ``ParseError`` subclass at the first structural error.
- Level 2: ``XMLSubsetParser`` - a reusable, configured front end that never
  raises for bad input and instead returns a ``ParseResult`` carrying the
  document or the error together with diagnostics and timing.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from xml_subset_parser.character import InputType, read_source
from xml_subset_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ErrorKind,
    ParseError,
    ParserConfig,
    PerformanceMetrics,
    get_logger,
)
from xml_subset_parser.tokenization import Token, TokenizationResult, XMLTokenizer
from xml_subset_parser.tree import Document, XMLTreeBuilder

PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000


def tokenize(
    text: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> List[Token]:
    """Run stage 1: text to tokens.

    Examples:
        >>> [str(token) for token in tokenize("<t>5 &lt; 6</t>")]
        ['<t>', "'5 < 6'", '</t>']
    """
    config = config or ParserConfig()
    tokenizer = XMLTokenizer(config.tokenization, correlation_id or config.correlation_id)
    return tokenizer.tokenize(text).tokens


def build_tree(
    tokens: Union[TokenizationResult, Sequence[Token]],
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> Document:
    """Run stage 2: tokens to document tree."""
    config = config or ParserConfig()
    builder = XMLTreeBuilder(config.tree, correlation_id or config.correlation_id)
    return builder.build(tokens)


def parse_string(
    xml_string: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> Document:
    """Parse a document held in a string.

    Examples:
        >>> document = parse_string('<?xml version="1.0"?><r><c k="v">hi</c></r>')
        >>> document.version
        '1.0'
        >>> document.find("c").get_attribute("k")
        'v'
    """
    config = config or ParserConfig()
    correlation_id = correlation_id or config.correlation_id
    logger = get_logger(__name__, correlation_id, "parse_string")

    logger.debug(
        "Starting string parse operation",
        extra={
            "content_length": len(xml_string),
            "preview": (
                xml_string[:PREVIEW_LENGTH] + "..."
                if len(xml_string) > PREVIEW_LENGTH else xml_string
            ),
        },
    )

    tokenization_result = XMLTokenizer(config.tokenization, correlation_id).tokenize(
        xml_string
    )
    return XMLTreeBuilder(config.tree, correlation_id).build(tokenization_result)


def parse(
    source: InputType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> Document:
    """Parse a document from a string, bytes, a ``Path`` or a file-like object.

    Raises:
        ParseError: a TokenizationError, TreeBuildError or InputDecodingError
    """
    decoded = read_source(source)
    return parse_string(decoded.text, config, correlation_id)


def parse_file(
    file_path: Union[str, Path],
    encoding: Optional[str] = None,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> Document:
    """Parse a document stored in a file.

    Args:
        file_path: Path to the file
        encoding: Optional encoding override (BOM detection, then UTF-8, otherwise)
        config: Parser configuration
        correlation_id: Optional correlation ID for request tracking
    """
    path = Path(file_path)
    decoded = read_source(path, encoding)

    get_logger(__name__, correlation_id, "parse_file").debug(
        "File read",
        extra={"file_path": str(path), "encoding": decoded.encoding},
    )
    return parse_string(decoded.text, config, correlation_id)


@dataclass
class ParseResult:
    """Outcome of one ``XMLSubsetParser.parse`` call.

    Exactly one of ``document`` and ``error`` is set.
    """

    success: bool = False
    document: Optional[Document] = None
    tokens: List[Token] = field(default_factory=list)
    error: Optional[ParseError] = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None

    @property
    def element_count(self) -> int:
        return self.document.element_count if self.document else 0

    @property
    def warnings(self) -> List[DiagnosticEntry]:
        return self.get_diagnostics_by_severity(DiagnosticSeverity.WARNING)

    def get_diagnostics_by_severity(
        self, severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id,
        ))

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready summary of the result."""
        return {
            "success": self.success,
            "document": self.document.to_dict() if self.document else None,
            "error": self.error.to_dict() if self.error else None,
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
            "token_count": len(self.tokens),
            "element_count": self.element_count,
            "processing_time_ms": self.performance.processing_time_ms,
        }


class XMLSubsetParser:
    """Configured, reusable parser that reports failures as results.

    Examples:
        >>> parser = XMLSubsetParser()
        >>> parser.parse("<a><b></a></b>").error_kind.name
        'TREE_MISMATCHED_CLOSE'
        >>> parser.parse("<root></root>").success
        True
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "xml_subset_parser")
        self._build_components()
        self.reset_statistics()

    def _build_components(self) -> None:
        self._tokenizer = XMLTokenizer(self.config.tokenization, self.correlation_id)
        self._tree_builder = XMLTreeBuilder(self.config.tree, self.correlation_id)

    def parse(self, input_data: InputType) -> ParseResult:
        """Parse ``input_data``; structural errors land in ``ParseResult.error``."""
        start_time = time.time()
        result = ParseResult(correlation_id=self.correlation_id)

        text: Optional[str] = None
        try:
            text = read_source(input_data).text
        except ParseError as e:
            self._record_error(result, e)
        except (OSError, TypeError) as e:
            self.logger.exception("Could not read parser input")
            result.add_diagnostic(
                DiagnosticSeverity.CRITICAL,
                f"Could not read input: {e}",
                "xml_subset_parser",
                details={"exception_type": type(e).__name__},
            )

        if text is not None:
            result.performance.characters_processed = len(text)
            try:
                tokenization_result = self._tokenizer.tokenize(text)
                result.tokens = tokenization_result.tokens
                result.diagnostics.extend(tokenization_result.diagnostics)
                result.performance.tokens_generated = tokenization_result.token_count

                result.document = self._tree_builder.build(tokenization_result)
                result.performance.elements_built = self._tree_builder.elements_built
                result.success = True
            except ParseError as e:
                self._record_error(result, e)

        processing_time = (time.time() - start_time) * MS_PER_SECOND
        result.performance.processing_time_ms = processing_time

        self._parse_count += 1
        self._total_processing_time += processing_time
        if result.success:
            self._successful_parses += 1

        self.logger.debug(
            "Parse completed",
            extra={
                "success": result.success,
                "error_kind": result.error_kind.name if result.error_kind else None,
                "processing_time_ms": processing_time,
                "total_parses": self._parse_count,
            },
        )
        return result

    @staticmethod
    def _record_error(result: ParseResult, error: ParseError) -> None:
        result.error = error
        result.add_diagnostic(
            DiagnosticSeverity.ERROR,
            error.message,
            f"xml_{error.kind.stage}",
            position=error.position.to_dict() if error.position else None,
            details={"kind": error.kind.name},
        )

    def reconfigure(self, config: ParserConfig) -> None:
        """Replace the configuration; statistics are kept."""
        self.config = config
        self._build_components()
        self.logger.debug("Parser reconfigured", extra={"config_name": config.name})

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._total_processing_time = 0.0
        self._successful_parses = 0

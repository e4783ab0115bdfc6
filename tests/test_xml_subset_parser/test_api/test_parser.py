"""Tests for the public parsing API."""

import io
import logging

import pytest

from xml_subset_parser import (
    Document,
    ParseResult,
    XMLSubsetParser,
    build_tree,
    parse,
    parse_file,
    parse_string,
    tokenize,
)
from xml_subset_parser.shared import (
    DiagnosticSeverity,
    ErrorKind,
    InputDecodingError,
    ParserConfig,
    TokenizationError,
    TreeBuildError,
    TreeConfig,
)

NESTED = '<?xml version="1.0"?><r><c k="v">hi</c></r>'


class TestPipelineFunctions:
    """Test the Level 1 functions."""

    def test_tokenize_then_build_tree(self):
        """Test the two stages composed by hand."""
        document = build_tree(tokenize(NESTED))

        assert document.version == "1.0"
        assert document.find("c").text == "hi"

    def test_parse_string(self):
        """Test the composed convenience function."""
        document = parse_string("<root></root>")

        assert isinstance(document, Document)
        assert document.root.tag_name == "root"

    def test_parse_accepts_bytes_and_streams(self):
        """Test parse() over bytes and file-like input."""
        assert parse(NESTED.encode("utf-8")).version == "1.0"
        assert parse(io.StringIO(NESTED)).find("c").get_attribute("k") == "v"

    def test_parse_file(self, tmp_path):
        """Test parsing from a path."""
        path = tmp_path / "doc.xml"
        path.write_text(NESTED, encoding="utf-8")

        assert parse_file(path).root.tag_name == "r"
        assert parse_file(str(path), encoding="utf-8").version == "1.0"

    def test_config_is_applied(self):
        """Test configuration flows to both stages."""
        config = ParserConfig.extended()

        document = parse_string('<r><br/><a k="&amp;"></a></r>', config)

        assert [e.tag_name for e in document.root.elements] == ["br", "a"]
        assert document.find("a").get_attribute("k") == "&"

    def test_tokenization_error_raised(self):
        """Test scanner errors propagate from parse_string."""
        with pytest.raises(TokenizationError) as exc_info:
            parse_string("<r>a > b</r>")

        assert exc_info.value.kind is ErrorKind.LEX_UNEXPECTED_CHAR

    def test_tree_error_raised(self):
        """Test builder errors propagate from parse_string."""
        with pytest.raises(TreeBuildError, match="Mismatched closing tag"):
            parse_string("<a><b></a></b>")

    def test_decoding_error_raised(self):
        """Test undecodable bytes raise InputDecodingError."""
        with pytest.raises(InputDecodingError):
            parse(b"<r>\xff</r>")


class TestXMLSubsetParser:
    """Test the Level 2 parser."""

    def test_successful_parse(self):
        """Test a successful result."""
        result = XMLSubsetParser().parse(NESTED)

        assert result.success is True
        assert result.error is None
        assert result.error_kind is None
        assert result.document.version == "1.0"
        assert result.element_count == 2
        assert len(result.tokens) == 6
        assert result.performance.characters_processed == len(NESTED)
        assert result.performance.tokens_generated == 6
        assert result.performance.elements_built == 2

    def test_failed_parse_does_not_raise(self):
        """Test a structural error lands in the result."""
        result = XMLSubsetParser().parse("<a><b></a></b>")

        assert result.success is False
        assert result.document is None
        assert result.error_kind is ErrorKind.TREE_MISMATCHED_CLOSE

        errors = result.get_diagnostics_by_severity(DiagnosticSeverity.ERROR)
        assert len(errors) == 1
        assert errors[0].component == "xml_tree"
        assert errors[0].details == {"kind": "TREE_MISMATCHED_CLOSE"}
        assert errors[0].position == {"line": 1, "column": 7, "offset": 6}

    def test_tokenization_failure_keeps_no_tokens(self):
        """Test a scanner failure reports the tokenization stage."""
        result = XMLSubsetParser().parse("<a<b>")

        assert result.error_kind is ErrorKind.LEX_UNEXPECTED_CHAR
        assert result.tokens == []
        assert result.diagnostics[-1].component == "xml_tokenization"

    def test_warnings_are_collected(self):
        """Test advisory tokenizer warnings reach the result."""
        result = XMLSubsetParser().parse("<t>&nbsp;</t>")

        assert result.success is True
        assert [w.message for w in result.warnings] == ["Unknown text entity `&nbsp;`"]

    def test_unreadable_input(self, caplog):
        """Test unsupported input types become a critical diagnostic."""
        caplog.set_level(logging.ERROR)

        result = XMLSubsetParser(correlation_id="req-7").parse(12345)  # type: ignore[arg-type]

        assert result.success is False
        assert result.error is None
        critical = result.get_diagnostics_by_severity(DiagnosticSeverity.CRITICAL)
        assert critical[0].details == {"exception_type": "TypeError"}
        assert critical[0].correlation_id == "req-7"
        assert caplog.records[-1].correlation_id == "req-7"

    def test_deep_nesting_with_raised_limit(self):
        """Test deep well-formed input succeeds instead of exhausting the stack."""
        depth = 5000
        parser = XMLSubsetParser(ParserConfig(tree=TreeConfig(max_depth=100000)))

        result = parser.parse("<a>" * depth + "</a>" * depth)

        assert result.success is True
        assert result.element_count == depth
        assert result.performance.elements_built == depth

    def test_internal_errors_are_not_reported_as_input_errors(self, monkeypatch):
        """Test a TypeError raised after the input is read propagates."""
        parser = XMLSubsetParser()

        def broken_tokenize(text):
            raise TypeError("tokenizer bug")

        monkeypatch.setattr(parser._tokenizer, "tokenize", broken_tokenize)

        with pytest.raises(TypeError, match="tokenizer bug"):
            parser.parse("<r></r>")

    def test_statistics(self):
        """Test usage statistics and reset."""
        parser = XMLSubsetParser()
        parser.parse("<r></r>")
        parser.parse("<r>")

        stats = parser.statistics
        assert stats["total_parses"] == 2
        assert stats["successful_parses"] == 1
        assert stats["success_rate"] == 0.5

        parser.reset_statistics()
        assert parser.statistics["total_parses"] == 0
        assert parser.statistics["average_processing_time_ms"] == 0.0

    def test_reconfigure(self):
        """Test a new configuration takes effect on the next parse."""
        parser = XMLSubsetParser()
        assert parser.parse("<br/>").success is False

        parser.reconfigure(ParserConfig.extended())

        assert parser.parse("<br/>").success is True
        assert parser.statistics["total_parses"] == 2

    def test_correlation_id_from_config(self):
        """Test the config correlation ID is used when none is passed."""
        parser = XMLSubsetParser(ParserConfig(correlation_id="cfg-1"))

        assert parser.parse("<r></r>").correlation_id == "cfg-1"


class TestParseResult:
    """Test ParseResult helpers."""

    def test_to_dict_success(self):
        """Test the JSON-ready summary of a success."""
        data = XMLSubsetParser().parse("<r>x</r>").to_dict()

        assert data["success"] is True
        assert data["error"] is None
        assert data["token_count"] == 3
        assert data["element_count"] == 1
        assert data["document"]["children"][0]["tag_name"] == "r"

    def test_to_dict_failure(self):
        """Test the JSON-ready summary of a failure."""
        data = XMLSubsetParser().parse("</x>").to_dict()

        assert data["document"] is None
        assert data["error"]["kind"] == "TREE_UNEXPECTED_CLOSE"
        assert data["diagnostics"][0]["severity"] == "ERROR"

    def test_add_diagnostic(self):
        """Test diagnostics inherit the result's correlation ID."""
        result = ParseResult(correlation_id="abc")
        result.add_diagnostic(DiagnosticSeverity.INFO, "note", "caller")

        assert result.diagnostics[0].correlation_id == "abc"
        assert result.element_count == 0

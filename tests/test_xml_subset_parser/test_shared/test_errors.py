"""Tests for error kinds and exception types."""

import pytest

from xml_subset_parser.shared import (
    ErrorKind,
    InputDecodingError,
    ParseError,
    TokenizationError,
    TreeBuildError,
)
from xml_subset_parser.tokenization import TokenPosition


class TestErrorKind:
    """Test ErrorKind stage classification."""

    @pytest.mark.parametrize("kind", [
        ErrorKind.LEX_UNEXPECTED_CHAR,
        ErrorKind.LEX_UNTERMINATED_TAG,
        ErrorKind.LEX_UNTERMINATED_ENTITY,
        ErrorKind.TAG_MALFORMED,
        ErrorKind.ATTR_EXPECTED_KEY,
        ErrorKind.ATTR_EXPECTED_QUOTE,
        ErrorKind.ATTR_UNTERMINATED_VALUE,
    ])
    def test_tokenization_kinds(self, kind):
        """Test lexer, tag and attribute kinds belong to tokenization."""
        assert kind.stage == "tokenization"

    @pytest.mark.parametrize("kind", [
        ErrorKind.TREE_PROLOG_OUT_OF_PLACE,
        ErrorKind.TREE_MISMATCHED_CLOSE,
        ErrorKind.TREE_UNEXPECTED_CLOSE,
        ErrorKind.TREE_MULTIPLE_ROOTS,
        ErrorKind.TREE_UNEXPECTED_EOF,
        ErrorKind.TREE_DEPTH_EXCEEDED,
        ErrorKind.TREE_MISSING_ROOT,
    ])
    def test_tree_kinds(self, kind):
        """Test tree kinds belong to the tree stage."""
        assert kind.stage == "tree"

    def test_input_kind(self):
        """Test the decoding kind belongs to the input stage."""
        assert ErrorKind.INPUT_DECODING.stage == "input"


class TestParseError:
    """Test the ParseError hierarchy."""

    def test_str_is_message(self):
        """Test that str() gives the human message only."""
        error = TreeBuildError(ErrorKind.TREE_UNEXPECTED_CLOSE, "Unexpected closing tag `</a>`")

        assert str(error) == "Unexpected closing tag `</a>`"
        assert repr(error) == "TreeBuildError(TREE_UNEXPECTED_CLOSE, 'Unexpected closing tag `</a>`')"

    def test_location_with_position(self):
        """Test location rendering when a position is known."""
        error = TokenizationError(
            ErrorKind.LEX_UNEXPECTED_CHAR, "Unexpected `>`", TokenPosition(3, 7, 20)
        )

        assert error.location == "line 3, column 7"
        assert error.to_dict() == {
            "kind": "LEX_UNEXPECTED_CHAR",
            "stage": "tokenization",
            "message": "Unexpected `>`",
            "position": {"line": 3, "column": 7, "offset": 20},
        }

    def test_location_without_position(self):
        """Test that location and position are absent when unknown."""
        error = TreeBuildError(ErrorKind.TREE_MISSING_ROOT, "Expected a root element")

        assert error.location is None
        assert "position" not in error.to_dict()

    def test_subclasses_are_parse_errors(self):
        """Test that one except clause catches every stage."""
        for error in (
            TokenizationError(ErrorKind.TAG_MALFORMED, "m"),
            TreeBuildError(ErrorKind.TREE_UNEXPECTED_EOF, "m"),
            InputDecodingError("m"),
        ):
            with pytest.raises(ParseError):
                raise error

    def test_input_decoding_error(self):
        """Test InputDecodingError fixes its kind and keeps the encoding."""
        error = InputDecodingError("Input is not valid utf-8", encoding="utf-8")

        assert error.kind is ErrorKind.INPUT_DECODING
        assert error.encoding == "utf-8"

"""XML Subset Parser.

Parses a small, well-defined subset of XML (elements with attributes,
character data with the five predefined entities, comments and an optional
``<?xml ...?>`` prolog) into an in-memory tree, in two stages: text to tokens,
then tokens to a document tree. Parsing stops at the first structural error.

API levels:
- Level 1: Pipeline functions - tokenize(), build_tree(), parse(),
  parse_string(), parse_file()
- Level 2: Configured parser - XMLSubsetParser, returning ParseResult objects
"""

__version__ = "0.1.0"
__author__ = "XML Subset Parser Team"

from .api import (
    ParseResult,
    XMLSubsetParser,
    build_tree,
    parse,
    parse_file,
    parse_string,
    tokenize,
)
from .shared.config import (
    DanglingEntityPolicy,
    ParserConfig,
    TokenizationConfig,
    TreeConfig,
)
from .shared.errors import (
    ErrorKind,
    InputDecodingError,
    ParseError,
    TokenizationError,
    TreeBuildError,
)
from .tokenization import Attribute, TagToken, TextToken, Token
from .tree import Document, Element, Node, TextNode

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: pipeline functions
    "tokenize",
    "build_tree",
    "parse",
    "parse_string",
    "parse_file",

    # Level 2: configured parser
    "XMLSubsetParser",
    "ParseResult",

    # Data model
    "Attribute",
    "TagToken",
    "TextToken",
    "Token",
    "Document",
    "Element",
    "Node",
    "TextNode",

    # Errors
    "ErrorKind",
    "ParseError",
    "TokenizationError",
    "TreeBuildError",
    "InputDecodingError",

    # Configuration
    "ParserConfig",
    "TokenizationConfig",
    "TreeConfig",
    "DanglingEntityPolicy",
]

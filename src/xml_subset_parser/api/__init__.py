"""Public parsing API: pipeline functions, the reusable parser and adapters."""

from .adapters import (
    AdapterError,
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    available_adapters,
    get_adapter,
)
from .parser import (
    ParseResult,
    XMLSubsetParser,
    build_tree,
    parse,
    parse_file,
    parse_string,
    tokenize,
)

__all__ = [
    "AdapterError",
    "ElementTreeAdapter",
    "IntegrationAdapter",
    "LxmlAdapter",
    "ParseResult",
    "XMLSubsetParser",
    "available_adapters",
    "build_tree",
    "get_adapter",
    "parse",
    "parse_file",
    "parse_string",
    "tokenize",
]

"""Tokenization engine for XML subset parsing.

Converts a character sequence into text and tag tokens.

Key Components:
    XMLTokenizer: Character scanner producing a TokenizationResult
    TagParser: Tag-interior parser owned by the tokenizer (name, closing flag, attributes)
    expand_entities: Named entity expansion for character data
    TextToken / TagToken: The two token variants
    Attribute: Ordered ``(name, value)`` pair, value None for a flag attribute
"""

from .entities import ENTITY_MAP, expand_entities, lookup_entity
from .tags import AttributeState, TagParser, parse_tag_interior
from .tokenizer import (
    COMMENT_END,
    COMMENT_START,
    TokenizationResult,
    TokenizerState,
    XMLTokenizer,
    tokenize_text,
)
from .tokens import (
    PROLOG_TAG_NAME,
    Attribute,
    TagToken,
    TextToken,
    Token,
    TokenPosition,
)

__all__ = [
    "COMMENT_END",
    "COMMENT_START",
    "ENTITY_MAP",
    "PROLOG_TAG_NAME",
    "Attribute",
    "AttributeState",
    "TagParser",
    "TagToken",
    "TextToken",
    "Token",
    "TokenPosition",
    "TokenizationResult",
    "TokenizerState",
    "XMLTokenizer",
    "expand_entities",
    "lookup_entity",
    "parse_tag_interior",
    "tokenize_text",
]

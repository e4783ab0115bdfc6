"""Tree building engine for XML subset parsing.

Key Components:
    XMLTreeBuilder: Recursive-descent builder turning tokens into a Document
    Document: Optional prolog attributes plus top-level nodes
    Element: Named node with ordered attributes and children
    TextNode: Character data node
"""

from .builder import (
    Document,
    Element,
    Node,
    TextNode,
    XMLTreeBuilder,
)

__all__ = [
    "Document",
    "Element",
    "Node",
    "TextNode",
    "XMLTreeBuilder",
]

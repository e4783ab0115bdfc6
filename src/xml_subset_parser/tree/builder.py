"""Document model and tree builder for XML subset parsing.

The builder consumes a token sequence and produces a ``Document``. It keeps
an explicit stack of open elements: each opening tag collects children until
the closing tag that matches its name, so nesting depth is bounded only by
``TreeConfig.max_depth``. The first structural violation aborts the build; no
partial tree is returned.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from xml_subset_parser.shared import (
    ErrorKind,
    TreeBuildError,
    TreeConfig,
    get_logger,
)
from xml_subset_parser.tokenization import (
    PROLOG_TAG_NAME,
    Attribute,
    TagToken,
    TextToken,
    Token,
    TokenizationResult,
)

MS_PER_SECOND = 1000
PRETTY_INDENT = "    "


@dataclass
class TextNode:
    """Character data inside an element or at top level."""

    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass
class Element:
    """A named element with ordered attributes and children.

    Elements own their children; there are no parent links.
    """

    tag_name: str
    attributes: List[Attribute] = field(default_factory=list)
    children: List["Node"] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate element values."""
        if not self.tag_name:
            raise ValueError("Element tag name cannot be empty")

    @property
    def elements(self) -> List["Element"]:
        """Direct child elements, text nodes skipped."""
        return [child for child in self.children if isinstance(child, Element)]

    @property
    def text(self) -> str:
        """Concatenated direct text children."""
        return "".join(
            child.text for child in self.children if isinstance(child, TextNode)
        )

    @property
    def full_text(self) -> str:
        """All descendant text in document order."""
        parts: List[str] = []
        stack: List[Node] = list(reversed(self.children))
        while stack:
            node = stack.pop()
            if isinstance(node, TextNode):
                parts.append(node.text)
            else:
                stack.extend(reversed(node.children))
        return "".join(parts)

    @property
    def attribute_names(self) -> List[str]:
        return [attribute.name for attribute in self.attributes]

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default.

        A flag attribute (``<t k>``) has value None, so pass a sentinel default
        or use ``has_attribute`` to tell it apart from a missing one.
        """
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute.value
        return default

    def has_attribute(self, name: str) -> bool:
        return any(attribute.name == name for attribute in self.attributes)

    def iter(self) -> Iterator["Element"]:
        """Depth-first iteration over this element and its descendants."""
        stack = [self]
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element.elements))

    def find(self, tag_name: str) -> Optional["Element"]:
        """Find first descendant element with matching tag name."""
        for element in self.iter():
            if element is not self and element.tag_name == tag_name:
                return element
        return None

    def find_all(self, tag_name: str) -> List["Element"]:
        """Find all descendant elements with matching tag name."""
        return [
            element for element in self.iter()
            if element is not self and element.tag_name == tag_name
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        result = self._shallow_dict()
        stack = [(self, result["children"])]
        while stack:
            element, out = stack.pop()
            for child in element.children:
                if isinstance(child, TextNode):
                    out.append(child.to_dict())
                    continue
                child_dict = child._shallow_dict()
                out.append(child_dict)
                stack.append((child, child_dict["children"]))
        return result

    def _shallow_dict(self) -> Dict[str, Any]:
        return {
            "type": "element",
            "tag_name": self.tag_name,
            "attributes": [list(attribute) for attribute in self.attributes],
            "children": [],
        }


Node = Union[TextNode, Element]


@dataclass
class Document:
    """Root container returned by a successful parse.

    ``prolog`` holds the attributes of a leading ``<?xml ...?>`` tag, or None
    when the input did not start with one.
    """

    prolog: Optional[List[Attribute]] = None
    children: List[Node] = field(default_factory=list)

    @property
    def root(self) -> Optional[Element]:
        """The top-level element, if any."""
        for child in self.children:
            if isinstance(child, Element):
                return child
        return None

    def prolog_attribute(self, name: str) -> Optional[str]:
        if not self.prolog:
            return None
        for attribute in self.prolog:
            if attribute.name == name:
                return attribute.value
        return None

    @property
    def version(self) -> Optional[str]:
        return self.prolog_attribute("version")

    @property
    def encoding(self) -> Optional[str]:
        return self.prolog_attribute("encoding")

    def iter_elements(self) -> Iterator[Element]:
        """Iterate over all elements in document order."""
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter()

    @property
    def element_count(self) -> int:
        return sum(1 for _ in self.iter_elements())

    def find(self, tag_name: str) -> Optional[Element]:
        """Find first element with matching tag name, the root included."""
        return next(
            (element for element in self.iter_elements() if element.tag_name == tag_name),
            None,
        )

    def find_all(self, tag_name: str) -> List[Element]:
        """Find all elements with matching tag name, the root included."""
        return [
            element for element in self.iter_elements() if element.tag_name == tag_name
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert document to dictionary representation."""
        return {
            "prolog": (
                None if self.prolog is None
                else [list(attribute) for attribute in self.prolog]
            ),
            "children": [child.to_dict() for child in self.children],
        }

    def pretty(self) -> str:
        """Indented, human-readable dump of the tree."""
        lines: List[str] = []
        if self.prolog is not None:
            lines.append("prolog: " + " ".join(str(attr) for attr in self.prolog))
        stack = [(child, 0) for child in reversed(self.children)]
        while stack:
            node, depth = stack.pop()
            indent = PRETTY_INDENT * depth
            if isinstance(node, TextNode):
                lines.append(f"{indent}{node.text!r}")
                continue

            attributes = "".join(f" {attribute}" for attribute in node.attributes)
            lines.append(f"{indent}{node.tag_name}{attributes}")
            stack.extend((child, depth + 1) for child in reversed(node.children))
        return "\n".join(lines)


class XMLTreeBuilder:
    """Builds a ``Document`` from a token sequence.

    Example:
        >>> from xml_subset_parser.tokenization import TagToken, TextToken
        >>> document = XMLTreeBuilder().build(
        ...     [TagToken(False, "r"), TextToken("hi"), TagToken(True, "r")]
        ... )
        >>> document.root.text
        'hi'
    """

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Tree configuration (defaults to ``TreeConfig()``)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or TreeConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_tree_builder")

        self._elements_built = 0
        self.last_build_time_ms = 0.0

    @property
    def elements_built(self) -> int:
        """Number of elements created by the most recent build."""
        return self._elements_built

    def build(self, tokens: Union[TokenizationResult, Sequence[Token]]) -> Document:
        """Build a document tree from tokens.

        Args:
            tokens: A TokenizationResult or a sequence of tokens

        Raises:
            TreeBuildError: at the first structural violation
        """
        start_time = time.time()
        if isinstance(tokens, TokenizationResult):
            tokens = tokens.tokens
        self._elements_built = 0

        self.logger.debug("Starting tree building", extra={"token_count": len(tokens)})

        token_iter = iter(tokens)
        prolog: Optional[List[Attribute]] = None
        first = tokens[0] if tokens else None
        if isinstance(first, TagToken) and first.name == PROLOG_TAG_NAME:
            prolog = list(first.attributes)
            next(token_iter)

        try:
            children = self._build_children(token_iter)
            if self.config.require_root and not any(
                isinstance(child, Element) for child in children
            ):
                raise TreeBuildError(
                    ErrorKind.TREE_MISSING_ROOT,
                    "Expected a root element. Document has none",
                )
        except TreeBuildError as e:
            self.logger.info(
                "Tree building halted",
                extra={
                    "error_kind": e.kind.name,
                    "error_message": e.message,
                    "position": e.position.to_dict() if e.position else None,
                },
            )
            raise

        document = Document(prolog=prolog, children=children)
        self.last_build_time_ms = (time.time() - start_time) * MS_PER_SECOND

        self.logger.debug(
            "Tree building completed",
            extra={
                "element_count": self._elements_built,
                "has_prolog": prolog is not None,
                "processing_time_ms": self.last_build_time_ms,
            },
        )
        return document

    def _build_children(self, tokens: Iterator[Token]) -> List[Node]:
        # One frame per open element; the bottom frame is the document level
        stack: List[Tuple[Optional[TagToken], List[Node]]] = [(None, [])]

        for token in tokens:
            open_tag, nodes = stack[-1]
            depth = len(stack) - 1

            if isinstance(token, TextToken):
                nodes.append(TextNode(token.text))
                continue

            if token.name == PROLOG_TAG_NAME:
                raise TreeBuildError(
                    ErrorKind.TREE_PROLOG_OUT_OF_PLACE,
                    "Unexpected XML prolog. Prolog must occur at beginning of file",
                    token.position,
                )

            if token.is_closing:
                if open_tag is None:
                    raise TreeBuildError(
                        ErrorKind.TREE_UNEXPECTED_CLOSE,
                        f"Unexpected closing tag `</{token.name}>`. "
                        "Expected end of file",
                        token.position,
                    )
                if open_tag.name != token.name:
                    raise TreeBuildError(
                        ErrorKind.TREE_MISMATCHED_CLOSE,
                        f"Mismatched closing tag `</{token.name}>`. "
                        f"Does not match `<{open_tag.name}>`",
                        token.position,
                    )
                stack.pop()
                stack[-1][1].append(self._make_element(open_tag, nodes))
                continue

            if depth == 0 and nodes:
                raise TreeBuildError(
                    ErrorKind.TREE_MULTIPLE_ROOTS,
                    "Unexpected opening tag. Expected end of file. "
                    "Only one root node is allowed",
                    token.position,
                )

            if token.self_closing:
                nodes.append(self._make_element(token, []))
                continue

            if depth + 1 > self.config.max_depth:
                raise TreeBuildError(
                    ErrorKind.TREE_DEPTH_EXCEEDED,
                    f"Element `<{token.name}>` exceeds the maximum nesting "
                    f"depth of {self.config.max_depth}",
                    token.position,
                )
            stack.append((token, []))

        open_tag = stack[-1][0]
        if open_tag is not None:
            raise TreeBuildError(
                ErrorKind.TREE_UNEXPECTED_EOF,
                f"Unexpected end of file. Expected closing tag `</{open_tag.name}>`",
                open_tag.position,
            )

        return stack[0][1]

    def _make_element(self, tag: TagToken, children: List[Node]) -> Element:
        self._elements_built += 1
        return Element(
            tag_name=tag.name,
            attributes=list(tag.attributes),
            children=children,
        )

"""Adapters converting a parsed ``Document`` into other XML libraries' trees.

ElementTree keeps mixed content in ``text``/``tail`` slots rather than in text
nodes: text before an element's first child element goes to ``element.text``,
text following a child element goes to that child's ``tail``. Flag attributes
(value None) become empty strings since neither library has a valueless
attribute. The prolog has no equivalent and is not carried over.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from xml_subset_parser.shared import get_logger
from xml_subset_parser.tree import Document, Element, TextNode


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    target_library: str
    description: str


class AdapterError(Exception):
    """Raised when a conversion cannot be performed."""


class IntegrationAdapter(ABC):
    """Base class for ``Document`` to third-party tree converters."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def _etree_module(self) -> Any:
        """Return the module providing ``Element`` and ``SubElement``."""

    def convert(self, document: Document) -> Any:
        """Convert the document's root element.

        Raises:
            AdapterError: if the library is missing or the document has no root
        """
        if not self.is_available():
            raise AdapterError(
                f"{self.metadata.target_library} is not installed"
            )
        if document.root is None:
            raise AdapterError("Document has no root element to convert")

        etree = self._etree_module()
        root = self._convert_tree(document.root, etree)
        self._logger.debug(
            "Document converted",
            extra={
                "adapter": self.metadata.name,
                "element_count": document.element_count,
            },
        )
        return root

    def _convert_tree(self, root: Element, etree: Any) -> Any:
        converted = etree.Element(root.tag_name, self._attributes(root))
        stack = [(root, converted)]
        while stack:
            element, target = stack.pop()
            last_child = None
            for child in element.children:
                if isinstance(child, TextNode):
                    if last_child is None:
                        target.text = (target.text or "") + child.text
                    else:
                        last_child.tail = (last_child.tail or "") + child.text
                    continue
                last_child = etree.SubElement(
                    target, child.tag_name, self._attributes(child)
                )
                stack.append((child, last_child))
        return converted

    @staticmethod
    def _attributes(element: Element) -> Dict[str, str]:
        # Later duplicates win, as in ElementTree's own parser
        return {
            attribute.name: attribute.value if attribute.value is not None else ""
            for attribute in element.attributes
        }


class ElementTreeAdapter(IntegrationAdapter):
    """Adapter for the standard library ``xml.etree.ElementTree``."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="etree",
            target_library="xml.etree.ElementTree",
            description="Convert a Document to xml.etree.ElementTree elements",
        )

    def is_available(self) -> bool:
        return True

    def _etree_module(self) -> Any:
        import xml.etree.ElementTree as ET
        return ET


class LxmlAdapter(IntegrationAdapter):
    """Adapter for ``lxml.etree``."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            target_library="lxml",
            description="Convert a Document to lxml.etree elements",
        )

    def is_available(self) -> bool:
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _etree_module(self) -> Any:
        import lxml.etree
        return lxml.etree


_ADAPTERS = {
    "etree": ElementTreeAdapter,
    "lxml": LxmlAdapter,
}


def get_adapter(
    name: str, correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get an adapter instance by name, or None for an unknown name."""
    adapter_class = _ADAPTERS.get(name)
    if adapter_class is None:
        return None
    return adapter_class(correlation_id)


def available_adapters() -> List[str]:
    """Names of adapters whose target library is importable."""
    return [name for name, adapter_class in _ADAPTERS.items() if adapter_class().is_available()]

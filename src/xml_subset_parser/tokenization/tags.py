"""Tag-interior parsing: name, closing flag and attributes of one ``<...>`` region.

The interior is the text strictly between ``<`` and ``>``. Attributes are read
with a small state machine::

    SEEK_KEY --char--> IN_KEY --'='--> SEEK_QUOTE --quote--> IN_VALUE
       ^                 |                                      |
       |            (ws, char) emits a flag attribute           |
       +--------------------- closing quote --------------------+
"""

from enum import Enum, auto
from typing import List, Optional

from xml_subset_parser.shared import (
    DanglingEntityPolicy,
    ErrorKind,
    TokenizationConfig,
    TokenizationError,
)

from .entities import UnknownEntityCallback, expand_entities
from .tokens import Attribute, TagToken, TokenPosition

QUOTE_CHARS = ("'", '"')


class AttributeState(Enum):
    """States of the attribute state machine."""

    SEEK_KEY = auto()       # Skipping whitespace before a key
    IN_KEY = auto()         # Reading a key; may have seen trailing whitespace
    SEEK_QUOTE = auto()     # After `=`, waiting for the opening quote
    IN_VALUE = auto()       # Inside a quoted value


class TagParser:
    """Parses tag interiors into ``TagToken`` records."""

    def __init__(
        self,
        config: Optional[TokenizationConfig] = None,
        on_unknown_entity: Optional[UnknownEntityCallback] = None,
    ) -> None:
        self.config = config or TokenizationConfig()
        self.on_unknown_entity = on_unknown_entity

    def parse(self, interior: str, position: Optional[TokenPosition] = None) -> TagToken:
        """Parse the raw interior of one tag.

        Args:
            interior: Characters between ``<`` and ``>``, non-empty
            position: Position of the ``<``, attached to the token and errors

        Raises:
            TokenizationError: on a malformed tag or attribute list
        """
        if interior[:1].isspace():
            raise TokenizationError(
                ErrorKind.TAG_MALFORMED,
                f"Unexpected whitespace in tag `<{interior}>`",
                position,
            )

        is_closing = interior.startswith("/")
        body = interior[1:] if is_closing else interior
        if is_closing and body[:1].isspace():
            raise TokenizationError(
                ErrorKind.TAG_MALFORMED,
                f"Unexpected whitespace in tag `<{interior}>`, after slash",
                position,
            )

        self_closing = False
        if self.config.self_closing_tags and body.endswith("/"):
            if is_closing:
                raise TokenizationError(
                    ErrorKind.TAG_MALFORMED,
                    f"Closing tag `<{interior}>` cannot be self-closing",
                    position,
                )
            body = body[:-1]
            self_closing = True

        # Processing-instruction shape: `<?name ... ?>`
        if len(body) > 1 and body.startswith("?") and body.endswith("?"):
            body = body[:-1]

        split_at = len(body)
        for index, char in enumerate(body):
            if char.isspace():
                split_at = index
                break
        name, rest = body[:split_at], body[split_at:]

        if not name:
            raise TokenizationError(
                ErrorKind.TAG_MALFORMED,
                f"Expected tag name in `<{interior}>`",
                position,
            )

        return TagToken(
            is_closing=is_closing,
            name=name,
            attributes=self.parse_attributes(rest, position) if rest else [],
            self_closing=self_closing,
            position=position,
        )

    def parse_attributes(
        self, text: str, position: Optional[TokenPosition] = None
    ) -> List[Attribute]:
        """Parse an attribute list, preserving source order."""
        attributes: List[Attribute] = []
        state = AttributeState.SEEK_KEY
        key: List[str] = []
        value: List[str] = []
        saw_whitespace = False
        quote = ""

        for char in text:
            if state is AttributeState.SEEK_KEY:
                if char.isspace():
                    continue
                if char == "=":
                    raise TokenizationError(
                        ErrorKind.ATTR_EXPECTED_KEY,
                        "Unexpected `=`. Expected start of attribute key",
                        position,
                    )
                key = [char]
                saw_whitespace = False
                state = AttributeState.IN_KEY

            elif state is AttributeState.IN_KEY:
                if char.isspace():
                    saw_whitespace = True
                elif char == "=":
                    state = AttributeState.SEEK_QUOTE
                elif saw_whitespace:
                    attributes.append(Attribute("".join(key), None))
                    key = [char]
                    saw_whitespace = False
                else:
                    key.append(char)

            elif state is AttributeState.SEEK_QUOTE:
                if char.isspace():
                    continue
                if char not in QUOTE_CHARS:
                    raise TokenizationError(
                        ErrorKind.ATTR_EXPECTED_QUOTE,
                        f"Unexpected `{char}`. Expected `'` or `\"`",
                        position,
                    )
                quote = char
                value = []
                state = AttributeState.IN_VALUE

            else:
                if char == quote:
                    attributes.append(
                        Attribute("".join(key), self._attribute_value("".join(value)))
                    )
                    state = AttributeState.SEEK_KEY
                else:
                    value.append(char)

        if state is AttributeState.IN_KEY:
            attributes.append(Attribute("".join(key), None))
        elif state is AttributeState.SEEK_QUOTE:
            raise TokenizationError(
                ErrorKind.ATTR_EXPECTED_QUOTE,
                "Unexpected end of tag. Expected `'` or `\"`",
                position,
            )
        elif state is AttributeState.IN_VALUE:
            raise TokenizationError(
                ErrorKind.ATTR_UNTERMINATED_VALUE,
                f"Unexpected end of tag. Expected closing `{quote}`",
                position,
            )

        return attributes

    def _attribute_value(self, raw: str) -> str:
        if not self.config.expand_attribute_entities:
            return raw
        return expand_entities(
            raw,
            policy=DanglingEntityPolicy.PRESERVE,
            on_unknown=self.on_unknown_entity,
        )


def parse_tag_interior(
    interior: str, config: Optional[TokenizationConfig] = None
) -> TagToken:
    """Parse one tag interior with a throwaway ``TagParser``."""
    return TagParser(config).parse(interior)

"""Named entity expansion for character data.

Only the five predefined XML entities are recognised. Numeric character
references are not supported and pass through as unknown entities.
"""

from typing import Callable, Dict, List, Optional

from xml_subset_parser.shared import (
    DanglingEntityPolicy,
    ErrorKind,
    TokenizationError,
)

ENTITY_MAP: Dict[str, str] = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "apos": "'",
    "quot": '"',
}

UnknownEntityCallback = Callable[[str], None]


def lookup_entity(name: str) -> Optional[str]:
    """Return the replacement text for a recognised entity name."""
    return ENTITY_MAP.get(name)


def expand_entities(
    text: str,
    policy: DanglingEntityPolicy = DanglingEntityPolicy.PRESERVE,
    on_unknown: Optional[UnknownEntityCallback] = None,
) -> str:
    """Replace ``&name;`` references in ``text``.

    A capture starts at ``&`` and ends at ``;`` or at whitespace. The
    whitespace is kept in the output either way. Unknown names are kept
    verbatim (with their ``;`` when one terminated them) and that kept
    reference is passed to ``on_unknown``. A capture still open at the end
    of ``text`` is handled according to ``policy``.

    Raises:
        TokenizationError: for a dangling capture under ``DanglingEntityPolicy.ERROR``
    """
    if "&" not in text:
        return text

    output: List[str] = []
    entity: Optional[List[str]] = None

    for char in text:
        if entity is None:
            if char == "&":
                entity = []
            else:
                output.append(char)
            continue

        if char == ";" or char.isspace():
            name = "".join(entity)
            replacement = ENTITY_MAP.get(name)
            if replacement is not None:
                output.append(replacement)
            else:
                reference = "&" + name + (";" if char == ";" else "")
                if on_unknown is not None:
                    on_unknown(reference)
                output.append(reference)
            if char.isspace():
                output.append(char)
            entity = None
        else:
            entity.append(char)

    if entity is not None:
        name = "".join(entity)
        if policy is DanglingEntityPolicy.PRESERVE:
            output.append("&" + name)
        elif policy is DanglingEntityPolicy.ERROR:
            raise TokenizationError(
                ErrorKind.LEX_UNTERMINATED_ENTITY,
                f"Unexpected end of text in entity `&{name}`. Expected `;`",
            )

    return "".join(output)

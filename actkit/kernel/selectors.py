"""Stable, re-queryable locators for document elements.

A locator is ``#id`` when the element has an id, otherwise a structural path
of ``tag:nth-of-type(n)`` steps joined by the child combinator. Every locator
handed out by :func:`get_valid_selector` has been re-queried against the
document and resolved back to the same element.
"""

from __future__ import annotations

from actkit.kernel.exceptions import SelectorSyntaxError
from actkit.kernel.logging import get_logger
from actkit.kernel.ports.document import DocumentPort, ElementPort

logger = get_logger(__name__)

_ANCHOR_TAGS = frozenset({"html", "body"})


def css_escape(value: str) -> str:
    """Escape ``value`` for use as a CSS identifier (``CSS.escape`` semantics)."""
    out: list[str] = []
    for index, char in enumerate(value):
        code = ord(char)
        if code == 0:
            out.append("�")
        elif 0x01 <= code <= 0x1F or code == 0x7F:
            out.append(f"\\{code:x} ")
        elif index == 0 and char.isdigit():
            out.append(f"\\{code:x} ")
        elif index == 1 and char.isdigit() and value[0] == "-":
            out.append(f"\\{code:x} ")
        elif index == 0 and char == "-" and len(value) == 1:
            out.append("\\-")
        elif code >= 0x80 or char in "-_" or char.isalnum():
            out.append(char)
        else:
            out.append(f"\\{char}")
    return "".join(out)


def _step(element: ElementPort) -> str:
    tag = element.tag_name
    parent = element.parent
    if parent is None or tag in _ANCHOR_TAGS:
        return tag
    same_type = [child for child in parent.children if child.tag_name == tag]
    index = next(i for i, child in enumerate(same_type, start=1) if child is element)
    return f"{tag}:nth-of-type({index})"


def get_unique_selector(element: ElementPort) -> str:
    """Build a locator for ``element``.

    The structural path is anchored at ``body`` (or ``html`` for elements in
    the head) so it cannot match at an unrelated depth.
    """
    element_id = element.get_attribute("id")
    if element_id:
        return f"#{css_escape(element_id)}"
    return _structural_selector(element)


def get_valid_selector(element: ElementPort, document: DocumentPort) -> str | None:
    """Return a locator that round-trips to ``element``, or ``None``.

    Duplicate ids are the usual reason for ``None``: ``#id`` resolves to the
    first element carrying the id. In that case the structural path is tried
    before giving up.
    """
    candidates = [get_unique_selector(element)]
    if candidates[0].startswith("#"):
        candidates.append(_structural_selector(element))

    for selector in candidates:
        try:
            if document.query(selector) is element:
                return selector
        except SelectorSyntaxError as e:
            logger.error("Error generating selector: {error}", error=e)
    return None


def _structural_selector(element: ElementPort) -> str:
    path: list[str] = []
    current: ElementPort | None = element
    while current is not None:
        path.append(_step(current))
        if current.tag_name in _ANCHOR_TAGS:
            break
        current = current.parent
    return " > ".join(reversed(path))

"""DOM helpers shared by the built-in rules.

Everything here works against :class:`~actkit.kernel.ports.document.DocumentPort`
so rules stay independent of the concrete document adapter.
"""

from __future__ import annotations

import re
from urllib.parse import urljoin, urlsplit

from actkit.kernel.ports.document import DocumentPort, ElementPort

HEADING_SELECTOR = "h1, h2, h3, h4, h5, h6, [role='heading']"
H1_SELECTOR = "h1, [role='heading'][aria-level='1']"
LINK_SELECTOR = "a[href]"
INTERACTIVE_SELECTOR = (
    "a[href], button, input, select, textarea, [tabindex]:not([tabindex='-1'])"
)

_HEADING_TAG = re.compile(r"^h([1-6])$")
_WHITESPACE = re.compile(r"\s+")

# role=heading without aria-level maps to level 2
DEFAULT_ARIA_HEADING_LEVEL = 2


def get_heading_level(element: ElementPort) -> int:
    """Level of a heading: ``aria-level`` when numeric, else the tag digit."""
    aria_level = (element.get_attribute("aria-level") or "").strip()
    if aria_level.isdigit() and int(aria_level) > 0:
        return int(aria_level)
    match = _HEADING_TAG.match(element.tag_name)
    if match:
        return int(match.group(1))
    return DEFAULT_ARIA_HEADING_LEVEL


def word_count(text: str) -> int:
    stripped = text.strip()
    return len(_WHITESPACE.split(stripped)) if stripped else 0


def normalize_text(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def is_hidden_from_at(document: DocumentPort, element: ElementPort) -> bool:
    """Whether ``element`` is excluded from the accessibility tree.

    An element is hidden when it or an ancestor has ``aria-hidden="true"`` or
    ``display: none``, or when the element itself resolves to
    ``visibility: hidden``/``collapse``.
    """
    current: ElementPort | None = element
    while current is not None:
        if (current.get_attribute("aria-hidden") or "").strip().lower() == "true":
            return True
        if current.has_attribute("hidden"):
            return True
        if document.computed_style(current).get("display", "").strip() == "none":
            return True
        current = current.parent
    visibility = document.computed_style(element).get("visibility", "visible").strip()
    return visibility in ("hidden", "collapse")


def is_disabled(element: ElementPort) -> bool:
    """Whether a control is disabled natively, through ARIA, or by a disabled fieldset."""
    if element.has_attribute("disabled"):
        return True
    if (element.get_attribute("aria-disabled") or "").strip().lower() == "true":
        return True
    current = element.parent
    while current is not None:
        if current.tag_name == "fieldset" and current.has_attribute("disabled"):
            return True
        current = current.parent
    return False


def has_direct_text(element: ElementPort) -> bool:
    return bool(element.own_text.strip())


def tab_index(element: ElementPort) -> int:
    value = (element.get_attribute("tabindex") or "").strip()
    try:
        return int(value)
    except ValueError:
        return 0


def is_external_link(href: str, base_url: str | None) -> bool:
    """Whether ``href`` resolves to a different origin than ``base_url``.

    Fragment, ``mailto:``/``tel:`` and ``javascript:`` links are never external.
    Without an http(s) base URL any absolute http(s) link counts as external.
    """
    href = href.strip()
    if not href or href.startswith("#"):
        return False
    target = urlsplit(urljoin(base_url or "", href))
    if target.scheme not in ("http", "https"):
        return False
    base = urlsplit(base_url or "")
    if base.scheme not in ("http", "https"):
        return True
    return (target.scheme, target.netloc.lower()) != (base.scheme, base.netloc.lower())


__all__ = [
    "DEFAULT_ARIA_HEADING_LEVEL",
    "H1_SELECTOR",
    "HEADING_SELECTOR",
    "INTERACTIVE_SELECTOR",
    "LINK_SELECTOR",
    "get_heading_level",
    "has_direct_text",
    "is_disabled",
    "is_external_link",
    "is_hidden_from_at",
    "normalize_text",
    "tab_index",
    "word_count",
]

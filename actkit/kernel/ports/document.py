"""Port interfaces for the host document audited by the rule engine.

The engine never parses markup or runs a style cascade itself. Whatever hosts
it (a static HTML adapter, a headless browser bridge, a test double) exposes
the tree through these protocols.
"""

from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class ElementPort(Protocol):
    """A single element node of the host document."""

    @property
    def tag_name(self) -> str:
        """Lower-case tag name."""
        ...

    @property
    def attributes(self) -> Mapping[str, str]:
        """Attributes in source order, names lower-cased."""
        ...

    @property
    def parent(self) -> "ElementPort | None":
        """Parent element, ``None`` for the document element."""
        ...

    @property
    def children(self) -> Sequence["ElementPort"]:
        """Element children in document order."""
        ...

    @property
    def text_content(self) -> str:
        """Concatenated text of all descendant text nodes."""
        ...

    @property
    def own_text(self) -> str:
        """Concatenated text of direct text-node children only."""
        ...

    @property
    def outer_html(self) -> str:
        """Serialized markup of the element and its subtree."""
        ...

    def get_attribute(self, name: str) -> str | None:
        """Return an attribute value or ``None`` when absent."""
        ...

    def has_attribute(self, name: str) -> bool:
        """Return whether the attribute is present (even if empty)."""
        ...


@runtime_checkable
class DocumentPort(Protocol):
    """Capabilities the engine consumes from the host document.

    Implementations must return elements in document order from
    ``query_all`` and must be able to re-query any selector produced by
    :func:`actkit.kernel.selectors.get_unique_selector`.
    """

    @property
    def url(self) -> str | None:
        """Location of the document if known."""
        ...

    @property
    def document_element(self) -> ElementPort | None:
        """The ``<html>`` element."""
        ...

    @property
    def body(self) -> ElementPort | None:
        """The ``<body>`` element."""
        ...

    def query_all(self, selector: str, scope: ElementPort | None = None) -> list[ElementPort]:
        """Return every element matching ``selector`` below ``scope``."""
        ...

    def query(self, selector: str, scope: ElementPort | None = None) -> ElementPort | None:
        """Return the first element matching ``selector`` or ``None``."""
        ...

    def get_element_by_id(self, element_id: str) -> ElementPort | None:
        """Return the first element whose ``id`` equals ``element_id``."""
        ...

    def computed_style(self, element: ElementPort, state: str | None = None) -> Mapping[str, str]:
        """Return the effective style properties of ``element``.

        Parameters
        ----------
        element : ElementPort
            Element to resolve
        state : str | None
            Optional dynamic state such as ``"focus"`` to resolve the style
            the element would have in that state
        """
        ...

    def accessible_name(self, element: ElementPort) -> str:
        """Return the accessible name of ``element`` (whitespace-normalized)."""
        ...

"""Element tree built from HTML source with the standard library parser."""

from __future__ import annotations

from collections.abc import Iterator
from html import escape
from html.parser import HTMLParser

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)
HEAD_ELEMENTS = frozenset(
    {"base", "link", "meta", "noscript", "script", "style", "template", "title"}
)
_RAW_TEXT = frozenset({"script", "style"})

_P_CLOSERS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "details",
        "div",
        "dl",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hr",
        "main",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "table",
        "ul",
    }
)
_P_SCOPE = frozenset({"button", "table", "td", "th", "body", "html"})

# start tag -> (open tags it implicitly closes, tags that bound the search)
_IMPLIED_END: dict[str, tuple[frozenset[str], frozenset[str]]] = {
    "li": (frozenset({"li"}), frozenset({"ul", "ol", "menu"})),
    "dt": (frozenset({"dt", "dd"}), frozenset({"dl"})),
    "dd": (frozenset({"dt", "dd"}), frozenset({"dl"})),
    "option": (frozenset({"option"}), frozenset({"select", "datalist", "optgroup"})),
    "optgroup": (frozenset({"optgroup", "option"}), frozenset({"select"})),
    "tr": (frozenset({"tr"}), frozenset({"table", "thead", "tbody", "tfoot"})),
    "td": (frozenset({"td", "th"}), frozenset({"tr", "table"})),
    "th": (frozenset({"td", "th"}), frozenset({"tr", "table"})),
    "thead": (frozenset({"thead", "tbody", "tfoot"}), frozenset({"table"})),
    "tbody": (frozenset({"thead", "tbody", "tfoot"}), frozenset({"table"})),
    "tfoot": (frozenset({"thead", "tbody", "tfoot"}), frozenset({"table"})),
}


class HtmlElement:
    """Element node implementing :class:`~actkit.kernel.ports.document.ElementPort`.

    ``nodes`` holds the child nodes in order: nested elements and text
    strings.
    """

    __slots__ = ("tag_name", "_attributes", "parent", "nodes", "_children")

    def __init__(
        self,
        tag_name: str,
        attributes: dict[str, str] | None = None,
        parent: HtmlElement | None = None,
    ) -> None:
        self.tag_name = tag_name.lower()
        self._attributes: dict[str, str] = attributes or {}
        self.parent = parent
        self.nodes: list[HtmlElement | str] = []
        self._children: list[HtmlElement] = []

    @property
    def attributes(self) -> dict[str, str]:
        return self._attributes

    @property
    def children(self) -> list[HtmlElement]:
        return self._children

    def get_attribute(self, name: str) -> str | None:
        return self._attributes.get(name.lower())

    def has_attribute(self, name: str) -> bool:
        return name.lower() in self._attributes

    def set_attribute(self, name: str, value: str) -> None:
        self._attributes[name.lower()] = value

    def append(self, node: HtmlElement | str) -> None:
        if isinstance(node, HtmlElement):
            node.parent = self
            self._children.append(node)
        elif self.nodes and isinstance(self.nodes[-1], str):
            self.nodes[-1] += node
            return
        self.nodes.append(node)

    def iter(self) -> Iterator[HtmlElement]:
        """Yield this element and its descendants in document order."""
        stack: list[HtmlElement] = [self]
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element._children))

    @property
    def text_content(self) -> str:
        parts: list[str] = []
        stack: list[HtmlElement | str] = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, str):
                parts.append(node)
            else:
                stack.extend(reversed(node.nodes))
        return "".join(parts)

    @property
    def own_text(self) -> str:
        return "".join(node for node in self.nodes if isinstance(node, str))

    @property
    def outer_html(self) -> str:
        attrs = "".join(f' {k}="{escape(v, quote=True)}"' for k, v in self._attributes.items())
        if self.tag_name in VOID_ELEMENTS:
            return f"<{self.tag_name}{attrs}>"
        return f"<{self.tag_name}{attrs}>{self.inner_html}</{self.tag_name}>"

    @property
    def inner_html(self) -> str:
        raw = self.tag_name in _RAW_TEXT
        return "".join(
            node.outer_html
            if isinstance(node, HtmlElement)
            else (node if raw else escape(node, quote=False))
            for node in self.nodes
        )

    def __repr__(self) -> str:
        element_id = self._attributes.get("id")
        suffix = f"#{element_id}" if element_id else ""
        return f"<HtmlElement {self.tag_name}{suffix}>"


class TreeBuilder(HTMLParser):
    """Builds an :class:`HtmlElement` tree with a forgiving subset of HTML parsing rules."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = HtmlElement("#document")
        self._stack: list[HtmlElement] = [self.root]

    @property
    def _current(self) -> HtmlElement:
        return self._stack[-1]

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._close_implied(tag)
        attributes: dict[str, str] = {}
        for name, value in attrs:
            attributes.setdefault(name.lower(), value if value is not None else "")
        element = HtmlElement(tag, attributes)
        self._current.append(element)
        if tag not in VOID_ELEMENTS:
            self._stack.append(element)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.handle_starttag(tag, attrs)
        if tag not in VOID_ELEMENTS and self._current.tag_name == tag:
            self._stack.pop()

    def handle_endtag(self, tag: str) -> None:
        if tag in VOID_ELEMENTS:
            return
        for index in range(len(self._stack) - 1, 0, -1):
            if self._stack[index].tag_name == tag:
                del self._stack[index:]
                return

    def handle_data(self, data: str) -> None:
        if data:
            self._current.append(data)

    def _close_implied(self, tag: str) -> None:
        if tag in _IMPLIED_END:
            targets, scope = _IMPLIED_END[tag]
        elif tag in _P_CLOSERS:
            targets, scope = frozenset({"p"}), _P_SCOPE
        else:
            return
        for index in range(len(self._stack) - 1, 0, -1):
            name = self._stack[index].tag_name
            if name in targets:
                del self._stack[index:]
                return
            if name in scope:
                return


def _first_child(element: HtmlElement, tag: str) -> HtmlElement | None:
    return next((child for child in element.children if child.tag_name == tag), None)


def _adopt(parent: HtmlElement, nodes: list[HtmlElement | str]) -> None:
    for node in nodes:
        parent.append(node)


def parse_html(markup: str) -> HtmlElement:
    """Parse ``markup`` and return the ``<html>`` element.

    Missing ``html``, ``head`` and ``body`` elements are synthesized so that
    every document has the same skeleton.
    """
    builder = TreeBuilder()
    builder.feed(markup)
    builder.close()
    top = builder.root

    html = _first_child(top, "html")
    if html is None:
        html = HtmlElement("html")
        _adopt(html, top.nodes)
    else:
        # Content outside <html> belongs in the document body.
        stray = [
            n for n in top.nodes if n is not html and not (isinstance(n, str) and not n.strip())
        ]
        _adopt(_first_child(html, "body") or html, stray)

    head = _first_child(html, "head")
    body = _first_child(html, "body")
    if head is not None and body is not None:
        html.parent = None
        return html

    nodes, html.nodes, html._children = html.nodes, [], []
    new_head = head or HtmlElement("head")
    new_body = body or HtmlElement("body")
    in_head = True
    for node in nodes:
        if node is head or node is body:
            in_head = False
            continue
        if isinstance(node, str):
            if node.strip():
                in_head = False
                new_body.append(node)
            continue
        if in_head and head is None and node.tag_name in HEAD_ELEMENTS:
            new_head.append(node)
        else:
            in_head = False
            new_body.append(node)
    html.append(new_head)
    html.append(new_body)
    html.parent = None
    return html

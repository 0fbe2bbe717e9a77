"""Static HTML implementation of the :class:`DocumentPort`."""

from __future__ import annotations

from pathlib import Path

from actkit.builtin.adapters.html.css_selector import (
    DYNAMIC_STATES,
    compile_selector,
    matches,
    select,
)
from actkit.builtin.adapters.html.dom import HtmlElement, parse_html
from actkit.builtin.adapters.html.stylesheet import (
    INHERITED_PROPERTIES,
    Declaration,
    StyleRule,
    parse_declarations,
    parse_stylesheet,
)
from actkit.kernel.exceptions import DocumentLoadError
from actkit.kernel.logging import get_logger

logger = get_logger(__name__)

_HIDDEN_BY_DEFAULT = frozenset(
    {"head", "script", "style", "template", "title", "meta", "link", "base", "noscript"}
)
_INLINE_ELEMENTS = frozenset(
    {
        "a",
        "abbr",
        "b",
        "bdi",
        "bdo",
        "button",
        "cite",
        "code",
        "em",
        "i",
        "img",
        "input",
        "kbd",
        "label",
        "mark",
        "q",
        "s",
        "samp",
        "select",
        "small",
        "span",
        "strong",
        "sub",
        "sup",
        "textarea",
        "time",
        "u",
        "var",
    }
)
_NAME_FROM_CONTENT_TAGS = frozenset(
    {
        "a",
        "button",
        "caption",
        "figcaption",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "label",
        "legend",
        "option",
        "summary",
        "td",
        "th",
    }
)
_NAME_FROM_CONTENT_ROLES = frozenset(
    {
        "button",
        "cell",
        "checkbox",
        "columnheader",
        "gridcell",
        "heading",
        "link",
        "menuitem",
        "menuitemcheckbox",
        "menuitemradio",
        "option",
        "radio",
        "row",
        "rowheader",
        "switch",
        "tab",
        "tooltip",
        "treeitem",
    }
)
_LABELABLE = frozenset({"input", "meter", "output", "progress", "select", "textarea"})
_BUTTON_INPUT_DEFAULTS = {"submit": "Submit", "reset": "Reset"}
_BLOCK_BREAKS = frozenset(
    {"br", "div", "p", "li", "tr", "td", "th", "h1", "h2", "h3", "h4", "h5", "h6"}
)


def _normalize(text: str) -> str:
    return " ".join(text.split())


class HtmlDocument:
    """Document adapter over a parsed HTML string.

    Parameters
    ----------
    document_element : HtmlElement
        The ``<html>`` element of a parsed tree
    url : str | None
        Where the markup came from

    Examples
    --------
    Example usage::

        document = HtmlDocument.from_string("<h1>Title</h1>")
        document.query("h1").text_content
    """

    def __init__(self, document_element: HtmlElement, url: str | None = None) -> None:
        self._root = document_element
        self._url = url
        self._rules: list[StyleRule] | None = None
        self._style_cache: dict[tuple[int, str | None], dict[str, str]] = {}

    @classmethod
    def from_string(cls, markup: str, url: str | None = None) -> HtmlDocument:
        return cls(parse_html(markup), url=url)

    @classmethod
    def from_path(cls, path: str | Path) -> HtmlDocument:
        """Read and parse an HTML file.

        Raises
        ------
        DocumentLoadError
            If the file cannot be read
        """
        file_path = Path(path)
        try:
            markup = file_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise DocumentLoadError(str(file_path), str(e)) from e
        logger.debug("Loaded {size} characters from {path}", size=len(markup), path=file_path)
        return cls.from_string(markup, url=file_path.resolve().as_uri())

    # ========================================================================
    # Tree access
    # ========================================================================

    @property
    def url(self) -> str | None:
        return self._url

    @property
    def document_element(self) -> HtmlElement:
        return self._root

    @property
    def head(self) -> HtmlElement | None:
        return next((c for c in self._root.children if c.tag_name == "head"), None)

    @property
    def body(self) -> HtmlElement | None:
        return next((c for c in self._root.children if c.tag_name == "body"), None)

    @property
    def title(self) -> str:
        element = self.query("title")
        return _normalize(element.text_content) if element else ""

    def query_all(self, selector: str, scope: HtmlElement | None = None) -> list[HtmlElement]:
        if scope is None:
            return select(self._root, selector, include_root=True)  # type: ignore[return-value]
        return select(scope, selector)  # type: ignore[return-value]

    def query(self, selector: str, scope: HtmlElement | None = None) -> HtmlElement | None:
        selectors = compile_selector(selector)
        root = scope or self._root
        candidates = root.iter()
        if scope is not None:
            next(candidates)
        return next((e for e in candidates if matches(e, selectors)), None)

    def get_element_by_id(self, element_id: str) -> HtmlElement | None:
        return next((e for e in self._root.iter() if e.get_attribute("id") == element_id), None)

    # ========================================================================
    # Style
    # ========================================================================

    def _stylesheet_rules(self) -> list[StyleRule]:
        if self._rules is None:
            rules: list[StyleRule] = []
            for style in self._root.iter():
                if style.tag_name != "style":
                    continue
                media = (style.get_attribute("media") or "").lower()
                if "print" in media and "screen" not in media:
                    continue
                rules.extend(parse_stylesheet(style.text_content, start_order=len(rules)))
            self._rules = rules
        return self._rules

    def computed_style(self, element: HtmlElement, state: str | None = None) -> dict[str, str]:
        """Resolve author, inline and inherited styles for ``element``.

        Only properties that are set somewhere (plus ``display`` and
        ``visibility``) appear in the result.
        """
        key = (id(element), state)
        cached = self._style_cache.get(key)
        if cached is not None:
            return cached

        states = frozenset({state}) & DYNAMIC_STATES if state else frozenset()
        if state == "focus":
            states = frozenset({"focus", "focus-visible"})
        matched = [
            rule
            for rule in self._stylesheet_rules()
            if matches(element, (rule.selector,), states)
        ]
        matched.sort(key=lambda rule: (rule.specificity, rule.order))

        normal: dict[str, str] = {}
        important: dict[str, str] = {}
        for rule in matched:
            self._apply(rule.declarations, normal, important)
        inline = parse_declarations(element.get_attribute("style") or "")
        self._apply(inline, normal, important)
        declared = {**normal, **important}

        style: dict[str, str] = {}
        if element.parent is not None:
            parent_style = self.computed_style(element.parent)
            for name, value in parent_style.items():
                if name in INHERITED_PROPERTIES or name.startswith("--"):
                    style[name] = value
        style.setdefault("visibility", "visible")
        style["display"] = self._default_display(element)
        style.update(declared)

        self._style_cache[key] = style
        return style

    @staticmethod
    def _apply(
        declarations: dict[str, Declaration], normal: dict[str, str], important: dict[str, str]
    ) -> None:
        for name, declaration in declarations.items():
            if declaration.important:
                important[name] = declaration.value
            else:
                normal[name] = declaration.value

    @staticmethod
    def _default_display(element: HtmlElement) -> str:
        if element.tag_name in _HIDDEN_BY_DEFAULT or element.has_attribute("hidden"):
            return "none"
        if element.tag_name in _INLINE_ELEMENTS:
            return "inline"
        return "block"

    def is_hidden(self, element: HtmlElement) -> bool:
        """Whether ``element`` is hidden from assistive technologies."""
        current: HtmlElement | None = element
        while current is not None:
            if (current.get_attribute("aria-hidden") or "").strip().lower() == "true":
                return True
            if self.computed_style(current).get("display", "").strip() == "none":
                return True
            current = current.parent
        return self.computed_style(element).get("visibility", "visible") in ("hidden", "collapse")

    # ========================================================================
    # Accessible name
    # ========================================================================

    def accessible_name(self, element: HtmlElement) -> str:
        """Compute an accessible name following the accname steps that apply to static HTML."""
        return _normalize(self._name(element, set(), in_traversal=False, via_reference=False))

    def _name(
        self, element: HtmlElement, visited: set[int], in_traversal: bool, via_reference: bool
    ) -> str:
        if id(element) in visited:
            return ""
        visited.add(id(element))

        if not via_reference and self.is_hidden(element):
            return ""

        if not via_reference and not in_traversal:
            ids = (element.get_attribute("aria-labelledby") or "").split()
            if ids:
                parts = []
                for ref_id in ids:
                    ref = self.get_element_by_id(ref_id)
                    if ref is not None:
                        parts.append(
                            self._name(ref, visited, in_traversal=True, via_reference=True)
                        )
                text = " ".join(p for p in parts if p.strip())
                if text.strip():
                    return text

        aria_label = (element.get_attribute("aria-label") or "").strip()
        if aria_label:
            return aria_label

        role = (element.get_attribute("role") or "").strip().lower().split(" ")[0]
        if role not in ("presentation", "none"):
            native = self._native_name(element, visited)
            if native.strip():
                return native

        if in_traversal or via_reference or self._name_from_content(element, role):
            text = self._text_from_content(element, visited)
            if text.strip():
                return text

        title = element.get_attribute("title")
        if title and title.strip():
            return title
        if element.tag_name in ("input", "textarea"):
            placeholder = element.get_attribute("placeholder")
            if placeholder and placeholder.strip():
                return placeholder
        return ""

    @staticmethod
    def _name_from_content(element: HtmlElement, role: str) -> bool:
        if role:
            return role in _NAME_FROM_CONTENT_ROLES
        return element.tag_name in _NAME_FROM_CONTENT_TAGS

    def _native_name(self, element: HtmlElement, visited: set[int]) -> str:
        tag = element.tag_name
        if tag in ("img", "area"):
            return element.get_attribute("alt") or ""
        if tag == "input":
            input_type = (element.get_attribute("type") or "text").lower()
            if input_type == "image":
                return element.get_attribute("alt") or element.get_attribute("value") or ""
            if input_type in ("submit", "reset", "button"):
                value = element.get_attribute("value")
                if value is not None:
                    return value
                return _BUTTON_INPUT_DEFAULTS.get(input_type, "")
            if input_type == "hidden":
                return ""
        if tag in _LABELABLE:
            return " ".join(
                text
                for label in self.labels_for(element)
                if (text := self._text_from_content(label, visited)).strip()
            )
        if tag == "fieldset":
            legend = next((c for c in element.children if c.tag_name == "legend"), None)
            return self._text_from_content(legend, visited) if legend else ""
        if tag == "table":
            caption = next((c for c in element.children if c.tag_name == "caption"), None)
            return self._text_from_content(caption, visited) if caption else ""
        if tag == "figure":
            caption = next((c for c in element.children if c.tag_name == "figcaption"), None)
            return self._text_from_content(caption, visited) if caption else ""
        if tag == "svg":
            title = next((c for c in element.children if c.tag_name == "title"), None)
            return title.text_content if title else ""
        return ""

    def labels_for(self, element: HtmlElement) -> list[HtmlElement]:
        """``<label>`` elements associated with a form control, explicit ones first."""
        labels: list[HtmlElement] = []
        element_id = element.get_attribute("id")
        if element_id:
            labels.extend(
                label
                for label in self._root.iter()
                if label.tag_name == "label" and label.get_attribute("for") == element_id
            )
        ancestor = element.parent
        while ancestor is not None:
            if ancestor.tag_name == "label" and ancestor not in labels:
                labels.append(ancestor)
                break
            ancestor = ancestor.parent
        return labels

    def _text_from_content(self, element: HtmlElement, visited: set[int]) -> str:
        parts: list[str] = []
        for node in element.nodes:
            if isinstance(node, str):
                parts.append(node)
                continue
            if id(node) in visited or node.tag_name in ("script", "style", "template"):
                continue
            if self.is_hidden(node):
                continue
            separator = " " if node.tag_name in _BLOCK_BREAKS else ""
            if node.tag_name in ("input", "select", "textarea"):
                parts.append(separator + (node.get_attribute("value") or "") + separator)
                continue
            parts.append(
                separator
                + self._name(node, visited, in_traversal=True, via_reference=False)
                + separator
            )
        return "".join(parts)

"""Static HTML document adapter."""

from actkit.builtin.adapters.html.css_selector import compile_selector, matches, select
from actkit.builtin.adapters.html.document import HtmlDocument
from actkit.builtin.adapters.html.dom import HtmlElement, parse_html

__all__ = ["HtmlDocument", "HtmlElement", "compile_selector", "matches", "parse_html", "select"]

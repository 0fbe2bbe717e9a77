"""Minimal CSS cascade: author ``<style>`` rules plus inline styles."""

from __future__ import annotations

import re
from dataclasses import dataclass

from actkit.builtin.adapters.html.css_selector import ComplexSelector, compile_selector
from actkit.kernel.exceptions import SelectorSyntaxError
from actkit.kernel.logging import get_logger

logger = get_logger(__name__)

_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_IMPORTANT = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)

INHERITED_PROPERTIES = frozenset(
    {
        "color",
        "cursor",
        "direction",
        "font",
        "font-family",
        "font-size",
        "font-style",
        "font-weight",
        "letter-spacing",
        "line-height",
        "text-align",
        "text-indent",
        "text-transform",
        "visibility",
        "white-space",
        "word-spacing",
    }
)


@dataclass(frozen=True, slots=True)
class Declaration:
    value: str
    important: bool = False


@dataclass(frozen=True, slots=True)
class StyleRule:
    selector: ComplexSelector
    declarations: dict[str, Declaration]
    order: int

    @property
    def specificity(self) -> tuple[int, int, int]:
        return self.selector.specificity


def parse_declarations(text: str) -> dict[str, Declaration]:
    """Parse a declaration block (``"color: red; outline: none"``)."""
    declarations: dict[str, Declaration] = {}
    for chunk in _split_top_level(text, ";"):
        name, sep, value = chunk.partition(":")
        if not sep:
            continue
        name = name.strip()
        if not name.startswith("--"):
            name = name.lower()
        value = value.strip()
        important = bool(_IMPORTANT.search(value))
        if important:
            value = _IMPORTANT.sub("", value)
        if name and value:
            declarations[name] = Declaration(value, important)
    return declarations


def _split_top_level(text: str, separator: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    quote = ""
    start = 0
    for index, char in enumerate(text):
        if quote:
            if char == quote:
                quote = ""
        elif char in "\"'":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth = max(0, depth - 1)
        elif char == separator and depth == 0:
            parts.append(text[start:index])
            start = index + 1
    parts.append(text[start:])
    return parts


def _media_applies(prelude: str) -> bool:
    query = prelude.removeprefix("@media").strip().lower()
    return "print" not in query or "screen" in query


def parse_stylesheet(css: str, start_order: int = 0) -> list[StyleRule]:
    """Parse style rules from ``css``.

    Rules inside ``@media`` (other than print-only) and ``@supports`` blocks
    are included; other at-rules are skipped. Selectors the engine cannot
    parse are dropped with a debug log.
    """
    css = _COMMENT.sub("", css)
    rules: list[StyleRule] = []
    order = start_order
    pos = 0
    while pos < len(css):
        brace = css.find("{", pos)
        if brace < 0:
            break
        prelude = css[pos:brace]
        # Statement at-rules such as @import end with ';' before the next block.
        if ";" in prelude:
            prelude = prelude.rsplit(";", 1)[1]
        prelude = prelude.strip()

        depth = 1
        index = brace + 1
        while index < len(css) and depth:
            if css[index] == "{":
                depth += 1
            elif css[index] == "}":
                depth -= 1
            index += 1
        body = css[brace + 1 : index - 1]
        pos = index

        if prelude.startswith("@"):
            if (prelude.startswith("@media") and _media_applies(prelude)) or prelude.startswith(
                "@supports"
            ):
                nested = parse_stylesheet(body, order)
                rules.extend(nested)
                order += len(nested)
            continue

        try:
            selectors = compile_selector(prelude)
        except SelectorSyntaxError as e:
            logger.debug("Skipping unsupported CSS rule: {error}", error=e)
            continue
        declarations = parse_declarations(body)
        for selector in selectors:
            rules.append(StyleRule(selector, declarations, order))
            order += 1
    return rules

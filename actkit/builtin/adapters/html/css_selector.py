"""A small CSS selector engine over :class:`ElementPort` trees.

Supported syntax
----------------
- type, universal, ``#id``, ``.class`` selectors
- attribute selectors ``[a]``, ``[a=v]``, ``[a~=v]``, ``[a|=v]``, ``[a^=v]``,
  ``[a$=v]``, ``[a*=v]`` with an optional ``i`` flag
- ``:not()``, ``:is()``, ``:nth-child()``, ``:nth-of-type()``,
  ``:first-child``, ``:last-child``, ``:first-of-type``, ``:last-of-type``,
  ``:only-child``, ``:root``, ``:disabled``, ``:checked``, ``:empty``
- dynamic states ``:focus``, ``:focus-visible``, ``:focus-within``,
  ``:hover``, ``:active`` (match only when the state is requested)
- descendant, ``>``, ``+`` and ``~`` combinators, comma-separated lists
- CSS escapes in identifiers
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from functools import lru_cache

from actkit.kernel.exceptions import SelectorSyntaxError
from actkit.kernel.ports.document import ElementPort

DYNAMIC_STATES = frozenset({"focus", "focus-visible", "focus-within", "hover", "active"})

_NTH_PATTERN = re.compile(r"^([+-]?\d*)n\s*(?:([+-])\s*(\d+))?$")
_HEX = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True, slots=True)
class AttributeTest:
    name: str
    operator: str | None = None
    value: str = ""
    ignore_case: bool = False


@dataclass(frozen=True, slots=True)
class PseudoClass:
    name: str
    selectors: tuple[ComplexSelector, ...] = ()
    nth: tuple[int, int] = (0, 0)


@dataclass(frozen=True, slots=True)
class CompoundSelector:
    tag: str | None = None
    ids: tuple[str, ...] = ()
    classes: tuple[str, ...] = ()
    attributes: tuple[AttributeTest, ...] = ()
    pseudos: tuple[PseudoClass, ...] = ()


@dataclass(frozen=True, slots=True)
class ComplexSelector:
    """Compounds joined by combinators; ``steps[0]`` has combinator ``None``."""

    steps: tuple[tuple[str | None, CompoundSelector], ...] = field(default_factory=tuple)

    @property
    def specificity(self) -> tuple[int, int, int]:
        a = b = c = 0
        for _, compound in self.steps:
            a += len(compound.ids)
            b += len(compound.classes) + len(compound.attributes)
            for pseudo in compound.pseudos:
                if pseudo.selectors:
                    inner = max(s.specificity for s in pseudo.selectors)
                    a, b, c = a + inner[0], b + inner[1], c + inner[2]
                else:
                    b += 1
            if compound.tag not in (None, "*"):
                c += 1
        return (a, b, c)


SelectorList = tuple[ComplexSelector, ...]


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def error(self, reason: str) -> SelectorSyntaxError:
        return SelectorSyntaxError(self.text, f"{reason} at position {self.pos}")

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_ws(self) -> bool:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1
        return self.pos > start

    def expect(self, char: str) -> None:
        if self.peek() != char:
            raise self.error(f"expected {char!r}")
        self.pos += 1

    def at_ident(self) -> bool:
        ch = self.peek()
        if not ch:
            return False
        if ch == "-":
            nxt = self.text[self.pos + 1 : self.pos + 2]
            return bool(nxt) and (nxt.isalpha() or nxt in "-_\\" or ord(nxt) >= 0x80)
        return ch.isalpha() or ch in "_\\" or ord(ch) >= 0x80

    def ident(self) -> str:
        if not self.at_ident():
            raise self.error("expected identifier")
        out: list[str] = []
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch == "\\":
                out.append(self._escape())
            elif ch.isalnum() or ch in "-_" or ord(ch) >= 0x80:
                out.append(ch)
                self.pos += 1
            else:
                break
        return "".join(out)

    def _escape(self) -> str:
        self.pos += 1
        if self.pos >= len(self.text):
            return "�"
        digits = ""
        while self.pos < len(self.text) and len(digits) < 6 and self.text[self.pos] in _HEX:
            digits += self.text[self.pos]
            self.pos += 1
        if digits:
            if self.peek().isspace():
                self.pos += 1
            code = int(digits, 16)
            return chr(code) if 0 < code <= 0x10FFFF else "�"
        ch = self.text[self.pos]
        self.pos += 1
        return ch

    def string(self) -> str:
        quote = self.peek()
        self.pos += 1
        out: list[str] = []
        while True:
            if self.pos >= len(self.text):
                raise self.error("unterminated string")
            ch = self.text[self.pos]
            if ch == quote:
                self.pos += 1
                return "".join(out)
            if ch == "\\":
                out.append(self._escape())
            else:
                out.append(ch)
                self.pos += 1

    def selector_list(self, nested: bool = False) -> SelectorList:
        selectors = []
        while True:
            self.skip_ws()
            selectors.append(self.complex_selector(nested))
            self.skip_ws()
            if self.peek() == ",":
                self.pos += 1
                continue
            break
        return tuple(selectors)

    def complex_selector(self, nested: bool) -> ComplexSelector:
        steps: list[tuple[str | None, CompoundSelector]] = [(None, self.compound())]
        while True:
            had_ws = self.skip_ws()
            ch = self.peek()
            if ch in ("", ",") or (nested and ch == ")"):
                break
            if ch in ">+~":
                self.pos += 1
                self.skip_ws()
                combinator = ch
            elif had_ws:
                combinator = " "
            else:
                raise self.error(f"unexpected {ch!r}")
            steps.append((combinator, self.compound()))
        return ComplexSelector(tuple(steps))

    def compound(self) -> CompoundSelector:
        tag: str | None = None
        ids: list[str] = []
        classes: list[str] = []
        attributes: list[AttributeTest] = []
        pseudos: list[PseudoClass] = []

        if self.peek() == "*":
            self.pos += 1
            tag = "*"
        elif self.at_ident():
            tag = self.ident().lower()

        while True:
            ch = self.peek()
            if ch == "#":
                self.pos += 1
                ids.append(self.ident())
            elif ch == ".":
                self.pos += 1
                classes.append(self.ident())
            elif ch == "[":
                attributes.append(self.attribute())
            elif ch == ":":
                pseudos.append(self.pseudo())
            else:
                break

        if tag is None and not (ids or classes or attributes or pseudos):
            raise self.error("expected selector")
        return CompoundSelector(tag, tuple(ids), tuple(classes), tuple(attributes), tuple(pseudos))

    def attribute(self) -> AttributeTest:
        self.expect("[")
        self.skip_ws()
        name = self.ident().lower()
        self.skip_ws()
        ch = self.peek()
        if ch == "]":
            self.pos += 1
            return AttributeTest(name)
        if ch == "=":
            operator = "="
            self.pos += 1
        elif ch in "~|^$*" and self.text[self.pos + 1 : self.pos + 2] == "=":
            operator = ch + "="
            self.pos += 2
        else:
            raise self.error("expected attribute operator")
        self.skip_ws()
        value = self.string() if self.peek() in "\"'" else self.ident()
        self.skip_ws()
        ignore_case = False
        if self.peek() in ("i", "I"):
            self.pos += 1
            ignore_case = True
            self.skip_ws()
        elif self.peek() in ("s", "S"):
            self.pos += 1
            self.skip_ws()
        self.expect("]")
        return AttributeTest(name, operator, value, ignore_case)

    def pseudo(self) -> PseudoClass:
        self.expect(":")
        if self.peek() == ":":
            raise self.error("pseudo-elements are not supported")
        name = self.ident().lower()
        if name in ("not", "is", "where", "matches"):
            self.expect("(")
            selectors = self.selector_list(nested=True)
            self.skip_ws()
            self.expect(")")
            return PseudoClass("not" if name == "not" else "is", selectors=selectors)
        if name in ("nth-child", "nth-of-type", "nth-last-child", "nth-last-of-type"):
            self.expect("(")
            end = self.text.find(")", self.pos)
            if end < 0:
                raise self.error("unterminated argument")
            nth = parse_nth(self.text[self.pos : end], self.text)
            self.pos = end + 1
            return PseudoClass(name, nth=nth)
        if name in _SIMPLE_PSEUDOS or name in DYNAMIC_STATES:
            return PseudoClass(name)
        raise self.error(f"unsupported pseudo-class :{name}")


_SIMPLE_PSEUDOS = frozenset(
    {
        "first-child",
        "last-child",
        "only-child",
        "first-of-type",
        "last-of-type",
        "only-of-type",
        "root",
        "disabled",
        "enabled",
        "checked",
        "empty",
        "link",
        "any-link",
    }
)


def parse_nth(argument: str, selector: str = "") -> tuple[int, int]:
    """Parse an ``An+B`` expression into ``(a, b)``."""
    text = argument.strip().lower()
    if text == "odd":
        return (2, 1)
    if text == "even":
        return (2, 0)
    if re.fullmatch(r"[+-]?\d+", text):
        return (0, int(text))
    match = _NTH_PATTERN.match(text)
    if not match:
        raise SelectorSyntaxError(selector or argument, f"invalid nth expression {argument!r}")
    coefficient, sign, offset = match.groups()
    if coefficient in ("", "+"):
        a = 1
    elif coefficient == "-":
        a = -1
    else:
        a = int(coefficient)
    b = int(offset) if offset else 0
    if sign == "-":
        b = -b
    return (a, b)


def _nth_matches(a: int, b: int, index: int) -> bool:
    if a == 0:
        return index == b
    n, remainder = divmod(index - b, a)
    return remainder == 0 and n >= 0


@lru_cache(maxsize=512)
def compile_selector(selector: str) -> SelectorList:
    """Parse ``selector`` into a cached selector list.

    Raises
    ------
    SelectorSyntaxError
        If the selector is empty or uses unsupported syntax
    """
    if not selector or not selector.strip():
        raise SelectorSyntaxError(selector, "empty selector")
    parser = _Parser(selector)
    selectors = parser.selector_list()
    if parser.pos != len(selector):
        raise parser.error("unexpected trailing input")
    return selectors


# ============================================================================
# Matching
# ============================================================================


def _siblings(element: ElementPort) -> list[ElementPort]:
    parent = element.parent
    return list(parent.children) if parent is not None else [element]


def _position(element: ElementPort, same_type: bool, from_end: bool) -> int:
    siblings = _siblings(element)
    if same_type:
        siblings = [s for s in siblings if s.tag_name == element.tag_name]
    if from_end:
        siblings = siblings[::-1]
    return next(i for i, s in enumerate(siblings, start=1) if s is element)


def _is_disabled(element: ElementPort) -> bool:
    if element.tag_name not in ("button", "input", "select", "textarea", "option", "fieldset"):
        return False
    if element.has_attribute("disabled"):
        return True
    ancestor = element.parent
    while ancestor is not None:
        if ancestor.tag_name == "fieldset" and ancestor.has_attribute("disabled"):
            return True
        ancestor = ancestor.parent
    return False


def _match_attribute(element: ElementPort, test: AttributeTest) -> bool:
    actual = element.get_attribute(test.name)
    if actual is None:
        return False
    if test.operator is None:
        return True
    expected = test.value
    if test.ignore_case:
        actual, expected = actual.lower(), expected.lower()
    match test.operator:
        case "=":
            return actual == expected
        case "~=":
            return expected in actual.split()
        case "|=":
            return actual == expected or actual.startswith(expected + "-")
        case "^=":
            return bool(expected) and actual.startswith(expected)
        case "$=":
            return bool(expected) and actual.endswith(expected)
        case "*=":
            return bool(expected) and expected in actual
    return False


def _match_pseudo(element: ElementPort, pseudo: PseudoClass, states: frozenset[str]) -> bool:
    name = pseudo.name
    if name == "not":
        return not any(_match_complex(element, s, states) for s in pseudo.selectors)
    if name == "is":
        return any(_match_complex(element, s, states) for s in pseudo.selectors)
    if name in ("nth-child", "nth-of-type", "nth-last-child", "nth-last-of-type"):
        index = _position(element, "of-type" in name, "last" in name)
        return _nth_matches(*pseudo.nth, index)
    if name in DYNAMIC_STATES:
        return name in states
    match name:
        case "first-child":
            return _position(element, False, False) == 1
        case "last-child":
            return _position(element, False, True) == 1
        case "only-child":
            return len(_siblings(element)) == 1
        case "first-of-type":
            return _position(element, True, False) == 1
        case "last-of-type":
            return _position(element, True, True) == 1
        case "only-of-type":
            return sum(1 for s in _siblings(element) if s.tag_name == element.tag_name) == 1
        case "root":
            return element.parent is None
        case "disabled":
            return _is_disabled(element)
        case "enabled":
            return not _is_disabled(element)
        case "checked":
            return element.has_attribute("checked") or element.has_attribute("selected")
        case "empty":
            return not element.children and not element.text_content
        case "link" | "any-link":
            return element.tag_name in ("a", "area") and element.has_attribute("href")
    return False


def _match_compound(
    element: ElementPort, compound: CompoundSelector, states: frozenset[str]
) -> bool:
    if compound.tag not in (None, "*") and element.tag_name != compound.tag:
        return False
    if compound.ids and any(element.get_attribute("id") != i for i in compound.ids):
        return False
    if compound.classes:
        classes = (element.get_attribute("class") or "").split()
        if any(c not in classes for c in compound.classes):
            return False
    if any(not _match_attribute(element, a) for a in compound.attributes):
        return False
    return all(_match_pseudo(element, p, states) for p in compound.pseudos)


def _match_from(
    element: ElementPort,
    steps: tuple[tuple[str | None, CompoundSelector], ...],
    index: int,
    states: frozenset[str],
) -> bool:
    combinator, compound = steps[index]
    if not _match_compound(element, compound, states):
        return False
    if index == 0:
        return True
    match combinator:
        case ">":
            parent = element.parent
            return parent is not None and _match_from(parent, steps, index - 1, states)
        case " ":
            ancestor = element.parent
            while ancestor is not None:
                if _match_from(ancestor, steps, index - 1, states):
                    return True
                ancestor = ancestor.parent
            return False
        case "+":
            siblings = _siblings(element)
            position = next(i for i, s in enumerate(siblings) if s is element)
            return position > 0 and _match_from(siblings[position - 1], steps, index - 1, states)
        case "~":
            siblings = _siblings(element)
            position = next(i for i, s in enumerate(siblings) if s is element)
            return any(_match_from(s, steps, index - 1, states) for s in siblings[:position])
    return False


def _match_complex(
    element: ElementPort, selector: ComplexSelector, states: frozenset[str]
) -> bool:
    return _match_from(element, selector.steps, len(selector.steps) - 1, states)


def matches(
    element: ElementPort, selector: str | SelectorList, states: frozenset[str] = frozenset()
) -> bool:
    """Return whether ``element`` matches ``selector``.

    ``states`` lists the dynamic pseudo-classes (``focus``, ``hover`` ...)
    considered active for ``element``.
    """
    selectors = compile_selector(selector) if isinstance(selector, str) else selector
    return any(_match_complex(element, s, states) for s in selectors)


def iter_descendants(root: ElementPort) -> Iterator[ElementPort]:
    """Yield descendants of ``root`` in document order (``root`` excluded)."""
    stack = list(reversed(root.children))
    while stack:
        element = stack.pop()
        yield element
        stack.extend(reversed(element.children))


def select(root: ElementPort, selector: str, include_root: bool = False) -> list[ElementPort]:
    """Return elements under ``root`` matching ``selector`` in document order."""
    selectors = compile_selector(selector)
    found = []
    if include_root and matches(root, selectors):
        found.append(root)
    for element in iter_descendants(root):
        if matches(element, selectors):
            found.append(element)
    return found

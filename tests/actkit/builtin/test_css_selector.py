"""Tests for the CSS selector engine used by the static HTML adapter."""

import pytest

from actkit.builtin.adapters.html import parse_html, select
from actkit.builtin.adapters.html.css_selector import compile_selector, matches, parse_nth
from actkit.kernel.exceptions import SelectorSyntaxError

MARKUP = """
<nav id="top" class="menu main">
  <a href="/home" lang="en-US">Home</a>
  <a href="https://example.com/docs" target="_blank">Docs</a>
  <a name="anchor">Anchor</a>
</nav>
<form>
  <fieldset disabled><input id="a" type="text"></fieldset>
  <input id="b" type="checkbox" checked>
  <button type="submit">Go</button>
</form>
<ul><li>1</li><li>2</li><li>3</li><li>4</li></ul>
"""


@pytest.fixture
def root():
    return parse_html(MARKUP)


def _ids_or_text(elements) -> list[str]:
    return [e.get_attribute("id") or e.text_content.strip() for e in elements]


class TestParsing:
    """Tests for compile_selector."""

    @pytest.mark.parametrize(
        "selector",
        ["", "   ", "a[", "a >", "::before", ":hover(", "a:unknown", "li:nth-child(x)"],
    )
    def test_invalid_selectors(self, selector: str) -> None:
        with pytest.raises(SelectorSyntaxError):
            compile_selector(selector)

    def test_selector_list(self) -> None:
        assert len(compile_selector("h1, h2 , [role='heading']")) == 3

    def test_specificity(self) -> None:
        (selector,) = compile_selector("nav#top a.link:hover")
        assert selector.specificity == (1, 2, 2)

    @pytest.mark.parametrize(
        ("argument", "expected"),
        [("odd", (2, 1)), ("even", (2, 0)), ("3", (0, 3)), ("2n+1", (2, 1)), ("-n+3", (-1, 3))],
    )
    def test_parse_nth(self, argument: str, expected: tuple[int, int]) -> None:
        assert parse_nth(argument) == expected


class TestMatching:
    """Tests for select and matches."""

    def test_attribute_operators(self, root) -> None:
        assert _ids_or_text(select(root, "a[href^='https']")) == ["Docs"]
        assert _ids_or_text(select(root, "a[href$='home']")) == ["Home"]
        assert _ids_or_text(select(root, "a[href*='example']")) == ["Docs"]
        assert _ids_or_text(select(root, "a[lang|='en']")) == ["Home"]
        assert _ids_or_text(select(root, "nav[class~='main']")) == ["top"]
        assert _ids_or_text(select(root, "a[target='_BLANK' i]")) == ["Docs"]

    def test_not_and_comma(self, root) -> None:
        assert _ids_or_text(select(root, "a:not([href])")) == ["Anchor"]
        assert len(select(root, "a[href], button")) == 3

    def test_combinators(self, root) -> None:
        assert len(select(root, "nav > a")) == 3
        assert _ids_or_text(select(root, "li + li + li")) == ["3", "4"]
        assert _ids_or_text(select(root, "fieldset ~ input")) == ["b"]
        assert _ids_or_text(select(root, "form input")) == ["a", "b"]

    def test_structural_pseudo_classes(self, root) -> None:
        assert _ids_or_text(select(root, "li:first-child")) == ["1"]
        assert _ids_or_text(select(root, "li:last-child")) == ["4"]
        assert _ids_or_text(select(root, "li:nth-child(even)")) == ["2", "4"]
        assert _ids_or_text(select(root, "li:nth-last-child(1)")) == ["4"]

    def test_form_state_pseudo_classes(self, root) -> None:
        assert _ids_or_text(select(root, "input:disabled")) == ["a"]
        assert _ids_or_text(select(root, "input:enabled")) == ["b"]
        assert _ids_or_text(select(root, ":checked")) == ["b"]

    def test_dynamic_states(self, root) -> None:
        button = select(root, "button")[0]
        assert not matches(button, "button:focus")
        assert matches(button, "button:focus", frozenset({"focus"}))

    def test_results_in_document_order(self, root) -> None:
        tags = [e.tag_name for e in select(root, "button, nav, li")]
        assert tags == ["nav", "button", "li", "li", "li", "li"]

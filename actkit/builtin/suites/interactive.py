"""Interactive element checks written with the suite DSL."""

from __future__ import annotations

from actkit.builtin.suites.dsl import CaseMeta, CaseVerdict, Signal, SuiteBuilder, suite
from actkit.kernel.domain.models import LegacySeverity
from actkit.kernel.ports.document import ElementPort

FOCUSABLE_SELECTORS = (
    "a[href]",
    "area[href]",
    "button:not([disabled])",
    "input:not([disabled]):not([type='hidden'])",
    "select:not([disabled])",
    "textarea:not([disabled])",
    "iframe",
    "[tabindex]:not([tabindex='-1'])",
    "[contenteditable='true']",
)
INTERACTIVE_SUITE_SELECTOR = ", ".join(FOCUSABLE_SELECTORS)
VALID_BUTTON_TYPES = frozenset({"button", "submit", "reset"})
CLICK_HANDLER_DEPTH = 3


def _interactive_ids(signal: Signal) -> set[int]:
    return {id(e) for e in signal.document.query_all(INTERACTIVE_SUITE_SELECTOR)}


def not_empty(element: ElementPort, signal: Signal) -> CaseVerdict:
    name = signal.document.accessible_name(element)
    empty = (
        not name
        and not element.text_content.strip()
        and not element.has_attribute("aria-label")
        and not element.has_attribute("aria-labelledby")
    )
    if empty:
        return CaseVerdict(False, f"{element.tag_name} has no accessible name or content")
    return CaseVerdict(True, f"{element.tag_name} has proper labeling")


def not_nested(element: ElementPort, signal: Signal) -> CaseVerdict:
    nested = signal.document.query_all(INTERACTIVE_SUITE_SELECTOR, scope=element)
    if nested:
        kinds = ", ".join(e.tag_name for e in nested)
        return CaseVerdict(
            False, f"Found nested interactive elements: {kinds} inside {element.tag_name}"
        )
    return CaseVerdict(True, "No nested interactive elements found")


def no_redundant_click_handler(element: ElementPort, signal: Signal) -> CaseVerdict:
    interactive = _interactive_ids(signal)
    current = element.parent
    depth = 0
    while current is not None and depth < CLICK_HANDLER_DEPTH:
        if current.has_attribute("onclick") or id(current) in interactive:
            return CaseVerdict(
                False,
                f"Element has redundant click handler - parent {current.tag_name} "
                "is already clickable",
            )
        current = current.parent
        depth += 1
    return CaseVerdict(True, "No redundant click handlers found")


def button_type(element: ElementPort, signal: Signal) -> CaseVerdict:
    if element.tag_name != "button":
        return CaseVerdict(True, "Not a button element")
    value = element.get_attribute("type")
    if value is None:
        return CaseVerdict(
            False,
            "Button missing type attribute - defaults to submit which may cause "
            "unexpected form submissions",
        )
    if value in VALID_BUTTON_TYPES:
        return CaseVerdict(True, f'Button has valid type="{value}"')
    return CaseVerdict(False, f'Button has invalid type="{value}"')


def link_click_role(element: ElementPort, signal: Signal) -> CaseVerdict:
    if element.tag_name != "a":
        return CaseVerdict(True, "Not a link element")
    if element.has_attribute("onclick") and not element.has_attribute("role"):
        return CaseVerdict(False, "Link with click handler should have role='button'")
    return CaseVerdict(True, "Link has proper role definition")


def _buttons(s: SuiteBuilder) -> None:
    s.test(
        "Button has valid type attribute",
        button_type,
        CaseMeta("Buttons should have a valid type attribute", LegacySeverity.HIGH),
    )


def _links(s: SuiteBuilder) -> None:
    s.test(
        "Links with click handlers have roles",
        link_click_role,
        CaseMeta("Links with click handlers should have appropriate roles", LegacySeverity.HIGH),
    )


def _body(s: SuiteBuilder) -> None:
    s.test(
        "No empty interactive elements",
        not_empty,
        CaseMeta("Interactive elements must have an accessible name", LegacySeverity.CRITICAL),
    )
    s.test(
        "No nested interactive elements",
        not_nested,
        CaseMeta("Interactive elements should not be nested within each other", LegacySeverity.CRITICAL),
    )
    s.test(
        "No redundant click handlers",
        no_redundant_click_handler,
        CaseMeta("Elements should not have redundant click handlers", LegacySeverity.HIGH),
    )
    s.describe("Button Specific Tests", _buttons)
    s.describe("Link Specific Tests", _links)


interactive_suite = suite("Interactive Elements", INTERACTIVE_SUITE_SELECTOR, _body)

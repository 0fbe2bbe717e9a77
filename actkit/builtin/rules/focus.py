"""Keyboard focus rules.

Both rules run on a static document, so they read the cascade instead of
moving focus. ``focus-visible`` compares each element's style with and without
``:focus``/``:focus-visible`` rules applied. ``focus-order`` has no layout
information and checks the tab sequence for positive ``tabindex`` values,
which take elements out of document order.
"""

from __future__ import annotations

from collections.abc import Mapping

from actkit.builtin.rules._common import INTERACTIVE_SELECTOR, tab_index
from actkit.kernel.domain.models import Outcome, RuleCategory, Severity
from actkit.kernel.domain.rule import RuleContext, RuleDefinition, create_act_rule
from actkit.kernel.ports.document import DocumentPort, ElementPort
from actkit.kernel.wcag import get_wcag_reference

FOCUS_VISIBLE_URL = "https://www.w3.org/WAI/WCAG21/Understanding/focus-visible.html"
FOCUS_ORDER_URL = "https://www.w3.org/WAI/WCAG21/Understanding/focus-order.html"

FOCUS_VISIBLE_SAMPLE = 10
FOCUS_ORDER_SAMPLE = 15
FOCUS_CUSTOM_PROPERTIES = ("--focus-ring", "--focus-outline", "--focus-shadow")
_NO_OUTLINE_VALUES = frozenset({"0", "0px", "none"})
_NO_SHADOW_VALUES = frozenset({"", "none", "rgba(0, 0, 0, 0) none 0px 0px 0px 0px"})


def _outline(style: Mapping[str, str]) -> str:
    return (style.get("outline") or style.get("outline-style") or "").strip().lower()


def _is_outline_none(value: str) -> bool:
    if not value:
        return False
    tokens = value.split()
    return value in _NO_OUTLINE_VALUES or "none" in tokens or tokens[0] in ("0", "0px")


def describe_focus_indicator(base: Mapping[str, str], focused: Mapping[str, str]) -> str | None:
    """Return a failure message, or ``None`` when a focus indicator is visible.

    An element without any outline declaration keeps the browser's default
    focus ring and passes.
    """
    outline = _outline(focused)
    outline_none = _is_outline_none(outline)
    outline_changed = bool(outline) and not outline_none and outline != _outline(base)

    shadow = (focused.get("box-shadow") or "").strip().lower()
    shadow_changed = shadow not in _NO_SHADOW_VALUES and shadow != (
        base.get("box-shadow") or ""
    ).strip().lower()

    custom_property = any(focused.get(name, "").strip() for name in FOCUS_CUSTOM_PROPERTIES)

    if outline_changed or shadow_changed or custom_property or not outline_none:
        return None
    return "Element has outline:none without alternative focus styles"


def _interactive(document: DocumentPort) -> list[ElementPort]:
    return document.query_all(INTERACTIVE_SELECTOR)


def _has_interactive(document: DocumentPort) -> bool:
    return document.query(INTERACTIVE_SELECTOR) is not None


def _has_two_interactive(document: DocumentPort) -> bool:
    return len(_interactive(document)) > 1


async def _check_focus_visible(ctx: RuleContext) -> None:
    for element in _interactive(ctx.document)[:FOCUS_VISIBLE_SAMPLE]:
        await ctx.checkpoint()
        base = ctx.document.computed_style(element)
        focused = ctx.document.computed_style(element, state="focus")
        problem = describe_focus_indicator(base, focused)
        if problem is None:
            ctx.report(element, Outcome.PASSED, "Element has visible focus indicator")
        else:
            ctx.report(element, Outcome.FAILED, problem, impact=Severity.SERIOUS)


def tab_sequence(elements: list[ElementPort]) -> list[ElementPort]:
    """Order focusable elements the way sequential keyboard navigation visits them.

    Positive ``tabindex`` values come first in ascending order, then everything
    else in document order.
    """
    positions = {id(element): index for index, element in enumerate(elements)}

    def key(element: ElementPort) -> tuple[int, int, int]:
        value = tab_index(element)
        if value > 0:
            return (0, value, positions[id(element)])
        return (1, 0, positions[id(element)])

    return sorted(elements, key=key)


async def _check_focus_order(ctx: RuleContext) -> None:
    sequence = tab_sequence(_interactive(ctx.document))[:FOCUS_ORDER_SAMPLE]
    for element in sequence:
        await ctx.checkpoint()
        value = tab_index(element)
        if value > 0:
            ctx.report(
                element,
                Outcome.FAILED,
                f"Element has tabindex={value} which may disrupt the logical focus order",
                impact=Severity.SERIOUS,
            )
        else:
            ctx.report(element, Outcome.PASSED, "Element follows a logical focus order")


focus_visible_rule = create_act_rule(
    "focus-visible",
    "Interactive elements have visible focus indicator",
    "Interactive elements must have a visible focus indicator when focused via keyboard",
    categories=[RuleCategory.FOCUS, RuleCategory.KEYBOARD],
    wcag_requirements=get_wcag_reference("2.4.7"),
    is_applicable=_has_interactive,
    execute=_check_focus_visible,
    input_aspects=["DOM Tree", "CSS Styling"],
    help_url=FOCUS_VISIBLE_URL,
)

focus_order_rule = create_act_rule(
    "focus-order",
    "Focus order is logical",
    "Tab order through interactive elements should follow a logical sequence",
    categories=[RuleCategory.FOCUS, RuleCategory.KEYBOARD],
    wcag_requirements=get_wcag_reference("2.4.3"),
    is_applicable=_has_two_interactive,
    execute=_check_focus_order,
    help_url=FOCUS_ORDER_URL,
)

FOCUS_RULES: tuple[RuleDefinition, ...] = (focus_visible_rule, focus_order_rule)

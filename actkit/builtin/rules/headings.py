"""Heading structure rules."""

from __future__ import annotations

from actkit.builtin.rules._common import H1_SELECTOR, HEADING_SELECTOR, get_heading_level
from actkit.kernel.domain.models import Outcome, RuleCategory, Severity
from actkit.kernel.domain.rule import RuleContext, RuleDefinition, create_act_rule
from actkit.kernel.ports.document import DocumentPort
from actkit.kernel.wcag import get_wcag_reference, get_wcag_references

HEADINGS_AND_LABELS_URL = "https://www.w3.org/WAI/WCAG21/Understanding/headings-and-labels.html"
INFO_AND_RELATIONSHIPS_URL = (
    "https://www.w3.org/WAI/WCAG21/Understanding/info-and-relationships.html"
)


def _has_headings(document: DocumentPort) -> bool:
    return document.query(HEADING_SELECTOR) is not None


def _has_two_headings(document: DocumentPort) -> bool:
    return len(document.query_all(HEADING_SELECTOR)) >= 2


async def _check_heading_names(ctx: RuleContext) -> None:
    for heading in ctx.document.query_all(HEADING_SELECTOR):
        await ctx.checkpoint()
        name = ctx.document.accessible_name(heading)
        level = get_heading_level(heading)
        if name:
            ctx.report(heading, Outcome.PASSED, f'Level {level} heading has accessible name: "{name}"')
        else:
            ctx.report(
                heading,
                Outcome.FAILED,
                f"Level {level} heading is empty",
                impact=Severity.SERIOUS,
            )


async def _check_first_heading(ctx: RuleContext) -> None:
    first = ctx.document.query(HEADING_SELECTOR)
    if first is None:
        return
    await ctx.checkpoint()
    level = get_heading_level(first)
    if level == 1:
        ctx.report(first, Outcome.PASSED, "Document starts with h1 heading")
    else:
        ctx.report(
            first,
            Outcome.FAILED,
            f"Document starts with h{level} - should start with h1",
            impact=Severity.CRITICAL,
        )


async def _check_heading_order(ctx: RuleContext) -> None:
    """Walk headings in document order.

    A heading fails when it skips a level relative to the heading right before
    it, or when it nests deeper than one level below the last heading that was
    itself correctly placed. The second check catches runs such as
    ``h1, h3, h4`` where ``h4`` follows ``h3`` fine but the outline below ``h1``
    is still broken. The first heading is covered by ``page-has-heading-one``.
    """
    headings = ctx.document.query_all(HEADING_SELECTOR)
    if len(headings) < 2:
        return

    previous_level = get_heading_level(headings[0])
    last_valid_level = previous_level
    for heading in headings[1:]:
        await ctx.checkpoint()
        level = get_heading_level(heading)
        if level > previous_level + 1:
            ctx.report(
                heading,
                Outcome.FAILED,
                f"Invalid heading structure: h{previous_level} is followed by h{level} "
                "- can only increase by one level",
                impact=Severity.SERIOUS,
            )
        elif level > last_valid_level + 1:
            ctx.report(
                heading,
                Outcome.FAILED,
                f"Invalid heading structure: h{level} is nested under a skipped level "
                f"- expected at most h{last_valid_level + 1}",
                impact=Severity.SERIOUS,
            )
        else:
            last_valid_level = level
            ctx.report(
                heading, Outcome.PASSED, f"Level {level} heading follows h{previous_level} correctly"
            )
        previous_level = level


async def _check_has_h1(ctx: RuleContext) -> None:
    h1s = ctx.document.query_all(H1_SELECTOR)
    if h1s:
        ctx.report(h1s[0], Outcome.PASSED, "Page has an h1 heading")
        return
    target = ctx.document.body or ctx.document.document_element
    ctx.report(
        target,
        Outcome.FAILED,
        "Page has no h1 heading - add one that describes the page content",
        impact=Severity.SERIOUS,
    )


async def _check_single_h1(ctx: RuleContext) -> None:
    h1s = ctx.document.query_all(H1_SELECTOR)
    target = h1s[0] if h1s else ctx.document.body or ctx.document.document_element
    if len(h1s) == 1:
        ctx.report(target, Outcome.PASSED, "Page has exactly one h1 heading")
    else:
        ctx.report(
            target,
            Outcome.FAILED,
            f"Page has {len(h1s)} h1 headings - should have exactly one",
            impact=Severity.SERIOUS,
        )


heading_accessible_name_rule = create_act_rule(
    "heading-has-accessible-name",
    "Headings must have an accessible name",
    "This rule checks that all heading elements have non-empty accessible names.",
    categories=[RuleCategory.HEADINGS, RuleCategory.STRUCTURE],
    wcag_requirements=get_wcag_references("2.4.6", "1.3.1"),
    is_applicable=_has_headings,
    execute=_check_heading_names,
    help_url=HEADINGS_AND_LABELS_URL,
)

first_heading_is_h1_rule = create_act_rule(
    "page-has-heading-one",
    "First heading must be h1",
    "This rule checks that the first heading in the document is an h1.",
    categories=[RuleCategory.HEADINGS, RuleCategory.STRUCTURE],
    wcag_requirements=get_wcag_reference("1.3.1"),
    is_applicable=_has_headings,
    execute=_check_first_heading,
    help_url=INFO_AND_RELATIONSHIPS_URL,
)

heading_order_rule = create_act_rule(
    "heading-order",
    "Heading levels must increase by only one",
    "This rule checks that heading levels only increase by one at a time.",
    categories=[RuleCategory.HEADINGS, RuleCategory.STRUCTURE],
    wcag_requirements=get_wcag_references("1.3.1", "2.4.6"),
    is_applicable=_has_two_headings,
    execute=_check_heading_order,
    help_url=INFO_AND_RELATIONSHIPS_URL,
)

has_h1_rule = create_act_rule(
    "page-has-h1",
    "Page must have an h1 heading",
    "This rule checks that the page contains at least one h1 heading.",
    categories=[RuleCategory.HEADINGS, RuleCategory.STRUCTURE],
    wcag_requirements=get_wcag_references("1.3.1", "2.4.6"),
    execute=_check_has_h1,
    help_url=INFO_AND_RELATIONSHIPS_URL,
)

single_h1_rule = create_act_rule(
    "page-has-single-h1",
    "Only one h1 heading per page",
    "This rule checks that each page has exactly one h1 heading.",
    categories=[RuleCategory.HEADINGS, RuleCategory.STRUCTURE],
    wcag_requirements=get_wcag_references("1.3.1", "2.4.6"),
    execute=_check_single_h1,
    help_url=INFO_AND_RELATIONSHIPS_URL,
)

HEADING_RULES: tuple[RuleDefinition, ...] = (
    heading_accessible_name_rule,
    first_heading_is_h1_rule,
    heading_order_rule,
    has_h1_rule,
    single_h1_rule,
)

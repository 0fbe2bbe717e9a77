"""Link purpose rules."""

from __future__ import annotations

from actkit.builtin.rules._common import LINK_SELECTOR, is_external_link, word_count
from actkit.kernel.domain.models import Outcome, RuleCategory, Severity
from actkit.kernel.domain.rule import RuleContext, RuleDefinition, create_act_rule
from actkit.kernel.ports.document import DocumentPort
from actkit.kernel.wcag import get_wcag_reference

LINK_PURPOSE_URL = "https://www.w3.org/WAI/WCAG21/Understanding/link-purpose-in-context.html"
CONSISTENT_IDENTIFICATION_URL = (
    "https://www.w3.org/WAI/WCAG21/Understanding/consistent-identification.html"
)

NON_DESCRIPTIVE_PHRASES = (
    "click here",
    "click",
    "here",
    "more",
    "read more",
    "learn more",
    "details",
    "link",
)
INVALID_HREFS = frozenset({"#", "javascript:void(0)", "javascript:;"})
MAX_LINK_WORDS = 10
MIN_LINK_CHARS = 2
NEW_WINDOW_HINTS = ("new window", "new tab", "external")


def _has_links(document: DocumentPort) -> bool:
    return document.query(LINK_SELECTOR) is not None


async def _check_link_names(ctx: RuleContext) -> None:
    for link in ctx.document.query_all(LINK_SELECTOR):
        await ctx.checkpoint()
        name = ctx.document.accessible_name(link)
        if name:
            ctx.report(link, Outcome.PASSED, f'Link has accessible name: "{name}"')
        else:
            ctx.report(link, Outcome.FAILED, "Link has no accessible name", impact=Severity.SERIOUS)


def find_non_descriptive_phrase(text: str) -> str | None:
    """First denylisted phrase contained in ``text``, compared case-insensitively."""
    lowered = text.lower()
    return next((phrase for phrase in NON_DESCRIPTIVE_PHRASES if phrase in lowered), None)


async def _check_descriptive_text(ctx: RuleContext) -> None:
    for link in ctx.document.query_all(LINK_SELECTOR):
        await ctx.checkpoint()
        name = ctx.document.accessible_name(link)
        if not name:
            continue
        if find_non_descriptive_phrase(name) is not None:
            ctx.report(
                link,
                Outcome.FAILED,
                f'Link text "{name.lower()}" is not descriptive - avoid generic phrases '
                'like "click here" or "read more"',
                impact=Severity.MODERATE,
            )
        else:
            ctx.report(link, Outcome.PASSED, "Link text is descriptive")


async def _check_text_length(ctx: RuleContext) -> None:
    for link in ctx.document.query_all(LINK_SELECTOR):
        await ctx.checkpoint()
        name = ctx.document.accessible_name(link)
        if not name:
            continue
        words = word_count(name)
        if words > MAX_LINK_WORDS:
            ctx.report(
                link,
                Outcome.FAILED,
                f"Link text is too long ({words} words) - consider making it more concise",
                impact=Severity.MINOR,
            )
        elif len(name) < MIN_LINK_CHARS:
            ctx.report(
                link,
                Outcome.FAILED,
                "Link text is too short - should be meaningful",
                impact=Severity.MINOR,
            )
        else:
            ctx.report(link, Outcome.PASSED, "Link text length is appropriate")


async def _check_duplicate_text(ctx: RuleContext) -> None:
    """Fail links whose text is shared with a link pointing somewhere else.

    The first pass maps each normalized link text to the set of targets it is
    used for. The second pass fails every link whose text maps to more than
    one target.
    """
    links = ctx.document.query_all(LINK_SELECTOR)
    targets: dict[str, set[str]] = {}
    labelled = []
    for link in links:
        await ctx.checkpoint()
        text = ctx.document.accessible_name(link).lower().strip()
        if not text:
            continue
        href = (link.get_attribute("href") or "").strip()
        targets.setdefault(text, set()).add(href)
        labelled.append((link, text))

    for link, text in labelled:
        await ctx.checkpoint()
        if len(targets[text]) <= 1:
            ctx.report(link, Outcome.PASSED, "Link text is unique or points to same destination")
        else:
            ctx.report(
                link,
                Outcome.FAILED,
                f'Same link text "{text}" points to different destinations',
                impact=Severity.MODERATE,
            )


async def _check_external_marked(ctx: RuleContext) -> None:
    base_url = ctx.document.url
    for link in ctx.document.query_all(LINK_SELECTOR):
        await ctx.checkpoint()
        href = link.get_attribute("href") or ""
        if not is_external_link(href, base_url):
            continue

        name = ctx.document.accessible_name(link).lower()
        aria_label = (link.get_attribute("aria-label") or "").lower()
        has_text_hint = any(hint in name for hint in NEW_WINDOW_HINTS) or "external" in aria_label
        has_icon = ctx.document.query('[aria-label*="external"]', scope=link) is not None
        opens_new_window = (link.get_attribute("target") or "") == "_blank"

        if opens_new_window and (has_text_hint or has_icon):
            ctx.report(link, Outcome.PASSED, "External link is properly marked")
        elif opens_new_window:
            ctx.report(
                link,
                Outcome.FAILED,
                "External link should indicate it opens in a new window",
                impact=Severity.MODERATE,
            )
        else:
            ctx.report(link, Outcome.PASSED, "External link opens in the same window")


async def _check_valid_href(ctx: RuleContext) -> None:
    for link in ctx.document.query_all(LINK_SELECTOR):
        await ctx.checkpoint()
        href = (link.get_attribute("href") or "").strip()
        if not href:
            ctx.report(link, Outcome.FAILED, "Missing href attribute", impact=Severity.SERIOUS)
        elif href.lower() in INVALID_HREFS:
            ctx.report(
                link,
                Outcome.FAILED,
                f'Invalid href value "{href}" - use a valid URL or fragment identifier',
                impact=Severity.SERIOUS,
            )
        elif href.startswith("#") and ctx.document.get_element_by_id(href[1:]) is None:
            ctx.report(
                link,
                Outcome.FAILED,
                f'Fragment "{href}" does not point to an existing element ID',
                impact=Severity.SERIOUS,
            )
        else:
            ctx.report(link, Outcome.PASSED, "Link href is valid")


link_accessible_name_rule = create_act_rule(
    "link-accessible-name",
    "Link must have accessible name",
    "Each link must have non-empty accessible text content",
    categories=[RuleCategory.LINKS],
    wcag_requirements=get_wcag_reference("2.4.4"),
    is_applicable=_has_links,
    execute=_check_link_names,
    help_url=LINK_PURPOSE_URL,
)

link_descriptive_text_rule = create_act_rule(
    "link-descriptive-text",
    "Link text is descriptive",
    "Link text should be descriptive and meaningful out of context",
    categories=[RuleCategory.LINKS],
    wcag_requirements=get_wcag_reference("2.4.4"),
    is_applicable=_has_links,
    execute=_check_descriptive_text,
    help_url=LINK_PURPOSE_URL,
)

link_text_length_rule = create_act_rule(
    "link-text-length",
    "Link text length is appropriate",
    "Link text should be concise but meaningful",
    categories=[RuleCategory.LINKS],
    wcag_requirements=get_wcag_reference("2.4.4"),
    is_applicable=_has_links,
    execute=_check_text_length,
    help_url=LINK_PURPOSE_URL,
)

link_duplicate_text_rule = create_act_rule(
    "link-duplicate-text",
    "No duplicate link text with different destinations",
    "Links with the same text should point to the same destination",
    categories=[RuleCategory.LINKS],
    wcag_requirements=get_wcag_reference("2.4.4"),
    is_applicable=_has_links,
    execute=_check_duplicate_text,
    help_url=LINK_PURPOSE_URL,
)

link_external_marked_rule = create_act_rule(
    "link-external-marked",
    "External links should be marked",
    "External links should indicate they open in a new window/tab",
    categories=[RuleCategory.LINKS],
    wcag_requirements=get_wcag_reference("3.2.4"),
    is_applicable=_has_links,
    execute=_check_external_marked,
    help_url=CONSISTENT_IDENTIFICATION_URL,
)

link_valid_href_rule = create_act_rule(
    "link-valid-href",
    "Link href is valid",
    "Link href attribute should be valid and point to content",
    categories=[RuleCategory.LINKS],
    wcag_requirements=get_wcag_reference("2.4.4"),
    is_applicable=_has_links,
    execute=_check_valid_href,
    help_url=LINK_PURPOSE_URL,
)

LINK_RULES: tuple[RuleDefinition, ...] = (
    link_accessible_name_rule,
    link_descriptive_text_rule,
    link_text_length_rule,
    link_duplicate_text_rule,
    link_external_marked_rule,
    link_valid_href_rule,
)

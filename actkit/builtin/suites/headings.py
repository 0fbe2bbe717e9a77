"""Heading structure checks written with the suite DSL."""

from __future__ import annotations

from actkit.builtin.rules._common import H1_SELECTOR, HEADING_SELECTOR, get_heading_level, word_count
from actkit.builtin.suites.dsl import CaseMeta, CaseVerdict, Signal, SuiteBuilder, suite
from actkit.kernel.domain.models import LegacySeverity
from actkit.kernel.ports.document import ElementPort

HEADING_SUITE_SELECTOR = "h1, h2, h3, h4, h5, h6, [role='heading'][aria-level]"
MAX_HEADING_WORDS = 20


def has_accessible_name(element: ElementPort, signal: Signal) -> CaseVerdict:
    name = signal.document.accessible_name(element)
    level = get_heading_level(element)
    if name:
        return CaseVerdict(True, f"Level {level} heading has accessible name")
    return CaseVerdict(False, f"Level {level} heading is empty")


def first_heading_is_h1(element: ElementPort, signal: Signal) -> CaseVerdict:
    level = get_heading_level(element)
    if signal.document.query(HEADING_SELECTOR) is not element:
        return CaseVerdict(True, f"Level {level} heading is not the first heading")
    if level == 1:
        return CaseVerdict(True, "Document starts with h1 heading")
    return CaseVerdict(False, f"Document starts with h{level} - should start with h1")


def levels_increase_by_one(element: ElementPort, signal: Signal) -> CaseVerdict:
    level = get_heading_level(element)
    headings = signal.document.query_all(HEADING_SELECTOR)
    index = next((i for i, h in enumerate(headings) if h is element), 0)
    if index == 0:
        return CaseVerdict(True, f"Level {level} heading starts document")
    previous = get_heading_level(headings[index - 1])
    if level <= previous + 1:
        return CaseVerdict(True, f"Level {level} heading follows h{previous} correctly")
    return CaseVerdict(
        False,
        f"Invalid heading structure: h{previous} is followed by h{level} "
        "- can only increase by one level",
    )


def single_h1(element: ElementPort, signal: Signal) -> CaseVerdict:
    if get_heading_level(element) != 1:
        return CaseVerdict(True, "Not an h1 heading")
    count = len(signal.document.query_all(H1_SELECTOR))
    if count == 1:
        return CaseVerdict(True, "Page has exactly one h1 heading")
    return CaseVerdict(False, f"Page has {count} h1 headings - should have exactly one")


def appropriate_length(element: ElementPort, signal: Signal) -> CaseVerdict:
    name = signal.document.accessible_name(element)
    words = word_count(name)
    if words > MAX_HEADING_WORDS:
        return CaseVerdict(False, f"Heading is too long ({words} words) - consider breaking it up")
    if len(name) < 2:
        return CaseVerdict(False, "Heading is too short - should be meaningful")
    return CaseVerdict(True, "Heading length is appropriate")


def unique_at_level(element: ElementPort, signal: Signal) -> CaseVerdict:
    document = signal.document
    level = get_heading_level(element)
    text = document.accessible_name(element).lower().strip()
    same_level = document.query_all(f"h{level}, [role='heading'][aria-level='{level}']")
    duplicates = [
        h for h in same_level if h is not element and document.accessible_name(h).lower().strip() == text
    ]
    if not duplicates:
        return CaseVerdict(True, "Heading text is unique at this level")
    return CaseVerdict(False, f'Duplicate heading text "{text}" found at level {level}')


def _hierarchy(s: SuiteBuilder) -> None:
    s.test(
        "Heading levels must increase by only one",
        levels_increase_by_one,
        CaseMeta("Heading levels should only increase by one level at a time", LegacySeverity.HIGH),
    )
    s.test(
        "Only one h1 heading per page",
        single_h1,
        CaseMeta("Each page should have exactly one h1 heading", LegacySeverity.HIGH),
    )


def _content(s: SuiteBuilder) -> None:
    s.test(
        "Heading length is appropriate",
        appropriate_length,
        CaseMeta("Headings should be concise and meaningful", LegacySeverity.MEDIUM),
    )
    s.test(
        "No duplicate headings at same level",
        unique_at_level,
        CaseMeta("Headings at the same level should have unique text", LegacySeverity.MEDIUM),
    )


def _body(s: SuiteBuilder) -> None:
    s.test(
        "Heading must have accessible name",
        has_accessible_name,
        CaseMeta("Each heading must have non-empty accessible text content", LegacySeverity.HIGH),
    )
    s.test(
        "First heading must be h1",
        first_heading_is_h1,
        CaseMeta("The first heading in the document must be an h1", LegacySeverity.CRITICAL),
    )
    s.describe("Heading Hierarchy", _hierarchy)
    s.describe("Heading Content", _content)


heading_suite = suite("Heading Structure", HEADING_SUITE_SELECTOR, _body)

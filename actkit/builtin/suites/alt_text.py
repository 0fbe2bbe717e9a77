"""Image alt text checks written with the suite DSL."""

from __future__ import annotations

from actkit.builtin.rules._common import word_count
from actkit.builtin.rules.images import (
    DECORATIVE_ROLES,
    MAX_ALT_CHARS,
    MAX_ALT_WORDS,
    REDUNDANT_PREFIXES,
    looks_like_filename,
)
from actkit.builtin.suites.dsl import CaseMeta, CaseVerdict, Signal, SuiteBuilder, suite
from actkit.kernel.domain.models import LegacySeverity
from actkit.kernel.ports.document import ElementPort

ALT_SUITE_SELECTOR = "img:not([role='presentation']):not([role='none']), img[role='img']"


def has_alt(element: ElementPort, signal: Signal) -> CaseVerdict:
    if element.has_attribute("alt"):
        return CaseVerdict(True, "Image has alt attribute")
    return CaseVerdict(False, "Image is missing alt attribute")


def not_redundant(element: ElementPort, signal: Signal) -> CaseVerdict:
    alt = (element.get_attribute("alt") or "").lower().strip()
    if not alt:
        return CaseVerdict(True, "No alt text to check")
    if any(alt.startswith(prefix) for prefix in REDUNDANT_PREFIXES):
        return CaseVerdict(
            False,
            f'Alt text starts with redundant phrase "{alt}" - remove phrases like '
            '"image of" or "picture of"',
        )
    return CaseVerdict(True, "Alt text does not contain redundant phrases")


def appropriate_length(element: ElementPort, signal: Signal) -> CaseVerdict:
    alt = element.get_attribute("alt") or ""
    if not alt:
        return CaseVerdict(True, "No alt text to check")
    if len(alt) > MAX_ALT_CHARS:
        return CaseVerdict(
            False,
            f"Alt text is too long ({len(alt)} characters) - consider using "
            "aria-describedby for detailed descriptions",
        )
    words = word_count(alt)
    if words > MAX_ALT_WORDS:
        return CaseVerdict(False, f"Alt text is too wordy ({words} words) - should be concise")
    return CaseVerdict(True, "Alt text length is appropriate")


def not_filename(element: ElementPort, signal: Signal) -> CaseVerdict:
    alt = (element.get_attribute("alt") or "").lower().strip()
    if not alt:
        return CaseVerdict(True, "No alt text to check")
    if looks_like_filename(alt):
        return CaseVerdict(
            False, f'Alt text "{alt}" appears to be a filename - provide meaningful description instead'
        )
    return CaseVerdict(True, "Alt text is not a filename")


def decorative_marked(element: ElementPort, signal: Signal) -> CaseVerdict:
    alt = element.get_attribute("alt")
    decorative = (element.get_attribute("role") or "").strip().lower() in DECORATIVE_ROLES
    if decorative and alt != "":
        return CaseVerdict(
            False, "Decorative image (role='presentation/none') should have empty alt text"
        )
    if alt == "" and not decorative:
        return CaseVerdict(
            False,
            'Image with empty alt should be marked as decorative with role="presentation" '
            'or role="none"',
        )
    if decorative:
        return CaseVerdict(True, "Decorative image is properly marked")
    return CaseVerdict(True, "Image is marked as meaningful with alt text")


def _quality(s: SuiteBuilder) -> None:
    s.test(
        "Alt text is not redundant",
        not_redundant,
        CaseMeta("Alt text should not include phrases like 'image of'", LegacySeverity.MEDIUM),
    )
    s.test(
        "Alt text length is appropriate",
        appropriate_length,
        CaseMeta("Alt text should be concise but meaningful", LegacySeverity.MEDIUM),
    )
    s.test(
        "Alt text is not filename",
        not_filename,
        CaseMeta("Alt text should not be a filename", LegacySeverity.HIGH),
    )
    s.test(
        "Decorative images are properly marked",
        decorative_marked,
        CaseMeta(
            "Decorative images should use role='presentation' or role='none' and empty alt",
            LegacySeverity.HIGH,
        ),
    )


def _body(s: SuiteBuilder) -> None:
    s.test(
        "Image must have alt text",
        has_alt,
        CaseMeta("All meaningful images must have an alt attribute", LegacySeverity.CRITICAL),
    )
    s.describe("Alt Text Quality", _quality)


alt_suite = suite("Image Alt Text", ALT_SUITE_SELECTOR, _body)

"""WCAG 2.1 success criterion reference table.

Maps criterion identifiers such as ``"1.1.1"`` to their names and builds the
pass/fail message templates attached to rule metadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

WCAG_VERSION = "2.1"
WCAG_KEY_PREFIX = f"WCAG{WCAG_VERSION}:"
UNKNOWN_CRITERION = "Unknown Criterion"

Level = Literal["A", "AA", "AAA"]


@dataclass(frozen=True, slots=True)
class Criterion:
    """A single WCAG success criterion."""

    id: str
    name: str
    level: Level


@dataclass(frozen=True, slots=True)
class WcagRequirement:
    """Conformance requirement attached to a rule.

    Attributes
    ----------
    id : str
        Criterion identifier, e.g. ``"2.4.6"``
    for_conformance : bool
        Whether failing the rule means the page fails the criterion
    failed : str
        Message used when the page does not meet the criterion
    passed : str
        Message used when the page meets the criterion
    """

    id: str
    for_conformance: bool
    failed: str
    passed: str


_CRITERIA: tuple[Criterion, ...] = (
    Criterion("1.1.1", "Non-text Content", "A"),
    Criterion("1.2.1", "Audio-only and Video-only (Prerecorded)", "A"),
    Criterion("1.2.2", "Captions (Prerecorded)", "A"),
    Criterion("1.2.3", "Audio Description or Media Alternative (Prerecorded)", "A"),
    Criterion("1.2.4", "Captions (Live)", "AA"),
    Criterion("1.2.5", "Audio Description (Prerecorded)", "AA"),
    Criterion("1.3.1", "Info and Relationships", "A"),
    Criterion("1.3.2", "Meaningful Sequence", "A"),
    Criterion("1.3.3", "Sensory Characteristics", "A"),
    Criterion("1.3.4", "Orientation", "AA"),
    Criterion("1.3.5", "Identify Input Purpose", "AA"),
    Criterion("1.3.6", "Identify Purpose", "AAA"),
    Criterion("1.4.1", "Use of Color", "A"),
    Criterion("1.4.2", "Audio Control", "A"),
    Criterion("1.4.3", "Contrast (Minimum)", "AA"),
    Criterion("1.4.4", "Resize text", "AA"),
    Criterion("1.4.5", "Images of Text", "AA"),
    Criterion("1.4.10", "Reflow", "AA"),
    Criterion("1.4.11", "Non-text Contrast", "AA"),
    Criterion("1.4.12", "Text Spacing", "AA"),
    Criterion("1.4.13", "Content on Hover or Focus", "AA"),
    Criterion("2.1.1", "Keyboard", "A"),
    Criterion("2.1.2", "No Keyboard Trap", "A"),
    Criterion("2.1.4", "Character Key Shortcuts", "A"),
    Criterion("2.2.1", "Timing Adjustable", "A"),
    Criterion("2.2.2", "Pause, Stop, Hide", "A"),
    Criterion("2.3.1", "Three Flashes or Below Threshold", "A"),
    Criterion("2.3.3", "Animation from Interactions", "AAA"),
    Criterion("2.4.1", "Bypass Blocks", "A"),
    Criterion("2.4.2", "Page Titled", "A"),
    Criterion("2.4.3", "Focus Order", "A"),
    Criterion("2.4.4", "Link Purpose (In Context)", "A"),
    Criterion("2.4.5", "Multiple Ways", "AA"),
    Criterion("2.4.6", "Headings and Labels", "AA"),
    Criterion("2.4.7", "Focus Visible", "AA"),
    Criterion("2.5.1", "Pointer Gestures", "A"),
    Criterion("2.5.2", "Pointer Cancellation", "A"),
    Criterion("2.5.3", "Label in Name", "A"),
    Criterion("2.5.4", "Motion Actuation", "A"),
    Criterion("3.1.1", "Language of Page", "A"),
    Criterion("3.1.2", "Language of Parts", "AA"),
    Criterion("3.2.1", "On Focus", "A"),
    Criterion("3.2.2", "On Input", "A"),
    Criterion("3.2.3", "Consistent Navigation", "AA"),
    Criterion("3.2.4", "Consistent Identification", "AA"),
    Criterion("3.3.1", "Error Identification", "A"),
    Criterion("3.3.2", "Labels or Instructions", "A"),
    Criterion("3.3.3", "Error Suggestion", "AA"),
    Criterion("3.3.4", "Error Prevention (Legal, Financial, Data)", "AA"),
    Criterion("4.1.1", "Parsing", "A"),
    Criterion("4.1.2", "Name, Role, Value", "A"),
    Criterion("4.1.3", "Status Messages", "AA"),
)

WCAG_CRITERIA: dict[str, Criterion] = {c.id: c for c in _CRITERIA}


def criterion_name(criterion_id: str) -> str:
    """Return the human-readable name of a criterion, or a placeholder."""
    criterion = WCAG_CRITERIA.get(criterion_id)
    return criterion.name if criterion else UNKNOWN_CRITERION


def criterion_key(criterion_id: str) -> str:
    """Return the namespaced key (``WCAG2.1:1.1.1``) for a criterion id."""
    if criterion_id.startswith(WCAG_KEY_PREFIX):
        return criterion_id
    return f"{WCAG_KEY_PREFIX}{criterion_id}"


def strip_criterion_key(key: str) -> str:
    """Inverse of :func:`criterion_key`."""
    return key.removeprefix(WCAG_KEY_PREFIX)


def get_wcag_reference(
    criterion_id: str, for_conformance: bool = True
) -> dict[str, WcagRequirement]:
    """Build the requirement mapping for a single criterion.

    Parameters
    ----------
    criterion_id : str
        Criterion identifier such as ``"2.4.6"``
    for_conformance : bool, default=True
        Whether the rule counts toward conformance of the criterion

    Returns
    -------
    dict[str, WcagRequirement]
        A one-entry mapping keyed by ``WCAG2.1:<id>``

    Examples
    --------
    >>> ref = get_wcag_reference("3.1.1")
    >>> ref["WCAG2.1:3.1.1"].passed
    'This page meets WCAG 2.1 Success Criterion 3.1.1 (Language of Page)'
    """
    name = criterion_name(criterion_id)
    suffix = f"WCAG {WCAG_VERSION} Success Criterion {criterion_id} ({name})"
    return {
        criterion_key(criterion_id): WcagRequirement(
            id=criterion_id,
            for_conformance=for_conformance,
            failed=f"This page does not meet {suffix}",
            passed=f"This page meets {suffix}",
        )
    }


def get_wcag_references(*criterion_ids: str) -> dict[str, WcagRequirement]:
    """Merge :func:`get_wcag_reference` for several criteria."""
    merged: dict[str, WcagRequirement] = {}
    for criterion_id in criterion_ids:
        merged.update(get_wcag_reference(criterion_id))
    return merged

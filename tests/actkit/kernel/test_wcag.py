"""Tests for the WCAG reference table."""

from actkit.kernel.wcag import (
    UNKNOWN_CRITERION,
    WCAG_CRITERIA,
    criterion_key,
    criterion_name,
    get_wcag_reference,
    get_wcag_references,
    strip_criterion_key,
)


class TestCriteriaTable:
    """Tests for criterion lookups."""

    def test_known_criterion_name(self) -> None:
        assert criterion_name("1.1.1") == "Non-text Content"
        assert criterion_name("2.4.7") == "Focus Visible"

    def test_unknown_criterion_name(self) -> None:
        assert criterion_name("9.9.9") == UNKNOWN_CRITERION

    def test_levels(self) -> None:
        """Only A and AA criteria of WCAG 2.1 are listed."""
        assert WCAG_CRITERIA["1.3.5"].level == "AA"
        assert WCAG_CRITERIA["4.1.2"].level == "A"
        assert {c.level for c in WCAG_CRITERIA.values()} <= {"A", "AA", "AAA"}


class TestCriterionKey:
    """Tests for the namespaced key helpers."""

    def test_adds_prefix(self) -> None:
        assert criterion_key("2.4.6") == "WCAG2.1:2.4.6"

    def test_keeps_existing_prefix(self) -> None:
        assert criterion_key("WCAG2.1:2.4.6") == "WCAG2.1:2.4.6"

    def test_strip_is_inverse(self) -> None:
        assert strip_criterion_key(criterion_key("3.1.1")) == "3.1.1"


class TestWcagReference:
    """Tests for requirement construction."""

    def test_single_reference(self) -> None:
        reference = get_wcag_reference("3.1.1")
        requirement = reference["WCAG2.1:3.1.1"]
        assert requirement.id == "3.1.1"
        assert requirement.for_conformance is True
        assert requirement.passed == (
            "This page meets WCAG 2.1 Success Criterion 3.1.1 (Language of Page)"
        )
        assert requirement.failed == (
            "This page does not meet WCAG 2.1 Success Criterion 3.1.1 (Language of Page)"
        )

    def test_not_for_conformance(self) -> None:
        reference = get_wcag_reference("2.4.6", for_conformance=False)
        assert reference["WCAG2.1:2.4.6"].for_conformance is False

    def test_unknown_criterion_uses_placeholder(self) -> None:
        requirement = get_wcag_reference("9.9.9")["WCAG2.1:9.9.9"]
        assert UNKNOWN_CRITERION in requirement.failed

    def test_merged_references_keep_order(self) -> None:
        references = get_wcag_references("2.4.6", "1.3.1")
        assert list(references) == ["WCAG2.1:2.4.6", "WCAG2.1:1.3.1"]

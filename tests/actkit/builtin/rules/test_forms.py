"""Tests for form labelling and autocomplete rules."""

from __future__ import annotations

import pytest

from actkit.builtin.rules.autocomplete import autocomplete_valid_value_rule, is_valid_autocomplete
from actkit.builtin.rules.forms import LabelInfo, find_label, form_label_association_rule
from actkit.kernel.domain.models import Outcome


class TestFindLabel:
    """Labelling mechanisms in priority order."""

    @pytest.mark.parametrize(
        ("markup", "expected"),
        [
            (
                '<label for="email">Email address</label><input id="email">',
                LabelInfo(True, "explicit", "Email address"),
            ),
            ("<label>Name <input></label>", LabelInfo(True, "implicit", "Name")),
            (
                '<span id="l1">Street</span><span id="l2">line 1</span>'
                '<input aria-labelledby="l1 l2">',
                LabelInfo(True, "aria-labelledby", "Street line 1"),
            ),
            ('<input aria-label="Search">', LabelInfo(True, "aria-label", "Search")),
            ('<input title="Phone">', LabelInfo(True, "title", "Phone")),
            ('<input type="submit" value="Send">', LabelInfo(True, "value", "Send")),
            ('<input placeholder="Your name">', LabelInfo(False, "placeholder-only", "Your name")),
            ("<input>", LabelInfo(False)),
        ],
    )
    def test_mechanisms(self, make_document, markup: str, expected: LabelInfo) -> None:
        document = make_document(markup)
        assert find_label(document, document.query("input")) == expected


class TestFormLabelRule:
    @pytest.mark.asyncio
    async def test_controls_and_summary(self, run_rule) -> None:
        markup = (
            '<label for="email">Email</label><input id="email">'
            "<label>Name <input></label>"
            '<input id="q" placeholder="Search">'
            '<input type="submit" value="Send">'
            "<button>Save</button>"
            "<input disabled>"
            '<input type="hidden" name="token">'
            '<input style="display: none">'
        )
        results = await run_rule(form_label_association_rule, markup)

        element_results = [r for r in results if r.element is not None]
        assert [r.outcome for r in element_results] == [
            Outcome.PASSED,
            Outcome.PASSED,
            Outcome.FAILED,
            Outcome.PASSED,
            Outcome.PASSED,
        ]
        assert element_results[2].message == (
            "Form control (input) has only a placeholder and no proper label"
        )
        assert 'using content: "Save"' in element_results[4].message

        summary = results[-1]
        assert summary.element is None
        assert summary.outcome == Outcome.FAILED
        assert summary.message == "4 out of 5 form controls have proper labels"

    @pytest.mark.asyncio
    async def test_all_labelled(self, run_rule) -> None:
        results = await run_rule(form_label_association_rule, '<select aria-label="Size"></select>')
        assert [r.outcome for r in results] == [Outcome.PASSED, Outcome.PASSED]

    @pytest.mark.asyncio
    async def test_aria_widget_without_label(self, run_rule) -> None:
        results = await run_rule(form_label_association_rule, '<div role="checkbox"></div>')
        assert results[0].message == "Form control (checkbox) has no associated label"


class TestAutocompleteGrammar:
    @pytest.mark.parametrize(
        "value",
        [
            "on",
            "off",
            "email",
            "shipping street-address",
            "billing tel",
            "work email",
            "section-checkout billing mobile tel",
            "username webauthn",
            "  Given-Name  ",
        ],
    )
    def test_valid(self, value: str) -> None:
        assert is_valid_autocomplete(value)

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "foo",
            "home street-address",
            "email work",
            "billing shipping street-address",
            "email webauthn",
            "webauthn",
            "on off",
        ],
    )
    def test_invalid(self, value: str) -> None:
        assert not is_valid_autocomplete(value)


class TestAutocompleteRule:
    @pytest.mark.asyncio
    async def test_candidates(self, run_rule) -> None:
        markup = (
            '<input id="ok" autocomplete="email">'
            '<input id="bad" autocomplete="mail">'
            '<input type="submit" autocomplete="foo">'
            '<input autocomplete="foo" disabled>'
            '<input autocomplete="">'
            '<textarea id="addr" autocomplete="street-address"></textarea>'
        )
        results = await run_rule(autocomplete_valid_value_rule, markup)
        assert [(r.selector, r.outcome) for r in results] == [
            ("#ok", Outcome.PASSED),
            ("#bad", Outcome.FAILED),
            ("#addr", Outcome.PASSED),
        ]
        assert results[1].wcag_criteria == ("WCAG2.1:1.3.5",)

    @pytest.mark.asyncio
    async def test_no_candidates_is_inapplicable(self, run_rule) -> None:
        assert await run_rule(autocomplete_valid_value_rule, '<input type="checkbox" autocomplete="on">') == []

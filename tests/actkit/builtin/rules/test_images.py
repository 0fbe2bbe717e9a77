"""Tests for image text alternative rules."""

from __future__ import annotations

import pytest

from actkit.builtin.rules.images import (
    alt_quality_problem,
    image_accessible_name_rule,
    image_alt_quality_rule,
    is_placeholder_alt,
    looks_like_filename,
)
from actkit.kernel.domain.models import Outcome, Severity


class TestAltHeuristics:
    """Pure checks on alt strings."""

    def test_filename_fails(self) -> None:
        assert "appears to be a filename" in alt_quality_problem("IMG_0001.jpg")

    def test_descriptive_sentence_passes(self) -> None:
        assert alt_quality_problem("Diagram of the request lifecycle across three services") is None

    def test_short_description_passes(self) -> None:
        assert alt_quality_problem("Company logo") is None

    def test_bare_digit_run(self) -> None:
        assert "only a number sequence" in alt_quality_problem("4815162342")
        assert "only a number sequence" in alt_quality_problem(" 123 ")
        assert alt_quality_problem("42") is None

    @pytest.mark.parametrize(
        "alt",
        [
            "Revenue by quarter for fiscal year 2023",
            "Photo 4815162342",
            "Room 101",
        ],
    )
    def test_numbers_inside_text_pass(self, alt: str) -> None:
        assert alt_quality_problem(alt) is None

    def test_redundant_prefix(self) -> None:
        problem = alt_quality_problem("Image of a golden retriever in the park")
        assert problem is not None
        assert '"image of"' in problem

    def test_too_long(self) -> None:
        assert "too long" in alt_quality_problem("a" * 151)

    def test_too_wordy(self) -> None:
        assert "too wordy" in alt_quality_problem(" ".join(["word"] * 16))

    def test_placeholder(self) -> None:
        assert is_placeholder_alt("Image")
        assert is_placeholder_alt("photo_2")
        assert not is_placeholder_alt("Photo of the team")
        assert "placeholder" in alt_quality_problem("picture")

    def test_filename_stem(self) -> None:
        assert "file name" in alt_quality_problem("hero-banner_v2")

    def test_looks_like_filename(self) -> None:
        assert looks_like_filename("DSC_1234")
        assert looks_like_filename("chart.svg")
        assert not looks_like_filename("Sales chart")


class TestImageAltQualityRule:
    @pytest.mark.asyncio
    async def test_examples(self, run_rule) -> None:
        markup = (
            '<img src="a.jpg" alt="IMG_0001.jpg">'
            '<img src="b.png" alt="Diagram of the request lifecycle across three services">'
            '<img src="c.png" alt="">'
        )
        results = await run_rule(image_alt_quality_rule, markup)
        assert [r.outcome for r in results] == [Outcome.FAILED, Outcome.PASSED, Outcome.CANT_TELL]
        assert results[2].impact is None

    @pytest.mark.asyncio
    async def test_missing_alt_is_critical(self, run_rule) -> None:
        [result] = await run_rule(image_alt_quality_rule, '<img src="a.png">')
        assert result.outcome == Outcome.FAILED
        assert result.impact == Severity.CRITICAL

    @pytest.mark.asyncio
    async def test_decorative_images(self, run_rule) -> None:
        markup = (
            '<img src="a.png" alt="" role="presentation">'
            '<img src="b.png" alt="Swirl" role="none">'
            '<img src="c.png" role="none">'
        )
        results = await run_rule(image_alt_quality_rule, markup)
        assert [r.outcome for r in results] == [Outcome.PASSED, Outcome.FAILED]


class TestImageAccessibleNameRule:
    @pytest.mark.asyncio
    async def test_names(self, run_rule) -> None:
        markup = (
            '<img id="none" src="a.png">'
            '<img id="ph" src="b.png" alt="image">'
            '<img id="ok" src="c.png" alt="Sales by region">'
            '<div id="chart" role="img" aria-label="Revenue chart"></div>'
            '<img id="deco" src="d.png" alt="">'
        )
        results = await run_rule(image_accessible_name_rule, markup)
        assert [(r.selector, r.outcome) for r in results] == [
            ("#none", Outcome.FAILED),
            ("#ph", Outcome.FAILED),
            ("#ok", Outcome.PASSED),
            ("#chart", Outcome.PASSED),
        ]
        assert results[0].remediation == (
            "Add an alt attribute with descriptive text to the img element."
        )

    @pytest.mark.asyncio
    async def test_presentational_images_are_inapplicable(self, run_rule) -> None:
        assert await run_rule(image_accessible_name_rule, '<img src="a.png" role="none">') == []

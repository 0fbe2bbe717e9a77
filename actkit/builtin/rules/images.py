"""Text alternative rules for images."""

from __future__ import annotations

import re

from actkit.builtin.rules._common import word_count
from actkit.kernel.domain.models import Outcome, RuleCategory, Severity
from actkit.kernel.domain.rule import RuleContext, RuleDefinition, create_act_rule
from actkit.kernel.ports.document import DocumentPort, ElementPort
from actkit.kernel.wcag import get_wcag_reference

NON_TEXT_CONTENT_URL = "https://www.w3.org/WAI/WCAG21/Understanding/non-text-content.html"

IMAGE_SELECTOR = 'img:not([role="presentation"]):not([role="none"]), [role="img"]'
IMG_SELECTOR = "img"

PLACEHOLDER_WORDS = (
    "image",
    "picture",
    "photo",
    "graphic",
    "logo",
    "icon",
    "img",
    "pic",
    "placeholder",
    "temp",
    "alt",
    "description",
    "untitled",
    "dsc",
    "jpg",
    "jpeg",
    "png",
    "gif",
    "figure",
    "screenshot",
    "screen shot",
    "snapshot",
    "banner",
)

FILENAME_PATTERNS = (
    re.compile(r"\.(jpg|jpeg|png|gif|webp|svg)$", re.IGNORECASE),
    re.compile(r"^img_?\d+", re.IGNORECASE),
    re.compile(r"^dsc_?\d+", re.IGNORECASE),
    re.compile(r"^image_?\d+", re.IGNORECASE),
    re.compile(r"^\d{8}_\d+"),
)
DIGIT_RUN = re.compile(r"^\d{3,}$")
# a single token made of word characters, dashes and dots
FILENAME_STEM = re.compile(r"^[\w.-]+$")

REDUNDANT_PREFIXES = (
    "image of",
    "picture of",
    "photo of",
    "photograph of",
    "graphic of",
    "image showing",
    "picture showing",
)

SHORT_ALT_CHARS = 20
MAX_ALT_CHARS = 150
MAX_ALT_WORDS = 15
DECORATIVE_ROLES = frozenset({"presentation", "none"})


def is_placeholder_alt(alt: str) -> bool:
    """Whether ``alt`` is a stock placeholder such as ``"image"`` or ``"photo_1"``."""
    lowered = alt.strip().lower()
    for word in PLACEHOLDER_WORDS:
        variants = {
            word,
            f"{word} {word}",
            *(f"{word}.{ext}" for ext in ("jpg", "png", "gif")),
            *(f"{word}{n}" for n in "123"),
            *(f"{word}_{n}" for n in "123"),
        }
        if lowered in variants:
            return True
    return False


def looks_like_filename(alt: str) -> bool:
    return any(pattern.search(alt.strip()) for pattern in FILENAME_PATTERNS)


def alt_quality_problem(alt: str) -> str | None:
    """Describe why a non-empty ``alt`` is low quality, or ``None`` when it is fine.

    Filename patterns are checked first. Anything longer than ``SHORT_ALT_CHARS``
    is then accepted apart from redundant prefixes and excessive length. Short
    values fail when they are a bare run of digits, a stock placeholder or a
    filename stem.
    """
    text = alt.strip()
    lowered = text.lower()

    if looks_like_filename(text):
        return f'Alt text "{text}" appears to be a filename - provide meaningful description instead'

    if len(text) > SHORT_ALT_CHARS:
        prefix = next((p for p in REDUNDANT_PREFIXES if lowered.startswith(p)), None)
        if prefix is not None:
            return (
                f'Alt text starts with redundant phrase "{prefix}" - remove phrases like '
                '"image of" or "picture of"'
            )
        if len(text) > MAX_ALT_CHARS:
            return (
                f"Alt text is too long ({len(text)} characters) - consider using "
                "aria-describedby for detailed descriptions"
            )
        words = word_count(text)
        if words > MAX_ALT_WORDS:
            return f"Alt text is too wordy ({words} words) - should be concise"
        return None

    if DIGIT_RUN.match(text):
        return f'Alt text "{text}" is only a number sequence - it may be a generated identifier'
    if is_placeholder_alt(text):
        return f'Alt text "{text}" looks like placeholder content'
    if FILENAME_STEM.match(text) and ("_" in text or "-" in text or "." in text):
        return f'Alt text "{text}" looks like a file name rather than a description'
    return None


def _has_images(document: DocumentPort) -> bool:
    return document.query(IMAGE_SELECTOR) is not None


def _has_img_elements(document: DocumentPort) -> bool:
    return document.query(IMG_SELECTOR) is not None


def _alt_of(element: ElementPort) -> str | None:
    if element.tag_name != "img":
        return None
    return element.get_attribute("alt")


async def _check_image_names(ctx: RuleContext) -> None:
    for image in ctx.document.query_all(IMAGE_SELECTOR):
        await ctx.checkpoint()
        alt = _alt_of(image)
        if alt is not None and not alt.strip():
            # empty alt marks the image as decorative; image-alt-quality reports on it
            continue
        name = ctx.document.accessible_name(image)
        if not name:
            ctx.report(
                image,
                Outcome.FAILED,
                "Image does not have an accessible name",
                impact=Severity.SERIOUS,
            )
        elif alt and is_placeholder_alt(alt):
            ctx.report(
                image,
                Outcome.FAILED,
                f'Image has suspicious alt text that may be placeholder content: "{alt}"',
                impact=Severity.SERIOUS,
            )
        else:
            ctx.report(image, Outcome.PASSED, f'Image has accessible name: "{name}"')


async def _check_alt_quality(ctx: RuleContext) -> None:
    for image in ctx.document.query_all(IMG_SELECTOR):
        await ctx.checkpoint()
        alt = image.get_attribute("alt")
        role = (image.get_attribute("role") or "").strip().lower()
        decorative = role in DECORATIVE_ROLES

        if alt is None:
            if not decorative:
                ctx.report(
                    image, Outcome.FAILED, "Image is missing alt attribute", impact=Severity.CRITICAL
                )
            continue

        if not alt.strip():
            if decorative:
                ctx.report(image, Outcome.PASSED, "Decorative image is properly marked")
            else:
                ctx.report(
                    image,
                    Outcome.CANT_TELL,
                    'Image with empty alt should be marked as decorative with role="presentation" '
                    'or role="none"',
                )
            continue

        if decorative:
            ctx.report(
                image,
                Outcome.FAILED,
                "Decorative image (role='presentation/none') should have empty alt text",
                impact=Severity.SERIOUS,
            )
            continue

        problem = alt_quality_problem(alt)
        if problem is None:
            ctx.report(image, Outcome.PASSED, "Alt text describes the image")
        else:
            ctx.report(image, Outcome.FAILED, problem, impact=Severity.SERIOUS)


image_accessible_name_rule = create_act_rule(
    "image-accessible-name",
    "Images must have an accessible name",
    "This rule checks that all image elements have an accessible name.",
    categories=[RuleCategory.IMAGES],
    wcag_requirements=get_wcag_reference("1.1.1"),
    is_applicable=_has_images,
    execute=_check_image_names,
    help_url=NON_TEXT_CONTENT_URL,
)

image_alt_quality_rule = create_act_rule(
    "image-alt-quality",
    "Image alt text is meaningful",
    "Alt text should describe the image rather than repeat a filename or placeholder.",
    categories=[RuleCategory.IMAGES],
    wcag_requirements=get_wcag_reference("1.1.1"),
    is_applicable=_has_img_elements,
    execute=_check_alt_quality,
    help_url=NON_TEXT_CONTENT_URL,
)

IMAGE_RULES: tuple[RuleDefinition, ...] = (image_accessible_name_rule, image_alt_quality_rule)

"""Language of page and language of parts rules."""

from __future__ import annotations

import re

from actkit.builtin.rules._common import has_direct_text, is_hidden_from_at
from actkit.kernel.domain.models import Outcome, RuleCategory, Severity
from actkit.kernel.domain.rule import RuleContext, RuleDefinition, create_act_rule
from actkit.kernel.ports.document import DocumentPort, ElementPort
from actkit.kernel.wcag import get_wcag_reference

LANGUAGE_OF_PAGE_URL = "https://www.w3.org/WAI/WCAG21/Understanding/language-of-page.html"
LANGUAGE_OF_PARTS_URL = "https://www.w3.org/WAI/WCAG21/Understanding/language-of-parts.html"

# language[-script][-region][-variant]*[-extension]*[-x-private]
_BCP47 = re.compile(
    r"""
    ^(?:
        (?P<language>[a-z]{2,3}(?:-[a-z]{3}){0,3})
        (?:-[a-z]{4})?
        (?:-(?:[a-z]{2}|[0-9]{3}))?
        (?:-(?:[a-z0-9]{5,8}|[0-9][a-z0-9]{3}))*
        (?:-[0-9a-wy-z](?:-[a-z0-9]{2,8})+)*
        (?:-x(?:-[a-z0-9]{1,8})+)?
      |
        x(?:-[a-z0-9]{1,8})+
      |
        i-[a-z]{2,8}
    )$
    """,
    re.IGNORECASE | re.VERBOSE,
)
# the common shape accepted on the root element, e.g. "en" or "en-US"
_SIMPLE_LANG = re.compile(r"^[a-zA-Z]{2,3}(-[a-zA-Z]{2,3})?$")

COMMON_LANGUAGE_NAMES = {
    "ar": "Arabic",
    "de": "German",
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "hi": "Hindi",
    "it": "Italian",
    "ja": "Japanese",
    "ko": "Korean",
    "nl": "Dutch",
    "pl": "Polish",
    "pt": "Portuguese",
    "ru": "Russian",
    "sv": "Swedish",
    "tr": "Turkish",
    "zh": "Chinese",
}


def is_valid_language_tag(value: str) -> bool:
    """Whether ``value`` is shaped like a BCP 47 language tag."""
    value = value.strip()
    return bool(value) and (_SIMPLE_LANG.match(value) is not None or _BCP47.match(value) is not None)


def primary_subtag(value: str) -> str:
    return value.strip().split("-", 1)[0].lower()


def language_display_name(value: str) -> str:
    return COMMON_LANGUAGE_NAMES.get(primary_subtag(value), primary_subtag(value))


async def _check_page_language(ctx: RuleContext) -> None:
    root = ctx.document.document_element
    if root is None:
        return
    await ctx.checkpoint()
    lang = root.get_attribute("lang")
    xml_lang = root.get_attribute("xml:lang")
    if lang is None:
        ctx.report(
            root,
            Outcome.FAILED,
            "The HTML element does not have a lang attribute",
            impact=Severity.SERIOUS,
            selector="html",
        )
    elif not lang.strip():
        ctx.report(
            root, Outcome.FAILED, "The lang attribute is empty", impact=Severity.SERIOUS, selector="html"
        )
    elif not is_valid_language_tag(lang):
        ctx.report(
            root,
            Outcome.FAILED,
            f'The lang attribute value "{lang}" is not a valid BCP 47 language tag',
            impact=Severity.MODERATE,
            selector="html",
        )
    elif xml_lang and xml_lang.strip() and not is_valid_language_tag(xml_lang):
        ctx.report(
            root,
            Outcome.FAILED,
            f'The xml:lang attribute value "{xml_lang}" is not a valid BCP 47 language tag',
            impact=Severity.MODERATE,
            selector="html",
        )
    else:
        ctx.report(
            root,
            Outcome.PASSED,
            f'The page correctly specifies its language as "{lang}"',
            selector="html",
        )


def _lang_elements(document: DocumentPort) -> list[ElementPort]:
    return [
        element
        for element in document.query_all("[lang]")
        if element.tag_name != "html"
        and (element.get_attribute("lang") or "").strip()
        and not is_hidden_from_at(document, element)
    ]


def _has_lang_elements(document: DocumentPort) -> bool:
    return bool(_lang_elements(document))


async def _check_element_languages(ctx: RuleContext) -> None:
    for element in _lang_elements(ctx.document):
        await ctx.checkpoint()
        lang = (element.get_attribute("lang") or "").strip()
        if is_valid_language_tag(lang):
            ctx.report(
                element,
                Outcome.PASSED,
                f'Element has valid language tag: "{lang}" ({language_display_name(lang)})',
            )
        elif not has_direct_text(element):
            ctx.report(
                element,
                Outcome.PASSED,
                f'Element has invalid language tag: "{lang}", but contains no direct text '
                "content, so it passes.",
            )
        else:
            ctx.report(
                element,
                Outcome.FAILED,
                f'Element has invalid language tag: "{lang}". Language tags must be valid '
                "BCP 47 language tags (e.g., 'en', 'en-US', 'fr').",
                impact=Severity.SERIOUS,
            )


def _xml_lang_elements(document: DocumentPort) -> list[ElementPort]:
    return [
        element
        for element in document.query_all("[lang]")
        if (element.get_attribute("lang") or "").strip()
        and (element.get_attribute("xml:lang") or "").strip()
    ]


def _has_xml_lang_pairs(document: DocumentPort) -> bool:
    return bool(_xml_lang_elements(document))


async def _check_lang_xml_lang(ctx: RuleContext) -> None:
    for element in _xml_lang_elements(ctx.document):
        await ctx.checkpoint()
        lang = element.get_attribute("lang") or ""
        xml_lang = element.get_attribute("xml:lang") or ""
        if not is_valid_language_tag(xml_lang):
            ctx.report(
                element,
                Outcome.FAILED,
                f'xml:lang="{xml_lang}" is not a valid BCP 47 language tag',
                impact=Severity.SERIOUS,
            )
        elif primary_subtag(lang) == primary_subtag(xml_lang):
            ctx.report(
                element, Outcome.PASSED, f'lang="{lang}" and xml:lang="{xml_lang}" agree'
            )
        else:
            ctx.report(
                element,
                Outcome.FAILED,
                f'lang="{lang}" and xml:lang="{xml_lang}" declare different primary languages',
                impact=Severity.SERIOUS,
            )


language_of_page_rule = create_act_rule(
    "language-of-page",
    "Language of Page",
    "The default human language of each Web page can be programmatically determined",
    categories=[RuleCategory.LANGUAGE],
    wcag_requirements=get_wcag_reference("3.1.1"),
    execute=_check_page_language,
    help_url=LANGUAGE_OF_PAGE_URL,
)

element_valid_lang_rule = create_act_rule(
    "element-valid-lang",
    "Element lang attribute has valid value",
    "Elements with lang attributes must use valid BCP 47 language tags.",
    categories=[RuleCategory.LANGUAGE],
    wcag_requirements=get_wcag_reference("3.1.2"),
    is_applicable=_has_lang_elements,
    execute=_check_element_languages,
    help_url=LANGUAGE_OF_PARTS_URL,
)

lang_xml_lang_match_rule = create_act_rule(
    "lang-xml-lang-match",
    "lang and xml:lang have matching primary language",
    "When an element declares both lang and xml:lang their primary language subtags must match.",
    categories=[RuleCategory.LANGUAGE],
    wcag_requirements=get_wcag_reference("3.1.1"),
    is_applicable=_has_xml_lang_pairs,
    execute=_check_lang_xml_lang,
    help_url=LANGUAGE_OF_PAGE_URL,
)

LANGUAGE_RULES: tuple[RuleDefinition, ...] = (
    language_of_page_rule,
    element_valid_lang_rule,
    lang_xml_lang_match_rule,
)

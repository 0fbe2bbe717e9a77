"""Autocomplete token validation (input purpose)."""

from __future__ import annotations

from actkit.builtin.rules._common import is_disabled, is_hidden_from_at
from actkit.kernel.domain.models import Outcome, RuleCategory, Severity
from actkit.kernel.domain.rule import RuleContext, RuleDefinition, create_act_rule
from actkit.kernel.logging import get_logger
from actkit.kernel.ports.document import DocumentPort, ElementPort
from actkit.kernel.wcag import get_wcag_reference

logger = get_logger(__name__)

IDENTIFY_INPUT_PURPOSE_URL = (
    "https://www.w3.org/WAI/WCAG21/Understanding/identify-input-purpose.html"
)

AUTOCOMPLETE_SELECTOR = (
    "input[autocomplete]:not([autocomplete='']), "
    "select[autocomplete]:not([autocomplete='']), "
    "textarea[autocomplete]:not([autocomplete=''])"
)

ADDRESS_FIELDS = frozenset(
    {
        "name",
        "honorific-prefix",
        "given-name",
        "additional-name",
        "family-name",
        "honorific-suffix",
        "nickname",
        "organization-title",
        "organization",
        "street-address",
        "address-line1",
        "address-line2",
        "address-line3",
        "address-level4",
        "address-level3",
        "address-level2",
        "address-level1",
        "country",
        "country-name",
        "postal-code",
        "cc-name",
        "cc-given-name",
        "cc-additional-name",
        "cc-family-name",
        "cc-number",
        "cc-exp",
        "cc-exp-month",
        "cc-exp-year",
        "cc-csc",
        "cc-type",
        "transaction-currency",
        "transaction-amount",
    }
)
CONTACT_FIELDS = frozenset(
    {
        "tel",
        "tel-country-code",
        "tel-national",
        "tel-area-code",
        "tel-local",
        "tel-extension",
        "email",
        "impp",
    }
)
OTHER_FIELDS = frozenset(
    {
        "username",
        "new-password",
        "current-password",
        "one-time-code",
        "language",
        "bday",
        "bday-day",
        "bday-month",
        "bday-year",
        "sex",
        "url",
        "photo",
    }
)
FIELD_NAMES = ADDRESS_FIELDS | CONTACT_FIELDS | OTHER_FIELDS

ADDRESS_TOKENS = frozenset({"shipping", "billing"})
CONTACT_TOKENS = frozenset({"home", "work", "mobile", "fax", "pager"})

# trailing modifier -> fields it may follow
MODIFIERS: dict[str, frozenset[str]] = {
    "webauthn": frozenset({"new-password", "current-password", "username"}),
}

INAPPLICABLE_INPUT_TYPES = frozenset(
    {"submit", "button", "reset", "image", "file", "range", "color", "checkbox", "radio", "hidden"}
)


def is_valid_autocomplete(value: str) -> bool:
    """Check an autocomplete value against the autofill token grammar.

    The accepted shape is
    ``[section-*] [shipping|billing] [home|work|mobile|fax|pager] field [webauthn]``
    where the contact token is only allowed before contact fields and the
    address token before address or contact fields. ``on`` and ``off`` are valid on
    their own.

    Examples
    --------
    >>> is_valid_autocomplete("shipping street-address")
    True
    >>> is_valid_autocomplete("work email")
    True
    >>> is_valid_autocomplete("home street-address")
    False
    """
    tokens = value.strip().lower().split()
    if not tokens:
        return False
    if len(tokens) == 1 and tokens[0] in ("on", "off"):
        return True

    modifier_fields: frozenset[str] | None = None
    if tokens[-1] in MODIFIERS:
        modifier_fields = MODIFIERS[tokens.pop()]
        if not tokens:
            return False

    field_name = tokens.pop()
    if field_name not in FIELD_NAMES:
        return False
    if modifier_fields is not None and field_name not in modifier_fields:
        return False

    position = 0
    if position < len(tokens) and tokens[position].startswith("section-"):
        position += 1
    if position < len(tokens) and tokens[position] in ADDRESS_TOKENS:
        if field_name not in ADDRESS_FIELDS and field_name not in CONTACT_FIELDS:
            return False
        position += 1
    if position < len(tokens) and tokens[position] in CONTACT_TOKENS:
        if field_name not in CONTACT_FIELDS:
            return False
        position += 1
    return position == len(tokens)


def _is_candidate(document: DocumentPort, element: ElementPort) -> bool:
    if element.tag_name == "input":
        input_type = (element.get_attribute("type") or "text").strip().lower()
        if input_type in INAPPLICABLE_INPUT_TYPES:
            logger.debug("Skipping autocomplete on input type={}", input_type)
            return False
    if not (element.get_attribute("autocomplete") or "").strip():
        return False
    return not is_hidden_from_at(document, element) and not is_disabled(element)


def _candidates(document: DocumentPort) -> list[ElementPort]:
    return [e for e in document.query_all(AUTOCOMPLETE_SELECTOR) if _is_candidate(document, e)]


def _has_candidates(document: DocumentPort) -> bool:
    return bool(_candidates(document))


async def _check_autocomplete(ctx: RuleContext) -> None:
    for element in _candidates(ctx.document):
        await ctx.checkpoint()
        value = (element.get_attribute("autocomplete") or "").strip().lower()
        if is_valid_autocomplete(value):
            ctx.report(element, Outcome.PASSED, f'Element has valid autocomplete value: "{value}"')
        else:
            ctx.report(
                element,
                Outcome.FAILED,
                f'Element has invalid autocomplete value: "{value}". Autocomplete values '
                "must follow the HTML specification format.",
                impact=Severity.SERIOUS,
            )


autocomplete_valid_value_rule = create_act_rule(
    "autocomplete-valid-value",
    "Autocomplete attribute has valid value",
    "Form elements with autocomplete attributes must use values defined in the HTML "
    "specification.",
    categories=[RuleCategory.FORMS],
    wcag_requirements=get_wcag_reference("1.3.5"),
    is_applicable=_has_candidates,
    execute=_check_autocomplete,
    help_url=IDENTIFY_INPUT_PURPOSE_URL,
)

AUTOCOMPLETE_RULES: tuple[RuleDefinition, ...] = (autocomplete_valid_value_rule,)

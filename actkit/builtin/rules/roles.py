"""ARIA role attribute validation."""

from __future__ import annotations

from actkit.builtin.rules._common import is_hidden_from_at
from actkit.kernel.domain.models import Outcome, RuleCategory, Severity
from actkit.kernel.domain.rule import RuleContext, RuleDefinition, create_act_rule
from actkit.kernel.ports.document import DocumentPort, ElementPort
from actkit.kernel.wcag import get_wcag_reference

NAME_ROLE_VALUE_URL = "https://www.w3.org/WAI/WCAG21/Understanding/name-role-value.html"

LANDMARK_ROLES = frozenset(
    {"banner", "complementary", "contentinfo", "form", "main", "navigation", "region", "search"}
)
STRUCTURE_ROLES = frozenset(
    {
        "application",
        "article",
        "cell",
        "columnheader",
        "definition",
        "directory",
        "document",
        "feed",
        "figure",
        "group",
        "heading",
        "img",
        "list",
        "listitem",
        "math",
        "none",
        "note",
        "presentation",
        "row",
        "rowgroup",
        "rowheader",
        "separator",
        "table",
        "term",
        "text",
        "toolbar",
    }
)
WIDGET_ROLES = frozenset(
    {
        "alert",
        "alertdialog",
        "button",
        "checkbox",
        "combobox",
        "dialog",
        "gridcell",
        "grid",
        "link",
        "log",
        "marquee",
        "menu",
        "menubar",
        "menuitem",
        "menuitemcheckbox",
        "menuitemradio",
        "option",
        "progressbar",
        "radio",
        "radiogroup",
        "scrollbar",
        "searchbox",
        "slider",
        "spinbutton",
        "status",
        "switch",
        "tab",
        "tablist",
        "tabpanel",
        "textbox",
        "timer",
        "tooltip",
        "tree",
        "treegrid",
        "treeitem",
    }
)
VALID_ROLES = LANDMARK_ROLES | STRUCTURE_ROLES | WIDGET_ROLES
DEPRECATED_ROLES = frozenset({"directory", "document"})


def _plural(items: list[str]) -> str:
    return "s" if len(items) > 1 else ""


def _candidates(document: DocumentPort) -> list[ElementPort]:
    return [
        element
        for element in document.query_all("[role]")
        if (element.get_attribute("role") or "").strip()
        and not is_hidden_from_at(document, element)
    ]


def _has_roles(document: DocumentPort) -> bool:
    return bool(_candidates(document))


async def _check_roles(ctx: RuleContext) -> None:
    """Validate every token of each ``role`` attribute.

    Browsers use the first recognised token, so a mix of valid and invalid
    tokens passes with a warning message.
    """
    for element in _candidates(ctx.document):
        await ctx.checkpoint()
        roles = (element.get_attribute("role") or "").strip().lower().split()
        valid = [r for r in roles if r in VALID_ROLES]
        invalid = [r for r in roles if r not in VALID_ROLES]
        deprecated = [r for r in roles if r in DEPRECATED_ROLES]

        if valid and invalid:
            ctx.report(
                element,
                Outcome.PASSED,
                f"Element has both valid ({', '.join(valid)}) and invalid ({', '.join(invalid)}) "
                "role values. Browsers will use the first valid role.",
            )
        elif invalid:
            ctx.report(
                element,
                Outcome.FAILED,
                f'Element has invalid role value{_plural(invalid)}: "{", ".join(invalid)}". '
                "Role values must be from the WAI-ARIA specification.",
                impact=Severity.SERIOUS,
            )
        elif deprecated:
            ctx.report(
                element,
                Outcome.PASSED,
                f'Element uses deprecated role{_plural(deprecated)}: "{", ".join(deprecated)}". '
                "While still valid, these roles should be avoided.",
            )
        else:
            ctx.report(element, Outcome.PASSED, f'Element has valid role value: "{", ".join(valid)}"')


role_valid_value_rule = create_act_rule(
    "role-valid-value",
    "Role attribute has valid value",
    "Elements with role attributes must use values defined in the WAI-ARIA specification.",
    categories=[RuleCategory.ARIA],
    wcag_requirements=get_wcag_reference("4.1.2"),
    is_applicable=_has_roles,
    execute=_check_roles,
    help_url=NAME_ROLE_VALUE_URL,
)

ROLE_RULES: tuple[RuleDefinition, ...] = (role_valid_value_rule,)

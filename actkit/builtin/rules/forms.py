"""Form control labelling rules."""

from __future__ import annotations

from dataclasses import dataclass

from actkit.builtin.rules._common import is_disabled, is_hidden_from_at, normalize_text
from actkit.kernel.domain.models import Outcome, RuleCategory, Severity
from actkit.kernel.domain.rule import RuleContext, RuleDefinition, create_act_rule
from actkit.kernel.ports.document import DocumentPort, ElementPort
from actkit.kernel.wcag import get_wcag_references

LABELS_OR_INSTRUCTIONS_URL = (
    "https://www.w3.org/WAI/WCAG21/Understanding/labels-or-instructions.html"
)

FORM_CONTROL_SELECTOR = ", ".join(
    [
        'input:not([type="hidden"]):not([type="image"])',
        "select",
        "textarea",
        "button",
        *(
            f'[role="{role}"]'
            for role in (
                "button",
                "checkbox",
                "radio",
                "combobox",
                "listbox",
                "textbox",
                "searchbox",
                "slider",
                "spinbutton",
                "switch",
            )
        ),
    ]
)
VALUE_LABELLED_INPUT_TYPES = frozenset({"submit", "reset", "button"})


@dataclass(frozen=True, slots=True)
class LabelInfo:
    """How a control is labelled.

    ``method`` is one of ``explicit``, ``implicit``, ``aria-labelledby``,
    ``aria-label``, ``title``, ``value``, ``placeholder-only`` or ``None``.
    """

    has_label: bool
    method: str | None = None
    text: str | None = None


def find_label(document: DocumentPort, element: ElementPort) -> LabelInfo:
    """Find the first labelling mechanism that applies to ``element``.

    Placeholder text is detected but never counts as a label.
    """
    element_id = element.get_attribute("id")
    if element_id:
        for label in document.query_all("label[for]"):
            if label.get_attribute("for") == element_id:
                return LabelInfo(True, "explicit", normalize_text(label.text_content) or None)

    ancestor = element.parent
    while ancestor is not None:
        if ancestor.tag_name == "label":
            text = normalize_text(
                " ".join(
                    child.text_content for child in ancestor.children if child is not element
                )
                + " "
                + ancestor.own_text
            )
            return LabelInfo(True, "implicit", text or None)
        ancestor = ancestor.parent

    labelledby = (element.get_attribute("aria-labelledby") or "").split()
    texts = []
    for ref in labelledby:
        target = document.get_element_by_id(ref)
        if target is not None and target.text_content.strip():
            texts.append(normalize_text(target.text_content))
    if texts:
        return LabelInfo(True, "aria-labelledby", " ".join(texts))

    for attribute in ("aria-label", "title"):
        value = (element.get_attribute(attribute) or "").strip()
        if value:
            return LabelInfo(True, attribute, value)

    if element.tag_name == "input":
        input_type = (element.get_attribute("type") or "text").strip().lower()
        value = (element.get_attribute("value") or "").strip()
        if input_type in VALUE_LABELLED_INPUT_TYPES and value:
            return LabelInfo(True, "value", value)

    placeholder = (element.get_attribute("placeholder") or "").strip()
    if placeholder:
        return LabelInfo(False, "placeholder-only", placeholder)
    return LabelInfo(False)


def _is_skipped(document: DocumentPort, element: ElementPort) -> bool:
    return is_hidden_from_at(document, element) or is_disabled(element)


def _has_form_controls(document: DocumentPort) -> bool:
    return document.query(FORM_CONTROL_SELECTOR) is not None


async def _check_labels(ctx: RuleContext) -> None:
    """Report each visible enabled control, then a page-level summary.

    Hidden and disabled controls are skipped and left out of the summary.
    """
    controls = ctx.document.query_all(FORM_CONTROL_SELECTOR)
    labelled = 0
    checked = 0
    for control in controls:
        await ctx.checkpoint()
        if _is_skipped(ctx.document, control):
            continue
        checked += 1

        info = find_label(ctx.document, control)
        name = ctx.document.accessible_name(control)
        if info.method == "placeholder-only":
            name = ""
        if info.has_label or name:
            labelled += 1
            ctx.report(
                control,
                Outcome.PASSED,
                f"Form control has an associated label using {info.method or 'content'}: "
                f'"{info.text or name}"',
            )
            continue

        kind = control.get_attribute("role") or control.tag_name
        if info.method == "placeholder-only":
            message = f"Form control ({kind}) has only a placeholder and no proper label"
        else:
            message = f"Form control ({kind}) has no associated label"
        ctx.report(control, Outcome.FAILED, message, impact=Severity.SERIOUS)

    ctx.report(
        None,
        labelled == checked,
        f"{labelled} out of {checked} form controls have proper labels",
        impact=Severity.SERIOUS,
    )


form_label_association_rule = create_act_rule(
    "form-label-association",
    "Form controls must have associated labels",
    "Each form control must have a properly associated label that describes its purpose",
    categories=[RuleCategory.FORMS],
    wcag_requirements=get_wcag_references("3.3.2", "4.1.2"),
    is_applicable=_has_form_controls,
    execute=_check_labels,
    help_url=LABELS_OR_INSTRUCTIONS_URL,
)

FORM_RULES: tuple[RuleDefinition, ...] = (form_label_association_rule,)

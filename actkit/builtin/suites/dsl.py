"""Declarative suite/describe/test DSL for element checks.

A suite pairs an applicability selector with a list of cases. Suites are
built through an explicit :class:`SuiteBuilder` that the ``body`` callback
receives, so building one suite inside another is safe::

    def body(s: SuiteBuilder) -> None:
        s.test("Button has type", check_type, CaseMeta("...", LegacySeverity.HIGH))

        def links(d: SuiteBuilder) -> None:
            d.test("Link has role", check_role)

        s.describe("Links", links)

    interactive = suite("Interactive Elements", "a[href], button", body)
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import NamedTuple

from actkit.kernel.domain.models import LegacySeverity
from actkit.kernel.domain.rule import CancellationToken
from actkit.kernel.exceptions import ValidationError
from actkit.kernel.ports.document import DocumentPort, ElementPort

_NON_SLUG = re.compile(r"[^a-z0-9]+")


class CaseVerdict(NamedTuple):
    """What an evaluation returns for one element."""

    passed: bool
    message: str


@dataclass(frozen=True, slots=True)
class CaseMeta:
    description: str = ""
    severity: LegacySeverity = LegacySeverity.MEDIUM


class Signal:
    """Handed to every evaluation: cancellation state plus the document under audit."""

    __slots__ = ("_token", "document")

    def __init__(self, token: CancellationToken, document: DocumentPort) -> None:
        self._token = token
        self.document = document

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    @property
    def reason(self) -> str | None:
        return self._token.reason

    def raise_if_cancelled(self) -> None:
        self._token.raise_if_cancelled()


EvaluateFunc = Callable[
    [ElementPort, Signal],
    CaseVerdict | tuple[bool, str] | Awaitable[CaseVerdict | tuple[bool, str]],
]
SuiteBody = Callable[["SuiteBuilder"], None]


@dataclass(frozen=True, slots=True)
class SuiteCase:
    """A single named check run against every element a suite applies to."""

    id: str
    name: str
    evaluate: EvaluateFunc
    meta: CaseMeta = field(default_factory=CaseMeta)
    group: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Suite:
    name: str
    applicability: str
    cases: tuple[SuiteCase, ...]

    def case(self, case_id: str) -> SuiteCase | None:
        return next((c for c in self.cases if c.id == case_id), None)


def slugify(text: str) -> str:
    return _NON_SLUG.sub("-", text.lower()).strip("-")


class SuiteBuilder:
    """Collects cases for one suite.

    ``describe`` hands the body a child builder that appends to the same case
    list with its group name recorded on each case.
    """

    def __init__(
        self,
        name: str,
        applicability: str,
        *,
        _cases: list[SuiteCase] | None = None,
        _group: tuple[str, ...] = (),
    ) -> None:
        if not name.strip():
            raise ValidationError("name", "suite name must not be empty", value=name)
        self.name = name
        self.applicability = applicability
        self._cases: list[SuiteCase] = _cases if _cases is not None else []
        self._group = _group

    def test(
        self, name: str, evaluate: EvaluateFunc, meta: CaseMeta | None = None
    ) -> SuiteCase:
        if not callable(evaluate):
            raise ValidationError("evaluate", "must be callable", value=evaluate)
        case_id = slugify(name)
        if any(existing.id == case_id for existing in self._cases):
            raise ValidationError("name", f"duplicate test in suite '{self.name}'", value=name)
        case = SuiteCase(
            id=case_id, name=name, evaluate=evaluate, meta=meta or CaseMeta(), group=self._group
        )
        self._cases.append(case)
        return case

    def describe(self, name: str, body: SuiteBody) -> None:
        child = SuiteBuilder(
            self.name, self.applicability, _cases=self._cases, _group=(*self._group, name)
        )
        body(child)

    def build(self) -> Suite:
        return Suite(name=self.name, applicability=self.applicability, cases=tuple(self._cases))


def suite(name: str, applicability: str, body: SuiteBody) -> Suite:
    """Build a suite by running ``body`` against a fresh builder."""
    builder = SuiteBuilder(name, applicability)
    body(builder)
    return builder.build()


__all__ = [
    "CaseMeta",
    "CaseVerdict",
    "EvaluateFunc",
    "Signal",
    "Suite",
    "SuiteBuilder",
    "SuiteCase",
    "slugify",
    "suite",
]

"""Tests for apiver.models."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from apiver.errors import CheckoutError
from apiver.models import (
    Category,
    Extracted,
    Failed,
    HistoryOutcome,
    RevisionResult,
    Signature,
    Version,
)
from tests._fixtures.history import make_revision


def test_signature_collapses_duplicates() -> None:
    signature = Signature.build(functions=["f()", "f()", "g()"])

    assert signature.functions == {"f()", "g()"}
    assert signature.symbols(Category.FUNCTIONS) == signature.functions


def test_signature_is_immutable() -> None:
    signature = Signature.build(fields=["x"])

    with pytest.raises(FrozenInstanceError):
        signature.fields = frozenset()  # type: ignore[misc]


def test_signature_to_dict_is_sorted() -> None:
    signature = Signature.build(constants=["B = 2", "A = 1"])

    assert signature.to_dict() == {
        "functions": [],
        "fields": [],
        "constants": ["A = 1", "B = 2"],
        "structs": [],
        "interfaces": [],
    }


def test_result_exposes_populated_side_only() -> None:
    revision = make_revision("abc")
    ok = RevisionResult(revision, Extracted({"p": Signature()}), Version(0, 0, 0), "pkg")
    error = CheckoutError("gone")
    failed = RevisionResult(revision, Failed(error), Version(0, 0, 1), "pkg")

    assert ok.signatures == {"p": Signature()}
    assert ok.error is None
    assert failed.signatures is None
    assert failed.error is error


def test_history_outcome_reports_final_version() -> None:
    revision = make_revision("abc")
    outcome = HistoryOutcome(
        results=[RevisionResult(revision, Extracted({}), Version(0, 2, 5), "pkg")]
    )

    assert outcome.ok
    assert outcome.version == Version(0, 2, 5)
    assert HistoryOutcome().version is None

"""Tests for extractor discovery."""

from __future__ import annotations

import pytest

from apiver.extractors import GoExtractor, PythonExtractor, discover_extractors, get_extractor


def test_builtin_extractors_are_registered() -> None:
    factories = discover_extractors()

    assert factories["go"] is GoExtractor
    assert factories["python"] is PythonExtractor


def test_get_extractor_is_case_insensitive_and_passes_excludes() -> None:
    extractor = get_extractor("Go", exclude_paths=["/examples/", ""])

    assert isinstance(extractor, GoExtractor)
    assert extractor.exclude_paths == ["examples"]


def test_get_extractor_rejects_unknown_language() -> None:
    with pytest.raises(ValueError, match="expected one of: go, python"):
        get_extractor("cobol")

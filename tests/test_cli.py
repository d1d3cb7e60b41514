"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from apiver import cli
from apiver.cli import _build_parser
from apiver.errors import CloneError, RevertError
from apiver.models import Extracted, HistoryOutcome, RevisionResult, Signature, Version
from tests._fixtures.history import make_revision


def test_cli_requires_repository_for_history(capsys: pytest.CaptureFixture[str]) -> None:
    parser = _build_parser()

    with pytest.raises(SystemExit) as excinfo:
        parser.parse_args(["history"])

    assert excinfo.value.code == 2
    assert "repository" in capsys.readouterr().err


def test_cli_accepts_verbose_before_and_after_command() -> None:
    parser = _build_parser()

    assert parser.parse_args(["--verbose", "history", "repo"]).verbose is True
    assert parser.parse_args(["history", "repo", "--verbose"]).verbose is True
    assert parser.parse_args(["history", "repo"]).verbose is False


def test_cli_parses_history_options() -> None:
    args = _build_parser().parse_args(
        ["history", "https://example.com/repo.git", "-o", "out.jsonl", "--branch", "main"]
    )

    assert args.command == "history"
    assert args.repository == "https://example.com/repo.git"
    assert args.output == "out.jsonl"
    assert args.branch == "main"
    assert args.config == "."


class _StubOrchestrator:
    outcome: HistoryOutcome = HistoryOutcome()
    error: Exception | None = None

    def __init__(self, config) -> None:  # type: ignore[no-untyped-def]
        self.config = config

    def run_history(self, locator, *, branch=None, language=None, on_result=None):  # type: ignore[no-untyped-def]
        if self.error is not None:
            raise self.error
        for result in self.outcome.results:
            if on_result is not None:
                on_result(result)
        return self.outcome

    def run_signature(self, path, *, language=None):  # type: ignore[no-untyped-def]
        return {"pkg": Signature.build(functions=["func F()"])}


def _outcome(failure: Exception | None = None) -> HistoryOutcome:
    result = RevisionResult(
        make_revision("c0ffee" * 7, subject="Initial"),
        Extracted({}),
        Version(0, 0, 0),
        "repo",
    )
    return HistoryOutcome(results=[result], failure=failure)


@pytest.fixture
def stub(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):  # type: ignore[no-untyped-def]
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "Orchestrator", _StubOrchestrator)
    monkeypatch.setattr(_StubOrchestrator, "outcome", _outcome())
    monkeypatch.setattr(_StubOrchestrator, "error", None)
    return _StubOrchestrator


def test_history_prints_and_writes_records(stub, tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
    output = tmp_path / "history.jsonl"

    cli.main(["history", "repo", "-o", str(output)])

    out = capsys.readouterr().out
    assert "c0ffeec0ffee 0.0.0 Initial" in out
    assert "Version 0.0.0" in out
    record = json.loads(output.read_text(encoding="utf-8"))
    assert record["version"] == "0.0.0"


def test_history_exits_non_zero_on_fatal_revert(stub, tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
    stub.outcome = _outcome(RevertError("locked"))
    output = tmp_path / "partial.jsonl"

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["history", "repo", "--output", str(output)])

    assert excinfo.value.code == 1
    assert "aborted: locked" in capsys.readouterr().err
    assert output.exists()


def test_history_exits_non_zero_when_clone_fails(stub, capsys) -> None:  # type: ignore[no-untyped-def]
    stub.error = CloneError("failed to clone repo")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["history", "repo"])

    assert excinfo.value.code == 1
    assert "failed to clone repo" in capsys.readouterr().err


def test_signature_prints_json(stub, capsys) -> None:  # type: ignore[no-untyped-def]
    cli.main(["signature", "."])

    payload = json.loads(capsys.readouterr().out)
    assert payload["pkg"]["functions"] == ["func F()"]


def test_cli_accepts_quiet_before_and_after_command() -> None:
    parser = _build_parser()

    assert parser.parse_args(["-q", "history", "repo"]).quiet is True
    assert parser.parse_args(["serve", "--quiet"]).quiet is True
    assert parser.parse_args(["signature"]).quiet is False


def test_history_passes_quiet_to_logging(stub, monkeypatch, capsys) -> None:  # type: ignore[no-untyped-def]
    seen: list[dict[str, object]] = []
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: seen.append(kwargs))

    cli.main(["history", "repo", "--quiet"])

    assert seen[0]["quiet"] is True
    assert seen[0]["verbose"] is False
    assert "Version 0.0.0" in capsys.readouterr().out

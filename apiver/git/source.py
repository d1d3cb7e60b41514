"""Git-backed revision source."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Sequence

from ..errors import (
    CheckoutError,
    CloneError,
    FetchError,
    RevertError,
    SourceUnavailable,
)
from ..logging import get_logger
from ..models import Revision
from ..source import RevisionSource

_FIELD_SEPARATOR = "\x1f"
_LOG_FORMAT = _FIELD_SEPARATOR.join(("%H", "%s", "%aN", "%aE", "%aI"))
_TEMP_PREFIX = "apiver_history"

Runner = Callable[..., str]


class GitRevisionSource(RevisionSource):
    """Walks the first-parent history of one branch in a private clone."""

    def __init__(
        self,
        location: Path,
        *,
        branch: str | None = None,
        runner: Runner | None = None,
        keep: bool = False,
    ) -> None:
        self._location = Path(location)
        self._runner = runner or self._default_runner
        self._keep = keep
        self._branch = branch
        self.logger = get_logger("git")

    @classmethod
    def clone(
        cls,
        locator: str,
        *,
        branch: str | None = None,
        runner: Runner | None = None,
        keep: bool = False,
    ) -> "GitRevisionSource":
        """Clone ``locator`` into a fresh temporary directory."""
        target = Path(tempfile.mkdtemp(prefix=_TEMP_PREFIX))
        source = cls(target, branch=branch, runner=runner, keep=keep)
        source.logger.info("Cloning %s into %s", locator, target)
        args = ["git", "clone"]
        if branch is not None:
            # Only the remote default branch is created locally otherwise.
            args += ["--branch", branch]
        try:
            source._run([*args, locator, str(target)], cwd=target.parent)
        except (subprocess.CalledProcessError, OSError) as exc:
            source.cleanup()
            raise CloneError(
                f"failed to clone repo {locator} to {target}: {_describe(exc)}"
            ) from exc
        return source

    @property
    def working_directory(self) -> Path:
        return self._location

    @property
    def branch(self) -> str:
        if self._branch is None:
            self._branch = self._detect_branch()
        return self._branch

    def fetch(self) -> None:
        try:
            self._run(["git", "fetch", "--all"])
        except (subprocess.CalledProcessError, OSError) as exc:
            raise FetchError(
                f"failed to fetch all in repo at {self._location}: {_describe(exc)}"
            ) from exc

    def list_revisions(self) -> Sequence[Revision]:
        args = [
            "git",
            "log",
            "--first-parent",
            self.branch,
            "--reverse",
            f"--pretty=format:{_LOG_FORMAT}",
        ]
        try:
            output = self._run(args, capture_output=True)
        except (subprocess.CalledProcessError, OSError) as exc:
            raise SourceUnavailable(
                f"failed to get the log of {self._location}: {_describe(exc)}"
            ) from exc
        return parse_log(output)

    def checkout(self, revision_hash: str) -> None:
        try:
            self._run(["git", "checkout", "-f", revision_hash])
        except (subprocess.CalledProcessError, OSError) as exc:
            raise CheckoutError(
                f"failed to checkout {revision_hash} in {self._location}: {_describe(exc)}"
            ) from exc

    def revert(self) -> None:
        try:
            self._run(["git", "checkout", "-f", self.branch])
        except (subprocess.CalledProcessError, OSError) as exc:
            raise RevertError(
                f"failed to revert {self._location} back to {self.branch}: {_describe(exc)}"
            ) from exc

    def cleanup(self) -> None:
        if self._keep:
            self.logger.info("Keeping clone at %s", self._location)
            return
        shutil.rmtree(self._location, ignore_errors=True)

    # ------------------------------------------------------------------
    # Helpers

    def _detect_branch(self) -> str:
        try:
            output = self._run(
                ["git", "rev-parse", "--abbrev-ref", "HEAD"], capture_output=True
            )
        except (subprocess.CalledProcessError, OSError) as exc:
            raise SourceUnavailable(
                f"failed to detect the default branch of {self._location}: {_describe(exc)}"
            ) from exc
        branch = output.strip()
        if not branch or branch == "HEAD":
            raise SourceUnavailable(f"{self._location} has no checked out branch")
        return branch

    def _run(
        self,
        args: Iterable[str],
        *,
        cwd: Path | None = None,
        capture_output: bool = False,
    ) -> str:
        return self._runner(args, cwd=cwd or self._location, capture_output=capture_output)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
        return completed.stdout if capture_output else ""


def parse_log(output: str) -> List[Revision]:
    """Parse ``git log`` output produced with the unit-separated pretty format."""
    revisions: List[Revision] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = line.split(_FIELD_SEPARATOR)
        if len(parts) != 5:
            raise SourceUnavailable(f"failed to parse log line {line!r}")
        commit, subject, name, email, date = parts
        try:
            timestamp = datetime.fromisoformat(date.strip())
        except ValueError as exc:
            raise SourceUnavailable(f"failed to parse date in log line {line!r}") from exc
        revisions.append(
            Revision(hash=commit.strip(), subject=subject, name=name, email=email, date=timestamp)
        )
    return revisions


def _describe(exc: BaseException) -> str:
    if isinstance(exc, subprocess.CalledProcessError):
        output = (exc.output or "").strip() if isinstance(exc.output, str) else ""
        message = f"exit status {exc.returncode}"
        return f"{message}: {output}" if output else message
    return str(exc)


__all__ = ["GitRevisionSource", "parse_log"]

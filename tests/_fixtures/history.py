"""In-memory revision sources and extractors for pipeline tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Set, Union

from apiver.errors import CheckoutError, ExtractionError, FetchError, RevertError
from apiver.extractors import Extractor
from apiver.models import PackageMap, Revision, Signature
from apiver.source import RevisionSource

_EPOCH = datetime(2017, 1, 1, tzinfo=timezone.utc)


def make_revision(hash: str, index: int = 0, subject: str | None = None) -> Revision:
    return Revision(
        hash=hash,
        subject=subject or f"commit {hash}",
        name="Ada Lovelace",
        email="ada@example.com",
        date=_EPOCH + timedelta(days=index),
    )


def package_map(**packages: Mapping[str, Sequence[str]]) -> Dict[str, Signature]:
    """Build a package map from ``name={"functions": [...], ...}`` keywords."""
    return {name: Signature.build(**symbols) for name, symbols in packages.items()}


class FakeRevisionSource(RevisionSource):
    """Records every call; checkouts and reverts fail for the configured hashes."""

    def __init__(
        self,
        hashes: Sequence[str],
        *,
        root: Path = Path("/tmp/apiver-fake"),
        failing_checkouts: Set[str] | None = None,
        failing_reverts: Set[str] | None = None,
        fetch_fails: bool = False,
    ) -> None:
        self.revisions = [make_revision(h, index) for index, h in enumerate(hashes)]
        self.root = root
        self.failing_checkouts = failing_checkouts or set()
        self.failing_reverts = failing_reverts or set()
        self.fetch_fails = fetch_fails
        self.current: Optional[str] = None
        self.calls: List[tuple[str, Optional[str]]] = []
        self.cleaned = False

    @property
    def working_directory(self) -> Path:
        return self.root

    def fetch(self) -> None:
        self.calls.append(("fetch", None))
        if self.fetch_fails:
            raise FetchError("remote unreachable")

    def list_revisions(self) -> Sequence[Revision]:
        self.calls.append(("log", None))
        return list(self.revisions)

    def checkout(self, revision_hash: str) -> None:
        self.calls.append(("checkout", revision_hash))
        if revision_hash in self.failing_checkouts:
            raise CheckoutError(f"cannot checkout {revision_hash}")
        self.current = revision_hash

    def revert(self) -> None:
        self.calls.append(("revert", self.current))
        failed = self.current in self.failing_reverts
        self.current = None
        if failed:
            raise RevertError("working tree is locked")

    def cleanup(self) -> None:
        self.cleaned = True


class FakeExtractor(Extractor):
    """Returns canned signatures for whatever revision the source has checked out."""

    name = "fake"

    def __init__(
        self,
        source: FakeRevisionSource,
        signatures: Mapping[str, Union[PackageMap, Exception]],
    ) -> None:
        super().__init__()
        self.source = source
        self.signatures = dict(signatures)
        self.extracted: List[str] = []

    def extract(self, directory: Path) -> PackageMap:
        assert directory == self.source.working_directory
        current = self.source.current
        assert current is not None, "extract called without a checkout"
        self.extracted.append(current)
        value = self.signatures.get(current, {})
        if isinstance(value, Exception):
            raise value
        return value


def extraction_error(message: str = "syntax error") -> ExtractionError:
    return ExtractionError(message)


__all__ = [
    "FakeExtractor",
    "FakeRevisionSource",
    "extraction_error",
    "make_revision",
    "package_map",
]

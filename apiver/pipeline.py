"""History pipeline: folds an ordered revision history into versioned results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from .diff import calculate, describe
from .errors import RevertError, RevisionError
from .extractors import Extractor
from .logging import get_logger, track
from .models import (
    Extracted,
    Failed,
    HistoryOutcome,
    Outcome,
    PackageMap,
    Revision,
    RevisionResult,
    Version,
)
from .source import RevisionSource
from .version import BASELINE, BUILD_ONLY, accumulate, delta_from

ResultCallback = Callable[[RevisionResult], None]


@dataclass(frozen=True)
class FoldState:
    """Running state threaded through the fold: last version and last good signatures."""

    version: Version
    signatures: PackageMap


class HistoryPipeline:
    """Walks revisions oldest first, one checkout/extract/diff/revert cycle at a time.

    Checkout and extraction failures are recorded on the revision and cost a
    build-only bump; the last good signatures stay where they were. A failed
    revert leaves the working directory untrustworthy, so it stops the run.
    Fetch and listing failures propagate before any revision is touched.
    """

    def __init__(
        self,
        source: RevisionSource,
        extractor: Extractor,
        *,
        package: str = "",
    ) -> None:
        self.source = source
        self.extractor = extractor
        self.package = package
        self.logger = get_logger("pipeline")
        self.failure: Optional[RevertError] = None

    def run(self, on_result: Optional[ResultCallback] = None) -> HistoryOutcome:
        """Process the whole history and return every result plus any fatal error."""
        results: List[RevisionResult] = []
        for result in self.iter_results():
            results.append(result)
            if on_result is not None:
                on_result(result)
        return HistoryOutcome(results=results, failure=self.failure)

    def iter_results(self) -> Iterator[RevisionResult]:
        """Yield results in order; stop iterating to end the run at a revision boundary."""
        self.failure = None
        with track("fetch", self.logger):
            self.source.fetch()
        revisions = list(self.source.list_revisions())
        self.logger.info("Analyzing %d revisions of %s", len(revisions), self.package or "repository")

        state: Optional[FoldState] = None
        for revision in revisions:
            try:
                result, state = self.step(revision, state)
            finally:
                reverted = self._revert(revision)
            if not reverted:
                return
            self._log_result(result)
            yield result

    def step(
        self, revision: Revision, state: Optional[FoldState]
    ) -> Tuple[RevisionResult, FoldState]:
        """Advance the fold by one revision. ``state`` is ``None`` for the baseline."""
        outcome = self._analyze(revision)

        if state is None:
            signatures = outcome.signatures if isinstance(outcome, Extracted) else {}
            next_state = FoldState(version=BASELINE, signatures=signatures)
        elif isinstance(outcome, Extracted):
            summary = calculate(state.signatures, outcome.signatures)
            self.logger.debug("%s diff: %s", revision.hash, describe(summary))
            version = accumulate(state.version, delta_from(summary))
            next_state = FoldState(version=version, signatures=outcome.signatures)
        else:
            version = accumulate(state.version, BUILD_ONLY)
            next_state = FoldState(version=version, signatures=state.signatures)

        result = RevisionResult(
            revision=revision,
            outcome=outcome,
            version=next_state.version,
            package=self.package,
        )
        return result, next_state

    def _analyze(self, revision: Revision) -> Outcome:
        try:
            with track(f"checkout {revision.hash}", self.logger):
                self.source.checkout(revision.hash)
            with track(f"extract {revision.hash}", self.logger):
                signatures = self.extractor.extract(self.source.working_directory)
        except RevisionError as exc:
            self.logger.warning("Skipping %s: %s", revision.hash, exc)
            return Failed(error=exc)
        return Extracted(signatures=signatures)

    def _revert(self, revision: Revision) -> bool:
        try:
            with track(f"revert {revision.hash}", self.logger):
                self.source.revert()
        except RevertError as exc:
            self.logger.error("Aborting at %s: %s", revision.hash, exc)
            self.failure = exc
            return False
        return True

    def _log_result(self, result: RevisionResult) -> None:
        suffix = f" ({result.error})" if result.error is not None else ""
        self.logger.debug(
            "%s %s %s%s",
            result.revision.hash[:12],
            result.version,
            result.revision.subject,
            suffix,
        )


__all__ = ["FoldState", "HistoryPipeline", "ResultCallback"]

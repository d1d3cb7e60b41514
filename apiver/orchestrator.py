"""Wiring for history and signature runs."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from .config import ApiverConfig, load_config
from .extractors import Extractor, get_extractor
from .git.source import GitRevisionSource
from .logging import get_logger, set_measure_enabled
from .models import HistoryOutcome, PackageMap
from .pipeline import HistoryPipeline, ResultCallback
from .source import RevisionSource

SourceFactory = Callable[..., RevisionSource]


class Orchestrator:
    """Builds a revision source and extractor from config and runs the pipeline."""

    def __init__(
        self,
        config: ApiverConfig | None = None,
        *,
        config_path: Path | None = None,
        source_factory: SourceFactory | None = None,
        extractor_factory: Callable[..., Extractor] | None = None,
    ) -> None:
        self.config = config or load_config(config_path or Path.cwd())
        self._source_factory = source_factory or GitRevisionSource.clone
        self._extractor_factory = extractor_factory or get_extractor
        self.logger = get_logger("orchestrator")
        if self.config.measure_performance:
            set_measure_enabled(True)

    def run_history(
        self,
        locator: str,
        *,
        branch: Optional[str] = None,
        language: Optional[str] = None,
        on_result: Optional[ResultCallback] = None,
    ) -> HistoryOutcome:
        """Clone ``locator`` and version every revision on its first-parent chain.

        Clone, fetch and log failures raise ``SourceUnavailable`` subclasses.
        A revert failure is reported through ``HistoryOutcome.failure``.
        """
        extractor = self._extractor(language)
        self.logger.info("Starting history run for %s", locator)
        source = self._source_factory(
            locator,
            branch=branch or self.config.branch,
            keep=self.config.keep_clone,
        )
        with source:
            pipeline = HistoryPipeline(source, extractor, package=locator)
            outcome = pipeline.run(on_result=on_result)
        if outcome.ok:
            self.logger.info("Finished %s at version %s", locator, outcome.version)
        return outcome

    def run_signature(self, path: str, *, language: Optional[str] = None) -> PackageMap:
        """Extract the signatures of a working tree without walking history."""
        directory = Path(path).expanduser().resolve()
        if not directory.is_dir():
            raise FileNotFoundError(f"{directory} is not a directory")
        return self._extractor(language).extract(directory)

    def _extractor(self, language: Optional[str]) -> Extractor:
        return self._extractor_factory(
            language or self.config.language,
            exclude_paths=self.config.exclude_paths,
        )


__all__ = ["Orchestrator"]

"""Base classes for signature extractor plugins."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterator, List, Sequence, Tuple

from ..models import PackageMap

_SKIPPED_DIRS = {"vendor", "testdata", "node_modules", "__pycache__"}


class Extractor(ABC):
    """Contract for extractors that read exported symbols from a source tree."""

    name: str = ""
    suffixes: Tuple[str, ...] = ()

    def __init__(self, exclude_paths: Sequence[str] | None = None) -> None:
        self.exclude_paths = [path.strip("/") for path in exclude_paths or () if path.strip("/")]

    @abstractmethod
    def extract(self, directory: Path) -> PackageMap:
        """Return signatures keyed by package; raises ``ExtractionError``."""

    def accepts(self, filename: str) -> bool:
        return filename.endswith(self.suffixes)

    def packages(self, directory: Path) -> Dict[str, List[Path]]:
        """Group source files by package key (posix path relative to ``directory``)."""
        root = Path(directory)
        grouped: Dict[str, List[Path]] = {}
        for current, files in _walk(root):
            relative = current.relative_to(root).as_posix()
            if self._excluded(relative):
                continue
            sources = sorted(current / name for name in files if self.accepts(name))
            if sources:
                grouped[relative] = sources
        return grouped

    def _excluded(self, relative: str) -> bool:
        if relative == ".":
            return False
        return any(
            relative == prefix or relative.startswith(f"{prefix}/")
            for prefix in self.exclude_paths
        )


def _walk(root: Path) -> Iterator[Tuple[Path, List[str]]]:
    for current, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            name for name in dirnames if not name.startswith(".") and name not in _SKIPPED_DIRS
        )
        yield Path(current), filenames


__all__ = ["Extractor"]

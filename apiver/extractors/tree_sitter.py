"""Shared plumbing for tree-sitter powered extractors."""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence, Set, Tuple

from tree_sitter import Language, Node, Parser

from ..errors import ExtractionError
from ..models import CATEGORIES, Category, PackageMap, Signature
from .base import Extractor

Symbol = Tuple[Category, str]


class TreeSitterExtractor(Extractor):
    """Parses every source file of a package and folds the symbols into a signature."""

    def __init__(self, exclude_paths: Sequence[str] | None = None) -> None:
        super().__init__(exclude_paths)
        self._parser: Optional[Parser] = None

    @abstractmethod
    def language(self) -> Language:
        """Return the tree-sitter language for this extractor."""

    @abstractmethod
    def collect(self, root: Node, source: bytes) -> Iterable[Symbol]:
        """Yield ``(category, descriptor)`` pairs for one parsed file."""

    def extract(self, directory: Path) -> PackageMap:
        root = Path(directory)
        if not root.is_dir():
            raise ExtractionError(f"{root} is not a directory")
        signatures: Dict[str, Signature] = {}
        for package, files in self.packages(root).items():
            symbols: Dict[Category, Set[str]] = {category: set() for category in CATEGORIES}
            for path in files:
                for category, descriptor in self.collect(*self._parse(path, root)):
                    symbols[category].add(descriptor)
            signatures[package] = Signature.build(
                **{category.value: symbols[category] for category in CATEGORIES}
            )
        return signatures

    def _get_parser(self) -> Parser:
        if self._parser is None:
            self._parser = Parser(self.language())
        return self._parser

    def _parse(self, path: Path, root: Path) -> Tuple[Node, bytes]:
        relative = path.relative_to(root).as_posix()
        try:
            source = path.read_bytes()
        except OSError as exc:
            raise ExtractionError(f"failed to read {relative}: {exc}") from exc
        tree = self._get_parser().parse(source)
        if tree.root_node.has_error:
            raise ExtractionError(f"failed to parse {relative}")
        return tree.root_node, source


def node_text(node: Optional[Node], source: bytes) -> str:
    if node is None:
        return ""
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def normalize(text: str) -> str:
    return " ".join(text.split())


__all__ = ["Symbol", "TreeSitterExtractor", "node_text", "normalize"]

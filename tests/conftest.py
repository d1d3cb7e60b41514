from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable, Mapping

import pytest


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[Mapping[str, str]], Path]:
    """Write ``path -> contents`` entries under a throwaway source tree."""
    root = tmp_path / "tree"
    root.mkdir()

    def _write(files: Mapping[str, str]) -> Path:
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return root

    return _write

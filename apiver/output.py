"""Persisted output: one JSON record per revision."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .models import RevisionResult


def record_for(result: RevisionResult) -> Dict[str, Optional[str]]:
    """Flatten a result into the persisted record; signatures are never written."""
    revision = result.revision
    error = result.error
    return {
        "hash": revision.hash,
        "subject": revision.subject,
        "name": revision.name,
        "email": revision.email,
        "date": revision.date.isoformat(),
        "package": result.package,
        "version": str(result.version),
        "error": str(error) if error is not None else None,
    }


def write_records(results: Iterable[RevisionResult], path: Path) -> int:
    """Write results as JSON Lines, returning the number of records written."""
    lines: List[str] = [json.dumps(record_for(result), sort_keys=True) for result in results]
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = "\n".join(lines) + "\n" if lines else ""
    path.write_text(payload, encoding="utf-8")
    return len(lines)


def format_result(result: RevisionResult) -> str:
    """Render a console line: short hash, version, subject and any error."""
    line = f"{result.revision.hash[:12]} {result.version} {result.revision.subject}"
    if result.error is not None:
        line += f" [error: {result.error}]"
    return line


__all__ = ["format_result", "record_for", "write_records"]

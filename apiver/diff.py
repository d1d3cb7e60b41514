"""Structural diff of package signatures."""

from __future__ import annotations

from typing import AbstractSet, Dict, List

from .models import (
    CATEGORIES,
    EMPTY_SIGNATURE,
    Diff,
    PackageDiff,
    PackageMap,
    Signature,
    SummaryDiff,
)


def calculate(current: PackageMap, next: PackageMap) -> SummaryDiff:
    """Compare two package maps and summarise added/removed symbols.

    A package missing from ``next`` is diffed against the empty signature, so
    every symbol it exported counts as removed. A package only present in
    ``next`` contributes additions only.
    """
    packages: List[PackageDiff] = []
    added_packages = 0
    removed_packages = 0

    for name in sorted(current):
        next_signature = next.get(name)
        if next_signature is None:
            removed_packages += 1
            next_signature = EMPTY_SIGNATURE
        packages.append(compare_signatures(name, current[name], next_signature))

    for name in sorted(next):
        if name in current:
            continue
        added_packages += 1
        packages.append(compare_signatures(name, EMPTY_SIGNATURE, next[name]))

    packages.sort(key=lambda package: package.name)
    return SummaryDiff(
        package_changes=Diff(added=added_packages, removed=removed_packages),
        packages=packages,
    )


def compare_signatures(name: str, current: Signature, next: Signature) -> PackageDiff:
    diffs: Dict[str, Diff] = {
        category.value: compare_symbols(current.symbols(category), next.symbols(category))
        for category in CATEGORIES
    }
    return PackageDiff(name=name, **diffs)


def compare_symbols(current: AbstractSet[str], next: AbstractSet[str]) -> Diff:
    current_set = frozenset(current)
    next_set = frozenset(next)
    return Diff(
        added=len(next_set - current_set),
        removed=len(current_set - next_set),
    )


def describe(summary: SummaryDiff) -> str:
    """Render a compact one-line summary for logging."""
    parts = [
        f"packages +{summary.package_changes.added}/-{summary.package_changes.removed}"
    ]
    for package in summary.packages:
        changed = [
            f"{category.value} +{diff.added}/-{diff.removed}"
            for category, diff in zip(CATEGORIES, package.categories())
            if not diff.is_zero()
        ]
        if changed:
            parts.append(f"{package.name}: {', '.join(changed)}")
    return "; ".join(parts)


__all__ = ["calculate", "compare_signatures", "compare_symbols", "describe"]

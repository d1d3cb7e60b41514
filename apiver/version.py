"""Version delta policy: removals break, additions extend, every revision builds."""

from __future__ import annotations

from .models import SummaryDiff, Version

BASELINE = Version(0, 0, 0)
BUILD_ONLY = Version(0, 0, 1)


def is_breaking(diff: SummaryDiff) -> bool:
    if diff.package_changes.removed > 0:
        return True
    return any(
        category.removed > 0
        for package in diff.packages
        for category in package.categories()
    )


def adds_features(diff: SummaryDiff) -> bool:
    if diff.package_changes.added > 0:
        return True
    return any(
        category.added > 0
        for package in diff.packages
        for category in package.categories()
    )


def delta_from(diff: SummaryDiff) -> Version:
    """Return the version increment earned by a single analyzed revision."""
    return Version(
        major=1 if is_breaking(diff) else 0,
        minor=1 if adds_features(diff) else 0,
        build=1,
    )


def accumulate(previous: Version, delta: Version) -> Version:
    # Components are independent counters; no carrying between them.
    return previous + delta


__all__ = [
    "BASELINE",
    "BUILD_ONLY",
    "accumulate",
    "adds_features",
    "delta_from",
    "is_breaking",
]

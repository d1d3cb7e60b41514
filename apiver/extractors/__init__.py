"""Signature extractor implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterable, Sequence

from .base import Extractor
from .go import GoExtractor
from .python import PythonExtractor

_ENTRY_POINT_GROUP = "apiver.extractors"

ExtractorFactory = Callable[..., Extractor]

_BUILTIN_FACTORIES: Dict[str, ExtractorFactory] = {
    "go": GoExtractor,
    "python": PythonExtractor,
}


def discover_extractors() -> Dict[str, ExtractorFactory]:
    """Return extractor factories keyed by language, built-ins first."""
    factories: Dict[str, ExtractorFactory] = dict(_BUILTIN_FACTORIES)
    for entry in _iter_entry_points():
        key = entry.name.lower()
        if key in factories:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - depends on installed plugins
            raise RuntimeError(f"Failed to load extractor entry point '{entry.name}': {exc}") from exc
        factories[key] = _coerce_factory(entry.name, loaded)
    return factories


def get_extractor(name: str, *, exclude_paths: Sequence[str] | None = None) -> Extractor:
    """Instantiate the extractor registered for ``name``."""
    factories = discover_extractors()
    factory = factories.get(name.lower())
    if factory is None:
        known = ", ".join(sorted(factories))
        raise ValueError(f"Unknown language '{name}'; expected one of: {known}")
    instance = factory(exclude_paths=exclude_paths)
    if not isinstance(instance, Extractor):
        raise TypeError(f"Extractor factory for '{name}' did not return an Extractor instance")
    return instance


def _coerce_factory(name: str, obj: object) -> ExtractorFactory:
    if isinstance(obj, type) and issubclass(obj, Extractor):
        return obj
    if callable(obj):
        return obj  # type: ignore[return-value]
    raise TypeError(f"Extractor entry point '{name}' must be an Extractor subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "Extractor",
    "GoExtractor",
    "PythonExtractor",
    "discover_extractors",
    "get_extractor",
]

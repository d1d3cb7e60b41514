"""Configuration loading for apiver (.apiver.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".apiver.yml"
DEFAULT_LANGUAGE = "go"


@dataclass
class ServiceConfig:
    """HTTP service bind settings."""

    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class ApiverConfig:
    """Represents the settings defined in .apiver.yml."""

    root: Path
    branch: Optional[str] = None
    language: str = DEFAULT_LANGUAGE
    exclude_paths: List[str] = field(default_factory=list)
    output: Optional[Path] = None
    measure_performance: bool = False
    keep_clone: bool = False
    service: ServiceConfig = field(default_factory=ServiceConfig)


def load_config(config_path: Path) -> ApiverConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ApiverConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    language = _as_str(data.get("language")) or DEFAULT_LANGUAGE
    output_str = _as_str(data.get("output"))

    service = ServiceConfig()
    service_data = _as_dict(data.get("service"))
    if service_data:
        service.host = _as_str(service_data.get("host")) or service.host
        port = _as_int(service_data.get("port"))
        if port is not None:
            if not 0 < port < 65536:
                raise ConfigError(f"service.port out of range: {port}")
            service.port = port

    return ApiverConfig(
        root=root,
        branch=_as_str(data.get("branch")),
        language=language.lower(),
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        output=root / output_str if output_str else None,
        measure_performance=_as_bool(data.get("measure_performance")) or False,
        keep_clone=_as_bool(data.get("keep_clone")) or False,
        service=service,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["ApiverConfig", "CONFIG_FILENAME", "ServiceConfig", "load_config"]

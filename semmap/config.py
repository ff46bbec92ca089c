"""Configuration loading for semantic map builds (.semmap.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".semmap.yml"

DEFAULT_EXCLUDE_PATHS = ["node_modules", "dist", "build", ".git", "coverage"]
DEFAULT_LANGUAGES = ["typescript", "javascript", "python", "go"]


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class MapConfig:
    """Build options for a semantic map.

    ``analyze_calls``, ``max_cluster_count``, ``use_embeddings`` and
    ``cache_enabled`` are accepted and carried through but no build phase
    consults them yet.
    """

    include_paths: List[str] = field(default_factory=lambda: ["."])
    exclude_paths: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATHS))
    languages: List[str] = field(default_factory=lambda: list(DEFAULT_LANGUAGES))
    analyze_imports: bool = True
    analyze_calls: bool = True
    analyze_types: bool = True
    build_clusters: bool = True
    min_cluster_size: int = 3
    max_cluster_count: int = 50
    similarity_threshold: float = 0.3
    use_embeddings: bool = False
    cache_enabled: bool = True
    concurrency: Optional[int] = None

    def with_overrides(self, **values: Any) -> "MapConfig":
        """Return a copy with the given fields replaced; ``None`` values are ignored."""
        updates = {key: value for key, value in values.items() if value is not None}
        unknown = set(updates) - set(self.__dataclass_fields__)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return replace(self, **updates)

    def as_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.__dataclass_fields__}


def load_config(config_path: Path) -> MapConfig:
    """Load configuration from disk, returning defaults when no file exists."""
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        return MapConfig()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    defaults = MapConfig()
    cluster_data = _as_dict(data.get("clusters"))
    analysis_data = _as_dict(data.get("analysis"))

    return MapConfig(
        include_paths=_as_str_list(data.get("include_paths")) or defaults.include_paths,
        exclude_paths=_as_str_list(data.get("exclude_paths")) or defaults.exclude_paths,
        languages=[lang.lower() for lang in _as_str_list(data.get("languages"))]
        or defaults.languages,
        analyze_imports=_bool_or(analysis_data.get("imports"), defaults.analyze_imports),
        analyze_calls=_bool_or(analysis_data.get("calls"), defaults.analyze_calls),
        analyze_types=_bool_or(analysis_data.get("types"), defaults.analyze_types),
        build_clusters=_bool_or(cluster_data.get("enabled"), defaults.build_clusters),
        min_cluster_size=_int_or(cluster_data.get("min_size"), defaults.min_cluster_size),
        max_cluster_count=_int_or(cluster_data.get("max_count"), defaults.max_cluster_count),
        similarity_threshold=_float_or(
            cluster_data.get("similarity_threshold"), defaults.similarity_threshold
        ),
        use_embeddings=_bool_or(data.get("use_embeddings"), defaults.use_embeddings),
        cache_enabled=_bool_or(data.get("cache_enabled"), defaults.cache_enabled),
        concurrency=_as_int(data.get("concurrency")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


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


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
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


def _int_or(value: Any, default: int) -> int:
    parsed = _as_int(value)
    return default if parsed is None else parsed


def _float_or(value: Any, default: float) -> float:
    parsed = _as_float(value)
    return default if parsed is None else parsed


def _bool_or(value: Any, default: bool) -> bool:
    parsed = _as_bool(value)
    return default if parsed is None else parsed


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []

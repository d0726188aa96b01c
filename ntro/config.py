"""Configuration loading for ntro (.ntro.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".ntro.yml"


@dataclass
class YamlConfig:
    """YAML sources to generate namespace declarations for."""

    sources: List[Path] = field(default_factory=list)


@dataclass
class DotenvConfig:
    """Dotenv sources and the artifacts generated from them."""

    sources: List[Path] = field(default_factory=list)
    zod: bool = False
    tsconfig_path: bool = False
    tsconfig_file: Optional[Path] = None
    declaration_file: str = "env.d.ts"
    module_file: str = "env.parsed.ts"


@dataclass
class WatchConfig:
    """Polling settings for --watch."""

    poll_interval: float = 1.0
    debounce: float = 0.2


@dataclass
class NtroConfig:
    """Represents the settings defined in .ntro.yml."""

    root: Path
    output_dir: Optional[Path] = None
    prettify: bool = False
    yaml: YamlConfig = field(default_factory=YamlConfig)
    dotenv: DotenvConfig = field(default_factory=DotenvConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)


def load_config(config_path: Path) -> NtroConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return NtroConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    output_dir_str = _as_str(data.get("output_dir"))
    output_dir = root / output_dir_str if output_dir_str else None

    yaml_data = _as_dict(data.get("yaml"))
    yaml_config = YamlConfig(sources=_as_path_list(root, yaml_data.get("sources")))

    dotenv_data = _as_dict(data.get("dotenv"))
    dotenv = DotenvConfig(sources=_as_path_list(root, dotenv_data.get("sources")))
    if dotenv_data:
        dotenv.zod = _as_bool(dotenv_data.get("zod")) or False
        dotenv.tsconfig_path = _as_bool(dotenv_data.get("tsconfig_path")) or False
        tsconfig_file = _as_str(dotenv_data.get("tsconfig_file"))
        dotenv.tsconfig_file = root / tsconfig_file if tsconfig_file else None
        dotenv.declaration_file = (
            _as_str(dotenv_data.get("declaration_file")) or dotenv.declaration_file
        )
        dotenv.module_file = _as_str(dotenv_data.get("module_file")) or dotenv.module_file

    watch_data = _as_dict(data.get("watch"))
    watch = WatchConfig()
    if watch_data:
        poll_interval = _as_float(watch_data.get("poll_interval"))
        debounce = _as_float(watch_data.get("debounce"))
        if poll_interval is not None:
            if poll_interval <= 0:
                raise ConfigError("watch.poll_interval must be positive")
            watch.poll_interval = poll_interval
        if debounce is not None:
            if debounce < 0:
                raise ConfigError("watch.debounce must not be negative")
            watch.debounce = debounce

    return NtroConfig(
        root=root,
        output_dir=output_dir,
        prettify=_as_bool(data.get("prettify")) or False,
        yaml=yaml_config,
        dotenv=dotenv,
        watch=watch,
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
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


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


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


def _as_path_list(root: Path, value: Any) -> List[Path]:
    return [root / item for item in _as_str_list(value)]


__all__ = [
    "CONFIG_FILENAME",
    "DotenvConfig",
    "NtroConfig",
    "WatchConfig",
    "YamlConfig",
    "load_config",
]

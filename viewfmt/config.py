"""Workspace configuration support for the viewfmt CLI."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older interpreters
    tomllib = None  # type: ignore

from viewfmt.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_INCLUDE = ("*.php",)
DEFAULT_EXCLUDE = ("vendor/*", "node_modules/*", ".git/*")

CONFIG_CANDIDATES = ("viewfmt.toml", ".viewfmtrc")


@dataclass
class WorkspaceConfig:
    """Resolved workspace configuration."""

    root: Path
    include: List[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    source: Optional[Path] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    def is_included(self, path: Path) -> bool:
        return any(fnmatch(path.name, pattern) for pattern in self.include)

    def is_excluded(self, path: Path) -> bool:
        try:
            relative = path.resolve().relative_to(self.root).as_posix()
        except ValueError:
            relative = path.as_posix()
        parts = relative.split("/")
        prefixes = ["/".join(parts[index:]) for index in range(len(parts))]
        return any(fnmatch(candidate, pattern) for pattern in self.exclude for candidate in prefixes)


def _read_json_config(path: Path) -> Dict[str, Any]:
    content = path.read_text(encoding="utf-8")
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON: {exc.msg}", path=str(path), line=exc.lineno, column=exc.colno) from exc


def _read_toml_config(path: Path) -> Dict[str, Any]:
    if tomllib is None:
        raise ConfigError("TOML parsing requires Python 3.11 or later.", path=str(path))
    with path.open("rb") as handle:
        try:
            return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML: {exc}", path=str(path)) from exc


def _pattern_list(data: Dict[str, Any], key: str, default: Sequence[str], path: Path) -> List[str]:
    value = data.get(key)
    if value is None:
        return list(default)
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return list(value)
    raise ConfigError(
        f"'{key}' must be a string or a list of glob patterns",
        path=str(path),
        hint=f'Example: {key} = ["*.php"]',
    )


def locate_config_file(root: Path, explicit: Optional[Path] = None) -> Optional[Path]:
    if explicit is not None:
        return explicit if explicit.exists() else None
    for candidate in CONFIG_CANDIDATES:
        path = root / candidate
        if path.exists():
            return path
    pyproject = root / "pyproject.toml"
    if pyproject.exists() and tomllib is not None:
        with pyproject.open("rb") as handle:
            try:
                data = tomllib.load(handle)
            except tomllib.TOMLDecodeError:
                return None
        if isinstance(data.get("tool"), dict) and "viewfmt" in data["tool"]:
            return pyproject
    return None


def load_workspace_config(root: Path, explicit: Optional[Path] = None) -> WorkspaceConfig:
    root = root.resolve()
    if explicit is not None and not explicit.exists():
        raise ConfigError("Configuration file not found", path=str(explicit))
    config_path = locate_config_file(root, explicit)
    if config_path is None:
        return WorkspaceConfig(root=root)

    if config_path.suffix == ".toml":
        data = _read_toml_config(config_path)
    else:
        data = _read_json_config(config_path)

    if config_path.name == "pyproject.toml":
        data = (data.get("tool") or {}).get("viewfmt") or {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a table of settings", path=str(config_path))

    logger.debug("Loaded workspace configuration from %s", config_path)
    return WorkspaceConfig(
        root=root,
        include=_pattern_list(data, "include", DEFAULT_INCLUDE, config_path),
        exclude=_pattern_list(data, "exclude", DEFAULT_EXCLUDE, config_path),
        source=config_path,
        raw=data,
    )


def discover_files(paths: Iterable[Path], config: WorkspaceConfig) -> List[Path]:
    """Expand ``paths`` into the template files to format.

    Files given explicitly are always kept; directories are walked and
    filtered through the include and exclude patterns. Order is stable and
    duplicates are dropped.
    """
    found: List[Path] = []
    seen = set()
    for path in paths:
        if path.is_dir():
            candidates = sorted(
                candidate
                for candidate in path.rglob("*")
                if candidate.is_file() and config.is_included(candidate) and not config.is_excluded(candidate)
            )
        else:
            candidates = [path]
        for candidate in candidates:
            key = candidate.resolve()
            if key in seen:
                continue
            seen.add(key)
            found.append(candidate)
    return found


__all__ = [
    "WorkspaceConfig",
    "DEFAULT_INCLUDE",
    "DEFAULT_EXCLUDE",
    "locate_config_file",
    "load_workspace_config",
    "discover_files",
]

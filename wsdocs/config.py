"""Configuration loading for wsdocs (.wsdocs.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .context import ExecutionContext
from .loaders import ProjectLoader
from .reader import WorkspaceReader

CONFIG_FILENAME = ".wsdocs.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class WorkspaceConfig:
    """Workspace path and filters applied to the reader."""

    path: Optional[str] = None
    projects: List[str] = field(default_factory=list)
    exclude_projects: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)
    exclude_files: List[str] = field(default_factory=list)
    extensions: List[str] = field(default_factory=list)


@dataclass
class WsDocsConfig:
    """Represents the settings defined in .wsdocs.yml."""

    root: Path
    input_folder: Path
    max_workers: Optional[int] = None
    warn_missing_files: bool = False
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)


def load_config(config_path: Path) -> WsDocsConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return WsDocsConfig(root=root, input_folder=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    input_folder_str = _as_str(data.get("input_folder"))
    input_folder = (root / input_folder_str).resolve() if input_folder_str else root

    max_workers = _as_int(data.get("max_workers"))
    if max_workers is not None and max_workers < 1:
        raise ConfigError("max_workers must be at least 1")

    workspace_data = _as_dict(data.get("workspace"))
    workspace = WorkspaceConfig()
    if workspace_data:
        workspace.path = _as_str(workspace_data.get("path"))
        workspace.projects = _as_str_list(workspace_data.get("projects"))
        workspace.exclude_projects = _as_str_list(workspace_data.get("exclude_projects"))
        workspace.files = _as_str_list(workspace_data.get("files"))
        workspace.exclude_files = _as_str_list(workspace_data.get("exclude_files"))
        workspace.extensions = _as_str_list(workspace_data.get("extensions"))

    return WsDocsConfig(
        root=root,
        input_folder=input_folder,
        max_workers=max_workers,
        warn_missing_files=_as_bool(data.get("warn_missing_files")) or False,
        workspace=workspace,
    )


def build_reader(config: WsDocsConfig, loader: ProjectLoader | None = None) -> WorkspaceReader:
    """Return a reader configured from the ``workspace`` section."""
    workspace = config.workspace
    if not workspace.path:
        raise ConfigError("workspace.path is required")

    reader = WorkspaceReader(workspace.path, loader=loader)
    if workspace.projects:
        included = set(workspace.projects)
        reader.filter_projects(lambda name: name in included)
    if workspace.exclude_projects:
        excluded = set(workspace.exclude_projects)
        reader.filter_projects(lambda name: name not in excluded)
    if workspace.files:
        reader.filter_files(_matches_any(workspace.files))
    if workspace.exclude_files:
        excluded_files = _matches_any(workspace.exclude_files)
        reader.filter_files(lambda path: not excluded_files(path))
    if workspace.extensions:
        reader.restrict_extensions(*workspace.extensions)
    return reader


def build_context(config: WsDocsConfig) -> ExecutionContext:
    """Return an execution context rooted at the configured input folder."""
    context = ExecutionContext(
        input_folder=str(config.input_folder),
        warn_missing_files=config.warn_missing_files,
    )
    if config.max_workers is not None:
        context.max_workers = config.max_workers
    return context


def _matches_any(patterns: Sequence[str]):
    normalized = [pattern.replace("\\", "/") for pattern in patterns]

    def _predicate(path: str) -> bool:
        candidate = path.replace("\\", "/")
        return any(fnmatch(candidate, pattern) for pattern in normalized)

    return _predicate


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
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


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


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
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []

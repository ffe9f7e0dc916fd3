"""MSBuild project and solution loaders.

These loaders read item lists straight from the XML and solution text. They do
not evaluate MSBuild: conditions, imports, targets and properties are ignored,
so items computed at build time are not reported.
"""

from __future__ import annotations

import glob
import os
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from ..logging import get_logger
from ..models import Project, ProjectFile
from ..paths import normalize_path, resolve_path
from .base import ProjectLoader, WorkspaceLoadError

PROJECT_SUFFIXES = {".csproj", ".vbproj", ".fsproj"}
SOLUTION_SUFFIX = ".sln"

_SDK_DEFAULT_COMPILE = {
    ".csproj": "**/*.cs",
    ".vbproj": "**/*.vb",
}
_SDK_DEFAULT_EXCLUDED_DIRS = {"bin", "obj"}

_SOLUTION_HEADER = "Microsoft Visual Studio Solution File"
_SOLUTION_FOLDER_TYPE = "2150E333-8FDC-42A3-9474-1A3956D46DE8"
_SOLUTION_PROJECT = re.compile(
    r'^Project\("\{(?P<type>[0-9A-Fa-f-]+)\}"\)\s*=\s*'
    r'"(?P<name>[^"]*)"\s*,\s*"(?P<path>[^"]*)"',
    re.MULTILINE,
)

logger = get_logger("loaders.msbuild")


class ProjectFileLoader(ProjectLoader):
    """Loads the compile items of a single ``.csproj``/``.vbproj``/``.fsproj``."""

    def supports(self, path: str) -> bool:
        return Path(path).suffix.lower() in PROJECT_SUFFIXES

    def load(self, path: str) -> Sequence[Project]:
        project_path = Path(path)
        if not project_path.is_file():
            return []
        return [self.load_project(project_path)]

    def load_project(self, project_path: Path, name: Optional[str] = None) -> Project:
        """Parse one project file; ``name`` overrides the file stem."""
        try:
            root = ET.fromstring(project_path.read_text(encoding="utf-8-sig"))
        except ET.ParseError as exc:
            raise WorkspaceLoadError(f"Failed to parse {project_path}: {exc}") from exc

        if _local_name(root.tag) != "Project":
            raise WorkspaceLoadError(f"{project_path} is not an MSBuild project file")

        folder = os.path.abspath(project_path.parent)
        items: Dict[str, None] = {}

        default_pattern = _SDK_DEFAULT_COMPILE.get(project_path.suffix.lower())
        if default_pattern and _is_sdk_project(root) and _default_compile_items_enabled(root):
            for item in _expand(folder, default_pattern):
                relative = os.path.relpath(item, folder)
                if relative.split(os.sep, 1)[0].lower() in _SDK_DEFAULT_EXCLUDED_DIRS:
                    continue
                items[item] = None

        # Document order matters: Remove only affects items declared before it.
        for element in root.iter():
            if _local_name(element.tag) != "Compile":
                continue
            include = element.get("Include")
            if include:
                excluded = set(_expand_all(folder, element.get("Exclude")))
                for item in _expand_all(folder, include):
                    if item not in excluded:
                        items[item] = None
            remove = element.get("Remove")
            if remove:
                for item in _expand_all(folder, remove):
                    items.pop(item, None)

        return Project(
            name=name or project_path.stem,
            path=str(project_path),
            files=tuple(ProjectFile(path=item) for item in items),
        )


class SolutionLoader(ProjectLoader):
    """Loads every project referenced from a ``.sln`` file."""

    def __init__(self, project_loader: ProjectFileLoader | None = None) -> None:
        self._projects = project_loader or ProjectFileLoader()

    def supports(self, path: str) -> bool:
        return Path(path).suffix.lower() == SOLUTION_SUFFIX

    def load(self, path: str) -> Sequence[Project]:
        solution_path = Path(path)
        if not solution_path.is_file():
            return []

        text = solution_path.read_text(encoding="utf-8-sig")
        if _SOLUTION_HEADER not in text:
            raise WorkspaceLoadError(f"{solution_path} is not a Visual Studio solution file")

        folder = os.path.abspath(solution_path.parent)
        projects: List[Project] = []
        for match in _SOLUTION_PROJECT.finditer(text):
            if match.group("type").upper() == _SOLUTION_FOLDER_TYPE:
                continue
            name = match.group("name")
            project_path = Path(resolve_path(folder, match.group("path")))
            if project_path.suffix.lower() not in PROJECT_SUFFIXES:
                logger.debug("Skipping unsupported solution entry %s (%s)", name, project_path)
                continue
            if not project_path.is_file():
                logger.warning(
                    "Solution %s references missing project %s", solution_path.name, project_path
                )
                continue
            projects.append(self._projects.load_project(project_path, name=name))
        return projects


def _local_name(tag: str) -> str:
    match = re.match(r"\{.+}(.+)", tag)
    return match.group(1) if match else tag


def _is_sdk_project(root: ET.Element) -> bool:
    if root.get("Sdk"):
        return True
    for child in root:
        name = _local_name(child.tag)
        if name == "Sdk" or (name == "Import" and child.get("Sdk")):
            return True
    return False


def _default_compile_items_enabled(root: ET.Element) -> bool:
    for element in root.iter():
        if _local_name(element.tag) in {"EnableDefaultCompileItems", "EnableDefaultItems"}:
            if (element.text or "").strip().lower() == "false":
                return False
    return True


def _expand_all(folder: str, value: Optional[str]) -> Iterable[str]:
    if not value:
        return []
    expanded: List[str] = []
    for part in value.split(";"):
        part = part.strip()
        if part:
            expanded.extend(_expand(folder, part))
    return expanded


def _expand(folder: str, pattern: str) -> List[str]:
    if not any(char in pattern for char in "*?["):
        return [resolve_path(folder, pattern)]
    matches = glob.glob(normalize_path(pattern), root_dir=folder, recursive=True)
    paths = (resolve_path(folder, match) for match in matches)
    return sorted(path for path in paths if os.path.isfile(path))


__all__ = [
    "PROJECT_SUFFIXES",
    "SOLUTION_SUFFIX",
    "ProjectFileLoader",
    "SolutionLoader",
]

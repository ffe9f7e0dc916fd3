"""Project loader implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from pathlib import Path
from typing import Callable, Iterable, List, Sequence

from ..models import Project
from .base import ProjectLoader, WorkspaceLoadError
from .msbuild import PROJECT_SUFFIXES, SOLUTION_SUFFIX, ProjectFileLoader, SolutionLoader

_ENTRY_POINT_GROUP = "wsdocs.loaders"

_BUILTIN_FACTORIES: dict[str, Callable[[], ProjectLoader]] = {
    "solution": SolutionLoader,
    "project": ProjectFileLoader,
}


def discover_loaders() -> List[ProjectLoader]:
    """Return built-in loaders followed by those registered as entry points."""
    loaders: List[ProjectLoader] = [factory() for factory in _BUILTIN_FACTORIES.values()]
    seen = set(_BUILTIN_FACTORIES)

    for entry in _iter_entry_points():
        if entry.name in seen:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - depends on installed plugins
            raise RuntimeError(f"Failed to load project loader entry point '{entry.name}': {exc}") from exc
        loaders.append(_coerce_loader(loaded))
        seen.add(entry.name)

    return loaders


class WorkspaceLoader(ProjectLoader):
    """Dispatches a path to the first loader that supports it.

    A folder loads its single solution file, or every project file directly
    inside it when there is no solution.
    """

    def __init__(self, loaders: Sequence[ProjectLoader] | None = None) -> None:
        self._loaders = list(loaders) if loaders is not None else discover_loaders()

    def supports(self, path: str) -> bool:
        if Path(path).is_dir():
            return True
        return any(loader.supports(path) for loader in self._loaders)

    def load(self, path: str) -> Sequence[Project]:
        target = Path(path)
        if target.is_dir():
            return self._load_folder(target)
        for loader in self._loaders:
            if loader.supports(path):
                return loader.load(path)
        return []

    def _load_folder(self, folder: Path) -> List[Project]:
        solutions = sorted(folder.glob(f"*{SOLUTION_SUFFIX}"))
        if len(solutions) > 1:
            names = ", ".join(solution.name for solution in solutions)
            raise WorkspaceLoadError(f"{folder} contains more than one solution: {names}")
        if solutions:
            return list(self.load(str(solutions[0])))

        projects: List[Project] = []
        for candidate in sorted(folder.iterdir()):
            if candidate.is_file() and candidate.suffix.lower() in PROJECT_SUFFIXES:
                projects.extend(self.load(str(candidate)))
        return projects


def _coerce_loader(obj: object) -> ProjectLoader:
    if isinstance(obj, ProjectLoader):
        return obj
    if isinstance(obj, type) and issubclass(obj, ProjectLoader):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, ProjectLoader):
            return instance
    raise TypeError("Project loader entry point must be a ProjectLoader subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "ProjectFileLoader",
    "ProjectLoader",
    "SolutionLoader",
    "WorkspaceLoadError",
    "WorkspaceLoader",
    "discover_loaders",
]

"""Base classes for project loader plugins."""

from abc import ABC, abstractmethod
from typing import Sequence

from ..models import Project


class WorkspaceLoadError(RuntimeError):
    """Raised when a workspace or project file cannot be understood."""


class ProjectLoader(ABC):
    """Contract for loaders that enumerate the projects found at a path."""

    @abstractmethod
    def supports(self, path: str) -> bool:
        """Return True when this loader understands the workspace at ``path``."""

    @abstractmethod
    def load(self, path: str) -> Sequence[Project]:
        """Return the projects described by ``path``.

        A path with nothing to load yields an empty sequence. Malformed input
        raises :class:`WorkspaceLoadError`; I/O failures propagate as ``OSError``.
        """

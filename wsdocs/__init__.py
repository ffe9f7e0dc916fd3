"""Read MSBuild workspaces as pipeline documents."""

from .context import ExecutionContext
from .loaders import ProjectLoader, WorkspaceLoadError, WorkspaceLoader
from .models import Document, Project, ProjectFile
from .reader import ReadProject, ReadSolution, WorkspaceReader

__all__ = [
    "Document",
    "ExecutionContext",
    "Project",
    "ProjectFile",
    "ProjectLoader",
    "ReadProject",
    "ReadSolution",
    "WorkspaceLoadError",
    "WorkspaceLoader",
    "WorkspaceReader",
]

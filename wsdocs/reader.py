"""Pipeline module that turns MSBuild workspaces into documents."""

from __future__ import annotations

import os
from concurrent.futures import Executor, ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from .context import ExecutionContext
from .loaders import ProjectFileLoader, ProjectLoader, SolutionLoader, WorkspaceLoader
from .models import Document, Project, ProjectFile
from .paths import (
    normalize_extension,
    resolve_path,
    source_metadata,
    workspace_folder,
)

PathExpression = Callable[[Any, ExecutionContext], Optional[str]]
Predicate = Callable[[str], bool]

_Workspace = Tuple[str, List[Project]]


class WorkspaceReader:
    """Reads an MSBuild solution or project and returns its source files as documents.

    ``path`` is either a literal path or a callable evaluated per input item as
    ``path(item, context)``. Relative values resolve against
    ``context.input_folder``. A callable may return ``None`` to skip an item.

    Filters are cumulative and every chained call narrows the result::

        reader = (
            ReadSolution("App.sln")
            .filter_projects(lambda name: not name.endswith(".Tests"))
            .restrict_extensions("cs")
        )
        documents = reader.execute([Document.empty()], ExecutionContext())

    Each document carries an open stream which the consumer must close.
    """

    def __init__(
        self, path: Union[str, PathExpression], loader: ProjectLoader | None = None
    ) -> None:
        if path is None:
            raise TypeError("path must not be None")
        if isinstance(path, str):
            if not path.strip():
                raise ValueError("path must not be blank")
            self._path: PathExpression = partial(_literal_path, path)
        elif callable(path):
            self._path = path
        else:
            raise TypeError(f"path must be a string or a callable, not {type(path).__name__}")
        self._loader = loader if loader is not None else WorkspaceLoader()
        self._project_predicates: List[Predicate] = []
        self._file_predicates: List[Predicate] = []
        self._extensions: Optional[List[str]] = None

    @property
    def extensions(self) -> Optional[Tuple[str, ...]]:
        """The extension allow-list, or ``None`` when every extension is accepted."""
        return tuple(self._extensions) if self._extensions is not None else None

    def filter_projects(self, predicate: Predicate) -> "WorkspaceReader":
        """Only read projects whose name satisfies ``predicate``."""
        self._project_predicates.append(predicate)
        return self

    def filter_files(self, predicate: Predicate) -> "WorkspaceReader":
        """Only read files whose path satisfies ``predicate``."""
        self._file_predicates.append(predicate)
        return self

    def restrict_extensions(self, *extensions: str) -> "WorkspaceReader":
        """Only read files with one of ``extensions`` (``"cs"`` or ``".cs"``)."""
        normalized = [normalize_extension(extension) for extension in extensions]
        self._extensions = (self._extensions or []) + normalized
        return self

    def get_projects(self, path: str) -> Sequence[Project]:
        """Enumerate the projects at the resolved ``path``."""
        return self._loader.load(path)

    def execute(self, inputs: Sequence[Any], context: ExecutionContext) -> List[Document]:
        """Read every input's workspace; the order of the result is unspecified."""
        with ThreadPoolExecutor(
            max_workers=context.max_workers, thread_name_prefix="wsdocs-read"
        ) as executor:
            resolved = _gather(
                executor, [partial(self._read_workspace, item, context) for item in inputs]
            )
            workspaces: List[_Workspace] = [workspace for workspace in resolved if workspace]

            documents = _gather(
                executor,
                [
                    partial(self._read_file, path, file, context)
                    for path, projects in workspaces
                    for project in projects
                    for file in project.files
                ],
                cleanup=_close_document,
            )
        return [document for document in documents if document is not None]

    def _read_workspace(self, item: Any, context: ExecutionContext) -> Optional[_Workspace]:
        value = self._path(item, context)
        if value is None:
            return None
        path = resolve_path(context.input_folder, os.fspath(value))
        projects = [
            project
            for project in self.get_projects(path)
            if project is not None and self._accepts_project(project.name)
        ]
        for project in projects:
            context.trace.debug("Read project %s", project.name)
        return path, projects

    def _read_file(
        self, workspace_path: str, file: ProjectFile, context: ExecutionContext
    ) -> Optional[Document]:
        if not file.path or not file.path.strip():
            return None
        file_path = resolve_path(workspace_folder(workspace_path), file.path)
        if not os.path.isfile(file_path):
            level = "warning" if context.warn_missing_files else "debug"
            getattr(context.trace, level)("Skipping missing file %s", file_path)
            return None
        if not self._accepts_file(file_path):
            return None
        if self._extensions is not None and os.path.splitext(file_path)[1] not in self._extensions:
            return None

        context.trace.debug("Read file %s", file_path)
        stream = open(file_path, "rb")
        try:
            return context.get_new_document(
                file_path, stream, source_metadata(file_path, workspace_path)
            )
        except BaseException:
            stream.close()
            raise

    def _accepts_project(self, name: str) -> bool:
        return all(predicate(name) for predicate in self._project_predicates)

    def _accepts_file(self, path: str) -> bool:
        return all(predicate(path) for predicate in self._file_predicates)


class ReadProject(WorkspaceReader):
    """Reads the source files of a single MSBuild project file."""

    def __init__(self, path: Union[str, PathExpression]) -> None:
        super().__init__(path, loader=ProjectFileLoader())


class ReadSolution(WorkspaceReader):
    """Reads the source files of every project in a solution."""

    def __init__(self, path: Union[str, PathExpression]) -> None:
        super().__init__(path, loader=SolutionLoader())


def _literal_path(path: str, item: Any, context: ExecutionContext) -> str:
    return path


def _gather(
    executor: Executor,
    calls: Sequence[Callable[[], Any]],
    cleanup: Callable[[Any], None] | None = None,
) -> List[Any]:
    """Run ``calls`` on ``executor`` and wait for all of them.

    A single failure is re-raised as is; several are raised together in an
    ``ExceptionGroup``. ``cleanup`` releases the results of a failed batch.
    """
    futures = [executor.submit(call) for call in calls]
    results: List[Any] = []
    errors: List[Exception] = []
    for future in futures:
        try:
            results.append(future.result())
        except Exception as exc:
            errors.append(exc)

    if not errors:
        return results
    if cleanup is not None:
        for result in results:
            cleanup(result)
    if len(errors) == 1:
        raise errors[0]
    raise ExceptionGroup(f"{len(errors)} workspace reads failed", errors)


def _close_document(document: Optional[Document]) -> None:
    if document is not None:
        document.close()


__all__ = ["PathExpression", "Predicate", "ReadProject", "ReadSolution", "WorkspaceReader"]

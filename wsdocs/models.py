"""Core data models shared across wsdocs components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, BinaryIO, Dict, List, Optional


@dataclass(frozen=True)
class ProjectFile:
    """A file referenced by a project."""

    path: str


@dataclass(frozen=True)
class Project:
    """Named collection of file references produced by a project loader."""

    name: str
    path: Optional[str] = None
    files: tuple[ProjectFile, ...] = ()


@dataclass
class Document:
    """Pipeline unit of content plus metadata.

    The document owns ``stream`` once created; consumers release it with
    :meth:`close` or by using the document as a context manager.
    """

    source: Optional[str]
    stream: Optional[BinaryIO] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "Document":
        """Return a document with no content, usable as a bare input item."""
        return cls(source=None)

    def get(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    def read(self) -> bytes:
        if self.stream is None:
            return b""
        return self.stream.read()

    def close(self) -> None:
        if self.stream is not None:
            self.stream.close()

    def __enter__(self) -> "Document":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["Document", "Project", "ProjectFile"]

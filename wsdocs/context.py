"""Execution context handed to pipeline modules by the host."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Mapping, Optional

from .logging import get_logger
from .models import Document

_DEFAULT_MAX_WORKERS = min(32, (os.cpu_count() or 1) + 4)


@dataclass
class ExecutionContext:
    """Host-side collaborator: input root, trace sink and document factory."""

    input_folder: str = field(default_factory=os.getcwd)
    trace: logging.Logger = field(default_factory=lambda: get_logger("pipeline"))
    max_workers: int = _DEFAULT_MAX_WORKERS
    warn_missing_files: bool = False

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.input_folder = os.fspath(self.input_folder)

    def get_new_document(
        self,
        source: Optional[str],
        stream: Optional[BinaryIO],
        metadata: Mapping[str, Any],
    ) -> Document:
        """Create an output document that takes ownership of ``stream``."""
        return Document(source=source, stream=stream, metadata=dict(metadata))


__all__ = ["ExecutionContext"]

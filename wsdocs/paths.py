"""Path helpers and derived source-file metadata."""

from __future__ import annotations

import os
from typing import Dict

SOURCE_FILE_ROOT = "SourceFileRoot"
SOURCE_FILE_BASE = "SourceFileBase"
SOURCE_FILE_EXT = "SourceFileExt"
SOURCE_FILE_NAME = "SourceFileName"
SOURCE_FILE_DIR = "SourceFileDir"
SOURCE_FILE_PATH = "SourceFilePath"
SOURCE_FILE_PATH_BASE = "SourceFilePathBase"
RELATIVE_FILE_PATH = "RelativeFilePath"
RELATIVE_FILE_PATH_BASE = "RelativeFilePathBase"
RELATIVE_FILE_DIR = "RelativeFileDir"

METADATA_KEYS = (
    SOURCE_FILE_ROOT,
    SOURCE_FILE_BASE,
    SOURCE_FILE_EXT,
    SOURCE_FILE_NAME,
    SOURCE_FILE_DIR,
    SOURCE_FILE_PATH,
    SOURCE_FILE_PATH_BASE,
    RELATIVE_FILE_PATH,
    RELATIVE_FILE_PATH_BASE,
    RELATIVE_FILE_DIR,
)


def normalize_path(path: str) -> str:
    """Accept either separator style and collapse redundant segments."""
    unified = path.replace("\\", os.sep).replace("/", os.sep)
    return os.path.normpath(unified)


def resolve_path(input_folder: str, path: str) -> str:
    """Combine ``path`` with the input folder; an absolute ``path`` wins."""
    combined = os.path.join(normalize_path(input_folder), normalize_path(path))
    return os.path.abspath(combined)


def normalize_extension(extension: str) -> str:
    extension = extension.strip()
    return extension if extension.startswith(".") else f".{extension}"


def remove_extension(path: str) -> str:
    return os.path.splitext(path)[0]


def workspace_folder(workspace_path: str) -> str:
    """Folder that relative paths are expressed against.

    A workspace path naming a file (``App.sln``, ``Lib.csproj``, or any existing
    file) anchors at the folder containing it; anything else is treated as a
    folder already.
    """
    if os.path.isdir(workspace_path):
        return workspace_path
    if os.path.isfile(workspace_path) or os.path.splitext(workspace_path)[1]:
        return os.path.dirname(workspace_path)
    return workspace_path


def relative_path(workspace_path: str, file_path: str) -> str:
    try:
        return os.path.relpath(file_path, workspace_folder(workspace_path))
    except ValueError:
        # Different drives on Windows have no relative form.
        return file_path


def source_metadata(file_path: str, workspace_path: str) -> Dict[str, str]:
    """Return the derived path metadata attached to every read document."""
    directory = os.path.dirname(file_path)
    relative = relative_path(workspace_path, file_path)
    return {
        SOURCE_FILE_ROOT: directory,
        SOURCE_FILE_BASE: os.path.splitext(os.path.basename(file_path))[0],
        SOURCE_FILE_EXT: os.path.splitext(file_path)[1],
        SOURCE_FILE_NAME: os.path.basename(file_path),
        SOURCE_FILE_DIR: directory,
        SOURCE_FILE_PATH: file_path,
        SOURCE_FILE_PATH_BASE: remove_extension(file_path),
        RELATIVE_FILE_PATH: relative,
        RELATIVE_FILE_PATH_BASE: remove_extension(relative),
        RELATIVE_FILE_DIR: os.path.dirname(relative),
    }


__all__ = [
    "METADATA_KEYS",
    "normalize_extension",
    "normalize_path",
    "relative_path",
    "remove_extension",
    "resolve_path",
    "source_metadata",
    "workspace_folder",
]

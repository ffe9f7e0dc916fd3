"""Tests for wsdocs.config."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from wsdocs.config import (
    ConfigError,
    WorkspaceConfig,
    WsDocsConfig,
    build_context,
    build_reader,
    load_config,
)
from wsdocs.models import Document

from tests._fixtures.workspace_builder import StaticLoader, WorkspaceBuilder, make_project


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, WsDocsConfig)
    assert config.root == tmp_path.resolve()
    assert config.input_folder == tmp_path.resolve()
    assert config.max_workers is None
    assert config.warn_missing_files is False
    assert config.workspace == WorkspaceConfig()


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".wsdocs.yml"
    config_file.write_text(
        """
input_folder: src
max_workers: 4
warn_missing_files: yes
workspace:
  path: "App.sln"
  projects: [Core, Web]
  exclude_projects:
    - Web.Tests
  files: ["**/*.cs"]
  exclude_files:
    - "**/obj/**"
  extensions: cs
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.input_folder == (tmp_path / "src").resolve()
    assert config.max_workers == 4
    assert config.warn_missing_files is True
    assert config.workspace.path == "App.sln"
    assert config.workspace.projects == ["Core", "Web"]
    assert config.workspace.exclude_projects == ["Web.Tests"]
    assert config.workspace.files == ["**/*.cs"]
    assert config.workspace.exclude_files == ["**/obj/**"]
    assert config.workspace.extensions == ["cs"]


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".wsdocs.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_reports_yaml_errors(tmp_path: Path) -> None:
    (tmp_path / ".wsdocs.yml").write_text("workspace: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_load_config_rejects_invalid_worker_count(tmp_path: Path) -> None:
    (tmp_path / ".wsdocs.yml").write_text("max_workers: 0\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_build_reader_requires_workspace_path(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        build_reader(load_config(tmp_path))


def test_build_reader_applies_filters(workspace_builder: WorkspaceBuilder) -> None:
    workspace_builder.write(
        {
            "Core/a.cs": "",
            "Core/obj/b.cs": "",
            "Core/notes.txt": "",
            "Web/c.cs": "",
            "Tools/d.cs": "",
        }
    )
    root = workspace_builder.path()
    loader = StaticLoader(
        [
            make_project("Core", root / "Core" / "a.cs", root / "Core" / "obj" / "b.cs", root / "Core" / "notes.txt"),
            make_project("Web", root / "Web" / "c.cs"),
            make_project("Tools", root / "Tools" / "d.cs"),
        ]
    )
    config = WsDocsConfig(
        root=root,
        input_folder=root,
        max_workers=2,
        workspace=WorkspaceConfig(
            path=".",
            projects=["Core", "Web"],
            exclude_projects=["Web"],
            exclude_files=["*/obj/*"],
            extensions=["cs"],
        ),
    )

    reader = build_reader(config, loader=loader)
    context = build_context(config)
    documents = reader.execute([Document.empty()], context)

    assert context.max_workers == 2
    assert context.input_folder == str(root)
    assert {document.get("RelativeFilePath") for document in documents} == {os.path.join("Core", "a.cs")}
    for document in documents:
        document.close()

"""CLI parser and command behaviour tests."""

from __future__ import annotations

import json
import os

import pytest

from wsdocs.cli import _build_parser, main

from tests._fixtures.workspace_builder import WorkspaceBuilder


def _write_solution(builder: WorkspaceBuilder) -> None:
    builder.write(
        {
            "src/Core/Class1.cs": "class Class1 {}\n",
            "src/Core/Resources.resx": "<root />\n",
            "src/Web/Program.cs": "class Program {}\n",
        }
    )
    builder.project("src/Core/Core.csproj", ["Class1.cs", "Resources.resx"])
    builder.project("src/Web/Web.csproj", sdk=True)
    builder.solution("App.sln", {"Core": "src\\Core\\Core.csproj", "Web": "src\\Web\\Web.csproj"})


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "read"])
    assert args.verbose is True
    assert args.command == "read"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["read", "--verbose"])
    assert args.verbose is True
    assert args.command == "read"


def test_cli_collects_repeatable_filters() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["read", "App.sln", "--ext", "cs", "--ext", ".vb", "--project", "Core", "--exclude-project", "Web"]
    )
    assert args.path == "App.sln"
    assert args.ext == ["cs", ".vb"]
    assert args.project == ["Core"]
    assert args.exclude_project == ["Web"]
    assert args.json is False


def test_read_lists_relative_paths(
    workspace_builder: WorkspaceBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_solution(workspace_builder)
    root = workspace_builder.path()

    main(["read", "App.sln", "--input-folder", str(root), "--config", str(root), "--ext", "cs"])

    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        os.path.join("src", "Core", "Class1.cs"),
        os.path.join("src", "Web", "Program.cs"),
    ]


def test_read_uses_configuration_file(
    workspace_builder: WorkspaceBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_solution(workspace_builder)
    root = workspace_builder.path()
    workspace_builder.write(
        {
            ".wsdocs.yml": """
            workspace:
              path: App.sln
              exclude_projects: [Web]
            """
        }
    )

    main(["read", "--config", str(root), "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert [entry["RelativeFilePath"] for entry in payload] == [
        os.path.join("src", "Core", "Class1.cs"),
        os.path.join("src", "Core", "Resources.resx"),
    ]
    assert payload[0]["SourceFileExt"] == ".cs"


def test_read_reports_missing_workspace(
    workspace_builder: WorkspaceBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = workspace_builder.path()

    with pytest.raises(SystemExit) as excinfo:
        main(["read", "Missing.sln", "--input-folder", str(root), "--config", str(root)])

    assert excinfo.value.code == 1
    assert "Workspace path not found" in capsys.readouterr().err


def test_read_reports_malformed_solution(
    workspace_builder: WorkspaceBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    workspace_builder.write({"App.sln": "garbage\n"})
    root = workspace_builder.path()

    with pytest.raises(SystemExit) as excinfo:
        main(["read", "App.sln", "--input-folder", str(root), "--config", str(root)])

    assert excinfo.value.code == 1
    assert "wsdocs read failed" in capsys.readouterr().err

"""CLI entrypoints for wsdocs commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from .config import ConfigError, build_context, build_reader, load_config
from .loaders import WorkspaceLoadError
from .logging import configure_logging, get_logger
from .models import Document
from .paths import RELATIVE_FILE_PATH, resolve_path


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wsdocs",
        description="Read MSBuild solutions and projects as pipeline documents.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    read_parser = subparsers.add_parser(
        "read",
        help="List the source files a workspace would produce as documents.",
    )
    _add_verbose_option(read_parser, suppress_default=True)
    read_parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Solution, project or folder to read (defaults to the configured workspace path).",
    )
    read_parser.add_argument(
        "--config",
        default=None,
        help="Path to .wsdocs.yml or the folder containing it (defaults to current directory).",
    )
    read_parser.add_argument(
        "--input-folder",
        default=None,
        help="Folder that relative workspace paths resolve against.",
    )
    read_parser.add_argument(
        "--ext",
        action="append",
        default=[],
        metavar="EXT",
        help="Only read files with this extension (repeatable).",
    )
    read_parser.add_argument(
        "--project",
        action="append",
        default=[],
        metavar="NAME",
        help="Only read this project (repeatable).",
    )
    read_parser.add_argument(
        "--exclude-project",
        action="append",
        default=[],
        metavar="NAME",
        help="Skip this project (repeatable).",
    )
    read_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Maximum number of worker threads.",
    )
    read_parser.add_argument(
        "--json",
        action="store_true",
        help="Print document metadata as JSON instead of relative paths.",
    )

    return parser


def _run_read(args: argparse.Namespace) -> List[Document]:
    logger = get_logger("cli")
    config = load_config(Path(args.config) if args.config else Path.cwd())

    if args.input_folder:
        config.input_folder = Path(args.input_folder).expanduser().resolve()
    if args.path:
        config.workspace.path = args.path
        resolved = resolve_path(str(config.input_folder), args.path)
        if not Path(resolved).exists():
            raise FileNotFoundError(f"Workspace path not found: {args.path}")
    elif not config.workspace.path:
        config.workspace.path = "."
    if args.workers is not None:
        config.max_workers = args.workers

    config.workspace.extensions.extend(args.ext)
    config.workspace.projects.extend(args.project)
    config.workspace.exclude_projects.extend(args.exclude_project)

    reader = build_reader(config)
    context = build_context(config)
    logger.info("Reading workspace %s", config.workspace.path)
    documents = reader.execute([Document.empty()], context)
    logger.debug("Workspace produced %d documents", len(documents))
    return documents


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for wsdocs commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "read":
        try:
            documents = _run_read(args)
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except (ConfigError, WorkspaceLoadError, OSError, ValueError) as exc:
            parser.exit(1, f"wsdocs read failed: {exc}\nRun with --verbose for more details.\n")
        except ExceptionGroup as group:
            details = "".join(f"  {exc}\n" for exc in group.exceptions)
            parser.exit(1, f"wsdocs read failed: {group.message}\n{details}")

        documents.sort(key=lambda document: document.get(RELATIVE_FILE_PATH, ""))
        try:
            if args.json:
                print(json.dumps([document.metadata for document in documents], indent=2))
            else:
                for document in documents:
                    print(document.get(RELATIVE_FILE_PATH))
        finally:
            for document in documents:
                document.close()
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])

"""Command line entry point for repository analysis."""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Sequence

import yaml

from .analyzer import AnalysisError, analyze_repository
from .output import write_to_file
from .types import AnalysisOptions, AnalysisResult

VERSION = "dev"
FORMATS = ("yaml", "json")

_DESCRIPTION = (
    "A CLI tool that analyzes local repositories to detect languages, frameworks, "
    "version requirements, and external dependencies across single projects and "
    "monorepos."
)


class _UsageError(Exception):
    """Raised for a malformed command line."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise _UsageError(message)


class _IndentedDumper(yaml.SafeDumper):
    """Dumper that indents block sequences under their parent key."""

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:
        super().increase_indent(flow, False)


def _plain_number(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _normalise(document: dict[str, Any]) -> dict[str, Any]:
    """Sort map-valued fields by key and print whole floats without a fraction."""
    for component in document["components"]:
        component["language_stats"] = {
            key: _plain_number(component["language_stats"][key])
            for key in sorted(component["language_stats"])
        }
        component["version_requirements"] = {
            key: component["version_requirements"][key]
            for key in sorted(component["version_requirements"])
        }
    return document


def render_result(result: AnalysisResult, fmt: str) -> str:
    """Serialise an analysis result as YAML or JSON text."""
    if fmt not in FORMATS:
        raise ValueError(f"unsupported format: {fmt}")
    document = _normalise(result.to_dict())
    if fmt == "json":
        return json.dumps(document, indent=2, ensure_ascii=False)
    return yaml.dump(
        document,
        Dumper=_IndentedDumper,
        sort_keys=False,
        indent=4,
        allow_unicode=True,
        default_flow_style=False,
    )


def _build_parser() -> _Parser:
    parser = _Parser(
        prog="analyze-repo",
        description=_DESCRIPTION,
        epilog='Use "analyze-repo version" to print the version number.',
    )
    parser.add_argument("path", nargs="?", default=".", help="repository to analyse")
    parser.add_argument("--format", default="yaml", help="Output format (yaml|json)")
    parser.add_argument(
        "--output", default="", help="Output file path (default: stdout)"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable verbose logging"
    )
    parser.add_argument(
        "--component", default="", help="Analyze specific component only"
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Exclude patterns (glob format), comma separated or repeated",
    )
    return parser


def _split_excludes(values: Sequence[str]) -> list[str]:
    return [item for value in values for item in value.split(",") if item != ""]


def _run(args: argparse.Namespace) -> None:
    abs_path = os.path.abspath(args.path)
    options = AnalysisOptions(
        format=args.format,
        output=args.output,
        verbose=args.verbose,
        component=args.component,
        exclude=_split_excludes(args.exclude),
    )

    if options.verbose:
        print(f"Analyzing repository at: {abs_path}", file=sys.stderr)

    try:
        result = analyze_repository(abs_path, options)
    except AnalysisError as exc:
        raise RuntimeError(f"analysis failed: {exc}") from exc

    text = render_result(result, options.format)

    if options.output:
        write_to_file(options.output, text)
        return
    sys.stdout.write(text)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line tool and return its exit status."""
    arguments = list(sys.argv[1:] if argv is None else argv)

    if arguments and arguments[0] == "version":
        print(f"replyzer version {VERSION}")
        return 0

    parser = _build_parser()
    try:
        args = parser.parse_args(arguments)
    except _UsageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0

    try:
        _run(args)
    except (RuntimeError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
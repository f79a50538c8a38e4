"""CLI entrypoints for srcxref commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, XrefConfig, load_config
from .errors import XrefError
from .logging import configure_logging
from .scanner import prune_source_dirs
from .symbols import SymbolTable
from .xref import XRef, source_suffixes


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


def _add_source_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project root holding .srcxref.yml (defaults to current directory).",
    )
    parser.add_argument(
        "-s",
        "--source-dir",
        action="append",
        dest="source_dirs",
        default=None,
        help="Source root to cross-reference; repeat for several roots.",
    )
    parser.add_argument(
        "--include",
        action="append",
        dest="includes",
        default=None,
        help="Ant-style include pattern, for example **/*.java.",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        dest="excludes",
        default=None,
        help="Ant-style exclude pattern.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="srcxref",
        description="Generate cross-referenced HTML views of source trees.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Write highlighted, linked pages and the navigation index.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_source_options(generate_parser)
    generate_parser.add_argument(
        "-d",
        "--destination",
        type=Path,
        default=None,
        help="Output directory (defaults to target/xref below the project root).",
    )
    generate_parser.add_argument(
        "--javadoc-version",
        default=None,
        help="Pick the index templates for this javadoc version instead of detecting it.",
    )
    generate_parser.add_argument(
        "--template-dir",
        type=Path,
        default=None,
        help="Directory with custom index templates.",
    )

    scan_parser = subparsers.add_parser(
        "scan",
        help="List the packages and types found in the source roots.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_source_options(scan_parser)

    return parser


def _apply_overrides(config: XrefConfig, args: argparse.Namespace) -> XrefConfig:
    cwd = Path.cwd()
    if args.source_dirs:
        config.source_dirs = [_absolute(cwd, value) for value in args.source_dirs]
    if args.includes:
        config.includes = list(args.includes)
    if args.excludes:
        config.excludes = list(args.excludes)
    if getattr(args, "destination", None) is not None:
        config.destination = _absolute(cwd, args.destination)
    if getattr(args, "javadoc_version", None):
        config.javadoc.version = args.javadoc_version
    if getattr(args, "template_dir", None) is not None:
        config.template_dir = _absolute(cwd, args.template_dir)
    return config


def _absolute(base: Path, value: str | Path) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else base / path


def _scan(config: XrefConfig) -> SymbolTable:
    table = SymbolTable(includes=config.includes or None, excludes=config.excludes)
    suffixes = source_suffixes(config, table.cache.languages)
    for root in prune_source_dirs(config.source_roots, suffixes):
        table.process(root)
    return table


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for srcxref commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = _apply_overrides(load_config(Path(args.path)), args)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "generate":
        try:
            result = XRef().run(config)
        except XrefError as exc:
            parser.exit(1, f"srcxref generate failed: {exc}\nRun with --verbose for more details.\n")
        if not result.pages:
            print("No sources found; nothing generated")
        else:
            print(f"Cross-reference written to {_relativize(result.destination)} ({len(result.pages)} files)")
    elif args.command == "scan":
        try:
            table = _scan(config)
        except XrefError as exc:
            parser.exit(1, f"srcxref scan failed: {exc}\n")
        for package in table.packages():
            print(package.name or "(default package)")
            for declaration in package:
                print(f"  {declaration.name}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])

"""CLI entrypoints for ntro commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, List, Sequence

from .config import NtroConfig, load_config
from .errors import NtroError
from .logging import configure_logging, get_logger
from .orchestrator import DotenvOutcome, Orchestrator, YamlOutcome
from .watch import Watcher

Outcome = YamlOutcome | DotenvOutcome


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    for flags, help_text in (
        (("-v", "--verbose"), "Increase log verbosity for troubleshooting."),
        (("-q", "--quiet"), "Only report warnings and errors."),
    ):
        kwargs: dict[str, object] = {"action": "store_true", "help": help_text}
        if suppress_default:
            kwargs["default"] = argparse.SUPPRESS
        else:
            kwargs["default"] = False
        parser.add_argument(*flags, **kwargs)


def _add_common_options(parser: argparse.ArgumentParser, *, sources_help: str) -> None:
    parser.add_argument("sources", nargs="*", type=Path, help=sources_help)
    parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=None,
        help="Directory the generated files are written to (defaults to the current directory).",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Regenerate whenever a source file changes.",
    )
    parser.add_argument(
        "--prettify",
        action="store_true",
        default=None,
        help="Format generated files with prettier.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ntro",
        description="Generate TypeScript types from configuration files.",
    )
    _add_logging_options(parser)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .ntro.yml or its directory (defaults to the current directory).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file (useful with --watch).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    yaml_parser = subparsers.add_parser(
        "yaml",
        help="Generate TypeScript types from YAML files.",
    )
    _add_logging_options(yaml_parser, suppress_default=True)
    _add_common_options(yaml_parser, sources_help="YAML files to generate declarations for.")

    dotenv_parser = subparsers.add_parser(
        "dotenv",
        help="Generate process.env types from dotenv files.",
    )
    _add_logging_options(dotenv_parser, suppress_default=True)
    _add_common_options(dotenv_parser, sources_help="Dotenv files to merge, in priority order.")
    dotenv_parser.add_argument(
        "--zod",
        action="store_true",
        default=None,
        help="Also generate a zod-validated runtime env module.",
    )
    dotenv_parser.add_argument(
        "--tsconfig-path",
        action="store_true",
        default=None,
        help="Register the generated env module as the $env path in tsconfig.json (needs --zod).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for ntro commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=args.log_file
    )
    logger = get_logger("cli")

    try:
        config = load_config(args.config or Path.cwd())
    except NtroError as exc:
        parser.exit(1, f"{exc}\n")

    orchestrator = Orchestrator(prettify=bool(args.prettify) or config.prettify)
    output_dir = args.output_dir or config.output_dir or Path(".")

    if args.command == "yaml":
        sources = list(args.sources) or config.yaml.sources
        if not sources:
            parser.error("yaml: no source files given")

        def run() -> Outcome:
            return orchestrator.run_yaml(sources, output_dir)

    elif args.command == "dotenv":
        sources = list(args.sources) or config.dotenv.sources
        if not sources:
            parser.error("dotenv: no source files given")
        zod = bool(args.zod) or config.dotenv.zod
        register_path = bool(args.tsconfig_path) or config.dotenv.tsconfig_path
        if register_path and not zod:
            parser.error("--tsconfig-path requires --zod")
        tsconfig = (config.dotenv.tsconfig_file or Path("tsconfig.json")) if register_path else None

        def run() -> Outcome:
            return orchestrator.run_dotenv(
                sources,
                output_dir,
                zod=zod,
                tsconfig=tsconfig,
                declaration_file=config.dotenv.declaration_file,
                module_file=config.dotenv.module_file,
            )

    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")

    if args.watch:
        _run_logged(run)
        _watch(sources, run, config)
        return

    try:
        outcome = run()
    except NtroError as exc:
        parser.exit(1, f"ntro {args.command} failed: {exc}\n")
    if not outcome.ok:
        parser.exit(1, f"ntro {args.command} failed for {len(outcome.failures)} source(s)\n")
    logger.debug("ntro %s finished", args.command)


def _run_logged(run: Callable[[], Outcome]) -> None:
    try:
        run()
    except NtroError as exc:
        get_logger("cli").error("%s", exc)


def _watch(sources: Sequence[Path], run: Callable[[], Outcome], config: NtroConfig) -> None:
    paths: List[Path] = list(dict.fromkeys(sources))
    watcher = Watcher(
        paths,
        run,
        poll_interval=config.watch.poll_interval,
        debounce=config.watch.debounce,
    )
    try:
        watcher.run()
    except KeyboardInterrupt:
        get_logger("cli").info("Stopped watching")


if __name__ == "__main__":
    main(sys.argv[1:])

"""CLI entrypoints for compgraph commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .engine import DuplicateFileIdError, analyze_directory
from .export import dump_result
from .logging import configure_logging


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compgraph",
        description="Build the component graph of a UI project and detect structural patterns.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyse a project directory and emit the graph as JSON.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    analyze_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    analyze_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the JSON result to this file instead of stdout.",
    )
    analyze_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .compgraph.yml (defaults to the one in the project root).",
    )
    analyze_parser.add_argument(
        "--rules",
        default=None,
        help="Comma-separated rule names to run (defaults to every registered rule).",
    )
    analyze_parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP analysis service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for compgraph commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(getattr(args, "quiet", False)))

    if args.command == "analyze":
        try:
            config = load_config(args.config if args.config is not None else Path(args.path))
            if args.rules:
                config.rules.enabled = [name.strip() for name in args.rules.split(",") if name.strip()]
            result = analyze_directory(args.path, config=config)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except (ConfigError, DuplicateFileIdError, ValueError) as exc:
            parser.exit(1, f"compgraph analyze failed: {exc}\n")
        text = dump_result(result, args.output)
        if args.output is None:
            print(text)
        else:
            print(f"Wrote {len(result.components)} components and {len(result.patterns)} patterns to {args.output}")
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])

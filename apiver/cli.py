"""CLI entrypoints for apiver commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import load_config
from .errors import ApiverError, ConfigError, SourceUnavailable
from .logging import configure_logging
from .orchestrator import Orchestrator
from .output import format_result, write_records


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Only log warnings and errors.",
    )


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    _add_logging_options(parser, suppress_default=True)
    parser.add_argument(
        "--config",
        default=argparse.SUPPRESS,
        help="Path to .apiver.yml or the directory containing it (defaults to cwd).",
    )
    parser.add_argument(
        "--language",
        default=None,
        help="Source language to extract signatures from (go, python).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apiver",
        description="Derive semantic versions from changes to a package's public interface.",
    )
    _add_logging_options(parser)
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .apiver.yml or the directory containing it (defaults to cwd).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    history_parser = subparsers.add_parser(
        "history",
        help="Version every revision of a repository's history.",
    )
    _add_common_options(history_parser)
    history_parser.add_argument(
        "repository",
        help="Repository to clone, e.g. https://github.com/org/project or a local path.",
    )
    history_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write one JSON record per revision to this file.",
    )
    history_parser.add_argument(
        "--branch",
        default=None,
        help="Branch whose first-parent history is walked (defaults to the clone's HEAD).",
    )

    signature_parser = subparsers.add_parser(
        "signature",
        help="Print the exported signature of a working tree.",
    )
    _add_common_options(signature_parser)
    signature_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to extract from (defaults to current directory).",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_logging_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default=None, help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to bind.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for apiver commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        measure=config.measure_performance or None,
    )

    if args.command == "history":
        orchestrator = Orchestrator(config)
        try:
            outcome = orchestrator.run_history(
                args.repository,
                branch=args.branch,
                language=args.language,
                on_result=lambda result: print(format_result(result)),
            )
        except ValueError as exc:
            parser.exit(2, f"{exc}\n")
        except SourceUnavailable as exc:
            parser.exit(1, f"apiver history failed: {exc}\n")
        except ApiverError as exc:  # pragma: no cover
            parser.exit(1, f"apiver history failed: {exc}\nRun with --verbose for more details.\n")

        output = Path(args.output) if args.output else config.output
        if output is not None:
            count = write_records(outcome.results, output)
            print(f"Wrote {count} records to {output}")
        if not outcome.ok:
            parser.exit(1, f"apiver history aborted: {outcome.failure}\n")
        if outcome.version is not None:
            print(f"Version {outcome.version}")
    elif args.command == "signature":
        orchestrator = Orchestrator(config)
        try:
            signatures = orchestrator.run_signature(args.path, language=args.language)
        except (FileNotFoundError, ValueError) as exc:
            parser.exit(2, f"{exc}\n")
        except ApiverError as exc:
            parser.exit(1, f"apiver signature failed: {exc}\n")
        payload = {name: signatures[name].to_dict() for name in sorted(signatures)}
        print(json.dumps(payload, indent=2))
    elif args.command == "serve":
        from .service import run_service

        run_service(
            host=args.host or config.service.host,
            port=args.port or config.service.port,
            config=config,
        )
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])

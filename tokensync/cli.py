"""CLI entrypoints for tokensync commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .analytics.export import EXPORT_FORMATS, render
from .loader import TokenStructureError
from .logging import configure_logging
from .orchestrator import Orchestrator
from .validators import TokenValidationError
from .writer import write_if_changed


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


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tokensync",
        description="Generate platform-specific design token files and analyze token usage.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser(
        "sync",
        help="Regenerate every configured output from the token document.",
    )
    _add_verbose_option(sync_parser, suppress_default=True)
    _add_path_argument(sync_parser)
    sync_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report which files would change without writing them.",
    )
    sync_parser.add_argument(
        "--force",
        action="store_true",
        help="Generate even when validation reports errors or nothing changed.",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Check the token document for structural and value problems.",
    )
    _add_verbose_option(validate_parser, suppress_default=True)
    _add_path_argument(validate_parser)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Scan source files for token usage and report unused tokens.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_path_argument(analyze_parser)
    analyze_parser.add_argument(
        "--format",
        choices=EXPORT_FORMATS,
        default=None,
        help="Emit the full report in this format instead of a summary.",
    )
    analyze_parser.add_argument(
        "--output",
        default=None,
        help="Write the report to this file (requires --format; defaults to stdout).",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for tokensync commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    orchestrator = Orchestrator()

    if args.command == "sync":
        _run_sync(parser, orchestrator, args)
    elif args.command == "validate":
        _run_validate(parser, orchestrator, args)
    elif args.command == "analyze":
        _run_analyze(parser, orchestrator, args)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_sync(parser: argparse.ArgumentParser, orchestrator: Orchestrator, args: argparse.Namespace) -> None:
    dry_run = bool(getattr(args, "dry_run", False))
    try:
        outcome = orchestrator.run_sync(
            args.path,
            dry_run=dry_run,
            force=bool(getattr(args, "force", False)),
        )
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")
    except TokenValidationError as exc:
        lines = [f"  - {error}" for error in exc.result.errors]
        parser.exit(1, "Token validation failed:\n" + "\n".join(lines) + "\nUse --force to sync anyway.\n")
    except TokenStructureError as exc:
        lines = [f"  - {message}" for message in exc.messages]
        parser.exit(1, "Invalid token document:\n" + "\n".join(lines) + "\n")
    except RuntimeError as exc:
        parser.exit(1, f"tokensync sync failed: {exc}\nRun with --verbose for more details.\n")

    if outcome.skipped:
        print("Design tokens already up to date")
        return
    for warning in outcome.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    verb = "Would update" if dry_run else "Updated"
    for artifact in outcome.artifacts:
        status = verb if artifact.changed else "Unchanged"
        print(f"{status} {_relativize(Path(artifact.path))} ({artifact.name})")
    if outcome.failures:
        details = "\n".join(f"  - {name}: {reason}" for name, reason in sorted(outcome.failures.items()))
        parser.exit(1, f"Some generators failed:\n{details}\n")


def _run_validate(parser: argparse.ArgumentParser, orchestrator: Orchestrator, args: argparse.Namespace) -> None:
    try:
        result = orchestrator.run_validate(args.path)
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")
    except TokenStructureError as exc:
        lines = [f"  - {message}" for message in exc.messages]
        parser.exit(1, "Invalid token document:\n" + "\n".join(lines) + "\n")
    except RuntimeError as exc:
        parser.exit(1, f"tokensync validate failed: {exc}\n")

    for warning in result.warnings:
        print(f"warning: {warning}")
    for error in result.errors:
        print(f"error: {error}")
    summary = result.summary
    print(
        f"{summary.get('tokens', 0)} token(s) in {summary.get('categories', 0)} categories: "
        f"{len(result.errors)} error(s), {len(result.warnings)} warning(s)"
    )
    if not result.is_valid:
        parser.exit(1)


def _run_analyze(parser: argparse.ArgumentParser, orchestrator: Orchestrator, args: argparse.Namespace) -> None:
    if args.output and not args.format:
        parser.error("--output requires --format")
    try:
        report = orchestrator.run_analyze(args.path)
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")
    except TokenStructureError as exc:
        lines = [f"  - {message}" for message in exc.messages]
        parser.exit(1, "Invalid token document:\n" + "\n".join(lines) + "\n")
    except RuntimeError as exc:
        parser.exit(1, f"tokensync analyze failed: {exc}\n")

    if args.format:
        content = render(report, args.format)
        if args.output:
            target = Path(args.output)
            write_if_changed(target, content)
            print(f"Report written to {_relativize(target)}")
        else:
            sys.stdout.write(content)
        return

    summary = report.summary
    print(f"Tokens defined: {summary['total_tokens']}")
    print(f"Used directly: {summary['used_tokens']}")
    print(f"Used indirectly: {summary['indirectly_used_tokens']}")
    print(f"Adoption rate: {summary['adoption_rate']}%")
    print(f"Files scanned: {summary['files_scanned']}")
    for item in report.recommendations:
        print(f"[{item.priority}] {item.message}")
        for detail in item.details:
            print(f"    {detail}")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])

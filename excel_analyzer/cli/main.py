"""
Excel Analyzer CLI
==================
Terminal command surface for running an analysis job end to end.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, TextIO

from excel_analyzer.app.context import AppContext, create_app_context
from excel_analyzer.app.controller import ControllerCallbacks, Job, JobStatus, Notification


ContextFactory = Callable[..., AppContext]


def build_parser() -> argparse.ArgumentParser:
    """Create the root CLI parser."""
    parser = argparse.ArgumentParser(prog="excel-analyzer", description="Excel sales analyzer CLI")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for stderr (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # analyze
    analyze_parser = subparsers.add_parser("analyze", help="Analyze a sales workbook")
    analyze_parser.add_argument("source", help="Path to the .xlsx sales export")
    analyze_parser.add_argument(
        "--output",
        help="Save the report to this file or directory (default: next to the source)",
    )
    analyze_parser.set_defaults(handler=handle_analyze)

    # config
    config_parser = subparsers.add_parser("config", help="Print the effective configuration")
    config_parser.set_defaults(handler=handle_config)

    return parser


def _print(msg: str, out: TextIO) -> None:
    out.write(msg + "\n")
    out.flush()


def _save_picker_for(output: Optional[str]) -> Optional[Callable[[str], Optional[str]]]:
    if not output:
        return None
    target = Path(output).expanduser()

    def pick(default_name: str) -> Optional[str]:
        if target.is_dir():
            return str(target / default_name)
        return str(target)

    return pick


def handle_analyze(args: argparse.Namespace, context_factory: ContextFactory, out: TextIO) -> int:
    """Select the source, run the analysis and optionally save the report."""
    source_path = Path(args.source).expanduser().resolve()
    if not source_path.exists():
        _print(f"error: source file not found: {source_path}", out)
        return 1

    state = {"progress": None}

    def on_change(job: Job) -> None:
        if job.status != JobStatus.ANALYZING or job.progress == state["progress"]:
            return
        state["progress"] = job.progress
        _print(f"[{job.progress.percent:3d}%] {job.progress.label}", out)

    def on_notify(notification: Notification) -> None:
        prefix = "error: " if notification.is_error else ""
        _print(f"{prefix}{notification.message}", out)

    context = context_factory(
        file_picker=lambda: str(source_path),
        save_picker=_save_picker_for(args.output),
        callbacks=ControllerCallbacks(on_change=on_change, on_notify=on_notify),
    )
    controller = context.controller

    try:
        if not controller.select_file():
            _print(f"error: cannot analyze {source_path} (expected an .xlsx workbook)", out)
            return 1

        _print(f"source: {controller.job.file_path}", out)
        if not controller.start_analysis():
            return 1

        report = getattr(context.backend, "analyzed_file_path", None)
        if report is not None:
            _print(f"report: {report}", out)

        if args.output and not controller.save_result():
            return 1
        return 0
    finally:
        context.shutdown()


def handle_config(args: argparse.Namespace, context_factory: ContextFactory, out: TextIO) -> int:
    """Print the configuration the analyzer runs with."""
    context = context_factory()
    try:
        _print(json.dumps(context.config.to_dict(), indent=2), out)
    finally:
        context.shutdown()
    return 0


def main(
    argv: Optional[list[str]] = None,
    context_factory: ContextFactory = create_app_context,
    out: TextIO = sys.stdout,
) -> int:
    """
    CLI entrypoint.

    Args:
        argv: Optional argv override for testing.
        context_factory: Dependency-injection hook for tests.
        out: Output stream.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(file=out)
        return 2

    return int(handler(args, context_factory, out))


if __name__ == "__main__":
    raise SystemExit(main())

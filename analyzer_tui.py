#!/usr/bin/env python3
"""
Excel Analyzer TUI launcher.

Usage:
    python analyzer_tui.py
    python analyzer_tui.py --source /path/to/sales.xlsx
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="excel-analyzer-tui", description="Excel sales analyzer Textual TUI")
    parser.add_argument("--source", type=Path, help="Optional .xlsx workbook to analyze immediately")
    parser.add_argument("--save-dir", type=Path, help="Folder the save dialog starts in")
    parser.add_argument("--data-dir", type=Path, default=Path("data"), help="Data/log directory (default: data)")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log file level (default: INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        from excel_analyzer.tui.app import AnalyzerTUI, LaunchOptions
    except ImportError:
        print("error: Textual is not installed. Run `pip install textual`.", file=sys.stderr)
        return 1

    from excel_analyzer.app.config import AppConfig

    config = AppConfig(data_dir=args.data_dir, log_level=args.log_level)
    logging.basicConfig(
        filename=str(config.log_file),
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    options = LaunchOptions(
        source=args.source.resolve() if args.source else None,
        save_dir=args.save_dir.resolve() if args.save_dir else None,
        config=config,
    )
    app = AnalyzerTUI(options=options)
    app.run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

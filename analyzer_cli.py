#!/usr/bin/env python3
"""
Project-level CLI launcher.

Usage:
    python analyzer_cli.py analyze <source.xlsx> [--output DEST]
"""

from excel_analyzer.cli.main import main


if __name__ == "__main__":
    raise SystemExit(main())

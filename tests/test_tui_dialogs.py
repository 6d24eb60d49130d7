"""
Test TUI File Dialogs
=====================
Script-style tests for the open/save path dialogs.
"""

import asyncio
import sys
import tempfile
from pathlib import Path

from textual.app import App, ComposeResult
from textual.widgets import Input, Static

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from excel_analyzer.tui.screens.file_dialogs import (
    OpenWorkbookDialog,
    SaveReportDialog,
    normalize_path_input,
)


def _test_normalize_path_input() -> None:
    assert normalize_path_input("'~/q3.xlsx'") == "~/q3.xlsx"
    assert normalize_path_input('"/tmp/my\\ file.xlsx"') == "/tmp/my file.xlsx"
    assert normalize_path_input("(/tmp/my sales.xlsx)") == "/tmp/my sales.xlsx"
    assert normalize_path_input("file:///tmp/Q3%20Sales.xlsx") == "/tmp/Q3 Sales.xlsx"
    print("✓ path input normalization")


def _test_validation(tmp_path: Path) -> None:
    workbook = tmp_path / "q3.xlsx"
    workbook.write_text("dummy")
    text_file = tmp_path / "notes.txt"
    text_file.write_text("dummy")

    open_dialog = OpenWorkbookDialog(tree_root=tmp_path)
    assert open_dialog.validate_path(workbook) is None
    assert "not found" in open_dialog.validate_path(tmp_path / "missing.xlsx")
    assert "not a file" in open_dialog.validate_path(tmp_path)
    assert "Unsupported file type" in open_dialog.validate_path(text_file)

    save_dialog = SaveReportDialog(tree_root=tmp_path)
    assert save_dialog.validate_path(tmp_path / "new_report.xlsx") is None
    assert "folder" in save_dialog.validate_path(tmp_path)
    assert ".xlsx" in save_dialog.validate_path(tmp_path / "report.csv")
    print("✓ dialog path validation")


async def _test_dialog_dismiss_async(tmp_path: Path) -> None:
    workbook = tmp_path / "q3.xlsx"
    workbook.write_text("dummy")
    results = []

    class Harness(App[None]):
        def compose(self) -> ComposeResult:
            yield Static("harness")

    app = Harness()
    async with app.run_test() as pilot:
        dialog = OpenWorkbookDialog(tree_root=tmp_path)
        app.push_screen(dialog, results.append)
        await pilot.pause()

        dialog.query_one("#dialog-input", Input).value = str(tmp_path / "missing.xlsx")
        await pilot.press("enter")
        await pilot.pause()
        assert results == []
        assert app.screen is dialog

        dialog.query_one("#dialog-input", Input).value = str(workbook)
        await pilot.press("enter")
        await pilot.pause()
        assert results == [str(workbook.resolve())]

        cancelled = SaveReportDialog(tree_root=tmp_path)
        app.push_screen(cancelled, results.append)
        await pilot.pause()
        await pilot.press("escape")
        await pilot.pause()
        assert results[-1] is None


def _test_dialog_dismiss() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        asyncio.run(_test_dialog_dismiss_async(Path(tmp)))
    print("✓ dialog submit and cancel")


def test_tui_dialogs() -> bool:
    print("\n" + "=" * 50)
    print("TUI DIALOG TEST SUITE")
    print("=" * 50 + "\n")

    _test_normalize_path_input()
    with tempfile.TemporaryDirectory() as tmp:
        _test_validation(Path(tmp))
    _test_dialog_dismiss()

    print("\n" + "=" * 50)
    print("ALL TUI DIALOG TESTS PASSED ✓")
    print("=" * 50 + "\n")
    return True


if __name__ == "__main__":
    success = test_tui_dialogs()
    sys.exit(0 if success else 1)

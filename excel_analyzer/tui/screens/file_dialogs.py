"""
Path dialogs standing in for the native open/save file dialogs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, DirectoryTree, Input, Static

from excel_analyzer.tui.styles import DIALOG_CSS


WORKBOOK_SUFFIXES = {".xlsx"}


def normalize_path_input(raw: str) -> str:
    """Accept quoted paths, file:// URIs and shell-escaped spaces."""
    value = raw.strip()
    if len(value) >= 2 and value.startswith("(") and value.endswith(")"):
        value = value[1:-1]
    value = value.strip().strip("'").strip('"')
    value = value.replace("\\ ", " ")
    if value.startswith("file://"):
        value = unquote(urlparse(value).path)
    return value


class PathDialog(ModalScreen[Optional[str]]):
    """Modal asking for a path; dismisses with the path or None when cancelled."""

    BINDINGS = [
        ("escape", "cancel_dialog", "Cancel"),
    ]

    CSS = DIALOG_CSS

    title_text = "Select a file"
    confirm_label = "OK"

    def __init__(self, initial: str = "", tree_root: Optional[Path] = None) -> None:
        super().__init__()
        self.initial = initial
        self.tree_root = tree_root or Path.home()

    def compose(self) -> ComposeResult:
        with Container(id="dialog-root"):
            yield Static(self.title_text, id="dialog-title")
            yield Input(value=self.initial, placeholder="/path/to/workbook.xlsx", id="dialog-input")
            yield DirectoryTree(str(self.tree_root), id="dialog-tree")
            yield Static("", id="dialog-error")
            with Horizontal(id="dialog-actions"):
                yield Button(self.confirm_label, id="confirm", classes="-primary")
                yield Button("Cancel", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#dialog-input", Input).focus()

    def _set_error(self, message: str) -> None:
        self.query_one("#dialog-error", Static).update(message)

    def validate_path(self, path: Path) -> Optional[str]:
        """Return an error message for ``path`` or None if acceptable."""
        return None

    def _submit(self) -> None:
        raw = self.query_one("#dialog-input", Input).value
        if not raw.strip():
            self._set_error("Please enter a path.")
            return
        path = Path(normalize_path_input(raw)).expanduser().resolve()
        error = self.validate_path(path)
        if error:
            self._set_error(error)
            return
        self.dismiss(str(path))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def on_directory_tree_file_selected(self, event: DirectoryTree.FileSelected) -> None:
        self.query_one("#dialog-input", Input).value = str(event.path)
        self._set_error("")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "confirm":
            self._submit()

    def action_cancel_dialog(self) -> None:
        self.dismiss(None)


class OpenWorkbookDialog(PathDialog):
    """Pick an existing .xlsx sales export."""

    title_text = "Select the raw sales workbook (*.xlsx)"
    confirm_label = "Open"

    def validate_path(self, path: Path) -> Optional[str]:
        if not path.exists():
            return f"Path not found: {path}"
        if not path.is_file():
            return f"Selected path is not a file: {path}"
        if path.suffix.lower() not in WORKBOOK_SUFFIXES:
            return f"Unsupported file type: {path.suffix or '(none)'}. Use an .xlsx workbook."
        return None


class SaveReportDialog(PathDialog):
    """Choose where the analyzed workbook is copied."""

    title_text = "Save analysis result"
    confirm_label = "Save"

    def validate_path(self, path: Path) -> Optional[str]:
        if path.is_dir():
            return f"Selected path is a folder: {path}"
        if path.suffix.lower() not in WORKBOOK_SUFFIXES:
            return "The report must be saved as an .xlsx file."
        return None

    def on_directory_tree_file_selected(self, event: DirectoryTree.FileSelected) -> None:
        # Keep the report file name; only take the folder of the clicked file.
        current = Path(normalize_path_input(self.query_one("#dialog-input", Input).value) or "report.xlsx")
        self.query_one("#dialog-input", Input).value = str(event.path.parent / current.name)
        self._set_error("")

"""
Dashboard screen shell for the analyzer TUI layout.
"""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, ProgressBar, RichLog, Static


class DashboardShell(Container):
    """Main dashboard shell containing actions and status/progress/log panes."""

    def compose(self) -> ComposeResult:
        with Horizontal(id="actions"):
            yield Button("Select file (o)", id="select", classes="-primary")
            yield Button("Analyze (a)", id="analyze", disabled=True)
            yield Button("Save (s)", id="save")
            yield Static("Sales data analysis", classes="label")
        with Horizontal(id="panes"):
            with Vertical(id="status-pane"):
                yield Static("Job", classes="label")
                yield Static("no file selected", id="file-text")
                yield Static("state: idle", id="state-text")
                yield Static("", id="error-text")
            with Vertical(id="progress-pane"):
                yield Static("Progress", classes="label")
                yield ProgressBar(total=100, show_eta=False, id="progress-bar")
                yield Static("0%", id="progress-text")
                yield Static("", id="progress-label")
            with Vertical(id="log-pane"):
                yield Static("Logs", classes="label")
                yield RichLog(id="log-view", wrap=True, highlight=True)

"""
Textual TUI App
===============
Select a sales workbook, run the analysis, watch progress and save the report.

Controller calls run in thread workers. Job changes and notifications arrive
on those threads and are marshalled onto the UI thread before rendering.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from concurrent.futures import Future
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from textual.app import App, ComposeResult
from textual.widgets import Button, Footer, Header, ProgressBar, RichLog, Static

from excel_analyzer.app.config import AppConfig
from excel_analyzer.app.context import AppContext, create_app_context
from excel_analyzer.app.controller import ControllerCallbacks, Job, Notification
from excel_analyzer.app.projection import ViewModel, project
from excel_analyzer.tui.screens.dashboard import DashboardShell
from excel_analyzer.tui.screens.file_dialogs import OpenWorkbookDialog, PathDialog, SaveReportDialog
from excel_analyzer.tui.styles import APP_CSS


logger = logging.getLogger(__name__)


@dataclass
class LaunchOptions:
    source: Optional[Path] = None
    save_dir: Optional[Path] = None
    config: Optional[AppConfig] = None


class AnalyzerTUI(App):
    """Terminal front end for the sales analysis job."""

    CSS = APP_CSS

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("o", "select_file", "Open"),
        ("a", "start_analysis", "Analyze"),
        ("s", "save_result", "Save"),
    ]

    def __init__(
        self,
        options: Optional[LaunchOptions] = None,
        context_factory: Callable[..., AppContext] = create_app_context,
    ):
        super().__init__()
        self.options = options or LaunchOptions()
        self._messages: deque[str] = deque(maxlen=500)
        self._ui_thread_id: Optional[int] = None
        self._pending_dialog: Optional[Future] = None
        self._launch_source: Optional[Path] = self.options.source

        self.context = context_factory(
            file_picker=self._pick_input_file,
            save_picker=self._pick_save_path,
            callbacks=ControllerCallbacks(
                on_change=self._on_job_change,
                on_notify=self._on_notification,
            ),
            config=self.options.config,
        )
        self.controller = self.context.controller

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield DashboardShell(id="root")
        yield Footer()

    def on_mount(self) -> None:
        self._ui_thread_id = threading.get_ident()
        self._render_job(self.controller.job)
        self._log("ready")

        if self._launch_source is not None:
            self._log(f"auto-starting analysis of launch source: {self._launch_source}")
            self.run_worker(self._select_and_analyze, thread=True, group="controller", name="auto-start")

    # ==================== Thread marshalling ====================

    def _on_ui_thread(self) -> bool:
        return self._ui_thread_id is None or threading.get_ident() == self._ui_thread_id

    def _dispatch(self, callback: Callable, *args) -> None:
        if self._on_ui_thread():
            callback(*args)
        else:
            self.call_from_thread(callback, *args)

    def _on_job_change(self, job: Job) -> None:
        self._dispatch(self._render_job, job)

    def _on_notification(self, notification: Notification) -> None:
        self._dispatch(self._show_notification, notification)

    def _ask_path(self, dialog: PathDialog) -> Optional[str]:
        """Show ``dialog`` from a worker thread and block until it is dismissed."""
        result: Future = Future()
        self._pending_dialog = result

        def on_dismiss(value: Optional[str]) -> None:
            if not result.done():
                result.set_result(value)

        self.call_from_thread(self.push_screen, dialog, on_dismiss)
        try:
            return result.result()
        finally:
            self._pending_dialog = None

    def _pick_input_file(self) -> Optional[str]:
        if self._launch_source is not None:
            source, self._launch_source = self._launch_source, None
            return str(source)
        initial = self.controller.job.file_path
        tree_root = Path(initial).parent if initial else Path.home()
        return self._ask_path(OpenWorkbookDialog(initial=initial, tree_root=tree_root))

    def _pick_save_path(self, default_name: str) -> Optional[str]:
        save_dir = self.options.save_dir
        if save_dir is None:
            file_path = self.controller.job.file_path
            save_dir = Path(file_path).parent if file_path else Path.home()
        return self._ask_path(SaveReportDialog(initial=str(save_dir / default_name), tree_root=save_dir))

    # ==================== Rendering ====================

    def _log(self, message: str) -> None:
        self._messages.append(message)
        self.query_one("#log-view", RichLog).write(message)

    def _render_job(self, job: Job) -> None:
        self._apply_view(project(job))

    def _apply_view(self, view: ViewModel) -> None:
        self.query_one("#select", Button).disabled = not view.select_enabled

        analyze = self.query_one("#analyze", Button)
        analyze.disabled = not view.analyze_enabled
        analyze.label = f"{view.analyze_label} (a)"

        self.query_one("#save", Button).display = view.save_visible

        progress_pane = self.query_one("#progress-pane")
        progress_pane.display = view.progress_visible
        self.query_one("#progress-bar", ProgressBar).update(progress=view.progress_percent)
        self.query_one("#progress-text", Static).update(view.progress_text)
        self.query_one("#progress-label", Static).update(view.progress_label)

        self.query_one("#file-text", Static).update(view.file_text or "no file selected")
        self.query_one("#state-text", Static).update(view.status_text)
        self.query_one("#error-text", Static).update(view.error_text or "")

    def _show_notification(self, notification: Notification) -> None:
        severity = "error" if notification.is_error else "information"
        self.notify(notification.message, severity=severity)
        self._log(f"[{notification.kind.value}] {notification.message}")

    # ==================== Actions ====================

    def _select_and_analyze(self) -> None:
        if self.controller.select_file():
            self.controller.start_analysis()

    def action_select_file(self) -> None:
        if self.controller.busy:
            self._log("a backend call is in progress; file selection is unavailable")
            return
        self.run_worker(self.controller.select_file, thread=True, group="controller", name="select")

    def action_start_analysis(self) -> None:
        view = project(self.controller.job)
        if not view.analyze_enabled or self.controller.busy:
            self._log("analysis unavailable: select a file first or wait for the running job")
            return
        self.run_worker(self.controller.start_analysis, thread=True, group="controller", name="analyze")

    def action_save_result(self) -> None:
        if not project(self.controller.job).save_visible:
            self._log("nothing to save: run an analysis first")
            return
        self.run_worker(self.controller.save_result, thread=True, group="controller", name="save")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "select":
            self.action_select_file()
        elif event.button.id == "analyze":
            self.action_start_analysis()
        elif event.button.id == "save":
            self.action_save_result()

    def on_unmount(self) -> None:
        pending = self._pending_dialog
        if pending is not None and not pending.done():
            pending.set_result(None)
        self.context.shutdown()

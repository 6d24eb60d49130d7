"""
TUI screens package.
"""

from excel_analyzer.tui.screens.dashboard import DashboardShell
from excel_analyzer.tui.screens.file_dialogs import OpenWorkbookDialog, PathDialog, SaveReportDialog

__all__ = ["DashboardShell", "OpenWorkbookDialog", "PathDialog", "SaveReportDialog"]

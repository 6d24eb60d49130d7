"""
Centralized Textual CSS for the terminal UI.
"""

from excel_analyzer.tui.theme import (
    BLACK,
    CHARCOAL_GRAY,
    CORAL_PINK,
    DARK_GRAY,
    INDIGO,
    OFF_WHITE,
    PINK,
    TEAL_GREEN,
)


APP_CSS = """
Screen {
    background: %(BLACK)s;
    color: %(OFF_WHITE)s;
}
#root {
    height: 1fr;
    layout: vertical;
    background: %(DARK_GRAY)s;
}
#actions {
    height: auto;
    border: heavy %(INDIGO)s;
    margin: 1 1 0 1;
    padding: 1;
    background: %(CHARCOAL_GRAY)s;
}
#panes {
    height: 1fr;
    margin: 0 1 1 1;
}
#status-pane, #progress-pane, #log-pane {
    border: solid %(INDIGO)s;
    background: %(CHARCOAL_GRAY)s;
    padding: 1;
    margin-right: 1;
}
#status-pane {
    width: 44;
}
#progress-pane {
    width: 32;
}
#log-pane {
    margin-right: 0;
    width: 1fr;
}
#file-text {
    color: %(OFF_WHITE)s;
    height: auto;
}
#progress-text, #progress-label, #state-text {
    color: %(TEAL_GREEN)s;
}
#error-text {
    color: %(CORAL_PINK)s;
    height: auto;
}
.label {
    color: %(PINK)s;
    text-style: bold;
}
Button {
    background: %(BLACK)s;
    color: %(OFF_WHITE)s;
    border: solid %(INDIGO)s;
    margin-right: 1;
}
Button.-primary {
    color: %(BLACK)s;
    background: %(INDIGO)s;
}
Button#save {
    border: solid %(PINK)s;
    color: %(PINK)s;
}
""" % {
    "BLACK": BLACK,
    "DARK_GRAY": DARK_GRAY,
    "CHARCOAL_GRAY": CHARCOAL_GRAY,
    "INDIGO": INDIGO,
    "PINK": PINK,
    "TEAL_GREEN": TEAL_GREEN,
    "CORAL_PINK": CORAL_PINK,
    "OFF_WHITE": OFF_WHITE,
}


DIALOG_CSS = """
PathDialog {
    align: center middle;
    background: %(BLACK)s;
}
#dialog-root {
    width: 90;
    height: 80%%;
    border: heavy %(INDIGO)s;
    background: %(CHARCOAL_GRAY)s;
    padding: 1 2;
    layout: vertical;
}
#dialog-title {
    color: %(PINK)s;
    text-style: bold;
    margin-bottom: 1;
}
#dialog-tree {
    height: 1fr;
    border: round %(INDIGO)s;
    margin: 1 0;
}
#dialog-error {
    color: %(CORAL_PINK)s;
    height: 2;
}
#dialog-actions {
    dock: bottom;
    height: auto;
}
Button {
    margin-right: 1;
    color: %(OFF_WHITE)s;
    border: solid %(INDIGO)s;
    background: %(BLACK)s;
}
Button.-primary {
    color: %(BLACK)s;
    background: %(INDIGO)s;
}
""" % {
    "BLACK": BLACK,
    "CHARCOAL_GRAY": CHARCOAL_GRAY,
    "CORAL_PINK": CORAL_PINK,
    "INDIGO": INDIGO,
    "OFF_WHITE": OFF_WHITE,
    "PINK": PINK,
}

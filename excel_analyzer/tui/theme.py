"""
Terminal palette shared by the Textual screens.
"""

BLACK = "#000000"
DARK_GRAY = "#111318"
CHARCOAL_GRAY = "#1A1D22"
INDIGO = "#6366F1"
PINK = "#EC4899"
TEAL_GREEN = "#46C59E"
CORAL_PINK = "#F26D6D"
OFF_WHITE = "#F2F2F2"

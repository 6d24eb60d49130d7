"""
Analysis Backend Interface
==========================
Contract every analysis backend must honor for the job controller.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class AnalysisBackend(Protocol):
    """
    Remote-call surface used by the job controller.
    
    While ``analyze_excel`` runs, the backend publishes ``progress``
    payloads (``{"percent": 0..100, "label": str}``) and may publish an
    ``error`` payload (``{"message": str}``) before raising.
    """
    
    def open_file_dialog(self) -> Optional[str]:
        """Ask the user for an input workbook; empty/None means cancelled."""
        ...
    
    def analyze_excel(self, file_path: str) -> None:
        """Analyze ``file_path``; raises on failure."""
        ...
    
    def save_excel(self) -> Optional[str]:
        """Save the latest analysis result; returns the destination or None if cancelled."""
        ...

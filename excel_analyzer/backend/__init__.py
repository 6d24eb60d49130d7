"""
Backend Module
==============
Analysis backend contract and the local openpyxl-based implementation.

Key Components:
    - AnalysisBackend: Protocol the job controller calls
    - LocalAnalysisBackend: In-process backend publishing on the EventBus
    - SalesAnalyzer: Spreadsheet statistics engine
"""

from .base import AnalysisBackend
from .engine import SaleRecord, SalesAnalyzer, read_sales_records
from .local import LocalAnalysisBackend

__all__ = [
    "AnalysisBackend",
    "LocalAnalysisBackend",
    "SalesAnalyzer",
    "SaleRecord",
    "read_sales_records",
]

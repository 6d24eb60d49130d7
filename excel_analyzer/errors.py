"""
Error Handling Module
=====================
Custom exceptions and error codes for the Excel Sales Analyzer.
Provides consistent error codes and messages for backend failures.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional
from pathlib import Path


class ErrorCode(Enum):
    """Error codes for the analyzer."""
    # Workbook input errors (E001-E099)
    E001 = "Workbook could not be read"
    E002 = "Workbook has no sheets"
    E003 = "Row could not be parsed"
    E004 = "Insufficient data"
    E005 = "No sale records"

    # Result errors (E100-E199)
    E100 = "No analysis result available"
    E101 = "Saving analysis result failed"

    # Platform errors (E200-E299)
    E200 = "File dialog failed"


@dataclass
class AnalyzerError(Exception):
    """Base exception for the analyzer with error codes."""
    code: ErrorCode
    message: str
    details: Optional[str] = None
    file_path: Optional[Path] = None

    def __str__(self) -> str:
        base = f"[{self.code.name}] {self.code.value}: {self.message}"
        if self.details:
            base += f" ({self.details})"
        if self.file_path:
            base += f" - File: {self.file_path}"
        return base


class WorkbookReadError(AnalyzerError):
    """Error opening or loading the input workbook."""
    def __init__(self, message: str, details: str = None, file_path: Path = None):
        super().__init__(
            code=ErrorCode.E001,
            message=message,
            details=details,
            file_path=file_path
        )


class EmptyWorkbookError(AnalyzerError):
    """Error when the workbook contains no worksheets."""
    def __init__(self, file_path: Path = None):
        super().__init__(
            code=ErrorCode.E002,
            message="no sheets found in the workbook",
            file_path=file_path
        )


class RowParseError(AnalyzerError):
    """Error parsing a data row of the input sheet."""
    def __init__(self, row_number: int, column: str, value: object):
        super().__init__(
            code=ErrorCode.E003,
            message=f"cannot parse {column} in row {row_number}",
            details=repr(value)
        )
        self.row_number = row_number


class InsufficientDataError(AnalyzerError):
    """
    Error when the sheet covers fewer days than the analysis needs.

    This is the expected failure users can act on, so ``str()`` returns
    the bare message instead of the coded form.
    """
    def __init__(self, message: str, days: int = 0):
        super().__init__(
            code=ErrorCode.E004,
            message=message
        )
        self.days = days

    def __str__(self) -> str:
        return self.message


class NoSaleRecordsError(AnalyzerError):
    """Error when the input sheet holds no data rows at all."""
    def __init__(self):
        super().__init__(
            code=ErrorCode.E005,
            message="the sheet contains no sale records"
        )


class NoAnalysisResultError(AnalyzerError):
    """Error when saving is requested before any successful analysis."""
    def __init__(self):
        super().__init__(
            code=ErrorCode.E100,
            message="no analyzed workbook is available to save"
        )


class SaveFailedError(AnalyzerError):
    """Error copying the analyzed workbook to its destination."""
    def __init__(self, message: str, details: str = None, file_path: Path = None):
        super().__init__(
            code=ErrorCode.E101,
            message=message,
            details=details,
            file_path=file_path
        )


class DialogError(AnalyzerError):
    """Error raised by the open/save file dialog collaborator."""
    def __init__(self, message: str, details: str = None):
        super().__init__(
            code=ErrorCode.E200,
            message=message,
            details=details
        )

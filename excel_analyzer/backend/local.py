"""
Local Analysis Backend
======================
In-process implementation of the analysis backend.

Runs the sales engine on the calling thread and pushes ``progress`` and
``error`` events on the injected EventBus while it works. The open/save
dialogs are delegated to picker callables supplied by the presentation layer.
"""

import logging
import shutil
from pathlib import Path
from typing import Callable, Optional

from excel_analyzer.app.config import AppConfig
from excel_analyzer.app.events import (
    EventBus,
    EventType,
    make_error_payload,
    make_progress_payload,
)
from excel_analyzer.backend.engine import SalesAnalyzer
from excel_analyzer.errors import (
    DialogError,
    InsufficientDataError,
    NoAnalysisResultError,
    SaveFailedError,
)


logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {".xlsx"}

FilePicker = Callable[[], Optional[str]]
SavePicker = Callable[[str], Optional[str]]


def _no_save_picker(default_name: str) -> Optional[str]:
    return None


class LocalAnalysisBackend:
    """
    Analysis backend running in the client process.
    
    Example:
        bus = EventBus()
        backend = LocalAnalysisBackend(
            bus,
            file_picker=lambda: "/data/q3.xlsx",
            save_picker=lambda name: f"/exports/{name}",
        )
        backend.analyze_excel("/data/q3.xlsx")
        backend.save_excel()
    """
    
    def __init__(
        self,
        bus: EventBus,
        config: Optional[AppConfig] = None,
        file_picker: Optional[FilePicker] = None,
        save_picker: Optional[SavePicker] = None,
        analyzer: Optional[SalesAnalyzer] = None,
    ):
        self.bus = bus
        self.config = config or AppConfig()
        self.file_picker = file_picker or (lambda: None)
        self.save_picker = save_picker or _no_save_picker
        self.analyzer = analyzer or SalesAnalyzer(self.config)
        self.analyzed_file_path: Optional[Path] = None
    
    def output_path_for(self, file_path: Path) -> Path:
        """Path of the report written next to ``file_path``."""
        return file_path.with_name(f"{file_path.stem}{self.config.output_suffix}{file_path.suffix}")
    
    def open_file_dialog(self) -> Optional[str]:
        """
        Ask the picker for an input workbook.
        
        Returns:
            Selected path, or None if the user cancelled
            
        Raises:
            DialogError: If the picker fails or returns a non-xlsx path
        """
        try:
            selected = self.file_picker()
        except Exception as exc:
            raise DialogError("file dialog failed", details=str(exc)) from exc
        
        if not selected:
            return None
        
        path = Path(selected).expanduser()
        if path.suffix.lower() not in SUPPORTED_SUFFIXES:
            suffixes = ", ".join(sorted(SUPPORTED_SUFFIXES))
            raise DialogError(f"unsupported file type {path.suffix or '(none)'}", details=f"expected {suffixes}")
        return str(path)
    
    def analyze_excel(self, file_path: str) -> None:
        """
        Analyze ``file_path`` and remember the report location.
        
        Publishes ``progress`` events as the engine advances. When the sheet
        does not cover enough days an ``error`` event carrying the message is
        published before the exception propagates.
        """
        source = Path(file_path)
        output = self.output_path_for(source)
        logger.info("analyzing %s -> %s", source, output)
        
        def on_progress(percent: int, label: str) -> None:
            self.bus.publish(EventType.PROGRESS, make_progress_payload(percent, label))
        
        try:
            self.analyzer.analyze(source, output, progress=on_progress)
        except InsufficientDataError as exc:
            self.bus.publish(EventType.ERROR, make_error_payload(str(exc)))
            raise
        
        self.analyzed_file_path = output
        logger.info("analysis finished: %s", source)
    
    def save_excel(self) -> Optional[str]:
        """
        Copy the latest report to a location chosen by the save picker.
        
        Returns:
            Destination path, or None if the user cancelled
            
        Raises:
            NoAnalysisResultError: If nothing has been analyzed yet
            DialogError: If the save picker fails
            SaveFailedError: If copying fails
        """
        if self.analyzed_file_path is None:
            raise NoAnalysisResultError()
        
        try:
            destination = self.save_picker(self.analyzed_file_path.name)
        except Exception as exc:
            raise DialogError("save dialog failed", details=str(exc)) from exc
        
        if not destination:
            logger.info("save cancelled")
            return None
        
        target = Path(destination).expanduser()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self.analyzed_file_path, target)
        except OSError as exc:
            raise SaveFailedError("copying the analyzed workbook failed", details=str(exc), file_path=target) from exc
        
        logger.info("report saved to %s", target)
        return str(target)

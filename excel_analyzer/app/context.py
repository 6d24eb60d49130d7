"""
Application Context
===================
Owns the per-process EventBus and wires it into the backend and controller.
"""

from dataclasses import dataclass
from typing import Optional

from excel_analyzer.app.config import AppConfig
from excel_analyzer.app.controller import ControllerCallbacks, JobController
from excel_analyzer.app.events import EventBus
from excel_analyzer.backend.base import AnalysisBackend
from excel_analyzer.backend.local import FilePicker, LocalAnalysisBackend, SavePicker


@dataclass
class AppContext:
    """Objects that live for the whole application run."""
    config: AppConfig
    bus: EventBus
    backend: AnalysisBackend
    controller: JobController
    
    def shutdown(self) -> None:
        """Release subscriptions and detach every bus handler."""
        self.controller.cleanup()
        self.bus.clear()


def create_app_context(
    file_picker: Optional[FilePicker] = None,
    save_picker: Optional[SavePicker] = None,
    callbacks: Optional[ControllerCallbacks] = None,
    config: Optional[AppConfig] = None,
    backend: Optional[AnalysisBackend] = None,
) -> AppContext:
    """
    Build the application context.
    
    Args:
        file_picker: Callable returning the input path (None = cancelled)
        save_picker: Callable mapping the default file name to a destination
        callbacks: Controller change/notification callbacks
        config: Application configuration
        backend: Backend override; defaults to LocalAnalysisBackend on the new bus
        
    Returns:
        AppContext with a fresh EventBus
    """
    config = config or AppConfig()
    bus = EventBus()
    if backend is None:
        backend = LocalAnalysisBackend(
            bus,
            config,
            file_picker=file_picker,
            save_picker=save_picker,
        )
    controller = JobController(backend=backend, bus=bus, callbacks=callbacks)
    return AppContext(config=config, bus=bus, backend=backend, controller=controller)

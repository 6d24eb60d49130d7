"""
Job Controller
==============
Central controller for the analysis job lifecycle.

Owns the single in-flight job, issues the backend calls, and scopes the
EventBus subscriptions for ``progress``/``error`` to one analysis run.
All job mutation happens here, under one lock; listeners receive an
immutable ``Job`` snapshot after the lock is released.
"""

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from functools import partial
from typing import Any, Callable, Optional

from excel_analyzer.app.events import (
    EventBus,
    EventType,
    IDLE_PROGRESS,
    INITIAL_PROGRESS,
    ProgressSnapshot,
    Subscription,
    error_message_from_payload,
    progress_from_payload,
)
from excel_analyzer.backend.base import AnalysisBackend


logger = logging.getLogger(__name__)

ANALYSIS_COMPLETE_MESSAGE = "Analysis complete!"
ANALYSIS_FAILED_MESSAGE = "Analysis failed!"
SAVE_COMPLETE_MESSAGE = "Saved successfully!"
SAVE_FAILED_MESSAGE = "Save failed!"


class JobStatus(str, Enum):
    """Analysis job status."""
    IDLE = "idle"
    FILE_SELECTED = "file_selected"
    ANALYZING = "analyzing"
    ANALYZED = "analyzed"
    FAILED = "failed"
    SAVING = "saving"
    SAVED = "saved"


TERMINAL_STATUSES = frozenset({JobStatus.ANALYZED, JobStatus.FAILED, JobStatus.SAVED})


@dataclass(frozen=True)
class Job:
    """
    Snapshot of the analysis job.
    
    ``status`` is the single source of truth for UI gating.
    """
    file_path: str = ""
    status: JobStatus = JobStatus.IDLE
    progress: ProgressSnapshot = IDLE_PROGRESS
    last_error: Optional[str] = None
    
    def is_active(self) -> bool:
        """Check if a backend call is running for this job."""
        return self.status in (JobStatus.ANALYZING, JobStatus.SAVING)
    
    def is_terminal(self) -> bool:
        """Check if no further progress events are expected."""
        return self.status in TERMINAL_STATUSES


class NotificationKind(str, Enum):
    """User-facing notification categories."""
    ANALYSIS_COMPLETE = "analysis_complete"
    ANALYSIS_ERROR = "analysis_error"
    ANALYSIS_FAILED = "analysis_failed"
    SAVE_COMPLETE = "save_complete"
    SAVE_FAILED = "save_failed"


@dataclass(frozen=True)
class Notification:
    """Message for the user-facing notification channel."""
    kind: NotificationKind
    message: str
    level: str = "info"
    
    @property
    def is_error(self) -> bool:
        return self.level == "error"


@dataclass
class ControllerCallbacks:
    """Callbacks for job updates."""
    on_change: Optional[Callable[[Job], None]] = None
    on_notify: Optional[Callable[[Notification], None]] = None


class JobController:
    """
    State machine for one client's analysis job.
    
    Transitions:
        IDLE -> FILE_SELECTED -> ANALYZING -> ANALYZED | FAILED
        ANALYZED -> SAVING -> SAVED | ANALYZED
        FAILED -> ANALYZING (retry) or FILE_SELECTED (new file)
        ANALYZED/SAVED/FAILED -> FILE_SELECTED (new file)
    
    Example:
        bus = EventBus()
        controller = JobController(
            backend=LocalAnalysisBackend(bus, config, file_picker=ask_path),
            bus=bus,
            callbacks=ControllerCallbacks(on_change=render, on_notify=alert),
        )
        controller.select_file()
        controller.start_analysis()   # blocks until the backend call resolves
        controller.save_result()
    """
    
    def __init__(
        self,
        backend: AnalysisBackend,
        bus: EventBus,
        callbacks: Optional[ControllerCallbacks] = None
    ):
        """
        Initialize the controller.
        
        Args:
            backend: Analysis backend issuing the remote calls
            bus: Event bus the backend publishes on
            callbacks: Optional change/notification callbacks
        """
        self.backend = backend
        self.bus = bus
        self.callbacks = callbacks or ControllerCallbacks()
        
        self._job = Job()
        self._lock = threading.Lock()
        
        # Analysis run bookkeeping
        self._run_id = 0
        self._busy = False
        self._error_reported = False
        self._subscriptions: list[Subscription] = []
    
    @property
    def job(self) -> Job:
        """Current job snapshot."""
        with self._lock:
            return self._job
    
    @property
    def busy(self) -> bool:
        """Check if a backend analysis or save call is outstanding."""
        with self._lock:
            return self._busy
    
    # ==================== File Selection ====================
    
    def select_file(self) -> bool:
        """
        Ask the dialog collaborator for an input workbook.
        
        Returns:
            True if a new file was selected. Cancellation, dialog failure
            or a busy controller leave the job unchanged and return False.
        """
        if self.busy:
            logger.info("file selection ignored: a backend call is in progress")
            return False
        
        try:
            file_path = self.backend.open_file_dialog()
        except Exception as exc:
            logger.warning("file selection failed: %s", exc)
            return False
        
        if not file_path:
            logger.debug("file selection cancelled")
            return False
        
        with self._lock:
            if self._busy:
                logger.info("file selection discarded: a backend call started meanwhile")
                return False
            self._job = Job(file_path=str(file_path), status=JobStatus.FILE_SELECTED)
            snapshot = self._job
        
        logger.info("selected file %s", snapshot.file_path)
        self._emit_change(snapshot)
        return True
    
    # ==================== Analysis ====================
    
    def start_analysis(self) -> bool:
        """
        Run the backend analysis for the selected file.
        
        A no-op (returning False) when no file is selected or an analysis is
        already outstanding. Otherwise blocks until the backend call resolves.
        
        Returns:
            True if the job ended in ANALYZED
        """
        with self._lock:
            if not self._job.file_path or self._busy or self._job.status == JobStatus.ANALYZING:
                logger.debug("start_analysis ignored (status=%s)", self._job.status.value)
                return False
            
            self._run_id += 1
            run_id = self._run_id
            self._busy = True
            self._error_reported = False
            self._job = replace(
                self._job,
                status=JobStatus.ANALYZING,
                progress=INITIAL_PROGRESS,
                last_error=None,
            )
            snapshot = self._job
            self._subscriptions = [
                Subscription(
                    EventType.PROGRESS.value,
                    self.bus.subscribe(EventType.PROGRESS, partial(self._on_progress, run_id)),
                ),
                Subscription(
                    EventType.ERROR.value,
                    self.bus.subscribe(EventType.ERROR, partial(self._on_error, run_id)),
                ),
            ]
        
        logger.info("analysis started: run=%d file=%s", run_id, snapshot.file_path)
        self._emit_change(snapshot)
        
        succeeded = False
        failure: Optional[Exception] = None
        try:
            self.backend.analyze_excel(snapshot.file_path)
            succeeded = True
        except Exception as exc:
            failure = exc
            logger.warning("analysis call failed: run=%d error=%s", run_id, exc)
        finally:
            with self._lock:
                self._release_subscriptions()
                self._busy = False
                final, notification = self._finish_analysis(succeeded, failure)
        
        self._emit_change(final)
        if notification is not None:
            self._notify(notification)
        return final.status == JobStatus.ANALYZED
    
    def _finish_analysis(
        self,
        succeeded: bool,
        failure: Optional[Exception]
    ) -> tuple[Job, Optional[Notification]]:
        """Decide the terminal state of a run. Caller holds the lock."""
        if succeeded:
            # The call outcome wins over an error event seen earlier in the run.
            if self._error_reported:
                logger.warning("analysis resolved successfully after an error event; keeping ANALYZED")
            self._job = replace(self._job, status=JobStatus.ANALYZED)
            notification = Notification(NotificationKind.ANALYSIS_COMPLETE, ANALYSIS_COMPLETE_MESSAGE)
            return self._job, notification
        
        self._job = replace(
            self._job,
            status=JobStatus.FAILED,
            last_error=self._job.last_error or ANALYSIS_FAILED_MESSAGE,
        )
        if self._error_reported:
            return self._job, None
        
        if failure is not None:
            logger.debug("generic analysis failure detail: %r", failure)
        notification = Notification(NotificationKind.ANALYSIS_FAILED, ANALYSIS_FAILED_MESSAGE, level="error")
        return self._job, notification
    
    def _on_progress(self, run_id: int, payload: Any) -> None:
        with self._lock:
            if run_id != self._run_id or self._job.status != JobStatus.ANALYZING:
                logger.debug("ignored stale progress event for run %d", run_id)
                return
            try:
                progress = progress_from_payload(payload)
            except ValueError as exc:
                logger.warning("ignored malformed progress event: %s", exc)
                return
            if progress.percent < self._job.progress.percent:
                logger.debug(
                    "progress went backwards: %d -> %d",
                    self._job.progress.percent, progress.percent
                )
            self._job = replace(self._job, progress=progress)
            snapshot = self._job
        
        self._emit_change(snapshot)
    
    def _on_error(self, run_id: int, payload: Any) -> None:
        with self._lock:
            if run_id != self._run_id or self._job.status != JobStatus.ANALYZING:
                logger.debug("ignored stale error event for run %d", run_id)
                return
            message = error_message_from_payload(payload) or ANALYSIS_FAILED_MESSAGE
            self._error_reported = True
            self._job = replace(self._job, status=JobStatus.FAILED, last_error=message)
            self._release_subscriptions()
            snapshot = self._job
        
        logger.info("analysis error event: %s", message)
        self._emit_change(snapshot)
        self._notify(Notification(NotificationKind.ANALYSIS_ERROR, message, level="error"))
    
    def _release_subscriptions(self) -> None:
        """Unsubscribe this run's handlers. Caller holds the lock."""
        for subscription in self._subscriptions:
            self.bus.unsubscribe(subscription.name, subscription.subscription_id)
        self._subscriptions = []
    
    # ==================== Saving ====================
    
    def save_result(self) -> bool:
        """
        Save the analyzed workbook through the backend.
        
        A no-op (returning False) unless the job is ANALYZED. A failed save
        returns the job to ANALYZED so the user can retry.
        
        Returns:
            True if the result was saved
        """
        with self._lock:
            if self._job.status != JobStatus.ANALYZED or self._busy:
                logger.debug("save_result ignored (status=%s)", self._job.status.value)
                return False
            self._busy = True
            self._job = replace(self._job, status=JobStatus.SAVING)
            snapshot = self._job
        
        self._emit_change(snapshot)
        
        succeeded = False
        destination: Optional[str] = None
        failure: Optional[Exception] = None
        try:
            destination = self.backend.save_excel()
            succeeded = True
        except Exception as exc:
            failure = exc
            logger.warning("save failed: %s", exc)
        finally:
            with self._lock:
                self._busy = False
                if succeeded and destination:
                    self._job = replace(self._job, status=JobStatus.SAVED)
                    notification = Notification(
                        NotificationKind.SAVE_COMPLETE,
                        f"{SAVE_COMPLETE_MESSAGE} ({destination})",
                    )
                elif succeeded:
                    # Save dialog cancelled by the user.
                    self._job = replace(self._job, status=JobStatus.ANALYZED)
                    notification = None
                else:
                    self._job = replace(self._job, status=JobStatus.ANALYZED)
                    detail = f": {failure}" if failure is not None else ""
                    notification = Notification(
                        NotificationKind.SAVE_FAILED,
                        f"{SAVE_FAILED_MESSAGE}{detail}",
                        level="error",
                    )
                final = self._job
        
        self._emit_change(final)
        if notification is not None:
            self._notify(notification)
        return final.status == JobStatus.SAVED
    
    # ==================== Callbacks ====================
    
    def _emit_change(self, job: Job) -> None:
        if self.callbacks.on_change is None:
            return
        try:
            self.callbacks.on_change(job)
        except Exception:
            logger.exception("job change callback failed")
    
    def _notify(self, notification: Notification) -> None:
        log = logger.error if notification.is_error else logger.info
        log("notify [%s] %s", notification.kind.value, notification.message)
        if self.callbacks.on_notify is None:
            return
        try:
            self.callbacks.on_notify(notification)
        except Exception:
            logger.exception("notification callback failed")
    
    # ==================== Cleanup ====================
    
    def cleanup(self):
        """
        Release any subscriptions still held.
        
        Call this when shutting down the application.
        """
        with self._lock:
            self._release_subscriptions()

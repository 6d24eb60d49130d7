"""
Application Module
==================
Job lifecycle, event channel and view projection.

Key Components:
    - JobController: Single-job state machine driving the backend
    - EventBus: One-handler-per-name channel for backend push events
    - project: Pure Job -> ViewModel mapping
    - AppConfig: Application configuration
"""

from .config import AppConfig
from .controller import (
    ControllerCallbacks,
    Job,
    JobController,
    JobStatus,
    Notification,
    NotificationKind,
)
from .events import (
    EventBus,
    EventType,
    ProgressSnapshot,
    Subscription,
    make_error_payload,
    make_progress_payload,
)
from .projection import ViewModel, project

__all__ = [
    "AppConfig",
    "ControllerCallbacks",
    "Job",
    "JobController",
    "JobStatus",
    "Notification",
    "NotificationKind",
    "EventBus",
    "EventType",
    "ProgressSnapshot",
    "Subscription",
    "make_error_payload",
    "make_progress_payload",
    "ViewModel",
    "project",
]

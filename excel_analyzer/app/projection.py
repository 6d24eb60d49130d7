"""
UI Projection
=============
Pure mapping from a ``Job`` snapshot to the fields a view renders.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from excel_analyzer.app.controller import Job, JobStatus


STATUS_LABELS = {
    JobStatus.IDLE: "idle",
    JobStatus.FILE_SELECTED: "file selected",
    JobStatus.ANALYZING: "analyzing",
    JobStatus.ANALYZED: "analyzed",
    JobStatus.FAILED: "failed",
    JobStatus.SAVING: "saving",
    JobStatus.SAVED: "saved",
}


@dataclass(frozen=True)
class ViewModel:
    """Renderable state for the analyzer window."""

    select_enabled: bool
    analyze_enabled: bool
    analyze_label: str
    progress_visible: bool
    progress_percent: int
    progress_text: str
    progress_label: str
    save_visible: bool
    file_text: Optional[str]
    status_text: str
    error_text: Optional[str]


def project(job: Job) -> ViewModel:
    """Build the view model for ``job``."""
    analyzing = job.status == JobStatus.ANALYZING
    return ViewModel(
        select_enabled=True,
        analyze_enabled=bool(job.file_path) and not analyzing,
        analyze_label="Analyzing..." if analyzing else "Analyze",
        progress_visible=analyzing,
        progress_percent=job.progress.percent,
        progress_text=f"{job.progress.percent}%",
        progress_label=job.progress.label,
        save_visible=job.status == JobStatus.ANALYZED,
        file_text=f"Selected file: {job.file_path}" if job.file_path else None,
        status_text=f"state: {STATUS_LABELS[job.status]}",
        error_text=job.last_error if job.status == JobStatus.FAILED else None,
    )

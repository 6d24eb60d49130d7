"""
UI Projection Tests
===================
Every job status mapped to the view fields it controls.
"""

import pytest

from excel_analyzer.app.controller import Job, JobStatus
from excel_analyzer.app.events import ProgressSnapshot
from excel_analyzer.app.projection import STATUS_LABELS, project


FILE = "/data/q3.xlsx"


# status, file_path, analyze_enabled, analyze_label, progress_visible, save_visible
PROJECTION_TABLE = [
    (JobStatus.IDLE, "", False, "Analyze", False, False),
    (JobStatus.FILE_SELECTED, FILE, True, "Analyze", False, False),
    (JobStatus.ANALYZING, FILE, False, "Analyzing...", True, False),
    (JobStatus.ANALYZED, FILE, True, "Analyze", False, True),
    (JobStatus.FAILED, FILE, True, "Analyze", False, False),
    (JobStatus.SAVING, FILE, True, "Analyze", False, False),
    (JobStatus.SAVED, FILE, True, "Analyze", False, False),
]


@pytest.mark.parametrize(
    "status,file_path,analyze_enabled,analyze_label,progress_visible,save_visible",
    PROJECTION_TABLE,
)
def test_projection_table(status, file_path, analyze_enabled, analyze_label, progress_visible, save_visible):
    view = project(Job(file_path=file_path, status=status))

    assert view.select_enabled is True
    assert view.analyze_enabled is analyze_enabled
    assert view.analyze_label == analyze_label
    assert view.progress_visible is progress_visible
    assert view.save_visible is save_visible
    assert view.status_text == f"state: {STATUS_LABELS[status]}"


def test_every_status_has_a_label():
    assert set(STATUS_LABELS) == set(JobStatus)


def test_progress_fields():
    job = Job(file_path=FILE, status=JobStatus.ANALYZING, progress=ProgressSnapshot(55, "aggregating"))
    view = project(job)

    assert view.progress_percent == 55
    assert view.progress_text == "55%"
    assert view.progress_label == "aggregating"


def test_file_text():
    assert project(Job()).file_text is None
    assert project(Job(file_path=FILE, status=JobStatus.FILE_SELECTED)).file_text == f"Selected file: {FILE}"


@pytest.mark.parametrize("status", [s for s in JobStatus if s != JobStatus.FAILED])
def test_error_hidden_outside_failed(status):
    job = Job(file_path=FILE, status=status, last_error="corrupt file")
    assert project(job).error_text is None


def test_error_shown_when_failed():
    job = Job(file_path=FILE, status=JobStatus.FAILED, last_error="corrupt file")
    assert project(job).error_text == "corrupt file"


def test_projection_is_pure():
    job = Job(file_path=FILE, status=JobStatus.ANALYZING, progress=ProgressSnapshot(10, "parsing"))
    assert project(job) == project(job)
    assert job == Job(file_path=FILE, status=JobStatus.ANALYZING, progress=ProgressSnapshot(10, "parsing"))

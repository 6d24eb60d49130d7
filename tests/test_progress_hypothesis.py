"""
Property-based tests for progress handling and projection.
"""

from hypothesis import given, settings, strategies as st

from excel_analyzer.app.controller import ControllerCallbacks, Job, JobController, JobStatus
from excel_analyzer.app.events import EventBus, EventType, progress_from_payload
from excel_analyzer.app.projection import project


percents = st.one_of(
    st.integers(min_value=-1000, max_value=1000),
    st.floats(min_value=-1e6, max_value=1e6, allow_nan=False),
)
labels = st.text(max_size=20)


@given(percent=percents, label=labels)
def test_progress_percent_always_clamped(percent, label):
    snapshot = progress_from_payload({"percent": percent, "label": label})
    assert 0 <= snapshot.percent <= 100
    assert snapshot.label == label


@given(status=st.sampled_from(list(JobStatus)), file_path=st.sampled_from(["", "/data/q3.xlsx"]))
def test_projection_invariants(status, file_path):
    view = project(Job(file_path=file_path, status=status))

    assert view.select_enabled
    assert view.progress_visible == (status == JobStatus.ANALYZING)
    assert view.save_visible == (status == JobStatus.ANALYZED)
    if view.analyze_enabled:
        assert file_path and status != JobStatus.ANALYZING


class SequenceBackend:
    """Backend that replays a list of progress payloads during analysis."""

    def __init__(self, bus, payloads):
        self.bus = bus
        self.payloads = payloads

    def open_file_dialog(self):
        return "/data/q3.xlsx"

    def analyze_excel(self, file_path):
        for payload in self.payloads:
            self.bus.publish(EventType.PROGRESS, payload)

    def save_excel(self):
        return None


@settings(max_examples=50)
@given(payloads=st.lists(st.fixed_dictionaries({"percent": percents, "label": labels}), max_size=15))
def test_last_progress_event_wins(payloads):
    bus = EventBus()
    seen = []
    controller = JobController(
        backend=SequenceBackend(bus, payloads),
        bus=bus,
        callbacks=ControllerCallbacks(on_change=seen.append),
    )
    controller.select_file()
    controller.start_analysis()

    job = controller.job
    assert job.status == JobStatus.ANALYZED
    assert bus.subscription_count() == 0
    if payloads:
        assert job.progress == progress_from_payload(payloads[-1])
    assert all(0 <= change.progress.percent <= 100 for change in seen)

"""
Unit tests for intake/jobs/models.py
"""
import pytest
from pydantic import ValidationError

from intake.jobs.models import FileDescriptor, JobRecord, JobStatus, JobView


def test_new_record_starts_uploading():
    job = JobRecord.from_file(FileDescriptor(name="scan.pdf", size_bytes=2048))

    assert job.status == JobStatus.UPLOADING
    assert job.progress == 0
    assert job.attempt == 1
    assert job.extracted_text is None
    assert job.error_message is None
    assert job.completed_at is None


def test_records_get_distinct_ids():
    a = JobRecord(name="a", size_bytes=1)
    b = JobRecord(name="a", size_bytes=1)
    assert a.id != b.id


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "", "size_bytes": 1},
        {"name": "a.pdf", "size_bytes": -1},
        {"name": "a.pdf"},
    ],
)
def test_file_descriptor_rejects_bad_input(payload):
    with pytest.raises(ValidationError):
        FileDescriptor.model_validate(payload)


def test_zero_byte_file_is_accepted():
    assert FileDescriptor(name="empty.txt", size_bytes=0).size_bytes == 0


def test_terminal_statuses():
    assert JobStatus.COMPLETE.is_terminal
    assert JobStatus.ERROR.is_terminal
    assert not JobStatus.UPLOADING.is_terminal
    assert not JobStatus.PROCESSING.is_terminal


def test_view_is_detached_from_record():
    job = JobRecord(name="a.pdf", size_bytes=1)
    view = job.view()

    job.progress = 42.0

    assert view.progress == 0
    assert view.id == job.id


def test_view_rejects_text_without_completion():
    with pytest.raises(ValidationError):
        JobView(name="a", size_bytes=1, status=JobStatus.PROCESSING, extracted_text="x")


def test_view_rejects_error_status_without_message():
    with pytest.raises(ValidationError):
        JobView(name="a", size_bytes=1, status=JobStatus.ERROR)


def test_view_rejects_both_outcomes():
    with pytest.raises(ValidationError):
        JobView(
            name="a",
            size_bytes=1,
            status=JobStatus.COMPLETE,
            extracted_text="x",
            error_message="y",
        )

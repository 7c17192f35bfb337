import pytest
from pydantic import ValidationError
from translation_status_client.models import (
    ClientConfig,
    JobStatus,
    PollAttempt,
    StatusSnapshot,
)


def test_snapshot_from_wire_format():
    snapshot = StatusSnapshot.model_validate(
        {"status": "pending", "progress": 42, "expectedTime": 90000}
    )

    assert snapshot.status == JobStatus.pending
    assert snapshot.progress == 42
    assert snapshot.expected_time == 90000
    assert not snapshot.is_terminal


@pytest.mark.parametrize("status", ["completed", "error"])
def test_terminal_statuses(status):
    assert StatusSnapshot(status=status).is_terminal


@pytest.mark.parametrize("status", ["pending", "queued", "translating", ""])
def test_other_statuses_are_not_terminal(status):
    assert not StatusSnapshot(status=status).is_terminal


def test_non_string_status_is_coerced():
    assert StatusSnapshot.model_validate({"status": 3}).status == "3"
    assert StatusSnapshot(status=JobStatus.completed).status == "completed"


def test_missing_status_is_rejected():
    with pytest.raises(ValidationError):
        StatusSnapshot.model_validate({"progress": 10, "expectedTime": 1000})


@pytest.mark.parametrize(
    "raw,expected",
    [(-5, 0), (150, 100), (None, 0), ("abc", 0), ("55.5", 55.5), (float("nan"), 0)],
)
def test_progress_is_clamped(raw, expected):
    snapshot = StatusSnapshot.model_validate({"status": "pending", "progress": raw})
    assert snapshot.progress == expected


@pytest.mark.parametrize(
    "raw,expected", [(-1000, 0), (None, 0), ("soon", 0), (float("inf"), 0), (500, 500)]
)
def test_expected_time_is_clamped(raw, expected):
    snapshot = StatusSnapshot.model_validate({"status": "pending", "expectedTime": raw})
    assert snapshot.expected_time == expected


def test_missing_numbers_default_to_zero():
    snapshot = StatusSnapshot.model_validate({"status": "pending"})
    assert snapshot.progress == 0
    assert snapshot.expected_time == 0


def test_error_snapshot():
    snapshot = StatusSnapshot.error_snapshot()

    assert snapshot.status == "error"
    assert snapshot.progress == 0
    assert snapshot.expected_time == 0
    assert snapshot.is_terminal


def test_snapshot_is_immutable():
    snapshot = StatusSnapshot(status="pending", progress=10)
    with pytest.raises(ValidationError):
        snapshot.progress = 20


def test_poll_attempt_index_is_non_negative():
    with pytest.raises(ValidationError):
        PollAttempt(attempt_index=-1, snapshot=StatusSnapshot(status="pending"))


def test_client_config_defaults():
    config = ClientConfig()

    assert config.status_path == "/status"
    assert config.timeout is None
    assert config.polling.transition_progress == 60


def test_huge_integers_are_clamped():
    huge = 10**400
    snapshot = StatusSnapshot.model_validate(
        {"status": "pending", "progress": huge, "expectedTime": huge}
    )
    assert snapshot.progress == 100
    assert snapshot.expected_time == 0

    snapshot = StatusSnapshot.model_validate(
        {"status": "pending", "progress": -huge, "expectedTime": -huge}
    )
    assert snapshot.progress == 0
    assert snapshot.expected_time == 0

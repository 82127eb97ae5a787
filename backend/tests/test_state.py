"""Transition table and strict predecessor rules."""

import pytest

from contentflow.orchestrator.state import (
    PIPELINE_ORDER,
    TRANSITIONS,
    EventType,
    JobStatus,
    is_allowed_strict,
    is_terminal,
    normalize_event_type,
    target_status,
)


@pytest.mark.parametrize(
    "event_type, expected",
    [
        (EventType.SCRIPT_GENERATED, JobStatus.TTS_PROCESSING),
        (EventType.TTS_COMPLETED, JobStatus.VIDEO_RENDERING),
        (EventType.VIDEO_RENDERED, JobStatus.UPLOADING),
        (EventType.UPLOAD_COMPLETED, JobStatus.COMPLETED),
        (EventType.FAILED, JobStatus.FAILED),
    ],
)
def test_target_status(event_type, expected):
    assert target_status(event_type) == expected


def test_every_event_type_has_a_transition():
    assert set(TRANSITIONS) == set(EventType)


def test_forward_targets_follow_pipeline_order():
    forward = [
        TRANSITIONS[e]
        for e in (
            EventType.SCRIPT_GENERATED,
            EventType.TTS_COMPLETED,
            EventType.VIDEO_RENDERED,
            EventType.UPLOAD_COMPLETED,
        )
    ]
    positions = [PIPELINE_ORDER.index(s) for s in forward]
    assert positions == sorted(positions)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("script_generated", EventType.SCRIPT_GENERATED),
        ("content.script_generated", EventType.SCRIPT_GENERATED),
        ("content.failed", EventType.FAILED),
        ("upload_completed", EventType.UPLOAD_COMPLETED),
        ("something.unexpected", None),
        ("content.something_new", None),
        ("TTS_COMPLETED", None),
        ("", None),
        (None, None),
    ],
)
def test_normalize_event_type(raw, expected):
    assert normalize_event_type(raw) == expected


def test_terminal_states():
    assert is_terminal(JobStatus.COMPLETED)
    assert is_terminal(JobStatus.FAILED)
    assert not any(is_terminal(s) for s in PIPELINE_ORDER[:-1])


class TestStrictRules:
    def test_expected_predecessors(self):
        assert is_allowed_strict(JobStatus.SCRIPT_GENERATING, JobStatus.TTS_PROCESSING)
        assert is_allowed_strict(JobStatus.PENDING, JobStatus.TTS_PROCESSING)
        assert is_allowed_strict(JobStatus.TTS_PROCESSING, JobStatus.VIDEO_RENDERING)
        assert is_allowed_strict(JobStatus.VIDEO_RENDERING, JobStatus.UPLOADING)
        assert is_allowed_strict(JobStatus.UPLOADING, JobStatus.COMPLETED)

    def test_skipping_stages_is_rejected(self):
        assert not is_allowed_strict(JobStatus.SCRIPT_GENERATING, JobStatus.COMPLETED)
        assert not is_allowed_strict(JobStatus.TTS_PROCESSING, JobStatus.UPLOADING)

    def test_rewinding_is_rejected(self):
        assert not is_allowed_strict(JobStatus.UPLOADING, JobStatus.TTS_PROCESSING)

    def test_redelivery_reasserts_current_status(self):
        for status in JobStatus:
            assert is_allowed_strict(status, status)

    @pytest.mark.parametrize("current", PIPELINE_ORDER[:-1])
    def test_failed_from_any_non_terminal(self, current):
        assert is_allowed_strict(current, JobStatus.FAILED)

    def test_terminal_states_are_frozen(self):
        assert not is_allowed_strict(JobStatus.COMPLETED, JobStatus.FAILED)
        assert not is_allowed_strict(JobStatus.FAILED, JobStatus.TTS_PROCESSING)
        assert not is_allowed_strict(JobStatus.FAILED, JobStatus.COMPLETED)

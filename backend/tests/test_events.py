"""Parsing of loosely-typed webhook data into typed event variants."""

import pytest
from pydantic import ValidationError

from contentflow.orchestrator.state import EventType
from contentflow.schemas.events import (
    DEFAULT_ERROR_MESSAGE,
    Failed,
    ScriptGenerated,
    UploadCompleted,
    WebhookPayload,
    parse_stage_event,
)


def test_script_generated_maps_wire_names_to_columns():
    event = parse_stage_event(
        EventType.SCRIPT_GENERATED,
        {"script": "S", "voiceoverText": "V", "title": "T"},
    )
    assert isinstance(event, ScriptGenerated)
    assert event.fields() == {"script": "S", "voiceover_text": "V", "title": "T"}


def test_each_variant_only_carries_its_own_fields():
    data = {"script": "S", "audioUrl": "a.mp3", "videoUrl": "v.mp4", "publishedVideoId": "yt1"}
    assert parse_stage_event(EventType.TTS_COMPLETED, data).fields() == {"audio_url": "a.mp3"}
    assert parse_stage_event(EventType.VIDEO_RENDERED, data).fields() == {"video_url": "v.mp4"}
    assert parse_stage_event(EventType.UPLOAD_COMPLETED, data).fields() == {"published_video_id": "yt1"}


def test_upload_completed_accepts_youtube_alias():
    event = parse_stage_event(EventType.UPLOAD_COMPLETED, {"youtubeVideoId": "dQw4w9WgXcQ"})
    assert isinstance(event, UploadCompleted)
    assert event.published_video_id == "dQw4w9WgXcQ"


def test_failed_defaults_error_message():
    assert parse_stage_event(EventType.FAILED, {}).fields() == {"error_message": DEFAULT_ERROR_MESSAGE}
    assert parse_stage_event(EventType.FAILED, {"error": ""}).fields() == {"error_message": DEFAULT_ERROR_MESSAGE}
    assert parse_stage_event(EventType.FAILED, {"errorMessage": None}).fields() == {
        "error_message": DEFAULT_ERROR_MESSAGE
    }


def test_failed_accepts_error_alias():
    event = parse_stage_event(EventType.FAILED, {"error": "render crashed"})
    assert isinstance(event, Failed)
    assert event.error_message == "render crashed"


def test_absent_fields_are_not_written():
    event = parse_stage_event(EventType.SCRIPT_GENERATED, {"title": "Only a title"})
    assert event.fields() == {"title": "Only a title"}


@pytest.mark.parametrize("data", [None, [], "oops", 42, {"unexpected": {"nested": True}}])
def test_malformed_data_never_raises(data):
    event = parse_stage_event(EventType.TTS_COMPLETED, data)
    assert event.fields() == {}


def test_null_alias_does_not_hide_a_later_one():
    event = parse_stage_event(EventType.FAILED, {"errorMessage": None, "error": "boom"})
    assert event.error_message == "boom"

    event = parse_stage_event(EventType.UPLOAD_COMPLETED, {"publishedVideoId": None, "youtubeVideoId": "yt1"})
    assert event.fields() == {"published_video_id": "yt1"}


def test_non_string_values_are_coerced():
    event = parse_stage_event(EventType.UPLOAD_COMPLETED, {"publishedVideoId": 12345})
    assert event.published_video_id == "12345"

    event = parse_stage_event(EventType.SCRIPT_GENERATED, {"script": ["line one", "line two"]})
    assert event.script == "line one, line two"


class TestWebhookPayload:
    def test_wire_format(self):
        payload = WebhookPayload.model_validate({
            "event": "content.tts_completed",
            "contentJobId": "J1",
            "data": {"audioUrl": "a.mp3"},
            "timestamp": "2024-05-01T10:00:00Z",
        })
        assert payload.content_job_id == "J1"
        assert payload.event == "content.tts_completed"
        assert payload.data == {"audioUrl": "a.mp3"}

    def test_data_and_timestamp_are_optional(self):
        payload = WebhookPayload.model_validate({"event": "failed", "contentJobId": "J1"})
        assert payload.data is None
        assert payload.timestamp is None

    @pytest.mark.parametrize(
        "body",
        [
            {"contentJobId": "J1"},
            {"event": "failed"},
            {"event": "", "contentJobId": "J1"},
        ],
    )
    def test_event_and_job_id_are_required(self, body):
        with pytest.raises(ValidationError):
            WebhookPayload.model_validate(body)

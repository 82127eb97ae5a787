"""Pydantic schemas for inbound webhook events.

The wire body carries a loosely-typed ``data`` object. It is parsed into one
typed variant per event type (StageEvent) so each transition only sees the
fields it owns. Parsing never fails on the contents of ``data``: missing keys
default to None, unknown keys are ignored and scalars are coerced to strings.
"""

from typing import Annotated, Any, ClassVar, Dict, Optional, Type, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from contentflow.orchestrator.state import EventType

DEFAULT_ERROR_MESSAGE = "Unknown error"


def _coerce_to_optional_str(v: Any) -> Optional[str]:
    """Coerce list/non-str values to a string, keeping None as None.

    Workers are not consistent about types (numeric video ids, lists of
    script lines), so anything that is not None is rendered as text.
    """
    if v is None or isinstance(v, str):
        return v
    if isinstance(v, (list, tuple)):
        return ", ".join(str(item) for item in v)
    return str(v)


OptionalStr = Annotated[Optional[str], BeforeValidator(_coerce_to_optional_str)]


class _StageEvent(BaseModel):
    """Shared behaviour of the typed event variants.

    Attribute names are the job store column names; wire names are accepted
    through validation aliases.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    event_type: ClassVar[EventType]

    @model_validator(mode="before")
    @classmethod
    def drop_null_values(cls, data: Any) -> Any:
        """Treat null members as absent so a later alias can still supply the value."""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    def fields(self) -> Dict[str, str]:
        """Columns this event writes. Absent values are left untouched in the store."""
        return {name: value for name, value in self.model_dump().items() if value is not None}


class ScriptGenerated(_StageEvent):
    event_type: ClassVar[EventType] = EventType.SCRIPT_GENERATED

    script: OptionalStr = None
    voiceover_text: OptionalStr = Field(
        default=None, validation_alias=AliasChoices("voiceoverText", "voiceover_text")
    )
    title: OptionalStr = None


class TtsCompleted(_StageEvent):
    event_type: ClassVar[EventType] = EventType.TTS_COMPLETED

    audio_url: OptionalStr = Field(
        default=None, validation_alias=AliasChoices("audioUrl", "audio_url")
    )


class VideoRendered(_StageEvent):
    event_type: ClassVar[EventType] = EventType.VIDEO_RENDERED

    video_url: OptionalStr = Field(
        default=None, validation_alias=AliasChoices("videoUrl", "video_url")
    )


class UploadCompleted(_StageEvent):
    event_type: ClassVar[EventType] = EventType.UPLOAD_COMPLETED

    # youtubeVideoId is what the upload worker sends today
    published_video_id: OptionalStr = Field(
        default=None,
        validation_alias=AliasChoices("publishedVideoId", "youtubeVideoId", "published_video_id"),
    )


class Failed(_StageEvent):
    event_type: ClassVar[EventType] = EventType.FAILED

    error_message: OptionalStr = Field(
        default=DEFAULT_ERROR_MESSAGE,
        validation_alias=AliasChoices("errorMessage", "error", "error_message"),
    )

    @field_validator("error_message", mode="after")
    @classmethod
    def default_when_blank(cls, v: Optional[str]) -> str:
        """A failure always records a message, even if the worker sent none."""
        return v if v else DEFAULT_ERROR_MESSAGE


StageEvent = Union[ScriptGenerated, TtsCompleted, VideoRendered, UploadCompleted, Failed]

EVENT_MODELS: Dict[EventType, Type[_StageEvent]] = {
    model.event_type: model
    for model in (ScriptGenerated, TtsCompleted, VideoRendered, UploadCompleted, Failed)
}

# Every transition must have a payload variant
assert set(EVENT_MODELS) == set(EventType)


def parse_stage_event(event_type: EventType, data: Any) -> StageEvent:
    """Build the typed variant for event_type from a raw ``data`` value.

    Args:
        event_type: Recognised event type
        data: The raw ``data`` member of the webhook body (any JSON value)

    Returns:
        The event variant carrying only the fields that event owns
    """
    if not isinstance(data, dict):
        data = {}
    return EVENT_MODELS[event_type].model_validate(data)


class WebhookPayload(BaseModel):
    """Body of POST /api/webhooks/n8n."""

    model_config = ConfigDict(populate_by_name=True)

    event: str = Field(min_length=1)
    content_job_id: str = Field(
        min_length=1, validation_alias=AliasChoices("contentJobId", "content_job_id")
    )
    data: Any = None
    # Advisory only, never used for ordering
    timestamp: OptionalStr = None


class WebhookAck(BaseModel):
    """Uniform acknowledgment returned for every admitted event."""

    success: bool = True
    status: Optional[str] = None
    message: Optional[str] = None

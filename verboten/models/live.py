"""Wire models of the live (bidirectional streaming) AI sessions.

Realtime input frames and server events follow the camelCase JSON schema of
the live backend. They are validated on the way through but relayed with the
player's and the backend's own field names and values.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from verboten.errors import MalformedFrameError


class Blob(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    data: str = ""  # base64
    mime_type: str | None = Field(default=None, alias="mimeType")


class RealtimeInputFrame(BaseModel):
    """One unit of audio and/or transcript sent by the player."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    media_chunks: list[Blob] | None = Field(default=None, alias="mediaChunks")
    media: Blob | None = None
    audio: Blob | None = None
    video: Blob | None = None
    text: str | None = None
    activity_start: dict[str, Any] | None = Field(default=None, alias="activityStart")
    activity_end: dict[str, Any] | None = Field(default=None, alias="activityEnd")
    audio_stream_end: bool | None = Field(default=None, alias="audioStreamEnd")

    @classmethod
    def parse(cls, raw: str | bytes) -> RealtimeInputFrame:
        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedFrameError(f"invalid JSON ({e})", _preview(raw)) from e
        if not isinstance(payload, dict):
            raise MalformedFrameError("expected a JSON object", _preview(raw))
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise MalformedFrameError(f"{e.error_count()} invalid field(s)", _preview(raw)) from e

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class Transcription(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: str = ""
    finished: bool | None = None


class ServerContent(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, protected_namespaces=())

    model_turn: dict[str, Any] | None = Field(default=None, alias="modelTurn")
    turn_complete: bool = Field(default=False, alias="turnComplete")
    generation_complete: bool = Field(default=False, alias="generationComplete")
    interrupted: bool = False
    input_transcription: Transcription | None = Field(default=None, alias="inputTranscription")
    output_transcription: Transcription | None = Field(default=None, alias="outputTranscription")


class ServerEvent(BaseModel):
    """One message received from a live session, with its original text."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    raw: str = Field(default="", exclude=True)
    setup_complete: dict[str, Any] | None = Field(default=None, alias="setupComplete")
    server_content: ServerContent | None = Field(default=None, alias="serverContent")
    tool_call: dict[str, Any] | None = Field(default=None, alias="toolCall")
    go_away: dict[str, Any] | None = Field(default=None, alias="goAway")
    usage_metadata: dict[str, Any] | None = Field(default=None, alias="usageMetadata")

    @classmethod
    def from_wire(cls, raw: str | bytes) -> ServerEvent:
        """Decode one backend message; raises ``ValueError`` when it is not an event."""
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        payload = json.loads(text)
        if not isinstance(payload, dict):
            raise ValueError("server event is not a JSON object")
        event = cls.model_validate(payload)
        event.raw = text
        return event

    @property
    def output_text(self) -> str:
        sc = self.server_content
        if sc is not None and sc.output_transcription is not None:
            return sc.output_transcription.text
        return ""

    @property
    def turn_complete(self) -> bool:
        return self.server_content is not None and self.server_content.turn_complete


class ActivityDetection(BaseModel):
    start_of_speech_sensitivity: str = "START_SENSITIVITY_HIGH"
    end_of_speech_sensitivity: str = "END_SENSITIVITY_HIGH"
    prefix_padding_ms: int = 100
    silence_duration_ms: int = 100


class LiveSetup(BaseModel):
    """Configuration sent once when a live session is opened."""

    model: str
    system_instruction: str
    response_modalities: list[str] = Field(default_factory=lambda: ["AUDIO"])
    voice_name: str | None = None
    input_transcription: bool = False
    output_transcription: bool = False
    activity_detection: ActivityDetection | None = None

    def to_wire(self) -> dict[str, Any]:
        generation_config: dict[str, Any] = {"responseModalities": self.response_modalities}
        if self.voice_name:
            generation_config["speechConfig"] = {
                "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": self.voice_name}}
            }
        setup: dict[str, Any] = {
            "model": self.model,
            "generationConfig": generation_config,
            "systemInstruction": {"parts": [{"text": self.system_instruction}]},
        }
        if self.input_transcription:
            setup["inputAudioTranscription"] = {}
        if self.output_transcription:
            setup["outputAudioTranscription"] = {}
        if self.activity_detection is not None:
            ad = self.activity_detection
            setup["realtimeInputConfig"] = {
                "automaticActivityDetection": {
                    "startOfSpeechSensitivity": ad.start_of_speech_sensitivity,
                    "endOfSpeechSensitivity": ad.end_of_speech_sensitivity,
                    "prefixPaddingMs": ad.prefix_padding_ms,
                    "silenceDurationMs": ad.silence_duration_ms,
                }
            }
        return {"setup": setup}


def _preview(raw: str | bytes, limit: int = 200) -> str:
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    return text[:limit]

"""Request/Response schemas for the FastAPI endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from podcast_studio.models.generation import GenerationRequest, GenerationResult, VoiceAssignment
from podcast_studio.models.script import Segment


class _CamelModel(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class GeneratePodcastRequest(_CamelModel):
    topic: Optional[str] = None
    narrator_voice_id: Optional[str] = None
    host_voice_id: Optional[str] = None
    guest_voice_id: Optional[str] = None
    script_override: Optional[str] = None
    audio_only: bool = False

    def to_generation_request(self) -> GenerationRequest:
        return GenerationRequest(
            topic=self.topic,
            voices=VoiceAssignment(
                narrator=self.narrator_voice_id,
                host=self.host_voice_id,
                guest=self.guest_voice_id,
            ),
            script_override=self.script_override,
            audio_only=self.audio_only,
        )


class ScriptParts(BaseModel):
    narrator: str = ""
    host: str = ""
    guest: str = ""


class SpeakerAudio(BaseModel):
    narrator: Optional[str] = None
    host: Optional[str] = None
    guest: Optional[str] = None


class GeneratePodcastResponse(_CamelModel):
    script: str
    script_parts: ScriptParts
    segments: list[Segment] = Field(default_factory=list)
    audio: Optional[SpeakerAudio] = None
    audio_error: Optional[str] = None

    @classmethod
    def from_result(cls, result: GenerationResult) -> GeneratePodcastResponse:
        audio = None
        if result.audio is not None:
            audio = SpeakerAudio(**{speaker.value: data for speaker, data in result.audio.items()})
        return cls(
            script=result.script,
            script_parts=ScriptParts(**result.tracks.model_dump()),
            segments=result.segments,
            audio=audio,
            audio_error=result.audio_error,
        )

    def to_wire(self) -> dict:
        """Serialize with camelCase keys; ``audio``/``audioError`` only when set."""
        data = self.model_dump(mode="json", by_alias=True)
        if self.audio is None:
            data.pop("audio")
        if self.audio_error is None:
            data.pop("audioError")
        return data


class Voice(BaseModel):
    voice_id: str
    name: str


class VoicesResponse(BaseModel):
    voices: list[Voice]


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None

"""Pydantic models for a single podcast generation request and its result."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from podcast_studio.config import DEFAULT_VOICE_ID
from podcast_studio.models.script import Segment, ScriptTracks, Speaker


class VoiceAssignment(BaseModel):
    """ElevenLabs voice id per speaker. Missing entries use a default."""

    model_config = {"frozen": True}

    narrator: Optional[str] = None
    host: Optional[str] = None
    guest: Optional[str] = None

    def resolve(self, speaker: Speaker, fallback: VoiceAssignment | None = None) -> str:
        """Return the caller's voice, else *fallback*'s voice, else the global default."""
        voice_id = getattr(self, speaker.value)
        if voice_id:
            return voice_id
        if fallback is not None:
            return fallback.resolve(speaker)
        return DEFAULT_VOICE_ID


class GenerationRequest(BaseModel):
    topic: Optional[str] = None
    voices: VoiceAssignment = Field(default_factory=VoiceAssignment)
    script_override: Optional[str] = None
    audio_only: bool = False


class GenerationResult(BaseModel):
    script: str
    segments: list[Segment]
    tracks: ScriptTracks
    # speaker → base64 MP3, or None when that speaker has no audio
    audio: Optional[dict[Speaker, Optional[str]]] = None
    audio_error: Optional[str] = None

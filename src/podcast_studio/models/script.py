"""Pydantic models for parsed podcast scripts."""

from enum import Enum

from pydantic import BaseModel, Field


class Speaker(str, Enum):
    """The three voices of a podcast, in conventional order of appearance."""

    NARRATOR = "narrator"
    HOST = "host"
    GUEST = "guest"


class Segment(BaseModel):
    """One contiguous run of dialogue attributed to a single speaker."""

    model_config = {"frozen": True}

    speaker: Speaker
    text: str = ""


class ScriptTracks(BaseModel):
    """Full per-speaker dialogue, lines joined with newlines."""

    model_config = {"frozen": True}

    narrator: str = ""
    host: str = ""
    guest: str = ""

    def for_speaker(self, speaker: Speaker) -> str:
        return getattr(self, speaker.value)


class ParsedScript(BaseModel):
    model_config = {"frozen": True}

    segments: list[Segment] = Field(default_factory=list)
    tracks: ScriptTracks = Field(default_factory=ScriptTracks)

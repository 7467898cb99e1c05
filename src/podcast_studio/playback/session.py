"""Client for the podcast API and the playback session built on top of it."""

from __future__ import annotations

import base64
import functools
from typing import Any, Callable, Optional

import httpx
import structlog

from podcast_studio.errors import PodcastRequestError
from podcast_studio.models.generation import VoiceAssignment
from podcast_studio.models.script import ScriptTracks, Segment, Speaker
from podcast_studio.playback.clips import MemoryClip
from podcast_studio.playback.scheduler import AudioClip, PlaybackScheduler
from podcast_studio.script.parsing import parse_script

logger = structlog.get_logger()

ClipFactory = Callable[[Speaker, bytes, Callable[[], None]], AudioClip]

SCRIPT_OK_SUFFIX = ". Script generated successfully."


def memory_clip_factory(speaker: Speaker, data: bytes, on_ended: Callable[[], None]) -> AudioClip:
    return MemoryClip(data, on_ended=on_ended)


class StudioClient:
    """Thin async HTTP client for ``/api/voices`` and ``/api/generate-podcast``."""

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 120.0,
    ) -> None:
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> StudioClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def fetch_voices(self) -> list[dict[str, str]]:
        data = await self._request("GET", "/api/voices")
        return list(data.get("voices") or [])

    async def generate_podcast(
        self,
        topic: Optional[str] = None,
        voices: Optional[VoiceAssignment] = None,
        script_override: Optional[str] = None,
        audio_only: bool = False,
    ) -> dict[str, Any]:
        voices = voices or VoiceAssignment()
        payload = {
            "topic": topic,
            "narratorVoiceId": voices.narrator,
            "hostVoiceId": voices.host,
            "guestVoiceId": voices.guest,
            "scriptOverride": script_override,
            "audioOnly": audio_only,
        }
        return await self._request(
            "POST",
            "/api/generate-podcast",
            json={k: v for k, v in payload.items() if v is not None},
        )

    async def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        try:
            resp = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise PodcastRequestError(str(exc) or exc.__class__.__name__) from exc

        if resp.is_error:
            try:
                body = resp.json()
            except ValueError:
                body = {}
            message = (body.get("details") or body.get("error")) if isinstance(body, dict) else None
            raise PodcastRequestError(message or f"Request failed with status {resp.status_code}", resp.status_code)
        return resp.json()


class PodcastSession:
    """One user's view of the studio: voice choice, last result and playback.

    A new generation always resets playback and releases the previous clips
    before the request is sent.
    """

    def __init__(
        self,
        client: StudioClient,
        scheduler: PlaybackScheduler | None = None,
        clip_factory: ClipFactory = memory_clip_factory,
    ) -> None:
        self.client = client
        self.scheduler = scheduler or PlaybackScheduler()
        self.clip_factory = clip_factory
        self.voices: list[dict[str, str]] = []
        self.selected_voices = VoiceAssignment()
        self.script = ""
        self.tracks = ScriptTracks()
        self.segments: list[Segment] = []
        self.notice: Optional[str] = None

    async def load_voices(self) -> None:
        """Fetch the catalog and pick the first three voices as defaults."""
        try:
            self.voices = await self.client.fetch_voices()
        except PodcastRequestError as exc:
            logger.error("session.voices_failed", error=str(exc))
            return
        if not self.voices:
            return
        ids = [voice["voice_id"] for voice in self.voices]
        self.selected_voices = VoiceAssignment(
            narrator=ids[0],
            host=ids[1] if len(ids) > 1 else ids[0],
            guest=ids[2] if len(ids) > 2 else ids[0],
        )

    async def generate(self, topic: str) -> bool:
        """Generate a podcast for *topic* and install its audio.

        Returns False when no script was produced; ``notice`` says why.
        """
        self.scheduler.reset()
        self.script = ""
        self.tracks = ScriptTracks()
        self.segments = []
        self.notice = None

        if not topic.strip():
            self.notice = "Please enter a topic"
            return False

        try:
            data = await self.client.generate_podcast(topic=topic, voices=self.selected_voices)
        except PodcastRequestError as exc:
            logger.error("session.generate_failed", error=str(exc))
            self.notice = str(exc)
            return False

        self.script = data.get("script") or ""
        parts = data.get("scriptParts") or {}
        self.tracks = ScriptTracks(**{s.value: parts.get(s.value) or "" for s in Speaker})
        if data.get("segments") is not None:
            self.segments = [Segment(**segment) for segment in data["segments"]]
        else:
            self.segments = parse_script(self.script).segments

        if data.get("audioError"):
            self.notice = data["audioError"] + SCRIPT_OK_SUFFIX
        elif data.get("audio") is not None:
            try:
                self.scheduler.install(self._decode_audio(data["audio"]))
            except ValueError:
                logger.exception("session.audio_decode_failed")
                self.notice = "Audio could not be processed" + SCRIPT_OK_SUFFIX
        else:
            self.notice = "Unknown response format" + SCRIPT_OK_SUFFIX
        return True

    def _decode_audio(self, audio: dict[str, Optional[str]]) -> dict[Speaker, AudioClip]:
        decoded = {
            speaker: base64.b64decode(audio[speaker.value], validate=True)
            for speaker in Speaker
            if audio.get(speaker.value)
        }
        return {
            speaker: self.clip_factory(speaker, data, functools.partial(self.scheduler.on_ended, speaker))
            for speaker, data in decoded.items()
        }

"""ElevenLabs TTS and voice catalog: async helpers that degrade instead of raising."""

from __future__ import annotations

import asyncio
import base64
import json

import structlog
from elevenlabs import AsyncElevenLabs, VoiceSettings
from elevenlabs.core.api_error import ApiError

logger = structlog.get_logger()

TRUNCATION_NOTICE = " [Text truncated to fit within character limit]"

_VOICE_SETTINGS = VoiceSettings(stability=0.5, similarity_boost=0.5)

FALLBACK_VOICES: list[dict[str, str]] = [
    {"voice_id": "21m00Tcm4TlvDq8ikWAM", "name": "Rachel (Fallback)"},
    {"voice_id": "AZnzlk1XvdvUeBnXmlld", "name": "Domi (Fallback)"},
    {"voice_id": "EXAVITQu4vr4xnSDxMaL", "name": "Bella (Fallback)"},
]


def prepare_tts_text(text: str, max_chars: int = 800) -> str:
    """Shorten *text* to fit the per-request character limit.

    Cuts after the last period inside the first *max_chars* characters, or
    hard-cuts at *max_chars* when there is none, and appends a notice.
    """
    if len(text) <= max_chars:
        return text
    last_period = text[:max_chars].rfind(".")
    cut = last_period + 1 if last_period > 0 else max_chars
    return text[:cut] + TRUNCATION_NOTICE


def describe_api_error(exc: Exception) -> str:
    """Decode an ElevenLabs ``{"detail": {"status", "message"}}`` error body for logging."""
    body = getattr(exc, "body", None)
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except ValueError:
            return body or str(exc)
    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, dict):
            return f"{detail.get('status')}: {detail.get('message')}"
        if detail:
            return str(detail)
    return str(exc)


class AudioSynthesizer:
    """Turn one speaker's track into base64 MP3 audio, or ``None`` on any failure."""

    def __init__(
        self,
        client: AsyncElevenLabs,
        model_id: str = "eleven_monolingual_v1",
        output_format: str = "mp3_44100_128",
        max_chars: int = 800,
        max_concurrency: int = 2,
    ) -> None:
        self.client = client
        self.model_id = model_id
        self.output_format = output_format
        self.max_chars = max_chars
        # ElevenLabs allows max 2 concurrent requests on most plans
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def synthesize(self, text: str, voice_id: str) -> str | None:
        """Return base64-encoded audio for *text* spoken by *voice_id*.

        Never raises: empty input, empty audio and API/transport errors all
        yield ``None``.
        """
        if not text or not text.strip():
            logger.info("elevenlabs_tts.skip", voice_id=voice_id, reason="empty text")
            return None

        processed = prepare_tts_text(text, self.max_chars)
        if len(text) > self.max_chars:
            logger.info(
                "elevenlabs_tts.truncated",
                voice_id=voice_id,
                original_len=len(text),
                text_len=len(processed),
            )

        logger.info("elevenlabs_tts.start", voice_id=voice_id, text_len=len(processed))
        try:
            async with self._semaphore:
                audio_data = await self._convert(processed, voice_id)
        except ApiError as exc:
            logger.error(
                "elevenlabs_tts.failed",
                voice_id=voice_id,
                status=exc.status_code,
                error=describe_api_error(exc),
            )
            return None
        except Exception:
            logger.exception("elevenlabs_tts.failed", voice_id=voice_id)
            return None

        if not audio_data:
            logger.error("elevenlabs_tts.empty_audio", voice_id=voice_id)
            return None

        logger.info("elevenlabs_tts.done", voice_id=voice_id, bytes_received=len(audio_data))
        return base64.b64encode(audio_data).decode("ascii")

    async def _convert(self, text: str, voice_id: str) -> bytes:
        audio_iter = self.client.text_to_speech.convert(
            voice_id=voice_id,
            text=text,
            model_id=self.model_id,
            voice_settings=_VOICE_SETTINGS,
            output_format=self.output_format,
        )

        chunks: list[bytes] = []
        async for chunk in audio_iter:
            chunks.append(chunk)
        return b"".join(chunks)


async def fetch_voice_catalog(client: AsyncElevenLabs) -> list[dict[str, str]]:
    """List available voices as ``{"voice_id", "name"}`` dicts.

    Nameless voices are listed under their id. Returns the built-in fallback
    catalog when the API fails or yields no usable voice.
    """
    try:
        response = await client.voices.get_all()
        voices = [
            {"voice_id": v.voice_id, "name": v.name or v.voice_id}
            for v in (response.voices or [])
            if v.voice_id
        ]
    except Exception:
        logger.exception("elevenlabs_voices.failed")
        return list(FALLBACK_VOICES)

    if not voices:
        logger.warning("elevenlabs_voices.empty", fallback=len(FALLBACK_VOICES))
        return list(FALLBACK_VOICES)

    for voice in voices:
        logger.debug("elevenlabs_voices.voice", name=voice["name"], voice_id=voice["voice_id"])
    logger.info("elevenlabs_voices.done", count=len(voices))
    return voices

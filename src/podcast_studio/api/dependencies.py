"""FastAPI dependency injection: generation service and ElevenLabs client."""

from __future__ import annotations

from functools import lru_cache

import httpx
from elevenlabs import AsyncElevenLabs

from podcast_studio.config import build_providers, settings
from podcast_studio.models.generation import VoiceAssignment
from podcast_studio.nodes.podcast_generator import PodcastGenerationService
from podcast_studio.tools.elevenlabs import AudioSynthesizer
from podcast_studio.tools.llm_providers import ProviderFailoverClient


@lru_cache(maxsize=1)
def get_tts_http_client() -> httpx.AsyncClient:
    """Return the connection pool shared by ElevenLabs calls."""
    return httpx.AsyncClient(timeout=settings.tts_timeout_sec)


@lru_cache(maxsize=1)
def get_elevenlabs_client() -> AsyncElevenLabs:
    """Return a singleton ElevenLabs client configured from settings."""
    return AsyncElevenLabs(
        api_key=settings.elevenlabs_api_key,
        timeout=settings.tts_timeout_sec,
        httpx_client=get_tts_http_client(),
    )


@lru_cache(maxsize=1)
def get_generation_service() -> PodcastGenerationService:
    """Return the singleton generation service.

    The provider list is built once from settings and shared read-only by
    every request.
    """
    llm = ProviderFailoverClient(build_providers(settings), timeout=settings.llm_timeout_sec)
    synthesizer = AudioSynthesizer(
        get_elevenlabs_client(),
        model_id=settings.tts_model_id,
        output_format=settings.tts_output_format,
        max_chars=settings.tts_max_chars,
        max_concurrency=settings.tts_max_concurrency,
    )
    default_voices = VoiceAssignment(
        narrator=settings.narrator_voice_id or settings.default_voice_id,
        host=settings.host_voice_id or settings.default_voice_id,
        guest=settings.guest_voice_id or settings.default_voice_id,
    )
    return PodcastGenerationService(llm, synthesizer, default_voices)


async def close_clients() -> None:
    """Close the shared HTTP pool and drop the cached singletons built on it."""
    if get_tts_http_client.cache_info().currsize:
        await get_tts_http_client().aclose()
    get_generation_service.cache_clear()
    get_elevenlabs_client.cache_clear()
    get_tts_http_client.cache_clear()

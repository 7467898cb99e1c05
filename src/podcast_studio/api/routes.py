"""FastAPI route handlers for podcast generation and the voice catalog."""

from __future__ import annotations

import structlog
from elevenlabs import AsyncElevenLabs
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from podcast_studio.api.dependencies import get_elevenlabs_client, get_generation_service
from podcast_studio.api.schemas import (
    ErrorResponse,
    GeneratePodcastRequest,
    GeneratePodcastResponse,
    VoicesResponse,
)
from podcast_studio.errors import ScriptValidationError
from podcast_studio.nodes.podcast_generator import PodcastGenerationService
from podcast_studio.tools.elevenlabs import fetch_voice_catalog

logger = structlog.get_logger()

router = APIRouter(prefix="/api")


def _error(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


@router.post("/generate-podcast")
async def generate_podcast(
    request: GeneratePodcastRequest,
    service: PodcastGenerationService = Depends(get_generation_service),
):
    """Generate a script (unless one is supplied) and per-speaker audio."""
    try:
        result = await service.generate(request.to_generation_request())
    except ScriptValidationError as exc:
        logger.info("podcast.rejected", reason=str(exc))
        return _error(400, str(exc))
    except Exception as exc:
        logger.exception("podcast.failed")
        return _error(500, "Failed to generate podcast", details=str(exc))

    if result.audio_error:
        logger.warning("podcast.audio_error", error=result.audio_error)
    return GeneratePodcastResponse.from_result(result).to_wire()


@router.get("/voices", response_model=VoicesResponse)
async def list_voices(client: AsyncElevenLabs = Depends(get_elevenlabs_client)):
    """List ElevenLabs voices; falls back to a built-in catalog on any upstream problem."""
    voices = await fetch_voice_catalog(client)
    return VoicesResponse(voices=voices)

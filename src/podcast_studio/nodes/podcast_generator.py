"""Podcast generator: script, speaker split and per-speaker audio for one request."""

from __future__ import annotations

import asyncio

import structlog

from podcast_studio.errors import ScriptValidationError
from podcast_studio.models.generation import GenerationRequest, GenerationResult, VoiceAssignment
from podcast_studio.models.script import ScriptTracks, Speaker
from podcast_studio.nodes.scriptwriter import write_script
from podcast_studio.script.parsing import parse_script
from podcast_studio.tools.elevenlabs import AudioSynthesizer
from podcast_studio.tools.llm_providers import ProviderFailoverClient

logger = structlog.get_logger()

AUDIO_ERROR_MESSAGE = "Failed to generate audio"


class PodcastGenerationService:
    """Orchestrates script generation, parsing and speech synthesis.

    Holds no per-request state, so one instance serves concurrent requests.
    """

    def __init__(
        self,
        llm: ProviderFailoverClient,
        synthesizer: AudioSynthesizer,
        default_voices: VoiceAssignment | None = None,
    ) -> None:
        self.llm = llm
        self.synthesizer = synthesizer
        self.default_voices = default_voices or VoiceAssignment()

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Produce the script and per-speaker audio for *request*.

        Raises:
            ScriptValidationError: If neither topic nor script was supplied.
            ProviderExhaustedError: If the script could not be generated.
        """
        topic = (request.topic or "").strip()
        override = request.script_override if request.script_override and request.script_override.strip() else None

        if not topic and override is None:
            raise ScriptValidationError("Topic or script is required")
        if request.audio_only and override is None:
            raise ScriptValidationError("Script is required for audio-only generation")

        if override is None:
            logger.info("podcast.generate_script", topic=topic)
            script = await write_script(self.llm, topic)
        else:
            logger.info("podcast.use_provided_script", chars=len(override))
            script = override

        parsed = parse_script(script)

        try:
            audio = await self._synthesize_tracks(parsed.tracks, request.voices)
        except Exception:
            logger.exception("podcast.audio_failed")
            return GenerationResult(
                script=script,
                segments=parsed.segments,
                tracks=parsed.tracks,
                audio_error=AUDIO_ERROR_MESSAGE,
            )

        logger.info(
            "podcast.done",
            segments=len(parsed.segments),
            audio={speaker.value: data is not None for speaker, data in audio.items()},
        )
        return GenerationResult(
            script=script,
            segments=parsed.segments,
            tracks=parsed.tracks,
            audio=audio,
        )

    async def _synthesize_tracks(
        self, tracks: ScriptTracks, voices: VoiceAssignment
    ) -> dict[Speaker, str | None]:
        """Synthesize every non-empty track concurrently.

        A speaker whose synthesis yields nothing gets ``None``; the others are
        unaffected. An exception escaping any track fails the whole stage once
        all tracks have finished.
        """
        audio: dict[Speaker, str | None] = {speaker: None for speaker in Speaker}
        pending = [speaker for speaker in Speaker if tracks.for_speaker(speaker).strip()]

        results = await asyncio.gather(
            *[
                self.synthesizer.synthesize(
                    tracks.for_speaker(speaker),
                    voices.resolve(speaker, self.default_voices),
                )
                for speaker in pending
            ],
            return_exceptions=True,
        )

        for speaker, result in zip(pending, results):
            if isinstance(result, BaseException):
                raise result
            audio[speaker] = result
        return audio

"""Client-side playback of per-speaker clips, one speaker at a time.

Three interactions are supported:

- ``play_pause(speaker)`` toggles one speaker and silences the others.
- ``play_all()`` plays narrator, host, then guest, each to its natural end.
- ``play_by_section(segments)`` follows the script order. Every segment plays
  its speaker's shared clip for a time estimated from the segment length.

Only one sequence runs at a time. Starting a sequence, calling
``play_pause`` or calling ``stop`` cancels the running sequence before
touching any clip.
"""

from __future__ import annotations

import asyncio
import math
from enum import Enum
from typing import Awaitable, Callable, Coroutine, Iterable, Mapping, Optional, Protocol

import structlog

from podcast_studio.models.script import Segment, Speaker

logger = structlog.get_logger()

MS_PER_CHAR = 75
FALLBACK_SECTION_MS = 10_000


class PlaybackState(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"


class AudioClip(Protocol):
    """A playable clip. Natural end is reported through ``PlaybackScheduler.on_ended``."""

    @property
    def duration(self) -> Optional[float]: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def release(self) -> None: ...


class PlaybackScheduler:
    def __init__(
        self,
        ms_per_char: int = MS_PER_CHAR,
        fallback_section_ms: int = FALLBACK_SECTION_MS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.ms_per_char = ms_per_char
        self.fallback_section_ms = fallback_section_ms
        self._sleep = sleep
        self._clips: dict[Speaker, AudioClip] = {}
        self._state: dict[Speaker, PlaybackState] = {speaker: PlaybackState.IDLE for speaker in Speaker}
        self._finished: dict[Speaker, asyncio.Future] = {}
        self._sequence: asyncio.Task | None = None

    # -- inspection ---------------------------------------------------------

    def state(self, speaker: Speaker) -> PlaybackState:
        return self._state[speaker]

    @property
    def playing(self) -> list[Speaker]:
        return [speaker for speaker in Speaker if self._state[speaker] is PlaybackState.PLAYING]

    @property
    def sequence_running(self) -> bool:
        return self._sequence is not None and not self._sequence.done()

    def has_audio(self, speaker: Speaker) -> bool:
        return speaker in self._clips

    # -- clip lifetime ------------------------------------------------------

    def install(self, clips: Mapping[Speaker, AudioClip]) -> None:
        """Replace the current clips, releasing the previous ones first."""
        self.reset()
        self._clips = dict(clips)
        logger.debug("playback.installed", speakers=[s.value for s in self._clips])

    def reset(self) -> None:
        """Stop everything and release all clips."""
        self.stop()
        for clip in self._clips.values():
            clip.release()
        self._clips = {}

    def stop(self) -> None:
        """Cancel any running sequence and force every speaker idle."""
        self._cancel_sequence()
        for clip in self._clips.values():
            clip.pause()
        for speaker in Speaker:
            self._state[speaker] = PlaybackState.IDLE

    # -- interactions -------------------------------------------------------

    def play_pause(self, speaker: Speaker) -> None:
        """Pause *speaker* if it is playing, otherwise make it the only one playing."""
        clip = self._clips.get(speaker)
        if clip is None:
            return
        self._cancel_sequence()
        if self._state[speaker] is PlaybackState.PLAYING:
            clip.pause()
            self._state[speaker] = PlaybackState.IDLE
        else:
            self._start(speaker)

    def on_ended(self, speaker: Speaker) -> None:
        """Record that *speaker*'s clip reached its natural end."""
        self._state[speaker] = PlaybackState.IDLE
        finished = self._finished.pop(speaker, None)
        if finished is not None and not finished.done():
            finished.set_result(None)

    async def play_all(self) -> bool:
        """Play narrator, host and guest clips back to back.

        Returns False if the sequence was superseded, stopped or failed.
        """
        return await self._run(self._play_all())

    async def play_by_section(self, segments: Iterable[Segment]) -> bool:
        """Play the clips in script order, one time slice per segment.

        Returns False if the sequence was superseded, stopped or failed.
        """
        return await self._run(self._play_by_section(list(segments)))

    def section_seconds(self, segment: Segment, clip: AudioClip) -> float:
        """How long a segment gets: its text estimate, capped by the clip length."""
        duration = clip.duration
        if duration is None or math.isnan(duration) or duration <= 0:
            cap_ms = float(self.fallback_section_ms)
        else:
            cap_ms = duration * 1000
        return min(len(segment.text) * self.ms_per_char, cap_ms) / 1000

    # -- internals ----------------------------------------------------------

    def _start(self, speaker: Speaker) -> None:
        for other in Speaker:
            if other is not speaker and self._state[other] is PlaybackState.PLAYING:
                self._clips[other].pause()
                self._state[other] = PlaybackState.IDLE
        self._state[speaker] = PlaybackState.PLAYING
        self._clips[speaker].play()

    def _cancel_sequence(self) -> None:
        task, self._sequence = self._sequence, None
        if task is not None and not task.done():
            task.cancel()
        for finished in self._finished.values():
            finished.cancel()
        self._finished.clear()

    async def _run(self, sequence: Coroutine) -> bool:
        self.stop()
        task = asyncio.ensure_future(sequence)
        self._sequence = task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            if self._sequence is task:
                self.stop()
            else:
                task.cancel()
            raise

        current = self._sequence is task
        if current:
            self._sequence = None
        if task.cancelled():
            logger.info("playback.sequence_cancelled")
            return False

        exc = task.exception()
        if exc is not None:
            logger.error("playback.sequence_failed", error=str(exc), exc_info=exc)
            if current:
                self.stop()
            return False
        return True

    async def _play_all(self) -> None:
        loop = asyncio.get_running_loop()
        for speaker in Speaker:
            if speaker not in self._clips:
                logger.debug("playback.skip", speaker=speaker.value, reason="no audio")
                continue
            finished = loop.create_future()
            self._finished[speaker] = finished
            self._start(speaker)
            await finished
            self._state[speaker] = PlaybackState.IDLE

    async def _play_by_section(self, segments: list[Segment]) -> None:
        for index, segment in enumerate(segments, start=1):
            clip = self._clips.get(segment.speaker)
            if clip is None:
                logger.debug("playback.skip", section=index, speaker=segment.speaker.value, reason="no audio")
                continue

            seconds = self.section_seconds(segment, clip)
            logger.debug(
                "playback.section",
                section=index,
                total=len(segments),
                speaker=segment.speaker.value,
                seconds=seconds,
            )
            self._start(segment.speaker)
            await self._sleep(seconds)
            clip.pause()
            self._state[segment.speaker] = PlaybackState.IDLE

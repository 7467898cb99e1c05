"""Headless audio clip used when no real audio device is attached."""

from __future__ import annotations

import asyncio
from typing import Callable, Optional

# ElevenLabs mp3_44100_128 output
DEFAULT_BITRATE_KBPS = 128


def estimate_mp3_duration(data: bytes, bitrate_kbps: int = DEFAULT_BITRATE_KBPS) -> Optional[float]:
    """Seconds of audio in a constant-bitrate MP3 buffer, or None if empty."""
    if not data:
        return None
    return len(data) * 8 / (bitrate_kbps * 1000)


class MemoryClip:
    """Holds decoded MP3 bytes and tracks a play position on the event loop clock.

    Behaves like a media element: ``play`` resumes from the current position
    (or restarts once the end was reached), ``pause`` keeps the position, and
    ``on_ended`` fires when the position reaches ``duration``.
    """

    def __init__(
        self,
        data: bytes,
        duration: Optional[float] = None,
        on_ended: Optional[Callable[[], None]] = None,
    ) -> None:
        self.data = data
        self._duration = duration if duration is not None else estimate_mp3_duration(data)
        self.on_ended = on_ended
        self.position = 0.0
        self.released = False
        self._loop: asyncio.AbstractEventLoop | None = None
        self._started_at: float | None = None
        self._end_handle: asyncio.TimerHandle | None = None

    @property
    def duration(self) -> Optional[float]:
        return self._duration

    @property
    def playing(self) -> bool:
        return self._started_at is not None

    def play(self) -> None:
        if self.released:
            raise RuntimeError("Clip has been released")
        if self.playing:
            return
        if self._duration is not None and self.position >= self._duration:
            self.position = 0.0

        self._loop = asyncio.get_running_loop()
        self._started_at = self._loop.time()
        if self._duration is not None:
            self._end_handle = self._loop.call_later(self._duration - self.position, self._finish)

    def pause(self) -> None:
        if not self.playing:
            return
        self.position += self._loop.time() - self._started_at
        if self._duration is not None:
            self.position = min(self.position, self._duration)
        self._started_at = None
        self._cancel_end()

    def release(self) -> None:
        self._cancel_end()
        self._started_at = None
        self.data = b""
        self.released = True

    def _finish(self) -> None:
        self._end_handle = None
        self._started_at = None
        self.position = self._duration or 0.0
        if self.on_ended is not None:
            self.on_ended()

    def _cancel_end(self) -> None:
        if self._end_handle is not None:
            self._end_handle.cancel()
            self._end_handle = None

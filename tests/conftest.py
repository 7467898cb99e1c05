"""Shared fixtures and fakes for podcast_studio tests."""

from types import SimpleNamespace

import pytest

SAMPLE_SCRIPT = """\
[NARRATOR]: Welcome to Deep Dive, the show that goes beneath the surface.
[HOST]: Thanks! I'm Alex, and today we're talking about coral reefs.
[GUEST]: Happy to be here. I've studied reefs for twenty years.
[HOST]: So what's the biggest threat right now?
[GUEST]: Warming water. It causes bleaching.
When corals get stressed they expel their algae.

[NARRATOR]: After the break, what can be done.
[HOST]: Thanks for listening.
[GUEST]: Take care of the oceans.
[NARRATOR]: Deep Dive will be back next week.
"""


class FakeTextToSpeech:
    """Stands in for ``AsyncElevenLabs.text_to_speech``.

    *responses* maps voice_id → list of byte chunks or an exception to raise
    while streaming. Unknown voices get *default*.
    """

    def __init__(self, responses=None, default=(b"ID3", b"\x00audio")):
        self.responses = responses or {}
        self.default = default
        self.calls = []

    def convert(self, **kwargs):
        self.calls.append(kwargs)
        return self._stream(self.responses.get(kwargs["voice_id"], self.default))

    async def _stream(self, response):
        if isinstance(response, BaseException):
            raise response
        for chunk in response:
            yield chunk


class FakeVoices:
    def __init__(self, voices=None, error=None):
        self.voices = voices or []
        self.error = error
        self.calls = 0

    async def get_all(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            voices=[SimpleNamespace(voice_id=vid, name=name) for vid, name in self.voices]
        )


class FakeElevenLabs:
    def __init__(self, tts=None, voices=None):
        self.text_to_speech = tts or FakeTextToSpeech()
        self.voices = voices or FakeVoices()


class FakeClip:
    """Records play/pause calls; duration in seconds."""

    def __init__(self, duration=2.0):
        self.duration = duration
        self.events = []
        self.playing = False
        self.released = False

    def play(self):
        self.playing = True
        self.events.append("play")

    def pause(self):
        self.playing = False
        self.events.append("pause")

    def release(self):
        self.released = True


class StubService:
    """Generation service double returning a fixed result or raising."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.requests = []

    async def generate(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def sample_script() -> str:
    return SAMPLE_SCRIPT


@pytest.fixture
def fake_elevenlabs() -> FakeElevenLabs:
    return FakeElevenLabs()

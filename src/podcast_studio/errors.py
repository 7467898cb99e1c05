"""Domain exceptions raised by the generation pipeline."""

from __future__ import annotations


class PodcastStudioError(Exception):
    """Base class for podcast_studio errors."""


class ScriptValidationError(PodcastStudioError):
    """The request carries neither a topic nor a usable script."""


class ProviderExhaustedError(PodcastStudioError):
    """Every configured LLM provider failed, or none had an API key."""

    def __init__(self, detail: str, attempted: list[str] | None = None, last_error: Exception | None = None):
        super().__init__(f"All AI providers failed. Last error: {detail}")
        self.detail = detail
        self.attempted = attempted or []
        self.last_error = last_error


class PodcastRequestError(PodcastStudioError):
    """The podcast API answered a client request with an error payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

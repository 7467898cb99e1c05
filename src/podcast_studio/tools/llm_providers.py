"""Chat completion with ordered fallback across OpenAI-compatible providers."""

from __future__ import annotations

from typing import Sequence

import httpx
import structlog

from podcast_studio.config import ProviderConfig
from podcast_studio.errors import ProviderExhaustedError

logger = structlog.get_logger()

_DEFAULT_TIMEOUT_SEC = 30.0


class MalformedResponseError(ValueError):
    """A provider answered 2xx but the body has no completion text."""


def extract_content(data: object) -> str:
    """Pull ``choices[0].message.content`` out of a chat completion body."""
    try:
        content = data["choices"][0]["message"]["content"]  # type: ignore[index]
    except (KeyError, IndexError, TypeError) as exc:
        raise MalformedResponseError(f"Unexpected completion body: {exc!r}") from exc
    if not isinstance(content, str):
        raise MalformedResponseError("Completion content is not a string")
    return content


def describe_error(exc: Exception) -> str:
    """Best human-readable message for a failed provider call.

    Prefers the upstream ``{"error": {"message": ...}}`` body over the
    exception text.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            body = exc.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if isinstance(error, str) and error:
                return error
    return str(exc) or exc.__class__.__name__


class ProviderFailoverClient:
    """Try each configured provider in order until one returns a completion.

    Providers without an API key are skipped. A failed provider is never
    retried; the next one in the list is tried instead.
    """

    def __init__(
        self,
        providers: Sequence[ProviderConfig],
        http_client: httpx.AsyncClient | None = None,
        timeout: float = _DEFAULT_TIMEOUT_SEC,
    ) -> None:
        self.providers = tuple(providers)
        self._http = http_client
        self.timeout = timeout

    async def generate(self, messages: list[dict[str, str]]) -> str:
        """Return the first successful completion text for *messages*.

        Raises:
            ProviderExhaustedError: If every configured provider failed or
                none has an API key.
        """
        if self._http is not None:
            return await self._cascade(self._http, messages)
        async with httpx.AsyncClient(timeout=self.timeout) as http:
            return await self._cascade(http, messages)

    async def _cascade(self, http: httpx.AsyncClient, messages: list[dict[str, str]]) -> str:
        attempted: list[str] = []
        last_error: Exception | None = None

        for provider in self.providers:
            if not provider.configured:
                logger.info("provider.skip", provider=provider.name, reason="no API key")
                continue

            attempted.append(provider.name)
            logger.info("provider.attempt", provider=provider.name, model=provider.model)
            try:
                content = await self._complete(http, provider, messages)
            except (httpx.HTTPError, MalformedResponseError) as exc:
                last_error = exc
                status = exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else None
                logger.warning(
                    "provider.failed",
                    provider=provider.name,
                    status=status,
                    error=describe_error(exc),
                )
                if status == 401:
                    logger.error("provider.unauthorized", provider=provider.name)
                continue

            logger.info("provider.success", provider=provider.name, chars=len(content))
            return content

        if last_error is None:
            raise ProviderExhaustedError("no provider has an API key configured", attempted)
        raise ProviderExhaustedError(describe_error(last_error), attempted, last_error)

    async def _complete(
        self,
        http: httpx.AsyncClient,
        provider: ProviderConfig,
        messages: list[dict[str, str]],
    ) -> str:
        resp = await http.post(
            provider.endpoint,
            json=provider.build_payload(messages),
            headers=provider.headers(),
            timeout=self.timeout,
        )
        resp.raise_for_status()
        try:
            data = resp.json()
        except ValueError as exc:
            raise MalformedResponseError("Completion body is not JSON") from exc
        return extract_content(data)

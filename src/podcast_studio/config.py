"""Application configuration loaded from environment variables."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_settings import BaseSettings

DEFAULT_VOICE_ID = "21m00Tcm4TlvDq8ikWAM"


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # LLM API Keys (tried in this order)
    groq_api_key: str = ""
    github_token: str = ""
    openai_api_key: str = ""

    # Text-to-speech
    elevenlabs_api_key: str = ""

    # ElevenLabs Voice IDs per speaker (empty → default_voice_id)
    default_voice_id: str = DEFAULT_VOICE_ID
    narrator_voice_id: str = ""
    host_voice_id: str = ""
    guest_voice_id: str = ""

    # LLM request settings
    llm_timeout_sec: float = 30.0
    llm_temperature: float = 0.7
    llm_max_tokens: int = 2000

    # TTS request settings
    tts_model_id: str = "eleven_monolingual_v1"
    tts_output_format: str = "mp3_44100_128"
    tts_timeout_sec: float = 30.0
    tts_max_chars: int = 800
    tts_max_concurrency: int = 2

    # Comma-separated extra CORS origins
    allowed_origins: str = ""


@dataclass(frozen=True)
class ProviderConfig:
    """One OpenAI-compatible chat completion backend."""

    name: str
    endpoint: str
    model: str
    api_key: str = ""
    temperature: float = 0.7
    max_tokens: int = 2000

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def build_payload(self, messages: list[dict[str, str]]) -> dict:
        return {
            "messages": messages,
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }


def build_providers(cfg: Settings) -> tuple[ProviderConfig, ...]:
    """Return the provider preference list: Groq, then GitHub Models, then OpenAI."""
    common = {"temperature": cfg.llm_temperature, "max_tokens": cfg.llm_max_tokens}
    return (
        ProviderConfig(
            name="groq",
            endpoint="https://api.groq.com/openai/v1/chat/completions",
            model="llama3-8b-8192",
            api_key=cfg.groq_api_key,
            **common,
        ),
        ProviderConfig(
            name="github",
            endpoint="https://models.github.ai/inference/chat/completions",
            model="openai/gpt-4.1",
            api_key=cfg.github_token,
            **common,
        ),
        ProviderConfig(
            name="openai",
            endpoint="https://api.openai.com/v1/chat/completions",
            model="gpt-3.5-turbo",
            api_key=cfg.openai_api_key,
            **common,
        ),
    )


settings = Settings()

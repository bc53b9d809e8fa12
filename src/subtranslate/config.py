"""Configuration management via environment variables."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_OLLAMA_MODEL = "llama3.1:8b"
DEFAULT_TARGET_LANGUAGE = "Persian"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_HEADER_COLOR = "#33b3b3"
DEFAULT_FOOTER_COLOR = "#808080"
PROVIDERS = ("openai", "ollama")

# Keys written by the settings screen's key-value store.
SETTINGS_KEYS = {
    "gemini_api_key": "api_key",
    "model": "model",
    "target_language": "target_language",
    "custom_header_text": "header_text",
    "custom_header_color": "header_color",
    "custom_footer_text": "footer_text",
    "custom_footer_color": "footer_color",
}


@dataclass(frozen=True)
class HeaderFooter:
    """Optional header and footer cues added after translation."""

    header_text: str = ""
    header_color: str = DEFAULT_HEADER_COLOR
    footer_text: str = ""
    footer_color: str = DEFAULT_FOOTER_COLOR


@dataclass
class Config:
    """Application configuration loaded from environment."""

    provider: str = "openai"
    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    target_language: str = DEFAULT_TARGET_LANGUAGE
    ollama_host: str | None = None
    batch_chars: int = 3000
    renumber: bool = False
    header_text: str = ""
    header_color: str = DEFAULT_HEADER_COLOR
    footer_text: str = ""
    footer_color: str = DEFAULT_FOOTER_COLOR

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        load_dotenv()
        provider = os.getenv("SUBTRANSLATE_PROVIDER", "openai")
        if provider not in PROVIDERS:
            raise ConfigError(f"Unknown translation provider: {provider}")

        batch_chars = os.getenv("SUBTRANSLATE_BATCH_CHARS", "3000")
        try:
            batch_chars_value = int(batch_chars)
        except ValueError:
            raise ConfigError(f"SUBTRANSLATE_BATCH_CHARS must be an integer, got {batch_chars!r}")

        return cls(
            provider=provider,
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("OPENAI_API_KEY"),
            base_url=os.getenv("SUBTRANSLATE_BASE_URL", DEFAULT_BASE_URL),
            model=os.getenv(
                "SUBTRANSLATE_MODEL",
                DEFAULT_OLLAMA_MODEL if provider == "ollama" else DEFAULT_MODEL,
            ),
            target_language=os.getenv("SUBTRANSLATE_TARGET_LANG", DEFAULT_TARGET_LANGUAGE),
            ollama_host=os.getenv("OLLAMA_HOST"),
            batch_chars=batch_chars_value,
            header_text=os.getenv("SUBTRANSLATE_HEADER_TEXT", ""),
            header_color=os.getenv("SUBTRANSLATE_HEADER_COLOR", DEFAULT_HEADER_COLOR),
            footer_text=os.getenv("SUBTRANSLATE_FOOTER_TEXT", ""),
            footer_color=os.getenv("SUBTRANSLATE_FOOTER_COLOR", DEFAULT_FOOTER_COLOR),
        )

    def with_settings(self, settings: Mapping[str, str | None]) -> "Config":
        """Overlay persisted key-value settings; absent or empty keys keep current values.

        Header and footer text are the exception: an explicitly stored empty
        string switches the cue off.
        """
        updates = {}
        for key, attr in SETTINGS_KEYS.items():
            value = settings.get(key)
            if value is None:
                continue
            if value == "" and attr not in ("header_text", "footer_text"):
                continue
            updates[attr] = value
        return replace(self, **updates)

    @classmethod
    def from_settings(cls, settings: Mapping[str, str | None]) -> "Config":
        """Build a configuration from persisted key-value settings alone."""
        return cls().with_settings(settings)

    def has_api_key(self) -> bool:
        """Check if a credential is configured."""
        return bool(self.api_key)

    def header_footer(self) -> HeaderFooter:
        """Header/footer settings for post-processing."""
        return HeaderFooter(
            header_text=self.header_text,
            header_color=self.header_color,
            footer_text=self.footer_text,
            footer_color=self.footer_color,
        )

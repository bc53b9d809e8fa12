"""Subtitle translation using LLMs (OpenAI-compatible APIs and Ollama)."""

import asyncio
import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Callable, Protocol

import ollama
from openai import APIError, AsyncOpenAI

from .config import Config
from .errors import ConfigError, TranslationFailed
from .models import SubtitleBlock

logger = logging.getLogger(__name__)

LogCallback = Callable[[str], None]
ProgressCallback = Callable[[dict[int, str]], None]

TRANSLATION_SYSTEM_PROMPT = """You are a professional subtitle translator. Translate the following subtitles into {target_lang}.

Rules:
1. Preserve the exact JSON structure - only translate the "text" field
2. Keep translations natural and appropriate for subtitles (concise, readable)
3. Keep formatting tags such as <i> or <font color="..."> and line breaks in place
4. Do not add or remove subtitle entries
5. Return ONLY valid JSON, no other text

Input format: [{{"index": 1, "text": "original text"}}, ...]
Output format: [{{"index": 1, "text": "translated text"}}, ...]"""

MAX_RETRIES = 3
RETRY_DELAY = 1.0


class TranslationService(Protocol):
    """Anything the orchestrator can hand a parsed document to."""

    async def translate(
        self,
        subtitles: list[SubtitleBlock],
        *,
        api_key: str | None,
        model: str,
        add_log: LogCallback,
        on_progress: ProgressCallback,
    ) -> dict[int, str]: ...


def _batch_subtitles(subtitles: list[SubtitleBlock], max_chars: int = 3000) -> list[list[SubtitleBlock]]:
    """Split subtitles into batches to stay within token limits."""
    batches = []
    current_batch = []
    current_chars = 0

    for sub in subtitles:
        sub_chars = len(sub.text) + 50
        if current_chars + sub_chars > max_chars and current_batch:
            batches.append(current_batch)
            current_batch = []
            current_chars = 0
        current_batch.append(sub)
        current_chars += sub_chars

    if current_batch:
        batches.append(current_batch)

    return batches


def _fix_json(text: str) -> str:
    """Attempt to fix common JSON issues from LLM output."""
    # Remove markdown code blocks
    text = re.sub(r'^```(?:json)?\s*', '', text, flags=re.MULTILINE)
    text = re.sub(r'^```\s*$', '', text, flags=re.MULTILINE)

    match = re.search(r'\[.*\]', text, re.DOTALL)
    if not match:
        raise ValueError("Could not find JSON array in response")

    json_str = match.group()

    # Trailing commas before ] or }
    json_str = re.sub(r',\s*]', ']', json_str)
    json_str = re.sub(r',\s*}', '}', json_str)

    # Raw newlines inside string values are invalid JSON; escape them
    def escape_newlines(m: re.Match) -> str:
        return m.group(0).replace('\r', '').replace('\n', '\\n')

    json_str = re.sub(r'"(?:[^"\\]|\\.)*"', escape_newlines, json_str, flags=re.DOTALL)

    return json_str


def _parse_translation_response(response: str, batch: list[SubtitleBlock]) -> dict[int, str]:
    """Parse an LLM reply into index -> translated text for the cues in this batch."""
    try:
        translated = json.loads(_fix_json(response))
    except (json.JSONDecodeError, ValueError) as e:
        raise ValueError(f"Invalid JSON in response: {e}\nResponse: {response[:500]}")

    if not isinstance(translated, list):
        raise ValueError("Response is not a JSON array")

    wanted = {sub.index for sub in batch}
    result = {}
    for item in translated:
        if not isinstance(item, dict):
            continue
        try:
            index = int(item["index"])
            text = item["text"]
        except (KeyError, TypeError, ValueError):
            continue
        if index in wanted and isinstance(text, str):
            result[index] = text

    return result


class BatchTranslator(ABC):
    """Batched LLM translation with retries and per-batch progress reports.

    Subclasses implement ``_complete`` for one chat round-trip.
    """

    retryable: tuple[type[BaseException], ...] = (ValueError,)

    def __init__(
        self,
        config: Config,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
    ):
        self.config = config
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    @abstractmethod
    async def _complete(self, messages: list[dict[str, str]], api_key: str | None, model: str) -> str:
        """Send one chat round-trip and return the raw reply text."""

    def _messages(self, batch: list[SubtitleBlock]) -> list[dict[str, str]]:
        input_data = [{"index": s.index, "text": s.text} for s in batch]
        return [
            {
                "role": "system",
                "content": TRANSLATION_SYSTEM_PROMPT.format(target_lang=self.config.target_language),
            },
            {"role": "user", "content": json.dumps(input_data, ensure_ascii=False)},
        ]

    async def _translate_batch(
        self,
        batch: list[SubtitleBlock],
        api_key: str | None,
        model: str,
        add_log: LogCallback,
    ) -> dict[int, str]:
        """Translate a single batch with retry logic."""
        messages = self._messages(batch)
        for attempt in range(1, self.max_retries + 1):
            try:
                reply = await self._complete(messages, api_key, model)
                return _parse_translation_response(reply, batch)
            except self.retryable as e:
                logger.warning("Batch attempt %d/%d failed: %s", attempt, self.max_retries, e)
                if attempt == self.max_retries:
                    raise TranslationFailed(str(e) or type(e).__name__) from e
                add_log(f"Retrying batch ({attempt}/{self.max_retries - 1})...")
                await asyncio.sleep(self.retry_delay)

        raise TranslationFailed("Batch translation did not run")

    async def translate(
        self,
        subtitles: list[SubtitleBlock],
        *,
        api_key: str | None,
        model: str,
        add_log: LogCallback,
        on_progress: ProgressCallback,
    ) -> dict[int, str]:
        """Translate subtitles batch by batch, reporting each finished batch."""
        batches = _batch_subtitles(subtitles, max_chars=self.config.batch_chars)
        translated: dict[int, str] = {}

        for i, batch in enumerate(batches, start=1):
            add_log(f"Translating batch {i}/{len(batches)} ({len(batch)} lines)...")
            batch_translated = await self._translate_batch(batch, api_key, model, add_log)
            translated.update(batch_translated)
            on_progress(batch_translated)

        return translated


class OpenAITranslator(BatchTranslator):
    """Translate through any OpenAI-compatible chat completions endpoint."""

    retryable = (ValueError, APIError)

    async def _complete(self, messages: list[dict[str, str]], api_key: str | None, model: str) -> str:
        key = api_key or self.config.api_key
        if not key:
            raise TranslationFailed("API key not configured")

        client = AsyncOpenAI(api_key=key, base_url=self.config.base_url)
        async with client:
            response = await client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=0.3,
            )

        content = response.choices[0].message.content
        if not content:
            raise ValueError("Empty response from model")
        return content


class OllamaTranslator(BatchTranslator):
    """Translate using a local Ollama server."""

    retryable = (ValueError, ollama.ResponseError)

    async def _complete(self, messages: list[dict[str, str]], api_key: str | None, model: str) -> str:
        client = ollama.AsyncClient(host=self.config.ollama_host)
        response = await client.chat(
            model=model,
            messages=messages,
            options={"temperature": 0.3},
        )
        return response["message"]["content"]


def build_translator(config: Config) -> BatchTranslator:
    """Create the translator for the configured provider."""
    if config.provider == "openai":
        return OpenAITranslator(config)
    elif config.provider == "ollama":
        return OllamaTranslator(config)
    else:
        raise ConfigError(f"Unknown translation provider: {config.provider}")

"""Translation engines behind the ``translate(text) -> text`` seam.

RU: Движки перевода за интерфейсом ``translate(text) -> text``.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from openai import OpenAIError

from asciidoc_bt.core.errors import ConfigError, TranslationError
from asciidoc_bt.core.io import count_tokens
from asciidoc_bt.core.prompts import TranslationMode, get_system_prompt
from asciidoc_bt.providers.llm import LLMClient

logger = logging.getLogger(__name__)


class Translator(ABC):
    """Markup-unaware engine that turns source text into target text."""

    @abstractmethod
    async def translate(self, text: str) -> str:
        ...


class EchoTranslator(Translator):
    """Returns the input unchanged; used for dry runs."""

    async def translate(self, text: str) -> str:
        return text


class LLMTranslator(Translator):
    """Translator backed by a chat model."""

    def __init__(
        self,
        mode: TranslationMode,
        *,
        llm_client: Optional[LLMClient] = None,
        model: str = "gpt-4o-mini",
        temperature: Optional[float] = 0.0,
        max_retries: int = 2,
        max_input_tokens: int = 6000,
        retry_delay: float = 1.0,
        prompts_path: Optional[str | Path] = None,
    ) -> None:
        self.mode = mode
        if llm_client is None:
            try:
                llm_client = LLMClient(model=model, temperature=temperature)
            except OpenAIError as exc:
                raise ConfigError(
                    f"OpenAI client is not configured (set OPENAI_API_KEY): {exc}",
                    code="no_api_key",
                ) from exc
        self.llm = llm_client
        self.temperature = temperature
        self.max_retries = max_retries
        self.max_input_tokens = max_input_tokens
        self.retry_delay = retry_delay
        self.system_prompt = get_system_prompt(mode, prompts_path)
        self.tokens_sent = 0

    async def translate(self, text: str) -> str:
        n_tokens = count_tokens(text)
        if n_tokens > self.max_input_tokens:
            raise TranslationError(
                f"Paragraph has {n_tokens} tokens, limit is {self.max_input_tokens}.",
                code="too_long",
                details={"tokens": n_tokens},
            )

        attempts = self.max_retries + 1
        last_exc: Optional[Exception] = None
        for attempt in range(1, attempts + 1):
            try:
                response = await self.llm.complete(self.system_prompt, text, temperature=self.temperature)
            except (OpenAIError, ConnectionError, asyncio.TimeoutError) as exc:
                last_exc = exc
                logger.warning("Translation attempt %d/%d failed: %s", attempt, attempts, exc)
                if attempt < attempts:
                    await asyncio.sleep(self.retry_delay * attempt)
                continue

            self.tokens_sent += response.prompt_tokens or n_tokens
            if response.truncated:
                raise TranslationError(
                    f"Translation of a {n_tokens}-token paragraph was cut off by the model output limit.",
                    code="truncated",
                    details={"tokens": n_tokens},
                )
            logger.debug(
                "Translated %d chars (%s): total_tokens=%s",
                len(text),
                self.mode.name,
                response.total_tokens,
            )
            return response.content

        raise TranslationError(
            f"Translation failed after {attempts} attempts: {last_exc}",
            code="engine_failed",
        ) from last_exc

"""Async OpenAI chat client that carries translation requests.

RU: Асинхронный клиент OpenAI Chat Completions для запросов перевода.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from dotenv import find_dotenv, load_dotenv
from openai import AsyncOpenAI

_dotenv_path = find_dotenv(filename=".env", usecwd=True)
if _dotenv_path:
    load_dotenv(_dotenv_path, override=False)

logger = logging.getLogger(__name__)


@dataclass
class ChatMessage:
    role: str
    content: str


@dataclass
class LLMResponse:
    """Completion text with usage and the reason generation stopped."""

    content: str
    model: str
    finish_reason: Optional[str]
    prompt_tokens: Optional[int]
    total_tokens: Optional[int]

    @property
    def truncated(self) -> bool:
        # the model hit its output limit: the paragraph is cut off
        return self.finish_reason == "length"


class LLMClient:
    """
    Chat completions for one model.

    RU: Запросы к одной модели. Ответ возвращается без strip(): переводы
    строк на краях абзаца значимы.
    """

    def __init__(
        self,
        model: str,
        *,
        temperature: Optional[float] = None,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self._client = client or AsyncOpenAI()

    def _request(self, messages: Sequence[ChatMessage], temperature: Optional[float]) -> Dict[str, Any]:
        if not messages:
            raise ValueError("messages must contain at least one message.")
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
        }
        eff_temperature = temperature if temperature is not None else self.temperature
        if eff_temperature is not None:
            request["temperature"] = eff_temperature
        return request

    async def generate(
        self,
        messages: Sequence[ChatMessage],
        *,
        temperature: Optional[float] = None,
    ) -> LLMResponse:
        request = self._request(messages, temperature)
        logger.debug(
            "LLM request: model=%s, messages=%d, temperature=%s",
            self.model,
            len(request["messages"]),
            request.get("temperature"),
        )

        response = await self._client.chat.completions.create(**request)
        choice = response.choices[0]
        usage = getattr(response, "usage", None)

        return LLMResponse(
            content=choice.message.content or "",
            model=response.model or self.model,
            finish_reason=getattr(choice, "finish_reason", None),
            prompt_tokens=getattr(usage, "prompt_tokens", None) if usage else None,
            total_tokens=getattr(usage, "total_tokens", None) if usage else None,
        )

    async def complete(
        self,
        instructions: str,
        text: str,
        *,
        temperature: Optional[float] = None,
    ) -> LLMResponse:
        """System instructions followed by a single user turn with ``text``."""
        messages: List[ChatMessage] = [
            ChatMessage(role="system", content=instructions),
            ChatMessage(role="user", content=text),
        ]
        return await self.generate(messages, temperature=temperature)

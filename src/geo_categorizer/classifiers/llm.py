import os
from typing import Any

from openai import OpenAI

from geo_categorizer.logger import get_logger

from .base import ChatModel, Message, ModelTurn, ToolCall

logger = get_logger(__name__)


class OpenAIChatModel(ChatModel):
    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        # Retries belong to the caller; a failed turn surfaces immediately.
        self.client = OpenAI(
            api_key=api_key or os.getenv("OPENAI_API_KEY"),
            base_url=base_url or os.getenv("OPENAI_BASE_URL") or None,
            timeout=timeout,
            max_retries=0,
        )
        self.model = model

    def complete(
        self,
        messages: list[Message],
        tools: list[dict[str, Any]] | None = None,
        temperature: float = 0.0,
    ) -> ModelTurn:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if tools:
            kwargs["tools"] = tools

        completion = self.client.chat.completions.create(**kwargs)
        return self._to_turn(completion)

    @staticmethod
    def _to_turn(completion: Any) -> ModelTurn:
        choices = getattr(completion, "choices", None)
        if not choices:
            logger.warning("[LLM] Completion returned no choices.")
            return ModelTurn()

        message = choices[0].message
        text = getattr(message, "content", None)
        raw_calls = getattr(message, "tool_calls", None) or []

        calls: list[ToolCall] = []
        for raw in raw_calls:
            function = getattr(raw, "function", None)
            if function is None:
                continue
            calls.append(
                ToolCall(
                    id=raw.id,
                    name=function.name,
                    arguments=function.arguments or "",
                )
            )

        return ModelTurn(text=text if isinstance(text, str) else "", tool_calls=tuple(calls))

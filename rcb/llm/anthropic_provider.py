"""Anthropic messages API with JSON parsed from the reply text."""

from typing import Any

from anthropic import Anthropic

from rcb.llm.base import JSON_INSTRUCTION, T, parse_structured


class AnthropicProvider:
    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-3-5-sonnet-20241022",
        timeout: float | None = None,
    ):
        self._client = Anthropic(api_key=api_key, timeout=timeout)
        self._model = model

    def complete(self, prompt: str, **kwargs: Any) -> str:
        # Dashboard model names (gpt-*) do not apply here; always use the configured model
        response = self._client.messages.create(
            model=self._model,
            max_tokens=kwargs.get("max_tokens", 4096),
            temperature=kwargs.get("temperature", 0.7),
            messages=[{"role": "user", "content": prompt}],
        )
        return response.content[0].text if response.content else ""

    def complete_structured(self, prompt: str, schema: type[T], **kwargs: Any) -> T:
        raw = self.complete(f"{prompt}\n\n{JSON_INSTRUCTION}", **kwargs)
        return parse_structured(raw, schema)

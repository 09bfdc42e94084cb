"""OpenAI chat completion with JSON-object output for content generation."""

from typing import Any

from openai import OpenAI

from rcb.llm.base import JSON_INSTRUCTION, T, parse_structured


class OpenAIProvider:
    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o",
        timeout: float | None = None,
    ):
        self._client = OpenAI(api_key=api_key, timeout=timeout)
        self._model = model

    def complete(self, prompt: str, **kwargs: Any) -> str:
        # SDK errors propagate; the content generator maps them to failure kinds
        response = self._client.chat.completions.create(
            model=kwargs.pop("model", None) or self._model,
            messages=[{"role": "user", "content": prompt}],
            **kwargs,
        )
        return response.choices[0].message.content or ""

    def complete_structured(self, prompt: str, schema: type[T], **kwargs: Any) -> T:
        raw = self.complete(
            f"{prompt}\n\n{JSON_INSTRUCTION}",
            response_format={"type": "json_object"},
            **kwargs,
        )
        return parse_structured(raw, schema)

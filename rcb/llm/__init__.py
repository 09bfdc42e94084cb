"""LLM adapter layer: OpenAI and Anthropic behind a common protocol."""

from rcb.config import Settings
from rcb.llm.anthropic_provider import AnthropicProvider
from rcb.llm.base import LLMProvider
from rcb.llm.openai_provider import OpenAIProvider


def get_provider(provider_name: str, **kwargs: object) -> LLMProvider:
    """Return the configured LLM provider. provider_name: 'openai' | 'anthropic'."""
    if provider_name.lower() == "anthropic":
        return AnthropicProvider(**kwargs)
    return OpenAIProvider(**kwargs)


def provider_from_settings(settings: Settings) -> LLMProvider:
    if settings.rcb_llm_provider.lower() == "anthropic":
        return get_provider(
            "anthropic",
            api_key=settings.anthropic_api_key,
            model=settings.rcb_anthropic_model,
            timeout=settings.rcb_generation_timeout,
        )
    return get_provider(
        "openai",
        api_key=settings.openai_api_key,
        model=settings.rcb_openai_model,
        timeout=settings.rcb_generation_timeout,
    )


__all__ = ["LLMProvider", "OpenAIProvider", "AnthropicProvider", "get_provider", "provider_from_settings"]

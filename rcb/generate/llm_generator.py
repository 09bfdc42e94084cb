"""Model-backed content generator: one prompt, one JSON response per product."""

from __future__ import annotations

import asyncio
import json
import logging
import re
from pathlib import Path

import anthropic
import httpx
import openai
from jinja2 import Environment, FileSystemLoader
from pydantic import ValidationError

from rcb.errors import GenerationFailure, NetworkFailure
from rcb.generate.template_generator import build_metadata
from rcb.generate.templates import CARE_PROFILES
from rcb.generate.validation import ensure_valid
from rcb.llm.base import LLMProvider
from rcb.schemas.catalog import Product
from rcb.schemas.content import AISearchContent, ContentConfig, GeneratedSections

logger = logging.getLogger(__name__)
PROMPTS_DIR = Path(__file__).resolve().parent.parent / "prompts"
MAX_DESCRIPTION_CHARS = 2_000

_TAG_RE = re.compile(r"<[^>]+>")

_NETWORK_ERRORS = (
    openai.APIConnectionError,
    anthropic.APIConnectionError,
    httpx.TransportError,
    ConnectionError,
)
_API_ERRORS = (openai.APIError, anthropic.APIError)


def render_prompt(product: Product, config: ContentConfig) -> str:
    env = Environment(loader=FileSystemLoader(str(PROMPTS_DIR)))
    description = _TAG_RE.sub(" ", product.description or "")
    description = " ".join(description.split())[:MAX_DESCRIPTION_CHARS]
    return env.get_template("content.j2").render(
        product=product,
        config=config,
        description=description,
        profile=CARE_PROFILES.get(config.template_type),
    )


class LLMContentGenerator:
    """Generate content through an ``LLMProvider``.

    The provider SDKs are synchronous, so each call runs in a worker thread.
    Transport errors become ``NetworkFailure``; API errors and unparsable or
    schema-violating replies become ``GenerationFailure``.
    """

    def __init__(self, provider: LLMProvider, *, provider_name: str = "openai"):
        self._provider = provider
        self._provider_name = provider_name
        # Dashboard model choices are OpenAI model ids
        self._pass_model = provider_name == "openai"

    async def generate(self, product: Product, config: ContentConfig) -> AISearchContent:
        prompt = render_prompt(product, config)
        kwargs = {"model": config.ai_model} if self._pass_model else {}
        try:
            sections = await asyncio.to_thread(
                self._provider.complete_structured, prompt, GeneratedSections, **kwargs
            )
        except _NETWORK_ERRORS as e:
            raise NetworkFailure(f"Model API unreachable for {product.name}: {e}") from e
        except _API_ERRORS as e:
            raise GenerationFailure(f"Model API error for {product.name}: {e}") from e
        except (json.JSONDecodeError, ValidationError) as e:
            raise GenerationFailure(f"Unparsable model output for {product.name}: {e}") from e

        content = AISearchContent(
            product_id=product.product_id,
            **sections.model_dump(),
            metadata=build_metadata(product, config, self._sources(config)),
        )
        ensure_valid(content, config.validation)
        logger.debug("Generated content for product %s via model", product.product_id)
        return content

    def _sources(self, config: ContentConfig) -> list[str]:
        origin = f"{self._provider_name}:{config.ai_model}" if self._pass_model else self._provider_name
        return [origin, "Fish Database", "Care Guides"]

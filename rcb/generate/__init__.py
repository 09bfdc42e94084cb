"""Content generators: deterministic templates or a language model."""

import logging

from rcb.config import Settings
from rcb.generate.base import ContentGenerator
from rcb.generate.llm_generator import LLMContentGenerator
from rcb.generate.template_generator import TemplateContentGenerator
from rcb.generate.validation import ensure_valid, validate_content

logger = logging.getLogger(__name__)


def build_generator(settings: Settings) -> ContentGenerator:
    """Generator selected by RCB_GENERATOR (template | llm)."""
    if settings.rcb_generator.lower() == "llm":
        from rcb.llm import provider_from_settings

        provider_name = settings.rcb_llm_provider.lower()
        logger.info("Using model-backed content generator (%s)", provider_name)
        return LLMContentGenerator(provider_from_settings(settings), provider_name=provider_name)
    logger.info("Using template content generator")
    return TemplateContentGenerator()


__all__ = [
    "ContentGenerator",
    "LLMContentGenerator",
    "TemplateContentGenerator",
    "build_generator",
    "ensure_valid",
    "validate_content",
]

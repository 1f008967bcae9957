"""LLM endpoints for the remote idea backend.

The primary endpoint comes from OPENAI_*; an OpenRouter endpoint is appended
as fallback when OPENROUTER_API_KEY and OPENROUTER_MODEL_NAME are both set.
"""

from __future__ import annotations

import logging
import os

from crewai import LLM
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class LLMEndpoint(BaseModel):
    """Connection details for one idea-generating model."""

    label: str
    model: str = Field(..., min_length=1)
    api_key: str = Field(..., min_length=1)
    base_url: str = ""


def primary_endpoint() -> LLMEndpoint:
    """Endpoint from OPENAI_BASE_URL / OPENAI_API_KEY / OPENAI_MODEL_NAME.

    Raises:
        ValueError: If the key or model name is missing.
    """
    api_key = os.getenv("OPENAI_API_KEY", "")
    model_name = os.getenv("OPENAI_MODEL_NAME", "")
    if not api_key:
        raise ValueError("OPENAI_API_KEY is not set")
    if not model_name:
        raise ValueError("OPENAI_MODEL_NAME is not set")
    return LLMEndpoint(
        label="primary",
        model=model_name,
        api_key=api_key,
        base_url=os.getenv("OPENAI_BASE_URL", ""),
    )


def openrouter_endpoint() -> LLMEndpoint | None:
    api_key = os.getenv("OPENROUTER_API_KEY", "")
    model_name = os.getenv("OPENROUTER_MODEL_NAME", "")
    if not api_key or not model_name:
        logger.info("OpenRouter fallback not configured")
        return None
    if not model_name.startswith("openrouter/"):
        model_name = f"openrouter/{model_name}"
    return LLMEndpoint(
        label="openrouter",
        model=model_name,
        api_key=api_key,
        base_url=OPENROUTER_BASE_URL,
    )


def create_llm(endpoint: LLMEndpoint) -> LLM:
    kwargs: dict = {"model": endpoint.model, "api_key": endpoint.api_key}
    if endpoint.base_url:
        kwargs["base_url"] = endpoint.base_url
    logger.info("Idea LLM %s: model=%s base_url=%s", endpoint.label, endpoint.model, endpoint.base_url or "(default)")
    return LLM(**kwargs)


def get_available_llms() -> list[tuple[str, LLM]]:
    """Configured (label, LLM) pairs in fallback order; may be empty."""
    endpoints: list[LLMEndpoint] = []
    try:
        endpoints.append(primary_endpoint())
    except ValueError as e:
        logger.warning("Primary LLM not available: %s", e)

    fallback = openrouter_endpoint()
    if fallback is not None:
        endpoints.append(fallback)

    return [(ep.label, create_llm(ep)) for ep in endpoints]

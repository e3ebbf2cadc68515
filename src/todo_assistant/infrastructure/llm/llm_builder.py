"""
infrastructure.llm.llm_builder - Centralized chat model construction.

Single source of truth for building the chat model used by the model
gateway. The provider is controlled by the LLM_PROVIDER setting.

Supported providers:
    - "gemini"  → langchain_google_genai.ChatGoogleGenerativeAI
    - "openai"  → langchain_openai.ChatOpenAI
    - "groq"    → langchain_groq.ChatGroq
    - "ollama"  → langchain_ollama.ChatOllama

Client-side retries are switched off: the gateway's own retry policy is the
only one that applies.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from langchain_core.language_models import BaseChatModel

logger = logging.getLogger(__name__)


def build_llm(
    *,
    provider: str,
    model: str,
    api_key: str = "",
    temperature: float = 0,
    ollama_base_url: str = "http://localhost:11434/",
    json_mode: bool = True,
) -> BaseChatModel:
    """Build a chat model for the given provider.

    Args:
        provider: One of "gemini", "openai", "groq", "ollama".
        model: Model name for the selected provider.
        api_key: Credential for hosted providers (ignored for ollama).
        temperature: Sampling temperature.
        ollama_base_url: Ollama server URL (only used when provider="ollama").
        json_mode: Ask the provider for JSON-only output where supported.

    Returns:
        A configured LangChain chat model.

    Raises:
        ValueError: If the provider is unknown or required credentials are missing.
    """
    provider = provider.lower().strip()

    if provider == "gemini":
        from langchain_google_genai import ChatGoogleGenerativeAI

        if not api_key:
            raise ValueError("MODEL_API_KEY (or GEMINI_API_KEY) is required when LLM_PROVIDER='gemini'")

        logger.info("Building Gemini chat model (model=%s)", model)
        return ChatGoogleGenerativeAI(
            model=model,
            google_api_key=api_key,
            temperature=temperature,
            max_retries=0,
        )

    elif provider == "openai":
        from langchain_openai import ChatOpenAI

        if not api_key:
            raise ValueError("MODEL_API_KEY (or OPENAI_API_KEY) is required when LLM_PROVIDER='openai'")

        kwargs: Dict[str, Any] = {
            "model": model,
            "temperature": temperature,
            "openai_api_key": api_key,
            "max_retries": 0,
        }
        if json_mode:
            kwargs["model_kwargs"] = {"response_format": {"type": "json_object"}}

        logger.info("Building OpenAI chat model (model=%s, json_mode=%s)", model, json_mode)
        return ChatOpenAI(**kwargs)

    elif provider == "groq":
        from langchain_groq import ChatGroq

        if not api_key:
            raise ValueError("MODEL_API_KEY (or GROQ_API_KEY) is required when LLM_PROVIDER='groq'")

        kwargs = {
            "model": model,
            "temperature": temperature,
            "groq_api_key": api_key,
            "max_tokens": 512,
            "max_retries": 0,
        }
        if json_mode:
            kwargs["model_kwargs"] = {"response_format": {"type": "json_object"}}

        logger.info("Building Groq chat model (model=%s, json_mode=%s)", model, json_mode)
        return ChatGroq(**kwargs)

    elif provider == "ollama":
        from langchain_ollama import ChatOllama

        kwargs = {
            "model": model,
            "temperature": temperature,
            "base_url": ollama_base_url,
        }
        if json_mode:
            kwargs["format"] = "json"

        logger.info("Building ChatOllama (model=%s, json_mode=%s)", model, json_mode)
        return ChatOllama(**kwargs)

    else:
        raise ValueError(
            f"Unsupported LLM_PROVIDER: '{provider}'. "
            "Must be 'gemini', 'openai', 'groq', or 'ollama'."
        )

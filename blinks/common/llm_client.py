"""
Provider-agnostic LLM client for Blinks processors.

Supports Anthropic, OpenAI, and Google Gemini with a shared text-generation
interface, plus the access check and retry policy every processor goes
through.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .errors import AIAccessError

logger = logging.getLogger("blinks.common.llm_client")

# Decoding temperature per creativity level
CREATIVITY = {
    "none": 0.0,
    "low": 0.2,
    "medium": 0.7,
}

AI_ACCESS_MESSAGE = (
    "AI features require a configured LLM provider. "
    "Please upgrade your setup with an API key to access AI features."
)


class LLMClient:
    """Unified text generation client across LLM providers."""

    def __init__(
        self,
        provider: str = "google",
        model: str = "",
        anthropic_api_key: Optional[str] = None,
        openai_api_key: Optional[str] = None,
        google_api_key: Optional[str] = None,
    ) -> None:
        self.provider = (provider or "google").lower()
        self.model = model
        self._client = None

        if self.provider == "anthropic":
            if not anthropic_api_key:
                logger.info("%s API key not provided, LLM client unavailable", self.provider)
                return
            try:
                import anthropic

                self._client = anthropic.Anthropic(api_key=anthropic_api_key)
            except ImportError:
                logger.warning("anthropic package not installed")
            except Exception as e:
                logger.warning("Failed to initialize Anthropic client: %s", e)
            return

        if self.provider == "openai":
            if not openai_api_key:
                logger.info("%s API key not provided, LLM client unavailable", self.provider)
                return
            try:
                from openai import OpenAI

                self._client = OpenAI(api_key=openai_api_key)
            except ImportError:
                logger.warning("openai package not installed")
            except Exception as e:
                logger.warning("Failed to initialize OpenAI client: %s", e)
            return

        if self.provider == "google":
            if not google_api_key:
                logger.info("%s API key not provided, LLM client unavailable", self.provider)
                return
            try:
                import google.generativeai as genai

                genai.configure(api_key=google_api_key)
                self._client = genai  # Store the module, not a model instance
                self._google_models = {}
            except ImportError:
                logger.warning("google-generativeai package not installed")
            except Exception as e:
                logger.warning("Failed to initialize Gemini client: %s", e)
            return

        logger.warning("Unsupported LLM provider: %s", self.provider)

    @classmethod
    def from_config(cls, llm_config) -> "LLMClient":
        models = {
            "anthropic": llm_config.anthropic_model,
            "openai": llm_config.openai_model,
            "google": llm_config.google_model,
        }
        return cls(
            provider=llm_config.provider,
            model=models.get((llm_config.provider or "").lower(), ""),
            anthropic_api_key=llm_config.anthropic_api_key or None,
            openai_api_key=llm_config.openai_api_key or None,
            google_api_key=llm_config.google_api_key or None,
        )

    @property
    def is_available(self) -> bool:
        return self._client is not None

    def generate(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        max_tokens: int = 512,
        temperature: float = 0.2,
        timeout: float = 30.0,
    ) -> str:
        if not self.is_available:
            raise RuntimeError("LLM client is not available")

        if self.provider == "anthropic":
            kwargs = {}
            if system:
                kwargs["system"] = system
            response = self._client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
                timeout=timeout,
                **kwargs,
            )
            return response.content[0].text.strip()

        if self.provider == "openai":
            messages = []
            if system:
                messages.append({"role": "system", "content": system})
            messages.append({"role": "user", "content": prompt})
            response = self._client.chat.completions.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=messages,
                timeout=timeout,
            )
            return (response.choices[0].message.content or "").strip()

        if self.provider == "google":
            cache_key = system or ""
            if cache_key not in self._google_models:
                kwargs = {"model_name": self.model}
                if system:
                    kwargs["system_instruction"] = system
                self._google_models[cache_key] = self._client.GenerativeModel(**kwargs)
            model = self._google_models[cache_key]
            response = model.generate_content(
                prompt,
                generation_config={"max_output_tokens": max_tokens, "temperature": temperature},
                request_options={"timeout": timeout},
            )
            return response.text.strip()

        raise RuntimeError(f"Unsupported LLM provider: {self.provider}")


def check_ai_access(client: LLMClient) -> None:
    """Raise AIAccessError unless the client can make requests."""
    if client is None or not client.is_available:
        raise AIAccessError(AI_ACCESS_MESSAGE)


def ask_with_retry(
    client: LLMClient,
    prompt: str,
    *,
    creativity: str = "low",
    max_retries: int = 2,
    max_tokens: int = 512,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """
    Ask the model, retrying failed calls with exponential backoff (1s, 2s, ...).

    The access check runs first and is never retried. After ``max_retries``
    retries the last error is raised.
    """
    check_ai_access(client)
    temperature = CREATIVITY.get(creativity, CREATIVITY["low"])

    for attempt in range(max_retries + 1):
        try:
            return client.generate(prompt, max_tokens=max_tokens, temperature=temperature)
        except Exception as e:
            if attempt == max_retries:
                raise
            delay = 2 ** attempt
            logger.info("LLM call failed (%s), retrying in %ss", e, delay)
            sleep(delay)

    raise RuntimeError("Max retries exceeded")

"""OpenAI provider implementation."""

import os
from typing import Optional

from .base import LLMProvider, LLMResponse
from .errors import ProviderError


class OpenAIProvider(LLMProvider):
    """Provider for OpenAI chat models."""

    MODELS = {
        "gpt-4o": "gpt-4o",
        "gpt-4o-mini": "gpt-4o-mini",
        "gpt-4-turbo": "gpt-4-turbo",
        "gpt-4.1": "gpt-4.1",
        "gpt-4.1-mini": "gpt-4.1-mini",
    }

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key. Falls back to DEEPRABBIT_OPENAI_API_KEY,
                then OPENAI_API_KEY.
            timeout: Request timeout in seconds
        """
        from config import settings

        self.api_key = api_key or settings.openai_api_key or os.environ.get("OPENAI_API_KEY")
        self.timeout = timeout or settings.api_timeout_seconds
        self._client = None

    @property
    def name(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return "gpt-4o"

    def _get_client(self):
        if self._client is None:
            from openai import OpenAI
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    def _resolve_model(self, model: Optional[str]) -> str:
        if model is None:
            return self.default_model
        return self.MODELS.get(model, model)

    def complete(
        self,
        system_prompt: str,
        user_message: str,
        model: Optional[str] = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
        json_mode: bool = False,
    ) -> LLMResponse:
        import openai

        if not self.is_available():
            raise ProviderError(
                "OpenAI API key not configured",
                code=ProviderError.SERVICE_UNAVAILABLE,
            )

        client = self._get_client()
        resolved_model = self._resolve_model(model)

        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = client.chat.completions.create(
                model=resolved_model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_message},
                ],
                **kwargs,
            )
        except openai.RateLimitError as e:
            if getattr(e, "code", None) == "insufficient_quota":
                raise ProviderError("OpenAI quota exceeded", code=ProviderError.QUOTA_EXCEEDED) from e
            raise ProviderError(
                "OpenAI rate limit exceeded", code=ProviderError.RATE_LIMITED, retryable=True
            ) from e
        except openai.OpenAIError as e:
            raise ProviderError(
                f"OpenAI API error: {e}", code=ProviderError.API_ERROR, retryable=True
            ) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ProviderError(
                "Empty response from OpenAI", code=ProviderError.EMPTY_RESPONSE, retryable=True
            )

        return LLMResponse(
            content=content,
            input_tokens=response.usage.prompt_tokens,
            output_tokens=response.usage.completion_tokens,
            model=resolved_model,
            provider=self.name,
        )

    def is_available(self) -> bool:
        return bool(self.api_key)

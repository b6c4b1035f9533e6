"""Anthropic (Claude) provider implementation."""

import os
from typing import Optional

from .base import LLMProvider, LLMResponse
from .errors import ProviderError


class AnthropicProvider(LLMProvider):
    """Provider for Anthropic Claude models.

    The Messages API has no JSON response mode; json_mode only adds a reminder
    to the system prompt.
    """

    MODELS = {
        "claude-sonnet": "claude-sonnet-4-20250514",
        "claude-opus": "claude-opus-4-20250514",
        "claude-haiku": "claude-3-5-haiku-20241022",
        "sonnet": "claude-sonnet-4-20250514",
        "opus": "claude-opus-4-20250514",
        "haiku": "claude-3-5-haiku-20241022",
    }

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None):
        """Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key. Falls back to DEEPRABBIT_ANTHROPIC_API_KEY,
                then ANTHROPIC_API_KEY.
            timeout: Request timeout in seconds
        """
        from config import settings

        self.api_key = api_key or settings.anthropic_api_key or os.environ.get("ANTHROPIC_API_KEY")
        self.timeout = timeout or settings.api_timeout_seconds
        self._client = None

    @property
    def name(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return "claude-sonnet-4-20250514"

    def _get_client(self):
        if self._client is None:
            from anthropic import Anthropic
            self._client = Anthropic(api_key=self.api_key, timeout=self.timeout)
        return self._client

    def _resolve_model(self, model: Optional[str]) -> str:
        """Resolve model alias to full model name."""
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
        import anthropic

        if not self.is_available():
            raise ProviderError(
                "Anthropic API key not configured",
                code=ProviderError.SERVICE_UNAVAILABLE,
            )

        client = self._get_client()
        resolved_model = self._resolve_model(model)
        if json_mode:
            system_prompt = f"{system_prompt}\n\nRespond with a single valid JSON object only."

        try:
            response = client.messages.create(
                model=resolved_model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_message}],
            )
        except anthropic.RateLimitError as e:
            raise ProviderError(
                "Anthropic rate limit exceeded", code=ProviderError.RATE_LIMITED, retryable=True
            ) from e
        except anthropic.AnthropicError as e:
            raise ProviderError(
                f"Anthropic API error: {e}", code=ProviderError.API_ERROR, retryable=True
            ) from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "text") == "text"
        )
        if not text:
            raise ProviderError(
                "Empty response from Anthropic", code=ProviderError.EMPTY_RESPONSE, retryable=True
            )

        return LLMResponse(
            content=text,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=resolved_model,
            provider=self.name,
        )

    def is_available(self) -> bool:
        return bool(self.api_key)

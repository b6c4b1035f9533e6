"""LLM provider abstraction for multi-model support."""

from .base import LLMProvider, LLMResponse
from .errors import ProviderError
from .factory import get_provider, list_providers
from .rate_limiter import RateLimiter, get_rate_limiter, reset_rate_limiter

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "ProviderError",
    "get_provider",
    "list_providers",
    "RateLimiter",
    "get_rate_limiter",
    "reset_rate_limiter",
]

"""Tests for LLM providers, the provider factory and the rate limiter."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai
import pytest

from config import settings
from providers import ProviderError, RateLimiter, get_provider, list_providers
from providers.anthropic_provider import AnthropicProvider
from providers.openai_provider import OpenAIProvider


def openai_completion(content, prompt_tokens=12, completion_tokens=7):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens),
    )


def openai_rate_limit_error(code=None):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(429, request=request)
    body = {"code": code, "message": "slow down"} if code else None
    return openai.RateLimitError("slow down", response=response, body=body)


@pytest.fixture
def no_keys(monkeypatch):
    monkeypatch.setattr(settings, "openai_api_key", "")
    monkeypatch.setattr(settings, "anthropic_api_key", "")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)


class TestOpenAIProvider:
    """Test OpenAI call shaping and error translation."""

    def test_complete(self):
        provider = OpenAIProvider(api_key="sk-test")
        provider._client = MagicMock()
        provider._client.chat.completions.create.return_value = openai_completion('{"a": 1}')

        response = provider.complete("system", "user", model="gpt-4o-mini", json_mode=True)

        assert response.content == '{"a": 1}'
        assert response.input_tokens == 12
        assert response.output_tokens == 7
        assert response.model == "gpt-4o-mini"
        assert response.provider == "openai"
        kwargs = provider._client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0] == {"role": "system", "content": "system"}

    def test_no_json_mode_by_default(self):
        provider = OpenAIProvider(api_key="sk-test")
        provider._client = MagicMock()
        provider._client.chat.completions.create.return_value = openai_completion("hi")
        provider.complete("system", "user")
        assert "response_format" not in provider._client.chat.completions.create.call_args.kwargs

    def test_missing_key(self, no_keys):
        provider = OpenAIProvider()
        assert not provider.is_available()
        with pytest.raises(ProviderError) as exc:
            provider.complete("system", "user")
        assert exc.value.code == ProviderError.SERVICE_UNAVAILABLE

    def test_empty_response(self):
        provider = OpenAIProvider(api_key="sk-test")
        provider._client = MagicMock()
        provider._client.chat.completions.create.return_value = openai_completion("")
        with pytest.raises(ProviderError) as exc:
            provider.complete("system", "user")
        assert exc.value.code == ProviderError.EMPTY_RESPONSE

    def test_rate_limit_translated(self):
        provider = OpenAIProvider(api_key="sk-test")
        provider._client = MagicMock()
        provider._client.chat.completions.create.side_effect = openai_rate_limit_error()
        with pytest.raises(ProviderError) as exc:
            provider.complete("system", "user")
        assert exc.value.code == ProviderError.RATE_LIMITED
        assert exc.value.retryable

    def test_quota_translated(self):
        provider = OpenAIProvider(api_key="sk-test")
        provider._client = MagicMock()
        provider._client.chat.completions.create.side_effect = openai_rate_limit_error("insufficient_quota")
        with pytest.raises(ProviderError) as exc:
            provider.complete("system", "user")
        assert exc.value.code == ProviderError.QUOTA_EXCEEDED
        assert not exc.value.retryable


class TestAnthropicProvider:
    """Test Anthropic call shaping."""

    def test_complete_joins_text_blocks(self):
        provider = AnthropicProvider(api_key="sk-ant-test")
        provider._client = MagicMock()
        provider._client.messages.create.return_value = SimpleNamespace(
            content=[
                SimpleNamespace(type="text", text='{"question": '),
                SimpleNamespace(type="tool_use", text="ignored"),
                SimpleNamespace(type="text", text='"Why?"}'),
            ],
            usage=SimpleNamespace(input_tokens=20, output_tokens=5),
        )

        response = provider.complete("system", "user", model="sonnet", json_mode=True)

        assert response.content == '{"question": "Why?"}'
        assert response.model == "claude-sonnet-4-20250514"
        kwargs = provider._client.messages.create.call_args.kwargs
        assert "single valid JSON object" in kwargs["system"]

    def test_missing_key(self, no_keys):
        with pytest.raises(ProviderError) as exc:
            AnthropicProvider().complete("system", "user")
        assert exc.value.code == ProviderError.SERVICE_UNAVAILABLE


class TestFactory:
    """Test provider lookup."""

    def test_explicit_provider(self):
        assert isinstance(get_provider("anthropic"), AnthropicProvider)
        assert isinstance(get_provider("claude"), AnthropicProvider)
        assert isinstance(get_provider("OpenAI"), OpenAIProvider)

    def test_detect_from_model(self):
        assert isinstance(get_provider(model="claude-sonnet"), AnthropicProvider)
        assert isinstance(get_provider(model="gpt-4o-mini"), OpenAIProvider)

    def test_default_provider(self, monkeypatch):
        monkeypatch.setattr(settings, "default_provider", "anthropic")
        assert isinstance(get_provider(), AnthropicProvider)

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown provider"):
            get_provider("gemini")

    def test_list_providers_skips_aliases(self, no_keys):
        assert list_providers() == {"openai": False, "anthropic": False}


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestRateLimiter:
    """Test the sliding window and session cap."""

    def test_window_limit(self):
        clock = FakeClock()
        limiter = RateLimiter(max_requests=3, window_seconds=60, session_limit=100, clock=clock)
        for _ in range(3):
            limiter.acquire()
        assert not limiter.can_make_request()

        with pytest.raises(ProviderError) as exc:
            limiter.acquire()
        assert exc.value.code == ProviderError.RATE_LIMITED
        assert exc.value.retryable
        assert "Try again in 60 seconds" in str(exc.value)

    def test_window_slides(self):
        clock = FakeClock()
        limiter = RateLimiter(max_requests=2, window_seconds=60, session_limit=100, clock=clock)
        limiter.acquire()
        clock.now += 30
        limiter.acquire()
        assert limiter.wait_time() == pytest.approx(30)

        clock.now += 31
        assert limiter.can_make_request()
        limiter.acquire()

    def test_session_limit_not_retryable(self):
        clock = FakeClock()
        limiter = RateLimiter(max_requests=10, window_seconds=60, session_limit=2, clock=clock)
        limiter.acquire()
        limiter.acquire()
        clock.now += 3600

        with pytest.raises(ProviderError) as exc:
            limiter.acquire()
        assert not exc.value.retryable
        assert "Session limit of 2" in str(exc.value)

    def test_defaults_from_settings(self):
        limiter = RateLimiter()
        assert limiter.max_requests == 10
        assert limiter.session_limit == 100

    def test_stats_and_reset(self):
        clock = FakeClock()
        limiter = RateLimiter(max_requests=5, clock=clock)
        limiter.acquire()
        clock.now += 120
        assert limiter.stats() == {"count": 1, "session_minutes": 2}

        limiter.reset()
        assert limiter.stats() == {"count": 0, "session_minutes": 0}
        assert limiter.wait_time() == 0.0

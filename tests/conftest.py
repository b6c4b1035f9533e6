"""Shared fixtures: keep tests offline and isolate process-wide singletons."""

import pytest

from config import settings
from orchestrator import reset_cost_controller
from providers import LLMResponse, reset_rate_limiter


@pytest.fixture(autouse=True)
def offline(monkeypatch):
    """No test reaches a real LLM unless it injects a provider and opts in."""
    monkeypatch.setattr(settings, "mock_ai_responses", True)
    reset_rate_limiter()
    reset_cost_controller()
    yield


class FakeProvider:
    """Provider stand-in returning queued responses."""

    name = "openai"
    default_model = "gpt-4o"

    def __init__(self, *contents):
        self.contents = list(contents)
        self.calls = []

    def complete(self, system_prompt, user_message, model=None, max_tokens=4096,
                 temperature=0.7, json_mode=False):
        self.calls.append({
            "system_prompt": system_prompt,
            "user_message": user_message,
            "json_mode": json_mode,
            "max_tokens": max_tokens,
        })
        content = self.contents.pop(0)
        if isinstance(content, Exception):
            raise content
        return LLMResponse(
            content=content,
            input_tokens=100,
            output_tokens=50,
            model=model or self.default_model,
            provider=self.name,
        )

    def is_available(self):
        return True


@pytest.fixture
def live_llm(monkeypatch):
    """Turn the LLM path on; tests still supply a FakeProvider."""
    monkeypatch.setattr(settings, "mock_ai_responses", False)

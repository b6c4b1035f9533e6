"""Base agent class that all LLM-backed agents inherit from.

Every agent:
- Calls the LLM with its system prompt + task input
- Validates output against the expected Pydantic contract
- Respects the shared rate limiter
- Tracks token usage for the cost controller
"""

import json
from abc import ABC, abstractmethod
from typing import Type, TypeVar, Optional, Any
from pydantic import BaseModel, ValidationError

from providers import get_provider, get_rate_limiter, LLMProvider, RateLimiter
from config import settings

T = TypeVar("T", bound=BaseModel)


class TokenUsage(BaseModel):
    """Track token usage for cost calculation."""
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    @property
    def total_cost(self) -> float:
        """Calculate cost based on current token pricing."""
        return settings.calculate_cost(self.input_tokens, self.output_tokens)


class AgentResult(BaseModel):
    """Result from an agent run, including output and metadata."""
    output: Any
    token_usage: TokenUsage
    model: str
    provider: str = "openai"
    raw_response: Optional[str] = None
    retries: int = 0


class BaseAgent(ABC):
    """Base class for all DeepRabbit agents.

    Responsibilities:
    - Calls LLM with system prompt + task input
    - Validates output against the expected Pydantic contract
    - Tracks token usage for the cost controller

    Supports the OpenAI and Anthropic providers.
    """

    def __init__(
        self,
        role: str,
        system_prompt: str,
        output_schema: Type[T],
        model: Optional[str] = None,
        provider: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        """Initialize the agent.

        Args:
            role: Agent role, used in log lines and cost records
            system_prompt: The agent's system prompt defining its behavior
            output_schema: Pydantic model class for validating output
            model: Override the default model (e.g., 'gpt-4o', 'claude-sonnet')
            provider: Explicit provider name (openai, anthropic)
                     If not specified, auto-detected from model name or settings
            max_tokens: Maximum response tokens per call
            temperature: Sampling temperature (settings.temperature if None)
            rate_limiter: Limiter to consult before each call (shared one if None)
        """
        self.role = role
        self.system_prompt = system_prompt
        self.output_schema = output_schema
        self.max_tokens = max_tokens or settings.max_tokens_question
        self.temperature = settings.temperature if temperature is None else temperature
        self.rate_limiter = rate_limiter or get_rate_limiter()

        self.llm_provider: LLMProvider = get_provider(provider_name=provider, model=model)
        self.model = model or (
            settings.default_model
            if self.llm_provider.name == settings.default_provider
            else self.llm_provider.default_model
        )

        self.total_usage = TokenUsage()

    @property
    def llm_available(self) -> bool:
        """False when mocking is on or the provider has no credentials."""
        return not settings.mock_ai_responses and self.llm_provider.is_available()

    def _build_full_system_prompt(self) -> str:
        """Build the complete system prompt including the output schema."""
        parts = [self.system_prompt]

        parts.append("\n\n# OUTPUT FORMAT\n")
        parts.append("You MUST respond with valid JSON matching this schema:\n\n")
        parts.append(f"```json\n{json.dumps(self.output_schema.model_json_schema(), indent=2)}\n```")

        return "".join(parts)

    def _parse_and_validate(self, response_text: str) -> T:
        """Parse LLM response and validate against schema.

        Args:
            response_text: Raw text response from LLM

        Returns:
            Validated Pydantic model instance

        Raises:
            ValidationError: If response doesn't match schema
            json.JSONDecodeError: If response isn't valid JSON
        """
        text = response_text.strip()

        # Handle markdown code blocks
        if "```json" in text:
            start = text.find("```json") + 7
            end = text.find("```", start)
            text = text[start:end].strip()
        elif "```" in text:
            start = text.find("```") + 3
            end = text.find("```", start)
            text = text[start:end].strip()
        elif not text.startswith("{") and "{" in text:
            # Prose around a bare JSON object
            text = text[text.find("{"):text.rfind("}") + 1]

        data = json.loads(text)

        return self.output_schema.model_validate(data)

    def _record_usage(self, input_tokens: int, output_tokens: int) -> TokenUsage:
        usage = TokenUsage(input_tokens=input_tokens, output_tokens=output_tokens)
        self.total_usage.input_tokens += usage.input_tokens
        self.total_usage.output_tokens += usage.output_tokens
        return usage

    def complete_text(self, prompt: str, max_tokens: Optional[int] = None, temperature: Optional[float] = None) -> str:
        """Plain-text completion with no schema, for one-line answers.

        Raises:
            ProviderError: On rate limiting or API failure
        """
        self.rate_limiter.acquire()
        response = self.llm_provider.complete(
            system_prompt=self.system_prompt,
            user_message=prompt,
            model=self.model,
            max_tokens=max_tokens or self.max_tokens,
            temperature=self.temperature if temperature is None else temperature,
        )
        self._record_usage(response.input_tokens, response.output_tokens)
        return response.content.strip()

    def run(
        self,
        input_data: BaseModel,
        max_retries: int = 1,
        user_message: Optional[str] = None,
    ) -> AgentResult:
        """Execute the agent.

        Args:
            input_data: Input data as a Pydantic model
            max_retries: Number of retries on validation failure
            user_message: Pre-rendered prompt; defaults to the input as JSON

        Returns:
            AgentResult with validated output and metadata

        Raises:
            ValidationError: If output validation fails after retries
            json.JSONDecodeError: If output is not JSON after retries
            ProviderError: If the LLM call fails or is rate limited
        """
        full_system_prompt = self._build_full_system_prompt()
        base_message = user_message or f"# INPUT\n\n{input_data.model_dump_json(indent=2)}"
        message = base_message

        last_error = None
        retries = 0

        for attempt in range(max_retries + 1):
            try:
                # Add error context on retry
                if attempt > 0 and last_error:
                    message = (
                        f"{base_message}\n\n"
                        f"# PREVIOUS ERROR\n\n"
                        f"Your previous response did not match the required schema. "
                        f"Error: {last_error}\n\n"
                        f"Please fix the issues and provide a valid JSON response."
                    )
                    retries = attempt

                self.rate_limiter.acquire()
                response = self.llm_provider.complete(
                    system_prompt=full_system_prompt,
                    user_message=message,
                    model=self.model,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                    json_mode=True,
                )

                usage = self._record_usage(response.input_tokens, response.output_tokens)

                output = self._parse_and_validate(response.content)

                return AgentResult(
                    output=output,
                    token_usage=usage,
                    model=response.model,
                    provider=response.provider,
                    raw_response=response.content,
                    retries=retries,
                )

            except (json.JSONDecodeError, ValidationError) as e:
                last_error = str(e)
                if attempt == max_retries:
                    raise

        # Should not reach here
        raise RuntimeError("Unexpected error in agent run loop")

    @abstractmethod
    def get_task_description(self) -> str:
        """Return a description of what this agent does.

        Used for logging and debugging.
        """
        pass

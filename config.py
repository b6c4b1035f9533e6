"""Configuration settings for DeepRabbit Discovery."""

# Load .env into os.environ so provider fallbacks (e.g. OPENAI_API_KEY) work
from dotenv import load_dotenv

load_dotenv()

from pydantic_settings import BaseSettings
from pydantic import Field
from pathlib import Path


class Settings(BaseSettings):
    """Global settings for DeepRabbit Discovery.

    Settings can be overridden via environment variables with DEEPRABBIT_ prefix.
    Example: DEEPRABBIT_MOCK_AI_RESPONSES=true
    """

    # Model config
    default_provider: str = Field(
        default="openai",
        description="LLM provider used when none is given"
    )
    default_model: str = Field(
        default="gpt-4o",
        description="Default model for agent calls"
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for question and report generation"
    )
    mock_ai_responses: bool = Field(
        default=False,
        description="Skip the LLM entirely and use rule-based fallbacks"
    )

    # Token caps per call type
    max_tokens_question: int = Field(
        default=2000,
        description="Maximum tokens for a discovery question call"
    )
    max_tokens_report: int = Field(
        default=8000,
        description="Maximum tokens for a report generation call"
    )
    max_tokens_research: int = Field(
        default=500,
        description="Maximum tokens for website extraction calls"
    )

    # Rate limiting
    rate_limit_per_minute: int = Field(
        default=10,
        description="Maximum LLM requests per 60 second window"
    )
    session_request_limit: int = Field(
        default=100,
        description="Maximum LLM requests per process session"
    )

    # Cost controls
    max_cost_per_session_usd: float = Field(
        default=2.00,
        description="Maximum total LLM cost per discovery session in USD"
    )
    input_token_cost_per_million: float = Field(
        default=2.50,
        description="Cost per 1M input tokens (gpt-4o)"
    )
    output_token_cost_per_million: float = Field(
        default=10.00,
        description="Cost per 1M output tokens (gpt-4o)"
    )

    # API settings (env: DEEPRABBIT_<KEY> or standard env var)
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key (env: DEEPRABBIT_OPENAI_API_KEY)",
    )
    anthropic_api_key: str = Field(
        default="",
        description="Anthropic API key (env: DEEPRABBIT_ANTHROPIC_API_KEY)",
    )
    api_timeout_seconds: int = Field(
        default=120,
        description="API call timeout in seconds"
    )

    # Firecrawl
    firecrawl_api_url: str = Field(
        default="https://api.firecrawl.dev/v1",
        description="Firecrawl API base URL",
    )
    firecrawl_api_key: str = Field(
        default="",
        description="Firecrawl API key (env: DEEPRABBIT_FIRECRAWL_API_KEY)",
    )
    scrape_timeout_ms: int = Field(
        default=30000,
        description="Page load timeout passed to Firecrawl, in milliseconds",
    )
    research_content_chars: int = Field(
        default=4000,
        description="Scraped characters sent to the LLM for extraction",
    )

    # Paths
    output_dir: str = Field(
        default="./outputs",
        description="Saved sessions and reports directory"
    )

    model_config = {
        "env_prefix": "DEEPRABBIT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",  # ignore extra env vars (e.g. OPENAI_API_KEY) not in schema
    }

    def get_output_path(self) -> Path:
        """Get output path as Path object."""
        return Path(self.output_dir)

    def calculate_cost(self, input_tokens: int, output_tokens: int) -> float:
        """Calculate cost in USD for given token usage."""
        input_cost = (input_tokens / 1_000_000) * self.input_token_cost_per_million
        output_cost = (output_tokens / 1_000_000) * self.output_token_cost_per_million
        return input_cost + output_cost


# Create singleton instance
settings = Settings()

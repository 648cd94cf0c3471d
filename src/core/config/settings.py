# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for StudyPilot.
Settings are loaded from environment variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from src.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> settings.plan.max_steps
    10
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parents[3]


class DatabaseSettings(BaseSettings):
    """Database configuration for learner and plan state.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    user: str = "studypilot"
    password: SecretStr = SecretStr("studypilot_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "studypilot"
    pool_size: int = 10
    max_overflow: int = 20

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"


class RedisSettings(BaseSettings):
    """Redis configuration for the dramatiq broker.

    Attributes:
        host: Redis server host.
        port: Redis server port.
        password: Redis password.
        database: Redis database number.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        extra="ignore",
    )

    host: str = "localhost"
    port: int = 6379
    password: SecretStr | None = None
    database: int = 0

    @property
    def url(self) -> str:
        """Build the Redis connection URL."""
        if self.password is None:
            return f"redis://{self.host}:{self.port}/{self.database}"
        pwd = self.password.get_secret_value()
        return f"redis://:{pwd}@{self.host}:{self.port}/{self.database}"


class LLMSettings(BaseSettings):
    """LLM provider configuration using LiteLLM.

    Supports multiple providers: ollama, openai, anthropic, google.
    LiteLLM handles provider routing based on model prefix.

    Attributes:
        default_provider: Default LLM provider to use.
        ollama_base_url: Base URL for the Ollama server.
        ollama_api_key: API key for remote Ollama instances.
        ollama_default_model: Default Ollama model.
        openai_api_key: OpenAI API key.
        openai_default_model: Default OpenAI model.
        anthropic_api_key: Anthropic API key.
        anthropic_default_model: Default Anthropic model.
        google_api_key: Google AI API key.
        google_default_model: Default Google model.
        request_timeout: Request timeout in seconds.
        max_retries: Maximum retry attempts.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
        populate_by_name=True,
    )

    default_provider: Literal["ollama", "openai", "anthropic", "google"] = Field(
        default="ollama",
        validation_alias="LLM_DEFAULT_PROVIDER",
    )

    # Ollama
    ollama_base_url: str = Field(
        default="http://localhost:11434",
        validation_alias="OLLAMA_BASE_URL",
    )
    ollama_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="OLLAMA_API_KEY",
    )
    ollama_default_model: str = Field(
        default="llama3.3:70b",
        validation_alias="OLLAMA_DEFAULT_MODEL",
    )

    # OpenAI
    openai_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="OPENAI_API_KEY",
    )
    openai_default_model: str = Field(
        default="gpt-4o-mini",
        validation_alias="OPENAI_DEFAULT_MODEL",
    )

    # Anthropic
    anthropic_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="ANTHROPIC_API_KEY",
    )
    anthropic_default_model: str = Field(
        default="claude-3-5-sonnet-20241022",
        validation_alias="ANTHROPIC_DEFAULT_MODEL",
    )

    # Google
    google_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="GOOGLE_API_KEY",
    )
    google_default_model: str = Field(
        default="gemini-2.0-flash",
        validation_alias="GOOGLE_DEFAULT_MODEL",
    )

    request_timeout: float = Field(default=60.0, validation_alias="LLM_REQUEST_TIMEOUT")
    max_retries: int = Field(default=3, validation_alias="LLM_MAX_RETRIES")

    def get_default_model(self) -> str:
        """Get the default model for the configured provider.

        Returns:
            Model identifier string for the default provider.
        """
        models = {
            "ollama": f"ollama_chat/{self.ollama_default_model}",
            "openai": self.openai_default_model,
            "anthropic": self.anthropic_default_model,
            "google": f"gemini/{self.google_default_model}",
        }
        return models[self.default_provider]

    def get_provider_params(self, model: str) -> dict[str, Any]:
        """Get the api_base/api_key pair LiteLLM needs for a model.

        Keys are passed straight to acompletion() instead of being exported
        as environment variables.

        Args:
            model: Model string in LiteLLM format.

        Returns:
            Dictionary with api_base and/or api_key when configured.
        """
        params: dict[str, Any] = {}

        if model.startswith(("ollama/", "ollama_chat/")):
            params["api_base"] = self.ollama_base_url
            key = self.ollama_api_key
        elif model.startswith("gemini/"):
            key = self.google_api_key
        elif model.startswith("claude") or model.startswith("anthropic/"):
            key = self.anthropic_api_key
        else:
            key = self.openai_api_key

        if key is not None:
            params["api_key"] = key.get_secret_value()
        return params


class PlanSettings(BaseSettings):
    """Limits and budgets for intent routing and plan execution.

    Attributes:
        max_steps: Maximum number of steps kept from a generated plan.
        step_timeout_seconds: Budget for one step inference call.
        classifier_message_chars: Cap on the message sent to the classifier.
        classifier_context_chars: Cap on the prior assistant utterance.
        topic_prompt_chars: Cap on the prompt sent for topic inference.
        classifier_max_tokens: Output budget of the classification call.
        plan_max_tokens: Output budget of the plan generation call.
        step_max_tokens: Output budget of one step answer.
        topic_max_tokens: Output budget of the topic inference call.
        general_max_tokens: Output budget of answer_general_question.
        chat_max_tokens: Output budget of a single-turn reply.
        max_tool_rounds: Tool-call rounds allowed in a single-turn reply.
        history_messages: Chat log messages sent along with a single-turn reply.
        stall_after_seconds: Time without plan progress after which a busy
            session gets its continuation enqueued again.
    """

    model_config = SettingsConfigDict(
        env_prefix="PLAN_",
        extra="ignore",
    )

    max_steps: int = 10
    step_timeout_seconds: float = 90.0
    classifier_message_chars: int = 300
    classifier_context_chars: int = 200
    topic_prompt_chars: int = 300
    classifier_max_tokens: int = 20
    plan_max_tokens: int = 1024
    step_max_tokens: int = 1024
    topic_max_tokens: int = 80
    general_max_tokens: int = 1024
    chat_max_tokens: int = 4096
    max_tool_rounds: int = 10
    history_messages: int = 20
    stall_after_seconds: float = 900.0


class WorkerSettings(BaseSettings):
    """Background worker configuration.

    Attributes:
        processes: Number of worker processes.
        threads: Number of threads per process.
    """

    model_config = SettingsConfigDict(
        env_prefix="WORKER_",
        extra="ignore",
    )

    processes: int = 2
    threads: int = 4


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        prompts_dir: Directory holding the prompt catalog YAML files.
        prompts_override_file: Optional YAML file deep-merged over the catalog.
        database: Database settings.
        redis: Redis settings.
        llm: LLM provider settings.
        plan: Intent routing and plan execution limits.
        worker: Background worker settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    prompts_dir: Path = _PROJECT_ROOT / "config" / "prompts"
    prompts_override_file: Path | None = None

    # Subsettings - loaded with their own env prefixes
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    plan: PlanSettings = Field(default_factory=PlanSettings)
    worker: WorkerSettings = Field(default_factory=WorkerSettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()

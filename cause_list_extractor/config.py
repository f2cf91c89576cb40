from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

load_dotenv(Path.cwd() / ".env")


@dataclass(frozen=True)
class ModelConfig:
    """Configuration for a specific LLM model."""
    name: str
    max_output_tokens: int
    chars_per_token: float = 4.0

    @property
    def tokens_per_char(self) -> float:
        """Tokens per character (inverse of chars_per_token)."""
        return 1 / self.chars_per_token


@dataclass(frozen=True)
class ExtractionConfig:
    """Configuration for the cause list extraction pipeline."""

    # Model settings
    model: ModelConfig
    fallback_model: ModelConfig

    # Strategy thresholds (estimated tokens)
    soft_chunk_threshold_tokens: int = 50_000

    # Chunking
    chunk_max_chars: int = 30_000
    simplified_prompt_max_chars: int = 50_000

    # Sampling
    primary_temperature: float = 0.1
    simplified_temperature: float = 0.0

    # Concurrency
    max_concurrent_requests: int = 5
    request_timeout_seconds: float = 180.0

    rate_limit_retry_base_delay: float = 1.0
    max_rate_limit_retries: int = 2

    @property
    def chunk_max_tokens(self) -> int:
        """Chunk budget expressed in estimated tokens."""
        return int(self.chunk_max_chars * self.model.tokens_per_char)


# Predefined model configurations
GPT41_MINI = ModelConfig(
    name="gpt-4.1-mini",
    max_output_tokens=8_000,
)

GPT35_TURBO = ModelConfig(
    name="gpt-3.5-turbo",
    max_output_tokens=6_000,
)

GPT4O_MINI = ModelConfig(
    name="gpt-4o-mini",
    max_output_tokens=8_000,
)


def get_model_by_name(model_name: str) -> ModelConfig:
    """Get model config by name."""
    model_map = {
        "gpt-4.1-mini": GPT41_MINI,
        "gpt-4o-mini": GPT4O_MINI,
        "gpt-3.5-turbo": GPT35_TURBO,
    }
    if model_name in model_map:
        return model_map[model_name]
    return ModelConfig(name=model_name, max_output_tokens=8_000)


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e


def get_default_config() -> ExtractionConfig:
    """Get default configuration based on environment."""
    model = get_model_by_name(os.getenv("OPENAI_MODEL") or "gpt-4.1-mini")
    fallback_model = get_model_by_name(os.getenv("OPENAI_FALLBACK_MODEL") or "gpt-3.5-turbo")

    return ExtractionConfig(
        model=model,
        fallback_model=fallback_model,
        chunk_max_chars=_env_int("CAUSELIST_CHUNK_CHARS", 30_000),
        max_concurrent_requests=_env_int("CAUSELIST_MAX_CONCURRENCY", 5),
        request_timeout_seconds=_env_float("CAUSELIST_REQUEST_TIMEOUT", 180.0),
    )


# Global default (can be overridden)
DEFAULT_CONFIG = get_default_config()

import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


def _parse_modes(raw: str) -> tuple[str, ...]:
    """Parse a comma-separated list of modes."""
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _parse_hint_overrides(raw: str) -> tuple[tuple[str, str], ...]:
    """Parse ``mode=hint`` pairs, e.g. ``"quiz=openai:gpt-4o,review=google:gemini-2.5-flash"``."""
    pairs = []
    for part in raw.split(","):
        if not part.strip():
            continue
        mode, sep, hint = part.partition("=")
        if not sep or not mode.strip() or not hint.strip():
            raise ValueError(f"CACHE_MODEL_HINTS entry must look like 'mode=hint', got {part!r}")
        pairs.append((mode.strip(), hint.strip()))
    return tuple(pairs)


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    redis_socket_timeout: float = float(os.getenv("REDIS_SOCKET_TIMEOUT", "2.0"))

    # Cache
    cache_ttl: int = int(os.getenv("CACHE_TTL", "604800"))  # 7 days default
    cache_key_prefix: str = os.getenv("CACHE_KEY_PREFIX", "ai_generation_cache")

    # Model hints (part of every fingerprint)
    default_model_hint: str = os.getenv("CACHE_DEFAULT_MODEL_HINT", "anthropic:claude-sonnet-4")
    gemini_model: str = (
        os.getenv("GEMINI_HIGH_YIELD_MODEL") or os.getenv("GEMINI_MODEL") or "gemini-1.5-flash"
    )
    high_yield_modes: tuple[str, ...] = _parse_modes(
        os.getenv("CACHE_HIGH_YIELD_MODES", "topic_generate_high_yield")
    )
    model_hint_overrides: tuple[tuple[str, str], ...] = _parse_hint_overrides(
        os.getenv("CACHE_MODEL_HINTS", "")
    )

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_format: str = os.getenv("LOG_FORMAT", "console").lower()

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.redis_socket_timeout <= 0:
            raise ValueError("REDIS_SOCKET_TIMEOUT must be positive")

        if not self.cache_key_prefix:
            raise ValueError("CACHE_KEY_PREFIX must not be empty")

        if self.log_format not in ("console", "json"):
            raise ValueError(f"LOG_FORMAT must be 'console' or 'json', got {self.log_format!r}")

    @property
    def high_yield_model_hint(self) -> str:
        """Model hint used by the high-yield topic modes."""
        return f"google:{self.gemini_model}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance with bounded timeouts."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        socket_timeout=settings.redis_socket_timeout,
        socket_connect_timeout=settings.redis_socket_timeout,
        decode_responses=True,
    )

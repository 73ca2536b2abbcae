"""
NEBULA Configuration
====================
All environment variables in one place. Pydantic Settings validates
types at startup and the values stay fixed for the process lifetime.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings

# Sentinel meaning "no real credential configured".
PLACEHOLDER_API_KEY = "mock-api-key"


class Settings(BaseSettings):
    """Loaded from environment variables or a .env file."""

    # --- OpenAI-compatible chat completion API ---
    openai_api_key: str = PLACEHOLDER_API_KEY
    openai_api_url: str = "https://api.openai.com/v1/chat/completions"
    openai_model: str = "gpt-3.5-turbo"
    openai_temperature: float = 0.7
    # A hung request counts as a transport failure once this expires
    openai_timeout_seconds: float = 15.0

    # --- App settings ---
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # --- Feature flags ---
    # Off by default: quests and reflections come from the heuristic tier
    # and no request ever leaves the process.
    use_real_api: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def remote_generation_enabled(self) -> bool:
        key = self.openai_api_key.strip()
        return self.use_real_api and bool(key) and key != PLACEHOLDER_API_KEY


@lru_cache
def get_settings() -> Settings:
    return Settings()

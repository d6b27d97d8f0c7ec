from pydantic_settings import BaseSettings
from typing import Literal, Optional
from functools import lru_cache


class Settings(BaseSettings):
    # AI Provider Configuration
    ai_provider: Literal["gemini", "openai", "anthropic"] = "gemini"

    # Google Gemini
    google_generative_ai_api_key: Optional[str] = None
    gemini_pro_model: str = "gemini-2.5-pro"
    gemini_flash_model: str = "gemini-2.5-flash"

    # OpenAI
    openai_api_key: Optional[str] = None
    openai_pro_model: str = "gpt-4.1"
    openai_flash_model: str = "gpt-4.1-mini"

    # Anthropic
    anthropic_api_key: Optional[str] = None
    anthropic_pro_model: str = "claude-sonnet-4-20250514"
    anthropic_flash_model: str = "claude-3-5-haiku-latest"

    # Generation
    max_output_tokens: int = 16384

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    timeout_keep_alive: int = 255  # generation calls on long papers are slow

    # CORS Configuration
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()

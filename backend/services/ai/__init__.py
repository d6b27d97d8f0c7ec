from typing import Optional

from backend.models.request import ModelTier
from backend.services.ai.base import AIProvider, ProviderError
from backend.services.ai.gemini_provider import GeminiProvider
from backend.services.ai.openai_provider import OpenAIProvider
from backend.services.ai.anthropic_provider import AnthropicProvider
from backend.config import get_settings


def resolve_api_key(api_key: Optional[str], default: Optional[str]) -> Optional[str]:
    """An explicit non-empty key wins over the configured default."""
    if api_key and api_key.strip():
        return api_key.strip()
    return default


def get_ai_provider(api_key: Optional[str] = None) -> AIProvider:
    settings = get_settings()
    provider_name = settings.ai_provider.lower()

    if provider_name == "gemini":
        return GeminiProvider(
            resolve_api_key(api_key, settings.google_generative_ai_api_key),
            {ModelTier.PRO: settings.gemini_pro_model, ModelTier.FLASH: settings.gemini_flash_model},
        )
    elif provider_name == "openai":
        return OpenAIProvider(
            resolve_api_key(api_key, settings.openai_api_key),
            {ModelTier.PRO: settings.openai_pro_model, ModelTier.FLASH: settings.openai_flash_model},
        )
    elif provider_name == "anthropic":
        return AnthropicProvider(
            resolve_api_key(api_key, settings.anthropic_api_key),
            {ModelTier.PRO: settings.anthropic_pro_model, ModelTier.FLASH: settings.anthropic_flash_model},
        )
    else:
        raise ValueError(f"Unknown AI provider: {provider_name}")


__all__ = [
    "AIProvider",
    "ProviderError",
    "GeminiProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "get_ai_provider",
    "resolve_api_key",
]

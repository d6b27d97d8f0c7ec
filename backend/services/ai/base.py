from abc import ABC, abstractmethod
from typing import Optional, TypeVar

from pydantic import BaseModel

from backend.models.content import ContentPart
from backend.models.request import ModelTier

T = TypeVar("T", bound=BaseModel)


class ProviderError(Exception):
    """A generation call failed inside the hosted provider."""

    def __init__(self, provider: str, error: Exception):
        self.provider = provider
        self.error = error
        super().__init__(f"{provider} generation failed: {error}")


class AIProvider(ABC):
    def __init__(self, api_key: Optional[str], tier_models: dict[ModelTier, str]):
        self.api_key = api_key
        self.tier_models = tier_models

    def model_for(self, tier: ModelTier) -> str:
        return self.tier_models[tier]

    @abstractmethod
    async def generate_text(
        self,
        model: str,
        system_prompt: str,
        content: ContentPart,
        prompt: Optional[str] = None,
    ) -> str:
        pass

    @abstractmethod
    async def generate_object(
        self,
        model: str,
        system_prompt: str,
        content: ContentPart,
        schema: type[T],
        schema_name: str,
        schema_description: str,
    ) -> T:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass

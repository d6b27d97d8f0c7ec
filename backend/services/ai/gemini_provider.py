from typing import Optional

from google import genai
from google.genai import types

from backend.models.content import ContentPart
from backend.services.ai.base import AIProvider, T
from backend.config import get_settings


class GeminiProvider(AIProvider):
    """Google Gemini through the google-genai SDK (default provider)."""

    def __init__(self, api_key: Optional[str], tier_models):
        super().__init__(api_key, tier_models)
        self.max_output_tokens = get_settings().max_output_tokens

    @property
    def name(self) -> str:
        return "gemini"

    def _client(self) -> genai.Client:
        # Created per call so a missing key fails inside the generation call
        return genai.Client(api_key=self.api_key)

    def _contents(self, content: ContentPart, prompt: Optional[str]) -> list[types.Content]:
        parts = []
        if prompt:
            parts.append(types.Part.from_text(text=prompt))
        parts.append(types.Part.from_bytes(data=content.data, mime_type=content.media_type))
        return [types.Content(role="user", parts=parts)]

    async def generate_text(
        self,
        model: str,
        system_prompt: str,
        content: ContentPart,
        prompt: Optional[str] = None,
    ) -> str:
        response = await self._client().aio.models.generate_content(
            model=model,
            contents=self._contents(content, prompt),
            config=types.GenerateContentConfig(
                system_instruction=system_prompt,
                max_output_tokens=self.max_output_tokens,
            ),
        )
        return response.text or ""

    async def generate_object(
        self,
        model: str,
        system_prompt: str,
        content: ContentPart,
        schema: type[T],
        schema_name: str,
        schema_description: str,
    ) -> T:
        response = await self._client().aio.models.generate_content(
            model=model,
            contents=self._contents(content, None),
            config=types.GenerateContentConfig(
                system_instruction=f"{system_prompt}\n\n{schema_name}: {schema_description}",
                max_output_tokens=self.max_output_tokens,
                response_mime_type="application/json",
                response_schema=schema,
            ),
        )
        return schema.model_validate_json(response.text or "")

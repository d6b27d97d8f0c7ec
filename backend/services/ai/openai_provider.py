import base64
from typing import Optional

from openai import AsyncOpenAI

from backend.models.content import ContentPart
from backend.services.ai.base import AIProvider, T
from backend.config import get_settings


class OpenAIProvider(AIProvider):
    def __init__(self, api_key: Optional[str], tier_models):
        super().__init__(api_key, tier_models)
        self.max_output_tokens = get_settings().max_output_tokens

    @property
    def name(self) -> str:
        return "openai"

    def _content_block(self, content: ContentPart) -> dict:
        if content.is_image:
            encoded = base64.b64encode(content.data).decode("ascii")
            return {
                "type": "image_url",
                "image_url": {"url": f"data:{content.media_type};base64,{encoded}"},
            }
        if content.media_type == "text/plain":
            return {"type": "text", "text": content.as_text()}
        encoded = base64.b64encode(content.data).decode("ascii")
        return {
            "type": "file",
            "file": {
                "filename": content.filename or "document.pdf",
                "file_data": f"data:{content.media_type};base64,{encoded}",
            },
        }

    def _messages(self, system_prompt: str, content: ContentPart, prompt: Optional[str]) -> list[dict]:
        user_content = []
        if prompt:
            user_content.append({"type": "text", "text": prompt})
        user_content.append(self._content_block(content))
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content},
        ]

    async def generate_text(
        self,
        model: str,
        system_prompt: str,
        content: ContentPart,
        prompt: Optional[str] = None,
    ) -> str:
        client = AsyncOpenAI(api_key=self.api_key)
        response = await client.chat.completions.create(
            model=model,
            messages=self._messages(system_prompt, content, prompt),
            max_completion_tokens=self.max_output_tokens,
        )
        return response.choices[0].message.content or ""

    async def generate_object(
        self,
        model: str,
        system_prompt: str,
        content: ContentPart,
        schema: type[T],
        schema_name: str,
        schema_description: str,
    ) -> T:
        client = AsyncOpenAI(api_key=self.api_key)
        response = await client.chat.completions.create(
            model=model,
            messages=self._messages(system_prompt, content, None),
            max_completion_tokens=self.max_output_tokens,
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": schema_name,
                    "description": schema_description,
                    "strict": False,
                    "schema": schema.model_json_schema(),
                },
            },
        )
        return schema.model_validate_json(response.choices[0].message.content or "")

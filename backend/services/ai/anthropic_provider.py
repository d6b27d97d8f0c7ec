import base64
from typing import Optional

from anthropic import AsyncAnthropic

from backend.models.content import ContentPart
from backend.services.ai.base import AIProvider, T
from backend.config import get_settings


class AnthropicProvider(AIProvider):
    def __init__(self, api_key: Optional[str], tier_models):
        super().__init__(api_key, tier_models)
        self.max_output_tokens = get_settings().max_output_tokens

    @property
    def name(self) -> str:
        return "anthropic"

    def _content_block(self, content: ContentPart) -> dict:
        if content.media_type == "text/plain":
            return {
                "type": "document",
                "source": {"type": "text", "media_type": "text/plain", "data": content.as_text()},
            }
        return {
            "type": "image" if content.is_image else "document",
            "source": {
                "type": "base64",
                "media_type": content.media_type,
                "data": base64.b64encode(content.data).decode("ascii"),
            },
        }

    def _messages(self, content: ContentPart, prompt: Optional[str]) -> list[dict]:
        user_content = []
        if prompt:
            user_content.append({"type": "text", "text": prompt})
        user_content.append(self._content_block(content))
        return [{"role": "user", "content": user_content}]

    async def generate_text(
        self,
        model: str,
        system_prompt: str,
        content: ContentPart,
        prompt: Optional[str] = None,
    ) -> str:
        client = AsyncAnthropic(api_key=self.api_key)
        response = await client.messages.create(
            model=model,
            max_tokens=self.max_output_tokens,
            system=system_prompt,
            messages=self._messages(content, prompt),
        )
        return "".join(block.text for block in response.content if block.type == "text")

    async def generate_object(
        self,
        model: str,
        system_prompt: str,
        content: ContentPart,
        schema: type[T],
        schema_name: str,
        schema_description: str,
    ) -> T:
        # Structured output through a single forced tool call
        client = AsyncAnthropic(api_key=self.api_key)
        response = await client.messages.create(
            model=model,
            max_tokens=self.max_output_tokens,
            system=system_prompt,
            messages=self._messages(content, None),
            tools=[
                {
                    "name": schema_name,
                    "description": schema_description,
                    "input_schema": schema.model_json_schema(),
                }
            ],
            tool_choice={"type": "tool", "name": schema_name},
        )
        for block in response.content:
            if block.type == "tool_use":
                return schema.model_validate(block.input)
        raise ValueError(f"Model returned no {schema_name} tool call")

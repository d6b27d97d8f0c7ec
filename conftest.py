"""Shared fixtures: a recording stand-in for the hosted generation provider."""

from typing import Optional

import pytest

from backend.models.request import ModelTier
from backend.models.section import Section
from backend.services import generation
from backend.services.ai.base import AIProvider


class FakeProvider(AIProvider):
    def __init__(self):
        super().__init__("test-key", {ModelTier.PRO: "fake-pro", ModelTier.FLASH: "fake-flash"})
        self.text = "generated text"
        self.sections: list[Section] = [
            Section(title="Abstract"),
            Section(title="Introduction", section_number="1"),
        ]
        self.error: Optional[Exception] = None
        self.calls: list[dict] = []
        self.requested_api_keys: list[Optional[str]] = []

    @property
    def name(self) -> str:
        return "fake"

    async def generate_text(self, model, system_prompt, content, prompt=None):
        self.calls.append(
            {"model": model, "system_prompt": system_prompt, "content": content, "prompt": prompt}
        )
        if self.error:
            raise self.error
        return self.text

    async def generate_object(self, model, system_prompt, content, schema, schema_name, schema_description):
        self.calls.append(
            {"model": model, "system_prompt": system_prompt, "content": content, "schema": schema}
        )
        if self.error:
            raise self.error
        return schema(sections=self.sections)


@pytest.fixture
def fake_provider(monkeypatch):
    provider = FakeProvider()

    def factory(api_key=None):
        provider.requested_api_keys.append(api_key)
        return provider

    monkeypatch.setattr(generation, "get_ai_provider", factory)
    return provider

"""Tests for the generation service and provider selection."""

import asyncio

import pytest

from backend.models.content import ContentKind
from backend.models.request import (
    AnalysisRequest,
    ModelTier,
    PaperKind,
    ReviewRequest,
    SectionsRequest,
    UploadedDocument,
)
from backend.services import generation, prompts
from backend.services.ai import GeminiProvider, ProviderError, get_ai_provider, resolve_api_key
from backend.services.file_classifier import UnsupportedFileType


def pdf(name="paper.pdf") -> UploadedDocument:
    return UploadedDocument(filename=name, data=b"%PDF-1.7")


class TestProviderSelection:
    def test_default_provider_is_gemini(self):
        provider = get_ai_provider("my-key")

        assert isinstance(provider, GeminiProvider)
        assert provider.api_key == "my-key"

    def test_tier_models(self):
        provider = get_ai_provider()

        assert provider.model_for(ModelTier.PRO) == "gemini-2.5-pro"
        assert provider.model_for(ModelTier.FLASH) == "gemini-2.5-flash"

    @pytest.mark.parametrize(
        "api_key,default,expected",
        [
            ("mine", "default", "mine"),
            ("", "default", "default"),
            ("   ", "default", "default"),
            (None, "default", "default"),
            (None, None, None),
        ],
    )
    def test_resolve_api_key(self, api_key, default, expected):
        assert resolve_api_key(api_key, default) == expected


class TestGeneration:
    def test_overall_analysis_sends_both_instructions(self, fake_provider):
        request = AnalysisRequest(
            document=pdf(),
            kind=PaperKind.FULL_CONFERENCE_PAPER,
            model_tier=ModelTier.PRO,
            api_key="user-key",
        )

        text = asyncio.run(generation.generate_overall_analysis(request))

        assert text == "generated text"
        call = fake_provider.calls[0]
        assert call["model"] == "fake-pro"
        assert call["system_prompt"] == prompts.overall_analysis_system_prompt(request)
        assert call["prompt"] == prompts.overall_analysis_message_part(request)
        assert call["content"].media_type == "application/pdf"
        assert fake_provider.requested_api_keys == ["user-key"]

    def test_review_uses_fixed_rubric(self, fake_provider):
        request = ReviewRequest(document=pdf(), kind=PaperKind.MASTER_THESIS)

        asyncio.run(generation.generate_review(request))

        call = fake_provider.calls[0]
        assert call["system_prompt"] == prompts.REVIEW_SYSTEM_PROMPT
        assert call["prompt"] == prompts.review_message_part(request)
        assert call["model"] == "fake-flash"

    def test_png_sections_take_the_image_path(self, fake_provider):
        request = SectionsRequest(document=UploadedDocument(filename="page.png", data=b"\x89PNG"))

        sections = asyncio.run(generation.extract_sections(request))

        assert [s.title for s in sections] == ["Abstract", "Introduction"]
        call = fake_provider.calls[0]
        assert call["content"].kind == ContentKind.IMAGE
        assert call["content"].media_type == "image/png"
        assert call["system_prompt"] == prompts.SECTIONS_SYSTEM_PROMPT

    def test_unsupported_file_fails_before_provider_call(self, fake_provider):
        request = ReviewRequest(document=pdf("paper.docx"), kind=PaperKind.JOURNAL_PAPER)

        with pytest.raises(UnsupportedFileType):
            asyncio.run(generation.generate_review(request))

        assert fake_provider.calls == []

    def test_provider_failure_is_wrapped(self, fake_provider):
        fake_provider.error = RuntimeError("quota exceeded")
        request = ReviewRequest(document=pdf(), kind=PaperKind.JOURNAL_PAPER)

        with pytest.raises(ProviderError) as exc_info:
            asyncio.run(generation.generate_review(request))

        assert exc_info.value.provider == "fake"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert "quota exceeded" in str(exc_info.value)
        assert len(fake_provider.calls) == 1

    def test_missing_document_is_rejected(self, fake_provider):
        with pytest.raises(ValueError):
            asyncio.run(generation.extract_sections(SectionsRequest()))

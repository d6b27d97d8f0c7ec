"""Generation calls behind the analysis, review and section endpoints."""

from typing import Optional

from backend.models.content import ContentPart
from backend.models.request import (
    AnalysisRequest,
    ReviewRequest,
    SectionAnalysisRequest,
    SectionsRequest,
)
from backend.models.section import Section, SectionOutline
from backend.services import prompts
from backend.services.ai import AIProvider, ProviderError, get_ai_provider
from backend.services.file_classifier import build_content_part
from backend.services.logging import logger, sanitize_error


def _prepare(request: SectionsRequest) -> tuple[AIProvider, str, ContentPart]:
    if request.document is None:
        raise ValueError("A document is required for generation")
    provider = get_ai_provider(request.api_key)
    model = provider.model_for(request.model_tier)
    content = build_content_part(request.document)
    return provider, model, content


async def _generate_text(
    label: str,
    request: SectionsRequest,
    system_prompt: str,
    prompt: Optional[str],
) -> str:
    provider, model, content = _prepare(request)
    logger.info(
        f"{label}: {provider.name}/{model}, {content.kind.value} {content.media_type} "
        f"({len(content.data)} bytes)"
    )
    try:
        text = await provider.generate_text(model, system_prompt, content, prompt=prompt)
    except Exception as e:
        logger.error(f"{label} failed: {sanitize_error(e)}", exc_info=True)
        raise ProviderError(provider.name, e) from e

    logger.info(f"{label} result: {len(text)} characters")
    return text


async def generate_overall_analysis(request: AnalysisRequest) -> str:
    return await _generate_text(
        "Overall analysis",
        request,
        prompts.overall_analysis_system_prompt(request),
        prompts.overall_analysis_message_part(request),
    )


async def generate_section_analysis(request: SectionAnalysisRequest) -> str:
    return await _generate_text(
        f"Section analysis ({request.section_title})",
        request,
        prompts.section_analysis_system_prompt(request),
        prompts.section_analysis_message_part(request),
    )


async def generate_review(request: ReviewRequest) -> str:
    return await _generate_text(
        "Review",
        request,
        prompts.review_system_prompt(),
        prompts.review_message_part(request),
    )


async def extract_sections(request: SectionsRequest) -> list[Section]:
    provider, model, content = _prepare(request)
    logger.info(f"Sections: {provider.name}/{model}, {content.kind.value} {content.media_type}")
    try:
        outline = await provider.generate_object(
            model,
            prompts.sections_system_prompt(),
            content,
            schema=SectionOutline,
            schema_name="SectionTitles",
            schema_description=(
                "A list of sections extracted from a document, including optional "
                "information about numbering and sub(sub)sections."
            ),
        )
    except Exception as e:
        logger.error(f"Sections failed: {sanitize_error(e)}", exc_info=True)
        raise ProviderError(provider.name, e) from e

    logger.info(f"Sections result: {len(outline.sections)} top-level sections")
    return outline.sections

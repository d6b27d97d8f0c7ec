from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from backend.api.forms import analysis_form, review_form, section_analysis_form, sections_form
from backend.models.request import (
    AnalysisRequest,
    ReviewRequest,
    SectionAnalysisRequest,
    SectionsRequest,
)
from backend.models.section import Section
from backend.services.ai import ProviderError
from backend.services.file_classifier import UnsupportedFileType
from backend.services.generation import (
    extract_sections,
    generate_overall_analysis,
    generate_review,
    generate_section_analysis,
)
from backend.services.logging import logger, sanitize_error

router = APIRouter()


async def _run(call, request):
    try:
        return await call(request)
    except UnsupportedFileType as e:
        logger.warning(f"Rejected upload: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except ProviderError as e:
        raise HTTPException(status_code=502, detail=sanitize_error(e.error))


@router.post("/overall_analysis", response_class=PlainTextResponse)
async def overall_analysis(request: AnalysisRequest = Depends(analysis_form)):
    return await _run(generate_overall_analysis, request)


@router.post("/section_analysis", response_class=PlainTextResponse)
async def section_analysis(request: SectionAnalysisRequest = Depends(section_analysis_form)):
    return await _run(generate_section_analysis, request)


@router.post("/review", response_class=PlainTextResponse)
async def review(request: ReviewRequest = Depends(review_form)):
    return await _run(generate_review, request)


@router.post(
    "/sections",
    response_model=list[Section],
    response_model_exclude_none=True,
)
async def sections(request: SectionsRequest = Depends(sections_form)):
    return await _run(extract_sections, request)

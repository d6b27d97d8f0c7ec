"""Prompt previews: the instruction text a generation call would send.

None of these routes call a provider.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from backend.api.forms import analysis_preview_form, review_preview_form, section_analysis_preview_form
from backend.models.request import AnalysisRequest, ReviewRequest, SectionAnalysisRequest
from backend.services import prompts

router = APIRouter()


@router.post("/overall_analysis_system_prompt", response_class=PlainTextResponse)
def overall_analysis_system_prompt(request: AnalysisRequest = Depends(analysis_preview_form)):
    return prompts.overall_analysis_system_prompt(request)


@router.post("/overall_analysis_message_part", response_class=PlainTextResponse)
def overall_analysis_message_part(request: AnalysisRequest = Depends(analysis_preview_form)):
    return prompts.overall_analysis_message_part(request)


@router.api_route("/review_system_prompt", methods=["GET", "POST"], response_class=PlainTextResponse)
def review_system_prompt():
    return prompts.review_system_prompt()


@router.post("/review_message_part", response_class=PlainTextResponse)
def review_message_part(request: ReviewRequest = Depends(review_preview_form)):
    return prompts.review_message_part(request)


@router.post("/section_analysis_system_prompt", response_class=PlainTextResponse)
def section_analysis_system_prompt(
    request: SectionAnalysisRequest = Depends(section_analysis_preview_form),
):
    return prompts.section_analysis_system_prompt(request)


@router.post("/section_analysis_message_part", response_class=PlainTextResponse)
def section_analysis_message_part(
    request: SectionAnalysisRequest = Depends(section_analysis_preview_form),
):
    return prompts.section_analysis_message_part(request)


@router.api_route("/sections_system_prompt", methods=["GET", "POST"], response_class=PlainTextResponse)
def sections_system_prompt():
    return prompts.sections_system_prompt()

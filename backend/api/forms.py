"""Multipart form dependencies that build the request models.

Wire names follow the client (camelCase); the models use snake_case.
"""

from typing import Optional

from fastapi import Depends, File, Form, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from backend.models.request import (
    AnalysisRequest,
    ModelTier,
    PaperKind,
    ReviewRequest,
    SectionAnalysisRequest,
    SectionsRequest,
    UploadedDocument,
)


def _build(model: type[BaseModel], **fields):
    try:
        return model(**fields)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in errors]
        )


async def _read(file: Optional[UploadFile]) -> Optional[UploadedDocument]:
    if file is None:
        return None
    return UploadedDocument(filename=file.filename or "", data=await file.read())


def generation_options(
    apiKey: Optional[str] = Form(None),
    modelTier: Optional[str] = Form(None),
) -> dict:
    return {"api_key": apiKey or None, "model_tier": ModelTier.resolve(modelTier)}


def paper_fields(
    kind: PaperKind = Form(...),
    hasPageLimit: bool = Form(False),
    pageLimit: Optional[str] = Form(None),
    currentPages: Optional[str] = Form(None),
) -> dict:
    return {
        "kind": kind,
        "has_page_limit": hasPageLimit,
        "page_limit": pageLimit,
        "current_pages": currentPages,
    }


async def sections_form(
    file: UploadFile = File(...),
    options: dict = Depends(generation_options),
) -> SectionsRequest:
    return _build(SectionsRequest, document=await _read(file), **options)


async def review_form(
    file: UploadFile = File(...),
    options: dict = Depends(generation_options),
    fields: dict = Depends(paper_fields),
) -> ReviewRequest:
    return _build(ReviewRequest, document=await _read(file), **options, **fields)


async def analysis_form(
    file: UploadFile = File(...),
    workInProgress: bool = Form(False),
    options: dict = Depends(generation_options),
    fields: dict = Depends(paper_fields),
) -> AnalysisRequest:
    return _build(
        AnalysisRequest,
        document=await _read(file),
        work_in_progress=workInProgress,
        **options,
        **fields,
    )


async def section_analysis_form(
    file: UploadFile = File(...),
    sectionTitle: str = Form(...),
    workInProgress: bool = Form(False),
    options: dict = Depends(generation_options),
    fields: dict = Depends(paper_fields),
) -> SectionAnalysisRequest:
    return _build(
        SectionAnalysisRequest,
        document=await _read(file),
        section_title=sectionTitle,
        work_in_progress=workInProgress,
        **options,
        **fields,
    )


# Prompt previews take the same fields, but the file is optional and never read.


def review_preview_form(
    file: Optional[UploadFile] = File(None),
    options: dict = Depends(generation_options),
    fields: dict = Depends(paper_fields),
) -> ReviewRequest:
    return _build(ReviewRequest, **options, **fields)


def analysis_preview_form(
    file: Optional[UploadFile] = File(None),
    workInProgress: bool = Form(False),
    options: dict = Depends(generation_options),
    fields: dict = Depends(paper_fields),
) -> AnalysisRequest:
    return _build(AnalysisRequest, work_in_progress=workInProgress, **options, **fields)


def section_analysis_preview_form(
    file: Optional[UploadFile] = File(None),
    sectionTitle: str = Form(...),
    workInProgress: bool = Form(False),
    options: dict = Depends(generation_options),
    fields: dict = Depends(paper_fields),
) -> SectionAnalysisRequest:
    return _build(
        SectionAnalysisRequest,
        section_title=sectionTitle,
        work_in_progress=workInProgress,
        **options,
        **fields,
    )

from backend.models.content import ContentKind, ContentPart
from backend.models.request import (
    AnalysisRequest,
    ModelTier,
    PaperKind,
    ReviewRequest,
    SectionAnalysisRequest,
    SectionsRequest,
    UploadedDocument,
)
from backend.models.section import Section, SectionOutline, Subsection, Subsubsection

__all__ = [
    "ContentKind",
    "ContentPart",
    "AnalysisRequest",
    "ModelTier",
    "PaperKind",
    "ReviewRequest",
    "SectionAnalysisRequest",
    "SectionsRequest",
    "UploadedDocument",
    "Section",
    "SectionOutline",
    "Subsection",
    "Subsubsection",
]

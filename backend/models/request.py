from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class PaperKind(str, Enum):
    """Closed set of academic document kinds a request can describe."""

    SHORT_CONFERENCE_PAPER = "short conference paper"
    FULL_CONFERENCE_PAPER = "full conference paper"
    JOURNAL_PAPER = "journal paper"
    BACHELOR_THESIS = "bachelor thesis"
    MASTER_THESIS = "master thesis"
    SEMINAR_PAPER = "university seminar paper"


class ModelTier(str, Enum):
    """Hosted model variant that answers a request."""

    PRO = "pro"
    FLASH = "flash"

    @classmethod
    def resolve(cls, value: Optional[str]) -> "ModelTier":
        """Map a raw wire value to a tier. Anything but "pro" is flash."""
        if value == cls.PRO.value:
            return cls.PRO
        return cls.FLASH


class UploadedDocument(BaseModel):
    filename: str
    data: bytes


class SectionsRequest(BaseModel):
    document: Optional[UploadedDocument] = None
    api_key: Optional[str] = None
    model_tier: ModelTier = ModelTier.FLASH


class ReviewRequest(SectionsRequest):
    kind: PaperKind
    has_page_limit: bool = False
    # Multipart has no numeric type; both values are display text only
    page_limit: Optional[str] = None
    current_pages: Optional[str] = None

    @model_validator(mode="after")
    def check_page_limit(self) -> "ReviewRequest":
        if self.has_page_limit:
            missing = [
                name
                for name, value in (("pageLimit", self.page_limit), ("currentPages", self.current_pages))
                if value is None or value == ""
            ]
            if missing:
                raise ValueError(
                    f"{' and '.join(missing)} required when hasPageLimit is true"
                )
        return self


class AnalysisRequest(ReviewRequest):
    work_in_progress: bool = False


class SectionAnalysisRequest(AnalysisRequest):
    section_title: str = Field(min_length=1)

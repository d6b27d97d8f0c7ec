"""Heading hierarchy of a paper: section -> subsection -> subsubsection."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Subsubsection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    subsubsection_number: Optional[str] = Field(default=None, alias="subsubsectionNumber")


class Subsection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    subsection_number: Optional[str] = Field(default=None, alias="subsectionNumber")
    subsubsections: Optional[list[Subsubsection]] = None


class Section(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    section_number: Optional[str] = Field(default=None, alias="sectionNumber")
    subsections: Optional[list[Subsection]] = None


class SectionOutline(BaseModel):
    """A list of sections extracted from a document, including optional
    information about numbering and sub(sub)sections."""

    sections: list[Section]

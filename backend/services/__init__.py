from backend.services.file_classifier import UnsupportedFileType, build_content_part, classify
from backend.services.generation import (
    extract_sections,
    generate_overall_analysis,
    generate_review,
    generate_section_analysis,
)

__all__ = [
    "UnsupportedFileType",
    "build_content_part",
    "classify",
    "extract_sections",
    "generate_overall_analysis",
    "generate_review",
    "generate_section_analysis",
]

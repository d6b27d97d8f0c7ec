from client.api import ApiError, PaperCriticApi, PaperFile
from client.stores import (
    PAPER_KINDS,
    AnnotatedSection,
    Operation,
    PaperOptions,
    PaperStore,
    PromptStore,
)

__all__ = [
    "ApiError",
    "PaperCriticApi",
    "PaperFile",
    "PAPER_KINDS",
    "AnnotatedSection",
    "Operation",
    "PaperOptions",
    "PaperStore",
    "PromptStore",
]

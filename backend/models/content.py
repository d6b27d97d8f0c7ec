from enum import Enum
from typing import Optional

from pydantic import BaseModel


class ContentKind(str, Enum):
    IMAGE = "image"
    DOCUMENT = "document"


class ContentPart(BaseModel):
    """Typed upload payload handed to a generation provider."""

    kind: ContentKind
    media_type: str
    data: bytes
    filename: Optional[str] = None

    @property
    def is_image(self) -> bool:
        return self.kind == ContentKind.IMAGE

    def as_text(self) -> str:
        try:
            return self.data.decode("utf-8")
        except UnicodeDecodeError:
            return self.data.decode("latin-1")

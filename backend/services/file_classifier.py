from backend.models.content import ContentKind, ContentPart
from backend.models.request import UploadedDocument


DEFAULT_EXTENSION = "txt"

SUPPORTED_EXTENSIONS: dict[str, tuple[ContentKind, str]] = {
    "txt": (ContentKind.DOCUMENT, "text/plain"),
    "md": (ContentKind.DOCUMENT, "text/plain"),
    "csv": (ContentKind.DOCUMENT, "text/plain"),
    "json": (ContentKind.DOCUMENT, "text/plain"),
    "pdf": (ContentKind.DOCUMENT, "application/pdf"),
    "png": (ContentKind.IMAGE, "image/png"),
    "jpg": (ContentKind.IMAGE, "image/jpeg"),
    "jpeg": (ContentKind.IMAGE, "image/jpeg"),
}


class UnsupportedFileType(ValueError):
    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Unsupported file type: {filename}")


def get_extension(filename: str) -> str:
    """Lower-cased text after the final dot, or the default for dotless names."""
    if "." not in filename:
        return DEFAULT_EXTENSION
    return filename.rsplit(".", 1)[1].lower()


def classify(filename: str) -> tuple[ContentKind, str]:
    try:
        return SUPPORTED_EXTENSIONS[get_extension(filename)]
    except KeyError:
        raise UnsupportedFileType(filename) from None


def build_content_part(document: UploadedDocument) -> ContentPart:
    kind, media_type = classify(document.filename)
    return ContentPart(
        kind=kind,
        media_type=media_type,
        data=document.data,
        filename=document.filename,
    )

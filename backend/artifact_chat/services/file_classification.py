from typing import Optional

from artifact_chat.schemas.chat import AttachmentCategory

# MIME types treated as text in addition to text/*
TEXT_MIME_TYPES = {"application/json", "application/xml", "application/yaml"}

# Used only when the browser sent no MIME type
TEXT_EXTENSIONS = (".md", ".csv", ".tsv", ".log")

MAX_TEXT_PREVIEW = 8000


def is_image(mime_type: Optional[str]) -> bool:
    if not mime_type:
        return False
    return mime_type.startswith("image/")


def is_text_like(mime_type: Optional[str], filename: str) -> bool:
    if not mime_type:
        return filename.endswith(TEXT_EXTENSIONS)

    if mime_type.startswith("text/"):
        return True

    return mime_type in TEXT_MIME_TYPES


def classify(mime_type: Optional[str], filename: str) -> AttachmentCategory:
    if is_image(mime_type):
        return "image"
    if is_text_like(mime_type, filename):
        return "text"
    return "other"


def build_text_preview(data: bytes, limit: int = MAX_TEXT_PREVIEW) -> str:
    """Decode an upload as UTF-8 and cap it for display in the UI."""
    text = data.decode("utf-8", errors="replace")
    if len(text) > limit:
        return f"{text[:limit]}\n...\n[truncated preview]"
    return text

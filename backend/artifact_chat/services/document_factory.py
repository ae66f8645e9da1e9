"""Render model-supplied text into downloadable documents.

PDF and DOCX are encoded with reportlab and python-docx; the plain text
formats are stored as the UTF-8 bytes of the content, untouched.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import List
from xml.sax.saxutils import escape

from docx import Document
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import Paragraph, SimpleDocTemplate

from artifact_chat.schemas.chat import DocumentType
from artifact_chat.services.blob_store import BlobStore, make_key, sanitize_name

logger = logging.getLogger(__name__)

EXTENSION_MAP: dict[str, str] = {
    "pdf": ".pdf",
    "docx": ".docx",
    "txt": ".txt",
    "csv": ".csv",
    "md": ".md",
}

MIME_MAP: dict[str, str] = {
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".txt": "text/plain; charset=utf-8",
    ".csv": "text/csv; charset=utf-8",
    ".md": "text/markdown; charset=utf-8",
}

DEFAULT_BASENAME = "azure-ai-document"
MAX_BASENAME_LENGTH = 120
PDF_MARGIN = 50

PDF_BODY_STYLE = ParagraphStyle(
    "body",
    fontName="Helvetica",
    fontSize=12,
    leading=15,
    alignment=TA_LEFT,
)


@dataclass
class DocumentCreationResult:
    id: str
    filename: str
    type: DocumentType
    storedFilename: str
    fullPath: Path


def mime_type_for(filename: str) -> str:
    return MIME_MAP.get(Path(filename).suffix.lower(), "application/octet-stream")


def safe_document_name(filename: str, doc_type: DocumentType) -> str:
    """Turn a model-chosen filename into ``<safe base>.<ext>``."""
    base = re.sub(r"\.[^/.]+$", "", filename)
    base = sanitize_name(base)[:MAX_BASENAME_LENGTH] or DEFAULT_BASENAME
    return f"{base}{EXTENSION_MAP[doc_type]}"


def render_pdf(content: str) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=LETTER,
        leftMargin=PDF_MARGIN,
        rightMargin=PDF_MARGIN,
        topMargin=PDF_MARGIN,
        bottomMargin=PDF_MARGIN,
    )
    # Paragraph parses a mini-markup language, so escape first and keep line breaks
    markup = escape(content).replace("\n", "<br/>")
    doc.build([Paragraph(markup, PDF_BODY_STYLE)])
    return buffer.getvalue()


def split_paragraphs(content: str) -> List[str]:
    """Split on blank lines; one paragraph per non-empty block."""
    blocks = [block.strip() for block in re.split(r"\n{2,}", content)]
    paragraphs = [block for block in blocks if block]
    return paragraphs or [content]


def render_docx(content: str) -> bytes:
    doc = Document()
    for paragraph in split_paragraphs(content):
        doc.add_paragraph(paragraph)

    buffer = BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def encode_document(doc_type: DocumentType, content: str) -> bytes:
    if doc_type == "pdf":
        return render_pdf(content)
    if doc_type == "docx":
        return render_docx(content)
    return content.encode("utf-8")


async def create_document_file(
    store: BlobStore,
    filename: str,
    doc_type: DocumentType,
    content: str,
) -> DocumentCreationResult:
    """Encode ``content`` and persist it under a fresh key in ``store``."""
    final_filename = safe_document_name(filename, doc_type)
    file_id, stored_filename = make_key(final_filename)

    # reportlab and python-docx are synchronous and CPU-bound
    data = await asyncio.to_thread(encode_document, doc_type, content)
    full_path = await store.write(stored_filename, data)

    logger.info(
        "Generated %s document %s (%d bytes)", doc_type, stored_filename, len(data)
    )

    return DocumentCreationResult(
        id=file_id,
        filename=final_filename,
        type=doc_type,
        storedFilename=stored_filename,
        fullPath=full_path,
    )

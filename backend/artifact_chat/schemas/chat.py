"""Pydantic schemas for chat messages, uploads, artifacts and generated files."""

from typing import Optional, List, Literal
from pydantic import BaseModel, Field


Role = Literal["system", "user", "assistant"]

AttachmentCategory = Literal["image", "text", "other"]

DocumentType = Literal["pdf", "docx", "txt", "csv", "md"]


class UploadedFileMetadata(BaseModel):
    """A file stored by POST /upload and referenced from chat messages."""
    id: str
    originalName: str
    storedFilename: str = Field(description="Key of the file in the uploads store")
    mimeType: str
    size: int
    publicUrl: str
    category: AttachmentCategory
    textPreview: Optional[str] = None


class Artifact(BaseModel):
    """Interactive HTML micro-app produced by the create_artifact tool."""
    id: str
    title: str
    description: Optional[str] = None
    previewHtml: str = Field(description="Sanitised markup for inline preview cards")
    fullHtml: str = Field(description="Full micro-app markup; only render inside a sandboxed iframe")


class GeneratedFile(BaseModel):
    """Downloadable document produced by the create_document tool."""
    id: str
    filename: str
    type: DocumentType
    downloadUrl: str
    summary: Optional[str] = None
    storedFilename: str


class ChatMessage(BaseModel):
    id: str
    role: Role
    text: str
    createdAt: str
    attachments: Optional[List[UploadedFileMetadata]] = None
    artifacts: Optional[List[Artifact]] = None
    generatedFiles: Optional[List[GeneratedFile]] = None


class ChatRequestMessage(BaseModel):
    id: str
    role: Role
    text: str = Field(min_length=1)
    attachments: Optional[List[UploadedFileMetadata]] = None


class ChatRequest(BaseModel):
    messages: List[ChatRequestMessage] = Field(min_length=1)
    temperature: Optional[float] = Field(None, ge=0, le=2)


class ChatResponse(BaseModel):
    message: ChatMessage


class UploadResponse(BaseModel):
    files: List[UploadedFileMetadata]


# Tool arguments, parsed from the model's JSON argument strings

class CreateArtifactArgs(BaseModel):
    title: str = Field(min_length=1, max_length=120)
    description: Optional[str] = None
    html: str = Field(min_length=1)
    css: Optional[str] = None
    js: Optional[str] = None


class CreateDocumentArgs(BaseModel):
    filename: str = Field(min_length=1)
    type: DocumentType
    content: str = Field(min_length=1)
    summary: Optional[str] = None

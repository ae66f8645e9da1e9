"""Function tools exposed to the model and their local executors."""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, List, Type

from pydantic import BaseModel, ValidationError

from artifact_chat.schemas.chat import (
    Artifact,
    CreateArtifactArgs,
    CreateDocumentArgs,
    GeneratedFile,
)
from artifact_chat.services.artifact_builder import build_artifact
from artifact_chat.services.blob_store import BlobStore
from artifact_chat.services.document_factory import create_document_file

logger = logging.getLogger(__name__)

GENERATED_URL_PREFIX = "/generated"

# Tool definitions for Responses API function calling
TOOLS = [
    {
        "type": "function",
        "name": "create_artifact",
        "description": (
            "Create an interactive micro-application that can run client-side inside a "
            "sandboxed iframe. Provide the HTML, CSS, and optional JavaScript needed."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "title": {
                    "type": "string",
                    "description": "Short name for the artifact card.",
                },
                "description": {
                    "type": "string",
                    "description": "Optional description for the artifact preview.",
                },
                "html": {
                    "type": "string",
                    "description": "Body markup for the micro-application. Keep it self-contained.",
                },
                "css": {
                    "type": "string",
                    "description": "Optional CSS to style the artifact. Avoid global resets.",
                },
                "js": {
                    "type": "string",
                    "description": "Optional JavaScript that should run when the artifact loads.",
                },
            },
            "required": ["title", "html"],
        },
    },
    {
        "type": "function",
        "name": "create_document",
        "description": (
            "Create a downloadable document (PDF, DOCX, TXT, CSV, or Markdown) from the "
            "provided textual content."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "filename": {
                    "type": "string",
                    "description": "Base filename for the generated document without extension.",
                },
                "type": {
                    "type": "string",
                    "enum": ["pdf", "docx", "txt", "csv", "md"],
                    "description": "File type to generate.",
                },
                "content": {
                    "type": "string",
                    "description": "Raw textual content for the file.",
                },
                "summary": {
                    "type": "string",
                    "description": "Optional short description of the generated document contents.",
                },
            },
            "required": ["filename", "type", "content"],
        },
    },
]


@dataclass
class ToolContext:
    """Everything the tools produced during one chat request."""
    generated_store: BlobStore
    artifacts: List[Artifact] = field(default_factory=list)
    generated_files: List[GeneratedFile] = field(default_factory=list)


def download_url_for(stored_filename: str) -> str:
    return f"{GENERATED_URL_PREFIX}/{stored_filename}"


def _parse_arguments(raw_args: str, schema: Type[BaseModel]):
    """Parse a JSON argument string. Returns (model, None) or (None, field errors)."""
    try:
        payload = json.loads(raw_args) if raw_args else {}
    except json.JSONDecodeError:
        payload = {}

    try:
        return schema.model_validate(payload), None
    except ValidationError as e:
        errors: dict[str, list[str]] = {}
        for err in e.errors():
            key = ".".join(str(part) for part in err["loc"]) or "_root"
            errors.setdefault(key, []).append(err["msg"])
        return None, errors


async def execute_create_artifact(raw_args: str, ctx: ToolContext) -> dict:
    args, errors = _parse_arguments(raw_args, CreateArtifactArgs)
    if errors is not None:
        return {"success": False, "error": "Invalid artifact arguments", "errorDetail": errors}

    artifact = build_artifact(
        title=args.title,
        html=args.html,
        css=args.css,
        js=args.js,
        description=args.description,
    )
    ctx.artifacts.append(artifact)
    logger.info("Created artifact %s (%s)", artifact.id, artifact.title)

    return {"success": True, "artifactId": artifact.id}


async def execute_create_document(raw_args: str, ctx: ToolContext) -> dict:
    args, errors = _parse_arguments(raw_args, CreateDocumentArgs)
    if errors is not None:
        return {"success": False, "error": "Invalid document arguments", "errorDetail": errors}

    result = await create_document_file(
        ctx.generated_store, args.filename, args.type, args.content
    )
    download_url = download_url_for(result.storedFilename)

    ctx.generated_files.append(
        GeneratedFile(
            id=result.id,
            filename=result.filename,
            type=result.type,
            downloadUrl=download_url,
            summary=args.summary,
            storedFilename=result.storedFilename,
        )
    )

    return {
        "success": True,
        "fileId": result.id,
        "downloadUrl": download_url,
        "filename": result.filename,
    }


async def execute_tool(name: str, raw_args: str, ctx: ToolContext) -> dict[str, Any]:
    """Execute a tool call and return the JSON-serialisable result."""
    if name == "create_artifact":
        return await execute_create_artifact(raw_args, ctx)

    elif name == "create_document":
        return await execute_create_document(raw_args, ctx)

    return {"error": f"Unknown function: {name}"}

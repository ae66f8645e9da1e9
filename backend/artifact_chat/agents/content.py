"""Typed input for the Responses API and the conversation -> input mapping."""

import asyncio
import base64
import logging
from typing import Annotated, List, Literal, Sequence, Union

from pydantic import BaseModel, Field

from artifact_chat.schemas.chat import ChatRequestMessage, Role, UploadedFileMetadata
from artifact_chat.services.blob_store import BlobStore
from artifact_chat.services.file_classification import is_text_like

logger = logging.getLogger(__name__)


class InputText(BaseModel):
    type: Literal["input_text"] = "input_text"
    text: str


class InputImage(BaseModel):
    type: Literal["input_image"] = "input_image"
    image_url: str
    detail: Literal["low", "high", "auto"] = "auto"


class OutputText(BaseModel):
    type: Literal["output_text"] = "output_text"
    text: str


ContentBlock = Annotated[
    Union[InputText, InputImage, OutputText], Field(discriminator="type")
]


class InputMessage(BaseModel):
    role: Role
    content: List[ContentBlock]


class FunctionCallOutput(BaseModel):
    type: Literal["function_call_output"] = "function_call_output"
    call_id: str
    output: str


def text_block_for(role: Role, text: str) -> ContentBlock:
    """Assistant turns are replayed as output, everything else as input."""
    if role == "assistant":
        return OutputText(text=text)
    return InputText(text=text)


async def attachment_to_block(
    attachment: UploadedFileMetadata, store: BlobStore
) -> ContentBlock:
    """Map one uploaded file to a single content block.

    Unreadable files degrade to a notice instead of failing the request.
    """
    try:
        data = await store.read(attachment.storedFilename)
    except (OSError, ValueError) as e:
        logger.warning(
            "Failed to read attachment %s: %s", attachment.storedFilename, e
        )
        return InputText(
            text=f'Attachment "{attachment.originalName}" could not be loaded from the server.'
        )

    if attachment.category == "image":
        encoded = base64.b64encode(data).decode("ascii")
        return InputImage(image_url=f"data:{attachment.mimeType};base64,{encoded}")

    if attachment.category == "text" or is_text_like(
        attachment.mimeType, attachment.originalName
    ):
        structured = "\n".join([
            f"File Name: {attachment.originalName}",
            f"MIME Type: {attachment.mimeType}",
            "",
            "Contents:",
            data.decode("utf-8", errors="replace"),
        ])
        return InputText(text=structured)

    return InputText(
        text=(
            f'Attached file "{attachment.originalName}" ({attachment.mimeType}, '
            f"{attachment.size} bytes) is stored at {attachment.publicUrl}. "
            "Describe how you want to handle this file."
        )
    )


async def build_model_input(
    messages: Sequence[ChatRequestMessage], store: BlobStore
) -> List[InputMessage]:
    """Translate the conversation into Responses API input messages."""
    model_input: List[InputMessage] = []

    for message in messages:
        content: List[ContentBlock] = [text_block_for(message.role, message.text)]

        if message.attachments:
            # gather keeps the original attachment order
            content.extend(
                await asyncio.gather(
                    *(attachment_to_block(a, store) for a in message.attachments)
                )
            )

        model_input.append(InputMessage(role=message.role, content=content))

    return model_input

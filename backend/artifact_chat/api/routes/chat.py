"""Chat route: runs one assistant turn with tool calling."""

import logging
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from artifact_chat.agents.chat_agent import ChatAgent
from artifact_chat.api.deps import get_chat_agent
from artifact_chat.core.config import settings
from artifact_chat.core.events import AgentEvent
from artifact_chat.core.exceptions import ToolIterationLimitError
from artifact_chat.schemas.chat import ChatMessage, ChatRequest, ChatResponse
from artifact_chat.services.event_bus import event_bus

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(tags=["chat"])

BACKEND_ERROR = "Failed to generate a response from Azure OpenAI"


@router.post("/chat", response_model=ChatResponse, response_model_exclude_none=True)
@limiter.limit(settings.chat_rate_limit)
async def chat(
    request: Request,
    body: ChatRequest,
    agent: ChatAgent = Depends(get_chat_agent),
):
    """Send the conversation to the model and return the assistant's reply."""

    async def emit_event(event: AgentEvent):
        await event_bus.publish(event)

    try:
        result = await agent.run(
            body.messages,
            temperature=body.temperature,
            on_event=emit_event,
        )
    except ToolIterationLimitError as e:
        logger.error("Chat turn aborted: %s", e)
        raise HTTPException(status_code=500, detail=f"{BACKEND_ERROR}: {e}")
    except Exception as e:
        # OpenAIError and anything raised while executing tools
        logger.exception("Azure call failed: %s", str(e))
        raise HTTPException(status_code=500, detail=f"{BACKEND_ERROR}: {e}")

    logger.info(
        "Chat turn finished in %d iteration(s): %d artifact(s), %d file(s)",
        result.iterations,
        len(result.artifacts),
        len(result.generated_files),
    )

    return ChatResponse(
        message=ChatMessage(
            id=str(uuid.uuid4()),
            role="assistant",
            text=result.text,
            createdAt=datetime.now(timezone.utc).isoformat(),
            artifacts=result.artifacts,
            generatedFiles=result.generated_files,
        )
    )

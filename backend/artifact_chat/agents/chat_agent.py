"""Tool-calling chat agent on the Azure OpenAI Responses API."""

import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from openai import AsyncOpenAI

from artifact_chat.agents.content import FunctionCallOutput, build_model_input
from artifact_chat.agents.prompts import CHAT_AGENT_INSTRUCTIONS
from artifact_chat.agents.tools import TOOLS, ToolContext, execute_tool
from artifact_chat.core.events import AgentEvent, EventCallback, EventType, ignore_event
from artifact_chat.core.exceptions import ToolIterationLimitError
from artifact_chat.schemas.chat import Artifact, ChatRequestMessage, GeneratedFile
from artifact_chat.services.blob_store import BlobStore

logger = logging.getLogger(__name__)


@dataclass
class ToolCall:
    name: str
    call_id: str
    arguments: str


@dataclass
class ChatResult:
    text: str
    artifacts: List[Artifact] = field(default_factory=list)
    generated_files: List[GeneratedFile] = field(default_factory=list)
    iterations: int = 0
    response_id: Optional[str] = None


def extract_tool_calls(response: Any) -> List[ToolCall]:
    """Function calls in output order. Calls without a call id are skipped."""
    calls = []
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "function_call":
            continue
        call_id = getattr(item, "call_id", None)
        if not call_id:
            continue
        calls.append(
            ToolCall(
                name=item.name,
                call_id=call_id,
                arguments=getattr(item, "arguments", None) or "{}",
            )
        )
    return calls


def extract_output_text(response: Any) -> str:
    """First output_text block of the first assistant message, or ''."""
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for content in getattr(item, "content", None) or []:
            if getattr(content, "type", None) == "output_text":
                return content.text or ""
    return ""


class ChatAgent:
    """Runs one chat turn, executing tool calls until the model is done."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        upload_store: BlobStore,
        generated_store: BlobStore,
        default_temperature: float = 0.4,
        max_iterations: int = 10,
    ):
        self.client = client
        self.model = model
        self.upload_store = upload_store
        self.generated_store = generated_store
        self.default_temperature = default_temperature
        self.max_iterations = max_iterations

    async def run(
        self,
        messages: Sequence[ChatRequestMessage],
        temperature: Optional[float] = None,
        on_event: EventCallback = ignore_event,
    ) -> ChatResult:
        """
        Run the agent loop.

        Each iteration is one model round-trip. The first sends the whole
        conversation; later ones continue the previous response with only the
        new tool outputs. Raises ToolIterationLimitError when the model still
        wants tools after ``max_iterations`` round-trips.
        """
        agent_id = str(uuid.uuid4())
        ctx = ToolContext(generated_store=self.generated_store)
        temperature = self.default_temperature if temperature is None else temperature

        await on_event(
            AgentEvent.create(
                EventType.AGENT_STARTED,
                agent_id,
                {"messages": len(messages), "model": self.model},
            )
        )

        model_input = await build_model_input(messages, self.upload_store)
        request: dict[str, Any] = {
            "input": [m.model_dump() for m in model_input],
        }

        try:
            for iteration in range(self.max_iterations):
                await on_event(
                    AgentEvent.create(
                        EventType.LLM_REQUEST,
                        agent_id,
                        {"model": self.model, "iteration": iteration},
                    )
                )

                response = await self.client.responses.create(
                    model=self.model,
                    instructions=CHAT_AGENT_INSTRUCTIONS,
                    tools=TOOLS,
                    temperature=temperature,
                    **request,
                )

                tool_calls = extract_tool_calls(response)

                await on_event(
                    AgentEvent.create(
                        EventType.LLM_RESPONSE,
                        agent_id,
                        {
                            "iteration": iteration,
                            "response_id": response.id,
                            "tool_calls": len(tool_calls),
                        },
                    )
                )

                if not tool_calls:
                    # No tool calls: model produced its final response
                    await on_event(
                        AgentEvent.create(
                            EventType.AGENT_COMPLETED,
                            agent_id,
                            {"status": "success", "iterations": iteration + 1},
                        )
                    )
                    return ChatResult(
                        text=extract_output_text(response),
                        artifacts=ctx.artifacts,
                        generated_files=ctx.generated_files,
                        iterations=iteration + 1,
                        response_id=response.id,
                    )

                if iteration == self.max_iterations - 1:
                    # Results could never be sent back; run nothing
                    break

                outputs = []
                for tc in tool_calls:
                    result = await execute_tool(tc.name, tc.arguments, ctx)

                    await on_event(
                        AgentEvent.create(
                            EventType.TOOL_CALLED,
                            agent_id,
                            {
                                "tool": tc.name,
                                "call_id": tc.call_id,
                                "success": result.get("success", False),
                            },
                        )
                    )

                    outputs.append(
                        FunctionCallOutput(call_id=tc.call_id, output=json.dumps(result))
                    )

                logger.info(
                    "Iteration %d: executed %d tool call(s)", iteration, len(outputs)
                )
                request = {
                    "previous_response_id": response.id,
                    "input": [o.model_dump() for o in outputs],
                }

            await on_event(
                AgentEvent.create(
                    EventType.AGENT_COMPLETED,
                    agent_id,
                    {"status": "max_iterations", "iterations": self.max_iterations},
                )
            )
            raise ToolIterationLimitError(self.max_iterations)

        except ToolIterationLimitError:
            raise
        except Exception as e:
            await on_event(
                AgentEvent.create(
                    EventType.AGENT_COMPLETED,
                    agent_id,
                    {"status": "error", "error": str(e)},
                )
            )
            raise

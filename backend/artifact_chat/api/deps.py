"""Dependency injection for API routes."""
from fastapi import Depends, HTTPException, Request

from artifact_chat.agents.chat_agent import ChatAgent
from artifact_chat.core.config import Settings, settings
from artifact_chat.services.blob_store import BlobStore


def get_settings() -> Settings:
    """Get application settings."""
    return settings


def get_upload_store(settings: Settings = Depends(get_settings)) -> BlobStore:
    return BlobStore(settings.uploads_dir)


def get_generated_store(settings: Settings = Depends(get_settings)) -> BlobStore:
    return BlobStore(settings.generated_dir)


def get_llm_client(request: Request):
    """The client built at startup, or a 500 if credentials were missing."""
    client = getattr(request.app.state, "llm_client", None)
    if client is None:
        raise HTTPException(
            status_code=500,
            detail="Azure OpenAI environment variables are not configured.",
        )
    return client


def get_chat_agent(
    client=Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
    upload_store: BlobStore = Depends(get_upload_store),
    generated_store: BlobStore = Depends(get_generated_store),
) -> ChatAgent:
    return ChatAgent(
        client=client,
        model=settings.azure_openai_deployment,
        upload_store=upload_store,
        generated_store=generated_store,
        default_temperature=settings.default_temperature,
        max_iterations=settings.max_tool_iterations,
    )

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from artifact_chat.api.deps import get_settings
from artifact_chat.core.config import Settings

router = APIRouter(prefix="/settings", tags=["settings"])


class SettingsResponse(BaseModel):
    azure_openai_api_key: str  # masked
    azure_openai_endpoint: str
    azure_openai_deployment: str
    default_temperature: float
    max_tool_iterations: int
    chat_rate_limit: str
    llm_configured: bool


# TODO: [SECURITY] Add authentication middleware before production deployment
# See: https://fastapi.tiangolo.com/tutorial/security/
@router.get("", response_model=SettingsResponse)
async def read_settings(settings: Settings = Depends(get_settings)):
    """Retrieve current settings with masked sensitive values."""
    return settings.get_effective_settings()

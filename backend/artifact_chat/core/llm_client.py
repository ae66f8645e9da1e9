import logging
from typing import Optional

from openai import AsyncOpenAI

from artifact_chat.core.config import Settings
from artifact_chat.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def responses_base_url(endpoint: str) -> str:
    # The Responses API v1 needs no api-version query parameter
    return f"{endpoint.rstrip('/')}/openai/v1"


def build_llm_client(settings: Settings) -> AsyncOpenAI:
    """Build the Azure OpenAI client. Raises ConfigurationError if unconfigured."""
    missing = [
        name
        for name, value in (
            ("AZURE_OPENAI_API_KEY", settings.azure_openai_api_key),
            ("AZURE_OPENAI_ENDPOINT", settings.azure_openai_endpoint),
        )
        if not value
    ]
    if missing:
        raise ConfigurationError(f"Missing {', '.join(missing)}")

    return AsyncOpenAI(
        api_key=settings.azure_openai_api_key,
        base_url=responses_base_url(settings.azure_openai_endpoint),
    )


def try_build_llm_client(settings: Settings) -> Optional[AsyncOpenAI]:
    """Startup variant: log the problem and return None instead of raising."""
    try:
        return build_llm_client(settings)
    except ConfigurationError as e:
        logger.warning("%s. Calls to Azure OpenAI will fail until this is set.", e)
        return None

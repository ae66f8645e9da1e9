from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path
import json
import os


BACKEND_DIR = Path(__file__).parent.parent.parent
SETTINGS_FILE = BACKEND_DIR / "settings.json"


def load_settings_from_file() -> dict:
    """Load settings from JSON file if exists."""
    if SETTINGS_FILE.exists():
        try:
            with open(SETTINGS_FILE) as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError):
            pass
    return {}


class Settings(BaseSettings):
    # Azure OpenAI (Responses API v1)
    azure_openai_api_key: str = ""
    azure_openai_endpoint: str = ""
    azure_openai_deployment: str = "gpt-4.1"

    # Chat behaviour
    default_temperature: float = 0.4
    max_tool_iterations: int = 10
    chat_rate_limit: str = "30/minute"

    # Storage (uploads/ and generated/ live under this directory)
    data_dir: Path = BACKEND_DIR / "data"

    # Server
    backend_port: int = 8000
    cors_origins: List[str] = ["http://localhost:3000"]

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True

    def __init__(self, **kwargs):
        # Load from settings file first
        file_settings = load_settings_from_file()

        # Merge: kwargs > file_settings > env vars (handled by pydantic)
        merged = {**file_settings, **kwargs}

        super().__init__(**merged)

        # Handle CORS_ORIGINS as JSON string from env
        cors_env = os.getenv("CORS_ORIGINS")
        if cors_env:
            try:
                self.cors_origins = json.loads(cors_env)
            except json.JSONDecodeError:
                pass

        # Tolerate endpoints pasted with a trailing slash
        self.azure_openai_endpoint = self.azure_openai_endpoint.rstrip("/")

    @property
    def uploads_dir(self) -> Path:
        return Path(self.data_dir) / "uploads"

    @property
    def generated_dir(self) -> Path:
        return Path(self.data_dir) / "generated"

    @property
    def is_llm_configured(self) -> bool:
        return bool(self.azure_openai_api_key and self.azure_openai_endpoint)

    def get_effective_settings(self) -> dict:
        """Get current effective settings (for API response)."""
        return {
            "azure_openai_api_key": self._mask_key(self.azure_openai_api_key),
            "azure_openai_endpoint": self.azure_openai_endpoint,
            "azure_openai_deployment": self.azure_openai_deployment,
            "default_temperature": self.default_temperature,
            "max_tool_iterations": self.max_tool_iterations,
            "chat_rate_limit": self.chat_rate_limit,
            "llm_configured": self.is_llm_configured,
        }

    def _mask_key(self, key: str) -> str:
        """Mask a secret key for display."""
        if not key:
            return ""
        if len(key) <= 8:
            return "*" * len(key)
        return key[:4] + "*" * (len(key) - 8) + key[-4:]


settings = Settings()

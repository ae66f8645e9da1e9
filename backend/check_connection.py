"""Check that the configured Azure OpenAI deployment answers Responses API calls.

Run with: python check_connection.py
"""

import asyncio
import sys

from dotenv import load_dotenv

load_dotenv()

from openai import OpenAIError

from artifact_chat.core.config import settings
from artifact_chat.core.exceptions import ConfigurationError
from artifact_chat.core.llm_client import build_llm_client, responses_base_url


async def check_connection() -> bool:
    print("Testing Azure OpenAI Connection:")
    print("API Key:", settings._mask_key(settings.azure_openai_api_key) or "NOT SET")
    print("Endpoint:", settings.azure_openai_endpoint or "NOT SET")
    print("Deployment:", settings.azure_openai_deployment)

    try:
        client = build_llm_client(settings)
    except ConfigurationError as e:
        print(f"❌ FAILED - {e}")
        return False

    print("Base URL:", responses_base_url(settings.azure_openai_endpoint))

    try:
        response = await client.responses.create(
            model=settings.azure_openai_deployment,
            input="Hello, this is a test.",
        )
        print("✅ SUCCESS - Responses API reachable")
        print("Response:", response.output_text)
        return True
    except OpenAIError as e:
        print("❌ FAILED - Responses API call")
        print("Error:", str(e))
        status = getattr(e, "status_code", None)
        if status:
            print("Status:", status)
        code = getattr(e, "code", None)
        if code:
            print("Code:", code)
        return False
    finally:
        await client.close()


if __name__ == "__main__":
    ok = asyncio.run(check_connection())
    sys.exit(0 if ok else 1)

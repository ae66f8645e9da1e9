from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

# Load environment variables
load_dotenv()

from artifact_chat.api.routes import chat, files, settings
from artifact_chat.api import websocket
from artifact_chat.core.config import settings as app_settings
from artifact_chat.core.llm_client import try_build_llm_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared Azure OpenAI client once; None if unconfigured."""
    app.state.llm_client = try_build_llm_client(app_settings)
    yield
    if app.state.llm_client is not None:
        await app.state.llm_client.close()


app = FastAPI(
    title="Artifact Chat API",
    version="1.0.0",
    description="Chat backend that lets the model build artifacts and documents",
    lifespan=lifespan,
)

# Attach limiter to app state
app.state.limiter = chat.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 with field-level detail."""
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Invalid request payload.",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


# TODO: [SECURITY] Add authentication middleware before production deployment
# See: https://fastapi.tiangolo.com/tutorial/security/

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(chat.router)
app.include_router(files.router)
app.include_router(settings.router)
app.include_router(websocket.router)


@app.get("/")
async def root():
    return {
        "name": "Artifact Chat API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
async def health():
    return {"status": "healthy"}

"""FastAPI entrypoint - thin layer that wires together services & routes.

  • config.py          - env/config
  • api/auth.py        - authentication dependency
  • api/routers/       - accounts, chats, models
  • services/          - Firestore repository, inference client, services
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from google.cloud import firestore

from modelchat import __version__
from modelchat.config import get_settings
from modelchat.errors import ServiceError
from modelchat.services.firestore import FirestoreRepository
from modelchat.services.ollama import OllamaClient
from modelchat.utils.logging import configure_logging

from .routers import accounts, chats, models

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the Firestore client and inference session before serving; close them after."""
    settings = get_settings()

    client = firestore.Client(project=settings.google_cloud_project, database=settings.firestore_database)
    app.state.repo = FirestoreRepository(client, default_chat_title=settings.default_chat_title)
    app.state.inference_client = OllamaClient(settings.ollama_url, timeout=settings.ollama_timeout_secs)
    logger.info(
        "Connected to Firestore database '%s'; inference at %s",
        settings.firestore_database,
        settings.ollama_url,
    )

    yield

    app.state.inference_client.close()
    app.state.repo.close()


async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Model Chat Backend",
        description="Accounts, AI model configurations and chats relayed to a local inference service.",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*", "Authorization"],
    )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(accounts.router)
    app.include_router(chats.router)
    app.include_router(models.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()

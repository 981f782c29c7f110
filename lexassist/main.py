"""lexassist FastAPI application entry point.

Wires providers, services and routes together.  Loads configuration from
``.env`` and ``config/config.yaml``, configures structured logging, and
exposes ``app`` for uvicorn.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from lexassist import __version__
from lexassist.api.middleware import (
    RequestLoggingMiddleware,
    configure_cors,
    register_error_handlers,
)
from lexassist.api.routes import router as api_router
from lexassist.config.loader import generation_params, load_config
from lexassist.config.settings import Settings
from lexassist.providers.factory import (
    build_conversation_store,
    build_embedding_provider,
    build_llm_provider,
    build_vector_store,
)
from lexassist.services.assistant_service import AssistantService
from lexassist.services.contract_review_service import ContractReviewService
from lexassist.services.ingestion.chunker import TextChunker
from lexassist.services.ingestion.ingestion_service import IngestionService
from lexassist.services.ingestion.text_extractor import TextExtractor
from lexassist.services.prompt_builder import PromptBuilder
from lexassist.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
    app_env=settings.app_env,
)
_logger: structlog.BoundLogger = get_logger(__name__)

_ASSISTANT_OPERATIONS = ("vulnerabilities", "email", "chat", "notice")
_REVIEW_OPERATIONS = ("review", "corpus_question")


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings, app_config: dict[str, Any]) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    llm = build_llm_provider(app_settings)
    embedding_provider = build_embedding_provider(app_settings)
    vector_store = build_vector_store(app_settings, embedding_provider)
    conversation_store = build_conversation_store(app_settings)

    extractor = TextExtractor()
    ingestion_service = IngestionService(
        chunker=TextChunker(),
        embedding_provider=embedding_provider,
        vector_store=vector_store,
        extractor=extractor,
        concurrency=app_settings.embedding_concurrency,
        default_metadata={"category": app_settings.default_document_category},
    )
    prompt_builder = PromptBuilder(
        embedding_provider=embedding_provider,
        vector_store=vector_store,
        top_k=app_settings.rag_top_k,
    )
    assistant_service = AssistantService(
        prompt_builder=prompt_builder,
        llm=llm,
        conversation_store=conversation_store,
        generation={op: generation_params(app_config, op) for op in _ASSISTANT_OPERATIONS},
    )
    review_service = ContractReviewService(
        extractor=extractor,
        ingestion_service=ingestion_service,
        prompt_builder=prompt_builder,
        llm=llm,
        top_k=app_settings.review_top_k,
        generation={op: generation_params(app_config, op) for op in _REVIEW_OPERATIONS},
    )

    # -- Provider registry for /health --
    provider_registry: dict[str, Any] = {
        "llm": llm.is_available(),
        "llm_provider": llm.get_provider_name(),
        "embedding": embedding_provider.is_available(),
        "embedding_provider": embedding_provider.get_provider_name(),
        "vector_store": vector_store.is_available(),
        "vector_store_provider": vector_store.get_provider_name(),
    }

    return {
        "version": __version__,
        "llm": llm,
        "embedding_provider": embedding_provider,
        "vector_store": vector_store,
        "conversation_store": conversation_store,
        "ingestion_service": ingestion_service,
        "assistant_service": assistant_service,
        "review_service": review_service,
        "provider_registry": provider_registry,
        "default_category": app_settings.default_document_category,
    }


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Build all providers and services on startup."""
    components = _build_all(settings, config)

    for key, value in components.items():
        setattr(application.state, key, value)

    _logger.info(
        "app_startup",
        version=__version__,
        environment=settings.app_env,
        llm=components["llm"].get_provider_name(),
        embedding=components["embedding_provider"].get_provider_name(),
        vector_store=components["vector_store"].get_provider_name(),
    )

    yield

    _logger.info("app_shutdown")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="lexassist API",
        version=__version__,
        description=(
            "Retrieval-augmented legal assistant: ingest contracts, then ask for "
            "vulnerability reports, email drafts, notices and chat answers "
            "grounded in the stored text."
        ),
        lifespan=_lifespan,
    )

    register_error_handlers(application)
    configure_cors(application)
    # Added last so it runs first and logs the final status code.
    application.add_middleware(RequestLoggingMiddleware)

    application.include_router(api_router)
    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "lexassist.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )

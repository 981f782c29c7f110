"""Provider selection shared by the API server and the CLI tools.

``LLM_PROVIDER`` / ``EMBEDDING_PROVIDER`` either pin a provider by name or
are ``auto``, which walks the priority chain:

    completion:  gemini -> anthropic -> openai -> ollama
    embedding:   gemini -> openai -> nomic

Ollama and Nomic need no key, so ``auto`` always ends on a local
provider.  A pinned provider whose credentials are missing is a
:class:`ConfigurationError` at startup rather than a failure on the first
request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from lexassist.config.settings import Settings
from lexassist.utils.errors import ConfigurationError

if TYPE_CHECKING:
    from lexassist.interfaces.conversation_store import IConversationStore
    from lexassist.interfaces.embedding_provider import IEmbeddingProvider
    from lexassist.interfaces.llm_provider import ILLMProvider
    from lexassist.interfaces.vector_store_provider import IVectorStoreProvider

logger = structlog.get_logger(logger_name=__name__)

LLM_PROVIDERS = ("gemini", "anthropic", "openai", "ollama")
EMBEDDING_PROVIDERS = ("gemini", "openai", "nomic")


def build_llm_provider(app_settings: Settings) -> ILLMProvider:
    """Return the configured completion provider."""
    choice = app_settings.llm_provider.lower()
    if choice == "auto":
        available = app_settings.get_available_llm_providers()
        choice = available[0] if available else "ollama"
    elif choice not in LLM_PROVIDERS:
        raise ConfigurationError(
            message=f"Unknown LLM_PROVIDER '{choice}'; expected auto or one of {', '.join(LLM_PROVIDERS)}"
        )
    elif choice != "ollama" and choice not in app_settings.get_available_llm_providers():
        raise ConfigurationError(message=f"LLM_PROVIDER={choice} but no API key is configured")

    # Imports are deferred so a CLI run only loads the SDK it uses.
    if choice == "gemini":
        from lexassist.providers.llm.gemini_provider import GeminiLLMProvider

        return GeminiLLMProvider(settings=app_settings)
    if choice == "anthropic":
        from lexassist.providers.llm.anthropic_provider import AnthropicLLMProvider

        return AnthropicLLMProvider(settings=app_settings)
    if choice == "openai":
        from lexassist.providers.llm.openai_provider import OpenAILLMProvider

        return OpenAILLMProvider(settings=app_settings)

    from lexassist.providers.llm.ollama_provider import OllamaLLMProvider

    return OllamaLLMProvider(settings=app_settings)


def build_embedding_provider(app_settings: Settings) -> IEmbeddingProvider:
    """Return the configured embedding provider.

    The same provider must be used for ingestion and queries; switching it
    against an existing collection is caught by the vector store's
    dimension check.
    """
    choice = app_settings.embedding_provider.lower()
    if choice == "auto":
        if app_settings.gemini_api_key:
            choice = "gemini"
        elif app_settings.openai_api_key:
            choice = "openai"
        else:
            choice = "nomic"
    elif choice not in EMBEDDING_PROVIDERS:
        raise ConfigurationError(
            message=(
                f"Unknown EMBEDDING_PROVIDER '{choice}'; "
                f"expected auto or one of {', '.join(EMBEDDING_PROVIDERS)}"
            )
        )
    elif choice == "gemini" and not app_settings.gemini_api_key:
        raise ConfigurationError(message="EMBEDDING_PROVIDER=gemini but GEMINI_API_KEY is not set")
    elif choice == "openai" and not app_settings.openai_api_key:
        raise ConfigurationError(message="EMBEDDING_PROVIDER=openai but OPENAI_API_KEY is not set")

    if choice == "gemini":
        from lexassist.providers.embedding.gemini_embedding_provider import (
            GeminiEmbeddingProvider,
        )

        return GeminiEmbeddingProvider(settings=app_settings)
    if choice == "openai":
        from lexassist.providers.embedding.openai_embedding_provider import (
            OpenAIEmbeddingProvider,
        )

        return OpenAIEmbeddingProvider(settings=app_settings)

    from lexassist.providers.embedding.nomic_embedding_provider import NomicEmbeddingProvider

    provider = NomicEmbeddingProvider(settings=app_settings)
    if not provider.is_available():
        logger.warning(
            "embedding_provider_unreachable",
            provider=provider.get_provider_name(),
            base_url=app_settings.ollama_base_url,
        )
    return provider


def build_vector_store(
    app_settings: Settings,
    embedding_provider: IEmbeddingProvider | None = None,
) -> IVectorStoreProvider:
    """Return the configured vector store.

    When *embedding_provider* is given, ChromaDB checks that stored
    vectors share its dimension.
    """
    choice = app_settings.vector_store.lower()
    if choice == "memory":
        from lexassist.providers.vector_store.memory_provider import InMemoryVectorStore

        return InMemoryVectorStore(collection_name=app_settings.chromadb_collection)
    if choice != "chromadb":
        raise ConfigurationError(
            message=f"Unknown VECTOR_STORE '{choice}'; expected chromadb or memory"
        )

    from lexassist.providers.vector_store.chromadb_provider import ChromaDBProvider

    return ChromaDBProvider(
        persist_directory=app_settings.chromadb_persist_dir,
        collection_name=app_settings.chromadb_collection,
        expected_dimension=embedding_provider.get_dimension() if embedding_provider else None,
    )


def build_conversation_store(app_settings: Settings) -> IConversationStore:
    """Return the configured conversation store, initialised and ready to use."""
    choice = app_settings.conversation_store.lower()
    if choice == "memory":
        from lexassist.providers.conversation.memory_store import InMemoryConversationStore

        return InMemoryConversationStore()
    if choice != "sqlite":
        raise ConfigurationError(
            message=f"Unknown CONVERSATION_STORE '{choice}'; expected memory or sqlite"
        )

    from lexassist.providers.conversation.sqlite_store import SQLiteConversationStore

    store = SQLiteConversationStore(
        db_path=app_settings.conversation_db_path,
        max_age_hours=app_settings.conversation_max_age_hours,
    )
    store.initialize()
    return store

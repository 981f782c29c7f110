"""Public interface definitions for all external service providers.

Every external service the assistant talks to is accessed exclusively
through the abstract base classes defined in this package.  Concrete
adapters implement these interfaces and are constructed explicitly in
``lexassist/main.py`` (or the CLI), then injected into the services.  No
module holds a process-wide client handle.

CONCRETE PROVIDER MAP:
    Interface              →  Concrete implementations (in lexassist/providers/)
    ─────────────────────────────────────────────────────────────────────
    ILLMProvider           →  GeminiLLMProvider, AnthropicLLMProvider,
                              OpenAILLMProvider, OllamaLLMProvider
    IEmbeddingProvider     →  GeminiEmbeddingProvider, OpenAIEmbeddingProvider,
                              NomicEmbeddingProvider
    IVectorStoreProvider   →  ChromaDBProvider, InMemoryVectorStore
    IConversationStore     →  InMemoryConversationStore, SQLiteConversationStore
"""

from lexassist.interfaces.conversation_store import IConversationStore
from lexassist.interfaces.embedding_provider import IEmbeddingProvider
from lexassist.interfaces.llm_provider import ILLMProvider
from lexassist.interfaces.vector_store_provider import IVectorStoreProvider

__all__ = [
    "IConversationStore",
    "IEmbeddingProvider",
    "ILLMProvider",
    "IVectorStoreProvider",
]

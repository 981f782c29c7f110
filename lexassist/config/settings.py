"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# pydantic-settings reads each field from (highest priority first):
#
#   1. Environment variables, e.g. GEMINI_API_KEY=...
#   2. The .env file in the working directory
#   3. The default declared below
#
# Field ``gemini_api_key`` maps to env var ``GEMINI_API_KEY``.  An empty
# string means "not configured" and provider selection in
# lexassist/providers/factory.py skips that provider.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """lexassist application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Provider selection ===
    # "auto" walks the priority chain in providers/factory.py; any other value pins the
    # named provider and fails at startup when it is not configured.
    llm_provider: str = "auto"  # auto | gemini | anthropic | openai | ollama
    embedding_provider: str = "auto"  # auto | gemini | openai | nomic

    # === Completion / embedding providers ===
    gemini_api_key: str = ""
    gemini_text_model: str = "gemini-2.0-flash"
    gemini_embedding_model: str = "models/embedding-001"
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible endpoints (TogetherAI, etc.)
    openai_text_model: str = ""
    openai_embedding_model: str = ""
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    ollama_base_url: str = "http://localhost:11434"
    ollama_text_model: str = "llama3.1"

    # === Vector store ===
    vector_store: str = "chromadb"  # chromadb | memory
    chromadb_persist_dir: str = "./data/chromadb"
    chromadb_collection: str = "lexassist_documents"

    # === Retrieval ===
    rag_top_k: int = 5  # interactive endpoints
    review_top_k: int = 3  # batch corpus questions
    embedding_concurrency: int = 8
    default_document_category: str = "IP Law"

    # === Conversation history ===
    conversation_store: str = "memory"  # memory | sqlite
    conversation_db_path: str = "data/conversations.db"
    conversation_max_age_hours: int = 72

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_llm_providers(self) -> list[str]:
        """Return completion providers that have credentials configured, in priority order."""
        providers: list[str] = []
        if self.gemini_api_key:
            providers.append("gemini")
        if self.anthropic_api_key:
            providers.append("anthropic")
        if self.openai_api_key:
            providers.append("openai")
        if self.ollama_base_url:
            providers.append("ollama")
        return providers

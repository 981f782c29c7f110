"""Completion provider adapters.

Four concrete implementations of ILLMProvider (lexassist/interfaces/llm_provider.py):
    - GeminiLLMProvider    -- gemini-2.0-flash via google-generativeai
    - AnthropicLLMProvider -- Claude Sonnet
    - OpenAILLMProvider    -- gpt-4o-mini (or any OpenAI-compatible API)
    - OllamaLLMProvider    -- local models via an Ollama server

lexassist/providers/factory.py picks one at startup (``LLM_PROVIDER``, or the
first configured provider in the order above); main.py and the CLI inject
it into the services.
"""

from lexassist.providers.llm.anthropic_provider import AnthropicLLMProvider
from lexassist.providers.llm.gemini_provider import GeminiLLMProvider
from lexassist.providers.llm.ollama_provider import OllamaLLMProvider
from lexassist.providers.llm.openai_provider import OpenAILLMProvider

__all__ = [
    "AnthropicLLMProvider",
    "GeminiLLMProvider",
    "OllamaLLMProvider",
    "OpenAILLMProvider",
]

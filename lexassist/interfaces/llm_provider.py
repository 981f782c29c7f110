"""Abstract base class for completion model providers.

Every prompt the assistant sends is a single self-contained string (the
retrieved context, the conversation history and the output contract are
already rendered into it), so the contract is one ``generate`` call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: GeminiLLMProvider, AnthropicLLMProvider,
# OpenAILLMProvider, OllamaLLMProvider
# Located in: lexassist/providers/llm/
class ILLMProvider(ABC):
    """Contract for generative completion services."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 4000,
    ) -> str:
        """Return the model's raw text response to *prompt*.

        Parameters
        ----------
        prompt:
            Fully rendered prompt text.
        temperature:
            Sampling temperature (0.0 = deterministic, 1.0 = creative).
        max_tokens:
            Upper bound on the number of tokens in the response.

        Returns
        -------
        str
            Raw model output.  It may be wrapped in code fences; cleaning it
            up is the response normalizer's job.

        Raises
        ------
        lexassist.utils.errors.CompletionError
            If the API call fails or returns no text.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier such as ``"gemini"`` or ``"openai"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials are configured (does not call the API)."""

    @abstractmethod
    async def validate_credentials(self) -> bool:
        """Make a cheap API call to confirm the credentials are accepted."""

"""Business services composed from injected providers."""

from lexassist.services.assistant_service import AssistantService
from lexassist.services.contract_review_service import ContractReviewService
from lexassist.services.prompt_builder import PromptBuilder, PromptMode

__all__ = [
    "AssistantService",
    "ContractReviewService",
    "PromptBuilder",
    "PromptMode",
]

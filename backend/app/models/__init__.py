"""Models package."""
from app.models.schemas import (
    ChatRequest,
    ChatResponse,
    ContextMessage,
    ReasoningStepModel,
    ResponseMessage,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ContextMessage",
    "ReasoningStepModel",
    "ResponseMessage",
]

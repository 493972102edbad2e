"""
Pydantic models for the chat API request/response payloads.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

MAX_MESSAGE_LENGTH = 1000
MAX_CONTEXT_MESSAGES = 20


class ContextMessage(BaseModel):
    """Prior message supplied by the client to seed a new session."""
    role: Literal["user", "assistant"]
    content: str = Field(..., max_length=MAX_MESSAGE_LENGTH * 10)


class ChatRequest(BaseModel):
    """Chat request from the client."""
    message: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH, description="User message")
    session_id: Optional[str] = Field(
        default=None,
        alias="sessionId",
        max_length=128,
        description="Conversation identifier; a new one is issued when omitted",
    )
    context: Optional[List[ContextMessage]] = Field(
        default=None,
        max_length=MAX_CONTEXT_MESSAGES,
        description="Earlier messages, used only when the session is new",
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "message": "How can I install part number PS11752778?",
                "sessionId": "3f1c2a9e-5d7b-4a8e-9c1f-2b6d8e4a7c10",
            }
        }

    @field_validator("message")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("message must not be blank")
        return value


class ReasoningStepModel(BaseModel):
    """One entry of the agent's reasoning trace."""
    step: int
    type: Literal["thought", "action", "observation"]
    content: str
    tool: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None
    result: Optional[Dict[str, Any]] = None
    timestamp: datetime


class ResponseMessage(BaseModel):
    """Assistant message envelope."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    role: Literal["assistant"] = "assistant"
    content: str = Field(..., description="Assistant reply (markdown)")
    timestamp: datetime = Field(default_factory=datetime.now)
    metadata: Dict[str, Any] = Field(default_factory=dict, description="intent, decision_source, tool_used")


class ChatResponse(BaseModel):
    """Chat response returned to the client."""
    session_id: str
    message: ResponseMessage
    reasoning: Optional[List[ReasoningStepModel]] = None
    products: Optional[List[Dict[str, Any]]] = None
    error: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "session_id": "3f1c2a9e-5d7b-4a8e-9c1f-2b6d8e4a7c10",
                "message": {
                    "id": "b7e4c1d2-0f3a-4e5b-8c6d-1a2b3c4d5e6f",
                    "role": "assistant",
                    "content": "**How to install Refrigerator Water Filter (PS11752778)** ...",
                    "timestamp": "2025-01-15T10:30:00",
                    "metadata": {
                        "intent": "installation",
                        "decision_source": "deterministic",
                        "tool_used": "InstallationGuide",
                    },
                },
                "products": [{"part_number": "PS11752778", "name": "Refrigerator Water Filter", "price": 45.99}],
                "error": None,
            }
        }

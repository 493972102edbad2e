"""
Agent orchestration for PartSelect chat.

This module provides:
- Intent classification and entity extraction
- Tools and the tool registry
- Conversation orchestration (tool selection)
- The per-turn agent loop
"""

from .agent_executor import AgentExecutor, AgentResult, TurnState
from .intent_classifier import EntityExtractor, Intent, IntentClassifier
from .orchestrator import ConversationContext, ConversationOrchestrator, DecisionSource
from .tool_registry import ToolRegistry, build_default_registry

__all__ = [
    "AgentExecutor",
    "AgentResult",
    "TurnState",
    "ConversationOrchestrator",
    "ConversationContext",
    "DecisionSource",
    "Intent",
    "IntentClassifier",
    "EntityExtractor",
    "ToolRegistry",
    "build_default_registry",
]

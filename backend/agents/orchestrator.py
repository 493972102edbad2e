"""
Conversation orchestrator for PartSelect chat agent.

This module handles the Thinking step of a turn:
- Scope check (refrigerators and dishwashers only)
- Tool selection, LLM-assisted when a gateway is configured, rule-based otherwise
- Carry-over of part/model numbers from earlier turns of the same conversation

It also defines ConversationContext, the per-session memory a host keeps
between turns. Nothing turn-scoped is stored on the orchestrator itself.
"""

import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from .base_agent import ToolAction
from .deepseek_client import DeepseekClient
from .errors import GatewayError, ToolValidationError
from .intent_classifier import EntityExtractor, ExtractedEntities, Intent, IntentClassifier
from .prompts import (
    ASK_FOR_MODEL_NUMBER,
    ASK_FOR_PART_AND_MODEL,
    ASK_FOR_PART_NUMBER,
    OUT_OF_SCOPE_RESPONSE,
)
from .tool_registry import ToolRegistry

logger = logging.getLogger(__name__)


class DecisionSource(str, Enum):
    """Who chose the tool for a turn."""
    DETERMINISTIC = "deterministic"
    GATEWAY_ASSISTED = "gateway_assisted"


TOOL_INTENTS = {
    "InstallationGuide": Intent.INSTALLATION,
    "CompatibilityCheck": Intent.COMPATIBILITY,
    "TroubleshootingGuide": Intent.TROUBLESHOOTING,
    "ProductSearch": Intent.SEARCH,
}

# Intents that may reuse a part/model number mentioned earlier in the conversation
CARRY_OVER_INTENTS = {Intent.INSTALLATION, Intent.COMPATIBILITY}

IN_SCOPE_PATTERN = re.compile(
    r"\b(?:fridge|refrigerator|freezer|ice|dishwasher|dish\s+washer|water\s+filter|"
    r"compressor|condenser|evaporator|spray\s+arm|wash\s+arm|rinse\s+aid)\w*",
    re.IGNORECASE,
)
OUT_OF_SCOPE_PATTERN = re.compile(
    r"\b(?:washing\s+machine|washer|dryer|oven|stove|range\s+hood|microwave|toaster|"
    r"blender|air\s+conditioner|furnace|hvac|water\s+heater)s?\b",
    re.IGNORECASE,
)


@dataclass
class Message:
    """Single message in conversation."""
    role: str  # "user" or "assistant"
    content: str
    timestamp: datetime = field(default_factory=datetime.now)
    intent: Optional[Intent] = None


@dataclass
class ConversationContext:
    """Per-session memory carried between turns."""
    conversation_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    history: List[Message] = field(default_factory=list)
    last_part_number: Optional[str] = None
    last_model_number: Optional[str] = None
    conversation_topic: Optional[str] = None  # "refrigerator", "dishwasher", or None
    context_window: int = 10  # Number of recent exchanges to keep

    def add_message(self, role: str, content: str, intent: Optional[Intent] = None) -> None:
        """Add message to conversation history."""
        self.history.append(Message(role=role, content=content, intent=intent))

        # Limit history to context window
        if len(self.history) > self.context_window * 2:
            self.history = self.history[-self.context_window * 2:]

    def remember(self, entities: ExtractedEntities) -> None:
        """Keep the latest identifiers mentioned by the user."""
        if entities.part_number:
            self.last_part_number = entities.part_number
        if entities.model_number:
            self.last_model_number = entities.model_number
        if entities.appliance_type:
            self.conversation_topic = entities.appliance_type

    def recent_messages(self, n: int = 4) -> List[Dict[str, str]]:
        """Last n messages as role/content dicts (LLM format)."""
        return [{"role": m.role, "content": m.content} for m in self.history[-n:]]

    def summary(self) -> Dict[str, Any]:
        """Get summary of conversation so far."""
        return {
            "conversation_id": self.conversation_id,
            "message_count": len(self.history),
            "conversation_topic": self.conversation_topic,
            "last_part_number": self.last_part_number,
            "last_model_number": self.last_model_number,
            "recent_messages": [
                {
                    "role": msg.role,
                    "content": msg.content[:100] + "..." if len(msg.content) > 100 else msg.content,
                    "intent": msg.intent.value if msg.intent else None,
                }
                for msg in self.history[-3:]
            ],
        }


@dataclass
class TurnPlan:
    """
    Outcome of Thinking.

    `action` is the single tool call to make, if any. When there is no
    action, `reply` may hold a fixed answer (clarification, out of scope).
    """
    intent: Intent
    source: DecisionSource
    thought: str
    entities: ExtractedEntities
    action: Optional[ToolAction] = None
    reply: Optional[str] = None


class ConversationOrchestrator:
    """Decides which tool, if any, answers a message."""

    def __init__(
        self,
        registry: ToolRegistry,
        gateway: Optional[DeepseekClient] = None,
        classifier: Optional[IntentClassifier] = None,
        entity_extractor: Optional[EntityExtractor] = None
    ):
        self.registry = registry
        self.gateway = gateway
        self.intent_classifier = classifier or IntentClassifier()
        self.entity_extractor = entity_extractor or EntityExtractor()

    def plan(self, message: str, conversation: Optional[ConversationContext] = None) -> TurnPlan:
        """
        Choose at most one tool call for the message.

        The gateway decision wins when it is available and valid; any gateway
        failure or an unknown tool name falls back to the ordered rules.
        """
        entities = self.entity_extractor.extract(message)

        if self._is_out_of_scope(message, entities, conversation):
            logger.info("Message is outside refrigerator/dishwasher scope")
            return TurnPlan(
                intent=Intent.GENERAL,
                source=DecisionSource.DETERMINISTIC,
                thought="The question is about an appliance I don't cover, so no tool applies.",
                entities=entities,
                reply=OUT_OF_SCOPE_RESPONSE,
            )

        if self.gateway is not None and self.gateway.is_configured:
            plan = self._plan_with_gateway(message, entities, conversation)
            if plan is not None:
                return plan

        return self._plan_with_rules(message, entities, conversation)

    def _plan_with_gateway(
        self,
        message: str,
        entities: ExtractedEntities,
        conversation: Optional[ConversationContext]
    ) -> Optional[TurnPlan]:
        history = conversation.recent_messages() if conversation else None
        try:
            decision = self.gateway.generate_tool_action(message, self.registry.describe(), history)
        except GatewayError as e:
            logger.warning(f"LLM tool selection unavailable, using rules: {e}")
            return None

        if decision is None:
            return TurnPlan(
                intent=Intent.GENERAL,
                source=DecisionSource.GATEWAY_ASSISTED,
                thought="The language model decided no tool is needed for this message.",
                entities=entities,
            )

        if decision.tool not in self.registry:
            logger.warning(f"LLM chose unknown tool '{decision.tool}', using rules")
            return None

        try:
            self.registry.get(decision.tool).validate(decision.parameters)
        except ToolValidationError as e:
            logger.warning(f"LLM parameters rejected, using rules: {e}")
            return None

        logger.info(f"LLM selected tool {decision.tool}")
        return TurnPlan(
            intent=TOOL_INTENTS.get(decision.tool, Intent.GENERAL),
            source=DecisionSource.GATEWAY_ASSISTED,
            thought=f"The language model selected {decision.tool}. {decision.reasoning}".strip(),
            entities=entities,
            action=ToolAction(tool=decision.tool, parameters=decision.parameters, reasoning=decision.reasoning),
        )

    def _plan_with_rules(
        self,
        message: str,
        entities: ExtractedEntities,
        conversation: Optional[ConversationContext]
    ) -> TurnPlan:
        rule = self.intent_classifier.match(message)
        intent = rule.intent

        if intent in CARRY_OVER_INTENTS and conversation is not None:
            entities = self._with_conversation_entities(entities, conversation)

        action = rule.extractor(message, entities)
        reply = None
        if intent == Intent.COMPATIBILITY and action is None:
            reply = self._compatibility_clarification(entities)

        thought = self._describe(intent, entities, action)
        logger.info(f"Rule-based intent: {intent.value}, tool: {action.tool if action else None}")

        return TurnPlan(
            intent=intent,
            source=DecisionSource.DETERMINISTIC,
            thought=thought,
            entities=entities,
            action=action,
            reply=reply,
        )

    @staticmethod
    def _with_conversation_entities(
        entities: ExtractedEntities,
        conversation: ConversationContext
    ) -> ExtractedEntities:
        part_numbers = entities.part_numbers or (
            [conversation.last_part_number] if conversation.last_part_number else []
        )
        model_numbers = entities.model_numbers or (
            [conversation.last_model_number] if conversation.last_model_number else []
        )
        return ExtractedEntities(
            part_numbers=part_numbers,
            model_numbers=model_numbers,
            appliance_type=entities.appliance_type or conversation.conversation_topic,
            brand=entities.brand,
        )

    @staticmethod
    def _compatibility_clarification(entities: ExtractedEntities) -> str:
        if entities.part_number and not entities.model_number:
            return ASK_FOR_MODEL_NUMBER.format(part_number=entities.part_number)
        if entities.model_number and not entities.part_number:
            return ASK_FOR_PART_NUMBER.format(model_clause=f" against your {entities.model_number}")
        return ASK_FOR_PART_AND_MODEL

    @staticmethod
    def _describe(intent: Intent, entities: ExtractedEntities, action: Optional[ToolAction]) -> str:
        details = [f"Classified as {intent.value} intent"]
        if entities.part_number:
            details.append(f"part number {entities.part_number}")
        if entities.model_number:
            details.append(f"model number {entities.model_number}")
        if entities.appliance_type:
            details.append(f"appliance {entities.appliance_type}")
        if entities.brand:
            details.append(f"brand {entities.brand}")
        thought = ", ".join(details) + "."

        if action is not None:
            return f"{thought} Using {action.tool}: {action.reasoning}."
        if intent == Intent.COMPATIBILITY:
            missing = [name for name, value in (("part number", entities.part_number),
                                                ("model number", entities.model_number)) if not value]
            return f"{thought} Missing {' and '.join(missing)}, asking the user instead of guessing."
        return f"{thought} No tool needed."

    @staticmethod
    def _is_out_of_scope(
        message: str,
        entities: ExtractedEntities,
        conversation: Optional[ConversationContext]
    ) -> bool:
        if entities.part_number or IN_SCOPE_PATTERN.search(message):
            return False
        if conversation is not None and conversation.conversation_topic:
            return False
        return bool(OUT_OF_SCOPE_PATTERN.search(message))

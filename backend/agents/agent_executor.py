"""
Agent executor for PartSelect chat.

Runs one user turn through the Think -> Act -> Observe -> Finalize loop:

    Idle -> Thinking -> (ActingOnTool | Finalizing) -> Finalizing -> Done

All turn-scoped state (reasoning log, "has acted" flag, current state) lives
in a TurnContext created per call, so one executor can serve many sessions
concurrently. At most one tool runs per turn.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from catalog.search_engine import SearchEngine

from .base_agent import Observation, ReasoningStep, StepType, ToolAction, dedupe_products
from .deepseek_client import DeepseekClient
from .errors import ToolNotFoundError
from .intent_classifier import Intent
from .orchestrator import ConversationContext, ConversationOrchestrator, DecisionSource, TurnPlan
from .prompts import ERROR_RESPONSE
from .response_generator import ResponseGenerator
from .product_search_tool import DEFAULT_LIMIT, MAX_LIMIT
from .tool_registry import ToolRegistry, build_default_registry

logger = logging.getLogger(__name__)

INITIAL_THOUGHT = "Determining the appropriate tool to use based on the user's message."


class TurnState(str, Enum):
    IDLE = "idle"
    THINKING = "thinking"
    ACTING_ON_TOOL = "acting_on_tool"
    FINALIZING = "finalizing"
    DONE = "done"


ALLOWED_TRANSITIONS = {
    TurnState.IDLE: {TurnState.THINKING},
    TurnState.THINKING: {TurnState.ACTING_ON_TOOL, TurnState.FINALIZING},
    TurnState.ACTING_ON_TOOL: {TurnState.FINALIZING},
    TurnState.FINALIZING: {TurnState.DONE},
    TurnState.DONE: set(),
}


class TurnStateError(RuntimeError):
    """Illegal state transition or a second tool call within one turn."""


@dataclass
class TurnContext:
    """Everything that belongs to a single turn. Never reused."""
    message: str
    state: TurnState = TurnState.IDLE
    reasoning: List[ReasoningStep] = field(default_factory=list)
    has_acted: bool = False
    tool_used: Optional[str] = None
    observation: Optional[Observation] = None

    def transition(self, new_state: TurnState) -> None:
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            raise TurnStateError(f"Illegal transition {self.state.value} -> {new_state.value}")
        logger.debug(f"Turn state: {self.state.value} -> {new_state.value}")
        self.state = new_state

    def _append(self, step_type: StepType, content: str, **kwargs) -> ReasoningStep:
        step = ReasoningStep(step=len(self.reasoning) + 1, type=step_type, content=content, **kwargs)
        self.reasoning.append(step)
        return step

    def think(self, content: str) -> None:
        self._append(StepType.THOUGHT, content)

    def act(self, action: ToolAction) -> None:
        if self.has_acted:
            raise TurnStateError("Only one tool call is allowed per turn")
        self.has_acted = True
        self.tool_used = action.tool
        self._append(
            StepType.ACTION,
            f"Using {action.tool}" + (f": {action.reasoning}" if action.reasoning else ""),
            tool=action.tool,
            parameters=dict(action.parameters),
        )

    def observe(self, observation: Observation, tool: Optional[str] = None) -> None:
        self.observation = observation
        if observation.success:
            content = f"Tool {tool} executed successfully." if tool else "Completed."
        else:
            content = f"Tool {tool} failed: {observation.error}" if tool else f"Error: {observation.error}"
        self._append(
            StepType.OBSERVATION,
            content,
            tool=tool,
            result=observation.result if observation.success else {"error": observation.error},
        )


@dataclass
class AgentResult:
    """What a turn returns to the transport layer."""
    response: str
    reasoning: List[ReasoningStep]
    products: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None
    intent: Optional[Intent] = None
    decision_source: Optional[DecisionSource] = None
    tool_used: Optional[str] = None
    synthesized: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "response": self.response,
            "reasoning": [step.to_dict() for step in self.reasoning],
            "products": self.products,
            "error": self.error,
            "intent": self.intent.value if self.intent else None,
            "decision_source": self.decision_source.value if self.decision_source else None,
            "tool_used": self.tool_used,
            "synthesized": self.synthesized,
        }


class AgentExecutor:
    """Executes turns: plan a tool call, run it, and compose the answer."""

    def __init__(
        self,
        registry: Optional[ToolRegistry] = None,
        deepseek_client: Optional[DeepseekClient] = None,
        synthesis_enabled: bool = True,
        search_engine: Optional[SearchEngine] = None,
        search_default_limit: int = DEFAULT_LIMIT,
        search_max_limit: int = MAX_LIMIT
    ):
        """
        Initialize agent executor.

        Args:
            registry: Tool registry (defaults to the four standard tools)
            deepseek_client: Optional LLM gateway; None means deterministic only
            synthesis_enabled: Let the gateway rephrase successful answers
            search_engine: Engine for the default registry
            search_default_limit: ProductSearch result count when none is given
            search_max_limit: Largest ProductSearch limit accepted
        """
        self.registry = registry or build_default_registry(search_engine, search_default_limit, search_max_limit)
        self.deepseek = deepseek_client
        self.orchestrator = ConversationOrchestrator(self.registry, gateway=deepseek_client)
        self.response_generator = ResponseGenerator(deepseek_client, synthesis_enabled=synthesis_enabled)

        logger.info(
            f"AgentExecutor initialized with tools {self.registry.list()} "
            f"(LLM {'configured' if deepseek_client is not None and deepseek_client.is_configured else 'disabled'})"
        )

    def process_user_input(
        self,
        user_query: str,
        conversation: Optional[ConversationContext] = None
    ) -> AgentResult:
        """
        Process one user message. Never raises.

        Args:
            user_query: User's input message
            conversation: Session memory; updated with this exchange when given

        Returns:
            AgentResult with response, reasoning log and extracted products
        """
        logger.info(f"Processing user input: {user_query[:100]}")

        turn = TurnContext(message=user_query)
        plan: Optional[TurnPlan] = None
        error = None
        synthesized = False

        try:
            turn.transition(TurnState.THINKING)
            turn.think(INITIAL_THOUGHT)
            plan = self.orchestrator.plan(user_query, conversation)
            turn.think(plan.thought)

            if plan.action is not None:
                self._act(turn, plan.action)

            turn.transition(TurnState.FINALIZING)
            response, synthesized = self.response_generator.generate(
                user_query, turn.tool_used, turn.observation, fallback_reply=plan.reply
            )
            if turn.observation is not None and not turn.observation.success:
                error = turn.observation.error

        except Exception as e:
            logger.error(f"Error processing turn: {e}", exc_info=True)
            turn.observe(Observation.failure(f"Internal error ({type(e).__name__})"))
            response = ERROR_RESPONSE
            error = "internal_error"
            turn.state = TurnState.FINALIZING

        turn.transition(TurnState.DONE)

        products = []
        if turn.observation is not None and turn.observation.success:
            products = dedupe_products((turn.observation.result or {}).get("products", []))

        if conversation is not None:
            self._record(conversation, user_query, response, plan)

        logger.info(
            f"Turn complete: intent={plan.intent.value if plan else None}, "
            f"tool={turn.tool_used}, source={plan.source.value if plan else None}"
        )

        return AgentResult(
            response=response,
            reasoning=turn.reasoning,
            products=products,
            error=error,
            intent=plan.intent if plan else None,
            decision_source=plan.source if plan else None,
            tool_used=turn.tool_used,
            synthesized=synthesized,
        )

    def _act(self, turn: TurnContext, action: ToolAction) -> None:
        try:
            tool = self.registry.get(action.tool)
        except ToolNotFoundError as e:
            # Unresolvable tool means no action this turn
            logger.warning(str(e))
            turn.think(f"Tool '{action.tool}' is not available, answering without a tool.")
            return

        turn.transition(TurnState.ACTING_ON_TOOL)
        turn.act(action)
        tool_result = tool.execute(action.parameters)
        turn.observe(Observation.from_tool_result(tool_result), tool=action.tool)

    @staticmethod
    def _record(
        conversation: ConversationContext,
        user_query: str,
        response: str,
        plan: Optional[TurnPlan]
    ) -> None:
        intent = plan.intent if plan else None
        conversation.add_message("user", user_query, intent=intent)
        conversation.add_message("assistant", response)
        if plan is not None:
            conversation.remember(plan.entities)

    def check_health(self, live: bool = False) -> Dict[str, Any]:
        """
        Executor health: tools and gateway configuration (no secrets).

        With live=True a configured gateway is also pinged, which costs one API call.
        """
        llm = dict(self.deepseek.status()) if self.deepseek is not None else {"configured": False}
        if live and self.deepseek is not None:
            llm["reachable"] = self.deepseek.check_api_health()
        return {"tools": self.registry.list(), "llm": llm}

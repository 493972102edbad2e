"""
Building blocks shared by the tools and the agent loop.

- Tool: base class for a named, schema-validated capability
- ToolResult: what a tool returns (success + data, or a typed error)
- ToolAction: a decision to invoke one tool with parameters
- Observation / ReasoningStep: entries of a turn's reasoning log
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from catalog.models import Product
from catalog.normalizer import normalize_part_number
from catalog.search_engine import SearchEngine

from .errors import NotFoundError, ToolValidationError

logger = logging.getLogger(__name__)


def product_to_dict(product: Product) -> Dict[str, Any]:
    """JSON-ready product payload (enums as plain strings)."""
    return product.model_dump(mode="json")


@dataclass
class ToolResult:
    """Outcome of a single tool execution."""
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "data": self.data,
            "error": self.error,
            "metadata": self.metadata,
        }


@dataclass(frozen=True)
class ToolAction:
    """Decision to call one tool. `reasoning` is provenance only."""
    tool: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    reasoning: str = ""


@dataclass(frozen=True)
class Observation:
    """Result of acting: `result` on success, `error` (and any suggestions) on failure."""
    success: bool
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)

    @classmethod
    def from_tool_result(cls, tool_result: ToolResult) -> "Observation":
        if tool_result.success:
            return cls(success=True, result=tool_result.data or {})
        return cls(
            success=False,
            error=tool_result.error or "Unknown tool error",
            suggestions=list(tool_result.metadata.get("suggestions") or []),
        )

    @classmethod
    def failure(cls, error: str) -> "Observation":
        return cls(success=False, error=error)


class StepType(str, Enum):
    THOUGHT = "thought"
    ACTION = "action"
    OBSERVATION = "observation"


@dataclass
class ReasoningStep:
    """Single entry of a turn's append-only reasoning log."""
    step: int
    type: StepType
    content: str
    tool: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None
    result: Optional[Dict[str, Any]] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step,
            "type": self.type.value,
            "content": self.content,
            "tool": self.tool,
            "parameters": self.parameters,
            "result": self.result,
            "timestamp": self.timestamp.isoformat(),
        }


class Tool(ABC):
    """
    Base class for all tools.

    Subclasses declare `name`, `description` and a pydantic `input_model`, and
    implement run(). execute() validates raw parameters first, so run() only
    ever sees well-formed input. Tools hold no per-call state.
    """

    name: str = ""
    description: str = ""
    input_model: Type[BaseModel]

    def __init__(self, engine: SearchEngine):
        self.engine = engine

    def validate(self, parameters: Dict[str, Any]) -> BaseModel:
        try:
            return self.input_model.model_validate(parameters or {})
        except ValidationError as e:
            problems = []
            for error in e.errors():
                location = ".".join(str(part) for part in error.get("loc", ())) or "parameters"
                problems.append(f"{location}: {error.get('msg')}")
            raise ToolValidationError(self.name, problems) from e

    @abstractmethod
    def run(self, params: BaseModel) -> Dict[str, Any]:
        """Execute with validated parameters. May raise NotFoundError."""

    def execute(self, parameters: Dict[str, Any]) -> ToolResult:
        """Validate, run and wrap the outcome in a ToolResult."""
        logger.info(f"Executing tool '{self.name}' with {parameters}")

        try:
            params = self.validate(parameters)
            data = self.run(params)
        except ToolValidationError as e:
            logger.warning(str(e))
            return ToolResult(
                success=False,
                error=str(e),
                metadata={"tool": self.name, "error_type": "validation", "problems": e.problems},
            )
        except NotFoundError as e:
            logger.info(f"Tool '{self.name}' found nothing: {e}")
            return ToolResult(
                success=False,
                error=str(e),
                metadata={"tool": self.name, "error_type": "not_found", "suggestions": e.suggestions},
            )

        return ToolResult(success=True, data=data, metadata={"tool": self.name})

    def describe(self) -> Dict[str, Any]:
        """Tool catalog entry handed to the LLM gateway."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.input_model.model_json_schema(),
        }


def dedupe_products(products: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Drop repeated part numbers, first occurrence wins."""
    seen = set()
    unique = []
    for product in products:
        key = normalize_part_number(product.get("part_number", ""))
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(product)
    return unique

"""
Exception hierarchy for the assistant.

Validation and not-found errors are reported back to the user as failed tool
observations. Gateway errors are recovered locally by falling back to the
deterministic path. Anything else is an internal error handled at the
executor boundary.
"""

from typing import List, Optional


class PartSelectError(Exception):
    """Base class for all assistant errors."""


class ToolValidationError(PartSelectError):
    """Tool parameters failed schema validation."""

    def __init__(self, tool_name: str, problems: List[str]):
        self.tool_name = tool_name
        self.problems = problems
        super().__init__(f"Invalid parameters for {tool_name}: {'; '.join(problems)}")


class NotFoundError(PartSelectError):
    """Something the user referred to does not exist."""

    def __init__(self, message: str, suggestions: Optional[List[str]] = None):
        self.suggestions = suggestions or []
        super().__init__(message)


class PartNotFoundError(NotFoundError):
    def __init__(self, part_number: str, suggestions: Optional[List[str]] = None):
        self.part_number = part_number
        super().__init__(f"Part {part_number} was not found in our catalog", suggestions)


class SymptomNotFoundError(NotFoundError):
    pass


class ToolNotFoundError(NotFoundError):
    def __init__(self, tool_name: str, available: List[str]):
        self.tool_name = tool_name
        super().__init__(
            f"Tool '{tool_name}' not found. Available tools: {', '.join(available) or 'none'}",
        )


class GatewayError(PartSelectError):
    """LLM gateway could not produce a usable answer."""


class GatewayUnavailableError(GatewayError):
    """Unconfigured, unreachable, timed out, rate limited or rejected."""


class GatewayResponseError(GatewayError):
    """The gateway replied, but the reply was malformed or failed validation."""

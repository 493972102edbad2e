"""
Name-keyed registry of the tools the agent can call.
"""

import logging
from typing import Any, Dict, List, Optional

from catalog.search_engine import SearchEngine

from .base_agent import Tool
from .compatibility_tool import CompatibilityTool
from .errors import ToolNotFoundError
from .installation_tool import InstallationTool
from .product_search_tool import DEFAULT_LIMIT, MAX_LIMIT, ProductSearchTool
from .troubleshooting_tool import TroubleshootingTool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Registered tools, in registration order.

    Registering a name twice replaces the earlier tool (a warning is logged).
    """

    def __init__(self):
        self._tools: Dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        if tool.name in self._tools:
            logger.warning(f"Tool '{tool.name}' is already registered, overwriting")
        self._tools[tool.name] = tool
        logger.debug(f"Registered tool '{tool.name}'")

    def get(self, name: str) -> Tool:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name, self.list()) from None

    def list(self) -> List[str]:
        return list(self._tools)

    def describe(self) -> List[Dict[str, Any]]:
        """Tool catalog (name, description, parameter schema) for the LLM gateway."""
        return [tool.describe() for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


def build_default_registry(
    engine: Optional[SearchEngine] = None,
    search_default_limit: int = DEFAULT_LIMIT,
    search_max_limit: int = MAX_LIMIT
) -> ToolRegistry:
    """Registry with the four standard tools sharing one search engine."""
    engine = engine or SearchEngine()
    registry = ToolRegistry()
    registry.register(ProductSearchTool(engine, default_limit=search_default_limit, max_limit=search_max_limit))
    for tool_class in (CompatibilityTool, InstallationTool, TroubleshootingTool):
        registry.register(tool_class(engine))
    return registry

"""Tests for ToolRegistry."""

import logging

import pytest

from agents.errors import ToolNotFoundError
from agents.product_search_tool import ProductSearchTool
from agents.tool_registry import ToolRegistry, build_default_registry


class TestToolRegistry:
    def test_default_tools_in_order(self, registry):
        assert registry.list() == ["ProductSearch", "CompatibilityCheck", "InstallationGuide", "TroubleshootingGuide"]
        assert len(registry) == 4

    def test_get(self, registry):
        assert registry.get("InstallationGuide").name == "InstallationGuide"
        assert "ProductSearch" in registry
        assert "Nope" not in registry

    def test_unknown_tool_lists_available(self, registry):
        with pytest.raises(ToolNotFoundError) as exc:
            registry.get("Nope")
        assert "ProductSearch" in str(exc.value)

    def test_overwrite_warns(self, engine, caplog):
        registry = ToolRegistry()
        first, second = ProductSearchTool(engine), ProductSearchTool(engine)
        registry.register(first)
        with caplog.at_level(logging.WARNING, logger="agents.tool_registry"):
            registry.register(second)
        assert registry.get("ProductSearch") is second
        assert len(registry) == 1
        assert "overwriting" in caplog.text

    def test_search_limits_reach_product_search(self, engine):
        registry = build_default_registry(engine, search_default_limit=3, search_max_limit=8)
        tool = registry.get("ProductSearch")
        assert (tool.default_limit, tool.max_limit) == (3, 8)

    def test_describe(self, registry):
        catalog = registry.describe()
        assert [entry["name"] for entry in catalog] == registry.list()
        assert all(entry["description"] for entry in catalog)

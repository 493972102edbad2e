"""Shared fixtures for the PartSelect assistant test suite.

Uses the real in-memory reference catalog. The LLM gateway is never contacted:
tests either run without one (deterministic mode) or use a MagicMock stub.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Ensure backend is importable
BACKEND_DIR = Path(__file__).resolve().parent.parent
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from agents.agent_executor import AgentExecutor
from agents.deepseek_client import DeepseekClient
from agents.tool_registry import build_default_registry
from catalog.search_engine import SearchEngine, load_catalog


# =============================================================================
# CATALOG FIXTURES
# =============================================================================

@pytest.fixture
def catalog():
    """The reference catalog (10 products, 5 symptoms)."""
    return load_catalog()


@pytest.fixture
def engine(catalog):
    return SearchEngine(catalog)


# =============================================================================
# AGENT FIXTURES
# =============================================================================

@pytest.fixture
def registry(engine):
    """Registry with the four standard tools."""
    return build_default_registry(engine)


@pytest.fixture
def executor(registry):
    """Executor in deterministic mode (no LLM gateway)."""
    return AgentExecutor(registry=registry)


@pytest.fixture
def stub_gateway():
    """Configured gateway stub; tests set return values / side effects."""
    gateway = MagicMock(spec=DeepseekClient)
    gateway.is_configured = True
    gateway.status.return_value = {
        "provider": "deepseek",
        "configured": True,
        "model": "deepseek-chat",
        "base_url": "https://api.deepseek.com/v1",
    }
    return gateway

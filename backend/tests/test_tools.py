"""Tests for the four tools: input validation, results and typed failures."""

import pytest

from agents.base_agent import dedupe_products
from agents.compatibility_tool import CompatibilityTool, confidence_label
from agents.installation_tool import InstallationTool
from agents.product_search_tool import ProductSearchTool
from agents.troubleshooting_tool import TroubleshootingTool


# =============================================================================
# PRODUCT SEARCH
# =============================================================================

class TestProductSearchTool:
    @pytest.fixture
    def tool(self, engine):
        return ProductSearchTool(engine)

    def test_requires_a_criterion(self, tool):
        result = tool.execute({})
        assert not result.success
        assert result.metadata["error_type"] == "validation"
        assert "ProductSearch" in result.error

    def test_blank_query_counts_as_missing(self, tool):
        assert not tool.execute({"query": "   "}).success

    def test_limit_is_bounded(self, tool):
        result = tool.execute({"query": "filter", "limit": 50})
        assert not result.success
        assert any("limit" in problem for problem in result.metadata["problems"])

    def test_accepts_camel_case_parameters(self, tool):
        result = tool.execute({"partNumber": "PS11752778"})
        assert result.success
        assert result.data["products"][0]["part_number"] == "PS11752778"
        assert result.data["summary"].endswith("Top result is Refrigerator Water Filter (PS11752778).")

    def test_default_limit(self, tool):
        result = tool.execute({"category": "refrigerator"})
        assert result.data["total_count"] == 6
        assert len(result.data["products"]) == 5

    def test_configured_limits(self, engine):
        tool = ProductSearchTool(engine, default_limit=2, max_limit=3)
        assert len(tool.execute({"category": "refrigerator"}).data["products"]) == 2
        assert len(tool.execute({"category": "refrigerator", "limit": 3}).data["products"]) == 3
        assert not tool.execute({"category": "refrigerator", "limit": 4}).success
        assert tool.describe()["parameters"]["properties"]["limit"]["maximum"] == 3

    def test_default_above_max_is_rejected(self, engine):
        with pytest.raises(ValueError):
            ProductSearchTool(engine, default_limit=10, max_limit=5)

    def test_unknown_category_is_rejected(self, tool):
        assert not tool.execute({"category": "oven"}).success

    def test_no_results_summary(self, tool):
        result = tool.execute({"query": "xyzzy"})
        assert result.success
        assert result.data["products"] == []
        assert result.data["summary"] == 'No products found for "xyzzy".'
        assert result.data["suggestions"]

    def test_idempotent(self, tool):
        params = {"query": "water filter", "brand": "whirlpool"}
        assert tool.execute(params).to_dict() == tool.execute(params).to_dict()


# =============================================================================
# COMPATIBILITY
# =============================================================================

class TestCompatibilityTool:
    @pytest.fixture
    def tool(self, engine):
        return CompatibilityTool(engine)

    def test_confidence_language(self):
        assert confidence_label(1.0) == "confirmed"
        assert confidence_label(0.8) == "highly likely"
        assert confidence_label(0.5) == "possible"

    @pytest.mark.parametrize("params", [
        {"part_number": "PS11752778"},
        {"model_number": "WRF989SDAM"},
        {"part_number": "  ", "model_number": "WRF989SDAM"},
    ])
    def test_both_parameters_required(self, tool, params):
        result = tool.execute(params)
        assert not result.success
        assert result.metadata["error_type"] == "validation"

    def test_compatible(self, tool):
        data = tool.execute({"part_number": "PS11752778", "model_number": "WRF989SDAM"}).data
        assert data["is_compatible"]
        assert data["confidence_label"] == "confirmed"
        assert [p["part_number"] for p in data["products"]] == ["PS11752778"]

    def test_unknown_part_is_a_result_not_an_error(self, tool):
        result = tool.execute({"part_number": "PS00000000", "model_number": "WRF989SDAM"})
        assert result.success
        assert not result.data["part_found"]
        assert result.data["confidence"] == 0.0

    def test_incompatible_with_alternatives(self, tool):
        data = tool.execute({"partNumber": "WPW10082861", "modelNumber": "KDTM404ESS0"}).data
        assert not data["is_compatible"]
        assert data["confidence_label"] is None
        assert [p["part_number"] for p in data["alternative_parts"]] == ["WPW10348269", "W10300924"]
        assert data["recommendation"].startswith("Consider one of the compatible alternatives")


# =============================================================================
# INSTALLATION
# =============================================================================

class TestInstallationTool:
    @pytest.fixture
    def tool(self, engine):
        return InstallationTool(engine)

    def test_instructions(self, tool):
        data = tool.execute({"part_number": "PS11752778"}).data
        assert data["part_name"] == "Refrigerator Water Filter"
        assert data["difficulty"] == "easy"
        assert len(data["steps"]) == 6
        assert data["required_tools"] == ["None - tool-free installation"]
        assert not data["generic_steps"]

    def test_unknown_part_is_not_found(self, tool):
        result = tool.execute({"part_number": "PS99999999"})
        assert not result.success
        assert result.metadata["error_type"] == "not_found"
        assert "PS99999999" in result.error

    def test_not_found_suggests_close_part_numbers(self, tool):
        result = tool.execute({"part_number": "PS1175277"})
        assert result.metadata["suggestions"] == ["Did you mean PS11752778 (Refrigerator Water Filter)?"]


# =============================================================================
# TROUBLESHOOTING
# =============================================================================

class TestTroubleshootingTool:
    @pytest.fixture
    def tool(self, engine):
        return TroubleshootingTool(engine)

    def test_symptom_required(self, tool):
        assert not tool.execute({"symptom": ""}).success

    def test_guide(self, tool):
        data = tool.execute({
            "symptom": "The ice maker on my Whirlpool fridge is not working",
            "category": "refrigerator",
            "brand": "Whirlpool",
        }).data
        assert data["symptom"] == "Ice maker not producing ice"
        assert len(data["diagnostic_steps"]) == 5
        assert not data["should_contact_professional"]
        assert data["summary"].startswith("Ice maker not producing ice: 5 common causes, 3 recommended parts")

    def test_professional_flag(self, tool):
        data = tool.execute({"symptom": "dishwasher not heating"}).data
        assert data["should_contact_professional"]
        assert "Professional help recommended" in data["summary"]

    def test_no_match(self, tool):
        result = tool.execute({"symptom": "strange humming from the back"})
        assert not result.success
        assert result.metadata["error_type"] == "not_found"
        assert result.metadata["suggestions"]


# =============================================================================
# SHARED
# =============================================================================

class TestDedupeProducts:
    def test_first_seen_wins(self):
        products = [
            {"part_number": "PS11752778", "name": "first"},
            {"part_number": "ps-11752778", "name": "second"},
            {"part_number": "W10300924", "name": "latch"},
        ]
        assert [p["name"] for p in dedupe_products(products)] == ["first", "latch"]


class TestDescribe:
    def test_schema_for_gateway(self, engine):
        entry = ProductSearchTool(engine).describe()
        assert entry["name"] == "ProductSearch"
        assert "properties" in entry["parameters"]

"""Tests for SearchEngine: search, compatibility, troubleshooting, installation."""

import pytest

from catalog.models import Availability, Category
from catalog.search_engine import (
    CONFIDENCE_EXACT,
    CONFIDENCE_PARTIAL,
    REASON_COMPLEX_REPAIR,
    SCORE_EXACT_PART_NUMBER,
    PartCatalog,
    SearchQuery,
    extract_symptom_phrases,
    tokenize,
)
from catalog.sample_data import PRODUCTS, SYMPTOMS


# =============================================================================
# CATALOG
# =============================================================================

class TestPartCatalog:
    def test_loads_reference_data(self, catalog):
        assert len(catalog) == 10
        assert len(catalog.symptoms) == 5

    def test_lookup_is_normalized(self, catalog):
        assert catalog.get_product("ps-11752778").part_number == "PS11752778"
        assert catalog.get_product("PS00000000") is None

    def test_rejects_duplicate_part_numbers(self):
        duplicate = dict(PRODUCTS[0], part_number="ps11752778")
        with pytest.raises(ValueError):
            PartCatalog.from_records(PRODUCTS + [duplicate], SYMPTOMS)

    def test_stats(self, catalog):
        stats = catalog.stats()
        assert stats["total_products"] == 10
        assert stats["by_category"] == {"refrigerator": 6, "dishwasher": 4}
        assert stats["by_availability"]["backordered"] == 1
        assert stats["price_range"]["min"] == 45.99


class TestTokenize:
    def test_drops_stop_words_and_short_tokens(self):
        assert tokenize("I need a water filter for my fridge") == ["water", "filter", "fridge"]

    def test_empty(self):
        assert tokenize(None) == []

    def test_symptom_phrases(self):
        assert extract_symptom_phrases("The ice maker is not working") == ["ice maker"]
        assert extract_symptom_phrases("water in the bottom, it won't drain") == ["not draining"]


# =============================================================================
# SEARCH
# =============================================================================

class TestSearch:
    def test_exact_part_number_short_circuits(self, engine):
        result = engine.search(SearchQuery(part_number="PS11752778", query="dishwasher pump"))
        assert result.total_count == 1
        assert [m.product.part_number for m in result.matches] == ["PS11752778"]
        assert result.matches[0].score == SCORE_EXACT_PART_NUMBER

    def test_exact_match_tolerates_formatting(self, engine):
        result = engine.search(SearchQuery(part_number="ps 1175-2778"))
        assert result.products[0].part_number == "PS11752778"

    @pytest.mark.parametrize("product", PRODUCTS, ids=lambda p: p["part_number"])
    def test_every_part_number_is_found_first(self, engine, product):
        result = engine.search(SearchQuery(part_number=product["part_number"]))
        assert len(result.matches) == 1
        assert result.matches[0].product.part_number == product["part_number"]

    def test_partial_part_number_is_substring_filter(self, engine):
        result = engine.search(SearchQuery(part_number="PS1175"))
        assert result.products[0].part_number == "PS11752778"
        assert result.matches[0].score < SCORE_EXACT_PART_NUMBER

    def test_free_text_ranking_is_stable(self, engine):
        result = engine.search(SearchQuery(query="water filter"))
        numbers = [p.part_number for p in result.products]
        # Both filters score the same; catalog order breaks the tie
        assert numbers[:3] == ["PS11752778", "WR49X10283", "W10190965"]
        assert result.matches[0].score == result.matches[1].score

    def test_category_filter(self, engine):
        result = engine.search(SearchQuery(category=Category.DISHWASHER))
        assert result.total_count == 4
        assert all(p.category == Category.DISHWASHER for p in result.products)

    def test_brand_filter_is_case_insensitive_substring(self, engine):
        result = engine.search(SearchQuery(brand="ge"))
        assert [p.part_number for p in result.products] == ["WR49X10283"]

    def test_price_and_availability_filters(self, engine):
        assert [p.part_number for p in engine.search(SearchQuery(max_price=50)).products] == ["PS11752778"]
        backordered = engine.search(SearchQuery(availability=Availability.BACKORDERED))
        assert [p.part_number for p in backordered.products] == ["5304505524"]

    def test_filters_narrow_without_or(self, engine):
        result = engine.search(SearchQuery(category=Category.DISHWASHER, brand="GE"))
        assert result.total_count == 0
        assert result.suggestions == [
            "Browse all dishwasher parts",
            "Browse by appliance type (refrigerator or dishwasher)",
        ]

    def test_pagination_reports_total(self, engine):
        result = engine.search(SearchQuery(category=Category.REFRIGERATOR, limit=2, offset=2))
        assert result.total_count == 6
        assert len(result.matches) == 2

    def test_no_results_suggestions_capped(self, engine):
        result = engine.search(SearchQuery(query="xyzzy", part_number="ZZ999", category=Category.REFRIGERATOR))
        assert result.matches == []
        assert len(result.suggestions) == 3
        assert result.suggestions[0].startswith("Try a shorter portion")

    def test_in_stock_outranks_backordered(self, engine):
        result = engine.search(SearchQuery(query="dishwasher"))
        numbers = [p.part_number for p in result.products]
        assert numbers.index("5304505524") > numbers.index("W10300924")


# =============================================================================
# COMPATIBILITY
# =============================================================================

class TestCompatibility:
    def test_exact_model(self, engine):
        result = engine.check_compatibility("PS11752778", "WRF989SDAM")
        assert result.is_compatible
        assert result.confidence == CONFIDENCE_EXACT

    def test_exact_model_tolerates_formatting(self, engine):
        result = engine.check_compatibility("ps11752778", "wrf-989sdam")
        assert result.confidence == CONFIDENCE_EXACT

    @pytest.mark.parametrize("product", PRODUCTS, ids=lambda p: p["part_number"])
    def test_every_listed_model_is_confirmed(self, engine, product):
        for model in product["compatible_models"]:
            result = engine.check_compatibility(product["part_number"], model)
            assert result.is_compatible and result.confidence == CONFIDENCE_EXACT

    def test_suffix_tolerant_match_has_lower_confidence(self, engine):
        result = engine.check_compatibility("WPW10348269", "WDT780SAEM")
        assert result.is_compatible
        assert result.confidence == CONFIDENCE_PARTIAL

    def test_unknown_part(self, engine):
        result = engine.check_compatibility("PS00000000", "WRF989SDAM")
        assert not result.is_compatible
        assert result.confidence == 0.0
        assert result.part is None

    def test_incompatible_lists_same_category_alternatives(self, engine):
        result = engine.check_compatibility("WPW10082861", "KDTM404ESS0")
        assert not result.is_compatible
        assert result.confidence == 0.0
        assert [p.part_number for p in result.alternative_parts] == ["WPW10348269", "W10300924"]

    def test_alternatives_never_cross_category(self, engine):
        result = engine.check_compatibility("PS11752778", "WDT780SAEM1")
        assert not result.is_compatible
        assert result.alternative_parts == []


# =============================================================================
# TROUBLESHOOTING
# =============================================================================

class TestTroubleshooting:
    def test_strong_match(self, engine):
        matches = engine.search_troubleshooting("dishwasher not draining")
        assert matches[0].symptom.id == "dishwasher-not-draining"
        assert matches[0].strong_match

    def test_key_phrase_match(self, engine):
        matches = engine.search_troubleshooting(
            "The ice maker on my Whirlpool fridge is not working", Category.REFRIGERATOR
        )
        assert [m.symptom.id for m in matches] == ["ice-maker-not-working"]
        assert not matches[0].strong_match
        assert [p.part_number for p in matches[0].recommended_parts] == ["W10873791", "W10190965", "PS11752778"]

    def test_category_filter(self, engine):
        assert engine.search_troubleshooting("leaking", Category.REFRIGERATOR) == []

    def test_cause_matches_in_either_direction(self, engine):
        matches = engine.search_troubleshooting("kinked drain hose")
        assert matches[0].symptom.id == "dishwasher-not-draining"

    def test_professional_for_many_steps(self, engine):
        match = engine.search_troubleshooting("dishwasher not heating")[0]
        assert match.should_contact_professional
        assert match.reason == REASON_COMPLEX_REPAIR

    def test_five_steps_is_not_professional(self, engine):
        match = engine.search_troubleshooting("dishwasher leaking")[0]
        assert len(match.diagnostic_steps) == 5
        assert not match.should_contact_professional

    def test_blank_text(self, engine):
        assert engine.search_troubleshooting("   ") == []


# =============================================================================
# INSTALLATION
# =============================================================================

class TestInstallation:
    def test_authored_steps(self, engine):
        guide = engine.get_installation_instructions("PS11752778")
        assert not guide.generic
        assert [s.step for s in guide.steps] == [1, 2, 3, 4, 5, 6]

    def test_generic_steps_when_none_authored(self, engine):
        guide = engine.get_installation_instructions("WR49X10283")
        assert guide.generic
        assert len(guide.steps) == 5

    def test_notes_for_hard_long_electrical_job(self, engine):
        notes = engine.get_installation_instructions("WPW10348269").additional_notes
        assert any("technician" in n for n in notes)
        assert any("90 minutes" in n for n in notes)
        assert any("circuit breaker" in n for n in notes)

    def test_unknown_part(self, engine):
        assert engine.get_installation_instructions("PS00000000") is None

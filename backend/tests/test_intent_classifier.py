"""Tests for entity extraction and the ordered intent rules."""

import pytest

from agents.intent_classifier import (
    INTENT_RULES,
    EntityExtractor,
    Intent,
    IntentClassifier,
    IntentRule,
)


@pytest.fixture
def extractor():
    return EntityExtractor()


@pytest.fixture
def classifier():
    return IntentClassifier()


# =============================================================================
# ENTITIES
# =============================================================================

class TestEntityExtractor:
    def test_part_and_model(self, extractor):
        entities = extractor.extract("Is PS11752778 compatible with wdt780saem1?")
        assert entities.part_numbers == ["PS11752778"]
        assert entities.model_numbers == ["WDT780SAEM1"]

    @pytest.mark.parametrize("part_number", ["PS11752778", "WPW10348269", "W10873791", "WR49X10283", "5304505524"])
    def test_part_number_formats(self, extractor, part_number):
        entities = extractor.extract(f"Tell me about {part_number}")
        assert entities.part_number == part_number
        assert entities.model_number is None

    def test_appliance_and_brand(self, extractor):
        entities = extractor.extract("My GE fridge ice maker stopped")
        assert entities.appliance_type == "refrigerator"
        assert entities.brand == "GE"

    def test_dishwasher(self, extractor):
        assert extractor.extract("dish washer won't start").appliance_type == "dishwasher"

    def test_brand_needs_word_boundary(self, extractor):
        assert extractor.extract("how do I get started").brand is None

    def test_duplicates_collapsed(self, extractor):
        assert extractor.extract("PS11752778 or ps11752778?").part_numbers == ["PS11752778"]


# =============================================================================
# RULES
# =============================================================================

class TestIntentRules:
    @pytest.mark.parametrize("message,intent", [
        ("How can I install part number PS11752778?", Intent.INSTALLATION),
        ("Is this part compatible with my WDT780SAEM1 model?", Intent.COMPATIBILITY),
        ("The ice maker on my Whirlpool fridge is not working. How can I fix it?", Intent.TROUBLESHOOTING),
        ("I need a water filter", Intent.SEARCH),
        ("Hello!", Intent.GREETING),
        ("WR49X10283", Intent.GENERAL),
    ])
    def test_classify(self, classifier, message, intent):
        assert classifier.classify(message) == intent

    def test_installation_before_troubleshooting(self, classifier):
        assert classifier.classify("How do I replace the broken drain pump?") == Intent.INSTALLATION

    def test_search_before_greeting(self, classifier):
        assert classifier.classify("Hi, I need a water filter") == Intent.SEARCH

    def test_last_rule_is_catch_all(self):
        assert INTENT_RULES[-1].intent == Intent.GENERAL
        assert INTENT_RULES[-1].predicate("anything at all")

    def test_custom_rules_fall_through_to_last(self):
        only = IntentRule(Intent.GREETING, lambda m: False, lambda m, e: None)
        assert IntentClassifier([only]).classify("hello") == Intent.GREETING

    def test_needs_rules(self):
        with pytest.raises(ValueError):
            IntentClassifier([])


class TestExtractors:
    def _action(self, classifier, extractor, message):
        return classifier.match(message).extractor(message, extractor.extract(message))

    def test_installation_with_part(self, classifier, extractor):
        action = self._action(classifier, extractor, "How can I install part number PS11752778?")
        assert action.tool == "InstallationGuide"
        assert action.parameters == {"part_number": "PS11752778"}

    def test_installation_without_part_searches(self, classifier, extractor):
        action = self._action(classifier, extractor, "How do I install a dishwasher door latch?")
        assert action.tool == "ProductSearch"
        assert action.parameters["category"] == "dishwasher"
        assert action.parameters["limit"] == 3

    def test_compatibility_missing_part(self, classifier, extractor):
        assert self._action(classifier, extractor, "Is this compatible with my WDT780SAEM1?") is None

    def test_troubleshooting(self, classifier, extractor):
        action = self._action(classifier, extractor, "My Whirlpool fridge is not cooling")
        assert action.tool == "TroubleshootingGuide"
        assert action.parameters == {
            "symptom": "My Whirlpool fridge is not cooling",
            "category": "refrigerator",
            "brand": "Whirlpool",
        }

    def test_greeting_has_no_action(self, classifier, extractor):
        assert self._action(classifier, extractor, "hello there") is None

    def test_general_without_content(self, classifier, extractor):
        assert self._action(classifier, extractor, "???") is None

"""
Intent classification and entity extraction for user messages.

Intent detection is an ordered list of rules. Each rule pairs a predicate on
the message with an intent and an extractor that turns the message (plus the
extracted entities) into a tool action. The first rule whose predicate holds
wins, so the order of INTENT_RULES is the precedence:

    installation > compatibility > troubleshooting > search > greeting > general

Entities (part numbers, model numbers, appliance, brand) come from fixed-format
regular expressions.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from catalog.search_engine import tokenize

from .base_agent import ToolAction

logger = logging.getLogger(__name__)


class Intent(str, Enum):
    """User intent types."""
    INSTALLATION = "installation"
    COMPATIBILITY = "compatibility"
    TROUBLESHOOTING = "troubleshooting"
    SEARCH = "search"
    GREETING = "greeting"
    GENERAL = "general"


# ============================================================================
# ENTITY EXTRACTION
# ============================================================================

PART_NUMBER_PATTERN = re.compile(
    r"\b(PS\d{7,9}|WPW\d{8}|W\d{8}|WR\d{2}X\d{4,5}|\d{10})\b",
    re.IGNORECASE,
)
MODEL_NUMBER_PATTERN = re.compile(
    r"\b([A-Z]{2,5}\d{2,4}[A-Z0-9]{3,10})\b",
    re.IGNORECASE,
)

APPLIANCE_PATTERNS = {
    "refrigerator": re.compile(r"\b(?:refrigerators?|fridges?|freezers?|ice\s*makers?)\b", re.IGNORECASE),
    "dishwasher": re.compile(r"\b(?:dishwashers?|dish\s+washers?)\b", re.IGNORECASE),
}

BRANDS = {
    "whirlpool": "Whirlpool",
    "ge": "GE",
    "frigidaire": "Frigidaire",
    "kenmore": "Kenmore",
    "maytag": "Maytag",
    "kitchenaid": "KitchenAid",
    "lg": "LG",
    "samsung": "Samsung",
    "bosch": "Bosch",
    "electrolux": "Electrolux",
}
BRAND_PATTERN = re.compile(r"\b(" + "|".join(BRANDS) + r")\b", re.IGNORECASE)


@dataclass
class ExtractedEntities:
    """Entities extracted from a single message."""
    part_numbers: List[str] = field(default_factory=list)
    model_numbers: List[str] = field(default_factory=list)
    appliance_type: Optional[str] = None  # "refrigerator" or "dishwasher"
    brand: Optional[str] = None

    @property
    def part_number(self) -> Optional[str]:
        return self.part_numbers[0] if self.part_numbers else None

    @property
    def model_number(self) -> Optional[str]:
        return self.model_numbers[0] if self.model_numbers else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "part_number": self.part_number,
            "model_number": self.model_number,
            "appliance_type": self.appliance_type,
            "brand": self.brand,
        }


class EntityExtractor:
    """Pull identifiers, appliance type and brand out of free text."""

    def extract(self, message: str) -> ExtractedEntities:
        part_numbers = self.extract_part_numbers(message)

        # Part numbers like WPW10348269 also fit the model pattern
        remainder = PART_NUMBER_PATTERN.sub(" ", message)

        entities = ExtractedEntities(
            part_numbers=part_numbers,
            model_numbers=self.extract_model_numbers(remainder),
            appliance_type=self.extract_appliance_type(message),
            brand=self.extract_brand(message),
        )
        logger.debug(f"Extracted entities: {entities.to_dict()}")
        return entities

    @staticmethod
    def extract_part_numbers(message: str) -> List[str]:
        return _unique(match.upper() for match in PART_NUMBER_PATTERN.findall(message))

    @staticmethod
    def extract_model_numbers(message: str) -> List[str]:
        return _unique(match.upper() for match in MODEL_NUMBER_PATTERN.findall(message))

    @staticmethod
    def extract_appliance_type(message: str) -> Optional[str]:
        for appliance, pattern in APPLIANCE_PATTERNS.items():
            if pattern.search(message):
                return appliance
        return None

    @staticmethod
    def extract_brand(message: str) -> Optional[str]:
        match = BRAND_PATTERN.search(message)
        return BRANDS[match.group(1).lower()] if match else None


def _unique(values) -> List[str]:
    return list(dict.fromkeys(values))


# ============================================================================
# INTENT RULES
# ============================================================================

INSTALLATION_PATTERN = re.compile(
    r"\b(?:install(?:s|ing|ation|ed)?|replac(?:e|es|ing|ement)|"
    r"how\s+to\s+(?:put\s+in|change|swap)|step[\s-]+by[\s-]+step|instructions?|set\s*up)\b",
    re.IGNORECASE,
)
COMPATIBILITY_PATTERN = re.compile(
    r"\b(?:compatib\w*|fits?|works?\s+with|work\s+on|match(?:es)?)\b",
    re.IGNORECASE,
)
TROUBLESHOOTING_PATTERN = re.compile(
    r"\b(?:not\s+working|broken|problem|issue|fix|repair|troubleshoot\w*|won'?t|doesn'?t|"
    r"isn'?t|stopped|leak\w*|noisy|noise|not\s+(?:cooling|draining|drain|making|producing|heating|drying|cleaning))\b",
    re.IGNORECASE,
)
SEARCH_PATTERN = re.compile(
    r"\b(?:find|search|looking\s+for|need|want|where|buy|purchase|parts?|price|cost|in\s+stock)\b",
    re.IGNORECASE,
)
GREETING_PATTERN = re.compile(
    r"\b(?:hello|hi|hey|help|what\s+can|how\s+can\s+you|good\s+(?:morning|afternoon|evening))\b",
    re.IGNORECASE,
)

SEARCH_LIMIT = 5
INSTALLATION_SEARCH_LIMIT = 3


def _params(**kwargs) -> Dict[str, Any]:
    return {key: value for key, value in kwargs.items() if value is not None}


def _installation_action(message: str, entities: ExtractedEntities) -> Optional[ToolAction]:
    if entities.part_number:
        return ToolAction(
            tool="InstallationGuide",
            parameters={"part_number": entities.part_number},
            reasoning=f"Installation question about part {entities.part_number}",
        )
    return ToolAction(
        tool="ProductSearch",
        parameters=_params(query=message, category=entities.appliance_type, limit=INSTALLATION_SEARCH_LIMIT),
        reasoning="Installation question without a part number, looking up the part first",
    )


def _compatibility_action(message: str, entities: ExtractedEntities) -> Optional[ToolAction]:
    if entities.part_number and entities.model_number:
        return ToolAction(
            tool="CompatibilityCheck",
            parameters={"part_number": entities.part_number, "model_number": entities.model_number},
            reasoning=f"Checking part {entities.part_number} against model {entities.model_number}",
        )
    # Caller asks for whatever is missing
    return None


def _troubleshooting_action(message: str, entities: ExtractedEntities) -> Optional[ToolAction]:
    return ToolAction(
        tool="TroubleshootingGuide",
        parameters=_params(
            symptom=message,
            category=entities.appliance_type,
            brand=entities.brand,
            model_number=entities.model_number,
        ),
        reasoning="User describes a problem with their appliance",
    )


def _search_action(message: str, entities: ExtractedEntities) -> Optional[ToolAction]:
    return ToolAction(
        tool="ProductSearch",
        parameters=_params(
            query=message,
            part_number=entities.part_number,
            category=entities.appliance_type,
            brand=entities.brand,
            limit=SEARCH_LIMIT,
        ),
        reasoning="User is looking for a part",
    )


def _greeting_action(message: str, entities: ExtractedEntities) -> Optional[ToolAction]:
    return None


def _general_action(message: str, entities: ExtractedEntities) -> Optional[ToolAction]:
    if not (tokenize(message) or entities.part_number or entities.appliance_type or entities.brand):
        return None
    return ToolAction(
        tool="ProductSearch",
        parameters=_params(
            query=message,
            part_number=entities.part_number,
            category=entities.appliance_type,
            brand=entities.brand,
            limit=SEARCH_LIMIT,
        ),
        reasoning="No specific intent detected, trying a product search",
    )


@dataclass(frozen=True)
class IntentRule:
    intent: Intent
    predicate: Callable[[str], bool]
    extractor: Callable[[str, ExtractedEntities], Optional[ToolAction]]


INTENT_RULES = (
    IntentRule(Intent.INSTALLATION, lambda m: bool(INSTALLATION_PATTERN.search(m)), _installation_action),
    IntentRule(Intent.COMPATIBILITY, lambda m: bool(COMPATIBILITY_PATTERN.search(m)), _compatibility_action),
    IntentRule(Intent.TROUBLESHOOTING, lambda m: bool(TROUBLESHOOTING_PATTERN.search(m)), _troubleshooting_action),
    IntentRule(Intent.SEARCH, lambda m: bool(SEARCH_PATTERN.search(m)), _search_action),
    IntentRule(Intent.GREETING, lambda m: bool(GREETING_PATTERN.search(m)), _greeting_action),
    IntentRule(Intent.GENERAL, lambda m: True, _general_action),
)


class IntentClassifier:
    """First-match-wins classification over an ordered rule list."""

    def __init__(self, rules: Sequence[IntentRule] = INTENT_RULES):
        if not rules:
            raise ValueError("IntentClassifier needs at least one rule")
        self.rules = tuple(rules)

    def match(self, message: str) -> IntentRule:
        for rule in self.rules:
            if rule.predicate(message):
                logger.debug(f"Intent rule matched: {rule.intent.value}")
                return rule
        # Rule lists without a catch-all fall through to the last rule
        return self.rules[-1]

    def classify(self, message: str) -> Intent:
        return self.match(message).intent

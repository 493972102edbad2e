"""
Matching engine over the in-memory parts catalog.

Resolves part numbers, model numbers and free-text queries against the
catalog:
- search(): filtered, scored and paginated product search
- check_compatibility(): part/model compatibility with a confidence score
- search_troubleshooting(): symptom lookup with diagnostic steps and parts
- get_installation_instructions(): installation steps, tools and notes

Scores are additive integers from a fixed weight table and every ordering is
deterministic (stable sort on catalog insertion order).
"""

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from .models import (
    Availability,
    Category,
    DiagnosticStep,
    Difficulty,
    InstallationStep,
    Product,
    TroubleshootingSymptom,
)
from .normalizer import canonicalize, models_match_loosely, normalize_part_number
from .sample_data import PRODUCTS, SYMPTOMS

logger = logging.getLogger(__name__)

# Relevance weights. Each tier outranks the sum of everything below it for
# realistic queries, so the ordering reads top to bottom.
SCORE_EXACT_PART_NUMBER = 1000
SCORE_PART_NUMBER_SUBSTRING = 500
SCORE_NAME_TOKEN = 100
SCORE_DESCRIPTION_TOKEN = 50
SCORE_BRAND = 30
AVAILABILITY_SCORES = {
    Availability.IN_STOCK: 20,
    Availability.BACKORDERED: 10,
    Availability.OUT_OF_STOCK: 0,
}
DIFFICULTY_SCORES = {
    Difficulty.EASY: 4,
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 0,
}

MAX_SUGGESTIONS = 3
MAX_ALTERNATIVES = 3

CONFIDENCE_EXACT = 1.0
CONFIDENCE_PARTIAL = 0.8

PROFESSIONAL_STEP_THRESHOLD = 5
REASON_COMPLEX_REPAIR = "Complex repair requiring multiple diagnostic steps"
REASON_ELECTRICAL_REPAIR = "Electrical repairs should be performed by qualified technicians"

LONG_INSTALL_MINUTES = 60

STOP_WORDS = {
    "the", "and", "for", "with", "my", "how", "can", "you", "your", "what", "which",
    "part", "parts", "number", "need", "want", "find", "looking", "this", "that",
    "are", "does", "is", "it", "its", "me", "where", "buy", "purchase", "search",
    "install", "installing", "replace", "replacing", "help", "please", "get", "have",
    "new", "one", "some", "any", "from", "about", "show", "there", "do", "to",
}
MIN_TOKEN_LENGTH = 3
MIN_PART_FRAGMENT_LENGTH = 5

# Key phrases and the ways users tend to describe them. Used to reduce a long
# complaint ("the ice maker on my fridge is not working") to phrases that
# appear in symptom records.
SYMPTOM_PHRASES = {
    "ice maker": ["ice maker", "icemaker", "no ice", "not making ice"],
    "not draining": ["not draining", "won't drain", "wont drain", "doesn't drain", "not drain",
                     "standing water", "water in the bottom", "water in bottom"],
    "not cooling": ["not cooling", "not cold", "too warm", "warm"],
    "leaking": ["leak", "puddle", "dripping"],
    "not heating": ["not heating", "not drying", "won't dry", "wont dry", "wet dishes", "not hot"],
}

_WORD = re.compile(r"[a-z0-9]+")


def tokenize(text: Optional[str]) -> List[str]:
    """Lower-case search terms with stop words and short tokens removed."""
    if not text:
        return []
    terms = []
    for word in _WORD.findall(text.lower()):
        if len(word) < MIN_TOKEN_LENGTH or word in STOP_WORDS:
            continue
        if word not in terms:
            terms.append(word)
    return terms


def _term_in_words(term: str, words: Sequence[str]) -> bool:
    # Prefix tolerance covers plurals and -ing forms ("filters", "draining")
    for word in words:
        if word == term:
            return True
        if len(term) >= 4 and len(word) >= 4 and (word.startswith(term) or term.startswith(word)):
            return True
    return False


def _count_hits(terms: Sequence[str], text: str) -> int:
    words = _WORD.findall(text.lower())
    return sum(1 for term in terms if _term_in_words(term, words))


def _mutual_substring(first: str, second: str) -> bool:
    first, second = first.strip().lower(), second.strip().lower()
    if not first or not second:
        return False
    return first in second or second in first


def extract_symptom_phrases(text: str) -> List[str]:
    """Key phrases from SYMPTOM_PHRASES whose aliases occur in text."""
    lowered = text.lower()
    return [
        phrase for phrase, aliases in SYMPTOM_PHRASES.items()
        if any(alias in lowered for alias in aliases)
    ]


# ============================================================================
# CATALOG
# ============================================================================

class PartCatalog:
    """Read-only, ordered collection of products and troubleshooting symptoms."""

    def __init__(self, products: Iterable[Product], symptoms: Iterable[TroubleshootingSymptom]):
        self._products: Tuple[Product, ...] = tuple(products)
        self._symptoms: Tuple[TroubleshootingSymptom, ...] = tuple(symptoms)
        self._by_part_number: Dict[str, Product] = {}

        for product in self._products:
            key = normalize_part_number(product.part_number)
            if key in self._by_part_number:
                raise ValueError(f"Duplicate part number in catalog: {product.part_number}")
            self._by_part_number[key] = product

    @classmethod
    def from_records(cls, products: Iterable[dict], symptoms: Iterable[dict]) -> "PartCatalog":
        return cls(
            [Product.model_validate(record) for record in products],
            [TroubleshootingSymptom.model_validate(record) for record in symptoms],
        )

    @property
    def products(self) -> Tuple[Product, ...]:
        return self._products

    @property
    def symptoms(self) -> Tuple[TroubleshootingSymptom, ...]:
        return self._symptoms

    def get_product(self, part_number: str) -> Optional[Product]:
        """Exact lookup on the canonical part number."""
        return self._by_part_number.get(normalize_part_number(part_number))

    def stats(self) -> Dict[str, object]:
        """Counts and price range, used by health reporting."""
        by_category: Dict[str, int] = {}
        by_brand: Dict[str, int] = {}
        by_availability: Dict[str, int] = {}
        for product in self._products:
            by_category[product.category.value] = by_category.get(product.category.value, 0) + 1
            by_brand[product.brand] = by_brand.get(product.brand, 0) + 1
            by_availability[product.availability.value] = by_availability.get(product.availability.value, 0) + 1

        prices = [product.price for product in self._products]
        return {
            "total_products": len(self._products),
            "total_symptoms": len(self._symptoms),
            "by_category": by_category,
            "by_brand": by_brand,
            "by_availability": by_availability,
            "price_range": {
                "min": min(prices) if prices else None,
                "max": max(prices) if prices else None,
            },
        }

    def __len__(self) -> int:
        return len(self._products)


@lru_cache()
def load_catalog() -> PartCatalog:
    """Build the reference catalog once per process."""
    catalog = PartCatalog.from_records(PRODUCTS, SYMPTOMS)
    logger.info(f"Loaded catalog: {len(catalog.products)} products, {len(catalog.symptoms)} symptoms")
    return catalog


# ============================================================================
# QUERY / RESULT TYPES
# ============================================================================

class SearchQuery(BaseModel):
    """Product search request understood by SearchEngine.search()."""
    query: Optional[str] = None
    part_number: Optional[str] = None
    category: Optional[Category] = None
    brand: Optional[str] = None
    min_price: Optional[float] = Field(default=None, ge=0)
    max_price: Optional[float] = Field(default=None, ge=0)
    availability: Optional[Availability] = None
    limit: int = Field(default=10, ge=1, le=50)
    offset: int = Field(default=0, ge=0)


@dataclass(frozen=True)
class ScoredProduct:
    product: Product
    score: int


@dataclass
class SearchResult:
    matches: List[ScoredProduct]
    total_count: int
    search_terms: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    @property
    def products(self) -> List[Product]:
        return [match.product for match in self.matches]


@dataclass
class CompatibilityResult:
    part_number: str
    model_number: str
    is_compatible: bool
    confidence: float
    reason: str
    part: Optional[Product] = None
    alternative_parts: List[Product] = field(default_factory=list)


@dataclass
class SymptomMatch:
    symptom: TroubleshootingSymptom
    diagnostic_steps: List[DiagnosticStep]
    recommended_parts: List[Product]
    should_contact_professional: bool
    reason: Optional[str] = None
    strong_match: bool = True


@dataclass
class InstallationInstructions:
    part: Product
    steps: List[InstallationStep]
    required_tools: List[str]
    safety_warnings: List[str]
    difficulty: Difficulty
    estimated_time: int
    additional_notes: List[str] = field(default_factory=list)
    generic: bool = False


# ============================================================================
# ENGINE
# ============================================================================

class SearchEngine:
    """Scores and ranks catalog entries. Stateless apart from the catalog."""

    def __init__(self, catalog: Optional[PartCatalog] = None):
        self.catalog = catalog or load_catalog()

    # ------------------------------------------------------------------
    # Product search
    # ------------------------------------------------------------------

    def search(self, query: SearchQuery) -> SearchResult:
        """
        Search products.

        An exact part-number hit short-circuits and is returned alone with the
        maximum score. Otherwise filters narrow the candidates in sequence,
        the remainder is scored, sorted (stable) and paginated.
        """
        terms = tokenize(query.query)

        if query.part_number:
            exact = self.catalog.get_product(query.part_number)
            if exact is not None:
                logger.debug(f"Exact part number match: {exact.part_number}")
                return SearchResult(
                    matches=[ScoredProduct(exact, SCORE_EXACT_PART_NUMBER)],
                    total_count=1,
                    search_terms=terms,
                )

        candidates = self._apply_filters(list(self.catalog.products), query, terms)

        scored = [ScoredProduct(product, self._score(product, query, terms)) for product in candidates]
        scored.sort(key=lambda match: match.score, reverse=True)

        total = len(scored)
        page = scored[query.offset:query.offset + query.limit]

        suggestions = self._suggestions(query) if total == 0 else []
        logger.debug(f"Search terms={terms} total={total} returned={len(page)}")

        return SearchResult(matches=page, total_count=total, search_terms=terms, suggestions=suggestions)

    def _apply_filters(self, candidates: List[Product], query: SearchQuery, terms: List[str]) -> List[Product]:
        if query.part_number:
            fragment = normalize_part_number(query.part_number)
            candidates = [p for p in candidates if fragment and fragment in normalize_part_number(p.part_number)]

        if query.category is not None:
            candidates = [p for p in candidates if p.category == query.category]

        if query.brand:
            brand = query.brand.strip().lower()
            candidates = [p for p in candidates if brand in p.brand.lower()]

        if query.min_price is not None:
            candidates = [p for p in candidates if p.price >= query.min_price]
        if query.max_price is not None:
            candidates = [p for p in candidates if p.price <= query.max_price]

        if query.availability is not None:
            candidates = [p for p in candidates if p.availability == query.availability]

        if terms:
            candidates = [p for p in candidates if self._matches_terms(p, terms)]

        return candidates

    def _matches_terms(self, product: Product, terms: List[str]) -> bool:
        if self._part_fragment_hit(product, terms):
            return True
        text = f"{product.name} {product.description} {product.brand}"
        return _count_hits(terms, text) > 0

    def _part_fragment_hit(self, product: Product, terms: List[str]) -> bool:
        canonical = normalize_part_number(product.part_number)
        for term in terms:
            fragment = canonicalize(term)
            if len(fragment) >= MIN_PART_FRAGMENT_LENGTH and fragment in canonical:
                return True
        return False

    def _score(self, product: Product, query: SearchQuery, terms: List[str]) -> int:
        score = 0

        if query.part_number or self._part_fragment_hit(product, terms):
            score += SCORE_PART_NUMBER_SUBSTRING

        score += SCORE_NAME_TOKEN * _count_hits(terms, product.name)
        score += SCORE_DESCRIPTION_TOKEN * _count_hits(terms, product.description)

        brand = product.brand.lower()
        if (query.brand and query.brand.strip().lower() in brand) or brand in terms:
            score += SCORE_BRAND

        score += AVAILABILITY_SCORES[product.availability]
        score += DIFFICULTY_SCORES[product.installation_difficulty]
        return score

    def _suggestions(self, query: SearchQuery) -> List[str]:
        suggestions = []
        if query.part_number:
            shorter = normalize_part_number(query.part_number)[:-2]
            if shorter:
                suggestions.append(f"Try a shorter portion of the part number, such as '{shorter}'")
            else:
                suggestions.append("Double-check the part number on your old part or its packaging")
        if query.query:
            suggestions.append("Try different or fewer keywords, e.g. the part type ('water filter', 'drain pump')")
        if query.category is not None:
            suggestions.append(f"Browse all {query.category.value} parts")
        suggestions.append("Browse by appliance type (refrigerator or dishwasher)")
        return suggestions[:MAX_SUGGESTIONS]

    # ------------------------------------------------------------------
    # Compatibility
    # ------------------------------------------------------------------

    def check_compatibility(self, part_number: str, model_number: str) -> CompatibilityResult:
        """Never raises; an unknown part is simply incompatible with confidence 0."""
        part = self.catalog.get_product(part_number)
        if part is None:
            return CompatibilityResult(
                part_number=part_number,
                model_number=model_number,
                is_compatible=False,
                confidence=0.0,
                reason=f"Part {part_number} was not found in our catalog.",
            )

        wanted = canonicalize(model_number)
        if wanted and any(canonicalize(model) == wanted for model in part.compatible_models):
            return CompatibilityResult(
                part_number=part.part_number,
                model_number=model_number,
                is_compatible=True,
                confidence=CONFIDENCE_EXACT,
                reason=f"Model {model_number} is listed as compatible with {part.name}.",
                part=part,
            )

        loose = next((model for model in part.compatible_models if models_match_loosely(model, model_number)), None)
        if loose is not None:
            return CompatibilityResult(
                part_number=part.part_number,
                model_number=model_number,
                is_compatible=True,
                confidence=CONFIDENCE_PARTIAL,
                reason=(
                    f"Model {model_number} closely matches listed model {loose}; "
                    f"{part.name} is very likely compatible."
                ),
                part=part,
            )

        return CompatibilityResult(
            part_number=part.part_number,
            model_number=model_number,
            is_compatible=False,
            confidence=0.0,
            reason=f"Model {model_number} is not in the compatibility list for {part.name}.",
            part=part,
            alternative_parts=self._alternatives(part, wanted),
        )

    def _alternatives(self, part: Product, canonical_model: str) -> List[Product]:
        if not canonical_model:
            return []
        alternatives = [
            product for product in self.catalog.products
            if product.category == part.category
            and product.part_number != part.part_number
            and any(canonicalize(model) == canonical_model for model in product.compatible_models)
        ]
        return alternatives[:MAX_ALTERNATIVES]

    # ------------------------------------------------------------------
    # Troubleshooting
    # ------------------------------------------------------------------

    def search_troubleshooting(self, symptom_text: str, category: Optional[Category] = None) -> List[SymptomMatch]:
        """
        Find symptoms matching a free-text complaint.

        Strong matches compare the whole text against descriptions and common
        causes (substring in either direction). Weak matches do the same with
        the key phrases extracted from the text. Strong matches rank first.
        """
        if not symptom_text or not symptom_text.strip():
            return []

        phrases = extract_symptom_phrases(symptom_text)
        strong: List[SymptomMatch] = []
        weak: List[SymptomMatch] = []

        for symptom in self.catalog.symptoms:
            if category is not None and symptom.category != category:
                continue

            haystacks = [symptom.description, *symptom.common_causes]
            if any(_mutual_substring(symptom_text, text) for text in haystacks):
                strong.append(self._symptom_match(symptom, strong_match=True))
            elif any(_mutual_substring(phrase, text) for phrase in phrases for text in haystacks):
                weak.append(self._symptom_match(symptom, strong_match=False))

        return strong + weak

    def _symptom_match(self, symptom: TroubleshootingSymptom, strong_match: bool) -> SymptomMatch:
        parts = [self.catalog.get_product(pn) for pn in symptom.recommended_parts]
        should_contact, reason = self._professional_advice(symptom)
        return SymptomMatch(
            symptom=symptom,
            diagnostic_steps=list(symptom.diagnostic_steps),
            recommended_parts=[part for part in parts if part is not None],
            should_contact_professional=should_contact,
            reason=reason,
            strong_match=strong_match,
        )

    @staticmethod
    def _professional_advice(symptom: TroubleshootingSymptom) -> Tuple[bool, Optional[str]]:
        if len(symptom.diagnostic_steps) > PROFESSIONAL_STEP_THRESHOLD:
            return True, REASON_COMPLEX_REPAIR
        if "electrical" in symptom.description.lower():
            return True, REASON_ELECTRICAL_REPAIR
        return False, None

    # ------------------------------------------------------------------
    # Installation
    # ------------------------------------------------------------------

    def get_installation_instructions(self, part_number: str) -> Optional[InstallationInstructions]:
        """Installation data for a part, or None when the part is unknown."""
        part = self.catalog.get_product(part_number)
        if part is None:
            return None

        generic = not part.installation_steps
        steps = self._generic_steps(part) if generic else list(part.installation_steps)

        return InstallationInstructions(
            part=part,
            steps=steps,
            required_tools=list(part.required_tools),
            safety_warnings=list(part.safety_warnings),
            difficulty=part.installation_difficulty,
            estimated_time=part.estimated_install_time,
            additional_notes=self._installation_notes(part),
            generic=generic,
        )

    @staticmethod
    def _generic_steps(part: Product) -> List[InstallationStep]:
        tools = ", ".join(part.required_tools) or "basic hand tools"
        return [
            InstallationStep(
                step=1,
                title="Prepare the appliance",
                description=f"Disconnect power to the {part.category.value} and shut off its water supply if it has one.",
                warning="Never work on an appliance that is still plugged in.",
            ),
            InstallationStep(
                step=2,
                title="Gather your tools",
                description=f"You will need: {tools}.",
            ),
            InstallationStep(
                step=3,
                title=f"Remove the old {part.name.lower()}",
                description="Take photos of the wiring and mounting before removal, then remove the old part.",
            ),
            InstallationStep(
                step=4,
                title=f"Install the new {part.name.lower()}",
                description="Mount the new part in the same position and reconnect everything as in your photos.",
            ),
            InstallationStep(
                step=5,
                title="Restore power and test",
                description="Reconnect power and water and run the appliance to confirm the repair.",
            ),
        ]

    @staticmethod
    def _installation_notes(part: Product) -> List[str]:
        notes = []
        if part.installation_difficulty == Difficulty.HARD:
            notes.append("This is a complex installation. Consider hiring a qualified technician.")
        if part.estimated_install_time > LONG_INSTALL_MINUTES:
            notes.append(f"Set aside at least {part.estimated_install_time} minutes for this job.")
        if any("electrical" in w.lower() or "power" in w.lower() for w in part.safety_warnings):
            notes.append("Switch off the circuit breaker, not just the appliance controls, before starting.")
        notes.append("Keep the old part until the new one is confirmed working.")
        return notes

    def stats(self) -> Dict[str, object]:
        return self.catalog.stats()

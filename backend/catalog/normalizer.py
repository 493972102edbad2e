"""
Canonical forms for part and model identifiers.

Part numbers and model numbers arrive in every shape users can type them
("ps-11752778", "WDT780SAEM1 ", "wdt 780 saem1"). All lookups compare the
canonical form: upper case with every non-alphanumeric character removed.

Model numbers additionally drop a single trailing digit, so that revision
suffixes ("MODEL123-4" vs "MODEL123") land on the same family. This is a
heuristic: two models that differ only in their last digit are conflated.
Callers that need exact equality use canonicalize() instead.
"""

import re

_NON_ALNUM = re.compile(r"[^A-Z0-9]")
_TRAILING_DIGIT = re.compile(r"[0-9]$")

# Loose model matching is disabled below this family length ("WDT" alone
# would otherwise match every WDT dishwasher).
MIN_MODEL_FAMILY_LENGTH = 4


def canonicalize(value: str) -> str:
    """Upper-case and strip everything that is not A-Z or 0-9."""
    if not value:
        return ""
    return _NON_ALNUM.sub("", value.upper())


def normalize_part_number(part_number: str) -> str:
    return canonicalize(part_number)


def normalize_model_number(model_number: str) -> str:
    """Canonical model family: canonical form minus one trailing digit."""
    return _TRAILING_DIGIT.sub("", canonicalize(model_number))


def models_match_loosely(first: str, second: str) -> bool:
    """
    Suffix-tolerant model comparison.

    True when both models share a family, or when one model's canonical form
    is exactly the other's family (e.g. "MODEL123-4" vs "MODEL123").
    """
    first_family = normalize_model_number(first)
    second_family = normalize_model_number(second)
    if min(len(first_family), len(second_family)) < MIN_MODEL_FAMILY_LENGTH:
        return False

    return (
        first_family == second_family
        or canonicalize(first) == second_family
        or canonicalize(second) == first_family
    )

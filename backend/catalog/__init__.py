"""
Static parts catalog and the matching engine that queries it.
"""

from .models import (
    Availability,
    Category,
    DiagnosticStep,
    Difficulty,
    InstallationStep,
    Product,
    TroubleshootingSymptom,
)
from .normalizer import normalize_model_number, normalize_part_number
from .search_engine import PartCatalog, SearchEngine, SearchQuery, load_catalog

__all__ = [
    "Availability",
    "Category",
    "DiagnosticStep",
    "Difficulty",
    "InstallationStep",
    "Product",
    "TroubleshootingSymptom",
    "normalize_model_number",
    "normalize_part_number",
    "PartCatalog",
    "SearchEngine",
    "SearchQuery",
    "load_catalog",
]

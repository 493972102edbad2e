"""
CompatibilityCheck tool - does a part fit a given appliance model?
"""

import logging
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from catalog.search_engine import CompatibilityResult

from .base_agent import Tool, product_to_dict

logger = logging.getLogger(__name__)


def confidence_label(confidence: float) -> str:
    if confidence >= 1.0:
        return "confirmed"
    if confidence >= 0.8:
        return "highly likely"
    return "possible"


class CompatibilityInput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    part_number: str = Field(..., min_length=1, description="Part number to check")
    model_number: str = Field(..., min_length=1, description="Appliance model number")

    @field_validator("part_number", "model_number", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class CompatibilityTool(Tool):
    """Check a part against an appliance model."""

    name = "CompatibilityCheck"
    description = (
        "Check whether a part number is compatible with an appliance model number. "
        "Returns a yes/no answer with a confidence score and compatible alternatives."
    )
    input_model = CompatibilityInput

    def run(self, params: CompatibilityInput) -> Dict[str, Any]:
        result = self.engine.check_compatibility(params.part_number, params.model_number)

        products = []
        if result.part is not None:
            products.append(product_to_dict(result.part))
        alternatives = [product_to_dict(p) for p in result.alternative_parts]

        return {
            "part_number": result.part_number,
            "model_number": result.model_number,
            "is_compatible": result.is_compatible,
            "confidence": result.confidence,
            "confidence_label": confidence_label(result.confidence) if result.is_compatible else None,
            "reason": result.reason,
            "part_found": result.part is not None,
            "part": products[0] if products else None,
            "alternative_parts": alternatives,
            "recommendation": self._recommendation(result),
            "products": products + alternatives,
        }

    @staticmethod
    def _recommendation(result: CompatibilityResult) -> str:
        if result.part is None:
            return "Please double-check the part number, or search for the part by name."
        if result.is_compatible and result.confidence >= 1.0:
            return f"You can order {result.part.name} ({result.part.part_number}) for your {result.model_number}."
        if result.is_compatible:
            return (
                f"{result.part.name} should fit, but please confirm the full model number "
                f"on your appliance's rating plate before ordering."
            )
        if result.alternative_parts:
            return "Consider one of the compatible alternatives listed below."
        return "Search for parts using your model number to find one that fits."

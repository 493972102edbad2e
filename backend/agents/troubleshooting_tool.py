"""
TroubleshootingGuide tool - diagnose a symptom and suggest replacement parts.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from catalog.models import Category
from catalog.search_engine import SymptomMatch

from .base_agent import Tool, dedupe_products, product_to_dict
from .errors import SymptomNotFoundError

logger = logging.getLogger(__name__)


class TroubleshootingInput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    symptom: str = Field(..., min_length=1, description="Description of the problem")
    category: Optional[Category] = Field(default=None, description="Appliance category")
    brand: Optional[str] = None
    model_number: Optional[str] = None

    @field_validator("symptom", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class TroubleshootingTool(Tool):
    """Match a symptom to the troubleshooting knowledge base."""

    name = "TroubleshootingGuide"
    description = (
        "Diagnose a refrigerator or dishwasher problem from a symptom description. "
        "Returns common causes, diagnostic steps, recommended parts and whether to call a professional."
    )
    input_model = TroubleshootingInput

    def run(self, params: TroubleshootingInput) -> Dict[str, Any]:
        matches = self.engine.search_troubleshooting(params.symptom, params.category)
        if not matches:
            where = f" for {params.category.value}s" if params.category else ""
            raise SymptomNotFoundError(
                f"No troubleshooting guide matches '{params.symptom}'{where}",
                suggestions=[
                    "Describe what the appliance is doing, e.g. 'not draining' or 'ice maker not making ice'",
                ],
            )

        best = matches[0]
        products = dedupe_products([
            product_to_dict(part) for match in matches for part in match.recommended_parts
        ])

        return {
            "symptom": best.symptom.description,
            "category": best.symptom.category.value,
            "brand": params.brand,
            "model_number": params.model_number,
            "common_causes": list(best.symptom.common_causes),
            "diagnostic_steps": [step.model_dump() for step in best.diagnostic_steps],
            "recommended_parts": [product_to_dict(part) for part in best.recommended_parts],
            "should_contact_professional": best.should_contact_professional,
            "professional_reason": best.reason,
            "other_matches": [match.symptom.description for match in matches[1:]],
            "summary": self._summary(best),
            "products": products,
        }

    @staticmethod
    def _summary(match: SymptomMatch) -> str:
        summary = f"{match.symptom.description}: {len(match.symptom.common_causes)} common causes"
        if match.recommended_parts:
            total = sum(part.price for part in match.recommended_parts)
            summary += f", {len(match.recommended_parts)} recommended parts (total ${total:.2f})"
        if match.should_contact_professional:
            summary += f". Professional help recommended: {match.reason}"
        return summary + "."

"""
InstallationGuide tool - step-by-step installation instructions for a part.
"""

import logging
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from catalog.normalizer import normalize_part_number
from catalog.search_engine import SearchQuery

from .base_agent import Tool, product_to_dict
from .errors import PartNotFoundError

logger = logging.getLogger(__name__)


class InstallationInput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    part_number: str = Field(..., min_length=1, description="Part number to install")

    @field_validator("part_number", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class InstallationTool(Tool):
    """Installation steps, tools, warnings and time estimate."""

    name = "InstallationGuide"
    description = (
        "Get installation instructions for a part number: numbered steps, required tools, "
        "safety warnings, difficulty and estimated time."
    )
    input_model = InstallationInput

    def run(self, params: InstallationInput) -> Dict[str, Any]:
        instructions = self.engine.get_installation_instructions(params.part_number)
        if instructions is None:
            raise PartNotFoundError(params.part_number, suggestions=self._suggestions(params.part_number))

        part = instructions.part
        return {
            "part_number": part.part_number,
            "part_name": part.name,
            "difficulty": instructions.difficulty.value,
            "estimated_time": instructions.estimated_time,
            "required_tools": instructions.required_tools,
            "safety_warnings": instructions.safety_warnings,
            "steps": [step.model_dump() for step in instructions.steps],
            "generic_steps": instructions.generic,
            "additional_notes": instructions.additional_notes,
            "summary": (
                f"Installing {part.name} ({part.part_number}) is {instructions.difficulty.value} "
                f"and takes about {instructions.estimated_time} minutes in {len(instructions.steps)} steps."
            ),
            "products": [product_to_dict(part)],
        }

    def _suggestions(self, part_number: str):
        # Close part numbers the user may have meant
        fragment = normalize_part_number(part_number)[:6]
        if len(fragment) < 5:
            return []
        result = self.engine.search(SearchQuery(part_number=fragment, limit=3))
        return [f"Did you mean {p.part_number} ({p.name})?" for p in result.products]

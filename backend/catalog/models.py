"""
Pydantic models for catalog records.

Records are frozen: the catalog is loaded once at startup and never mutated.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(str, Enum):
    """Appliance categories the catalog covers."""
    REFRIGERATOR = "refrigerator"
    DISHWASHER = "dishwasher"


class Availability(str, Enum):
    IN_STOCK = "in-stock"
    OUT_OF_STOCK = "out-of-stock"
    BACKORDERED = "backordered"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class InstallationStep(BaseModel):
    """Single authored installation step."""
    model_config = ConfigDict(frozen=True)

    step: int = Field(..., ge=1, description="1-based step number")
    title: str
    description: str
    warning: Optional[str] = None


class DiagnosticStep(BaseModel):
    """
    One node of a troubleshooting decision tree.

    The tree is stored flat; next_step_if_true / next_step_if_false point at
    other step numbers of the same symptom.
    """
    model_config = ConfigDict(frozen=True)

    step: int = Field(..., ge=1)
    description: str
    expected_result: str
    recommended_action: Optional[str] = None
    next_step_if_true: Optional[int] = None
    next_step_if_false: Optional[int] = None


class Product(BaseModel):
    """Replacement part record."""
    model_config = ConfigDict(frozen=True)

    part_number: str = Field(..., min_length=1, description="Manufacturer/PartSelect part number")
    name: str
    description: str
    category: Category
    brand: str
    price: float = Field(..., gt=0)
    availability: Availability
    compatible_models: List[str] = Field(default_factory=list)
    installation_difficulty: Difficulty
    estimated_install_time: int = Field(..., gt=0, description="Minutes")
    required_tools: List[str] = Field(default_factory=list)
    safety_warnings: List[str] = Field(default_factory=list)
    installation_steps: Optional[List[InstallationStep]] = None
    image_url: Optional[str] = None

    @field_validator("required_tools")
    @classmethod
    def _unique_tools(cls, tools: List[str]) -> List[str]:
        # Required tools behave as a set; keep first-seen order for display
        return list(dict.fromkeys(tools))


class TroubleshootingSymptom(BaseModel):
    """Known symptom with causes, a diagnostic tree and suggested parts."""
    model_config = ConfigDict(frozen=True)

    id: str
    description: str
    category: Category
    common_causes: List[str] = Field(default_factory=list)
    diagnostic_steps: List[DiagnosticStep] = Field(default_factory=list)
    recommended_parts: List[str] = Field(default_factory=list, description="Part numbers, looked up on demand")

"""
ProductSearch tool - find parts by keywords, part number, category or brand.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, create_model, field_validator, model_validator
from pydantic.alias_generators import to_camel

from catalog.models import Category
from catalog.search_engine import SearchEngine, SearchQuery, SearchResult

from .base_agent import Tool, product_to_dict

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5
MAX_LIMIT = 20


class ProductSearchInput(BaseModel):
    """Search criteria; at least one of query/part_number/category/brand is required."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    query: Optional[str] = Field(default=None, description="Free-text description of the part")
    part_number: Optional[str] = Field(default=None, description="Full or partial part number")
    category: Optional[Category] = Field(default=None, description="Appliance category")
    brand: Optional[str] = Field(default=None, description="Brand name, e.g. Whirlpool")
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT, description="Maximum results")

    @field_validator("query", "part_number", "brand", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _require_criteria(self):
        if not any([self.query, self.part_number, self.category, self.brand]):
            raise ValueError("provide at least one of query, part_number, category or brand")
        return self


class ProductSearchTool(Tool):
    """Search the parts catalog."""

    name = "ProductSearch"
    description = (
        "Search refrigerator and dishwasher parts by keywords, part number, "
        "appliance category or brand. Returns ranked products with price and availability."
    )
    input_model = ProductSearchInput

    def __init__(self, engine: SearchEngine, default_limit: int = DEFAULT_LIMIT, max_limit: int = MAX_LIMIT):
        super().__init__(engine)
        if not 1 <= default_limit <= max_limit:
            raise ValueError(f"default_limit must be between 1 and max_limit ({max_limit}), got {default_limit}")
        self.default_limit = default_limit
        self.max_limit = max_limit
        # Same contract, configured bounds
        self.input_model = create_model(
            "ProductSearchInput",
            __base__=ProductSearchInput,
            limit=(int, Field(default=default_limit, ge=1, le=max_limit, description="Maximum results")),
        )

    def run(self, params: ProductSearchInput) -> Dict[str, Any]:
        result = self.engine.search(SearchQuery(
            query=params.query,
            part_number=params.part_number,
            category=params.category,
            brand=params.brand,
            limit=params.limit,
        ))

        products = [product_to_dict(product) for product in result.products]
        return {
            "products": products,
            "scores": [match.score for match in result.matches],
            "total_count": result.total_count,
            "search_terms": result.search_terms,
            "suggestions": result.suggestions,
            "criteria": self._criteria(params),
            "summary": self._summary(params, result),
        }

    @staticmethod
    def _criteria(params: ProductSearchInput) -> List[str]:
        criteria = []
        if params.query:
            criteria.append(f'"{params.query}"')
        if params.part_number:
            criteria.append(f"part number {params.part_number}")
        if params.category:
            criteria.append(f"{params.category.value} parts")
        if params.brand:
            criteria.append(f"brand {params.brand}")
        return criteria

    def _summary(self, params: ProductSearchInput, result: SearchResult) -> str:
        criteria = ", ".join(self._criteria(params))
        if result.total_count == 0:
            return f"No products found for {criteria}."

        top = result.products[0]
        noun = "product" if result.total_count == 1 else "products"
        return f"Found {result.total_count} {noun} for {criteria}. Top result is {top.name} ({top.part_number})."

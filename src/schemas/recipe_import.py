"""Recipe import schemas."""

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import ImportOutcome, RecipeCategory


class RecipeImportRequest(BaseModel):
    """Request to import recipes from TheMealDB.

    Single-item mode: ``id`` or ``url`` (``category`` then overrides the mapped
    category). Bulk mode: ``q`` (search) or ``category`` (upstream filter).
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str | None = Field(None, max_length=100)
    url: str | None = Field(None, max_length=2048)
    q: str | None = Field(None, max_length=255)
    category: str | None = Field(None, max_length=100)
    limit: int = Field(20, ge=1, le=50)
    public: bool = True
    publish: bool = True
    source: Literal["themealdb", "mealdb"] | None = None


class ImportItemResult(BaseModel):
    """Outcome for one external record."""

    external_id: str
    title: str | None = None
    status: ImportOutcome
    recipe_id: int | None = None
    reason: str | None = None


class ImportReport(BaseModel):
    """Tallies plus per-item outcomes; counts only reflect processed items."""

    mode: Literal["single", "bulk"]
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    items: list[ImportItemResult] = []

    def record(self, item: ImportItemResult) -> None:
        self.items.append(item)
        setattr(self, item.status.value, getattr(self, item.status.value) + 1)


@dataclass
class NormalizedIngredient:
    """Ingredient mapped from an external record."""

    name: str
    quantity: str | None
    position: int


@dataclass
class NormalizedRecipe:
    """External recipe mapped into the internal model, ready for upsert."""

    external_source: str
    external_id: str
    title: str
    category: RecipeCategory
    description: str | None = None
    image: str | None = None
    source_url: str | None = None
    ingredients: list[NormalizedIngredient] = field(default_factory=list)
    steps: list[str] = field(default_factory=list)

    def ingredient_lines(self) -> list[str]:
        """Ingredient strings like "2 cups flour" for nutrition analysis."""
        return [f"{i.quantity or ''} {i.name}".strip() for i in self.ingredients]

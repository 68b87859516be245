"""Recipe schemas."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from src.models.enums import RecipeCategory

# --- Input ---


class RecipeIngredientCreate(BaseModel):
    """Create a recipe ingredient."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    quantity: str | None = Field(None, max_length=100)


def _nutrient(short: str, long: str, default: float | None):
    # Accept both naming conventions, e.g. "protein" and "protein_g"
    return Field(
        default,
        ge=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices(long, short),
        serialization_alias=long,
    )


class NutritionInput(BaseModel):
    """Nutrition facts as supplied by clients; missing values default to zero."""

    calories: float = Field(0, ge=0, allow_inf_nan=False)
    protein_g: float = _nutrient("protein", "protein_g", 0)
    carbs_g: float = _nutrient("carbs", "carbs_g", 0)
    fat_g: float = _nutrient("fat", "fat_g", 0)
    fiber_g: float = _nutrient("fiber", "fiber_g", 0)
    sugar_g: float = _nutrient("sugar", "sugar_g", 0)
    sodium_mg: float = _nutrient("sodium", "sodium_mg", 0)


class NutritionPatch(BaseModel):
    """Partial nutrition update; only supplied values are written."""

    calories: float | None = Field(None, ge=0, allow_inf_nan=False)
    protein_g: float | None = _nutrient("protein", "protein_g", None)
    carbs_g: float | None = _nutrient("carbs", "carbs_g", None)
    fat_g: float | None = _nutrient("fat", "fat_g", None)
    fiber_g: float | None = _nutrient("fiber", "fiber_g", None)
    sugar_g: float | None = _nutrient("sugar", "sugar_g", None)
    sodium_mg: float | None = _nutrient("sodium", "sodium_mg", None)


class RecipeCreate(BaseModel):
    """Create a new recipe with its children."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    category: RecipeCategory = RecipeCategory.OTHER
    description: str | None = Field(None, max_length=5000)
    image: str | None = Field(None, max_length=1024)
    ingredients: list[RecipeIngredientCreate] = []
    instructions: list[str] = []
    nutrition: NutritionInput = Field(default_factory=NutritionInput)
    is_public: bool = True
    published: bool = True


class RecipeUpdate(BaseModel):
    """Update a recipe. Supplied ingredient/instruction lists replace the existing ones."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(None, min_length=1, max_length=255)
    category: RecipeCategory | None = None
    description: str | None = Field(None, max_length=5000)
    image: str | None = Field(None, max_length=1024)
    ingredients: list[RecipeIngredientCreate] | None = None
    instructions: list[str] | None = None
    nutrition: NutritionPatch | None = None
    is_public: bool | None = None
    published: bool | None = None


# --- Output ---


class RecipeIngredientView(BaseModel):
    """Ingredient as served to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    quantity: str | None = None


class NutritionView(BaseModel):
    """Seven nutrition values, zero when unknown."""

    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0
    sugar: float = 0
    sodium: float = 0


class RecipeView(BaseModel):
    """Hydrated recipe: the one shape every recipe endpoint returns."""

    id: int
    title: str
    category: RecipeCategory
    description: str | None = None
    image: str | None = None
    ingredients: list[RecipeIngredientView]
    instructions: list[str]
    nutrition: NutritionView
    created_at: datetime
    updated_at: datetime


class RecipeSummary(BaseModel):
    """Admin list row with child counts and macro summary."""

    id: int
    title: str
    category: str
    description: str | None
    image: str | None
    is_public: bool
    published: bool
    external_source: str | None
    external_id: str | None
    created_at: datetime
    created_by_email: str | None
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    ingredient_count: int
    step_count: int

"""Recipe model and its child rows (ingredients, steps, nutrition)."""

from sqlalchemy import (
    Boolean,
    Column,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class Recipe(Base, TimestampMixin):
    """Recipe model for storing recipe definitions."""

    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    category = Column(String(20), nullable=False, default="other")  # RecipeCategory
    description = Column(Text, nullable=True)
    image_url = Column(String(1024), nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    is_public = Column(Boolean, nullable=False, default=True)
    published = Column(Boolean, nullable=False, default=True)

    # Natural key for imported recipes, e.g. ("themealdb", "52874")
    external_source = Column(String(50), nullable=True)
    external_id = Column(String(100), nullable=True)
    source_url = Column(String(1024), nullable=True)

    # Relationships
    creator = relationship("User", backref="recipes")
    ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by=lambda: (RecipeIngredient.position, RecipeIngredient.id),
        passive_deletes=True,
    )
    steps = relationship(
        "RecipeStep",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by=lambda: RecipeStep.step_no,
        passive_deletes=True,
    )
    nutrition = relationship(
        "RecipeNutrition",
        back_populates="recipe",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("external_source", "external_id", name="uq_recipes_external"),
    )

    def is_visible_to(self, user) -> bool:
        """Public+published recipes are visible to everyone; others only to creator/admins."""
        if self.is_public and self.published:
            return True
        if user is None:
            return False
        return bool(user.is_admin) or self.created_by == user.id


class RecipeIngredient(Base):
    """Ingredient within a recipe."""

    __tablename__ = "recipe_ingredients"

    id = Column(Integer, primary_key=True, index=True)
    recipe_id = Column(
        Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    quantity = Column(String(100), nullable=True)
    position = Column(Integer, nullable=False, default=0)

    recipe = relationship("Recipe", back_populates="ingredients")


class RecipeStep(Base):
    """A single numbered instruction (1-based)."""

    __tablename__ = "recipe_steps"

    id = Column(Integer, primary_key=True, index=True)
    recipe_id = Column(
        Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    step_no = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)

    recipe = relationship("Recipe", back_populates="steps")


class RecipeNutrition(Base):
    """Nutrition facts, at most one row per recipe."""

    __tablename__ = "recipe_nutrition"

    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True)
    calories = Column(Float, nullable=False, default=0)
    protein_g = Column(Float, nullable=False, default=0)
    carbs_g = Column(Float, nullable=False, default=0)
    fat_g = Column(Float, nullable=False, default=0)
    fiber_g = Column(Float, nullable=False, default=0)
    sugar_g = Column(Float, nullable=False, default=0)
    sodium_mg = Column(Float, nullable=False, default=0)

    recipe = relationship("Recipe", back_populates="nutrition")

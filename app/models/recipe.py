"""Recipe Pydantic models."""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class MealTime(str, Enum):
    """Meal time a generation request is scoped to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class RecipeIngredient(BaseModel):
    """Ingredient line of a generated recipe."""

    name: str = Field(..., min_length=1, description="Ingredient name")
    isAvailable: bool = Field(
        ..., description="True if the ingredient is among the user's fridge ingredients"
    )


class RecipeDraft(BaseModel):
    """Recipe as returned by the text model, before a photo is attached."""

    recipeName: str = Field(..., min_length=1, description="Dish name, also the recipe identity")
    cuisineType: Optional[str] = Field(None, description="Cuisine classification (e.g. 'Korean', 'Italian')")
    description: str = Field(..., description="One or two sentence description of the dish")
    ingredients: List[RecipeIngredient] = Field(
        ..., min_length=1, description="Ingredients split into available and missing"
    )
    steps: List[str] = Field(..., min_length=1, description="Ordered cooking steps")
    chefTips: Optional[List[str]] = Field(None, description="Optional chef tips")
    cookingTime: str = Field(..., description="Cooking time (e.g. '20 minutes')")
    calories: Optional[str] = Field(None, description="Estimated calories per serving")


class Recipe(RecipeDraft):
    """Recipe shown to the user; imageUrl is absent while the photo is generating."""

    imageUrl: Optional[str] = Field(None, description="Embeddable data URI of the dish photo")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "recipeName": "Kimchi Fried Rice",
                "cuisineType": "Korean",
                "description": "Smoky fried rice with aged kimchi and a runny egg.",
                "ingredients": [
                    {"name": "kimchi", "isAvailable": True},
                    {"name": "cooked rice", "isAvailable": True},
                    {"name": "gochujang", "isAvailable": False},
                ],
                "steps": ["Fry the kimchi in oil.", "Add the rice and gochujang.", "Top with a fried egg."],
                "chefTips": ["Day-old rice fries best."],
                "cookingTime": "15 minutes",
                "calories": "520 kcal",
                "imageUrl": None,
            }
        }
    )

    @property
    def missing_ingredients(self) -> List[RecipeIngredient]:
        return [ing for ing in self.ingredients if not ing.isAvailable]

    @property
    def available_ingredients(self) -> List[RecipeIngredient]:
        return [ing for ing in self.ingredients if ing.isAvailable]


class Store(BaseModel):
    """Grocery store returned by the grounded map search."""

    name: str
    uri: str
    address: Optional[str] = None


class Coordinates(BaseModel):
    """Device position reported by the browser."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class PipelineState(str, Enum):
    """Lifecycle of a single recipe generation request."""

    IDLE = "idle"
    GENERATING_TEXT = "generating_text"
    GENERATING_IMAGES = "generating_images"
    DONE = "done"
    ERROR = "error"


class PipelineSnapshot(BaseModel):
    """Whole-list view of the pipeline; replaced, never mutated."""

    model_config = ConfigDict(frozen=True)

    state: PipelineState = PipelineState.IDLE
    recipes: Tuple[Recipe, ...] = ()
    error: Optional[str] = None
    message: Optional[str] = None


class ShoppingLink(BaseModel):
    """Online marketplace search link for one ingredient."""

    label: str
    url: str


class ShoppingItem(BaseModel):
    """Missing ingredient with the places to buy it online."""

    name: str
    links: List[ShoppingLink] = Field(default_factory=list)


class ShoppingGuide(BaseModel):
    """Shopping view of a recipe's detail page."""

    recipeName: str
    missing: List[ShoppingItem] = Field(default_factory=list)
    available: List[str] = Field(default_factory=list)
    shoppingListText: str = ""

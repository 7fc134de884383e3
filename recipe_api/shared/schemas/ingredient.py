from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Ingredient(BaseModel):
    """
    Ingredient line of a recipe
    """

    model_config = ConfigDict(strict=True)

    name: str = Field(
        ...,
        description="Name of the ingredient",
        examples=["chicken breast"],
    )
    amount: float = Field(
        ...,
        description="Quantity of the ingredient",
        examples=[500],
    )
    unit: str = Field(
        ...,
        description="Free-form unit of measurement",
        examples=["g"],
    )
    optional: bool = False
    notes: Optional[str] = None

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .ingredient import Ingredient

# Width limits of the persisted record fields (u8 / u32).
U8_MAX = 255
U32_MAX = 2**32 - 1


class Step(BaseModel):
    """
    One instruction step of a recipe.
    """

    model_config = ConfigDict(strict=True)

    order: int = Field(..., ge=0, le=U8_MAX)
    instruction: str
    duration_mins: Optional[int] = Field(None, ge=0, le=U32_MAX)


class Recipe(BaseModel):
    """
    A recipe as stored under `recipe:<id>` and exchanged over the API.

    `id` may be left empty on create, the store assigns one.
    `created_at` / `updated_at` are unix seconds and are set by the store
    on create, whatever the client sends.
    """

    # no coercion: "4" is not a servings count, 10.0 is not a minute count
    model_config = ConfigDict(strict=True)

    id: str = ""
    name: str
    description: Optional[str] = None
    ingredients: List[Ingredient]
    instructions: List[Step]
    servings: int = Field(..., ge=0, le=U8_MAX)
    prep_time_mins: int = Field(..., ge=0, le=U32_MAX)
    cook_time_mins: int = Field(..., ge=0, le=U32_MAX)
    difficulty: str
    tags: List[str]
    dietary_info: List[str]
    created_at: int = Field(0, ge=0)
    updated_at: int = Field(0, ge=0)

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Price(BaseModel):
    student: str = "0.00"
    employee: str = "0.00"
    guest: str = "0.00"


class Nutrition(BaseModel):
    calories: str = "0"
    protein: str = "0.0"
    carbs: str = "0.0"
    fat: str = "0.0"

    @property
    def is_empty(self) -> bool:
        return self == Nutrition()


class MealRecord(BaseModel):
    date: str = ""
    location: str
    name: str = Field(..., min_length=1)
    price: Price = Field(default_factory=Price)
    nutrition: Nutrition = Field(default_factory=Nutrition)
    allergens: list[str] = []
    co2_rating: str = ""
    co2_value: float = 0
    is_climate_friendly: bool = False

    # JSON keys are camelCase (co2Rating, isClimateFriendly, …)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

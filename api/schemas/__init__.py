"""Re-export individual schema modules for easy imports."""

from core.models.meal import MealRecord, Nutrition, Price
from .error import ErrorOut

__all__ = [
    "MealRecord",
    "Nutrition",
    "Price",
    "ErrorOut",
]

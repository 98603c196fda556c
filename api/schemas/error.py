from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorOut(BaseModel):
    error: str = Field(..., examples=["Failed to load the meal plan"])
    details: str

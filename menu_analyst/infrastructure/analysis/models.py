"""Pydantic models for validating structured-menu output of the model."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class Dish(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    price: str | int | float

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("dish name must not be blank")
        return value


class MenuExtractionResponse(BaseModel):
    dishes: list[Dish] = Field(default_factory=list)

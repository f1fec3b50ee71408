"""Pydantic models for live translation requests and responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TranslationResult(_CamelModel):
    """A single translated text fragment."""

    translated_text: str
    original_text: str
    target_language: str


class TranslationRequest(_CamelModel):
    text: str
    target_lang: str = Field(default="hu", min_length=2, max_length=8)


class RecipeTranslationRequest(_CamelModel):
    recipes: list[dict[str, Any]] = Field(default_factory=list)
    target_lang: str = Field(default="hu", min_length=2, max_length=8)


class RecipeTranslationResponse(_CamelModel):
    recipes: list[dict[str, Any]]

"""Live translation helpers for recipe content."""

from .cache import TranslationCache
from .client import MyMemoryClient
from .dictionary import HUNGARIAN_FOOD_TERMS
from .translator import LiveTranslator, build_live_translator

__all__ = [
    "HUNGARIAN_FOOD_TERMS",
    "LiveTranslator",
    "MyMemoryClient",
    "TranslationCache",
    "build_live_translator",
]

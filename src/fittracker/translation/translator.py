"""Live translation of recipe content with dictionary, cache and API tiers."""

from __future__ import annotations

import logging
import re
import time
from typing import Any, Callable, List, Mapping, Optional

from fittracker import metrics
from fittracker.config import Settings, get_settings
from fittracker.models.translation import TranslationResult
from fittracker.translation.cache import TranslationCache
from fittracker.translation.client import MyMemoryClient
from fittracker.translation.dictionary import DICTIONARIES

logger = logging.getLogger(__name__)

SOURCE_LANG = "en"

_NUMERIC_RE = re.compile(r"^\d+[\s\d/]*$")
_DIGITS_RE = re.compile(r"^\d+$")
_MEASURE_RE = re.compile(
    r"^(\d+(?:/\d+)?\s*(?:cups|cup|tsp|tbsp|teaspoon|tablespoons|tablespoon|oz|ounces|ounce|"
    r"lb|pounds|pound|g|grams|gram|kg|kilograms|kilogram|pieces|piece|cloves|clove|slices|slice|"
    r"large|medium|small)?\.?)\s+(.+)$",
    re.IGNORECASE,
)

Recipe = dict[str, Any]


class LiveTranslator:
    """Translate recipe text, preferring the local dictionary over the remote API."""

    def __init__(
        self,
        *,
        client: Optional[MyMemoryClient] = None,
        cache: Optional[TranslationCache] = None,
        dictionaries: Optional[Mapping[str, Mapping[str, str]]] = None,
        batch_size: int = 3,
        batch_delay: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client or MyMemoryClient()
        self._cache = cache if cache is not None else TranslationCache()
        self._dictionaries = DICTIONARIES if dictionaries is None else dictionaries
        self._batch_size = max(1, batch_size)
        self._batch_delay = max(0.0, batch_delay)
        self._sleep = sleep
        self._dictionary_terms = {
            lang: sorted(terms, key=len, reverse=True) for lang, terms in self._dictionaries.items()
        }

    @property
    def cache(self) -> TranslationCache:
        return self._cache

    def translate(self, text: str, target_lang: str = "hu") -> str:
        if not text or not text.strip():
            return text
        stripped = text.strip()
        if len(stripped) < 2 or _NUMERIC_RE.match(stripped):
            metrics.TRANSLATIONS.labels(source="passthrough").inc()
            return text

        from_dictionary = self._lookup_dictionary(stripped, target_lang)
        if from_dictionary is not None:
            metrics.TRANSLATIONS.labels(source="dictionary").inc()
            return from_dictionary

        cached = self._cache.get(stripped, target_lang)
        if cached is not None:
            metrics.TRANSLATIONS.labels(source="cache").inc()
            return cached

        translated = self._client.translate(stripped, target_lang, source_lang=SOURCE_LANG)
        if translated is None:
            metrics.TRANSLATIONS.labels(source="failed").inc()
            return text
        self._cache.put(stripped, target_lang, translated)
        metrics.TRANSLATIONS.labels(source="api").inc()
        return translated

    def translate_result(self, text: str, target_lang: str = "hu") -> TranslationResult:
        return TranslationResult(
            translated_text=self.translate(text, target_lang),
            original_text=text,
            target_language=target_lang,
        )

    def translate_title(self, title: str, target_lang: str = "hu") -> str:
        return self.translate(title, target_lang)

    def translate_steps(self, steps: Any, target_lang: str = "hu") -> Any:
        # Non-list payloads (a bare string, a mapping) are returned untouched.
        if not isinstance(steps, list):
            return steps
        return [
            self.translate(step, target_lang) if isinstance(step, str) else step for step in steps
        ]

    def translate_ingredients(self, ingredients: Any, target_lang: str = "hu") -> Any:
        """Translate ingredient names while keeping leading measurements intact.

        Anything other than a list is returned unchanged, as are entries that
        are not objects.
        """

        if not isinstance(ingredients, list):
            return ingredients

        translated: List[Any] = []
        for ingredient in ingredients:
            if not isinstance(ingredient, dict):
                translated.append(ingredient)
                continue
            original = str(ingredient.get("text") or ingredient.get("name") or "")
            stripped = original.strip()
            if len(stripped) < 2 or _DIGITS_RE.match(stripped):
                translated.append(ingredient)
                continue

            match = _MEASURE_RE.match(stripped)
            if match:
                measurement, name = match.groups()
                text = f"{measurement} {self.translate(name.strip(), target_lang)}"
            else:
                text = self.translate(stripped, target_lang)

            translated.append(
                {
                    **ingredient,
                    "text": text,
                    "name": text,
                    "originalText": original,
                    "translatedText": text,
                }
            )
        return [
            entry
            for entry in translated
            if not isinstance(entry, dict) or str(entry.get("text") or "").strip()
        ]

    def translate_recipe(self, recipe: Recipe, target_lang: str = "hu") -> Recipe:
        if target_lang == SOURCE_LANG:
            return recipe
        try:
            original_label = recipe.get("label") or recipe.get("title") or ""
            title = self.translate_title(original_label, target_lang)
            return {
                **recipe,
                "label": title,
                "title": title,
                "ingredients": self.translate_ingredients(recipe.get("ingredients") or [], target_lang),
                "steps": self.translate_steps(recipe.get("steps") or [], target_lang),
                "originalLabel": original_label,
                "isTranslated": True,
                "translatedTo": target_lang,
            }
        except (AttributeError, TypeError) as exc:
            logger.warning("Unable to translate recipe %r: %s", recipe.get("label"), exc)
            return recipe

    def translate_recipes(self, recipes: List[Recipe], target_lang: str = "hu") -> List[Recipe]:
        """Translate recipes in fixed-size batches with a pause between batches."""

        if target_lang == SOURCE_LANG:
            return recipes

        translated: List[Recipe] = []
        for start in range(0, len(recipes), self._batch_size):
            batch = recipes[start : start + self._batch_size]
            translated.extend(self.translate_recipe(recipe, target_lang) for recipe in batch)
            if start + self._batch_size < len(recipes) and self._batch_delay:
                self._sleep(self._batch_delay)
        return translated

    def _lookup_dictionary(self, text: str, target_lang: str) -> Optional[str]:
        terms = self._dictionaries.get(target_lang)
        if not terms:
            return None
        lowered = text.lower()
        if lowered in terms:
            return terms[lowered]
        for term in self._dictionary_terms[target_lang]:
            if term in lowered:
                return lowered.replace(term, terms[term], 1)
        return None


def build_live_translator(settings: Settings | None = None) -> LiveTranslator:
    """Create a translator configured from application settings."""

    settings = settings or get_settings()
    return LiveTranslator(
        client=MyMemoryClient(
            base_url=settings.translation_api_url,
            timeout=settings.translation_timeout,
        ),
        cache=TranslationCache(max_entries=settings.translation_cache_size),
        batch_size=settings.translation_batch_size,
        batch_delay=settings.translation_batch_delay,
    )


__all__ = ["LiveTranslator", "build_live_translator"]

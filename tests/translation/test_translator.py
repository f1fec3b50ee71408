"""Tests for the live recipe translator."""

from __future__ import annotations

from fittracker.config import Settings
from fittracker.translation.cache import TranslationCache
from fittracker.translation.translator import LiveTranslator, build_live_translator

DICTIONARY = {
    "hu": {
        "spinach": "spenót",
        "chicken": "csirke",
        "chicken breast": "csirkemell",
        "salt": "só",
    }
}


class StubClient:
    def __init__(self, responses: dict[str, str | None] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[tuple[str, str, str]] = []

    def translate(self, text, target_lang, source_lang="en"):
        self.calls.append((text, target_lang, source_lang))
        return self.responses.get(text)


def _translator(client=None, **options) -> LiveTranslator:
    return LiveTranslator(client=client or StubClient(), dictionaries=DICTIONARY, **options)


def test_dictionary_exact_match_skips_api():
    client = StubClient()
    translator = _translator(client)

    assert translator.translate("Spinach") == "spenót"
    assert client.calls == []


def test_dictionary_partial_match_prefers_longest_term():
    translator = _translator()

    assert translator.translate("Grilled chicken breast") == "grilled csirkemell"


def test_trivial_texts_pass_through():
    client = StubClient()
    translator = _translator(client)

    assert translator.translate("") == ""
    assert translator.translate("   ") == "   "
    assert translator.translate("x") == "x"
    assert translator.translate("1 1/2") == "1 1/2"
    assert client.calls == []


def test_api_result_is_cached():
    client = StubClient({"Bake until golden": "Süsd aranybarnára"})
    translator = _translator(client)

    first = translator.translate("Bake until golden")
    second = translator.translate("Bake until golden")

    assert first == second == "Süsd aranybarnára"
    assert client.calls == [("Bake until golden", "hu", "en")]
    assert ("Bake until golden", "hu") in translator.cache


def test_api_failure_returns_original_and_is_not_cached():
    client = StubClient()
    translator = _translator(client)

    assert translator.translate("Serve warm") == "Serve warm"
    assert translator.translate("Serve warm") == "Serve warm"
    assert len(client.calls) == 2
    assert len(translator.cache) == 0


def test_languages_without_dictionary_use_api():
    client = StubClient({"salt": "Salz"})
    translator = _translator(client)

    assert translator.translate("salt", "de") == "Salz"


def test_translate_result_reports_original_and_language():
    result = _translator().translate_result("salt")

    assert result.translated_text == "só"
    assert result.original_text == "salt"
    assert result.target_language == "hu"


def test_translate_ingredients_keeps_measurements():
    ingredients = [
        {"text": "2 cups spinach", "weight": 60},
        {"name": "1 tsp. salt"},
        {"text": "7"},
        {"text": ""},
    ]

    translated = _translator().translate_ingredients(ingredients)

    assert translated[0] == {
        "text": "2 cups spenót",
        "name": "2 cups spenót",
        "originalText": "2 cups spinach",
        "translatedText": "2 cups spenót",
        "weight": 60,
    }
    assert translated[1]["text"] == "1 tsp. só"
    assert translated[2] == {"text": "7"}
    assert len(translated) == 3


def test_translate_recipe_marks_translation():
    client = StubClient({"Season well": "Jól fűszerezd"})
    recipe = {
        "label": "Chicken",
        "ingredients": [{"text": "1 pinch salt"}],
        "steps": ["Season well"],
        "calories": 420,
    }

    translated = _translator(client).translate_recipe(recipe)

    assert translated["label"] == translated["title"] == "csirke"
    assert translated["originalLabel"] == "Chicken"
    assert translated["steps"] == ["Jól fűszerezd"]
    assert translated["isTranslated"] is True
    assert translated["translatedTo"] == "hu"
    assert translated["calories"] == 420
    assert "isTranslated" not in recipe


def test_english_target_returns_recipes_untouched():
    client = StubClient()
    recipes = [{"label": "Chicken"}]

    translator = _translator(client)

    assert translator.translate_recipe(recipes[0], "en") is recipes[0]
    assert translator.translate_recipes(recipes, "en") is recipes
    assert client.calls == []


def test_malformed_recipe_is_returned_unchanged():
    broken = {"label": 42, "steps": ["Serve warm"]}
    assert _translator().translate_recipe(broken) is broken


def test_string_steps_are_not_split_into_characters():
    translated = _translator().translate_recipe({"label": "Chicken", "steps": "Boil water"})

    assert translated["steps"] == "Boil water"
    assert translated["label"] == "csirke"


def test_non_list_ingredients_keep_recipe_translatable():
    recipe = {"label": "Chicken", "ingredients": "2 cups spinach", "steps": ["salt"]}

    translated = _translator().translate_recipe(recipe)

    assert translated["ingredients"] == "2 cups spinach"
    assert translated["label"] == "csirke"
    assert translated["steps"] == ["só"]


def test_non_dict_ingredient_entries_pass_through():
    translated = _translator().translate_ingredients(["2 cups spinach", {"text": "salt"}, None])

    assert translated[0] == "2 cups spinach"
    assert translated[1]["text"] == "só"
    assert translated[2] is None


def test_translate_recipes_batches_with_pauses():
    sleeps: list[float] = []
    recipes = [{"label": "Chicken", "id": index} for index in range(7)]
    translator = _translator(batch_size=3, batch_delay=0.25, sleep=sleeps.append)

    translated = translator.translate_recipes(recipes)

    assert [recipe["id"] for recipe in translated] == list(range(7))
    assert all(recipe["isTranslated"] for recipe in translated)
    assert sleeps == [0.25, 0.25]


def test_single_batch_does_not_sleep():
    sleeps: list[float] = []
    translator = _translator(batch_size=3, sleep=sleeps.append)

    translator.translate_recipes([{"label": "Chicken"}] * 3)

    assert sleeps == []


def test_build_live_translator_uses_settings():
    translator = build_live_translator(Settings(translation_cache_size=1))

    translator.cache.put("a", "hu", "x")
    translator.cache.put("b", "hu", "y")

    assert len(translator.cache) == 1


def test_owned_cache_is_respected():
    cache = TranslationCache()
    cache.put("Stir", "hu", "Keverd")
    client = StubClient()

    assert _translator(client, cache=cache).translate("Stir") == "Keverd"
    assert client.calls == []

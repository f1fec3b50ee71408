"""Integration tests for the translation endpoints."""

from __future__ import annotations

import pytest
from fastapi import status

from fittracker.server import deps
from fittracker.translation import LiveTranslator


class StubClient:
    def translate(self, text, target_lang, source_lang="en"):
        return {"Serve warm": "Melegen tálald"}.get(text)


@pytest.fixture()
def translator(app) -> LiveTranslator:
    live = LiveTranslator(client=StubClient(), sleep=lambda seconds: None)
    app.dependency_overrides[deps.get_translator] = lambda: live
    return live


def test_translate_text_uses_dictionary(client, translator):
    response = client.post("/translate", json={"text": "chicken", "targetLang": "hu"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "translatedText": "csirke",
        "originalText": "chicken",
        "targetLanguage": "hu",
    }


def test_translate_text_falls_back_to_original(client, translator):
    response = client.post("/translate", json={"text": "Unknown phrase here"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["translatedText"] == "Unknown phrase here"


def test_translate_recipes(client, translator):
    payload = {
        "recipes": [
            {"label": "Chicken", "ingredients": [{"text": "2 cups spinach"}], "steps": ["Serve warm"]}
        ],
        "targetLang": "hu",
    }

    response = client.post("/recipes/translate", json=payload)

    assert response.status_code == status.HTTP_200_OK
    recipe = response.json()["recipes"][0]
    assert recipe["label"] == "csirke"
    assert recipe["ingredients"][0]["text"] == "2 cups spenót"
    assert recipe["steps"] == ["Melegen tálald"]
    assert recipe["isTranslated"] is True


def test_translate_rejects_missing_text(client, translator):
    response = client.post("/translate", json={"targetLang": "hu"})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_app_owns_a_translator(app):
    assert isinstance(app.state.translator, LiveTranslator)

"""English to Hungarian food vocabulary consulted before the translation API."""

from __future__ import annotations

HUNGARIAN_FOOD_TERMS: dict[str, str] = {
    # proteins
    "chicken": "csirke",
    "chicken breast": "csirkemell",
    "chicken breasts": "csirkemell",
    "beef": "marhahús",
    "pork": "sertéshús",
    "salmon": "lazac",
    "fish": "hal",
    "egg": "tojás",
    "eggs": "tojás",
    # vegetables
    "onion": "hagyma",
    "onions": "hagyma",
    "carrot": "sárgarépa",
    "carrots": "sárgarépa",
    "potato": "burgonya",
    "potatoes": "burgonya",
    "tomato": "paradicsom",
    "tomatoes": "paradicsom",
    "spinach": "spenót",
    "baby spinach": "bébi spenót",
    "broccoli": "brokkoli",
    "bell pepper": "kaliforniai paprika",
    "garlic": "fokhagyma",
    "ginger": "gyömbér",
    # dairy
    "milk": "tej",
    "cheese": "sajt",
    "mozzarella": "mozzarella",
    "parmesan": "parmezán",
    "butter": "vaj",
    "cream": "tejszín",
    "sour cream": "tejföl",
    "yogurt": "joghurt",
    # grains
    "rice": "rizs",
    "pasta": "tészta",
    "bread": "kenyér",
    "flour": "liszt",
    "quinoa": "quinoa",
    # seasonings
    "salt": "só",
    "pepper": "bors",
    "sugar": "cukor",
    "honey": "méz",
    "oil": "olaj",
    "olive oil": "olívaolaj",
    "vegetable oil": "növényi olaj",
    "soy sauce": "szójaszósz",
    "vinegar": "ecet",
    # other
    "water": "víz",
    "wine": "bor",
    "lemon": "citrom",
    "lime": "lime",
    "parsley": "petrezselyem",
    "basil": "bazsalikom",
    "oregano": "oregánó",
}

DICTIONARIES: dict[str, dict[str, str]] = {"hu": HUNGARIAN_FOOD_TERMS}

__all__ = ["DICTIONARIES", "HUNGARIAN_FOOD_TERMS"]

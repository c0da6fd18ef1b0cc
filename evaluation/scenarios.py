"""Evaluation scenarios exercising presentation, context and sparse catalogs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class EvaluationScenario:
    name: str
    description: str
    request_text: str
    catalog_items: List[Dict[str, object]]
    expectations: Dict[str, object]
    gender_presentation: Optional[str] = None
    style_agent: Optional[str] = None
    target: int = 3
    generator_payload: Optional[Dict[str, Any]] = None
    user_prefs: Dict[str, object] = field(default_factory=dict)


def _item(item_id: str, category: str, sub: str, name: str, color: str, dress_code: Optional[str] = None, **extra: object) -> Dict[str, object]:
    payload: Dict[str, object] = {
        "item_id": item_id,
        "main_category": category,
        "subcategory": sub,
        "name": name,
        "color": color,
        "image_url": f"https://example.com/{item_id}.jpg",
    }
    if dress_code:
        payload["dress_code"] = dress_code
    payload.update(extra)
    return payload


def _wardrobe_fixtures() -> List[Dict[str, object]]:
    return [
        _item("top_oxford", "Tops", "Dress Shirt", "White Oxford Shirt", "White", "BusinessCasual", formality_score=7),
        _item("top_polo", "Tops", "Polo", "Navy Polo", "Navy", "SmartCasual", formality_score=5),
        _item("top_tee", "Tops", "T-Shirt", "Grey Tee", "Grey", "Casual", formality_score=3),
        _item("top_hoodie", "Tops", "Hoodie", "Black Hoodie", "Black", "UltraCasual", formality_score=2),
        _item("bottom_trousers", "Bottoms", "Trousers", "Charcoal Trousers", "Charcoal", "BusinessCasual", formality_score=7),
        _item("bottom_chinos", "Bottoms", "Chinos", "Stone Chinos", "Stone", "SmartCasual", formality_score=6),
        _item("bottom_jeans", "Bottoms", "Jeans", "Indigo Jeans", "Blue", "Casual", formality_score=4),
        _item("bottom_shorts", "Bottoms", "Shorts", "Running Shorts", "Black", "UltraCasual", formality_score=1),
        _item("shoe_loafers", "Shoes", "Loafers", "Brown Suede Loafers", "Brown", "SmartCasual", shoe_style="loafer"),
        _item("shoe_derby", "Shoes", "Derby", "Black Derby Shoes", "Black", "BusinessCasual"),
        _item("shoe_sneakers", "Shoes", "Sneakers", "White Sneakers", "White", "Casual", shoe_style="sneaker"),
        _item("shoe_runners", "Shoes", "Running Sneakers", "Trail Runners", "Grey", "UltraCasual"),
        _item("outer_blazer", "Outerwear", "Blazer", "Navy Blazer", "Navy", "BusinessCasual"),
        _item("outer_overshirt", "Outerwear", "Jacket", "Linen Overshirt Jacket", "Beige", "SmartCasual"),
        _item("outer_parka", "Outerwear", "Parka", "Olive Parka", "Olive", "Casual"),
        _item("acc_belt", "Accessories", "Belt", "Leather Belt", "Brown"),
    ]


def _feminine_fixtures() -> List[Dict[str, object]]:
    return [
        _item("dress_wrap", "Dresses", "Wrap Dress", "Floral Wrap Dress", "Red"),
        _item("skirt_mini", "Skirts", "Mini Skirt", "Pleated Mini Skirt", "Black"),
        _item("shoe_stiletto", "Shoes", "Stilettos", "Black Stilettos", "Black"),
        _item("top_blouse", "Tops", "Blouse", "Silk Blouse", "Ivory"),
        _item("bag_clutch", "Bags", "Clutch", "Beaded Clutch", "Gold"),
    ]


def _leaking_payload() -> Dict[str, Any]:
    return {
        "outfits": [
            {"title": "Everything", "items": list(range(1, 25)), "why": "All of it."},
            {"title": "Repeats", "items": [2, 2, 99, 0], "why": "One polo."},
            {"title": "Empty", "items": [], "why": "Nothing."},
        ]
    }


SCENARIOS: List[EvaluationScenario] = [
    EvaluationScenario(
        name="masculine_generator_leak",
        description="A generator that lists every index must not leak feminine-coded items.",
        request_text="Smart casual dinner with friends",
        catalog_items=_wardrobe_fixtures() + _feminine_fixtures(),
        gender_presentation="male",
        generator_payload=_leaking_payload(),
        expectations={"exact_outfits": 3, "no_presentation_leak": True},
    ),
    EvaluationScenario(
        name="gym_session",
        description="Gym requests swap in sneakers.",
        request_text="Gym session after the office",
        catalog_items=_wardrobe_fixtures(),
        gender_presentation="male",
        expectations={"exact_outfits": 3, "requires_sneaker": True},
    ),
    EvaluationScenario(
        name="wedding_guest",
        description="Formal contexts keep dress shoes and drop shorts, hoodies and sneakers.",
        request_text="Wedding reception on Saturday",
        catalog_items=_wardrobe_fixtures(),
        gender_presentation="male",
        expectations={
            "exact_outfits": 3,
            "requires_dress_shoe": True,
            "forbid_subcategories": ["Shorts", "Hoodie", "Sneakers", "Running Sneakers"],
        },
    ),
    EvaluationScenario(
        name="sparse_catalog",
        description="One combination available; the engine under-fills rather than repeating it.",
        request_text="Something casual",
        catalog_items=[
            _item("top_tee", "Tops", "T-Shirt", "Grey Tee", "Grey"),
            _item("bottom_jeans", "Bottoms", "Jeans", "Indigo Jeans", "Blue"),
            _item("shoe_sneakers", "Shoes", "Sneakers", "White Sneakers", "White"),
        ],
        expectations={"exact_outfits": 1, "under_filled": True},
    ),
    EvaluationScenario(
        name="heritage_agent_loafers",
        description="The heritage agent keeps its color bans while honoring a loafer request.",
        request_text="Brown loafers with a blazer for a long lunch",
        catalog_items=_wardrobe_fixtures(),
        gender_presentation="male",
        style_agent="agent3",
        expectations={"min_outfits": 1, "requires_loafer": True, "forbid_colors": ["Black", "Neon"]},
    ),
]


__all__ = ["EvaluationScenario", "SCENARIOS"]

"""End-to-end tests for the outfit stylist agent."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import List

sys.path.append(str(Path(__file__).resolve().parents[1]))

from agents.outfit_stylist_agent import OutfitStylistAgent
from evaluation.scenarios import _feminine_fixtures, _wardrobe_fixtures
from logic.presentation import is_item_incompatible
from logic.structure import is_structurally_valid
from models.catalog_item import CatalogItem, from_raw_metadata
from models.profiles import UserPrefs
from stylist_app.config import EngineConfig
from tools.generator import OutfitGenerator, StaticOutfitGenerator


class _ExplodingGenerator(OutfitGenerator):
    def generate(self, prompt: str) -> str:
        raise ConnectionError("generator unreachable")


def _catalog(include_feminine: bool = True) -> List[CatalogItem]:
    raw = _wardrobe_fixtures() + (_feminine_fixtures() if include_feminine else [])
    return [from_raw_metadata(item) for item in raw]


def _leaking_generator() -> StaticOutfitGenerator:
    return StaticOutfitGenerator(
        {
            "outfits": [
                {"title": "All in", "items": list(range(1, 22)), "why": "Everything."},
                {"title": "Stray", "items": [3, 40, -1], "why": "Out of range."},
            ]
        }
    )


def test_masculine_user_never_sees_feminine_items() -> None:
    stylist = OutfitStylistAgent(config=EngineConfig(), generator=_leaking_generator())
    result = stylist.recommend_outfits(
        "Smart casual dinner", _catalog(), user_prefs=UserPrefs(gender_presentation="male")
    )
    assert len(result.outfits) == 3
    assert not result.under_filled
    assert result.diagnostics["source"] == "generator"
    assert len({outfit.signature() for outfit in result.outfits}) == 3
    for outfit in result.outfits:
        assert is_structurally_valid(outfit.items)
        assert not any(is_item_incompatible(item) for item in outfit.items)
        assert len(outfit.items) <= 6


def test_prompt_lists_only_the_filtered_pool() -> None:
    generator = _leaking_generator()
    stylist = OutfitStylistAgent(config=EngineConfig(), generator=generator)
    stylist.recommend_outfits("Dinner", _catalog(), user_prefs=UserPrefs(gender_presentation="male"))
    prompt = generator.prompts[0]
    assert "Floral Wrap Dress" not in prompt
    assert "Silk Blouse" not in prompt
    assert "Navy Polo" in prompt


def test_feminine_user_keeps_dresses_available() -> None:
    stylist = OutfitStylistAgent(config=EngineConfig())
    result = stylist.recommend_outfits("Dinner", _catalog(), user_prefs=UserPrefs(gender_presentation="female"))
    assert result.diagnostics["pool"]["size"] == len(_catalog())


def test_results_are_deterministic() -> None:
    first = OutfitStylistAgent(config=EngineConfig()).recommend_outfits("Business casual meeting", _catalog())
    second = OutfitStylistAgent(config=EngineConfig()).recommend_outfits("Business casual meeting", _catalog())
    assert first.to_payload() == second.to_payload()
    assert first.diagnostics["source"] == "local"


def test_generator_failure_falls_back_to_local_assembly() -> None:
    stylist = OutfitStylistAgent(config=EngineConfig(), generator=_ExplodingGenerator())
    result = stylist.recommend_outfits("Weekend errands", _catalog(include_feminine=False))
    assert result.diagnostics["source"] == "local"
    assert len(result.outfits) == 3


def test_empty_generator_response_uses_fallback_outfit() -> None:
    stylist = OutfitStylistAgent(config=EngineConfig(), generator=StaticOutfitGenerator("not json"))
    result = stylist.recommend_outfits("Wedding reception", _catalog(include_feminine=False), target=1)
    assert [outfit.title for outfit in result.outfits] == ["Wedding Fallback"]


def test_target_and_under_fill() -> None:
    sparse = [
        CatalogItem(item_id="t", main_category="Tops", subcategory="T-Shirt"),
        CatalogItem(item_id="b", main_category="Bottoms", subcategory="Jeans"),
        CatalogItem(item_id="s", main_category="Shoes", subcategory="Sneakers"),
    ]
    stylist = OutfitStylistAgent(config=EngineConfig())
    result = stylist.recommend_outfits("", sparse, target=5)
    assert len(result.outfits) == 1
    assert result.under_filled
    assert result.to_payload()["under_filled"] is True

    five = stylist.recommend_outfits("", _catalog(include_feminine=False), target=5)
    assert len(five.outfits) == 5


def test_agent_selector_by_key_scopes_the_pool() -> None:
    stylist = OutfitStylistAgent(config=EngineConfig())
    result = stylist.recommend_outfits(
        "Brown loafers for lunch", _catalog(), user_prefs=UserPrefs(gender_presentation="man"), agent="agent3"
    )
    assert result.outfits
    for outfit in result.outfits:
        assert outfit.title.startswith("Classic Heritage Gentleman")
        assert all((item.color or "").lower() != "black" for item in outfit.items)
    assert any(item.subcategory == "Loafers" for outfit in result.outfits for item in outfit.items)


def test_refinement_reaches_constraints() -> None:
    stylist = OutfitStylistAgent(config=EngineConfig())
    result = stylist.recommend_outfits("Dinner", _catalog(include_feminine=False), refinement="no loafers")
    assert result.diagnostics["constraints"]["excludeLoafers"] is True
    for outfit in result.outfits:
        assert all(item.subcategory != "Loafers" for item in outfit.items)


def test_recommend_from_request_validates_envelope() -> None:
    stylist = OutfitStylistAgent(config=EngineConfig())
    rejected = stylist.recommend_from_request({"request_text": "Dinner", "target": 0}, _catalog())
    assert rejected["status"] == "needs_review"
    assert rejected["details"]

    accepted = stylist.recommend_from_request(
        {"request_text": "Dinner", "gender_presentation": "male", "target": 2}, _catalog()
    )
    assert accepted["status"] == "ok"
    assert accepted["count"] == 2
    assert accepted["target"] == 2


def test_ten_safe_items_and_five_feminine_items_yield_three_outfits() -> None:
    raw = _wardrobe_fixtures()[:10] + _feminine_fixtures()
    catalog = [from_raw_metadata(item) for item in raw]
    stylist = OutfitStylistAgent(config=EngineConfig(), generator=_leaking_generator())
    result = stylist.recommend_outfits("Smart casual dinner", catalog, user_prefs=UserPrefs(gender_presentation="male"))
    assert len(result.outfits) == 3
    for outfit in result.outfits:
        assert is_structurally_valid(outfit.items)
        assert not any(is_item_incompatible(item) for item in outfit.items)


def test_gym_session_with_running_shorts_keeps_sneakers_on_every_look() -> None:
    catalog = [
        CatalogItem(item_id="tank", main_category="Tops", subcategory="Tank Top"),
        CatalogItem(item_id="rshorts", main_category="Bottoms", subcategory="Running Shorts"),
        CatalogItem(item_id="chinos", main_category="Bottoms", subcategory="Chinos"),
        CatalogItem(item_id="loafers", main_category="Shoes", subcategory="Loafers"),
        CatalogItem(item_id="sneakers", main_category="Shoes", subcategory="Sneakers"),
    ]
    stylist = OutfitStylistAgent(config=EngineConfig())
    result = stylist.recommend_outfits("gym session", catalog, target=2)
    assert len(result.outfits) == 2
    assert any("rshorts" in outfit.signature() for outfit in result.outfits)
    for outfit in result.outfits:
        assert is_structurally_valid(outfit.items)
        assert "sneakers" in outfit.signature()
        assert "loafers" not in outfit.signature()

"""Lightweight evaluation harness for deterministic scenarios."""

from __future__ import annotations

from typing import Dict, List

from agents.outfit_stylist_agent import OutfitStylistAgent
from evaluation.scenarios import EvaluationScenario, SCENARIOS
from logic.enforcement import DRESS_SHOE_PATTERN, SNEAKER_PATTERN
from logic.presentation import is_presentation_incompatible
from models.catalog_item import from_raw_metadata
from models.profiles import UserPrefs
from models.taxonomy import map_category
from stylist_app.config import EngineConfig
from tools.generator import StaticOutfitGenerator


def _subcategory(item: Dict[str, object]) -> str:
    return str(item.get("subcategory") or "").lower()


def _shoe_matches(item: Dict[str, object], pattern) -> bool:
    return map_category(item.get("main_category")) == "shoes" and bool(pattern.search(_subcategory(item)))


def _any_item(outfits: List[Dict[str, object]], predicate) -> bool:
    return any(any(predicate(item) for item in outfit.get("items", [])) for outfit in outfits)


def _evaluate_expectations(expectations: Dict[str, object], payload: Dict[str, object]) -> Dict[str, object]:
    outfits: List[Dict[str, object]] = payload.get("outfits", [])
    checks: Dict[str, bool] = {}
    checks["min_outfits"] = len(outfits) >= int(expectations.get("min_outfits", 1))
    if "exact_outfits" in expectations:
        checks["exact_outfits"] = len(outfits) == int(expectations["exact_outfits"])
    if "under_filled" in expectations:
        checks["under_filled"] = payload.get("under_filled") == expectations["under_filled"]
    if expectations.get("no_presentation_leak"):
        checks["no_presentation_leak"] = not _any_item(
            outfits,
            lambda item: is_presentation_incompatible(item.get("main_category"), item.get("subcategory"), item.get("name")),
        )
    if expectations.get("requires_sneaker"):
        checks["requires_sneaker"] = _any_item(outfits, lambda item: _shoe_matches(item, SNEAKER_PATTERN))
    if expectations.get("requires_dress_shoe"):
        checks["requires_dress_shoe"] = _any_item(outfits, lambda item: _shoe_matches(item, DRESS_SHOE_PATTERN))
    if expectations.get("requires_loafer"):
        checks["requires_loafer"] = _any_item(outfits, lambda item: "loafer" in _subcategory(item))
    forbidden_subs = {str(sub) for sub in expectations.get("forbid_subcategories", [])}
    if forbidden_subs:
        checks["forbid_subcategories"] = not _any_item(outfits, lambda item: item.get("subcategory") in forbidden_subs)
    forbidden_colors = {str(color).lower() for color in expectations.get("forbid_colors", [])}
    if forbidden_colors:
        checks["forbid_colors"] = not _any_item(
            outfits, lambda item: str(item.get("color") or "").lower() in forbidden_colors
        )
    return {"passed": all(checks.values()), "checks": checks}


def run_scenario(scenario: EvaluationScenario) -> Dict[str, object]:
    config = EngineConfig.from_env()
    catalog = [from_raw_metadata(item) for item in scenario.catalog_items]
    generator = StaticOutfitGenerator(scenario.generator_payload) if scenario.generator_payload else None
    stylist_agent = OutfitStylistAgent(config=config, generator=generator)

    user_prefs = UserPrefs.from_dict({**scenario.user_prefs, "gender_presentation": scenario.gender_presentation})
    result = stylist_agent.recommend_outfits(
        scenario.request_text,
        catalog,
        user_prefs=user_prefs,
        agent=scenario.style_agent,
        target=scenario.target,
    )
    response = result.to_payload()
    evaluation = _evaluate_expectations(scenario.expectations, response)
    return {
        "scenario": scenario.name,
        "passed": evaluation["passed"],
        "checks": evaluation["checks"],
        "outfit_count": response["count"],
        "response": response,
    }


def run_evaluation_suite() -> List[Dict[str, object]]:
    return [run_scenario(scenario) for scenario in SCENARIOS]


def run_smoke_checks() -> List[str]:
    results = run_evaluation_suite()
    return [f"{result['scenario']}: {'passed' if result['passed'] else 'failed'}" for result in results]


__all__ = ["run_evaluation_suite", "run_scenario", "run_smoke_checks"]

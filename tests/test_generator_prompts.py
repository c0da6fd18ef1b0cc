"""Generator adapters, response parsing and prompt construction tests."""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import List

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.constraints import parse_constraints
from logic.prompts import build_outfit_prompt, effective_request, format_catalog_lines, style_context_block
from models.catalog_item import CatalogItem
from models.profiles import StyleProfile
from models.style_agents import STYLE_AGENTS
from stylist_app.config import EngineConfig
from tools.generator import GeminiOutfitGenerator, StaticOutfitGenerator, parse_generator_response


class _FakeResponse:
    def __init__(self, text: str) -> None:
        self.text = text


class _FakeModel:
    def __init__(self, text: str) -> None:
        self.prompts: List[str] = []
        self._text = text

    def generate_content(self, prompt: str) -> _FakeResponse:
        self.prompts.append(prompt)
        return _FakeResponse(self._text)


class _BrokenModel:
    def generate_content(self, prompt: str) -> _FakeResponse:
        raise RuntimeError("quota exhausted")


def _pool() -> List[CatalogItem]:
    return [
        CatalogItem(item_id="a", main_category="Tops", subcategory="Polo", name="Navy Polo"),
        CatalogItem(item_id="b", subcategory="Chinos", color="Stone"),
    ]


def test_parse_plain_and_fenced_json() -> None:
    payload = {"outfits": [{"title": "One", "items": [1, 2, 3], "why": "Sharp."}]}
    assert parse_generator_response(json.dumps(payload)).outfits[0].items == [1, 2, 3]
    fenced = "```json\n" + json.dumps(payload) + "\n```"
    assert parse_generator_response(fenced).outfits[0].title == "One"


def test_parse_extracts_embedded_object() -> None:
    text = 'Here you go: {"outfits": [{"items": [2], "missing": "  "}]} Enjoy!'
    response = parse_generator_response(text)
    assert response.outfits[0].items == [2]
    assert response.outfits[0].missing is None


@pytest.mark.parametrize("text", [None, "", "no json here", '{"outfits": "nope"}', "{broken"])
def test_parse_unusable_output_is_empty(text) -> None:
    assert parse_generator_response(text).outfits == []


def test_static_generator_records_prompts() -> None:
    generator = StaticOutfitGenerator({"outfits": []})
    assert json.loads(generator.generate("prompt one")) == {"outfits": []}
    assert generator.prompts == ["prompt one"]


def test_gemini_generator_uses_injected_model() -> None:
    model = _FakeModel('  {"outfits": []}  ')
    generator = GeminiOutfitGenerator(EngineConfig(), model=model)
    assert generator.generate("hello") == '{"outfits": []}'
    assert model.prompts == ["hello"]


def test_gemini_generator_propagates_errors() -> None:
    generator = GeminiOutfitGenerator(EngineConfig(), model=_BrokenModel())
    with pytest.raises(RuntimeError):
        generator.generate("hello")


def test_effective_request_folds_refinement() -> None:
    assert effective_request("Dinner", "no sneakers") == "Dinner. User refinement: no sneakers"
    assert effective_request("Dinner", "  ") == "Dinner"
    assert effective_request(None, "loafers") == "User refinement: loafers"


def test_catalog_lines_are_one_based() -> None:
    assert format_catalog_lines(_pool()) == "1. Navy Polo (Tops)\n2. Stone Chinos (Other)"


def test_prompt_sections() -> None:
    prompt = build_outfit_prompt(
        _pool(),
        "Smart casual rooftop drinks",
        parse_constraints("Smart casual rooftop drinks"),
        agent=STYLE_AGENTS["agent2"],
        presentation="masculine",
        refinement="swap the jacket",
    )
    assert "CATALOG (use ONLY these items by numeric index):" in prompt
    assert '"dressWanted": "SmartCasual"' in prompt
    assert 'STYLE AGENT ACTIVE: "Rebel Streetwear"' in prompt
    assert '"upscaleIntent": true' in prompt
    assert "REFINEMENT FOCUS SLOTS: outerwear" in prompt
    assert "GENDER CONTEXT" in prompt
    assert "STYLE_AGENT preferences" in prompt
    assert prompt.rstrip().endswith("}")


def test_style_block_prefers_agent_over_profile() -> None:
    profile = StyleProfile(preferred_colors=("Olive",), style_keywords=("Relaxed",))
    assert "USER STYLE PROFILE" in style_context_block(None, profile)
    assert "STYLE AGENT ACTIVE" in style_context_block(STYLE_AGENTS["agent1"], profile)
    assert style_context_block(None, StyleProfile()) == ""

"""Outfit generator adapters and response parsing.

The engine treats the generator as a black box: it receives a prompt over a
numbered pool and answers with JSON listing outfits by catalog index.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional

import google.generativeai as genai
from pydantic import ValidationError

from logic.validation import GeneratorResponse
from stylist_app.config import EngineConfig
from tools.observability import instrument_stage

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


class OutfitGenerator:
    """Base interface for outfit generators."""

    def generate(self, prompt: str) -> str:
        raise NotImplementedError


class GeminiOutfitGenerator(OutfitGenerator):
    """Generator backed by a Gemini model returning JSON."""

    def __init__(self, config: EngineConfig, model: Any = None) -> None:
        if model is None:
            if config.api_key:
                genai.configure(api_key=config.api_key)
            model = genai.GenerativeModel(
                config.model,
                generation_config={"response_mime_type": "application/json"},
            )
        self._model = model

    @instrument_stage("generator.gemini")
    def generate(self, prompt: str) -> str:
        response = self._model.generate_content(prompt)
        return (getattr(response, "text", None) or "").strip()


class StaticOutfitGenerator(OutfitGenerator):
    """Returns a canned payload, recording every prompt it receives."""

    def __init__(self, payload: Dict[str, Any] | str) -> None:
        self._payload = payload if isinstance(payload, str) else json.dumps(payload)
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self._payload


def _extract_json(text: str) -> Optional[Any]:
    cleaned = _FENCE.sub("", text.strip()).strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass
    match = _JSON_BLOCK.search(cleaned)
    if not match:
        return None
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError:
        return None


def parse_generator_response(text: Optional[str]) -> GeneratorResponse:
    """Parse generator output; anything unusable becomes an empty response."""

    if not text or not text.strip():
        logger.warning("Generator returned an empty response")
        return GeneratorResponse()

    data = _extract_json(text)
    if data is None:
        logger.warning("Generator response was not valid JSON")
        return GeneratorResponse()

    try:
        return GeneratorResponse.model_validate(data)
    except ValidationError as exc:
        logger.warning("Generator response failed validation: %s", exc.errors())
        return GeneratorResponse()


__all__ = [
    "GeminiOutfitGenerator",
    "OutfitGenerator",
    "StaticOutfitGenerator",
    "parse_generator_response",
]

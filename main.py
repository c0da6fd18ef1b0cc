"""Run the outfit composition engine over a JSON catalog file."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import List, Optional

from agents.outfit_stylist_agent import OutfitStylistAgent
from models.catalog_item import CatalogItem, from_raw_metadata
from models.profiles import UserPrefs
from stylist_app.config import EngineConfig
from stylist_app.logging_config import configure_logging
from tools.generator import GeminiOutfitGenerator


def load_catalog(path: Path) -> List[CatalogItem]:
    raw = json.loads(path.read_text())
    entries = raw.get("items", []) if isinstance(raw, dict) else raw
    return [from_raw_metadata(entry) for entry in entries]


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Compose outfits from a wardrobe catalog")
    parser.add_argument("catalog", help="Path to a JSON list of catalog items.")
    parser.add_argument("--request", default="", help="Free-text styling request.")
    parser.add_argument("--refinement", default=None, help="Optional follow-up refinement.")
    parser.add_argument("--gender", default=None, help="Gender presentation of the user.")
    parser.add_argument("--agent", default=None, help="Style agent key (agent1, agent2, agent3).")
    parser.add_argument("--prefs", default=None, help="Path to a JSON file with user bans and feedback.")
    parser.add_argument("--target", type=int, default=None, help="Number of outfits to return.")
    parser.add_argument("--gemini", action="store_true", help="Use the Gemini generator instead of local assembly.")
    args = parser.parse_args(argv)

    configure_logging()
    config = EngineConfig.from_env()
    catalog = load_catalog(Path(args.catalog))

    prefs_payload = json.loads(Path(args.prefs).read_text()) if args.prefs else {}
    if args.gender:
        prefs_payload["gender_presentation"] = args.gender
    user_prefs = UserPrefs.from_dict(prefs_payload)

    generator = GeminiOutfitGenerator(config) if args.gemini else None
    stylist = OutfitStylistAgent(config=config, generator=generator)
    result = stylist.recommend_outfits(
        args.request,
        catalog,
        user_prefs=user_prefs,
        agent=args.agent,
        target=args.target,
        refinement=args.refinement,
    )
    print(json.dumps(result.to_payload(), indent=2))


if __name__ == "__main__":
    main()

"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.catalog_item import CatalogItem, from_raw_metadata
from models.outfit import Outfit, signature_of
from models.profiles import AgentProfile, Palette, StyleProfile, UserPrefs

__all__ = [
    "AgentProfile",
    "CatalogItem",
    "Outfit",
    "Palette",
    "StyleProfile",
    "UserPrefs",
    "from_raw_metadata",
    "signature_of",
]

"""Catalog item data model and helpers."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from models.taxonomy import map_category


def _clean_text(value: Any) -> Optional[str]:
    """Trim a loose metadata value, returning ``None`` for blanks."""

    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class CatalogItem:
    """A wardrobe garment as read by the engine.

    Items are immutable; outfits hold references to the caller's instances so
    identity and catalog order survive every pipeline stage.
    """

    item_id: str
    main_category: Optional[str] = None
    subcategory: Optional[str] = None
    name: Optional[str] = None
    color: Optional[str] = None
    color_family: Optional[str] = None
    pattern: Optional[str] = None
    dress_code: Optional[str] = None
    contrast: Optional[str] = None
    formality_score: Optional[float] = None
    shoe_style: Optional[str] = None
    material: Optional[str] = None
    image_url: Optional[str] = None

    @property
    def slot(self) -> str:
        return map_category(self.main_category)

    @property
    def label(self) -> str:
        """Human readable label used in prompts and fallbacks."""

        if self.name:
            return self.name
        parts = [part for part in (self.color, self.subcategory) if part]
        return " ".join(parts) if parts else (self.main_category or "Item")

    def text(self) -> str:
        """Lower-cased subcategory and name for keyword matching."""

        return f"{self.subcategory or ''} {self.name or ''}".lower()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def from_raw_metadata(metadata: Dict[str, Any]) -> CatalogItem:
    """Factory to build a :class:`CatalogItem` from loose catalog metadata."""

    item_id = metadata.get("item_id", metadata.get("id"))
    if item_id is None or str(item_id).strip() == "":
        raise ValueError("Missing required field for CatalogItem: item_id")

    return CatalogItem(
        item_id=str(item_id),
        main_category=_clean_text(metadata.get("main_category", metadata.get("category"))),
        subcategory=_clean_text(metadata.get("subcategory", metadata.get("sub_category"))),
        name=_clean_text(metadata.get("name", metadata.get("label"))),
        color=_clean_text(metadata.get("color")),
        color_family=_clean_text(metadata.get("color_family")),
        pattern=_clean_text(metadata.get("pattern")),
        dress_code=_clean_text(metadata.get("dress_code")),
        contrast=_clean_text(metadata.get("contrast")),
        formality_score=_coerce_float(metadata.get("formality_score")),
        shoe_style=_clean_text(metadata.get("shoe_style")),
        material=_clean_text(metadata.get("material")),
        image_url=_clean_text(metadata.get("image_url")),
    )


__all__ = ["CatalogItem", "from_raw_metadata"]

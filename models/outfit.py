"""Outfit value object."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Optional, Tuple

from models.catalog_item import CatalogItem

Signature = Tuple[str, ...]


def signature_of(items: Iterable[CatalogItem]) -> Signature:
    """Sorted item-id tuple identifying an outfit's item set."""

    return tuple(sorted(item.item_id for item in items))


@dataclass(frozen=True)
class Outfit:
    """An assembled outfit.

    Outfits never change in place; every repair step returns a new value via
    the ``with_*`` helpers.
    """

    title: str
    items: Tuple[CatalogItem, ...] = ()
    why: str = ""
    missing: Optional[str] = None
    score: float = 0.0

    def __post_init__(self) -> None:
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    def with_items(self, items: Iterable[CatalogItem]) -> "Outfit":
        return replace(self, items=tuple(items))

    def with_missing(self, note: str) -> "Outfit":
        """Attach a missing note unless one is already recorded."""

        if self.missing:
            return self
        return replace(self, missing=note)

    def with_score(self, score: float) -> "Outfit":
        return replace(self, score=score)

    def signature(self) -> Signature:
        return signature_of(self.items)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "title": self.title,
            "items": [item.to_dict() for item in self.items],
            "why": self.why,
        }
        if self.missing:
            payload["missing"] = self.missing
        return payload


__all__ = ["Outfit", "Signature", "signature_of"]

"""User and style-agent preference profiles."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

DRESS_BIASES: Tuple[str, ...] = ("Business", "BusinessCasual", "SmartCasual", "UltraCasual")
CONTRAST_TARGETS: Tuple[str, ...] = ("low", "medium", "high")

FEEDBACK_MIN = -4.0
FEEDBACK_MAX = 4.0

NEUTRAL_COLORS: FrozenSet[str] = frozenset(
    {"black", "white", "navy", "charcoal", "grey", "gray", "stone", "ivory", "beige"}
)


def is_neutral(color: Optional[str]) -> bool:
    return bool(color) and color.strip().lower() in NEUTRAL_COLORS


def _lower_set(values: Optional[Iterable[str]]) -> FrozenSet[str]:
    return frozenset(str(value).strip().lower() for value in values or () if str(value).strip())


def _clamp_feedback(value: Any) -> float:
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    return max(FEEDBACK_MIN, min(FEEDBACK_MAX, score))


def _freeze_pairs(rules: Optional[Mapping[str, Iterable[str]]]) -> Mapping[str, Tuple[str, ...]]:
    return MappingProxyType({str(key): tuple(values) for key, values in (rules or {}).items()})


@dataclass(frozen=True)
class UserPrefs:
    """Hard bans and per-item feedback for one user.

    Color bans are matched case-insensitively; subcategory bans match the
    subcategory text exactly, as stored on the catalog item.
    """

    ban_colors: FrozenSet[str] = frozenset()
    ban_subcategories: FrozenSet[str] = frozenset()
    ban_item_ids: FrozenSet[str] = frozenset()
    feedback: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    gender_presentation: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "ban_colors", _lower_set(self.ban_colors))
        object.__setattr__(self, "ban_subcategories", frozenset(self.ban_subcategories))
        object.__setattr__(self, "ban_item_ids", frozenset(str(i) for i in self.ban_item_ids))
        object.__setattr__(
            self,
            "feedback",
            MappingProxyType({str(k): _clamp_feedback(v) for k, v in dict(self.feedback).items()}),
        )

    def feedback_for(self, item_id: str) -> float:
        return self.feedback.get(item_id, 0.0)

    @classmethod
    def from_dict(cls, payload: Optional[Mapping[str, Any]]) -> "UserPrefs":
        payload = payload or {}
        return cls(
            ban_colors=frozenset(payload.get("ban_colors", ())),
            ban_subcategories=frozenset(payload.get("ban_subcategories", ())),
            ban_item_ids=frozenset(payload.get("ban_item_ids", ())),
            feedback=dict(payload.get("feedback", {})),
            gender_presentation=payload.get("gender_presentation"),
        )


@dataclass(frozen=True)
class Palette:
    base: Tuple[str, ...] = ()
    accents: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "base", tuple(c.lower() for c in self.base))
        object.__setattr__(self, "accents", tuple(c.lower() for c in self.accents))

    def __contains__(self, color: object) -> bool:
        if not isinstance(color, str):
            return False
        lowered = color.lower()
        return lowered in self.base or lowered in self.accents


@dataclass(frozen=True)
class AgentProfile:
    """A named styling persona with its own capsule rules."""

    name: str
    dress_bias: str = "SmartCasual"
    preferred_colors: Tuple[str, ...] = ()
    avoid_colors: Tuple[str, ...] = ()
    avoid_subcategories: Tuple[str, ...] = ()
    palette: Optional[Palette] = None
    contrast_target: Optional[str] = None
    pattern_max_count: Optional[int] = None
    must_pair: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))
    avoid_pair: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))
    favorite_brands: Tuple[str, ...] = ()
    style_keywords: Tuple[str, ...] = ()
    lifestyle: Tuple[str, ...] = ()
    fashion_goals: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.dress_bias not in DRESS_BIASES:
            raise ValueError(f"Unsupported dress bias '{self.dress_bias}'. Allowed: {list(DRESS_BIASES)}")
        if self.contrast_target is not None and self.contrast_target not in CONTRAST_TARGETS:
            raise ValueError(f"Unsupported contrast target '{self.contrast_target}'")
        object.__setattr__(self, "must_pair", _freeze_pairs(self.must_pair))
        object.__setattr__(self, "avoid_pair", _freeze_pairs(self.avoid_pair))


@dataclass(frozen=True)
class StyleProfile:
    """The user's own style profile, used when no agent persona is selected."""

    preferred_colors: Tuple[str, ...] = ()
    favorite_brands: Tuple[str, ...] = ()
    style_keywords: Tuple[str, ...] = ()
    dress_bias: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.preferred_colors or self.favorite_brands or self.style_keywords or self.dress_bias)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "preferredColors": list(self.preferred_colors),
            "favoriteBrands": list(self.favorite_brands),
            "styleKeywords": list(self.style_keywords),
            "dressBias": self.dress_bias,
        }


__all__ = [
    "AgentProfile",
    "CONTRAST_TARGETS",
    "DRESS_BIASES",
    "NEUTRAL_COLORS",
    "Palette",
    "StyleProfile",
    "UserPrefs",
    "is_neutral",
]

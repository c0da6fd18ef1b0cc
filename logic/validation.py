"""Pydantic schemas for generator output and outfit requests."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator


class GeneratedOutfit(BaseModel):
    """One outfit as returned by the generator: catalog indices, 1-based."""

    title: str = "Outfit"
    items: List[int] = Field(default_factory=list)
    why: str = ""
    missing: Optional[str] = None

    @field_validator("items", mode="before")
    @classmethod
    def _coerce_indices(cls, value: Any) -> List[int]:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            raise ValueError("items must be a list of catalog indices")
        indices: List[int] = []
        for raw in value:
            if isinstance(raw, bool):
                continue
            try:
                indices.append(int(raw))
            except (TypeError, ValueError):
                continue
        return indices

    @field_validator("missing", mode="before")
    @classmethod
    def _blank_missing(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


class GeneratorResponse(BaseModel):
    """Strict response contract: ``{"outfits": [...]}``."""

    outfits: List[GeneratedOutfit] = Field(default_factory=list)


class OutfitRequest(BaseModel):
    """Envelope for one styling request."""

    request_text: str = ""
    gender_presentation: Optional[str] = None
    style_agent: Optional[str] = None
    target: int = Field(default=3, ge=1, le=10)
    refinement: Optional[str] = None


class ValidationResult(BaseModel):
    """Wrapper returned to callers when validation fails."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent review payload."""

    return ValidationResult(message=message, details=exc.errors()).model_dump()


__all__ = [
    "GeneratedOutfit",
    "GeneratorResponse",
    "OutfitRequest",
    "ValidationResult",
    "validation_failure",
]

"""Outfit stylist agent orchestrating the composition pipeline."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from logic.constraints import ParsedConstraints, parse_constraints
from logic.enforcement import finalize_outfit_slots, padding_pool, validate_outfits
from logic.outfit_builder import assemble_outfits_result, resolve_generated_outfits
from logic.padding import PADDED_WHY, pad_to_n
from logic.pool_builder import build_pool_result
from logic.presentation import filter_for_presentation, resolve_presentation
from logic.prompts import build_outfit_prompt, effective_request
from logic.scoring import rerank
from logic.structure import classify_shape, validate_outfit_core
from logic.validation import OutfitRequest, validation_failure
from models.catalog_item import CatalogItem
from models.outfit import Outfit
from models.profiles import AgentProfile, StyleProfile, UserPrefs
from models.style_agents import get_style_agent
from stylist_app.config import EngineConfig
from stylist_app.logging_config import get_logger, log_event, operation_context
from tools.generator import OutfitGenerator, parse_generator_response

logger = get_logger(__name__)

AgentSelector = Union[AgentProfile, str, None]


@dataclass(frozen=True)
class StylingResult:
    outfits: List[Outfit]
    diagnostics: Dict[str, object]

    @property
    def under_filled(self) -> bool:
        return len(self.outfits) < int(self.diagnostics.get("target", 0))

    def to_payload(self) -> Dict[str, Any]:
        return {
            "status": "ok",
            "outfits": [outfit.to_dict() for outfit in self.outfits],
            "count": len(self.outfits),
            "target": self.diagnostics.get("target"),
            "under_filled": self.under_filled,
        }


class OutfitStylistAgent:
    """Builds exactly ``target`` outfits when the catalog allows it.

    The generator is optional. Without one, or when it raises, outfits are
    assembled locally from the ranked pool. Either way the result goes through
    the same presentation scrub, slot repair, context guardrails, structural
    gate and padding.
    """

    def __init__(self, config: Optional[EngineConfig] = None, generator: Optional[OutfitGenerator] = None) -> None:
        self.config = config or EngineConfig.from_env()
        self.generator = generator

    def recommend_outfits(
        self,
        request_text: Optional[str],
        catalog: Sequence[CatalogItem],
        user_prefs: Optional[UserPrefs] = None,
        agent: AgentSelector = None,
        style_profile: Optional[StyleProfile] = None,
        target: Optional[int] = None,
        refinement: Optional[str] = None,
    ) -> StylingResult:
        """Run the full pipeline for one request."""

        user_prefs = user_prefs or UserPrefs()
        agent_profile = get_style_agent(agent) if isinstance(agent, str) else agent
        target = target or self.config.target_outfits

        with operation_context("agent:stylist.recommend_outfits", agent=getattr(agent_profile, "name", None)) as correlation_id:
            log_event(
                logger,
                level=logging.INFO,
                event="agent_call_started",
                agent="stylist",
                method="recommend_outfits",
                correlation_id=correlation_id,
                catalog_count=len(catalog),
                target=target,
            )
            query = effective_request(request_text, refinement)
            constraints = parse_constraints(query)
            presentation = resolve_presentation(user_prefs.gender_presentation)

            eligible = filter_for_presentation(catalog, presentation)
            pool_result = build_pool_result(eligible, user_prefs, agent_profile, min_pool=self.config.min_pool_size)
            ranked = rerank(pool_result.items, constraints, agent_profile, user_prefs)

            candidates, source, assembly_debug = self._candidate_outfits(
                ranked, request_text, constraints, agent_profile, user_prefs, style_profile, presentation, refinement, target
            )

            scrubbed = [outfit.with_items(filter_for_presentation(outfit.items, presentation)) for outfit in candidates]
            finalized = [finalize_outfit_slots(outfit, ranked, query) for outfit in scrubbed]
            guarded = validate_outfits(query, ranked, finalized)
            valid = validate_outfit_core(guarded)
            unique = self._dedupe(valid)[:target]

            def make_outfit(items: Sequence[CatalogItem], position: int) -> Outfit:
                prefix = f"{agent_profile.name}: look" if agent_profile else "Look"
                return Outfit(title=f"{prefix} {position}", items=tuple(items), why=PADDED_WHY)

            outfits = pad_to_n(unique, padding_pool(ranked, query), make_outfit, target=target)

            diagnostics: Dict[str, object] = {
                "target": target,
                "presentation": presentation,
                "constraints": constraints.to_dict(),
                "pool": {"stage": pool_result.stage, "size": len(pool_result.items), **pool_result.diagnostics},
                "source": source,
                "assembly": assembly_debug,
                "candidates": len(candidates),
                "after_guardrails": len(guarded),
                "structurally_valid": len(valid),
                "padded": len(outfits) - len(unique),
                "shapes": [classify_shape(outfit.items) for outfit in outfits],
            }

            log_event(
                logger,
                level=logging.INFO,
                event="agent_call_completed",
                agent="stylist",
                method="recommend_outfits",
                correlation_id=correlation_id,
                outfit_count=len(outfits),
                source=source,
                pool_stage=pool_result.stage,
            )
            if len(outfits) < target:
                log_event(
                    logger,
                    level=logging.WARNING,
                    event="outfits_under_filled",
                    agent="stylist",
                    correlation_id=correlation_id,
                    outfit_count=len(outfits),
                    target=target,
                )
            return StylingResult(outfits=outfits, diagnostics=diagnostics)

    def recommend_from_request(
        self,
        payload: Mapping[str, Any],
        catalog: Sequence[CatalogItem],
        user_prefs: Optional[UserPrefs] = None,
        style_profile: Optional[StyleProfile] = None,
    ) -> Dict[str, Any]:
        """Validate a raw request envelope, then run the pipeline."""

        try:
            request = OutfitRequest.model_validate(dict(payload))
        except ValidationError as exc:
            log_event(
                logger,
                level=logging.WARNING,
                event="request_invalid",
                agent="stylist",
                method="recommend_from_request",
                details=str(exc),
            )
            return validation_failure("Invalid outfit request payload", exc)

        prefs = user_prefs or UserPrefs()
        if request.gender_presentation is not None:
            prefs = UserPrefs(
                ban_colors=prefs.ban_colors,
                ban_subcategories=prefs.ban_subcategories,
                ban_item_ids=prefs.ban_item_ids,
                feedback=prefs.feedback,
                gender_presentation=request.gender_presentation,
            )
        result = self.recommend_outfits(
            request.request_text,
            catalog,
            user_prefs=prefs,
            agent=request.style_agent,
            style_profile=style_profile,
            target=request.target,
            refinement=request.refinement,
        )
        return result.to_payload()

    def _candidate_outfits(
        self,
        ranked: List[CatalogItem],
        request_text: Optional[str],
        constraints: ParsedConstraints,
        agent: Optional[AgentProfile],
        user_prefs: UserPrefs,
        style_profile: Optional[StyleProfile],
        presentation: str,
        refinement: Optional[str],
        target: int,
    ) -> tuple[List[Outfit], str, Dict[str, object]]:
        if self.generator is not None:
            prompt = build_outfit_prompt(
                ranked,
                request_text,
                constraints,
                agent=agent,
                style_profile=style_profile,
                presentation=presentation,
                refinement=refinement,
            )
            try:
                raw = self.generator.generate(prompt)
            except Exception as exc:  # noqa: BLE001
                log_event(
                    logger,
                    level=logging.WARNING,
                    event="generator_failed",
                    agent="stylist",
                    error=type(exc).__name__,
                )
            else:
                response = parse_generator_response(raw)
                outfits = resolve_generated_outfits(response, ranked)
                return outfits, "generator", {"generated": len(response.outfits)}

        assembly = assemble_outfits_result(
            ranked, agent, user_prefs, count=target, per_slot_limit=self.config.per_slot_limit
        )
        return assembly.outfits, "local", assembly.diagnostics

    @staticmethod
    def _dedupe(outfits: Sequence[Outfit]) -> List[Outfit]:
        seen = set()
        unique: List[Outfit] = []
        for outfit in outfits:
            signature = outfit.signature()
            if signature in seen:
                continue
            seen.add(signature)
            unique.append(outfit)
        return unique


__all__ = ["OutfitStylistAgent", "StylingResult"]

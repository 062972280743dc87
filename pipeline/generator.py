"""Generation orchestrator: remote attempt with deterministic fallback.

One attempt walks ``Idle → Requesting → {Succeeded, FallenBack} → Rendered``.
The fallback is only entered after the remote path has definitively failed,
and every remote failure is absorbed here, so callers always receive a
renderable Generation Result and never an exception.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

import httpx

from config import GenerationSettings
from pipeline import answers as ans
from pipeline.fallback import generate_fallback
from pipeline.insights import InsightSignals, extract_insights
from pipeline.llm import LLMError, call_messages_api
from pipeline.strategy import StrategyDecision, select_strategy
from pipeline.synthesizer import build_generation_request
from schemas.generation import Origin

logger = logging.getLogger(__name__)

SOURCE_CLAUDE = "claude"
SOURCE_CLAUDE_ENHANCED = "claude_enhanced"
SOURCE_FALLBACK = "fallback"
SOURCE_ENHANCED_FALLBACK = "enhanced_fallback_with_product_name"


class AttemptState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FALLEN_BACK = "fallen_back"
    RENDERED = "rendered"


_TRANSITIONS: dict[AttemptState, tuple[AttemptState, ...]] = {
    AttemptState.IDLE: (AttemptState.REQUESTING,),
    AttemptState.REQUESTING: (AttemptState.SUCCEEDED, AttemptState.FALLEN_BACK),
    AttemptState.SUCCEEDED: (AttemptState.RENDERED,),
    AttemptState.FALLEN_BACK: (AttemptState.RENDERED,),
    AttemptState.RENDERED: (),
}


@dataclass
class GenerationOutcome:
    """Result of one generation attempt, remote or fallback."""

    data: dict[str, Any]
    origin: Origin
    enhanced: bool = False
    error: str = ""
    generation_context: dict[str, Any] = field(default_factory=dict)
    history: list[AttemptState] = field(default_factory=lambda: [AttemptState.IDLE])

    @property
    def state(self) -> AttemptState:
        return self.history[-1]

    @property
    def succeeded(self) -> bool:
        return self.origin == Origin.CLAUDE

    @property
    def source(self) -> str:
        if self.succeeded:
            return SOURCE_CLAUDE_ENHANCED if self.enhanced else SOURCE_CLAUDE
        return SOURCE_ENHANCED_FALLBACK if self.enhanced else SOURCE_FALLBACK

    def advance(self, state: AttemptState):
        if state not in _TRANSITIONS[self.state]:
            raise ValueError(f"Illegal attempt transition {self.state.value} -> {state.value}")
        self.history.append(state)

    def to_response(self) -> dict[str, Any]:
        """Body for ``POST /api/generate-prompts`` (always served with 200)."""
        if self.succeeded:
            payload: dict[str, Any] = {"success": True, "data": self.data, "source": self.source}
        else:
            payload = {
                "success": False,
                "error": self.error or "Unknown error",
                "fallback": True,
                "data": self.data,
                "source": self.source,
            }
        if self.generation_context:
            payload["generation_context"] = self.generation_context
        return payload


def _generation_context(answers: Mapping[str, Any] | None, insights: InsightSignals) -> dict[str, Any]:
    profile = insights.audience_profile
    return {
        "product_name": insights.product_name,
        "audience_groups": profile.get("age_ranges", ""),
        "income_levels": profile.get("income_levels", ""),
        "brand_colors_used": insights.brand_colors,
        "has_product_image": bool(ans.product_assets(answers).get("image")),
    }


async def generate_prompts(
    answers: Mapping[str, Any] | None,
    settings: GenerationSettings,
    client: httpx.AsyncClient | None = None,
    *,
    use_remote: bool = True,
) -> GenerationOutcome:
    """Run one generation attempt for ``answers``.

    ``settings`` carries the API key and model parameters; a blank key, or
    ``use_remote=False``, goes straight to the fallback without any request.
    """
    answers = answers or {}
    start = time.time()

    insights = extract_insights(answers)
    strategy: StrategyDecision = select_strategy(insights.is_high_involvement)
    enhanced = ans.is_enhanced(answers)
    logger.info(
        "Generation attempt: enhanced=%s involvement=%s category=%s",
        enhanced,
        "high" if insights.is_high_involvement else "low",
        insights.product_category,
    )

    outcome = GenerationOutcome(data={}, origin=Origin.FALLBACK, enhanced=enhanced)
    if enhanced:
        outcome.generation_context = _generation_context(answers, insights)
    outcome.advance(AttemptState.REQUESTING)

    if not use_remote:
        outcome.error = "Remote generation disabled"
    else:
        request = build_generation_request(answers, insights, strategy, settings)
        try:
            outcome.data = await call_messages_api(request, settings, client=client)
            outcome.origin = Origin.CLAUDE
        except LLMError as exc:
            outcome.error = str(exc)
            logger.warning("Remote generation failed, using fallback: %s", exc)
        except Exception as exc:
            outcome.error = f"Unexpected generation error: {exc}"
            logger.exception("Unexpected error during remote generation, using fallback")

    if outcome.succeeded:
        outcome.advance(AttemptState.SUCCEEDED)
    else:
        outcome.data = generate_fallback(answers, insights, strategy)
        outcome.advance(AttemptState.FALLEN_BACK)

    outcome.advance(AttemptState.RENDERED)
    logger.info(
        "Generation attempt finished: source=%s in %.1fs",
        outcome.source, time.time() - start,
    )
    return outcome

"""Fallback Generator: deterministic, network-free Generation Result.

Used whenever the remote model cannot produce a usable document. Built from
the same insight extraction, strategy selection and synthesizer builders as
the remote request, so both paths share one set of keyword tables and the
output shape is identical field for field.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pipeline import answers as ans
from pipeline.insights import InsightSignals, extract_insights
from pipeline.strategy import StrategyDecision, select_strategy
from pipeline.synthesizer import (
    build_ad_copy,
    build_image_specs,
    build_strategy_block,
    build_video_spec,
)
from schemas.generation import GenerationResult

logger = logging.getLogger(__name__)


def build_fallback_result(
    answers: Mapping[str, Any] | None,
    insights: InsightSignals,
    strategy: StrategyDecision,
) -> GenerationResult:
    return GenerationResult(
        strategy=build_strategy_block(strategy, insights),
        veo3=build_video_spec(
            insights,
            strategy,
            customer_context=ans.answer_text(answers, ans.Q_CUSTOMER_CONTEXT),
        ),
        nano_banana=build_image_specs(insights, strategy),
        copy_=build_ad_copy(insights, strategy),
    )


def generate_fallback(
    answers: Mapping[str, Any] | None,
    insights: InsightSignals | None = None,
    strategy: StrategyDecision | None = None,
) -> dict[str, Any]:
    """Return the wire-format fallback document for ``answers``.

    ``insights`` and ``strategy`` may be passed in when the caller already
    computed them for the remote attempt; otherwise they are derived here.
    """
    insights = insights or extract_insights(answers)
    strategy = strategy or select_strategy(insights.is_high_involvement)
    logger.info(
        "Fallback generation: category=%s approach=%s triggers=%s",
        insights.product_category,
        strategy.approach.value,
        ", ".join(insights.emotional_triggers),
    )
    return build_fallback_result(answers, insights, strategy).to_wire()

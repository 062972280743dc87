"""Prompt Synthesizer: turns insights + strategy into generation specs.

Builds the short-video spec, the three still-image specs and the ad copy
that make up a Generation Result, and the outbound Generation Request sent
to the remote model. Never touches the network.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from config import GenerationSettings
from pipeline import answers as ans
from pipeline import rules
from pipeline.insights import InsightSignals
from pipeline.strategy import StrategyDecision
from prompts.marketing_system import ENHANCED_SYSTEM_PROMPT, RESULT_SCHEMA_TEXT, SYSTEM_PROMPT
from schemas.generation import (
    AdCopy,
    BodyCopy,
    ImageSpec,
    ImageSpecs,
    StrategyBlock,
    VideoSpec,
)


def _headline_case(text: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))


# ---------------------------------------------------------------------------
# Strategy
# ---------------------------------------------------------------------------

def build_strategy_block(strategy: StrategyDecision, insights: InsightSignals) -> StrategyBlock:
    return StrategyBlock(
        approach=strategy.approach.value,
        ratio=strategy.ratio,
        psychology=f"{strategy.psychology}. Lead with {', '.join(insights.emotional_triggers)} triggers.",
    )


# ---------------------------------------------------------------------------
# Short-video spec
# ---------------------------------------------------------------------------

def build_video_context(insights: InsightSignals, customer_context: str) -> str:
    default = f"{insights.setting[:1].upper()}{insights.setting[1:]} with thoughtfully designed lighting that enhances the product experience"
    return rules.first_match(rules.VIDEO_CONTEXT_RULES, customer_context, default)


def build_video_subject(insights: InsightSignals) -> str:
    audience = insights.target_audience
    ages = insights.audience_profile.get("age_ranges", "")
    if ages:
        audience = f"{audience} aged {ages}"
    return (
        f"Authentic representation of {audience}, dressed appropriately but not "
        "overly polished, with genuine expressions and natural body language"
    )


def build_video_lighting(insights: InsightSignals) -> str:
    lighting = rules.lighting_for(insights.emotional_triggers)
    primary = insights.brand_colors.get("primary")
    if primary:
        lighting = f"{lighting}, with {primary} brand color accents"
    return lighting


def build_video_audio(insights: InsightSignals, strategy: StrategyDecision) -> str:
    if insights.product_category in rules.CATEGORY_AUDIO:
        music, effects = rules.CATEGORY_AUDIO[insights.product_category]
    else:
        music = rules.RATIONAL_MUSIC if strategy.is_rational else rules.EMOTIONAL_MUSIC
        effects = rules.DEFAULT_AUDIO_EFFECTS
    return f"{music}. {effects}. Mixed at -18 LUFS broadcast standard."


def build_video_spec(
    insights: InsightSignals,
    strategy: StrategyDecision,
    customer_context: str = "",
) -> VideoSpec:
    rational = strategy.is_rational
    return VideoSpec(
        context=build_video_context(insights, customer_context),
        subject=build_video_subject(insights),
        action=rules.action_for(insights.usp, insights.product_category),
        composition=(
            "Medium shot with professional framing, subject at the golden ratio point, clear product details"
            if rational
            else "Dynamic wide shot with emotional framing and rule of thirds composition"
        ),
        camera=(
            "Steady, controlled dolly-in building trust through consistent framing"
            if rational
            else "Smooth tracking shot with subtle handheld movement following the emotional journey"
        ),
        lighting=build_video_lighting(insights),
        style=(
            "Photorealistic, clean, professional aesthetic with sharp focus on product and results"
            if rational
            else "Cinematic with shallow depth of field and warm color grading"
        ),
        audio=build_video_audio(insights, strategy),
    )


# ---------------------------------------------------------------------------
# Still-image specs
# ---------------------------------------------------------------------------

def build_image_specs(insights: InsightSignals, strategy: StrategyDecision) -> ImageSpecs:
    name = insights.product_name
    triggers = " and ".join(t.lower() for t in insights.emotional_triggers)
    colors = insights.brand_colors

    hero_prompt = (
        f"Professional {insights.product_category} product photography of {name} "
        f"in {insights.setting}, emphasizing key product features and benefits"
    )
    if colors:
        hero_prompt += f", brand colors {colors['primary']} and {colors['secondary']}"

    return ImageSpecs(
        hero=ImageSpec(
            prompt=hero_prompt,
            style=(
                "Hyperrealistic product photography with "
                f"{'technical precision' if strategy.is_rational else 'emotional appeal'} "
                "and perfect composition"
            ),
        ),
        lifestyle=ImageSpec(
            prompt=(
                f"{insights.target_audience} naturally using {name} in "
                f"{insights.setting}, showing genuine {triggers} moments"
            ),
            style="Authentic lifestyle photography capturing real moments and genuine emotions",
        ),
        social=ImageSpec(
            prompt=(
                f"Satisfied customer sharing an authentic testimonial about {name}, "
                f"showing genuine {insights.primary_trigger.lower()} and trust"
            ),
            style="Genuine testimonial photography with a natural, trustworthy feel",
        ),
    )


# ---------------------------------------------------------------------------
# Ad copy
# ---------------------------------------------------------------------------

RATIONAL_CTAS = ["See the Data", "View Research", "Calculate Benefits", "Request Analysis", "Get Proof"]
EMOTIONAL_CTAS = ["Start Today", "Transform Now", "Experience More", "Join Thousands", "Begin Your Journey"]


def build_headlines(insights: InsightSignals, strategy: StrategyDecision) -> list[str]:
    benefit = _headline_case(insights.main_benefit)
    if strategy.is_rational:
        return [
            f"The Science Behind {benefit}",
            f"Proven Results: {benefit} That Works",
            "Why Experts Choose This Solution",
            f"Data-Driven {benefit} for Serious Results",
            f"The Intelligent Choice for {benefit}",
        ]
    trigger = insights.primary_trigger
    return [
        f"Transform Your {_headline_case(insights.transformation_area)}",
        f"Experience {benefit} Like Never Before",
        f"Join Thousands Who Discovered {benefit}",
        f"Your {trigger} Solution Awaits",
        f"Where {trigger} Meets Results",
    ]


def build_body_copy(insights: InsightSignals, strategy: StrategyDecision) -> BodyCopy:
    benefit = insights.main_benefit
    if strategy.is_rational:
        return BodyCopy(
            opening=f"When you need reliable {benefit}, the details matter.",
            middle="Our systematically tested approach delivers measurable results.",
            closing="See the evidence that drives smart decisions.",
        )
    return BodyCopy(
        opening=f"Imagine finally having the {benefit} you've been looking for.",
        middle="That's exactly what thousands of customers experience every day.",
        closing="Your transformation story begins with a single step.",
    )


def build_ad_copy(insights: InsightSignals, strategy: StrategyDecision) -> AdCopy:
    return AdCopy(
        headlines=build_headlines(insights, strategy),
        body_copy=build_body_copy(insights, strategy),
        ctas=list(RATIONAL_CTAS if strategy.is_rational else EMOTIONAL_CTAS),
    )


# ---------------------------------------------------------------------------
# Generation Request (remote path)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GenerationRequest:
    system: str
    user_message: str
    model: str
    max_tokens: int
    temperature: float
    enhanced: bool = False

    def to_payload(self) -> dict[str, Any]:
        """Anthropic Messages API request body."""
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "system": self.system,
            "messages": [{"role": "user", "content": self.user_message}],
        }


def _enhanced_sections(answers: Mapping[str, Any] | None, insights: InsightSignals) -> list[str]:
    assets = ans.product_assets(answers)
    colors = insights.brand_colors
    audience = insights.audience_profile
    strategy = ans.brand_strategy(answers)
    name = insights.product_name

    def _or_default(value: str) -> str:
        return value or ans.NOT_SPECIFIED

    return [
        "PRODUCT & BRAND ASSETS:",
        f'Product Name: "{name}" (use this exact name in every prompt)',
        f'Product Category: "{_or_default(ans.text_of(assets.get("category")).strip())}"',
        f'Product Description: "{_or_default(ans.text_of(assets.get("description")).strip())}"',
        f"Brand Colors: Primary {colors['primary']}, Secondary {colors['secondary']}, Accent {colors['accent']}",
        f'Brand Typography: "{_or_default(ans.text_of(assets.get("typography")).strip())}"',
        "Product Image: "
        + ("Visual reference provided for accurate representation" if assets.get("image") else "No product image provided"),
        "",
        "TARGET AUDIENCE:",
        f"Age Groups: {_or_default(audience.get('age_ranges', ''))}",
        f"Income Levels: {_or_default(audience.get('income_levels', ''))}",
        f"Core Values: {_or_default(audience.get('core_values', ''))}",
        f"Research Behavior: {_or_default(audience.get('research_behavior', ''))}",
        "",
        "BRAND STRATEGY:",
        f"Brand Personality: {strategy['personality']}",
        f"Visual Style: {strategy['visual_style']}",
        f"Campaign Objective: {strategy['campaign_objective']}",
        "",
    ]


def build_user_message(
    answers: Mapping[str, Any] | None,
    insights: InsightSignals,
    strategy: StrategyDecision,
) -> str:
    enhanced = ans.is_enhanced(answers)
    sections = ["Analyze these advertising questionnaire responses and generate optimal JSON prompts."]
    if enhanced:
        sections.append(
            f'CRITICAL: Use the EXACT product name "{insights.product_name}" throughout ALL prompts.'
        )
    sections += [
        "",
        "QUESTIONNAIRE RESPONSES:",
        ans.format_questions_with_context(answers) or "(no responses provided)",
        "",
        "EXTRACTED INSIGHTS:",
        f"- USP: {insights.usp}",
        f"- Product Category: {insights.product_category}",
        f"- Target Audience: {insights.target_audience}",
        f"- Emotional Triggers: {', '.join(insights.emotional_triggers)}",
        f"- Strategy: {strategy.approach.value} ({strategy.ratio})",
        f"- Key Message: {insights.key_message}",
        "",
    ]
    if enhanced:
        sections += _enhanced_sections(answers, insights)
    sections += [
        "Follow the modular structure for Veo 3 and the full specifications for Nano Banana.",
        "Return ONLY valid JSON in this structure:",
        RESULT_SCHEMA_TEXT,
    ]
    return "\n".join(sections)


def build_generation_request(
    answers: Mapping[str, Any] | None,
    insights: InsightSignals,
    strategy: StrategyDecision,
    settings: GenerationSettings,
) -> GenerationRequest:
    enhanced = ans.is_enhanced(answers)
    return GenerationRequest(
        system=ENHANCED_SYSTEM_PROMPT if enhanced else SYSTEM_PROMPT,
        user_message=build_user_message(answers, insights, strategy),
        model=settings.model,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
        enhanced=enhanced,
    )

"""Insight Extractor: coarse marketing signals derived from questionnaire answers.

Pure and total. Missing answers degrade to the documented defaults in
``pipeline.rules``; nothing here raises on incomplete input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from pipeline import answers as ans
from pipeline import rules


@dataclass(frozen=True)
class InsightSignals:
    is_high_involvement: bool
    emotional_triggers: list[str]
    product_category: str
    setting: str
    target_audience: str
    usp: str
    product_name: str
    main_benefit: str
    transformation_area: str
    key_message: str = ""
    # Enhanced questionnaire fields; empty when the record is not enhanced.
    audience_profile: dict[str, str] = field(default_factory=dict)
    brand_colors: dict[str, str] = field(default_factory=dict)

    @property
    def primary_trigger(self) -> str:
        return self.emotional_triggers[0]


def is_high_involvement(involvement_answer: str) -> bool:
    text = (involvement_answer or "").lower()
    return any(keyword in text for keyword in rules.HIGH_INVOLVEMENT_KEYWORDS)


def classify_category(problem: str) -> rules.CategoryProfile:
    return rules.first_match(rules.CATEGORY_RULES, problem, rules.DEFAULT_CATEGORY)


def extract_setting(profile: rules.CategoryProfile, customer_context: str) -> str:
    return rules.first_match(rules.SETTING_OVERRIDE_RULES, customer_context, profile.setting)


def describe_audience(profile: rules.CategoryProfile, customer_story: str) -> str:
    modifiers = rules.all_matches(rules.AUDIENCE_MODIFIER_RULES, customer_story)
    return ", ".join([profile.audience, *modifiers])


def extract_emotional_triggers(emotional_journey: str, problem: str = "") -> list[str]:
    """Union of journey and problem triggers; never empty."""
    triggers = rules.all_matches(rules.JOURNEY_TRIGGER_RULES, emotional_journey)
    for trigger in rules.all_matches(rules.PROBLEM_TRIGGER_RULES, problem):
        if trigger not in triggers:
            triggers.append(trigger)
    return triggers or list(rules.DEFAULT_TRIGGERS)


def extract_usp(problem: str) -> str:
    return rules.first_match(rules.USP_RULES, problem, rules.USP_DEFAULT)


def extract_product_name(answers: Mapping[str, Any] | None, problem: str) -> str:
    """Explicit enhanced product name, else a noun guessed from the problem text."""
    return ans.product_name(answers) or rules.first_match(
        rules.PRODUCT_NOUN_RULES, problem, rules.DEFAULT_PRODUCT_NOUN
    )


def extract_insights(answers: Mapping[str, Any] | None) -> InsightSignals:
    problem = ans.answer_text(answers, ans.Q_PROBLEM)
    customer_story = ans.answer_text(answers, ans.Q_CUSTOMER_STORY)
    involvement = ans.answer_text(answers, ans.Q_INVOLVEMENT)
    context = ans.answer_text(answers, ans.Q_CUSTOMER_CONTEXT)
    journey = ans.answer_text(answers, ans.Q_EMOTIONAL_JOURNEY)

    profile = classify_category(problem)
    enhanced = ans.is_enhanced(answers)

    return InsightSignals(
        is_high_involvement=is_high_involvement(involvement),
        emotional_triggers=extract_emotional_triggers(journey, problem),
        product_category=profile.category,
        setting=extract_setting(profile, context),
        target_audience=describe_audience(profile, customer_story),
        usp=extract_usp(problem),
        product_name=extract_product_name(answers, problem),
        main_benefit=rules.first_match(rules.BENEFIT_RULES, problem, rules.DEFAULT_BENEFIT),
        transformation_area=rules.first_match(
            rules.TRANSFORMATION_AREA_RULES, problem, rules.DEFAULT_TRANSFORMATION_AREA
        ),
        key_message=ans.answer_text(answers, ans.Q_KEY_UNDERSTANDING),
        audience_profile=ans.audience_profile(answers) if enhanced else {},
        brand_colors=ans.brand_colors(answers) if enhanced else {},
    )

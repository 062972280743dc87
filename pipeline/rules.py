"""Keyword rule tables shared by the prompt synthesizer and the fallback generator.

Every classification is an ordered tuple of ``KeywordRule`` entries evaluated
top to bottom against lowercased text, with an explicit default. The order of
each table is its tie-break policy: the first rule whose keywords match wins,
and later rules are not consulted. Trigger detection is the one exception:
it collects every matching rule, in table order, without duplicates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

R = TypeVar("R")


@dataclass(frozen=True)
class KeywordRule(Generic[R]):
    keywords: tuple[str, ...]
    result: R

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


def first_match(rules: Sequence[KeywordRule[R]], text: str, default: R) -> R:
    """Return the result of the first rule matching ``text``, else ``default``."""
    haystack = (text or "").lower()
    for rule in rules:
        if rule.matches(haystack):
            return rule.result
    return default


def all_matches(rules: Sequence[KeywordRule[R]], text: str) -> list[R]:
    """Return results of every matching rule, in table order, de-duplicated."""
    haystack = (text or "").lower()
    found: list[R] = []
    for rule in rules:
        if rule.matches(haystack) and rule.result not in found:
            found.append(rule.result)
    return found


def _rule(keywords: str | tuple[str, ...], result: R) -> KeywordRule[R]:
    if isinstance(keywords, str):
        keywords = (keywords,)
    return KeywordRule(tuple(keywords), result)


# ---------------------------------------------------------------------------
# Involvement (Q3)
# ---------------------------------------------------------------------------
HIGH_INVOLVEMENT_KEYWORDS: tuple[str, ...] = ("high", "research")

# ---------------------------------------------------------------------------
# Product category (Q1), priority order: beauty → health → food → technology → home
# ---------------------------------------------------------------------------
CATEGORY_BEAUTY = "beauty/personal care"
CATEGORY_HEALTH = "health/fitness"
CATEGORY_FOOD = "food/kitchen"
CATEGORY_TECHNOLOGY = "technology"
CATEGORY_HOME = "home/lifestyle"
CATEGORY_GENERAL = "general product"


@dataclass(frozen=True)
class CategoryProfile:
    category: str
    setting: str
    audience: str


CATEGORY_RULES: tuple[KeywordRule[CategoryProfile], ...] = (
    _rule(("skin", "hair", "beauty"), CategoryProfile(
        CATEGORY_BEAUTY,
        "bathroom or vanity area with natural lighting",
        "person focused on personal appearance and self-care",
    )),
    _rule(("health", "fitness"), CategoryProfile(
        CATEGORY_HEALTH,
        "gym or home workout space",
        "health-conscious individual",
    )),
    _rule(("food", "cooking"), CategoryProfile(
        CATEGORY_FOOD,
        "modern kitchen or dining area",
        "cooking enthusiast",
    )),
    _rule(("tech", "software"), CategoryProfile(
        CATEGORY_TECHNOLOGY,
        "modern office or workspace with tech setup",
        "tech-savvy professional",
    )),
    _rule(("home", "clean"), CategoryProfile(
        CATEGORY_HOME,
        "well-organized home environment",
        "homeowner focused on comfort and efficiency",
    )),
)

DEFAULT_CATEGORY = CategoryProfile(
    CATEGORY_GENERAL,
    "professional environment",
    "professional individual",
)

# ---------------------------------------------------------------------------
# Customer context (Q6): overrides the category setting when present
# ---------------------------------------------------------------------------
SETTING_OVERRIDE_RULES: tuple[KeywordRule[str], ...] = (
    _rule("home", "comfortable home environment"),
    _rule(("office", "work"), "professional office space"),
    _rule("outdoor", "outdoor environment with natural beauty"),
)

VIDEO_CONTEXT_RULES: tuple[KeywordRule[str], ...] = (
    _rule("home", "Warm, aspirational home environment with natural morning light streaming through windows"),
    _rule(("office", "work"), "Modern, dynamic workspace showcasing productivity and success"),
    _rule("outdoor", "Vibrant outdoor setting with natural beauty enhancing product appeal"),
)

# ---------------------------------------------------------------------------
# Audience modifiers (Q2): every match appends
# ---------------------------------------------------------------------------
AUDIENCE_MODIFIER_RULES: tuple[KeywordRule[str], ...] = (
    _rule("professional", "professionally dressed"),
    _rule("family", "family-oriented"),
    _rule("young", "youthful and energetic"),
    _rule("busy", "showing time-pressed demeanor"),
)

# ---------------------------------------------------------------------------
# Emotional triggers (Q7 journey + Q1 problem)
# ---------------------------------------------------------------------------
TRIGGER_TRUST = "Trust"
TRIGGER_SECURITY = "Security"
TRIGGER_ACHIEVEMENT = "Achievement"
TRIGGER_BELONGING = "Belonging"
TRIGGER_EFFICIENCY = "Efficiency"
TRIGGER_TRANSFORMATION = "Transformation"
TRIGGER_CONFIDENCE = "Confidence"

JOURNEY_TRIGGER_RULES: tuple[KeywordRule[str], ...] = (
    _rule(("trust", "reliable"), TRIGGER_TRUST),
    _rule(("fear", "worry"), TRIGGER_SECURITY),
    _rule(("success", "achieve"), TRIGGER_ACHIEVEMENT),
    _rule(("belong", "community"), TRIGGER_BELONGING),
    _rule(("save", "efficient"), TRIGGER_EFFICIENCY),
    _rule(("transform",), TRIGGER_TRANSFORMATION),
    _rule(("confident", "confidence"), TRIGGER_CONFIDENCE),
)

PROBLEM_TRIGGER_RULES: tuple[KeywordRule[str], ...] = (
    _rule("reliable", TRIGGER_TRUST),
    _rule("improve", TRIGGER_TRANSFORMATION),
    _rule("efficient", TRIGGER_EFFICIENCY),
)

DEFAULT_TRIGGERS: tuple[str, ...] = ("Innovation", "Quality", "Success")

# ---------------------------------------------------------------------------
# Problem statement descriptors (Q1)
# ---------------------------------------------------------------------------
USP_TIME = "Time-saving efficiency"
USP_COST = "Cost-effective solution"
USP_QUALITY = "Premium quality guarantee"
USP_CONNECTION = "Meaningful connections"
USP_DEFAULT = "Innovative solution"

USP_RULES: tuple[KeywordRule[str], ...] = (
    _rule("time", USP_TIME),
    _rule(("cost", "money"), USP_COST),
    _rule("quality", USP_QUALITY),
    _rule("connect", USP_CONNECTION),
)

PRODUCT_NOUN_RULES: tuple[KeywordRule[str], ...] = (
    _rule("serum", "serum"),
    _rule("cream", "cream"),
    _rule("app", "app"),
    _rule("supplement", "supplement"),
    _rule("tool", "tool"),
)
DEFAULT_PRODUCT_NOUN = "product"

BENEFIT_RULES: tuple[KeywordRule[str], ...] = (
    _rule("save time", "time-saving efficiency"),
    _rule(("improve", "better"), "improvement"),
    _rule(("reduce", "eliminate"), "problem reduction"),
    _rule(("increase", "boost"), "performance enhancement"),
)
DEFAULT_BENEFIT = "quality results"

TRANSFORMATION_AREA_RULES: tuple[KeywordRule[str], ...] = (
    _rule(("skin", "hair"), "appearance"),
    _rule(("health", "fitness"), "wellness"),
    _rule(("work", "business"), "productivity"),
    _rule(("home", "life"), "lifestyle"),
)
DEFAULT_TRANSFORMATION_AREA = "experience"

# ---------------------------------------------------------------------------
# Video spec tables
# ---------------------------------------------------------------------------
# USP-driven actions take precedence over category actions.
USP_ACTION_RULES: tuple[KeywordRule[str], ...] = (
    _rule((USP_TIME,), "Efficiently completing a task with visible relief and satisfaction"),
    _rule((USP_QUALITY,), "Carefully examining the product and appreciating its craftsmanship"),
    _rule((USP_CONNECTION,), "Sharing a meaningful moment enabled by the product"),
)

CATEGORY_ACTIONS: dict[str, str] = {
    CATEGORY_BEAUTY: "applying product and experiencing visible transformation with genuine delight",
    CATEGORY_HEALTH: "using product during activity, showing increased energy and confidence",
    CATEGORY_FOOD: "preparing and enjoying food, showing satisfaction with taste and quality",
    CATEGORY_TECHNOLOGY: "interacting with product interface, showing ease of use and positive results",
}
DEFAULT_ACTION = "demonstrating product benefits with visible satisfaction"

LIGHTING_RULES: tuple[KeywordRule[str], ...] = (
    _rule((TRIGGER_TRUST,), "Even, professional lighting creating reliability and transparency"),
    _rule((TRIGGER_TRANSFORMATION,), "Dramatic before/after lighting showing clear transformation"),
    _rule((TRIGGER_CONFIDENCE,), "Bright, uplifting lighting enhancing subject confidence"),
    _rule((TRIGGER_EFFICIENCY,), "Crisp, clean lighting emphasizing precision and efficiency"),
)
DEFAULT_LIGHTING = "Warm, professional lighting creating a trustworthy atmosphere"

CATEGORY_AUDIO: dict[str, tuple[str, str]] = {
    CATEGORY_BEAUTY: (
        "Elegant, aspirational music with soft instrumental tones",
        "Subtle beauty product sounds, gentle application effects",
    ),
    CATEGORY_HEALTH: (
        "Energetic, motivational music building to achievement",
        "Gym ambiance, equipment sounds, energy-building effects",
    ),
    CATEGORY_FOOD: (
        "Warm, inviting music suggesting comfort and satisfaction",
        "Kitchen sounds, sizzling, chopping, satisfaction expressions",
    ),
    CATEGORY_TECHNOLOGY: (
        "Modern, clean electronic score suggesting innovation",
        "Tech interface sounds, notification chimes, success audio cues",
    ),
}
RATIONAL_MUSIC = "Subtle, professional background score with clean piano and strings"
EMOTIONAL_MUSIC = "Emotionally evocative music building to a satisfying resolution"
DEFAULT_AUDIO_EFFECTS = "Natural environmental sounds matching the setting"


def lighting_for(triggers: Sequence[str]) -> str:
    """Pick lighting by the highest-priority trigger present."""
    present = set(triggers)
    for rule in LIGHTING_RULES:
        if any(keyword in present for keyword in rule.keywords):
            return rule.result
    return DEFAULT_LIGHTING


def action_for(usp: str, category: str) -> str:
    for rule in USP_ACTION_RULES:
        if usp in rule.keywords:
            return rule.result
    return CATEGORY_ACTIONS.get(category, DEFAULT_ACTION)

"""Built-in sample questionnaires (served by /api/sample-answers and the CLI)."""

from __future__ import annotations

import copy
from typing import Any

SKINCARE_ANSWERS: dict[str, Any] = {
    "1": "Our skincare serum solves the problem of fine lines and dull skin",
    "2": "Professional women in their 30s who want visible results",
    "3": "High involvement - they research products carefully",
    "4": "$50-100 budget for premium skincare",
    "5": "Competing with established brands like Olay and L'Oreal",
    "6": "Used at home during evening skincare routine",
    "7": "They start worried about aging, then feel confident and radiant",
    "8": "Clean, minimal branding with gold accents",
    "9": "Previous ads focused on ingredients, got moderate engagement",
    "10": "Quality and proven results matter most to our customers",
}

SNACK_ANSWERS: dict[str, Any] = {
    "1": "A tasty protein snack for busy people who skip meals",
    "2": "Young busy commuters grabbing something on the go",
    "3": "Low involvement - impulse buy at the checkout",
    "6": "On the way to work",
    "7": "They want to feel part of a community that takes care of itself",
}

ENHANCED_ANSWERS: dict[str, Any] = {
    "1": "Colgate Total Advanced fights plaque and helps improve gum health",
    "2": "trusted_advisor",
    "3": "high_involvement: Research extensively, compare options, and make calculated decisions",
    "4": "quality_improvement",
    "5": "premium_leader, specialist_expert",
    "7": "trustworthy_professional",
    "8": "sales_conversion",
    "enhanced_data": {
        "product_assets": {
            "name": "Colgate Total Advanced",
            "category": "Oral care",
            "description": "Whole-mouth toothpaste with 12-hour germ protection",
            "image": None,
            "brand_colors": {"primary": "#D2010D", "secondary": "#FFFFFF", "accent": "#1B3A8C"},
            "typography": "Colgate Ready",
        },
        "audience_intelligence": {
            "demographics": {"age_ranges": ["25-34", "35-44"], "income_levels": ["middle", "upper-middle"]},
            "psychographics": {"core_values": ["health", "family", "reliability"]},
            "behavioral": {"research_behavior": "review_reader"},
        },
        "brand_strategy": {
            "personality": "trusted_advisor",
            "visual_style": "trustworthy_professional",
            "campaign_objective": "sales_conversion",
        },
    },
}

SAMPLES: dict[str, dict[str, Any]] = {
    "skincare": SKINCARE_ANSWERS,
    "snack": SNACK_ANSWERS,
    "enhanced": ENHANCED_ANSWERS,
}

DEFAULT_SAMPLE = "skincare"


def get_sample(name: str = DEFAULT_SAMPLE) -> dict[str, Any]:
    """Return a deep copy of the named sample, falling back to the default."""
    return copy.deepcopy(SAMPLES.get(name, SAMPLES[DEFAULT_SAMPLE]))

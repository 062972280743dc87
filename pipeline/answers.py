"""Answer Record accessors.

The questionnaire UI posts a loosely-typed mapping: numeric question ids
(as JSON string keys or ints) mapped to free text, lists of selected option
tokens, or nested records, plus an optional ``enhanced_data`` block with
product assets and audience intelligence. Everything here tolerates absence
and never mutates the record.
"""

from __future__ import annotations

from typing import Any, Mapping

QUESTION_LABELS: dict[int, str] = {
    1: "Problem & Solution",
    2: "Customer Stories",
    3: "Purchase Involvement",
    4: "Budget & Goals",
    5: "Competition",
    6: "Customer Context",
    7: "Emotional Journey",
    8: "Brand Assets",
    9: "Past Performance",
    10: "Key Understanding",
}

# Question ids the derivation pipeline reads.
Q_PROBLEM = 1
Q_CUSTOMER_STORY = 2
Q_INVOLVEMENT = 3
Q_CUSTOMER_CONTEXT = 6
Q_EMOTIONAL_JOURNEY = 7
Q_KEY_UNDERSTANDING = 10

ENHANCED_KEY = "enhanced_data"

DEFAULT_PRIMARY_COLOR = "#000000"
DEFAULT_SECONDARY_COLOR = "#FFFFFF"
DEFAULT_ACCENT_COLOR = "#D4AF37"
NOT_SPECIFIED = "Not specified"


def text_of(value: Any) -> str:
    """Flatten an answer value into plain text.

    Lists are joined with ", ", nested records contribute their values in
    key order, and None becomes "".
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ", ".join(t for t in (text_of(v) for v in value) if t)
    if isinstance(value, Mapping):
        return " ".join(t for t in (text_of(v) for v in value.values()) if t)
    return str(value)


def raw_answer(answers: Mapping[str, Any] | None, question_id: int) -> Any:
    if not answers:
        return None
    if str(question_id) in answers:
        return answers[str(question_id)]
    return answers.get(question_id)  # type: ignore[call-overload]


def answer_text(answers: Mapping[str, Any] | None, question_id: int) -> str:
    """Return the answer for ``question_id`` as text, "" when absent."""
    return text_of(raw_answer(answers, question_id)).strip()


def lowered(answers: Mapping[str, Any] | None, question_id: int) -> str:
    return answer_text(answers, question_id).lower()


def _question_sort_key(key: Any) -> tuple[int, str]:
    try:
        return int(key), ""
    except (TypeError, ValueError):
        return 10_000, str(key)


def format_questions_with_context(answers: Mapping[str, Any] | None) -> str:
    """Render numbered answers as ``Label: answer`` lines for the LLM."""
    lines = []
    for key in sorted((answers or {}).keys(), key=_question_sort_key):
        if key == ENHANCED_KEY:
            continue
        qid, _ = _question_sort_key(key)
        label = QUESTION_LABELS.get(qid, f"Q{key}")
        lines.append(f"{label}: {text_of(answers[key])}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Enhanced questionnaire data
# ---------------------------------------------------------------------------

def _section(data: Any, *path: str) -> dict:
    node = data
    for key in path:
        if not isinstance(node, Mapping):
            return {}
        node = node.get(key)
    return dict(node) if isinstance(node, Mapping) else {}


def _joined(values: Any) -> str:
    if isinstance(values, (list, tuple)):
        return ", ".join(t for t in (text_of(v).strip() for v in values) if t)
    return text_of(values).strip()


def enhanced_section(answers: Mapping[str, Any] | None, name: str) -> dict:
    return _section(answers or {}, ENHANCED_KEY, name)


def product_assets(answers: Mapping[str, Any] | None) -> dict:
    return enhanced_section(answers, "product_assets")


def product_name(answers: Mapping[str, Any] | None) -> str:
    """Explicit product name from enhanced data, "" when not given."""
    return text_of(product_assets(answers).get("name")).strip()


def is_enhanced(answers: Mapping[str, Any] | None) -> bool:
    return bool(product_name(answers))


def brand_colors(answers: Mapping[str, Any] | None) -> dict[str, str]:
    colors = _section(product_assets(answers), "brand_colors")
    return {
        "primary": text_of(colors.get("primary")).strip() or DEFAULT_PRIMARY_COLOR,
        "secondary": text_of(colors.get("secondary")).strip() or DEFAULT_SECONDARY_COLOR,
        "accent": text_of(colors.get("accent")).strip() or DEFAULT_ACCENT_COLOR,
    }


def audience_profile(answers: Mapping[str, Any] | None) -> dict[str, str]:
    """Age ranges, income levels, core values and research behaviour as text."""
    intel = enhanced_section(answers, "audience_intelligence")
    return {
        "age_ranges": _joined(_section(intel, "demographics").get("age_ranges")),
        "income_levels": _joined(_section(intel, "demographics").get("income_levels")),
        "core_values": _joined(_section(intel, "psychographics").get("core_values")),
        "research_behavior": text_of(_section(intel, "behavioral").get("research_behavior")).strip(),
    }


def brand_strategy(answers: Mapping[str, Any] | None) -> dict[str, str]:
    strategy = enhanced_section(answers, "brand_strategy")
    return {
        key: text_of(strategy.get(key)).strip() or NOT_SPECIFIED
        for key in ("personality", "visual_style", "campaign_objective")
    }

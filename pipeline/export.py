"""Plain-text exports of a Generation Result (creative brief, ad copy).

Works on the wire-format dict, so it accepts remote documents whose nested
sections carry extra or missing fields.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from pipeline.insights import extract_insights

RULE = "=" * 37

VIDEO_FIELDS = ("context", "subject", "action", "composition", "camera", "lighting", "style", "audio")
IMAGE_SLOTS = (("hero", "Hero Shot"), ("lifestyle", "Lifestyle"), ("social", "Social Proof"))


def _section(data: Mapping[str, Any] | None, key: str) -> dict:
    value = (data or {}).get(key)
    return value if isinstance(value, dict) else {}


def _numbered(items: Any) -> str:
    if not isinstance(items, list) or not items:
        return "(none)"
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))


def _header(title: str, today: date | None) -> list[str]:
    return [
        f"AD PROMPT STUDIO - {title}",
        f"Generated: {(today or date.today()).isoformat()}",
        RULE,
        "",
    ]


def format_video_prompt(video: Mapping[str, Any] | None) -> str:
    """Render the video spec as labeled lines, ready to paste into a video model."""
    video = video or {}
    lines = [f"{name.capitalize()}: {video[name]}" for name in VIDEO_FIELDS if video.get(name)]
    return "\n".join(lines)


def format_image_prompt(spec: Any) -> str:
    if isinstance(spec, dict):
        prompt = spec.get("prompt", "")
        style = spec.get("style", "")
        return f"{prompt}\nStyle: {style}" if style else str(prompt)
    return str(spec or "")


def export_brief_text(
    data: Mapping[str, Any],
    answers: Mapping[str, Any] | None = None,
    today: date | None = None,
) -> str:
    strategy = _section(data, "strategy")
    images = _section(data, "nanoBanana")
    insights = extract_insights(answers)

    lines = _header("CREATIVE BRIEF", today)
    lines += [
        "STRATEGY BRIEF",
        "--------------",
        "Unique Selling Proposition:",
        insights.usp,
        "",
        "Target Audience:",
        insights.target_audience,
        "",
        f"Approach: {strategy.get('approach', '')}",
        f"Ratio: {strategy.get('ratio', '')}",
        f"Psychology: {strategy.get('psychology', '')}",
        "",
        "Emotional Triggers:",
        ", ".join(insights.emotional_triggers),
        "",
        RULE,
        "",
        "VEO 3 VIDEO PROMPT",
        "------------------",
        format_video_prompt(_section(data, "veo3")),
        "",
        RULE,
        "",
        "IMAGE PROMPTS (NANO BANANA)",
        "---------------------------",
    ]
    for key, label in IMAGE_SLOTS:
        lines += [f"{label}:", format_image_prompt(images.get(key)), ""]
    lines.append(RULE)
    return "\n".join(lines).strip()


def export_copy_text(data: Mapping[str, Any], today: date | None = None) -> str:
    copy = _section(data, "copy")
    body = copy.get("bodyCopy") if isinstance(copy.get("bodyCopy"), dict) else {}

    lines = _header("GENERATED COPY", today)
    lines += [
        f"HEADLINES ({len(copy.get('headlines') or [])} Variations)",
        "------------------------",
        _numbered(copy.get("headlines")),
        "",
        RULE,
        "",
        "BODY COPY",
        "---------",
        "Opening:",
        str(body.get("opening", "")),
        "",
        "Middle:",
        str(body.get("middle", "")),
        "",
        "Closing:",
        str(body.get("closing", "")),
        "",
        RULE,
        "",
        "CALL-TO-ACTION OPTIONS",
        "----------------------",
        _numbered(copy.get("ctas")),
        "",
        RULE,
    ]
    return "\n".join(lines).strip()


EXPORTERS = {
    "brief": lambda data, answers, today=None: export_brief_text(data, answers, today),
    "copy": lambda data, answers, today=None: export_copy_text(data, today),
}


def export_text(kind: str, data: Mapping[str, Any], answers: Mapping[str, Any] | None = None) -> str:
    exporter = EXPORTERS.get(kind)
    if exporter is None:
        raise ValueError(f"Unknown export kind: '{kind}'. Available: {list(EXPORTERS.keys())}")
    return exporter(data, answers)

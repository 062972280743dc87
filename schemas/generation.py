"""Generation Result schema.

The document rendered tab by tab by the questionnaire UI. The remote model
and the fallback generator both produce exactly this shape, so the
presentation layer never branches on where a result came from. Wire names
are camelCase (``nanoBanana``, ``bodyCopy``); always dump with
``by_alias=True``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Origin(str, Enum):
    CLAUDE = "claude"
    FALLBACK = "fallback"


# Top-level keys every result must carry, remote or fallback.
RESULT_KEYS: tuple[str, ...] = ("strategy", "veo3", "nanoBanana", "copy")


class StrategyBlock(BaseModel):
    approach: str = Field(..., description="'rational' or 'emotional'")
    ratio: str = Field(..., description="e.g. '70% Rational, 30% Emotional'")
    psychology: str = Field(..., description="Psychological principles to leverage")


class VideoSpec(BaseModel):
    """Modular short-video prompt (Veo 3 structure)."""
    context: str = Field(..., description="Specific setting")
    subject: str = Field(..., description="Detailed character description")
    action: str = Field(..., description="Single, focused movement")
    composition: str = Field(..., description="Exact framing")
    camera: str = Field(..., description="Specific camera movement")
    lighting: str = Field(..., description="Emotional mood through light")
    style: str = Field(..., description="Visual aesthetic")
    audio: str = Field(..., description="Music, effects and any dialogue")


class ImageSpec(BaseModel):
    prompt: str
    style: str


class ImageSpecs(BaseModel):
    """Still-image prompts (Nano Banana structure)."""
    hero: ImageSpec
    lifestyle: ImageSpec
    social: ImageSpec


class BodyCopy(BaseModel):
    opening: str
    middle: str
    closing: str


class AdCopy(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    headlines: list[str] = Field(..., description="Five headline variations")
    body_copy: BodyCopy = Field(..., alias="bodyCopy")
    ctas: list[str] = Field(..., description="Five call-to-action options")


class GenerationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    strategy: StrategyBlock
    veo3: VideoSpec
    nano_banana: ImageSpecs = Field(..., alias="nanoBanana")
    copy_: AdCopy = Field(..., alias="copy")

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

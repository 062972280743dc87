"""Ad Prompt Studio: Web Server.

FastAPI backend for the marketing questionnaire. Exposes the prompt
generation route consumed by the questionnaire UI, plus health, usage,
sample-answer and text-export routes.

Usage:
    python server.py
    # Then POST {"answers": {...}} to http://localhost:8000/api/generate-prompts
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Literal

import httpx
from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field, field_validator

import config
from pipeline.export import export_text
from pipeline.generator import generate_prompts
from pipeline.llm import get_usage_summary
from pipeline.samples import DEFAULT_SAMPLE, SAMPLES, get_sample

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger(__name__)


def _check_api_keys() -> list[str]:
    """Check whether the remote API key is configured. Returns list of warnings."""
    warnings = []
    if not config.ANTHROPIC_API_KEY:
        warnings.append(
            "ANTHROPIC_API_KEY is not set; every generation will use the rule-based fallback"
        )
    return warnings


# Shared connection pool for outbound calls; None outside the app lifespan.
http_state: dict[str, httpx.AsyncClient | None] = {"client": None}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    key_warnings = _check_api_keys()
    if key_warnings:
        logger.warning("=" * 60)
        logger.warning("API KEY WARNINGS:")
        for w in key_warnings:
            logger.warning("  • %s", w)
        logger.warning("Copy .env.example to .env and add your key:")
        logger.warning("  cp .env.example .env")
        logger.warning("=" * 60)
    else:
        logger.info("API key configured: model=%s", config.GENERATION_MODEL)

    http_state["client"] = httpx.AsyncClient(timeout=config.REMOTE_TIMEOUT_SECONDS)

    yield

    # Shutdown
    client = http_state["client"]
    http_state["client"] = None
    if client is not None:
        await client.aclose()


app = FastAPI(title="Ad Prompt Studio", version="1.0.0", lifespan=lifespan)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

class GenerateRequest(BaseModel):
    answers: dict[str, Any] = Field(default_factory=dict)

    @field_validator("answers", mode="before")
    @classmethod
    def _coerce_answers(cls, value: Any) -> Any:
        # null / list / scalar bodies still get a fallback document, never a 422
        return value if isinstance(value, dict) else {}


@app.post("/api/generate-prompts")
async def api_generate_prompts(req: GenerateRequest):
    """Generate video/image prompts and ad copy from questionnaire answers.

    Always answers 200: remote failures come back as ``success: false`` with
    ``fallback: true`` and a complete rule-based document in ``data``.
    """
    settings = config.get_generation_settings()
    outcome = await generate_prompts(req.answers, settings, client=http_state["client"])
    return outcome.to_response()


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

class ExportRequest(BaseModel):
    kind: Literal["brief", "copy"] = "copy"
    data: dict[str, Any]
    answers: dict[str, Any] = Field(default_factory=dict)


@app.post("/api/export")
async def api_export(req: ExportRequest):
    """Render a Generation Result as a downloadable plain-text document."""
    text = export_text(req.kind, req.data, req.answers)
    filename = "creative-brief.txt" if req.kind == "brief" else "ad-copy.txt"
    return PlainTextResponse(
        text,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------

@app.get("/api/health")
async def api_health():
    """Check system health: API key, model."""
    return {
        "ok": True,
        "remote_configured": bool(config.ANTHROPIC_API_KEY),
        "model": config.GENERATION_MODEL,
        "warnings": _check_api_keys(),
    }


@app.get("/api/usage")
async def api_usage():
    """Aggregated token usage and estimated cost since startup."""
    return get_usage_summary()


@app.get("/api/sample-answers")
async def api_sample_answers(name: str = DEFAULT_SAMPLE):
    """Return a sample questionnaire. Use ?name=skincare, snack or enhanced."""
    if name not in SAMPLES:
        return JSONResponse(
            {"error": f"Unknown sample '{name}'. Available: {sorted(SAMPLES)}"},
            status_code=404,
        )
    return {"name": name, "answers": get_sample(name)}


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn
    print("\n  Ad Prompt Studio API")
    print("  http://localhost:8000\n")
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")

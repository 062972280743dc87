"""Remote Generation Client: Anthropic Messages API over plain HTTP.

POSTs the synthesized system instruction and user message, pulls the single
text block out of the response, strips Markdown code fences and parses the
remainder as the Generation Result JSON document.

Every successful call is entered in ``usage_ledger`` with its token counts
and an estimated cost; malformed usage data is logged and counted as zero,
so bookkeeping never turns a valid document into a failure.

Error handling:
  - A missing API key raises ConfigurationError before any network call.
  - Connection / timeout errors are retried with exponential backoff up to
    ``settings.max_attempts``, then raised as TransportError.
  - Non-2xx responses are NOT retried; they raise TransportError at once.
  - A body without a text block, text that isn't JSON, or JSON missing the
    expected top-level keys raises ContractError.
"""

from __future__ import annotations

import json
import logging
import re
import threading
import time as _time
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from config import GenerationSettings
from pipeline.synthesizer import GenerationRequest
from schemas.generation import RESULT_KEYS

logger = logging.getLogger(__name__)

PROVIDER = "anthropic"

# ---------------------------------------------------------------------------
# Token usage
# ---------------------------------------------------------------------------

# USD per 1M tokens as (input, output), matched on the longest model prefix.
MODEL_PRICING: dict[str, tuple[float, float]] = {
    "claude-opus-4":     (15.00, 75.00),
    "claude-sonnet-4":   (3.00,  15.00),
    "claude-3-7-sonnet": (3.00,  15.00),
    "claude-3-5-sonnet": (3.00,  15.00),
    "claude-3-5-haiku":  (0.80,   4.00),
    "claude-3-opus":     (15.00, 75.00),
    "claude-3-haiku":    (0.25,   1.25),
}

# Unknown models are priced as Sonnet.
_FALLBACK_PRICING = (3.00, 15.00)


def _get_pricing(model: str) -> tuple[float, float]:
    matches = [prefix for prefix in MODEL_PRICING if model.startswith(prefix)]
    if matches:
        return MODEL_PRICING[max(matches, key=len)]
    logger.warning("No pricing for model '%s'; estimating at Sonnet rates", model)
    return _FALLBACK_PRICING


def _token_count(value: Any) -> int:
    """Coerce a reported token count; anything unreadable counts as zero."""
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        logger.warning("Ignoring unreadable token count %r", value)
        return 0


class UsageLedger:
    """Thread-safe record of remote generation calls and their estimated cost.

    One entry per successful Messages API call; failed calls never reach
    the ledger because the provider reports no usage for them.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: list[dict[str, Any]] = []

    def record(self, model: str, usage: Any) -> dict[str, Any]:
        usage = usage if isinstance(usage, dict) else {}
        input_tokens = _token_count(usage.get("input_tokens"))
        output_tokens = _token_count(usage.get("output_tokens"))
        in_price, out_price = _get_pricing(model)
        entry = {
            "model": model,
            "input_tokens": input_tokens,
            "output_tokens": output_tokens,
            "cost": (input_tokens * in_price + output_tokens * out_price) / 1_000_000,
            "timestamp": _time.time(),
        }
        with self._lock:
            self._entries.append(entry)
        logger.info(
            "Generation usage: model=%s in=%d out=%d cost=$%.4f",
            model, input_tokens, output_tokens, entry["cost"],
        )
        return entry

    def clear(self):
        with self._lock:
            self._entries.clear()

    def entries(self) -> list[dict[str, Any]]:
        with self._lock:
            return list(self._entries)

    def summary(self) -> dict[str, Any]:
        entries = self.entries()
        by_model: dict[str, dict[str, Any]] = {}
        for e in entries:
            bucket = by_model.setdefault(e["model"], {"calls": 0, "tokens": 0, "cost": 0.0})
            bucket["calls"] += 1
            bucket["tokens"] += e["input_tokens"] + e["output_tokens"]
            bucket["cost"] += e["cost"]
        for bucket in by_model.values():
            bucket["cost"] = round(bucket["cost"], 4)

        total_input = sum(e["input_tokens"] for e in entries)
        total_output = sum(e["output_tokens"] for e in entries)
        return {
            "calls": len(entries),
            "total_input_tokens": total_input,
            "total_output_tokens": total_output,
            "total_tokens": total_input + total_output,
            "total_cost": round(sum(e["cost"] for e in entries), 4),
            "by_model": by_model,
        }


usage_ledger = UsageLedger()


def reset_usage():
    usage_ledger.clear()


def get_usage_log() -> list[dict[str, Any]]:
    return usage_ledger.entries()


def get_usage_summary() -> dict[str, Any]:
    """Totals since startup (or the last reset), with a per-model breakdown."""
    return usage_ledger.summary()


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class LLMError(Exception):
    """Clean error from a remote generation call with a human-readable message."""

    def __init__(self, message: str, provider: str = PROVIDER, model: str = "", cause: Exception | None = None):
        self.provider = provider
        self.model = model
        self.cause = cause
        super().__init__(message)


class ConfigurationError(LLMError):
    """The API credential is missing."""


class TransportError(LLMError):
    """Network failure or a non-2xx HTTP status."""

    def __init__(self, message: str, status_code: int | None = None, **kwargs):
        self.status_code = status_code
        super().__init__(message, **kwargs)


class ContractError(LLMError):
    """The response body is not the document we asked for."""


def _is_retryable(exc: BaseException) -> bool:
    """Only transport-level failures are retried; HTTP status errors never are."""
    return isinstance(exc, (httpx.TransportError, ConnectionError, TimeoutError))


def _extract_error_message(exc: Exception, model: str) -> str:
    """Pull out a clean, human-readable message from an httpx exception."""
    if isinstance(exc, httpx.TimeoutException):
        return f"[{PROVIDER}/{model}] Request timed out: {exc}"
    if isinstance(exc, httpx.ConnectError):
        return f"[{PROVIDER}] Could not connect to the API: {exc}"
    msg = str(exc) or exc.__class__.__name__
    if len(msg) > 300:
        msg = msg[:300] + "..."
    return f"[{PROVIDER}/{model}] {msg}"


def _status_error_message(response: httpx.Response, model: str) -> str:
    status = response.status_code
    if status == 401:
        return f"[{PROVIDER}] Authentication failed (401), check your ANTHROPIC_API_KEY."
    if status == 404:
        return f"[{PROVIDER}] Model '{model}' not found (404)."
    if status == 429:
        return f"[{PROVIDER}/{model}] Rate limited (429)."
    return f"Claude API failed: {status}"


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------

_FENCE_JSON = re.compile(r"```json\s*\n?")
_FENCE_PLAIN = re.compile(r"```\s*\n?")


def strip_markdown_fences(text: str) -> str:
    """Remove ```json / ``` fence markers wherever they appear."""
    cleaned = _FENCE_JSON.sub("", text or "")
    cleaned = _FENCE_PLAIN.sub("", cleaned)
    return cleaned.strip()


def parse_json_document(text: str) -> dict[str, Any]:
    """Parse a JSON object with fallback repair for common LLM quirks.

    Handles: Markdown fences, trailing commas, preamble/postamble text
    around the object. Raises ContractError when nothing parses.
    """
    cleaned = strip_markdown_fences(text)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        parsed = None

    if parsed is None:
        # Remove trailing commas before } or ]
        fixed = re.sub(r",\s*([}\]])", r"\1", cleaned)
        try:
            parsed = json.loads(fixed)
        except json.JSONDecodeError:
            parsed = None

    if parsed is None:
        # Find the JSON object in the string (strip preamble/postamble)
        match = re.search(r"\{.*\}", cleaned, re.DOTALL)
        if match:
            candidate = re.sub(r",\s*([}\]])", r"\1", match.group(0))
            try:
                parsed = json.loads(candidate)
            except json.JSONDecodeError:
                parsed = None

    if not isinstance(parsed, dict):
        snippet = cleaned[:200] if cleaned else "(empty response)"
        logger.debug("Unparseable response snippet: %s", snippet)
        raise ContractError("Failed to parse Claude response as JSON")
    return parsed


def extract_response_text(body: Any) -> str:
    """Return ``content[0].text`` from a Messages API response body."""
    content = body.get("content") if isinstance(body, dict) else None
    if isinstance(content, list) and content and isinstance(content[0], dict):
        text = content[0].get("text")
        if isinstance(text, str) and text:
            return text
    raise ContractError("Unexpected Claude response format")


def validate_result_shape(document: dict[str, Any]) -> dict[str, Any]:
    missing = [key for key in RESULT_KEYS if not isinstance(document.get(key), dict)]
    if missing:
        raise ContractError(f"Claude response is missing expected sections: {', '.join(missing)}")
    return document


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_headers(settings: GenerationSettings) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "x-api-key": settings.api_key,
        "anthropic-version": settings.api_version,
    }


async def _post_with_retry(
    http: httpx.AsyncClient,
    request: GenerationRequest,
    settings: GenerationSettings,
) -> httpx.Response:
    async for attempt in AsyncRetrying(
        retry=retry_if_exception(_is_retryable),
        stop=stop_after_attempt(max(1, settings.max_attempts)),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        reraise=True,
    ):
        with attempt:
            if attempt.retry_state.attempt_number > 1:
                logger.warning(
                    "Retrying Claude call (attempt %d/%d)",
                    attempt.retry_state.attempt_number, settings.max_attempts,
                )
            response = await http.post(
                settings.api_url,
                headers=build_headers(settings),
                json=request.to_payload(),
            )
    return response


async def call_messages_api(
    request: GenerationRequest,
    settings: GenerationSettings,
    client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """Send ``request`` and return the parsed Generation Result document.

    ``client`` lets callers share a connection pool or inject a mock
    transport; when omitted a short-lived client is created.
    Raises an LLMError subclass on every failure mode.
    """
    model = request.model
    if not settings.has_api_key:
        raise ConfigurationError("Claude API key not configured", model=model)

    logger.info(
        "Claude call: model=%s, temp=%.1f, max_tokens=%d, prompt=%d chars",
        model, request.temperature, request.max_tokens, len(request.user_message),
    )
    start = _time.time()

    try:
        if client is not None:
            response = await _post_with_retry(client, request, settings)
        else:
            async with httpx.AsyncClient(timeout=settings.timeout_seconds) as http:
                response = await _post_with_retry(http, request, settings)
    except (httpx.HTTPError, ConnectionError, TimeoutError) as exc:
        clean_msg = _extract_error_message(exc, model)
        logger.error("Claude call failed: %s", clean_msg)
        raise TransportError(clean_msg, model=model, cause=exc) from exc

    elapsed = round(_time.time() - start, 1)
    if not response.is_success:
        logger.error(
            "Claude API error: status=%d after %.1fs body=%s",
            response.status_code, elapsed, response.text[:300],
        )
        raise TransportError(
            _status_error_message(response, model),
            status_code=response.status_code,
            model=model,
        )

    try:
        body = response.json()
    except ValueError as exc:
        raise ContractError("Claude response body is not JSON", model=model, cause=exc) from exc

    text = extract_response_text(body)
    document = validate_result_shape(parse_json_document(text))

    usage_ledger.record(model, body.get("usage"))
    logger.info("Claude call complete: %d chars in %.1fs", len(text), elapsed)
    return document

from __future__ import annotations

import asyncio
import json
import unittest

import httpx

import config
from pipeline import llm
from pipeline.fallback import generate_fallback
from pipeline.generator import AttemptState, GenerationOutcome, generate_prompts
from pipeline.samples import get_sample
from prompts.marketing_system import ENHANCED_SYSTEM_PROMPT, SYSTEM_PROMPT
from schemas.generation import Origin


def _messages_body(text: str) -> dict:
    return {
        "content": [{"type": "text", "text": text}],
        "usage": {"input_tokens": 10, "output_tokens": 20},
    }


def _generate(answers, settings, handler=None, **kwargs) -> GenerationOutcome:
    async def _run():
        if handler is None:
            return await generate_prompts(answers, settings, **kwargs)
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await generate_prompts(answers, settings, client=client, **kwargs)
    return asyncio.run(_run())


class GeneratePromptsTests(unittest.TestCase):
    def setUp(self):
        llm.reset_usage()
        self.addCleanup(llm.reset_usage)
        self.settings = config.get_generation_settings(api_key="test-key", max_attempts=1)
        self.remote_doc = generate_fallback(get_sample("snack"))
        self.remote_doc["strategy"]["psychology"] = "Remote psychology"

    def test_remote_success_returns_remote_document(self):
        answers = get_sample("skincare")
        payloads = []

        def handler(request: httpx.Request) -> httpx.Response:
            payloads.append(json.loads(request.content))
            return httpx.Response(200, json=_messages_body(json.dumps(self.remote_doc)))

        outcome = _generate(answers, self.settings, handler)
        body = outcome.to_response()

        self.assertEqual(body, {"success": True, "data": self.remote_doc, "source": "claude"})
        self.assertEqual(outcome.origin, Origin.CLAUDE)
        self.assertEqual(
            outcome.history,
            [AttemptState.IDLE, AttemptState.REQUESTING, AttemptState.SUCCEEDED, AttemptState.RENDERED],
        )
        self.assertEqual(payloads[0]["system"], SYSTEM_PROMPT)

    def test_server_error_falls_back_with_identical_shape(self):
        answers = get_sample("skincare")

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="internal error")

        outcome = _generate(answers, self.settings, handler)
        body = outcome.to_response()

        self.assertFalse(body["success"])
        self.assertTrue(body["fallback"])
        self.assertEqual(body["source"], "fallback")
        self.assertEqual(body["error"], "Claude API failed: 500")
        self.assertEqual(body["data"], generate_fallback(answers))
        self.assertEqual(set(body["data"]), set(self.remote_doc))
        self.assertEqual(outcome.state, AttemptState.RENDERED)
        self.assertIn(AttemptState.FALLEN_BACK, outcome.history)

    def test_unparseable_reply_falls_back(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_messages_body("not json at all"))

        body = _generate(get_sample("snack"), self.settings, handler).to_response()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"], "Failed to parse Claude response as JSON")

    def test_incomplete_remote_document_falls_back(self):
        partial = {k: v for k, v in self.remote_doc.items() if k != "copy"}

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_messages_body(json.dumps(partial)))

        body = _generate(get_sample("snack"), self.settings, handler).to_response()
        self.assertFalse(body["success"])
        self.assertIn("copy", body["data"])

    def test_missing_key_goes_straight_to_fallback(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=_messages_body(json.dumps(self.remote_doc)))

        settings = self.settings.model_copy(update={"api_key": ""})
        body = _generate(get_sample("snack"), settings, handler).to_response()

        self.assertEqual(calls, [])
        self.assertFalse(body["success"])
        self.assertEqual(body["error"], "Claude API key not configured")

    def test_remote_disabled_skips_request(self):
        outcome = _generate(get_sample("snack"), self.settings, use_remote=False)
        self.assertFalse(outcome.succeeded)
        self.assertEqual(outcome.source, "fallback")
        self.assertEqual(outcome.data, generate_fallback(get_sample("snack")))

    def test_enhanced_success_uses_enhanced_prompt_and_source(self):
        answers = get_sample("enhanced")
        payloads = []

        def handler(request: httpx.Request) -> httpx.Response:
            payloads.append(json.loads(request.content))
            return httpx.Response(200, json=_messages_body(json.dumps(self.remote_doc)))

        body = _generate(answers, self.settings, handler).to_response()

        self.assertEqual(body["source"], "claude_enhanced")
        self.assertEqual(body["generation_context"]["product_name"], "Colgate Total Advanced")
        self.assertEqual(body["generation_context"]["brand_colors_used"]["primary"], "#D2010D")
        self.assertFalse(body["generation_context"]["has_product_image"])
        self.assertEqual(payloads[0]["system"], ENHANCED_SYSTEM_PROMPT)
        message = payloads[0]["messages"][0]["content"]
        self.assertIn('"Colgate Total Advanced"', message)
        self.assertIn("Brand Colors: Primary #D2010D, Secondary #FFFFFF, Accent #1B3A8C", message)
        self.assertNotIn("enhanced_data", message)

    def test_enhanced_fallback_source(self):
        settings = self.settings.model_copy(update={"api_key": ""})
        body = _generate(get_sample("enhanced"), settings).to_response()
        self.assertEqual(body["source"], "enhanced_fallback_with_product_name")
        self.assertIn("Colgate Total Advanced", body["data"]["nanoBanana"]["hero"]["prompt"])

    def test_unreadable_usage_keeps_remote_success(self):
        def handler(request: httpx.Request) -> httpx.Response:
            body = _messages_body(json.dumps(self.remote_doc))
            body["usage"] = {"input_tokens": "n/a"}
            return httpx.Response(200, json=body)

        body = _generate(get_sample("snack"), self.settings, handler).to_response()
        self.assertEqual(body, {"success": True, "data": self.remote_doc, "source": "claude"})

    def test_illegal_transition_is_rejected(self):
        outcome = GenerationOutcome(data={}, origin=Origin.FALLBACK)
        with self.assertRaises(ValueError):
            outcome.advance(AttemptState.RENDERED)


if __name__ == "__main__":
    unittest.main()

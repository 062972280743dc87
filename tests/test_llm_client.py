from __future__ import annotations

import asyncio
import json
import unittest
from unittest.mock import patch

import httpx
from tenacity import wait_none

import config
from pipeline import llm
from pipeline.fallback import generate_fallback
from pipeline.insights import extract_insights
from pipeline.samples import get_sample
from pipeline.strategy import select_strategy
from pipeline.synthesizer import build_generation_request


def _messages_body(text: str, input_tokens: int = 1200, output_tokens: int = 800) -> dict:
    return {
        "id": "msg_test",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": text}],
        "usage": {"input_tokens": input_tokens, "output_tokens": output_tokens},
    }


def _request_for(answers: dict, settings: config.GenerationSettings):
    insights = extract_insights(answers)
    return build_generation_request(answers, insights, select_strategy(insights.is_high_involvement), settings)


def _call(handler, request, settings):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await llm.call_messages_api(request, settings, client=client)
    return asyncio.run(_run())


class ResponseParsingTests(unittest.TestCase):
    def test_fenced_and_unfenced_documents_parse_identically(self):
        doc = generate_fallback(get_sample("snack"))
        raw = json.dumps(doc)
        self.assertEqual(llm.parse_json_document(f"```json\n{raw}\n```"), llm.parse_json_document(raw))
        self.assertEqual(llm.parse_json_document(f"```\n{raw}\n```"), doc)

    def test_trailing_commas_and_preamble_are_repaired(self):
        self.assertEqual(llm.parse_json_document('{"a": [1, 2,],}'), {"a": [1, 2]})
        self.assertEqual(llm.parse_json_document('Here you go:\n{"a": 1}\nEnjoy!'), {"a": 1})

    def test_unparseable_text_raises_contract_error(self):
        with self.assertRaises(llm.ContractError) as ctx:
            llm.parse_json_document("I cannot help with that.")
        self.assertEqual(str(ctx.exception), "Failed to parse Claude response as JSON")

        with self.assertRaises(llm.ContractError):
            llm.parse_json_document("[1, 2, 3]")

    def test_missing_text_block_raises_contract_error(self):
        for body in ({}, {"content": []}, {"content": [{"type": "text"}]}, ["not", "a", "dict"]):
            with self.subTest(body=body):
                with self.assertRaises(llm.ContractError) as ctx:
                    llm.extract_response_text(body)
                self.assertEqual(str(ctx.exception), "Unexpected Claude response format")

    def test_missing_sections_raise_contract_error(self):
        with self.assertRaises(llm.ContractError):
            llm.validate_result_shape({"strategy": {}, "veo3": {}, "copy": {}})


class MessagesApiCallTests(unittest.TestCase):
    def setUp(self):
        llm.reset_usage()
        self.addCleanup(llm.reset_usage)
        self.settings = config.get_generation_settings(api_key="test-key", max_attempts=1)
        self.answers = get_sample("skincare")
        self.request = _request_for(self.answers, self.settings)
        self.document = generate_fallback(self.answers)

    def test_successful_call_returns_document_and_records_usage(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_messages_body(f"```json\n{json.dumps(self.document)}\n```"))

        result = _call(handler, self.request, self.settings)

        self.assertEqual(result, self.document)
        self.assertEqual(len(seen), 1)
        self.assertEqual(seen[0].headers["x-api-key"], "test-key")
        self.assertEqual(seen[0].headers["anthropic-version"], config.ANTHROPIC_VERSION)
        payload = json.loads(seen[0].content)
        self.assertEqual(payload["model"], self.settings.model)
        self.assertEqual(payload["max_tokens"], self.settings.max_tokens)
        self.assertEqual(payload["messages"][0]["role"], "user")
        self.assertIn("QUESTIONNAIRE RESPONSES:", payload["messages"][0]["content"])

        summary = llm.get_usage_summary()
        self.assertEqual(summary["calls"], 1)
        self.assertEqual(summary["total_tokens"], 2000)
        self.assertGreater(summary["total_cost"], 0)

    def test_non_2xx_raises_transport_error_without_retry(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500, json={"error": {"message": "overloaded"}})

        settings = self.settings.model_copy(update={"max_attempts": 3})
        with self.assertRaises(llm.TransportError) as ctx:
            _call(handler, self.request, settings)
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(str(ctx.exception), "Claude API failed: 500")
        self.assertEqual(len(calls), 1)
        self.assertEqual(llm.get_usage_summary()["calls"], 0)

    def test_missing_api_key_makes_no_http_call(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=_messages_body("{}"))

        settings = self.settings.model_copy(update={"api_key": "   "})
        with self.assertRaises(llm.ConfigurationError):
            _call(handler, self.request, settings)
        self.assertEqual(calls, [])

    def test_connection_errors_are_retried_then_raised(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        settings = self.settings.model_copy(update={"max_attempts": 2})
        with patch.object(llm, "wait_exponential", return_value=wait_none()):
            with self.assertRaises(llm.TransportError) as ctx:
                _call(handler, self.request, settings)
        self.assertIsNone(ctx.exception.status_code)
        self.assertEqual(len(calls), 2)

    def test_prose_reply_raises_contract_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_messages_body("Sorry, I can't produce that."))

        with self.assertRaises(llm.ContractError):
            _call(handler, self.request, self.settings)

    def test_malformed_usage_does_not_discard_document(self):
        def handler(request: httpx.Request) -> httpx.Response:
            body = _messages_body(json.dumps(self.document))
            body["usage"] = {"input_tokens": "n/a", "output_tokens": None}
            return httpx.Response(200, json=body)

        result = _call(handler, self.request, self.settings)

        self.assertEqual(result, self.document)
        summary = llm.get_usage_summary()
        self.assertEqual(summary["calls"], 1)
        self.assertEqual(summary["total_tokens"], 0)

    def test_missing_usage_block_is_tolerated(self):
        def handler(request: httpx.Request) -> httpx.Response:
            body = _messages_body(json.dumps(self.document))
            body["usage"] = "unavailable"
            return httpx.Response(200, json=body)

        self.assertEqual(_call(handler, self.request, self.settings), self.document)


class UsageLedgerTests(unittest.TestCase):
    def test_summary_breaks_down_by_model(self):
        ledger = llm.UsageLedger()
        ledger.record("claude-3-5-haiku-20241022", {"input_tokens": 1_000_000, "output_tokens": 0})
        ledger.record("claude-sonnet-4-20250514", {"input_tokens": 100, "output_tokens": 200})
        ledger.record("claude-sonnet-4-20250514", {"input_tokens": "7", "output_tokens": -5})

        summary = ledger.summary()
        self.assertEqual(summary["calls"], 3)
        self.assertEqual(summary["total_input_tokens"], 1_000_107)
        self.assertEqual(summary["total_output_tokens"], 200)
        self.assertEqual(summary["by_model"]["claude-3-5-haiku-20241022"]["cost"], 0.8)
        self.assertEqual(summary["by_model"]["claude-sonnet-4-20250514"]["calls"], 2)
        self.assertEqual(summary["by_model"]["claude-sonnet-4-20250514"]["tokens"], 307)

        ledger.clear()
        self.assertEqual(ledger.summary()["calls"], 0)
        self.assertEqual(ledger.entries(), [])


class PricingTests(unittest.TestCase):
    def test_longest_prefix_wins(self):
        self.assertEqual(llm._get_pricing("claude-3-5-haiku-20241022"), (0.80, 4.00))
        self.assertEqual(llm._get_pricing("claude-sonnet-4-20250514"), (3.00, 15.00))

    def test_unknown_model_uses_fallback_pricing(self):
        self.assertEqual(llm._get_pricing("mystery-model"), llm._FALLBACK_PRICING)


if __name__ == "__main__":
    unittest.main()

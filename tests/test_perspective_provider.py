import asyncio
import json
import random
import unittest

import httpx

from config.advisory_config import AdvisoryConfig
from services.ai.advisors.catalog import (
    FINANCIAL_ADVISOR_ID,
    OPPORTUNITY_COACH_ID,
    RISK_ANALYST_ID,
    default_catalog,
)
from services.ai.advisors.generated import EMPTY_CHAT_REPLY, GenerationFailure, GeneratedPerspectiveProvider
from services.ai.advisors.provider import PerspectiveProvider
from services.ai.advisors.templates import CANNED_REPLIES, TemplatePerspectiveProvider
from services.ai.advisors.types import ChatTurn
from services.ai.llm_service import LLMConfig, LLMService
from services.decision.factors import DecisionFactors

FACTORS = DecisionFactors(70, 40, 60, 50)
DECISION = "quit job to start a bakery"


class _FakeClient:
    """Replies from a script; an Exception entry is raised instead of returned."""

    def __init__(self, reply="", delay=0.0):
        self.reply = reply
        self.delay = delay
        self.calls = []

    async def complete(self, *, messages, temperature, max_tokens):
        self.calls.append({"messages": messages, "temperature": temperature, "max_tokens": max_tokens})
        if self.delay:
            await asyncio.sleep(self.delay)
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


def _provider(client, **config):
    llm = LLMService(cfg=LLMConfig(), client=client)
    return PerspectiveProvider(llm=llm, config=AdvisoryConfig(**config), rng=random.Random(7))


def _template(advisor):
    return TemplatePerspectiveProvider().build_analysis(DECISION, FACTORS, advisor)


def _http_status_error(code):
    request = httpx.Request("POST", "https://llm.invalid/v1/chat/completions")
    response = httpx.Response(code, request=request)
    return httpx.HTTPStatusError("bad status", request=request, response=response)


GOOD_REPLY = json.dumps({
    "perspective": "Solid plan if runway holds.",
    "recommendation": "Proceed once savings cover six months.",
    "confidence": 77,
    "keyInsights": ["Runway matters"],
    "risks": ["Slow first quarter", "Lease costs"],
    "opportunities": ["Local demand"],
    "actionItems": ["Price the lease"],
})


class SelectionTests(unittest.TestCase):
    def test_unconfigured_llm_uses_templates(self):
        provider = PerspectiveProvider(llm=LLMService(cfg=LLMConfig()), config=AdvisoryConfig())
        self.assertFalse(provider.uses_generation)

    def test_mock_switch_bypasses_generation(self):
        client = _FakeClient(GOOD_REPLY)
        provider = _provider(client, use_mock_ai=True)
        self.assertFalse(provider.uses_generation)

        advisor = default_catalog().require(RISK_ANALYST_ID)
        result = asyncio.run(provider.analyze(DECISION, FACTORS, advisor))
        self.assertEqual(result, _template(advisor))
        self.assertEqual(client.calls, [])


class GeneratedAnalysisTests(unittest.TestCase):
    def setUp(self):
        self.advisor = default_catalog().require(OPPORTUNITY_COACH_ID)

    def test_strict_reply(self):
        client = _FakeClient(GOOD_REPLY)
        result = asyncio.run(_provider(client).analyze(DECISION, FACTORS, self.advisor))

        self.assertEqual(result.agent_id, OPPORTUNITY_COACH_ID)
        self.assertEqual(result.agent_name, self.advisor.name)
        self.assertEqual(result.confidence, 77)
        self.assertEqual(result.risks, ("Slow first quarter", "Lease costs"))

        call = client.calls[0]
        self.assertEqual(call["temperature"], 0.7)
        self.assertEqual(call["max_tokens"], 1000)
        self.assertEqual(call["messages"][0], {"role": "system", "content": self.advisor.persona})
        self.assertIn(DECISION, call["messages"][1]["content"])
        self.assertIn("Risk Tolerance: 70/100", call["messages"][1]["content"])

    def test_reply_wrapped_in_prose(self):
        client = _FakeClient("Here you go:\n" + GOOD_REPLY + "\nGood luck!")
        generated = GeneratedPerspectiveProvider(LLMService(cfg=LLMConfig(), client=client), AdvisoryConfig())
        outcome = asyncio.run(generated.try_analyze(DECISION, FACTORS, self.advisor))
        self.assertEqual(outcome.parse_stage, "brace_scan")
        self.assertEqual(outcome.value.recommendation, "Proceed once savings cover six months.")

    def test_confidence_is_clamped(self):
        for raw, expected in ((150, 100), (-20, 0), ("abc", 70), (None, 70), (66.5, 67)):
            with self.subTest(raw=raw):
                client = _FakeClient(json.dumps({"recommendation": "ok", "confidence": raw}))
                result = asyncio.run(_provider(client).analyze(DECISION, FACTORS, self.advisor))
                self.assertEqual(result.confidence, expected)

    def test_missing_fields_get_neutral_defaults(self):
        client = _FakeClient(json.dumps({"risks": "not a list"}))
        result = asyncio.run(_provider(client).analyze(DECISION, FACTORS, self.advisor))
        self.assertEqual(result.perspective, "Analysis completed.")
        self.assertEqual(result.recommendation, "Consider all factors carefully.")
        self.assertEqual(result.confidence, 70)
        self.assertEqual(result.risks, ())


class FallbackTests(unittest.TestCase):
    def setUp(self):
        self.advisor = default_catalog().require(FINANCIAL_ADVISOR_ID)

    def _assert_falls_back(self, client, reason, **config):
        generated = GeneratedPerspectiveProvider(
            LLMService(cfg=LLMConfig(), client=client), AdvisoryConfig(**config)
        )
        outcome = asyncio.run(generated.try_analyze(DECISION, FACTORS, self.advisor))
        self.assertIsInstance(outcome, GenerationFailure)
        self.assertEqual(outcome.reason, reason)

        with self.assertLogs("services.ai.advisors.provider", level="WARNING"):
            result = asyncio.run(_provider(client, **config).analyze(DECISION, FACTORS, self.advisor))
        self.assertEqual(result, _template(self.advisor))

    def test_transport_error(self):
        self._assert_falls_back(_FakeClient(httpx.ConnectError("refused")), "transport")

    def test_http_status_error(self):
        self._assert_falls_back(_FakeClient(_http_status_error(503)), "http_status")

    def test_sdk_error(self):
        self._assert_falls_back(_FakeClient(RuntimeError("quota")), "provider")

    def test_unparseable_reply(self):
        self._assert_falls_back(_FakeClient("I think you should go for it!"), "unparseable_reply")

    def test_empty_reply(self):
        self._assert_falls_back(_FakeClient("   "), "empty_response")

    def test_timeout(self):
        self._assert_falls_back(_FakeClient(GOOD_REPLY, delay=0.5), "timeout", advisor_timeout_s=0.01)


class ChatTests(unittest.TestCase):
    def setUp(self):
        self.advisor = default_catalog().require(RISK_ANALYST_ID)
        self.history = [
            ChatTurn("user", "Should I keep my job?"),
            ChatTurn("assistant", "Start with a smaller test run."),
        ]

    def test_messages_carry_persona_context_and_history(self):
        client = _FakeClient("  Build the fund first.  ")
        reply = asyncio.run(
            _provider(client).continue_chat(DECISION, FACTORS, self.advisor, self.history, "How big?")
        )
        self.assertEqual(reply, "Build the fund first.")

        call = client.calls[0]
        messages = call["messages"]
        self.assertEqual(call["temperature"], 0.8)
        self.assertEqual(call["max_tokens"], 500)
        self.assertEqual(messages[0]["role"], "system")
        self.assertTrue(messages[0]["content"].startswith(self.advisor.persona))
        self.assertIn(DECISION, messages[0]["content"])
        self.assertEqual(messages[1:3], [t.to_message() for t in self.history])
        self.assertEqual(messages[3], {"role": "user", "content": "How big?"})

    def test_stateless_between_calls(self):
        client = _FakeClient("ok")
        provider = _provider(client)
        asyncio.run(provider.continue_chat(DECISION, FACTORS, self.advisor, self.history, "first"))
        asyncio.run(provider.continue_chat(DECISION, FACTORS, self.advisor, [], "second"))
        self.assertEqual(len(client.calls[1]["messages"]), 2)
        self.assertNotIn({"role": "user", "content": "first"}, client.calls[1]["messages"])

    def test_empty_reply_becomes_apology(self):
        reply = asyncio.run(
            _provider(_FakeClient("")).continue_chat(DECISION, FACTORS, self.advisor, [], "hi")
        )
        self.assertEqual(reply, EMPTY_CHAT_REPLY)

    def test_failure_falls_back_to_canned_line(self):
        client = _FakeClient(httpx.ReadTimeout("slow"))
        reply = asyncio.run(_provider(client).continue_chat(DECISION, FACTORS, self.advisor, [], "hi"))
        self.assertIn(reply, CANNED_REPLIES[RISK_ANALYST_ID])

    def test_canned_line_is_reproducible_with_seeded_rng(self):
        def run():
            provider = PerspectiveProvider(
                llm=LLMService(cfg=LLMConfig()), config=AdvisoryConfig(), rng=random.Random(42)
            )
            return [
                asyncio.run(provider.continue_chat(DECISION, FACTORS, self.advisor, [], "hi"))
                for _ in range(5)
            ]

        self.assertEqual(run(), run())
        for line in run():
            self.assertIn(line, CANNED_REPLIES[RISK_ANALYST_ID])


class TemplateTests(unittest.TestCase):
    def test_known_values(self):
        catalog = default_catalog()
        templates = TemplatePerspectiveProvider()
        confidences = [templates.build_analysis(DECISION, FACTORS, a).confidence for a in catalog]
        self.assertEqual(confidences, [75, 82, 68, 85])

    def test_recommendation_follows_factor_bands(self):
        templates = TemplatePerspectiveProvider()
        risk = default_catalog().require(RISK_ANALYST_ID)
        bold = templates.build_analysis(DECISION, DecisionFactors(61, 50, 50, 50), risk)
        careful = templates.build_analysis(DECISION, DecisionFactors(60, 50, 50, 50), risk)
        self.assertIn("contingency plans", bold.recommendation)
        self.assertIn("smaller steps", careful.recommendation)

        finance = default_catalog().require(FINANCIAL_ADVISOR_ID)
        self.assertEqual(
            templates.build_analysis(DECISION, DecisionFactors(50, 61, 50, 50), finance).recommendation,
            "You have cushion to weather initial turbulence.",
        )
        self.assertEqual(
            templates.build_analysis(DECISION, DecisionFactors(50, 60, 50, 50), finance).recommendation,
            "Consider phased approach.",
        )


if __name__ == "__main__":
    unittest.main()

import os
import random
import unittest

os.environ["RATE_LIMIT_ENABLED"] = "0"

from fastapi.testclient import TestClient

from config.advisory_config import AdvisoryConfig
from main import app
from middleware.rate_limit import limiter
from services.ai.advisors.catalog import LIFE_MENTOR_ID
from services.ai.advisors.provider import PerspectiveProvider
from services.ai.advisors.templates import CANNED_REPLIES
from services.ai.llm_service import LLMConfig, LLMService
from services.consultation_service import ConsultationService, get_consultation_service
from services.decision.consensus import CONSENSUS_MIXED
from services.decision_analysis_service import DecisionAnalysisService, get_decision_analysis_service

FACTORS = {"riskTolerance": 70, "financialStability": 40, "disciplineLevel": 60, "supportSystem": 50}
ALL_IDS = ["risk-analyst", "opportunity-coach", "financial-advisor", "life-mentor"]


def _template_service():
    provider = PerspectiveProvider(
        llm=LLMService(cfg=LLMConfig()),
        config=AdvisoryConfig(use_mock_ai=True),
        rng=random.Random(3),
    )
    return ConsultationService(provider=provider)


class ApiTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        limiter.enabled = False
        service = _template_service()
        app.dependency_overrides[get_consultation_service] = lambda: service
        cls.client = TestClient(app)

    @classmethod
    def tearDownClass(cls):
        app.dependency_overrides.pop(get_consultation_service, None)


class AdvisorRoutesTests(ApiTestCase):
    def test_list_hides_persona(self):
        res = self.client.get("/api/agents/list")
        self.assertEqual(res.status_code, 200)
        agents = res.json()["agents"]
        self.assertEqual([a["id"] for a in agents], ALL_IDS)
        for agent in agents:
            self.assertNotIn("persona", agent)

    def test_analyze(self):
        res = self.client.post(
            "/api/agents/analyze",
            json={"decision": "quit job", "factors": FACTORS, "agentIds": ALL_IDS},
        )
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["overallConfidence"], 78)
        self.assertEqual(body["consensus"], CONSENSUS_MIXED)
        self.assertEqual(body["divergentPoints"], [])
        self.assertEqual([a["agentId"] for a in body["analyses"]], ALL_IDS)
        self.assertEqual(body["factors"], FACTORS)
        self.assertIn("X-Request-ID", res.headers)

    def test_analyze_validation_errors(self):
        cases = [
            ({"decision": "x", "factors": FACTORS, "agentIds": []}, "agentIds"),
            ({"decision": "x", "factors": FACTORS, "agentIds": ["devil-advocate"]}, "agentIds"),
            ({"decision": "", "factors": FACTORS, "agentIds": ALL_IDS}, "decision"),
            ({"factors": FACTORS, "agentIds": ALL_IDS}, "decision"),
            ({"decision": "x", "factors": dict(FACTORS, riskTolerance=50.5), "agentIds": ALL_IDS}, "riskTolerance"),
            ({"decision": "x", "factors": dict(FACTORS, riskTolerance=-1), "agentIds": ALL_IDS}, "riskTolerance"),
            ({"decision": "x", "factors": dict(FACTORS, supportSystem="50"), "agentIds": ALL_IDS}, "supportSystem"),
        ]
        for payload, field in cases:
            with self.subTest(field=field, payload=payload):
                res = self.client.post("/api/agents/analyze", json=payload)
                self.assertEqual(res.status_code, 422)
                body = res.json()
                self.assertEqual(body["error"], "Validation failed")
                self.assertEqual(body["field"], field)

    def test_chat(self):
        res = self.client.post(
            "/api/agents/chat",
            json={
                "decision": "quit job",
                "factors": FACTORS,
                "agentId": LIFE_MENTOR_ID,
                "messageHistory": [{"role": "user", "content": "hi"}],
                "userMessage": "Where do I start?",
            },
        )
        self.assertEqual(res.status_code, 200)
        self.assertIn(res.json()["response"], CANNED_REPLIES[LIFE_MENTOR_ID])

    def test_chat_accepts_long_history(self):
        history = [
            {"role": "user" if i % 2 == 0 else "assistant", "content": f"turn {i}"}
            for i in range(42)
        ]
        res = self.client.post(
            "/api/agents/chat",
            json={
                "decision": "quit job",
                "factors": FACTORS,
                "agentId": LIFE_MENTOR_ID,
                "messageHistory": history,
                "userMessage": "Still with me?",
            },
        )
        self.assertEqual(res.status_code, 200)
        self.assertIn(res.json()["response"], CANNED_REPLIES[LIFE_MENTOR_ID])

    def test_chat_unknown_advisor(self):
        res = self.client.post(
            "/api/agents/chat",
            json={"decision": "quit job", "factors": FACTORS, "agentId": "devil-advocate", "userMessage": "hi"},
        )
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json(), {"error": "Agent not found", "field": "agentId"})

    def test_chat_message_too_long(self):
        res = self.client.post(
            "/api/agents/chat",
            json={"decision": "quit job", "factors": FACTORS, "agentId": LIFE_MENTOR_ID, "userMessage": "x" * 501},
        )
        self.assertEqual(res.status_code, 422)
        self.assertEqual(res.json()["field"], "userMessage")

    def test_action_plan(self):
        analyses = self.client.post(
            "/api/agents/analyze",
            json={"decision": "quit job", "factors": FACTORS, "agentIds": ALL_IDS},
        ).json()["analyses"]

        res = self.client.post("/api/agents/action-plan", json={"decision": "quit job", "analyses": analyses})
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(len(body["shortTerm"]), 3)
        self.assertEqual(len(body["milestones"]), 3)

        res = self.client.post("/api/agents/action-plan", json={"decision": "quit job", "analyses": []})
        self.assertEqual(res.status_code, 422)
        self.assertEqual(res.json()["field"], "analyses")


class _ScriptedClient:
    def __init__(self, reply):
        self.reply = reply

    async def complete(self, *, messages, temperature, max_tokens):
        return self.reply


class DecisionAnalysisRoutesTests(ApiTestCase):
    def tearDown(self):
        app.dependency_overrides.pop(get_decision_analysis_service, None)

    def _use(self, service):
        app.dependency_overrides[get_decision_analysis_service] = lambda: service

    def test_generated_analysis(self):
        reply = '{"analysis": "Solid.", "pros": ["a"], "cons": ["b"], "recommendation": "Go.", "confidenceScore": 120}'
        self._use(DecisionAnalysisService(
            llm=LLMService(cfg=LLMConfig(), client=_ScriptedClient(reply)), config=AdvisoryConfig()
        ))
        res = self.client.post("/api/decisions/analyze", json={"decision": "quit job", "factors": FACTORS})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(
            res.json(),
            {"analysis": "Solid.", "pros": ["a"], "cons": ["b"], "recommendation": "Go.", "confidenceScore": 100},
        )

    def test_fallback_analysis(self):
        self._use(DecisionAnalysisService(
            llm=LLMService(cfg=LLMConfig(), client=_ScriptedClient("no json here")), config=AdvisoryConfig()
        ))
        res = self.client.post("/api/decisions/analyze", json={"decision": "quit job", "factors": FACTORS})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["analysis"], "no json here")
        self.assertEqual(res.json()["confidenceScore"], 50)

    def test_unconfigured_is_503(self):
        self._use(DecisionAnalysisService(llm=LLMService(cfg=LLMConfig()), config=AdvisoryConfig()))
        res = self.client.post("/api/decisions/analyze", json={"decision": "quit job", "factors": FACTORS})
        self.assertEqual(res.status_code, 503)
        self.assertEqual(res.json(), {"error": "AI analysis not configured"})

    def test_long_decision_is_422(self):
        self._use(DecisionAnalysisService(llm=LLMService(cfg=LLMConfig()), config=AdvisoryConfig()))
        res = self.client.post("/api/decisions/analyze", json={"decision": "x" * 501, "factors": FACTORS})
        self.assertEqual(res.status_code, 422)
        self.assertEqual(res.json()["field"], "decision")


class SimulationRoutesTests(ApiTestCase):
    def test_project(self):
        factors = {"riskTolerance": 80, "financialStability": 20, "disciplineLevel": 90, "supportSystem": 30}
        res = self.client.post("/api/simulations/project", json={"factors": factors})
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["result"]["fiveYears"]["financial"]["value"], 56)
        self.assertEqual(body["result"]["threeMonths"]["financial"]["value"], 17)
        self.assertEqual(body["factors"], factors)
        self.assertEqual(
            body["profile"],
            {
                "riskBand": "high",
                "financialBand": "challenging",
                "decisionConfidence": 55,
                "insightPattern": "You favor bold moves and calculated risks.",
            },
        )

    def test_project_rejects_out_of_range(self):
        res = self.client.post(
            "/api/simulations/project", json={"factors": dict(FACTORS, disciplineLevel=101)}
        )
        self.assertEqual(res.status_code, 422)
        self.assertEqual(res.json()["field"], "disciplineLevel")

    def test_guidance(self):
        body = self.client.get("/api/guidance").json()
        self.assertEqual(len(body["frameworks"]), 4)
        self.assertEqual(set(body["factors"]), set(FACTORS))
        self.assertEqual(set(body["horizons"]), {"threeMonths", "oneYear", "fiveYears"})
        self.assertEqual(len(body["advisory"]["steps"]), 4)
        self.assertIn("financial", body["successMetrics"])


class HealthTests(ApiTestCase):
    def test_health(self):
        res = self.client.get("/health")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), {"status": "ok", "generatedAdvisors": False})


if __name__ == "__main__":
    unittest.main()

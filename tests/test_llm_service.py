import asyncio
import os
import unittest
from unittest.mock import patch

from services.ai.llm_service import AnthropicClient, GeminiClient, LLMConfig, LLMService, OpenAIClient


class _EchoClient:
    async def complete(self, *, messages, temperature, max_tokens):
        return f"{len(messages)}|{temperature}|{max_tokens}"


class _FakeGeminiResponse:
    def __init__(self, text):
        self.text = text


class _FakeGeminiModels:
    def __init__(self):
        self.calls = []

    def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        return _FakeGeminiResponse(f"reply {len(self.calls)}")


class _FakeGeminiSdk:
    def __init__(self):
        self.models = _FakeGeminiModels()


class LLMConfigTests(unittest.TestCase):
    def test_from_env(self):
        env = {
            "AI_PROVIDER": "Anthropic",
            "ANTHROPIC_API_KEY": "k",
            "AI_MODEL": "claude-test",
            "AI_TIMEOUT_S": "12",
        }
        with patch.dict(os.environ, env, clear=True):
            cfg = LLMConfig.from_env()
        self.assertEqual(cfg.provider, "anthropic")
        self.assertEqual(cfg.anthropic_model, "claude-test")
        self.assertEqual(cfg.timeout_s, 12.0)
        self.assertTrue(cfg.has_credentials())

    def test_credentials_per_provider(self):
        self.assertFalse(LLMConfig(provider="openai").has_credentials())
        self.assertTrue(LLMConfig(provider="openai", openai_api_key="k").has_credentials())
        self.assertTrue(LLMConfig(provider="gemini", gcp_project_id="p").has_credentials())
        self.assertFalse(LLMConfig(provider="cloud", cloud_base_url="https://x").has_credentials())
        self.assertFalse(LLMConfig(provider="mystery", openai_api_key="k").has_credentials())


class LLMServiceTests(unittest.TestCase):
    def test_unconfigured_without_credentials(self):
        service = LLMService(cfg=LLMConfig())
        self.assertFalse(service.is_configured)
        with self.assertRaises(RuntimeError):
            asyncio.run(service.complete([{"role": "user", "content": "hi"}]))

    def test_resolves_provider_client(self):
        self.assertIsInstance(LLMService(cfg=LLMConfig(openai_api_key="k")).client, OpenAIClient)
        self.assertIsInstance(
            LLMService(cfg=LLMConfig(provider="anthropic", anthropic_api_key="k")).client, AnthropicClient
        )

    def test_injected_client(self):
        service = LLMService(cfg=LLMConfig(), client=_EchoClient())
        self.assertTrue(service.is_configured)
        out = asyncio.run(
            service.complete([{"role": "user", "content": "hi"}], temperature=0.8, max_tokens=500)
        )
        self.assertEqual(out, "1|0.8|500")


class GeminiClientTests(unittest.TestCase):
    def test_sdk_client_is_built_once(self):
        built = []

        def factory():
            built.append(_FakeGeminiSdk())
            return built[-1]

        client = GeminiClient("gemini-test", project_id="p", client_factory=factory)
        messages = [
            {"role": "system", "content": "You are Cora."},
            {"role": "user", "content": "Can I afford it?"},
        ]

        async def run():
            first = await client.complete(messages=messages, temperature=0.7, max_tokens=100)
            second = await client.complete(messages=messages, temperature=0.7, max_tokens=100)
            return first, second

        self.assertEqual(asyncio.run(run()), ("reply 1", "reply 2"))
        self.assertEqual(len(built), 1)

        call = built[0].models.calls[0]
        self.assertEqual(call["model"], "gemini-test")
        self.assertEqual(len(call["contents"]), 1)
        self.assertEqual(call["config"].system_instruction, "You are Cora.")
        self.assertEqual(call["config"].max_output_tokens, 100)


if __name__ == "__main__":
    unittest.main()

# services/ai/llm_service.py
from __future__ import annotations

import os
import asyncio
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol

from dotenv import load_dotenv

load_dotenv()

Message = Dict[str, str]  # {"role": "system" | "user" | "assistant", "content": str}


# ============================================================================
# PUBLIC INTERFACE
# ============================================================================

class LLMClient(Protocol):
    async def complete(
        self, *, messages: List[Message], temperature: float, max_tokens: int
    ) -> str:
        """Return the raw reply text (may be empty)."""


@dataclass
class LLMConfig:
    provider: str = "openai"  # openai | anthropic | gemini | cloud
    timeout_s: float = 30.0

    # OpenAI
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"

    # Anthropic
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-sonnet-latest"

    # Gemini (Vertex AI, authenticates via GOOGLE_APPLICATION_CREDENTIALS)
    gemini_model: str = "gemini-2.5-flash"
    gcp_project_id: str = ""
    gcp_location: str = "us-central1"

    # Cloud gateway (optional)
    cloud_base_url: str = ""
    cloud_api_key: str = ""

    @staticmethod
    def from_env() -> "LLMConfig":
        provider = (os.getenv("AI_PROVIDER") or "openai").lower()
        model_override = os.getenv("AI_MODEL") or ""
        return LLMConfig(
            provider=provider,
            timeout_s=float(os.getenv("AI_TIMEOUT_S", "30")),

            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_model=model_override or os.getenv("OPENAI_MODEL") or "gpt-4o-mini",
            openai_base_url=os.getenv("OPENAI_BASE_URL") or "https://api.openai.com/v1",

            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
            anthropic_model=model_override or os.getenv("ANTHROPIC_MODEL") or "claude-3-5-sonnet-latest",

            gemini_model=model_override or os.getenv("GEMINI_MODEL") or "gemini-2.5-flash",
            gcp_project_id=(os.getenv("GCP_PROJECT_ID") or os.getenv("GOOGLE_CLOUD_PROJECT") or "").strip(),
            gcp_location=(os.getenv("GCP_LOCATION") or "us-central1").strip(),

            cloud_base_url=os.getenv("CLOUD_LLM_BASE_URL", ""),
            cloud_api_key=os.getenv("CLOUD_LLM_API_KEY", ""),
        )

    def has_credentials(self) -> bool:
        p = (self.provider or "").lower()
        if p == "openai":
            return bool(self.openai_api_key)
        if p == "anthropic":
            return bool(self.anthropic_api_key)
        if p == "gemini":
            return bool(self.gcp_project_id)
        if p == "cloud":
            return bool(self.cloud_base_url and self.cloud_api_key)
        return False


# ============================================================================
# PROVIDER CLIENTS
# ============================================================================

class OpenAIClient:
    def __init__(self, api_key: str, model: str, timeout_s: float = 30.0,
                 base_url: str = "https://api.openai.com/v1"):
        self.api_key = api_key
        self.model = model
        self.timeout_s = timeout_s
        self.base_url = base_url.rstrip("/")

    async def complete(self, *, messages: List[Message], temperature: float, max_tokens: int) -> str:
        import httpx
        async with httpx.AsyncClient(timeout=self.timeout_s) as client:
            r = await client.post(
                f"{self.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": self.model,
                    "messages": messages,
                    "temperature": temperature,
                    "max_tokens": max_tokens,
                },
            )
            r.raise_for_status()
            data = r.json()
            choices = data.get("choices") or []
            if not choices:
                return ""
            return (choices[0].get("message") or {}).get("content") or ""


class AnthropicClient:
    def __init__(self, api_key: str, model: str, timeout_s: float = 30.0):
        self.api_key = api_key
        self.model = model
        self.timeout_s = timeout_s

    async def complete(self, *, messages: List[Message], temperature: float, max_tokens: int) -> str:
        import httpx
        # Anthropic takes the system prompt separately from the turn list
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        turns = [m for m in messages if m["role"] != "system"]
        async with httpx.AsyncClient(timeout=self.timeout_s) as client:
            r = await client.post(
                "https://api.anthropic.com/v1/messages",
                headers={
                    "x-api-key": self.api_key,
                    "Content-Type": "application/json",
                    "anthropic-version": "2023-06-01",
                },
                json={
                    "model": self.model,
                    "max_tokens": max_tokens,
                    "system": system,
                    "messages": turns,
                    "temperature": temperature,
                },
            )
            r.raise_for_status()
            data = r.json()
            blocks = data.get("content") or []
            return "".join(b.get("text", "") for b in blocks if b.get("type") == "text")


class GeminiClient:
    """
    Vertex AI Gemini through the google-genai SDK. The SDK client is built on
    first use and reused for every later call.
    """

    def __init__(
        self,
        model: str,
        *,
        project_id: str,
        location: str = "us-central1",
        client_factory: Optional[Callable[[], Any]] = None,
    ):
        self.model = model
        self.project_id = project_id
        self.location = location
        self._client_factory = client_factory or self._build_sdk_client
        self._sdk_client: Any = None
        self._lock = threading.Lock()

    def _build_sdk_client(self) -> Any:
        from google import genai

        return genai.Client(vertexai=True, project=self.project_id, location=self.location)

    def _client(self) -> Any:
        # calls arrive from worker threads (asyncio.to_thread)
        with self._lock:
            if self._sdk_client is None:
                self._sdk_client = self._client_factory()
            return self._sdk_client

    async def complete(self, *, messages: List[Message], temperature: float, max_tokens: int) -> str:
        # google-genai SDK is sync-ish; run in thread.
        return await asyncio.to_thread(self._sync_call, messages, temperature, max_tokens)

    def _sync_call(self, messages: List[Message], temperature: float, max_tokens: int) -> str:
        from google.genai import types

        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        contents = [
            types.Content(
                role="model" if m["role"] == "assistant" else "user",
                parts=[types.Part.from_text(text=m["content"])],
            )
            for m in messages
            if m["role"] != "system"
        ]

        config = types.GenerateContentConfig(
            system_instruction=system or None,
            temperature=temperature,
            max_output_tokens=max_tokens,
        )
        resp = self._client().models.generate_content(
            model=self.model,
            contents=contents,
            config=config,
        )
        return resp.text if getattr(resp, "text", None) else ""


class CloudLLMClient:
    def __init__(self, base_url: str, api_key: str, timeout_s: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout_s = timeout_s

    async def complete(self, *, messages: List[Message], temperature: float, max_tokens: int) -> str:
        import httpx
        async with httpx.AsyncClient(timeout=self.timeout_s) as client:
            r = await client.post(
                f"{self.base_url}/v1/chat",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "messages": messages,
                    "temperature": temperature,
                    "max_tokens": max_tokens,
                },
            )
            r.raise_for_status()
            data = r.json()
            return data.get("text") or ""


# ============================================================================
# LLM SERVICE (reusable everywhere)
# ============================================================================

class LLMService:
    """
    Thin front over one provider client. `is_configured` is False when the
    selected provider has no credentials; callers must then not call
    `complete` and use their deterministic path instead.
    """

    def __init__(self, cfg: Optional[LLMConfig] = None, client: Optional[LLMClient] = None):
        self.cfg = cfg or LLMConfig.from_env()
        if client is not None:
            self.client: Optional[LLMClient] = client
        elif self.cfg.has_credentials():
            self.client = self._resolve_client(self.cfg)
        else:
            self.client = None

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    @property
    def provider(self) -> str:
        return (self.cfg.provider or "openai").lower()

    def _resolve_client(self, cfg: LLMConfig) -> LLMClient:
        p = (cfg.provider or "openai").lower()

        if p == "anthropic":
            return AnthropicClient(
                api_key=cfg.anthropic_api_key,
                model=cfg.anthropic_model,
                timeout_s=cfg.timeout_s,
            )

        if p == "gemini":
            return GeminiClient(
                model=cfg.gemini_model,
                project_id=cfg.gcp_project_id,
                location=cfg.gcp_location,
            )

        if p == "cloud":
            return CloudLLMClient(
                base_url=cfg.cloud_base_url,
                api_key=cfg.cloud_api_key,
                timeout_s=cfg.timeout_s,
            )

        if p != "openai":
            raise ValueError(f"Unknown AI_PROVIDER '{cfg.provider}'")

        return OpenAIClient(
            api_key=cfg.openai_api_key,
            model=cfg.openai_model,
            timeout_s=cfg.timeout_s,
            base_url=cfg.openai_base_url,
        )

    async def complete(
        self, messages: List[Message], *, temperature: float = 0.7, max_tokens: int = 1000
    ) -> str:
        if self.client is None:
            raise RuntimeError("LLM provider is not configured")
        return await self.client.complete(
            messages=messages, temperature=temperature, max_tokens=max_tokens
        )


# Optional: shared singleton
_llm_singleton: Optional[LLMService] = None

def get_llm_service() -> LLMService:
    global _llm_singleton
    if _llm_singleton is None:
        _llm_singleton = LLMService()
    return _llm_singleton

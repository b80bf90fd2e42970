"""
Advisor-consultation settings. Provider credentials live in
services.ai.llm_service.LLMConfig; this holds the knobs for how advisors use it.
"""
import os
from dataclasses import dataclass


def _truthy(value: str) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class AdvisoryConfig:
    # explicit kill switch for generated analyses (USE_MOCK_AI=true)
    use_mock_ai: bool = False

    analysis_temperature: float = 0.7
    analysis_max_tokens: int = 1000
    chat_temperature: float = 0.8
    chat_max_tokens: int = 500
    decision_analysis_max_tokens: int = 800

    # wall-clock cap per generated call; on expiry the advisor falls back
    advisor_timeout_s: float = 45.0

    @staticmethod
    def from_env() -> "AdvisoryConfig":
        return AdvisoryConfig(
            use_mock_ai=_truthy(os.getenv("USE_MOCK_AI", "")),
            analysis_temperature=float(os.getenv("ADVISOR_ANALYSIS_TEMPERATURE", "0.7")),
            analysis_max_tokens=int(os.getenv("ADVISOR_ANALYSIS_MAX_TOKENS", "1000")),
            chat_temperature=float(os.getenv("ADVISOR_CHAT_TEMPERATURE", "0.8")),
            chat_max_tokens=int(os.getenv("ADVISOR_CHAT_MAX_TOKENS", "500")),
            decision_analysis_max_tokens=int(os.getenv("DECISION_ANALYSIS_MAX_TOKENS", "800")),
            advisor_timeout_s=float(os.getenv("ADVISOR_TIMEOUT_S", "45")),
        )

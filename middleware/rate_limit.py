# middleware/rate_limit.py
"""
Rate limiting configuration using slowapi.

Usage in route files:
    from middleware.rate_limit import limiter

    @router.post("/analyze")
    @limiter.limit("10/minute")
    async def my_endpoint(request: Request, ...):
        ...

Analyze and chat fan out to a paid text-generation provider, so they carry
tighter per-route limits than the default.
"""
import logging
import os

from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

logger = logging.getLogger(__name__)


def _get_rate_limit_key(request: Request) -> str:
    """
    Identify the caller for rate-limiting.

    Behind a proxy (TRUST_FORWARDED_FOR=1) the first X-Forwarded-For hop is
    the client; otherwise use the socket peer address.
    """
    if os.getenv("TRUST_FORWARDED_FOR", "0") == "1":
        fwd = request.headers.get("X-Forwarded-For", "")
        first = fwd.split(",", 1)[0].strip()
        if first:
            return f"ip:{first}"
    return get_remote_address(request)


# ─── Default limits ────────────────────────────────────────────────
# Env-overridable so you can tune per-environment without redeploying.
DEFAULT_RATE_LIMIT = os.getenv("RATE_LIMIT_DEFAULT", "60/minute")

limiter = Limiter(
    key_func=_get_rate_limit_key,
    default_limits=[DEFAULT_RATE_LIMIT],
    storage_uri=os.getenv("REDIS_URL", "memory://"),
    strategy="fixed-window",
    enabled=os.getenv("RATE_LIMIT_ENABLED", "1") == "1",
)

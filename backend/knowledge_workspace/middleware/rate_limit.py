"""
Rate Limiting - Protect the API from abuse.

One shared slowapi ``Limiter``; the gateway attaches it to ``app.state``.
Login/signup and summarization carry their own tighter limits.
"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..core.config import AI_RATE_LIMIT, AUTH_RATE_LIMIT, RATE_LIMIT_ENABLED, RATE_LIMIT_PER_MINUTE
from ..core.logging_config import get_logger
from ..core.security import decode_token

logger = get_logger(__name__)


def get_rate_limit_key(request: Request) -> str:
    """
    Get rate limit key for request.
    
    Signed-in callers are limited per user, anonymous ones per IP address.
    """
    authorization = request.headers.get("Authorization", "")
    if authorization.lower().startswith("bearer "):
        payload = decode_token(authorization[7:].strip())
        if payload and payload.get("sub"):
            return f"user:{payload['sub']}"
    
    # Fall back to IP address
    return get_remote_address(request)


# Initialize rate limiter
limiter = Limiter(
    key_func=get_rate_limit_key,
    default_limits=[f"{RATE_LIMIT_PER_MINUTE}/minute"],
    enabled=RATE_LIMIT_ENABLED
)

# Rate limit decorators
auth_rate_limit = limiter.limit(AUTH_RATE_LIMIT)
ai_rate_limit = limiter.limit(AI_RATE_LIMIT)

import os
from typing import Dict

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware


def _key_owners() -> Dict[str, str]:
    """Parse API_KEYS ("token:user_id,..."); a bare token is its own user id."""
    owners: Dict[str, str] = {}
    for item in os.getenv("API_KEYS", "").split(","):
        item = item.strip()
        if not item:
            continue
        token, _, user_id = item.partition(":")
        owners[token.strip()] = user_id.strip() or token.strip()
    return owners


def default_user_id() -> str:
    return os.getenv("DEFAULT_USER_ID", "local")


def current_user(request: Request) -> str:
    """FastAPI dependency returning the owner of the current request."""
    return getattr(request.state, "user_id", None) or default_user_id()


class APIKeyMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        # Skip authentication for health check endpoint
        if request.url.path == "/__health":
            return await call_next(request)

        # Skip authentication for CORS preflight requests
        if request.method == "OPTIONS":
            return await call_next(request)

        if os.getenv("AUTH_ENABLED", "false").lower() != "true":
            request.state.user_id = default_user_id()
            return await call_next(request)

        auth = request.headers.get("Authorization", "")
        if not auth.startswith("Bearer "):
            return JSONResponse({"detail": "Missing API key"}, status_code=401)
        token = auth.replace("Bearer ", "").strip()
        owners = _key_owners()
        if token not in owners:
            return JSONResponse({"detail": "Invalid API key"}, status_code=403)

        request.state.api_key = token
        request.state.user_id = owners[token]
        return await call_next(request)

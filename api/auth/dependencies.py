"""
API-key gate for the protected route groups (/tasks, /goals).

One shared secret (API_KEY) guards everything. The client sends it as the
bare value of the Authorization header, without a scheme prefix.
"""

from __future__ import annotations

import logging
import secrets

from fastapi import HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader

from core import settings

MISSING_KEY_MESSAGE = "API Key required in the Authorization header."
INVALID_KEY_MESSAGE = "Invalid API Key."
MISCONFIGURED_MESSAGE = "Server configuration error."

logger = logging.getLogger(__name__)

# Declared for the OpenAPI "Authorize" dialog only; the check below reads the
# raw header itself so an empty header is treated the same as a blank token.
api_key_header = APIKeyHeader(
    name="Authorization",
    scheme_name="ApiKeyAuth",
    description="Shared API key. Send the key itself, without a `Bearer ` prefix.",
    auto_error=False,
)


def check_api_key(authorization: str | None, expected: str | None) -> None:
    if authorization is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=MISSING_KEY_MESSAGE,
        )

    if not expected:
        logger.error("api_key_not_configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=MISCONFIGURED_MESSAGE,
        )

    token = authorization.strip()
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=MISSING_KEY_MESSAGE,
        )

    if not secrets.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=INVALID_KEY_MESSAGE,
        )


async def require_api_key(
    request: Request,
    _: str | None = Security(api_key_header),
) -> None:
    check_api_key(request.headers.get("authorization"), settings.api_key())


def is_protected_path(path: str, prefixes: tuple[str, ...]) -> bool:
    return any(path == prefix or path.startswith(prefix + "/") for prefix in prefixes)

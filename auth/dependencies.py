"""
auth/dependencies.py -- FastAPI Depends() helpers for bearer-token auth.

get_current_identity() is the token verification step for every protected
route. It has two outcomes per request:
  ACCEPT -- returns an Identity built from the token claims.
  REJECT -- raises HTTPException, which the app's handler renders as the
            standard error envelope.

  No Authorization header / no token part   -> 401 NO_TOKEN
  Bad signature, expired, malformed, claims -> 403 INVALID_TOKEN

Layer rule: no imports from api/ or petstore/.
  auth/dependencies.py may import from fastapi (for HTTPException/Request)
  because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.models import Identity
from auth.tokens import decode_access_token


def _extract_bearer_token(request: Request) -> str | None:
    """Return the token part of "Authorization: Bearer <token>", or None."""
    auth_header = request.headers.get("Authorization", "")
    parts = auth_header.split(" ", 1)
    if len(parts) != 2 or not parts[1].strip():
        return None
    return parts[1].strip()


def get_current_identity(request: Request) -> Identity:
    """Require a valid bearer token.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(identity: Identity = Depends(get_current_identity)): ...

    or router-wide:
        router = APIRouter(dependencies=[Depends(get_current_identity)])
    """
    token = _extract_bearer_token(request)
    if token is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "NO_TOKEN", "message": "Access token required"},
        )
    payload = decode_access_token(token)
    if payload is None:
        raise HTTPException(
            status_code=403,
            detail={"code": "INVALID_TOKEN", "message": "Invalid or expired token"},
        )
    return Identity(id=payload["id"], email=payload["email"])

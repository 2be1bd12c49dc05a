from __future__ import annotations

from functools import lru_cache
import logging

from fastapi import HTTPException, Request

from app.core.config import settings
from app.core.security.jwt_verifier import AuthTokenValidationError, JWTVerifier
from app.schemas.request_identity import ActorRole, RequestIdentity
from app.services.errors import Unauthorized

logger = logging.getLogger(__name__)

ACTOR_ID_HEADER = "X-User-Id"
ACTOR_ROLE_HEADER = "X-User-Role"


def _normalized_auth_mode() -> str:
    raw = (settings.AUTH_MODE or "legacy_header").strip().lower()
    if raw in {"legacy_header", "dual", "jwt_only"}:
        return raw
    return "legacy_header"


@lru_cache(maxsize=1)
def _get_verifier() -> JWTVerifier:
    algorithms = [
        token.strip().upper()
        for token in (settings.AUTH_JWT_ALGORITHMS or "HS256").split(",")
        if token.strip()
    ]
    return JWTVerifier(
        secret=settings.AUTH_JWT_SECRET,
        algorithms=algorithms or ["HS256"],
        leeway_sec=settings.AUTH_JWT_CLOCK_SKEW_SEC,
    )


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(status_code=401, detail=Unauthorized(message=message).to_detail())


def _extract_bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization") or ""
    prefix = "Bearer "
    if not header.startswith(prefix):
        return None
    token = header[len(prefix) :].strip()
    return token or None


def _build_identity(raw_id, raw_role, *, auth_source: str, claims: dict) -> RequestIdentity:
    id_text = str(raw_id or "").strip()
    role_text = str(raw_role or "").strip().lower()
    if not id_text or not role_text:
        raise _unauthorized("Authentication required")
    try:
        actor_id = int(id_text)
    except ValueError:
        raise _unauthorized("Actor id is invalid") from None
    try:
        role = ActorRole(role_text)
    except ValueError:
        logger.warning("request_identity_unknown_role role=%s source=%s", role_text, auth_source)
        raise _unauthorized("Actor role is not recognized") from None
    return RequestIdentity(
        actor_id=actor_id,
        role=role,
        auth_source=auth_source,
        claims=claims,
    )


def _identity_from_legacy_header(request: Request) -> RequestIdentity:
    return _build_identity(
        request.headers.get(ACTOR_ID_HEADER),
        request.headers.get(ACTOR_ROLE_HEADER),
        auth_source="legacy_header",
        claims={},
    )


def _identity_from_token(token: str) -> RequestIdentity:
    try:
        claims = _get_verifier().verify(token)
    except AuthTokenValidationError as exc:
        raise _unauthorized(str(exc)) from exc
    return _build_identity(
        claims.get("id") or claims.get("sub"),
        claims.get("role"),
        auth_source="jwt",
        claims=claims,
    )


def resolve_request_identity(request: Request) -> RequestIdentity:
    token = _extract_bearer_token(request)
    mode = _normalized_auth_mode()
    if mode == "legacy_header":
        return _identity_from_legacy_header(request)

    if mode == "jwt_only":
        if not token:
            raise _unauthorized("Missing Bearer access token.")
        return _identity_from_token(token)

    # dual mode: prefer JWT when present, otherwise fallback to legacy headers.
    if token:
        return _identity_from_token(token)
    return _identity_from_legacy_header(request)


def get_request_identity(request: Request) -> RequestIdentity:
    return resolve_request_identity(request)

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from app.api.deps import request_identity as request_identity_module
from app.core.config import settings
from app.core.security.jwt_verifier import AuthTokenValidationError, JWTVerifier
from app.schemas.request_identity import RequestIdentity


class _FakeVerifier:
    def verify(self, token: str):
        if token == "ok-token":
            return {"id": 42, "role": "forwarder", "exp": 9999999999}
        if token == "ok-token-sub":
            return {"sub": "17", "role": "ADMIN", "exp": 9999999999}
        if token == "no-role":
            return {"id": 3, "exp": 9999999999}
        raise AuthTokenValidationError("Access token is invalid.")


def _build_app() -> FastAPI:
    app = FastAPI()

    @app.get("/whoami")
    def whoami(identity: RequestIdentity = Depends(request_identity_module.get_request_identity)):
        return {
            "id": identity.actor_id,
            "role": identity.role.value,
            "source": identity.auth_source,
        }

    return app


def test_legacy_header_mode_uses_actor_headers(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")
    app = _build_app()
    with TestClient(app) as client:
        r = client.get("/whoami", headers={"X-User-Id": "12", "X-User-Role": "Shipper"})
        assert r.status_code == 200
        assert r.json() == {"id": 12, "role": "shipper", "source": "legacy_header"}


def test_legacy_header_mode_ignores_bearer_token(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")
    monkeypatch.setattr(request_identity_module, "_get_verifier", lambda: _FakeVerifier())
    app = _build_app()
    with TestClient(app) as client:
        r = client.get(
            "/whoami",
            headers={
                "Authorization": "Bearer ok-token",
                "X-User-Id": "12",
                "X-User-Role": "shipper",
            },
        )
        assert r.status_code == 200
        assert r.json()["source"] == "legacy_header"


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"X-User-Id": "12"},
        {"X-User-Id": "abc", "X-User-Role": "shipper"},
        {"X-User-Id": "12", "X-User-Role": "carrier"},
    ],
)
def test_legacy_header_mode_rejects_incomplete_identity(monkeypatch, headers):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")
    app = _build_app()
    with TestClient(app) as client:
        r = client.get("/whoami", headers=headers)
        assert r.status_code == 401


def test_jwt_only_mode_requires_bearer(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "jwt_only")
    app = _build_app()
    with TestClient(app) as client:
        r = client.get("/whoami", headers={"X-User-Id": "12", "X-User-Role": "shipper"})
        assert r.status_code == 401


def test_jwt_only_mode_rejects_invalid_token(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "jwt_only")
    monkeypatch.setattr(request_identity_module, "_get_verifier", lambda: _FakeVerifier())
    app = _build_app()
    with TestClient(app) as client:
        assert client.get("/whoami", headers={"Authorization": "Bearer nope"}).status_code == 401
        assert client.get("/whoami", headers={"Authorization": "Bearer no-role"}).status_code == 401


def test_jwt_subject_is_used_when_id_claim_is_absent(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "jwt_only")
    monkeypatch.setattr(request_identity_module, "_get_verifier", lambda: _FakeVerifier())
    app = _build_app()
    with TestClient(app) as client:
        r = client.get("/whoami", headers={"Authorization": "Bearer ok-token-sub"})
        assert r.status_code == 200
        assert r.json() == {"id": 17, "role": "admin", "source": "jwt"}


def test_dual_mode_prefers_bearer(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "dual")
    monkeypatch.setattr(request_identity_module, "_get_verifier", lambda: _FakeVerifier())
    app = _build_app()
    with TestClient(app) as client:
        r = client.get(
            "/whoami",
            headers={
                "Authorization": "Bearer ok-token",
                "X-User-Id": "12",
                "X-User-Role": "shipper",
            },
        )
        assert r.status_code == 200
        assert r.json() == {"id": 42, "role": "forwarder", "source": "jwt"}


def test_dual_mode_falls_back_to_headers(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "dual")
    app = _build_app()
    with TestClient(app) as client:
        r = client.get("/whoami", headers={"X-User-Id": "12", "X-User-Role": "admin"})
        assert r.status_code == 200
        assert r.json()["source"] == "legacy_header"


def _token(secret: str, *, expires_in: timedelta, **claims) -> str:
    now = datetime.now(timezone.utc)
    payload = {"iat": int(now.timestamp()), "exp": int((now + expires_in).timestamp()), **claims}
    return jwt.encode(payload, key=secret, algorithm="HS256")


def test_jwt_verifier_accepts_valid_hs256_token():
    verifier = JWTVerifier(secret="s3cret-key-for-tests-only-32bytes", algorithms=["HS256"])
    token = _token(
        "s3cret-key-for-tests-only-32bytes",
        expires_in=timedelta(minutes=5),
        id=8,
        role="shipper",
    )
    claims = verifier.verify(token)
    assert claims["id"] == 8
    assert claims["role"] == "shipper"


def test_jwt_verifier_rejects_expired_and_foreign_tokens():
    secret = "s3cret-key-for-tests-only-32bytes"
    verifier = JWTVerifier(secret=secret, algorithms=["HS256"])

    expired = _token(secret, expires_in=timedelta(minutes=-5), id=8, role="shipper")
    with pytest.raises(AuthTokenValidationError, match="expired"):
        verifier.verify(expired)

    foreign = _token("another-secret-key-for-tests-32by", expires_in=timedelta(minutes=5), id=8)
    with pytest.raises(AuthTokenValidationError):
        verifier.verify(foreign)


def test_jwt_verifier_requires_a_secret():
    with pytest.raises(AuthTokenValidationError):
        JWTVerifier(secret="", algorithms=["HS256"]).verify("anything")

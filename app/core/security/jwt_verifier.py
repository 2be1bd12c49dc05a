from __future__ import annotations

from typing import Any

import jwt


class AuthTokenValidationError(Exception):
    """Raised when a bearer token cannot be trusted."""


class JWTVerifier:
    """
    Verifies access tokens signed by the login service with a shared secret
    and returns their claims. Tokens carry the actor as `id` and `role`.
    """

    def __init__(
        self,
        *,
        secret: str,
        algorithms: list[str],
        leeway_sec: int = 0,
    ) -> None:
        self.secret = secret
        self.algorithms = algorithms
        self.leeway_sec = leeway_sec

    def verify(self, token: str) -> dict[str, Any]:
        if not self.secret:
            raise AuthTokenValidationError("Token verification is not configured.")
        try:
            claims = jwt.decode(
                token,
                key=self.secret,
                algorithms=self.algorithms,
                leeway=self.leeway_sec,
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthTokenValidationError("Access token has expired.") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthTokenValidationError("Access token is invalid.") from exc
        return claims

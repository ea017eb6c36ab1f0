"""Caller identity resolution for API Gateway proxy events.

Two modes are supported:
    - trusted headers ``x-user-id`` / ``x-user-role`` set by an upstream
      gateway or authorizer
    - ``Authorization: Bearer <jwt>`` verified against a configured public key,
      used only when ``x-user-id`` is absent
"""

from __future__ import annotations

import re
from typing import Any

from aws_lambda_powertools import Logger
from jose import jwt
from jose.exceptions import JWTError

from core.models.auth import AuthContext
from core.models.errors import UnauthorizedError
from core.utils.constants import DEFAULT_ROLE, USER_ID_PATTERN

logger = Logger(utc=True)

_USER_ID_RE = re.compile(USER_ID_PATTERN)


def _lower_headers(headers: dict[str, Any] | None) -> dict[str, str]:
    return {str(key).lower(): value for key, value in (headers or {}).items() if value is not None}


def _normalize_role(role: Any) -> str:
    if not isinstance(role, str) or not role.strip():
        return DEFAULT_ROLE
    return role.strip().upper()


class RequestAuthenticator:
    def __init__(
        self,
        *,
        public_key: str | None = None,
        algorithms: list[str] | None = None,
        audience: str | None = None,
        issuer: str | None = None,
    ) -> None:
        self.public_key = public_key
        self.algorithms = algorithms or []
        self.audience = audience
        self.issuer = issuer

    def authenticate(self, event: dict[str, Any]) -> AuthContext:
        """Resolve the caller of a proxy event.

        Raises:
            UnauthorizedError: If no valid identity can be established
        """
        headers = _lower_headers(event.get("headers"))

        user_id = (headers.get("x-user-id") or "").strip()
        if user_id:
            context = AuthContext(user_id=user_id, role=_normalize_role(headers.get("x-user-role")))
        elif self.public_key:
            context = self._authenticate_bearer(headers.get("authorization"))
        else:
            raise UnauthorizedError(message="Missing x-user-id header")

        if not _USER_ID_RE.match(context.user_id):
            logger.warning("Rejected malformed user id")
            raise UnauthorizedError(message="Invalid user id")

        return context

    def _authenticate_bearer(self, authorization: str | None) -> AuthContext:
        scheme, _, token = (authorization or "").partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise UnauthorizedError(message="Missing authorization")

        claims = self.decode(token.strip())

        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject.strip():
            raise UnauthorizedError(message="Invalid token")

        return AuthContext(user_id=subject.strip(), role=_normalize_role(claims.get("role")))

    def decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self.public_key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={"verify_aud": bool(self.audience)},
            )
        except JWTError as exc:
            logger.warning("Bearer token rejected", extra={"error": str(exc)})
            raise UnauthorizedError(message="Invalid token") from exc

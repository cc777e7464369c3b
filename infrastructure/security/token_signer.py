"""
Token Signer - Infrastructure Security Layer

Stateless bearer tokens: ``<payload>.<signature>`` where payload is the
base64url JSON {"sub", "iat", "exp"} and signature its HMAC-SHA256 under
the server secret.
"""
import base64
import hashlib
import hmac
import json
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from domain.exceptions.domain_exceptions import UnauthenticatedError


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(text + padding)


def new_secret() -> str:
    """Random signing secret for processes started without AUTH_SECRET_KEY."""
    return secrets.token_urlsafe(32)


class TokenSigner:
    """Issues and verifies signed user tokens (ITokenIssuer Protocol)."""

    def __init__(self, secret_key: str, ttl_days: int = 30):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._key = secret_key.encode("utf-8")
        self.ttl = timedelta(days=ttl_days)

    def issue(self, user_id: str, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        body = _b64encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
        return f"{body}.{self._sign(body)}"

    def verify(self, token: str, now: Optional[datetime] = None) -> str:
        """
        Return the user id carried by a valid token.

        Raises:
            UnauthenticatedError: malformed, tampered or expired token
        """
        try:
            body, signature = token.split(".", 1)
        except (AttributeError, ValueError):
            raise UnauthenticatedError("Not authorized, token failed") from None

        if not hmac.compare_digest(signature.encode("utf-8"), self._sign(body).encode("ascii")):
            raise UnauthenticatedError("Not authorized, token failed")

        try:
            payload = json.loads(_b64decode(body))
            user_id = str(payload["sub"])
            expires_at = int(payload["exp"])
        except (ValueError, KeyError, TypeError):
            raise UnauthenticatedError("Not authorized, token failed") from None

        now = now or datetime.now(timezone.utc)
        if now.timestamp() >= expires_at:
            raise UnauthenticatedError("Not authorized, token expired")
        return user_id

    def _sign(self, body: str) -> str:
        digest = hmac.new(self._key, body.encode("utf-8"), hashlib.sha256).digest()
        return _b64encode(digest)

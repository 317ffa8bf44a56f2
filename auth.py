"""
Credential verification for animal creation.

Tokens are compact HMAC-SHA256 signed JWTs (header.payload.signature, base64url).
The user identity travels in the payload's "id" claim; "exp" is optional.
"""

import asyncio
import base64
import hashlib
import hmac
import json
import time
from typing import Optional, Protocol

from errors import IdentityResolutionError

_HEADER = {"alg": "HS256", "typ": "JWT"}


class AuthVerifier(Protocol):
    """Resolve a credential to a confirmed user id, or None if it is rejected."""

    async def authenticate(self, token: Optional[str]) -> Optional[str]: ...


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


def _unb64url(s: str) -> bytes:
    return base64.urlsafe_b64decode(s + "=" * (-len(s) % 4))


def _sign(secret: bytes, message: str) -> bytes:
    return hmac.new(secret, message.encode(), hashlib.sha256).digest()


def issue_token(secret: str, user_id: str, ttl_hours: Optional[int] = 24) -> str:
    """Create a signed token for user_id. ttl_hours=None issues a token without expiry."""
    payload = {"id": user_id, "iat": int(time.time())}
    if ttl_hours is not None:
        payload["exp"] = int(time.time() + ttl_hours * 3600)
    message = f"{_b64url(json.dumps(_HEADER).encode())}.{_b64url(json.dumps(payload).encode())}"
    return f"{message}.{_b64url(_sign(secret.encode(), message))}"


class TokenVerifier:
    def __init__(self, secret: str):
        self._secret = secret.encode()

    def _verified_payload(self, token: Optional[str]) -> Optional[dict]:
        if not token or not isinstance(token, str):
            return None
        parts = token.split(".")
        if len(parts) != 3:
            return None
        header_b64, payload_b64, signature_b64 = parts
        try:
            actual_sig = _unb64url(signature_b64)
            expected_sig = _sign(self._secret, f"{header_b64}.{payload_b64}")
            if not hmac.compare_digest(expected_sig, actual_sig):
                return None
            payload = json.loads(_unb64url(payload_b64))
        except ValueError:
            return None
        if not isinstance(payload, dict):
            return None
        exp = payload.get("exp")
        if exp is not None and (not isinstance(exp, (int, float)) or exp < time.time()):
            return None
        return payload

    def verify(self, token: Optional[str]) -> Optional[str]:
        """Return the user id a valid token carries.

        Raises IdentityResolutionError when the signature checks out but the
        payload has no usable "id" claim.
        """
        payload = self._verified_payload(token)
        if payload is None:
            return None
        user_id = payload.get("id")
        if not isinstance(user_id, str) or not user_id:
            raise IdentityResolutionError()
        return user_id

    async def authenticate(self, token: Optional[str]) -> Optional[str]:
        return await asyncio.to_thread(self.verify, token)

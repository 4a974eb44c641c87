"""
Bearer credentials: compact HS256 JSON Web Tokens.

A token carries the user's email and an absolute expiry. The signing secret
and lifetime are handed to TokenService at construction; nothing here reads
the environment.
"""

import base64
import hashlib
import hmac
import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from shortener_app.exceptions import InvalidCredentialError, SigningError

# Symmetric HMAC family accepted on verification
HMAC_ALGORITHMS = {
    "HS256": hashlib.sha256,
    "HS384": hashlib.sha384,
    "HS512": hashlib.sha512,
}
ISSUE_ALGORITHM = "HS256"


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _json_segment(obj: Dict[str, Any]) -> str:
    return _b64url_encode(json.dumps(obj, separators=(",", ":")).encode("utf-8"))


class TokenService:
    """Issues and verifies identity tokens"""

    def __init__(self, secret: bytes, ttl: timedelta = timedelta(hours=24)):
        """
        Args:
            secret: HMAC signing key. Empty means tokens cannot be issued
                and every presented token is rejected.
            ttl: Lifetime of issued tokens
        """
        self._secret = secret
        self.ttl = ttl

    def issue(self, identity: str) -> str:
        """
        Create a signed token for identity, expiring ttl from now.

        Raises:
            SigningError: If no signing key is configured
        """
        if not self._secret:
            raise SigningError("Token signing key is not configured")

        now = datetime.now(timezone.utc)
        payload = {
            "email": identity,
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        header = _json_segment({"alg": ISSUE_ALGORITHM, "typ": "JWT"})
        body = _json_segment(payload)
        signing_input = f"{header}.{body}".encode("ascii")
        return f"{header}.{body}.{self._sign(signing_input, ISSUE_ALGORITHM)}"

    def verify(self, credential: str) -> str:
        """
        Validate a token and return the identity it carries.

        Raises:
            InvalidCredentialError: Malformed, wrong algorithm, bad signature,
                expired, or missing email claim
        """
        if not self._secret:
            raise InvalidCredentialError("Token signing key is not configured")

        parts = credential.split(".")
        if len(parts) != 3:
            raise InvalidCredentialError("Invalid token format")
        header_b64, body_b64, signature = parts

        try:
            header = json.loads(_b64url_decode(header_b64))
            payload = json.loads(_b64url_decode(body_b64))
        except (ValueError, UnicodeDecodeError):
            raise InvalidCredentialError("Invalid token encoding") from None
        if not isinstance(header, dict) or not isinstance(payload, dict):
            raise InvalidCredentialError("Invalid token format")

        algorithm = header.get("alg")
        if not isinstance(algorithm, str) or algorithm not in HMAC_ALGORITHMS:
            raise InvalidCredentialError(f"Unexpected signing method: {algorithm}")

        signing_input = f"{header_b64}.{body_b64}".encode("ascii")
        expected = self._sign(signing_input, algorithm)
        if not hmac.compare_digest(signature.encode("utf-8"), expected.encode("ascii")):
            raise InvalidCredentialError("Invalid token signature")

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise InvalidCredentialError("Token has no expiry")
        if exp <= datetime.now(timezone.utc).timestamp():
            raise InvalidCredentialError("Token has expired")

        email = payload.get("email")
        if not isinstance(email, str) or not email:
            raise InvalidCredentialError("Token has no email claim")
        return email

    def _sign(self, signing_input: bytes, algorithm: str) -> str:
        digest = hmac.new(self._secret, signing_input, HMAC_ALGORITHMS[algorithm]).digest()
        return _b64url_encode(digest)

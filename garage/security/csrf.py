"""
Jetons anti-CSRF sans état.

Un jeton vaut `<sel>.<hmac_sha256(secret, sel)>`. La vérification recalcule la
signature à partir du secret serveur : rien n'est stocké.

Limite connue : le jeton n'est lié ni à une session ni à une fenêtre de temps.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
from typing import Optional


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


class CsrfTokens:
    def __init__(self, secret: str, *, salt_length: int = 8):
        if not secret:
            raise ValueError("CSRF secret cannot be empty")
        self._secret = secret.encode("utf-8")
        self._salt_length = salt_length

    def _sign(self, salt: str) -> str:
        digest = hmac.new(self._secret, salt.encode("utf-8"), hashlib.sha256).digest()
        return _b64url_encode(digest)

    def create(self) -> str:
        salt = secrets.token_urlsafe(self._salt_length)
        return f"{salt}.{self._sign(salt)}"

    def verify(self, token: Optional[str]) -> bool:
        if not token or not isinstance(token, str):
            return False
        salt, sep, signature = token.partition(".")
        if not sep or not salt or not signature:
            return False
        return hmac.compare_digest(self._sign(salt).encode("ascii"), signature.encode("utf-8"))

"""
Bearer-token verification for the request's user identity.

Tokens have the form ``<user_id>.<hex hmac-sha256(user_id, secret_key)>``.
Issuing them is handled elsewhere; ``sign_user_token`` exists for operators
and tests.
"""

import hashlib
import hmac
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthContext:
    user_id: Optional[int] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


def _signature(secret_key: str, payload: str) -> str:
    return hmac.new(secret_key.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def sign_user_token(user_id: int, secret_key: str) -> str:
    payload = str(int(user_id))
    return f"{payload}.{_signature(secret_key, payload)}"


class TokenVerifier:
    def __init__(self, secret_key: str):
        self.secret_key = secret_key

    def verify(self, token: Optional[str]) -> Optional[int]:
        """Return the user id carried by a valid token, else None."""
        if not token or "." not in token:
            return None
        payload, signature = token.rsplit(".", 1)
        if not hmac.compare_digest(_signature(self.secret_key, payload), signature):
            logger.debug("Rejected token with bad signature")
            return None
        try:
            user_id = int(payload)
        except ValueError:
            return None
        return user_id if user_id > 0 else None

    def context_from_header(self, authorization: Optional[str]) -> AuthContext:
        if not authorization or not authorization.startswith("Bearer "):
            return AuthContext()
        return AuthContext(user_id=self.verify(authorization[len("Bearer "):].strip()))

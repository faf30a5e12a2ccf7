"""
Access- and refresh-token validators.

Both expose the same contract, ``authenticate(request) -> principal``, and are
picked per route by utils.decorators. Every failure raises the same
UnauthorizedError so a caller cannot tell a malformed token from an expired
one or from a deactivated account; the actual reason is only logged.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from models.refresh_token import RefreshToken
from models.user import User
from services.errors import UnauthorizedError
from services.tokens import TokenIssuer
from utils.clock import as_utc_naive, utcnow
from utils.security import TokenError, hash_token

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
REFRESH_TOKEN_FIELD = "refreshToken"


@dataclass(frozen=True)
class Principal:
    sub: str
    email: Optional[str]
    username: Optional[str]

    def to_dict(self) -> dict:
        return {"sub": self.sub, "email": self.email, "username": self.username}


@dataclass(frozen=True)
class RefreshPrincipal(Principal):
    refresh_token: str

    def to_dict(self) -> dict:
        return dict(super().to_dict(), refreshToken=self.refresh_token)


def _reject(reason: str) -> UnauthorizedError:
    logger.debug("Token rejected: %s", reason)
    return UnauthorizedError()


class AccessTokenValidator:
    def __init__(self, storage, tokens: TokenIssuer):
        self.storage = storage
        self.tokens = tokens

    def authenticate(self, request) -> Principal:
        auth = request.headers.get("Authorization", "")
        if not auth.startswith(BEARER_PREFIX):
            raise _reject("missing or malformed Authorization header")
        token = auth[len(BEARER_PREFIX):].strip()
        try:
            payload = self.tokens.decode_access(token)
        except TokenError as exc:
            raise _reject(str(exc))
        return self.validate(payload)

    def validate(self, payload: Mapping[str, Any]) -> Principal:
        """
        Re-check the user behind already verified access-token claims.
        A user deactivated or deleted after the token was issued is rejected.
        """
        sub = payload.get("sub")
        if not sub:
            raise _reject("no subject claim")
        user = self.storage.get(User, sub)
        if user is None:
            raise _reject("user not found")
        if not user.is_active:
            raise _reject("user inactive")
        return Principal(sub=sub, email=payload.get("email"), username=payload.get("username"))


class RefreshTokenValidator:
    def __init__(self, storage, tokens: TokenIssuer, clock: Callable[[], datetime] = utcnow):
        self.storage = storage
        self.tokens = tokens
        self.clock = clock

    def authenticate(self, request) -> RefreshPrincipal:
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            body = {}
        token = body.get(REFRESH_TOKEN_FIELD)
        if not token or not isinstance(token, str):
            raise _reject("no refresh token in body")
        try:
            payload = self.tokens.decode_refresh(token)
        except TokenError as exc:
            raise _reject(str(exc))
        return self.validate(body, payload)

    def validate(self, body: Mapping[str, Any], payload: Mapping[str, Any]) -> RefreshPrincipal:
        """
        Check the stored record behind a signature-verified refresh token.

        Valid only if the record exists, `now < expires_at` (equality counts as
        expired), the record belongs to the token's subject and that user is
        active.
        """
        token = body.get(REFRESH_TOKEN_FIELD)
        if not token:
            raise _reject("no refresh token in body")

        session = self.storage.get_session()
        record = session.query(RefreshToken).filter(RefreshToken.token_hash == hash_token(token)).first()
        if record is None:
            raise _reject("refresh token not stored (revoked or rotated)")
        if as_utc_naive(record.expires_at) <= self.clock():
            raise _reject("refresh token expired")
        if str(record.user_id) != str(payload.get("sub")):
            raise _reject("refresh token subject mismatch")
        user = record.user
        if user is None or not user.is_active:
            raise _reject("user inactive")

        return RefreshPrincipal(
            sub=str(record.user_id),
            email=payload.get("email"),
            username=payload.get("username"),
            refresh_token=token,
        )

"""
Token issuer: signs access and refresh JWTs for a user.

Access and refresh tokens are signed with two different secrets, so a refresh
token can never be replayed as an access token (and vice versa) even before the
`type` claim is looked at.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Mapping

from utils.clock import utcnow
from utils.security import encode_token, decode_token, generate_jti

ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    refresh_expires_at: datetime

    def to_dict(self) -> dict:
        return {"accessToken": self.access_token, "refreshToken": self.refresh_token}


class TokenIssuer:
    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_expires: timedelta = timedelta(minutes=15),
        refresh_expires: timedelta = timedelta(days=7),
        issuer: str | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_expires = access_expires
        self.refresh_expires = refresh_expires
        self.issuer = issuer
        self.clock = clock

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TokenIssuer":
        return cls(
            access_secret=config["JWT_ACCESS_SECRET"],
            refresh_secret=config["JWT_REFRESH_SECRET"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            access_expires=config["JWT_ACCESS_TOKEN_EXPIRES"],
            refresh_expires=config["JWT_REFRESH_TOKEN_EXPIRES"],
            issuer=config.get("JWT_ISSUER"),
        )

    def _claims(self, user, token_type: str) -> Dict[str, Any]:
        claims = {
            "sub": str(user.id),
            "email": user.email,
            "username": user.username,
            "type": token_type,
            # unique per token, so two refresh tokens issued in the same second never collide
            "jti": generate_jti(),
        }
        if self.issuer:
            claims["iss"] = self.issuer
        return claims

    def issue_access_token(self, user) -> str:
        now = self.clock()
        return encode_token(
            self._claims(user, ACCESS), self.access_secret, self.algorithm, now + self.access_expires, now
        )

    def issue_refresh_token(self, user) -> tuple[str, datetime]:
        now = self.clock()
        expires_at = now + self.refresh_expires
        token = encode_token(self._claims(user, REFRESH), self.refresh_secret, self.algorithm, expires_at, now)
        return token, expires_at

    def issue_pair(self, user) -> TokenPair:
        refresh_token, expires_at = self.issue_refresh_token(user)
        return TokenPair(self.issue_access_token(user), refresh_token, expires_at)

    def decode_access(self, token: str) -> Dict[str, Any]:
        """Verify signature, expiry and type of an access token. Raises TokenError."""
        return decode_token(token, self.access_secret, self.algorithm, ACCESS, issuer=self.issuer)

    def decode_refresh(self, token: str) -> Dict[str, Any]:
        """Verify signature, expiry and type of a refresh token. Raises TokenError."""
        return decode_token(token, self.refresh_secret, self.algorithm, REFRESH, issuer=self.issuer)

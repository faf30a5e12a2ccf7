"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT
- JTI generation for token identifiers
"""
from __future__ import annotations

import hashlib
import uuid
from datetime import datetime
from typing import Dict, Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError

from utils.clock import as_utc_naive

ph = PasswordHasher()


class TokenError(Exception):
    """Raised when a JWT cannot be decoded or fails validation."""


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def hash_token(token: str) -> str:
    """sha256 hex digest of a token, as stored server-side."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def encode_token(claims: Dict[str, Any], secret: str, algorithm: str, expires_at: datetime, issued_at: datetime) -> str:
    """
    Sign `claims` with `secret`. `expires_at` and `issued_at` are naive UTC.
    """
    payload = dict(claims)
    payload["iat"] = int(_utc_ts(issued_at))
    payload["exp"] = int(_utc_ts(expires_at))
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(token: str, secret: str, algorithm: str, expected_type: str, issuer: str | None = None) -> Dict[str, Any]:
    """
    Decode and validate a JWT. Raises TokenError on invalid signature/expired jwt
    expected type must be "access" or "refresh".
    """
    options = {"require": ["exp", "sub", "type"]}
    try:
        decoded = jwt.decode(token, secret, algorithms=[algorithm], issuer=issuer, options=options)
    except jwt.ExpiredSignatureError:
        raise TokenError("Token expired")
    except jwt.InvalidTokenError as exc:
        raise TokenError(f"Invalid token: {exc}")

    if decoded.get("type") != expected_type:
        raise TokenError("Wrong token type")
    return decoded


def _utc_ts(value: datetime) -> float:
    # datetime.timestamp() would read a naive value as local time
    return (as_utc_naive(value) - datetime(1970, 1, 1)).total_seconds()

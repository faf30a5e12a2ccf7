"""
Session lifecycle: register, login, refresh (rotation), logout (revocation), profile.

Refresh-token records move through issued -> consumed | revoked | expired and
never come back. Rotation deletes the presented record and inserts its
replacement in one transaction; the DELETE row count decides whether the
presented token was still live, so two concurrent refreshes with the same
token cannot both succeed.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func, or_

from models.refresh_token import RefreshToken
from models.user import User
from models.schemas.user import UserOutSchema
from services.errors import ConflictError, NotFoundError, UnauthorizedError
from services.tokens import TokenIssuer, TokenPair
from utils.security import generate_jti, hash_password, hash_token, verify_password

logger = logging.getLogger(__name__)

user_out_schema = UserOutSchema()

# checked in place of a real hash when the account does not exist
_DUMMY_HASH = hash_password(generate_jti())


class AuthService:
    def __init__(self, storage, tokens: TokenIssuer):
        self.storage = storage
        self.tokens = tokens

    def register(self, username: str, email: str, password: str) -> dict:
        session = self.storage.get_session()
        email = email.strip().lower()
        taken = (
            session.query(User)
            .filter(or_(User.email == email, func.lower(User.username) == username.lower()))
            .first()
        )
        if taken:
            raise ConflictError("Email or username already exists")

        user = User(username=username, email=email, password_hash=hash_password(password))
        self.storage.new(user)
        pair = self._issue(user)
        self.storage.save()
        logger.info("Registered user %s", user.id)
        return self._auth_response(user, pair)

    def login(self, email_or_username: str, password: str) -> dict:
        session = self.storage.get_session()
        ident = email_or_username.strip()
        user: Optional[User] = (
            session.query(User)
            .filter(or_(User.email == ident.lower(), func.lower(User.username) == ident.lower()))
            .first()
        )
        password_ok = verify_password(password, user.password_hash if user else _DUMMY_HASH)
        if not user or not password_ok or not user.is_active:
            logger.warning("Failed login attempt")
            raise UnauthorizedError("Invalid credentials")

        pair = self._issue(user)
        self.storage.save()
        logger.info("User %s logged in", user.id)
        return self._auth_response(user, pair)

    def refresh(self, user_id: str, refresh_token: str) -> dict:
        """
        Rotate: consume `refresh_token` and hand out a fresh pair.
        Returns only the tokens, not the user.
        """
        session = self.storage.get_session()
        consumed = (
            session.query(RefreshToken)
            .filter(RefreshToken.token_hash == hash_token(refresh_token), RefreshToken.user_id == user_id)
            .delete(synchronize_session=False)
        )
        if consumed != 1:
            self.storage.rollback()
            raise UnauthorizedError()

        user = self.storage.get(User, user_id)
        if user is None or not user.is_active:
            self.storage.rollback()
            raise UnauthorizedError()

        pair = self._issue(user)
        self.storage.save()
        logger.info("Rotated refresh token for user %s", user_id)
        return pair.to_dict()

    def logout(self, user_id: str, refresh_token: Optional[str] = None) -> None:
        """
        Revoke one refresh token, or every refresh token of the user when none
        is given. Revoking a token that is already gone is not an error.
        """
        session = self.storage.get_session()
        query = session.query(RefreshToken).filter(RefreshToken.user_id == user_id)
        if refresh_token:
            query = query.filter(RefreshToken.token_hash == hash_token(refresh_token))
        revoked = query.delete(synchronize_session=False)
        self.storage.save()
        logger.info("User %s logged out (%d session(s) revoked)", user_id, revoked)

    def get_profile(self, user_id: str) -> dict:
        user = self.storage.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user_out_schema.dump(user)

    def _issue(self, user: User) -> TokenPair:
        """Issue a pair and stage its refresh record; purges the user's expired records."""
        session = self.storage.get_session()
        now = self.tokens.clock()
        session.query(RefreshToken).filter(
            RefreshToken.user_id == user.id, RefreshToken.expires_at <= now
        ).delete(synchronize_session=False)

        pair = self.tokens.issue_pair(user)
        self.storage.new(
            RefreshToken(
                token_hash=hash_token(pair.refresh_token),
                user_id=user.id,
                expires_at=pair.refresh_expires_at,
            )
        )
        return pair

    @staticmethod
    def _auth_response(user: User, pair: TokenPair) -> dict:
        return dict(user=user_out_schema.dump(user), **pair.to_dict())
